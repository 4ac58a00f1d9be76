# component_locator/dom/base.py
from __future__ import annotations

"""DOM adapter protocol
-----------------------
The locator engine never touches a concrete DOM API. Everything it needs
(querying, rendered text, containment) goes through a DomAdapter, so the
same engine runs against a live Playwright page or a parsed HTML snapshot.
Methods that compare elements take the whole list at once; a browser backend
answers each of them in a single round trip.
"""

from typing import Any, List, Optional, Protocol, Sequence, runtime_checkable

Element = Any


@runtime_checkable
class DomAdapter(Protocol):
    # ---------- Reads ----------

    def root(self) -> Element:
        """Current document root. Re-read on every call."""
        ...

    def query_all(self, element: Element, selector: str) -> List[Element]:
        """Descendants of `element` matching a CSS selector, in document order."""
        ...

    def query_one(self, element: Element, selector: str) -> Optional[Element]:
        ...

    def closest(self, element: Element, selector: str) -> Optional[Element]:
        """`element` itself or its nearest ancestor matching the selector."""
        ...

    def control_for(self, label: Element) -> Optional[Element]:
        """Form control associated with a <label> (via `for=` or nesting)."""
        ...

    def text(self, element: Element) -> str:
        ...

    def value(self, element: Element) -> Optional[str]:
        ...

    def unique(self, elements: Sequence[Element]) -> List[Element]:
        """Drop repeated handles to the same node, keeping first occurrences in order."""
        ...

    def contains_next(self, elements: Sequence[Element]) -> List[bool]:
        """Flag i is True when elements[i] strictly contains elements[i + 1]."""
        ...

    def attached(self, elements: Sequence[Element]) -> bool:
        """True while every element is still part of the current document."""
        ...

    def describe(self, element: Element) -> str:
        ...

    # ---------- Actions ----------

    def click(self, element: Element) -> None:
        ...

    def clear(self, element: Element) -> None:
        ...

    def fill(self, element: Element, text: str) -> None:
        ...


def collapse_whitespace(text: Optional[str]) -> str:
    return " ".join((text or "").split())

