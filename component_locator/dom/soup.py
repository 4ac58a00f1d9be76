# component_locator/dom/soup.py
from __future__ import annotations

"""BeautifulSoup backend
------------------------
Runs lookups against a parsed HTML snapshot (CSS via soupsieve). Form state
changed by actions is written back into the snapshot's attributes, and
`load()` swaps in new markup to stand in for a re-rendered page.
"""

from typing import List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup, Tag

from component_locator.dom.base import collapse_whitespace

_FORM_CONTROLS = "input, select, textarea, button"
_TOGGLES = {"checkbox", "radio"}


class SoupDom:
    def __init__(self, html: str = "", parser: str = "html.parser"):
        self.parser = parser
        self.events: List[Tuple[str, str]] = []
        self._soup = BeautifulSoup(html, parser)

    @classmethod
    def from_file(cls, path, parser: str = "html.parser") -> "SoupDom":
        with open(path, encoding="utf-8") as fh:
            return cls(fh.read(), parser=parser)

    def load(self, html: str) -> None:
        """Replace the whole document; previously returned handles go stale."""
        self._soup = BeautifulSoup(html, self.parser)

    @property
    def soup(self) -> BeautifulSoup:
        return self._soup

    # ---------- Reads ----------

    def root(self) -> Tag:
        return self._soup.body or self._soup

    def query_all(self, element: Tag, selector: str) -> List[Tag]:
        return list(element.select(selector))

    def query_one(self, element: Tag, selector: str) -> Optional[Tag]:
        return element.select_one(selector)

    def closest(self, element: Tag, selector: str) -> Optional[Tag]:
        return element.css.closest(selector)

    def control_for(self, label: Tag) -> Optional[Tag]:
        target = label.get("for")
        if target:
            return self._soup.find(id=target)
        return label.select_one(_FORM_CONTROLS)

    def text(self, element: Tag) -> str:
        return collapse_whitespace(element.get_text())

    def value(self, element: Tag) -> Optional[str]:
        if element.name == "textarea":
            return element.get_text()
        if element.name == "select":
            chosen = element.select_one("option[selected]")
            if chosen is None:
                return None
            return chosen.get("value", chosen.get_text())
        return element.get("value")

    def unique(self, elements: Sequence[Tag]) -> List[Tag]:
        seen = set()
        out: List[Tag] = []
        for el in elements:
            if id(el) not in seen:
                seen.add(id(el))
                out.append(el)
        return out

    def contains_next(self, elements: Sequence[Tag]) -> List[bool]:
        return [
            outer is not inner and any(parent is outer for parent in inner.parents)
            for outer, inner in zip(elements, elements[1:])
        ]

    def attached(self, elements: Sequence[Tag]) -> bool:
        # Tags parsed before the last load() hang off a different soup.
        return all(el is self._soup or any(p is self._soup for p in el.parents) for el in elements)

    def describe(self, element: Tag) -> str:
        out = f"<{element.name}"
        if element.get("id"):
            out += f"#{element['id']}"
        for cls in element.get("class", []):
            out += f".{cls}"
        return out + ">"

    # ---------- Actions ----------

    def click(self, element: Tag) -> None:
        if element.name == "input" and element.get("type") in _TOGGLES:
            if element.has_attr("checked") and element.get("type") == "checkbox":
                del element["checked"]
            else:
                element["checked"] = ""
        self.events.append(("click", self.describe(element)))

    def clear(self, element: Tag) -> None:
        if element.name == "textarea":
            element.string = ""
        elif element.name == "select":
            for option in element.select("option[selected]"):
                del option["selected"]
        elif element.name == "input":
            element["value"] = ""
        else:
            raise ValueError(f"{self.describe(element)} is not a form control and cannot be cleared")
        self.events.append(("clear", self.describe(element)))

    def fill(self, element: Tag, text: str) -> None:
        if element.name == "textarea":
            element.string = text
        elif element.name == "select":
            self.clear(element)
            for option in element.select("option"):
                if option.get("value", option.get_text()) == text or option.get_text().strip() == text:
                    option["selected"] = ""
                    break
            else:
                raise ValueError(f"{self.describe(element)} has no option {text!r}")
        elif element.name == "input":
            element["value"] = text
        else:
            raise ValueError(f"{self.describe(element)} is not a form control and cannot be filled")
        self.events.append(("fill", self.describe(element)))
