# component_locator/core/engine.py
from __future__ import annotations

"""Locator engine
-----------------
One synchronous lookup of a descriptor against the current DOM: either the
text path (text query filtered by rendered text) or the structural path
(plain CSS query), followed by specificity reduction and the descriptor's
transforms. No waiting happens here; see core.resolver for retries.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional, Sequence, Tuple

from component_locator.core.descriptor import Descriptor, Transform, apply_transform, coerce_descriptor
from component_locator.core.errors import TextCapabilityError
from component_locator.core.options import LocateOptions, Text
from component_locator.dom.base import DomAdapter, Element
from component_locator.selectors.specificity import get_first_deepest_element
from component_locator.selectors.text import find_all_by_text, pattern_literal


@dataclass(frozen=True)
class CandidateSet:
    """
    Ordered result of one lookup attempt. `selector` is a readable description
    of the effective query for logs and error messages only.
    """
    elements: Tuple[Element, ...] = ()
    selector: str = ""
    scope: Tuple[Element, ...] = field(default=(), repr=False)

    def __len__(self) -> int:
        return len(self.elements)

    def __iter__(self) -> Iterator[Element]:
        return iter(self.elements)

    def __getitem__(self, index):
        return self.elements[index]

    @property
    def first(self) -> Optional[Element]:
        return self.elements[0] if self.elements else None


def describe_pseudo_selector(descriptor: Descriptor, text: Optional[Text] = None) -> str:
    if not text:
        return descriptor.structural_query
    if isinstance(text, re.Pattern):
        return f"{descriptor.structural_query}:component-text({pattern_literal(text)})"
    return f"{descriptor.structural_query}:component-text('{text}')"


def validate_call(descriptor: Any, text: Optional[Text] = None) -> Descriptor:
    """
    Check the call shape before any DOM access. Raises DescriptorError or
    TextCapabilityError; both are caller mistakes and never retried.
    """
    desc = coerce_descriptor(descriptor)
    if text and not desc.has_text:
        raise TextCapabilityError(desc.name)
    return desc


def _map_all(dom: DomAdapter, elements: Sequence[Element], transform: Transform) -> List[Element]:
    # Transforms returning None drop the element.
    mapped = (apply_transform(dom, transform, el) for el in elements)
    return [el for el in mapped if el is not None]


def locate(
    dom: DomAdapter,
    scope: Sequence[Element],
    descriptor: Any,
    text: Optional[Text] = None,
    options: Optional[LocateOptions] = None,
) -> CandidateSet:
    desc = validate_call(descriptor, text)
    want_all = bool(options and options.all)

    if text and desc.has_text:
        found = find_all_by_text(dom, scope, desc.text_query, text)
        if len(found) > 1 and not want_all:
            found = get_first_deepest_element(dom, found)
        if found and desc.traverse_via_text is not None:
            found = _map_all(dom, found, desc.traverse_via_text)
    else:
        matches: List[Element] = []
        for root in scope:
            matches.extend(dom.query_all(root, desc.structural_query))
        # one root never yields the same node twice
        found = dom.unique(matches) if len(scope) > 1 else matches
        if len(found) > 1 and not want_all:
            found = get_first_deepest_element(dom, found)
        if found and desc.traverse is not None:
            found = _map_all(dom, found, desc.traverse)

    return CandidateSet(
        elements=tuple(found),
        selector=describe_pseudo_selector(desc, text),
        scope=tuple(scope),
    )


__all__ = ["CandidateSet", "describe_pseudo_selector", "validate_call", "locate"]
