# component_locator/selectors/specificity.py
from __future__ import annotations

from typing import List, Sequence

from component_locator.dom.base import DomAdapter, Element


def get_first_deepest_element(dom: DomAdapter, candidates: Sequence[Element]) -> List[Element]:
    """
    Reduce a document-ordered candidate list to its most specific member.

    Starting at the first candidate, step to the next one for as long as the
    current candidate contains it, so a nesting chain yields its innermost
    member. The first candidate that does not contain its successor wins;
    separate matches therefore resolve to the first in document order, however
    deep a later one sits. Returns an empty list for empty input.
    """
    if len(candidates) <= 1:
        return list(candidates)

    nested = dom.contains_next(candidates)
    index = 0
    while index < len(nested) and nested[index]:
        index += 1
    return [candidates[index]]
