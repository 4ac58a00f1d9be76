# component_locator/selectors/text.py
from __future__ import annotations

import re
from typing import List, Sequence

from component_locator.core.options import Text
from component_locator.dom.base import DomAdapter, Element

# Inline flags in the order a /pattern/flags literal spells them.
_FLAG_LETTERS = ((re.ASCII, "a"), (re.IGNORECASE, "i"), (re.MULTILINE, "m"), (re.DOTALL, "s"), (re.VERBOSE, "x"))


def text_matches(rendered: str, criterion: Text) -> bool:
    """
    Literal criteria need substring containment (case-sensitive); patterns are
    searched over the full rendered text with whatever flags they carry.
    """
    if isinstance(criterion, re.Pattern):
        return criterion.search(rendered) is not None
    return criterion in rendered


def find_all_by_text(
    dom: DomAdapter,
    roots: Sequence[Element],
    text_query: str,
    criterion: Text,
) -> List[Element]:
    """
    Elements under `roots` matching `text_query` whose rendered text satisfies
    `criterion`, in document order.
    """
    candidates: List[Element] = []
    for root in roots:
        candidates.extend(dom.query_all(root, text_query))
    if len(roots) > 1:
        candidates = dom.unique(candidates)
    return [el for el in candidates if text_matches(dom.text(el), criterion)]


def pattern_literal(pattern: re.Pattern) -> str:
    """`re.compile("name", re.I)` -> `/name/i`."""
    flags = "".join(letter for flag, letter in _FLAG_LETTERS if pattern.flags & flag)
    return f"/{pattern.pattern}/{flags}"


def describe_criterion(criterion: Text) -> str:
    if isinstance(criterion, re.Pattern):
        return pattern_literal(criterion)
    return repr(criterion)
