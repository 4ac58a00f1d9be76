"""
Selectors package
-----------------
Free-text search scoped to a subtree and specificity-based disambiguation
among overlapping matches.
"""

from .specificity import get_first_deepest_element
from .text import describe_criterion, find_all_by_text, pattern_literal, text_matches

__all__ = [
    "find_all_by_text",
    "text_matches",
    "describe_criterion",
    "pattern_literal",
    "get_first_deepest_element",
]
