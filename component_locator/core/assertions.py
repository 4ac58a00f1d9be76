# component_locator/core/assertions.py
from __future__ import annotations

"""Retryable assertions
-----------------------
An assertion inspects a CandidateSet and raises AssertionError on mismatch.
The resolver re-runs the lookup and every chained assertion until all pass
or the retry budget runs out.

Plain callables taking just the CandidateSet are accepted too:
    chain.should(lambda found: assert_that(len(found) == 2))
"""

from dataclasses import dataclass
from typing import Callable, Optional, Union

from component_locator.core.engine import CandidateSet
from component_locator.dom.base import DomAdapter


@dataclass(frozen=True)
class Expectation:
    description: str
    check: Callable[[CandidateSet, DomAdapter], None]

    def __call__(self, found: CandidateSet, dom: DomAdapter) -> None:
        self.check(found, dom)

    def __str__(self) -> str:
        return self.description


AssertionLike = Union[Expectation, Callable[[CandidateSet], None]]


def as_expectation(value: AssertionLike) -> Expectation:
    if isinstance(value, Expectation):
        return value
    if not callable(value):
        raise TypeError(f"should() expects an Expectation or a callable, got {value!r}")
    name = getattr(value, "__name__", None) or repr(value)
    return Expectation(name, lambda found, dom: value(found))


def _fail(found: CandidateSet, expected: str, actual: Optional[str] = None) -> None:
    msg = f"expected {found.selector or 'lookup'} to {expected}"
    if actual is not None:
        msg += f", but {actual}"
    raise AssertionError(msg)


def exist() -> Expectation:
    def check(found: CandidateSet, dom: DomAdapter) -> None:
        if len(found) == 0:
            _fail(found, "exist in the DOM", "it was not found")
    return Expectation("exist", check)


def not_exist() -> Expectation:
    def check(found: CandidateSet, dom: DomAdapter) -> None:
        if len(found) > 0:
            _fail(found, "not exist in the DOM", f"found {len(found)} element(s)")
    return Expectation("not.exist", check)


def have_length(n: int) -> Expectation:
    def check(found: CandidateSet, dom: DomAdapter) -> None:
        if len(found) != n:
            _fail(found, f"have length {n}", f"got {len(found)}")
    return Expectation(f"have.length {n}", check)


def have_value(value: str) -> Expectation:
    """Value of the first element, like reading `.value` off a form control."""
    def check(found: CandidateSet, dom: DomAdapter) -> None:
        if len(found) == 0:
            _fail(found, f"have value {value!r}", "it was not found")
        actual = dom.value(found.first) or ""
        if actual != value:
            _fail(found, f"have value {value!r}", f"the value was {actual!r}")
    return Expectation(f"have.value {value!r}", check)


def _joined_text(found: CandidateSet, dom: DomAdapter) -> str:
    return " ".join(dom.text(el) for el in found)


def have_text(text: str) -> Expectation:
    def check(found: CandidateSet, dom: DomAdapter) -> None:
        if len(found) == 0:
            _fail(found, f"have text {text!r}", "it was not found")
        actual = _joined_text(found, dom)
        if actual != text:
            _fail(found, f"have text {text!r}", f"the text was {actual!r}")
    return Expectation(f"have.text {text!r}", check)


def contain_text(text: str) -> Expectation:
    def check(found: CandidateSet, dom: DomAdapter) -> None:
        if len(found) == 0:
            _fail(found, f"contain text {text!r}", "it was not found")
        actual = _joined_text(found, dom)
        if text not in actual:
            _fail(found, f"contain text {text!r}", f"the text was {actual!r}")
    return Expectation(f"contain {text!r}", check)


__all__ = [
    "Expectation",
    "AssertionLike",
    "as_expectation",
    "exist",
    "not_exist",
    "have_length",
    "have_value",
    "have_text",
    "contain_text",
]
