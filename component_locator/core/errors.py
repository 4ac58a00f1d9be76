# component_locator/core/errors.py
from __future__ import annotations

"""Error taxonomy
-----------------
Programmer errors (bad descriptor, text against a text-less descriptor) raise
immediately and are never retried. Assertion mismatches are plain
AssertionErrors absorbed by the retry loop. Running out of retry budget
raises LocateTimeoutError, which is also an AssertionError so test runners
report it as a failure rather than a crash.
"""

from typing import Any, Optional, Sequence


class ComponentLocatorError(Exception):
    """Base exception for the package."""


class DescriptorError(ComponentLocatorError, TypeError):
    """The first argument of a lookup is not usable as a descriptor."""


class InvalidDescriptorError(DescriptorError):
    def __init__(self, value: Any, reason: Optional[str] = None):
        self.value = value
        msg = f"invalid component descriptor {value!r}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class FrameworkComponentError(DescriptorError):
    """A widget class or factory was passed where a Descriptor belongs."""

    def __init__(self, value: Any):
        self.value = value
        name = getattr(value, "__qualname__", None) or getattr(value, "__name__", None) or repr(value)
        super().__init__(f"cannot use a UI component class or callable as a descriptor: {name}")


class TextCapabilityError(ComponentLocatorError, ValueError):
    def __init__(self, descriptor_name: str):
        self.descriptor_name = descriptor_name
        super().__init__(
            f"trying to find by text, but {descriptor_name} does not declare a text query"
        )


class DescriptorLoadError(ComponentLocatorError, ValueError):
    """A descriptor registry file could not be read or validated."""


class ActionError(ComponentLocatorError):
    """An action (click/clear/fill) failed on a settled element set."""

    def __init__(self, action: str, target: str, cause: Optional[BaseException] = None):
        self.action = action
        self.target = target
        self.cause = cause
        msg = f"{action} failed on {target}"
        if cause is not None:
            msg += f": {type(cause).__name__}: {cause}"
        super().__init__(msg)


class LocateTimeoutError(ComponentLocatorError, AssertionError):
    """
    Retry budget exhausted without the chained assertions passing.

    Attributes:
        selector: diagnostic pseudo-selector of the lookup
        timeout_ms: the retry budget
        attempts: number of lookup attempts made
        elapsed_ms: time spent in the retry loop
        last_candidates: element set seen by the final attempt
        last_error: assertion failure raised by the final attempt
    """

    def __init__(
        self,
        selector: str,
        *,
        timeout_ms: int,
        attempts: int,
        elapsed_ms: int,
        last_candidates: Sequence[Any] = (),
        last_error: Optional[BaseException] = None,
    ):
        self.selector = selector
        self.timeout_ms = timeout_ms
        self.attempts = attempts
        self.elapsed_ms = elapsed_ms
        self.last_candidates = last_candidates
        self.last_error = last_error
        super().__init__(self.__str__())

    def __str__(self) -> str:
        reason = str(self.last_error) if self.last_error is not None else "assertion did not pass"
        return (
            f"Timed out retrying after {self.timeout_ms} ms: {reason} "
            f"[selector={self.selector}, attempts={self.attempts}, "
            f"elapsed={self.elapsed_ms} ms, found={len(self.last_candidates)}]"
        )
