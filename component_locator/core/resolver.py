# component_locator/core/resolver.py
from __future__ import annotations

"""Retrying resolver
--------------------
Runs the locator engine against the live DOM over and over until every
chained assertion passes or the retry budget runs out.

    PENDING -> RETRYING -> SETTLED_SUCCESS | SETTLED_FAILURE

Attempts are strictly sequential and the only suspension point is the pause
between two attempts. The search scope is recomputed for every attempt.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence

from component_locator.core.assertions import Expectation
from component_locator.core.engine import CandidateSet, locate, validate_call
from component_locator.core.errors import LocateTimeoutError
from component_locator.core.options import LocateOptions, Text
from component_locator.dom.base import DomAdapter, Element
from component_locator.selectors.text import describe_criterion
from component_locator.utils.config import Settings, get_settings
from component_locator.utils.logger import get_logger, log_with_context
from component_locator.utils.timing import Clock, Deadline, Sleeper, format_ms, now_ms, sleep_ms

log = get_logger(__name__)

ScopeFn = Callable[[], Sequence[Element]]


class ResolveState(str, Enum):
    PENDING = "pending"
    RETRYING = "retrying"
    SETTLED_SUCCESS = "settled_success"
    SETTLED_FAILURE = "settled_failure"

    @property
    def settled(self) -> bool:
        return self in (ResolveState.SETTLED_SUCCESS, ResolveState.SETTLED_FAILURE)


_ALLOWED = {
    ResolveState.PENDING: {ResolveState.RETRYING, ResolveState.SETTLED_SUCCESS, ResolveState.SETTLED_FAILURE},
    ResolveState.RETRYING: {ResolveState.RETRYING, ResolveState.SETTLED_SUCCESS, ResolveState.SETTLED_FAILURE},
    ResolveState.SETTLED_SUCCESS: set(),
    ResolveState.SETTLED_FAILURE: set(),
}


@dataclass
class CommandLog:
    """
    One diagnostic record per lookup, updated in place while retrying and
    emitted once when the lookup settles.
    """
    component: str
    text: Optional[str] = None
    options: Optional[dict] = None
    applies_to: List[str] = field(default_factory=list)
    child: bool = False
    state: ResolveState = ResolveState.PENDING
    attempts: int = 0
    selector: str = ""
    yielded: List[str] = field(default_factory=list)
    elements: Optional[int] = None
    error: Optional[str] = None

    def message(self) -> str:
        parts = [self.component]
        if self.text is not None:
            parts.append(self.text)
        if self.options:
            parts.append(repr(self.options))
        return ", ".join(parts)

    def console_props(self) -> dict:
        props: dict[str, Any] = {"Component": self.component}
        if self.text is not None:
            props["Text"] = self.text
        if self.options:
            props["Options"] = self.options
        props["Applies To"] = self.applies_to
        props["Yielded"] = self.yielded
        props["Elements"] = self.elements
        return props


@dataclass
class Resolution:
    """State of one resolve() call."""
    state: ResolveState = ResolveState.PENDING
    attempts: int = 0
    last: Optional[CandidateSet] = None
    last_error: Optional[BaseException] = None

    def transition(self, new: ResolveState) -> None:
        if new not in _ALLOWED[self.state]:
            raise RuntimeError(f"illegal resolver transition {self.state.value} -> {new.value}")
        self.state = new


class RetryableResolver:
    def __init__(
        self,
        dom: DomAdapter,
        settings: Optional[Settings] = None,
        *,
        clock: Clock = now_ms,
        sleep: Sleeper = sleep_ms,
    ):
        self.dom = dom
        self.settings = settings or get_settings()
        self.clock = clock
        self.sleep = sleep

    def resolve(
        self,
        scope_fn: ScopeFn,
        descriptor: Any,
        text: Optional[Text],
        options: LocateOptions,
        expectations: Sequence[Expectation] = (),
        command_log: Optional[CommandLog] = None,
    ) -> CandidateSet:
        """
        Locate, check, and retry until success. Raises LocateTimeoutError when
        the budget is spent; descriptor errors escape before any DOM read.
        """
        resolution = Resolution()
        try:
            desc = validate_call(descriptor, text)
        except Exception as exc:
            resolution.transition(ResolveState.SETTLED_FAILURE)
            self._settle(command_log, resolution, error=exc)
            raise

        deadline = Deadline(options.timeout_ms, clock=self.clock)
        interval = self.settings.RETRY_INTERVAL_MS

        while True:
            resolution.attempts += 1
            scope = tuple(scope_fn())
            found = locate(self.dom, scope, desc, text, options)
            resolution.last = found
            if command_log is not None:
                command_log.attempts = resolution.attempts
                command_log.selector = found.selector
                command_log.applies_to = [self.dom.describe(el) for el in scope]

            try:
                for expectation in expectations:
                    expectation(found, self.dom)
            except AssertionError as err:
                resolution.last_error = err
                if deadline.expired():
                    resolution.transition(ResolveState.SETTLED_FAILURE)
                    timeout_error = LocateTimeoutError(
                        found.selector,
                        timeout_ms=options.timeout_ms,
                        attempts=resolution.attempts,
                        elapsed_ms=deadline.elapsed_ms(),
                        last_candidates=found,
                        last_error=err,
                    )
                    self._settle(command_log, resolution, error=timeout_error)
                    raise timeout_error from err

                resolution.transition(ResolveState.RETRYING)
                pause = min(interval, deadline.remaining_ms())
                log.debug(
                    f"{found.selector}: attempt {resolution.attempts} failed ({err}); "
                    f"retrying in {pause} ms, {format_ms(deadline.remaining_ms())} left"
                )
                self.sleep(pause)
                continue

            resolution.transition(ResolveState.SETTLED_SUCCESS)
            self._settle(command_log, resolution)
            return found

    def _settle(
        self,
        command_log: Optional[CommandLog],
        resolution: Resolution,
        error: Optional[BaseException] = None,
    ) -> None:
        if command_log is None:
            return
        command_log.state = resolution.state
        command_log.attempts = resolution.attempts
        if resolution.last is not None:
            command_log.yielded = [self.dom.describe(el) for el in resolution.last]
            command_log.elements = len(resolution.last)
        if error is not None:
            command_log.error = str(error)

        scoped = log_with_context(
            log,
            component=command_log.component,
            state=command_log.state.value,
            attempts=command_log.attempts,
            elements=command_log.elements,
        )
        outcome = "ok" if resolution.state is ResolveState.SETTLED_SUCCESS else "failed"
        scoped.info(
            f"component {command_log.message()} -> {outcome}, "
            f"{command_log.elements if command_log.elements is not None else 0} element(s) "
            f"after {command_log.attempts} attempt(s)"
        )


def text_for_log(text: Optional[Text]) -> Optional[str]:
    return describe_criterion(text) if text else None


__all__ = [
    "ResolveState",
    "CommandLog",
    "Resolution",
    "RetryableResolver",
    "text_for_log",
]
