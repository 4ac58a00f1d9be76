# component_locator/core/chainable.py
from __future__ import annotations

"""Public lookup API
--------------------
    locator = ComponentLocator(SoupDom(html))
    locator.component(Input, "First Name").should(have_value(""))
    locator.component(Input, "First Name").fill("Ada")
    locator.component(Select, {"all": True}).should(have_length(3))

`component()` validates its arguments at once and returns a lazy Chainable.
The lookup runs (with retries) when the chain is asserted on, read, or
acted on. Search scope comes from, in order: the parent chain, an explicit
`scope=` argument, the innermost `within()` block, the document root.
"""

from contextlib import contextmanager
from typing import Any, Callable, Iterator, List, Optional, Sequence, Tuple

from component_locator.core.assertions import AssertionLike, Expectation, as_expectation, exist
from component_locator.core.engine import CandidateSet, validate_call
from component_locator.core.errors import ActionError
from component_locator.core.options import LocateOptions, Text, get_options, get_text, normalize_options
from component_locator.core.resolver import CommandLog, RetryableResolver, text_for_log
from component_locator.dom.base import DomAdapter, Element
from component_locator.utils.config import Settings, get_settings
from component_locator.utils.timing import Clock, Sleeper, measure, now_ms, sleep_ms


def _as_roots(scope: Any) -> Tuple[Element, ...]:
    if isinstance(scope, Chainable):
        return tuple(scope.get())
    if isinstance(scope, CandidateSet):
        return tuple(scope)
    if isinstance(scope, (list, tuple)):
        return tuple(scope)
    return (scope,)


class ComponentLocator:
    """Entry point: owns the DOM adapter, the resolver and the command log."""

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
        self.resolver = RetryableResolver(dom, self.settings, clock=clock, sleep=sleep)
        self.command_log: List[CommandLog] = []
        self._within: List[Tuple[Element, ...]] = []

    def component(self, descriptor: Any, *rest: Any, scope: Any = None) -> "Chainable":
        """
        component(descriptor, text=None, options=None)
        component(descriptor, options)
        """
        roots = _as_roots(scope) if scope is not None else None
        return self._chain(descriptor, rest, roots=roots)

    @contextmanager
    def within(self, scope: Any) -> Iterator[Tuple[Element, ...]]:
        """Scope every lookup made inside the block to `scope`'s elements."""
        roots = _as_roots(scope)
        self._within.append(roots)
        try:
            yield roots
        finally:
            self._within.pop()

    def _chain(self, descriptor: Any, rest: Sequence[Any], roots=None, parent: Optional["Chainable"] = None) -> "Chainable":
        if len(rest) > 2:
            raise TypeError(f"component() takes a descriptor plus at most 2 arguments ({len(rest)} extra given)")
        text = get_text(rest)
        desc = validate_call(descriptor, text)
        return Chainable(
            self,
            desc,
            text=text,
            options=normalize_options(rest, self.settings),
            supplied_options=get_options(rest),
            roots=roots,
            parent=parent,
            within=self._within[-1] if self._within else None,
        )

    def _scope_fn(self, roots, within) -> Callable[[], Sequence[Element]]:
        def scope() -> Sequence[Element]:
            if roots is not None:
                return roots
            if within is not None:
                return within
            return (self.dom.root(),)
        return scope


class Chainable:
    """A pending or settled lookup that can be asserted on or acted on."""

    def __init__(
        self,
        locator: ComponentLocator,
        descriptor,
        *,
        text: Optional[Text],
        options: LocateOptions,
        supplied_options: Optional[dict] = None,
        roots: Optional[Tuple[Element, ...]] = None,
        parent: Optional["Chainable"] = None,
        within: Optional[Tuple[Element, ...]] = None,
        expectations: Sequence[Expectation] = (),
    ):
        self.locator = locator
        self.descriptor = descriptor
        self.text = text
        self.options = options
        self.supplied_options = supplied_options
        self._roots = roots
        self._parent = parent
        self._within = within
        self.expectations: Tuple[Expectation, ...] = tuple(expectations)
        self._settled: Optional[CandidateSet] = None

    def __repr__(self) -> str:
        state = "settled" if self._settled is not None else "pending"
        return f"<Chainable {self.descriptor.name} text={self.text!r} {state}>"

    # ---------- Resolution ----------

    def _resolve(self, expectations: Sequence[Expectation]) -> CandidateSet:
        roots = self._roots
        if roots is None and self._parent is not None:
            roots = tuple(self._parent.get())

        command_log = None
        if self.options.log:
            command_log = CommandLog(
                component=self.descriptor.name,
                text=text_for_log(self.text),
                options=self.supplied_options,
                child=self._parent is not None or self._roots is not None or self._within is not None,
            )
            self.locator.command_log.append(command_log)

        return self.locator.resolver.resolve(
            self.locator._scope_fn(roots, self._within),
            self.descriptor,
            self.text,
            self.options,
            expectations,
            command_log=command_log,
        )

    def _derive(self, expectations: Sequence[Expectation]) -> "Chainable":
        return Chainable(
            self.locator,
            self.descriptor,
            text=self.text,
            options=self.options,
            supplied_options=self.supplied_options,
            roots=self._roots,
            parent=self._parent,
            within=self._within,
            expectations=expectations,
        )

    def get(self) -> CandidateSet:
        """Resolve with the chained assertions (once) and return the elements."""
        if self._settled is None:
            self._settled = self._resolve(self.expectations)
        return self._settled

    @property
    def elements(self) -> Tuple[Element, ...]:
        return self.get().elements

    def __len__(self) -> int:
        return len(self.get())

    def should(self, *assertions: AssertionLike) -> "Chainable":
        """
        Add assertions and resolve now, retrying the lookup until all chained
        assertions pass. Returns the settled chain.
        """
        chain = self._derive(self.expectations + tuple(as_expectation(a) for a in assertions))
        chain.get()
        return chain

    # ---------- Child lookups ----------

    def component(self, descriptor: Any, *rest: Any) -> "Chainable":
        """Look up another component inside this chain's elements."""
        return self.locator._chain(descriptor, rest, parent=self)

    def find(self, selector: str) -> List[Element]:
        dom = self.locator.dom
        roots = self.get()
        found: List[Element] = []
        for el in roots:
            found.extend(dom.query_all(el, selector))
        return dom.unique(found) if len(roots) > 1 else found

    # ---------- Actions ----------

    def _actionable(self) -> CandidateSet:
        """
        Elements to act on. A settled result is reused only while all of its
        elements are still in the document; otherwise the lookup runs again.
        """
        settled = self._settled
        if settled is not None and len(settled) and self.locator.dom.attached(settled.elements):
            return settled
        self._settled = self._resolve(self.expectations + (exist(),))
        return self._settled

    def _act(self, action: str, fn: Callable[[Element], None]) -> "Chainable":
        found = self._actionable()
        for el in found:
            try:
                fn(el)
            except Exception as exc:
                raise ActionError(action, f"{found.selector} {self.locator.dom.describe(el)}", exc) from exc
        return self

    @measure("click")
    def click(self) -> "Chainable":
        return self._act("click", self.locator.dom.click)

    @measure("clear")
    def clear(self) -> "Chainable":
        """Empty every matched control. Clearing an already empty control is a no-op."""
        return self._act("clear", self.locator.dom.clear)

    @measure("fill")
    def fill(self, text: str) -> "Chainable":
        return self._act("fill", lambda el: self.locator.dom.fill(el, text))


__all__ = ["ComponentLocator", "Chainable"]
