# component_locator/dom/playwright_dom.py
from __future__ import annotations

"""Playwright backend
---------------------
DomAdapter over a live Playwright page (sync API). Element handles are
re-queried on every attempt. Comparisons across a list of handles (dedupe,
nesting, attachment) run as one `page.evaluate` over the whole list.
"""

from typing import List, Optional, Sequence

from playwright.sync_api import ElementHandle, Page

from component_locator.dom.base import collapse_whitespace
from component_locator.utils.logger import get_logger

log = get_logger(__name__)

_UNIQUE_JS = "els => els.map((e, i) => els.indexOf(e) === i)"
_CONTAINS_NEXT_JS = "els => els.slice(0, -1).map((e, i) => e !== els[i + 1] && e.contains(els[i + 1]))"
_ATTACHED_JS = "els => els.every(e => e.isConnected)"
_CLOSEST_JS = "(e, sel) => e.closest(sel)"
_CONTROL_JS = """l => l.control || (l.htmlFor ? document.getElementById(l.htmlFor) : null)"""
_DESCRIBE_JS = """e => {
  let out = '<' + e.tagName.toLowerCase();
  if (e.id) out += '#' + e.id;
  for (const c of e.classList) out += '.' + c;
  return out + '>';
}"""


class PlaywrightDom:
    def __init__(self, page: Page, *, action_timeout_ms: Optional[int] = None):
        self.page = page
        self.action_timeout_ms = action_timeout_ms

    # ---------- Reads ----------

    def root(self) -> ElementHandle:
        body = self.page.query_selector("body")
        if body is None:
            return self.page.query_selector(":root")
        return body

    def query_all(self, element: ElementHandle, selector: str) -> List[ElementHandle]:
        return element.query_selector_all(selector)

    def query_one(self, element: ElementHandle, selector: str) -> Optional[ElementHandle]:
        return element.query_selector(selector)

    def closest(self, element: ElementHandle, selector: str) -> Optional[ElementHandle]:
        return self._as_element(element.evaluate_handle(_CLOSEST_JS, selector))

    def control_for(self, label: ElementHandle) -> Optional[ElementHandle]:
        return self._as_element(label.evaluate_handle(_CONTROL_JS))

    def text(self, element: ElementHandle) -> str:
        return collapse_whitespace(element.inner_text())

    def value(self, element: ElementHandle) -> Optional[str]:
        return element.evaluate("e => 'value' in e ? e.value : e.getAttribute('value')")

    def unique(self, elements: Sequence[ElementHandle]) -> List[ElementHandle]:
        if len(elements) < 2:
            return list(elements)
        keep = self.page.evaluate(_UNIQUE_JS, list(elements))
        return [el for el, first in zip(elements, keep) if first]

    def contains_next(self, elements: Sequence[ElementHandle]) -> List[bool]:
        if len(elements) < 2:
            return []
        return [bool(flag) for flag in self.page.evaluate(_CONTAINS_NEXT_JS, list(elements))]

    def attached(self, elements: Sequence[ElementHandle]) -> bool:
        if not elements:
            return True
        return bool(self.page.evaluate(_ATTACHED_JS, list(elements)))

    def describe(self, element: ElementHandle) -> str:
        return element.evaluate(_DESCRIBE_JS)

    # ---------- Actions ----------

    def click(self, element: ElementHandle) -> None:
        element.click(timeout=self.action_timeout_ms)

    def clear(self, element: ElementHandle) -> None:
        tag = element.evaluate("e => e.tagName.toLowerCase()")
        if tag == "select":
            element.select_option([], timeout=self.action_timeout_ms)
        else:
            element.fill("", timeout=self.action_timeout_ms)

    def fill(self, element: ElementHandle, text: str) -> None:
        tag = element.evaluate("e => e.tagName.toLowerCase()")
        if tag == "select":
            element.select_option(text, timeout=self.action_timeout_ms)
        else:
            element.fill(text, timeout=self.action_timeout_ms)

    # ---------- Internals ----------

    @staticmethod
    def _as_element(handle) -> Optional[ElementHandle]:
        element = handle.as_element()
        if element is None:
            handle.dispose()
            log.debug("JS handle did not resolve to an element")
        return element
