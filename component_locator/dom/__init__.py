"""
DOM package
-----------
Adapters that let the locator engine read a document: a BeautifulSoup
snapshot backend and a live Playwright backend.

The Playwright backend is imported lazily so snapshot-only users do not need
a browser installed:
  from component_locator.dom.playwright_dom import PlaywrightDom
"""

from .base import DomAdapter, Element, collapse_whitespace
from .soup import SoupDom

__all__ = [
    "DomAdapter",
    "Element",
    "SoupDom",
    "collapse_whitespace",
]
