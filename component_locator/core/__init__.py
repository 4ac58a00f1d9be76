"""
Core package for component lookups.
Lightweight package init to avoid import cycles.

Consumers should import submodules directly, e.g.:
  from component_locator.core.descriptor import Descriptor, Traversal
  from component_locator.core.engine import locate
  from component_locator.core.chainable import ComponentLocator
"""

__all__: list[str] = []
