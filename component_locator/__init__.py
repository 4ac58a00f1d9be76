"""
component_locator
-----------------
Find the DOM representation of a UI component by descriptor and
human-readable text, with retried assertions for UI tests.
"""

from component_locator.core.assertions import (
    Expectation,
    contain_text,
    exist,
    have_length,
    have_text,
    have_value,
    not_exist,
)
from component_locator.core.chainable import Chainable, ComponentLocator
from component_locator.core.descriptor import Descriptor, Traversal, load_descriptors_file
from component_locator.core.engine import CandidateSet, locate
from component_locator.core.errors import (
    ActionError,
    ComponentLocatorError,
    DescriptorError,
    DescriptorLoadError,
    FrameworkComponentError,
    InvalidDescriptorError,
    LocateTimeoutError,
    TextCapabilityError,
)
from component_locator.core.options import LocateOptions
from component_locator.dom.soup import SoupDom

__version__ = "0.1.0"

__all__ = [
    "ComponentLocator",
    "Chainable",
    "CandidateSet",
    "Descriptor",
    "Traversal",
    "LocateOptions",
    "SoupDom",
    "locate",
    "load_descriptors_file",
    "Expectation",
    "exist",
    "not_exist",
    "have_length",
    "have_value",
    "have_text",
    "contain_text",
    "ComponentLocatorError",
    "DescriptorError",
    "InvalidDescriptorError",
    "FrameworkComponentError",
    "TextCapabilityError",
    "DescriptorLoadError",
    "ActionError",
    "LocateTimeoutError",
]
