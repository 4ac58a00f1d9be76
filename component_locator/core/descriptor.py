# component_locator/core/descriptor.py
from __future__ import annotations

"""Component descriptors
------------------------
A Descriptor says how to find one kind of widget in rendered markup: a CSS
query, an optional text query (the elements whose rendered text identifies an
instance, e.g. its <label>) and optional transforms from a matched element to
the element the caller actually wants. Descriptors can be built in code or
loaded from a YAML registry.
"""

import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Callable, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from component_locator.core.errors import (
    DescriptorLoadError,
    FrameworkComponentError,
    InvalidDescriptorError,
)
from component_locator.dom.base import DomAdapter, Element


# ---------- Transforms ----------


class Traversal(BaseModel):
    """
    Declarative single-element transform, applied step by step:
    `closest` (self or ancestor), then `find` (first descendant), then
    `control` (label to its form control). A step yielding nothing ends the
    walk with None.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    closest: Optional[str] = None
    find: Optional[str] = None
    control: bool = False

    @model_validator(mode="after")
    def _has_a_step(self) -> "Traversal":
        if not (self.closest or self.find or self.control):
            raise ValueError("traversal needs at least one of closest/find/control")
        return self

    def apply(self, dom: DomAdapter, element: Element) -> Optional[Element]:
        current: Optional[Element] = element
        if current is not None and self.closest:
            current = dom.closest(current, self.closest)
        if current is not None and self.find:
            current = dom.query_one(current, self.find)
        if current is not None and self.control:
            current = dom.control_for(current)
        return current

    def __str__(self) -> str:
        steps = []
        if self.closest:
            steps.append(f"closest({self.closest})")
        if self.find:
            steps.append(f"find({self.find})")
        if self.control:
            steps.append("control()")
        return ".".join(steps)


Transform = Union[Traversal, Callable[[Any], Any]]


def apply_transform(dom: DomAdapter, transform: Transform, element: Element) -> Optional[Element]:
    if isinstance(transform, Traversal):
        return transform.apply(dom, element)
    return transform(element)


# ---------- Descriptor ----------


class Descriptor(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    structural_query: str = Field(..., description="CSS query for the component's root element")
    text_query: Optional[str] = Field(default=None, description="CSS query for the text-bearing elements")
    traverse: Optional[Transform] = Field(default=None, description="Applied to structural matches")
    traverse_via_text: Optional[Transform] = Field(default=None, description="Applied to text matches")
    name: str = Field(default="", description="Diagnostic name; never used for matching")

    @field_validator("structural_query")
    @classmethod
    def _query_non_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("structural_query cannot be empty")
        return v

    @field_validator("text_query")
    @classmethod
    def _text_query_non_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("text_query cannot be blank; omit it instead")
        return v

    @model_validator(mode="before")
    @classmethod
    def _default_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and not str(data.get("name") or "").strip():
            data = {**data, "name": str(data.get("structural_query") or "").strip()}
        return data

    @property
    def has_text(self) -> bool:
        """Whether this descriptor can be located by human-readable text."""
        return self.text_query is not None

    def __str__(self) -> str:
        return self.name


def coerce_descriptor(value: Any) -> Descriptor:
    """
    Validate the first argument of a lookup.

    Mappings are validated into a Descriptor. Classes and other callables are
    rejected as framework components; anything else is an invalid descriptor.
    """
    if isinstance(value, Descriptor):
        return value
    if isinstance(value, type) or callable(value):
        raise FrameworkComponentError(value)
    if isinstance(value, Mapping):
        try:
            return Descriptor.model_validate(dict(value))
        except ValidationError as ve:
            raise InvalidDescriptorError(value, _format_errors(ve)) from ve
    raise InvalidDescriptorError(value)


# ---------- Registry files ----------


class DescriptorRegistry(BaseModel):
    version: str = Field(default="1")
    descriptors: list[Descriptor] = Field(default_factory=list)


def _format_errors(ve: ValidationError) -> str:
    parts = []
    for e in ve.errors():
        loc = ".".join(str(p) for p in e.get("loc", []))
        parts.append(f"{loc}: {e.get('msg', 'invalid value')}" if loc else e.get("msg", "invalid value"))
    return "; ".join(parts)


def _subst_env(obj):
    if isinstance(obj, str):
        def repl(m):
            return os.environ.get(m.group(1), m.group(0))
        return re.sub(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}", repl, obj)
    if isinstance(obj, list):
        return [_subst_env(x) for x in obj]
    if isinstance(obj, dict):
        return {k: _subst_env(v) for k, v in obj.items()}
    return obj


def load_descriptors_file(path: Path | str) -> dict[str, Descriptor]:
    """
    Load descriptors from a YAML file (multi-document supported), keyed by name.

    Each document looks like:
        version: "1"
        descriptors:
          - name: Input
            structural_query: "input, textarea"
            text_query: label
            traverse_via_text: {control: true}
    """
    reg_path = Path(path)
    if not reg_path.exists():
        raise FileNotFoundError(f"Descriptor file not found: {reg_path}")
    try:
        docs = list(yaml.safe_load_all(reg_path.read_text(encoding="utf-8")))
    except yaml.YAMLError as ye:
        raise DescriptorLoadError(f"YAML parse error in {reg_path}: {ye}") from ye

    out: dict[str, Descriptor] = {}
    for idx, data in enumerate(docs, start=1):
        if data is None:
            continue
        if not isinstance(data, dict):
            raise DescriptorLoadError(f"Document {idx} in {reg_path} must be a mapping/object.")
        try:
            registry = DescriptorRegistry.model_validate(_subst_env(data))
        except ValidationError as ve:
            lines = [f"Invalid descriptor registry '{reg_path}' (document {idx}):"]
            for e in ve.errors():
                loc = ".".join(str(p) for p in e.get("loc", []))
                lines.append(f"  - {loc}: {e.get('msg', 'invalid value')}")
            raise DescriptorLoadError("\n".join(lines)) from ve
        for descriptor in registry.descriptors:
            if descriptor.name in out:
                raise DescriptorLoadError(f"Duplicate descriptor '{descriptor.name}' in {reg_path}")
            out[descriptor.name] = descriptor

    if not out:
        raise DescriptorLoadError(f"No descriptors found in {reg_path}")
    return out


__all__ = [
    "Traversal",
    "Transform",
    "Descriptor",
    "DescriptorRegistry",
    "apply_transform",
    "coerce_descriptor",
    "load_descriptors_file",
]
