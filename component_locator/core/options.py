# component_locator/core/options.py
from __future__ import annotations

"""Call-argument normalization
------------------------------
`component(descriptor, *rest)` accepts up to two trailing positionals: an
optional text criterion and an optional options mapping. They are told apart
by type, never by keyword.
"""

import re
from collections.abc import Mapping
from typing import Any, Optional, Pattern, Sequence, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from component_locator.utils.config import Settings, get_settings
from component_locator.utils.logger import get_logger

log = get_logger(__name__)

Text = Union[str, Pattern[str]]


class LocateOptions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    all: bool = Field(default=False, description="Yield every match instead of the most specific one")
    log: bool = Field(default=True, description="Record the lookup in the command log")
    # `timeout` is accepted as another spelling of `timeout_ms` (milliseconds)
    timeout_ms: int = Field(
        ...,
        ge=0,
        validation_alias=AliasChoices("timeout_ms", "timeout"),
        description="Retry budget for this lookup, in milliseconds",
    )


def is_text(value: Any) -> bool:
    return isinstance(value, (str, re.Pattern))


def get_text(rest: Sequence[Any]) -> Optional[Text]:
    """Text criterion passed to the call, if any. An empty string counts as none."""
    if rest and is_text(rest[0]) and rest[0] != "":
        return rest[0]
    return None


def get_options(rest: Sequence[Any]) -> Optional[dict]:
    """Options fragment passed by the caller, exactly as given (no defaults)."""
    if len(rest) == 1:
        candidate = rest[0] if rest[0] is not None and not is_text(rest[0]) else None
    elif len(rest) >= 2:
        candidate = rest[1]
    else:
        candidate = None

    if isinstance(candidate, LocateOptions):
        return candidate.model_dump()
    if isinstance(candidate, Mapping):
        return dict(candidate)
    return None


def default_options(settings: Optional[Settings] = None) -> dict:
    # Built fresh on every call; callers are free to mutate what they get.
    s = settings or get_settings()
    return {"all": False, "log": True, "timeout_ms": s.DEFAULT_COMMAND_TIMEOUT_MS}


def normalize_options(rest: Sequence[Any], settings: Optional[Settings] = None) -> LocateOptions:
    """Full options for a call: caller fragment merged over fresh defaults."""
    merged = default_options(settings)
    supplied = get_options(rest)
    if supplied:
        if "timeout" in supplied and "timeout_ms" not in supplied:
            merged.pop("timeout_ms")
        merged.update(supplied)
        try:
            return LocateOptions.model_validate(merged)
        except ValidationError as ve:
            log.debug(f"Ignoring malformed options {supplied!r}: {ve.error_count()} error(s)")
    return LocateOptions.model_validate(default_options(settings))


__all__ = [
    "Text",
    "LocateOptions",
    "is_text",
    "get_text",
    "get_options",
    "default_options",
    "normalize_options",
]
