# component_locator/utils/config.py
from __future__ import annotations

import functools
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# ---------- Enums ----------

class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


# ---------- Settings ----------

class Settings(BaseSettings):
    """
    Central configuration for component lookups.

    Values load in this order of precedence:
      1) Environment variables
      2) .env file in project root
      3) Defaults below
    """

    # ---- Retry budget ----
    DEFAULT_COMMAND_TIMEOUT_MS: int = Field(default=4000, ge=0, description="Retry budget for one lookup")
    RETRY_INTERVAL_MS: int = Field(default=50, ge=1, description="Pause between two lookup attempts")

    # ---- Descriptor registry ----
    DESCRIPTORS_FILE: Optional[Path] = Field(default=None, description="Default YAML descriptor registry")

    # ---- Logging ----
    LOG_LEVEL: LogLevel = Field(default=LogLevel.INFO)
    LOG_TO_FILE: bool = Field(default=False)
    LOG_FILE: Path = Field(default=Path("./component-locator.log"))
    COLORIZED_OUTPUT: bool = Field(default=True)
    DEBUG_MODE: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("LOG_FILE", "DESCRIPTORS_FILE", mode="before")
    @classmethod
    def _coerce_to_path(cls, v):
        if isinstance(v, Path) or v is None:
            return v
        return Path(str(v))

    @field_validator("LOG_FILE", "DESCRIPTORS_FILE", mode="after")
    @classmethod
    def _absolutize(cls, v: Optional[Path]):
        if v is None:
            return v
        return v if v.is_absolute() else Path.cwd() / v

    def ensure_dirs(self) -> None:
        """Create the log directory when file logging is on (idempotent)."""
        if self.LOG_TO_FILE:
            self.LOG_FILE.parent.mkdir(parents=True, exist_ok=True)


# --------- Public accessor (memoized) ---------

@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Load and cache settings once per process.
    Call `get_settings.cache_clear()` if you need to reload after changing env.
    """
    s = Settings()
    s.ensure_dirs()
    return s
