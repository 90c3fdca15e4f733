"""
Configuration — typed, validated settings loaded from environment/.env.

Uses pydantic-settings to:
  - Load from environment variables prefixed with GREENPASS_
  - Fall back to a .env file
  - Validate types and constraints at startup

Only the composition root (main.py) reads settings. The decode pipeline
receives what it needs (the inflate cap) as explicit arguments and never
touches configuration itself.

Architecture: Only AppSettings is a BaseSettings instance. Sub-settings are plain
BaseModel classes populated by AppSettings via env_nested_delimiter="__", so
GREENPASS_DECODER__MAX_INFLATED_BYTES maps to decoder.max_inflated_bytes.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from greenpass.pipeline import DEFAULT_MAX_INFLATED_BYTES

# Resolve the .env file relative to the project root (two levels above this file),
# so settings load correctly regardless of the working directory at runtime.
_ENV_FILE = Path(__file__).parent.parent.parent / ".env"


class DecoderSettings(BaseModel):
    """Decode pipeline limits and input handling."""

    max_inflated_bytes: int = Field(
        default=DEFAULT_MAX_INFLATED_BYTES,
        ge=1024,
        description="Largest decompressed payload accepted, in bytes",
    )
    prefixes: list[str] = Field(
        default_factory=lambda: ["HC1:"],
        description="Scheme prefixes stripped from the input before decoding",
    )

    @field_validator("prefixes")
    @classmethod
    def reject_empty_prefixes(cls, value: list[str]) -> list[str]:
        """An empty prefix would match every input."""
        if any(not prefix for prefix in value):
            raise ValueError("Prefixes must be non-empty strings")
        return value


class ReportSettings(BaseModel):
    """Report rendering options."""

    show_value_set_names: bool = Field(
        default=True,
        description="Show value-set display names next to codes",
    )


class AppSettings(BaseSettings):
    """
    Root application settings — aggregates all sub-settings.

    Load order (highest priority first):
      1. Environment variables
      2. .env file
      3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="GREENPASS_",
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    decoder: DecoderSettings = Field(default_factory=lambda: DecoderSettings())
    report: ReportSettings = Field(default_factory=lambda: ReportSettings())

    log_level: str = Field(default="WARNING")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Accept standard logging level names, case-insensitively."""
        level = value.strip().upper()
        if not isinstance(logging.getLevelNamesMapping().get(level), int):
            raise ValueError(f"Unknown log level: {value!r}")
        return level
