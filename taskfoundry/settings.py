"""Effective settings for a taskfoundry run.

Merges, lowest to highest priority: built-in defaults, the system-wide
~/.taskfoundry/config.yaml, the project .taskfoundry/config.yaml, and
command-line overrides.
"""

from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from taskfoundry import global_config, user_config
from taskfoundry.config import (
    AUTO_ENGINE,
    DEFAULT_REQUEST_TIMEOUT,
    MAX_MAX_TOKENS,
    MAX_TEMPERATURE,
    MIN_MAX_TOKENS,
    MIN_TEMPERATURE,
    parse_engine,
)

OUTPUT_FORMATS = ("markdown", "json")


class SettingsError(Exception):
    """Raised when the merged configuration is invalid."""
    pass


class Settings(BaseModel):
    """Validated, merged configuration."""

    engine: str = AUTO_ENGINE
    model: Optional[str] = None
    temperature: Optional[float] = Field(default=None, ge=MIN_TEMPERATURE, le=MAX_TEMPERATURE)
    max_tokens: Optional[int] = Field(default=None, ge=MIN_MAX_TOKENS, le=MAX_MAX_TOKENS)
    output: str = "markdown"
    detailed: bool = False
    fallback: bool = False
    local_endpoint: Optional[str] = None
    timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0)
    api_keys: dict[str, str] = Field(default_factory=dict)
    exclude: list[str] = Field(default_factory=list)

    @field_validator("engine")
    @classmethod
    def engine_must_be_known(cls, v: str) -> str:
        parse_engine(v)
        return (v or AUTO_ENGINE).strip().lower()

    @field_validator("output")
    @classmethod
    def output_must_be_known(cls, v: str) -> str:
        v = (v or "markdown").strip().lower()
        if v not in OUTPUT_FORMATS:
            raise ValueError(
                f"Invalid output format: {v}. Must be one of: {', '.join(OUTPUT_FORMATS)}"
            )
        return v


def _known(layer: dict) -> dict:
    return {key: value for key, value in layer.items() if key in Settings.model_fields}


def load_settings(
    repo_root: Optional[Path] = None,
    overrides: Optional[dict[str, Any]] = None,
) -> Settings:
    """Merge every configuration layer into validated settings.

    Args:
        repo_root: Repository root for the project layer, if inside a repo.
        overrides: Command-line values; None entries are ignored.

    Returns:
        The effective Settings.

    Raises:
        SettingsError: If the merged values are invalid.
        GlobalConfigError: If the system-wide config cannot be read.
    """
    merged: dict[str, Any] = {}
    merged.update(_known(global_config.load_global_config()))
    if repo_root is not None:
        merged.update(_known(user_config.load_config(repo_root)))
    merged.update({k: v for k, v in _known(overrides or {}).items() if v is not None})

    # YAML nulls mean "not set"
    merged = {k: v for k, v in merged.items() if v is not None}

    try:
        return Settings(**merged)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise SettingsError(f"Invalid configuration: {problems}")
