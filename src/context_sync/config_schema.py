"""Configuration schema for context_sync.

Defines Pydantic models for the config file, with sections for the
context root, default sync target selections, and logging.  The
``to_yaml_fallbacks`` adapter flattens a validated config into the
fallback dict consumed by ``load_settings()``.

Usage:
    from context_sync.config_schema import build_config, to_yaml_fallbacks

    raw = load_hierarchical_config()
    unified = build_config(raw)
    settings = load_settings(yaml_fallbacks=to_yaml_fallbacks(unified))
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class ContextConfig(BaseModel):
    """Location and freshness policy of the context root."""

    dir: str = Field(
        default=".context",
        description="Context root, relative to the repository root",
    )
    stale_after_days: int = Field(
        default=7,
        ge=1,
        description="Days after which generated docs count as outdated",
    )

    model_config = {"frozen": True}


class SyncDefaultsConfig(BaseModel):
    """Default target selections for quick sync.

    ``None`` selects every target of the category; an empty list skips
    the category.  Entries may be target keys or preset names.
    """

    agent_targets: list[str] | None = None
    skill_targets: list[str] | None = None
    command_targets: list[str] | None = None
    doc_targets: list[str] | None = None

    model_config = {"frozen": True}

    @field_validator(
        "agent_targets",
        "skill_targets",
        "command_targets",
        "doc_targets",
        mode="before",
    )
    @classmethod
    def _split_string(cls, value):
        # "claude, cursor" in YAML is accepted as a list
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Optional log file path.
    """

    level: str = Field(default="INFO", description="Log level")
    file: str | None = Field(default=None, description="Log file path")

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------


class UnifiedConfig(BaseModel):
    """Top-level configuration.

    Every section has defaults, so ``UnifiedConfig()`` (zero-config) is
    always valid.
    """

    context: ContextConfig = Field(default_factory=ContextConfig)
    sync: SyncDefaultsConfig = Field(default_factory=SyncDefaultsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}


def build_config(raw_data: dict) -> UnifiedConfig:
    """Construct a ``UnifiedConfig`` from the merged raw config dict.

    Missing sections get defaults.

    Raises:
        pydantic.ValidationError: If a section holds invalid values.
    """
    if not raw_data:
        return UnifiedConfig()
    return UnifiedConfig(**raw_data)


def to_yaml_fallbacks(unified: UnifiedConfig) -> dict:
    """Flatten *unified* into the fallback dict used by ``load_settings``."""
    fallbacks: dict = {
        "context_dir": unified.context.dir,
        "stale_after_days": unified.context.stale_after_days,
    }
    fallbacks.update(unified.sync.model_dump(exclude_none=True))
    return fallbacks
