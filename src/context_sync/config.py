"""Runtime settings for the CLI and MCP server.

Reads settings from CLI args, environment variables, .env files, and
YAML config file fallbacks.

Precedence (highest to lowest):
    CLI args > Environment variables > .env file > YAML config > Built-in defaults

Environment variables:
    CONTEXT_SYNC_DIR: Context root relative to the repository (default: .context)
    CONTEXT_SYNC_STALE_DAYS: Days before docs count as outdated (default: 7)
    CONTEXT_SYNC_DEBUG: Enable debug logging (default: false)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import PurePath

from dotenv import load_dotenv

from .config_loader import load_hierarchical_config
from .config_schema import UnifiedConfig, build_config, to_yaml_fallbacks

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT_DIR = ".context"
DEFAULT_STALE_AFTER_DAYS = 7


@dataclass
class Settings:
    context_dir: str = DEFAULT_CONTEXT_DIR
    stale_after_days: int = DEFAULT_STALE_AFTER_DAYS
    debug: bool = False
    agent_targets: list[str] | None = None
    skill_targets: list[str] | None = None
    command_targets: list[str] | None = None
    doc_targets: list[str] | None = None


def validate_settings(settings: Settings) -> None:
    """Validate settings values and raise ValueError if invalid.

    Raises:
        ValueError: If the context dir is empty or escapes the repository,
            or the staleness threshold is below one day.
    """
    settings.context_dir = settings.context_dir.strip()
    if not settings.context_dir:
        raise ValueError(
            "Context directory cannot be empty. Set CONTEXT_SYNC_DIR or context.dir."
        )
    if ".." in PurePath(settings.context_dir).parts:
        raise ValueError(
            f"Invalid context directory '{settings.context_dir}': must stay inside the repository"
        )
    if settings.stale_after_days < 1:
        raise ValueError(
            f"Invalid stale_after_days '{settings.stale_after_days}': must be at least 1"
        )


def _get_bool_env(key: str) -> bool | None:
    """Return True/False from env var, or None if unset."""
    val = os.getenv(key)
    if val is None:
        return None
    return val.lower() in ("true", "1", "yes", "on")


def load_settings(
    context_dir: str | None = None,
    stale_after_days: int | None = None,
    debug: bool = False,
    yaml_fallbacks: dict | None = None,
) -> Settings:
    """Load settings with unified precedence.

    The caller is responsible for calling ``load_dotenv()`` first so that
    .env values are visible through ``os.getenv()``.

    Args:
        context_dir: CLI override for the context root.
        stale_after_days: CLI override for the staleness threshold.
        debug: Enable debug logging (CLI flag).
        yaml_fallbacks: Flattened config file values
            (see ``config_schema.to_yaml_fallbacks``).

    Returns:
        Validated Settings instance.

    Raises:
        ValueError: On malformed or out-of-range values.
    """
    fb = yaml_fallbacks or {}

    final_dir = (
        context_dir
        or os.getenv("CONTEXT_SYNC_DIR")
        or fb.get("context_dir")
        or DEFAULT_CONTEXT_DIR
    )

    if stale_after_days is not None:
        final_stale = stale_after_days
    else:
        stale_raw = os.getenv("CONTEXT_SYNC_STALE_DAYS")
        if stale_raw is not None:
            try:
                final_stale = int(stale_raw)
            except ValueError:
                raise ValueError(
                    f"Invalid CONTEXT_SYNC_STALE_DAYS '{stale_raw}': must be a whole number of days"
                ) from None
        else:
            final_stale = int(fb.get("stale_after_days", DEFAULT_STALE_AFTER_DAYS))

    if debug:
        final_debug = True
    else:
        env_debug = _get_bool_env("CONTEXT_SYNC_DEBUG")
        final_debug = env_debug if env_debug is not None else False

    settings = Settings(
        context_dir=final_dir,
        stale_after_days=final_stale,
        debug=final_debug,
        agent_targets=fb.get("agent_targets"),
        skill_targets=fb.get("skill_targets"),
        command_targets=fb.get("command_targets"),
        doc_targets=fb.get("doc_targets"),
    )
    validate_settings(settings)
    return settings


def load_effective_config(
    cli_overrides: dict | None = None,
) -> tuple[Settings, UnifiedConfig]:
    """Load .env, config files and CLI overrides into Settings.

    CLI overrides dict keys: context_dir, stale_after_days, debug.

    Returns:
        Tuple of (settings, unified config).  The unified config carries
        the logging section for ``setup_logging``.
    """
    load_dotenv()
    unified = build_config(load_hierarchical_config())
    overrides = cli_overrides or {}
    settings = load_settings(
        context_dir=overrides.get("context_dir"),
        stale_after_days=overrides.get("stale_after_days"),
        debug=overrides.get("debug", False),
        yaml_fallbacks=to_yaml_fallbacks(unified),
    )
    return settings, unified
