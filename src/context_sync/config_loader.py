"""
Hierarchical configuration loader for context_sync.

Finds config files by convention, loads them with YAML ``!include``
support, merges them with "project wins" semantics and interpolates
``${VAR}`` references.

Usage:
    from context_sync.config_loader import load_hierarchical_config

    config = load_hierarchical_config()
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "CONTEXT_SYNC_CONFIG"
PROJECT_CONFIG_DIR = ".context_sync"

# ---------------------------------------------------------------------------
# 1. Env var interpolation
# ---------------------------------------------------------------------------

# ${VAR} or ${VAR:-default}
_ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+?)(?::-(.*?))?\}")


def interpolate_env_vars(value: str) -> str:
    """Replace ``${VAR}`` and ``${VAR:-default}`` with environment values.

    An unset or empty variable becomes *default*, or ``""`` without one.
    A ``${`` with no closing ``}`` is left as-is.

    Examples:
        >>> os.environ["CTX_HOME"] = "/srv"
        >>> interpolate_env_vars("${CTX_HOME}/ctx")
        '/srv/ctx'
        >>> interpolate_env_vars("${CTX_MISSING:-.context}")
        '.context'
    """

    def _replace(match: re.Match) -> str:
        env_val = os.environ.get(match.group(1))
        if env_val:
            return env_val
        return match.group(2) or ""

    return _ENV_VAR_PATTERN.sub(_replace, value)


def _interpolate_recursive(obj: Any) -> Any:
    match obj:
        case str():
            return interpolate_env_vars(obj)
        case dict():
            return {k: _interpolate_recursive(v) for k, v in obj.items()}
        case list():
            return [_interpolate_recursive(item) for item in obj]
        case _:
            return obj


# ---------------------------------------------------------------------------
# 2. YAML !include support
# ---------------------------------------------------------------------------


class ConfigLoader(yaml.SafeLoader):
    """SafeLoader with an ``!include`` tag.

    A subclass keeps the tag out of the global ``yaml.SafeLoader``.  Each
    load carries the chain of files being included so cycles are caught.
    """


def _include_constructor(loader: ConfigLoader, node: yaml.ScalarNode) -> Any:
    """Load the file named by ``!include <path>``, relative to the includer."""
    including_file = Path(loader.name).resolve()
    include_path = (including_file.parent / loader.construct_scalar(node)).resolve()

    chain: list[Path] = getattr(loader, "_include_stack", [])
    if include_path in chain:
        cycle = " -> ".join(str(p) for p in [*chain, include_path])
        raise ValueError(f"Circular include detected: {cycle}")
    if not include_path.exists():
        raise FileNotFoundError(
            f"Include file not found: {include_path} (referenced from {including_file})"
        )
    return load_yaml_file(include_path, _include_stack=[*chain, include_path])


ConfigLoader.add_constructor("!include", _include_constructor)


def load_yaml_file(
    path: Path, *, _include_stack: list[Path] | None = None
) -> Any:
    """Load one YAML file, resolving ``!include`` tags."""
    path = path.resolve()
    with open(path, "r", encoding="utf-8") as fh:
        loader = ConfigLoader(fh)
        loader._include_stack = _include_stack or [path]  # type: ignore[attr-defined]
        try:
            return loader.get_single_data()
        finally:
            loader.dispose()


# ---------------------------------------------------------------------------
# 3. Discovery
# ---------------------------------------------------------------------------


def discover_config_files(
    cwd: Path | None = None, home: Path | None = None
) -> list[Path]:
    """Return existing config files, highest precedence first.

    Search order:
        1. ``$CONTEXT_SYNC_CONFIG`` (explicit single path)
        2. ``./.context_sync/config.yml``
        3. ``./.context_sync/config.yaml``
        4. ``~/.config/context_sync/config.yml``
    """
    cwd = cwd or Path.cwd()
    home = home or Path.home()

    candidates: list[Path] = []
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        candidates.append(Path(env_path).expanduser().resolve())
    candidates.append(cwd / PROJECT_CONFIG_DIR / "config.yml")
    candidates.append(cwd / PROJECT_CONFIG_DIR / "config.yaml")
    candidates.append(home / ".config" / "context_sync" / "config.yml")

    return [p for p in candidates if p.exists()]


_STARTER_CONFIG = """\
# context-sync configuration
#
# The context root and staleness threshold can also be set with the
# CONTEXT_SYNC_DIR and CONTEXT_SYNC_STALE_DAYS environment variables.
#
# context:
#   dir: .context
#   stale_after_days: 7
#
# Default target selections for `context-sync sync`.  Omit a key to sync
# every target of the category; use [] to skip it.
#
# sync:
#   agent_targets: [claude, github]
#   skill_targets: [all]
#   command_targets: [cursor, antigravity]
#   doc_targets: [cursor]
#
# logging:
#   level: INFO
#   file: null
"""


def ensure_config(target: Path | None = None, cwd: Path | None = None) -> Path:
    """Return the active config file, writing a starter one if none exists.

    Args:
        target: Path to create when no config exists.  Defaults to
            ``<cwd>/.context_sync/config.yml``.
        cwd: Project directory (defaults to the current directory).

    Returns:
        Path to the existing or newly created config file.
    """
    existing = discover_config_files(cwd=cwd)
    if existing:
        logger.debug("Config file already exists: %s", existing[0])
        return existing[0]

    config_path = target or (cwd or Path.cwd()) / PROJECT_CONFIG_DIR / "config.yml"
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(_STARTER_CONFIG, encoding="utf-8")
    logger.info("Created starter config: %s", config_path)
    return config_path


# ---------------------------------------------------------------------------
# 4. Hierarchical merge
# ---------------------------------------------------------------------------


def load_hierarchical_config(
    cwd: Path | None = None, home: Path | None = None
) -> dict[str, Any]:
    """Load and merge every discovered config file.

    Files are applied from lowest to highest precedence; top-level keys
    of a later file replace earlier ones wholesale.  Env var
    interpolation runs on the merged result.

    Returns:
        The merged dict, empty when no config file exists.
    """
    paths = discover_config_files(cwd=cwd, home=home)
    if not paths:
        logger.debug("No config files found, using defaults")
        return {}

    merged: dict[str, Any] = {}
    for path in reversed(paths):
        logger.debug("Loading config: %s", path)
        data = load_yaml_file(path)
        if isinstance(data, dict):
            merged.update(data)
        elif data is not None:
            logger.warning(
                "Config file %s has non-dict root (%s), skipping",
                path,
                type(data).__name__,
            )

    return _interpolate_recursive(merged)
