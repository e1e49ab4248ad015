"""Lifespan management for MCP server startup and shutdown."""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from ..config import load_effective_config
from ..config_loader import discover_config_files
from .tools.registry import ServerContext

logger = logging.getLogger(__name__)


def _stderr_print(msg: str) -> None:
    """Print message to stderr for user feedback (safe in MCP mode)."""
    print(msg, file=sys.stderr, flush=True)


@asynccontextmanager
async def server_lifespan(
    config_overrides: dict[str, Any] | None = None,
) -> AsyncIterator[dict[str, Any]]:
    """
    Manage server startup and shutdown lifecycle.

    On startup:
    - Load .env, YAML config files and CLI overrides
      (CLI > env vars > .env > YAML > defaults)
    - Resolve the default repository root
    - Fail fast if configuration is invalid or the root does not exist

    Args:
        config_overrides: Optional dict with values from CLI
            (context_dir, stale_after_days, debug, repo_root)

    Yields:
        Dict with 'context' key containing the ServerContext

    Raises:
        RuntimeError: If configuration is invalid or the repository root
            does not exist.
    """
    logger.info("MCP server starting...")
    _stderr_print("Context Sync MCP Server starting...")

    overrides = config_overrides or {}
    try:
        settings, _ = load_effective_config(overrides)
    except ValueError as e:
        logger.error("Configuration error: %s", e)
        _stderr_print(f"ERROR: Configuration error: {e}")
        raise RuntimeError(f"Configuration error: {e}") from e

    sources = [f"config file: {p}" for p in discover_config_files()[:1]]
    if overrides:
        sources.append("CLI arguments")
    sources.append("environment variables")
    source_desc = ", ".join(sources)
    logger.info("Configuration loaded from: %s", source_desc)
    _stderr_print(f"  Configuration loaded from: {source_desc}")

    repo_root = Path(overrides.get("repo_root") or Path.cwd()).resolve()
    if not repo_root.is_dir():
        _stderr_print(f"ERROR: Repository root not found: {repo_root}")
        raise RuntimeError(f"Repository root not found: {repo_root}")

    logger.info("Repository root: %s (context: %s)", repo_root, settings.context_dir)
    _stderr_print(f"  Repository root: {repo_root}")
    _stderr_print(f"  Context directory: {settings.context_dir}")
    _stderr_print("Server ready. Waiting for MCP client connection...")

    yield {"context": ServerContext(settings=settings, repo_root=repo_root)}

    logger.info("MCP server shutting down")
    _stderr_print("Context Sync MCP Server shutting down.")
