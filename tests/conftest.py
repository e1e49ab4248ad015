"""Shared pytest fixtures for context-sync tests."""

from pathlib import Path

import pytest

_ENV_VARS = (
    "CONTEXT_SYNC_CONFIG",
    "CONTEXT_SYNC_DIR",
    "CONTEXT_SYNC_STALE_DAYS",
    "CONTEXT_SYNC_DEBUG",
    "LOG_LEVEL",
    "LOG_FILE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment out of config resolution."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def repo(tmp_path) -> Path:
    """An empty repository root."""
    root = tmp_path / "repo"
    root.mkdir()
    return root


@pytest.fixture
def write_context(repo):
    """Factory fixture writing ``.context/<category>/<name>`` files.

    Usage::

        write_context("agents", "reviewer.md", "# Reviewer\\n")
    """

    def _write(category: str, filename: str, content: str | bytes) -> Path:
        path = repo / ".context" / category / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return path

    return _write
