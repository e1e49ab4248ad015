"""Tests for MCP server routing and argument parsing.

Verifies:
- Context tools appear in handle_list_tools
- Tool calls route through the global ToolRegistry
- Unknown or filtered tools return an unknown_tool error response
- Global accessors fail loudly before initialisation

Handler behaviour is tested in tests/test_mcp/tools/ -- this file only
tests the server layer.
"""

import pytest

from context_sync.config import Settings
from context_sync.mcp.server import (
    build_parser,
    get_context,
    get_registry,
    handle_call_tool,
    handle_list_tools,
    set_context,
    set_registry,
)
from context_sync.mcp.tools import ALL_SPECS
from context_sync.mcp.tools.registry import ServerContext, ToolRegistry


@pytest.fixture
def server_state(repo):
    """Install a registry and context, clearing them afterwards."""
    set_registry(ToolRegistry(ALL_SPECS))
    set_context(ServerContext(settings=Settings(), repo_root=repo))
    yield
    set_registry(None)
    set_context(None)


class TestAccessors:
    def test_context_not_initialized(self):
        with pytest.raises(RuntimeError, match="ServerContext not initialized"):
            get_context()

    def test_registry_not_initialized(self):
        with pytest.raises(RuntimeError, match="ToolRegistry not initialized"):
            get_registry()


class TestRouting:
    async def test_list_tools(self, server_state):
        names = [t.name for t in await handle_list_tools()]

        assert "context_quick_sync" in names
        assert "context_status" in names

    async def test_call_tool(self, server_state, write_context):
        write_context("agents", "a.md", "# A\n")

        result = await handle_call_tool("context_status", {})

        assert not result.isError
        assert result.structuredContent["stats"]["agents"] == 1

    async def test_unknown_tool(self, server_state):
        result = await handle_call_tool("wiki_get", {})

        assert result.isError is True
        assert result.content[0].text.startswith("Error (unknown_tool):")

    async def test_read_only_hides_writing_tools(self, server_state):
        set_registry(ToolRegistry(ALL_SPECS, read_only=True))

        result = await handle_call_tool("context_quick_sync", {})

        assert result.isError is True
        assert "list_tools" in result.content[0].text


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args([])

        assert args.repo_root is None
        assert args.read_only is False
        assert args.log_file == "/tmp/context-sync-mcp.log"

    def test_options(self):
        args = build_parser().parse_args(
            ["--repo-root", "/srv/repo", "--stale-after-days", "3", "--read-only"]
        )

        assert args.repo_root == "/srv/repo"
        assert args.stale_after_days == 3
        assert args.read_only is True
