"""Tests for ServerContext, ToolSpec and ToolRegistry.

Covers:
- ToolSpec immutability
- ToolRegistry read-only filtering
- ToolRegistry list_tools, tool_count, call_tool dispatch and error
  translation
"""

from pathlib import Path

import mcp.types as types
import pytest

from context_sync.config import Settings
from context_sync.errors import UnknownTargetError
from context_sync.mcp.tools import ALL_SPECS
from context_sync.mcp.tools.registry import ServerContext, ToolRegistry, ToolSpec


def _make_spec(name: str, writes: bool = False, handler=None) -> ToolSpec:
    """Helper to create a ToolSpec for testing."""
    if handler is None:

        async def handler(ctx, args):
            return types.CallToolResult(
                content=[types.TextContent(type="text", text=f"ok:{name}:{args}")]
            )

    return ToolSpec(
        tool=types.Tool(
            name=name,
            description=f"Test tool {name}",
            inputSchema={"type": "object", "properties": {}, "required": []},
        ),
        writes=writes,
        handler=handler,
    )


@pytest.fixture
def ctx(tmp_path) -> ServerContext:
    return ServerContext(settings=Settings(), repo_root=tmp_path)


class TestToolSpec:
    def test_frozen(self):
        spec = _make_spec("status")
        with pytest.raises(AttributeError):
            spec.writes = True


class TestToolRegistry:
    def test_all_tools_registered(self):
        registry = ToolRegistry([_make_spec("a"), _make_spec("b", writes=True)])

        assert registry.tool_count() == 2
        assert [t.name for t in registry.list_tools()] == ["a", "b"]

    def test_read_only_drops_writing_tools(self):
        registry = ToolRegistry(
            [_make_spec("status"), _make_spec("sync", writes=True)],
            read_only=True,
        )

        assert [t.name for t in registry.list_tools()] == ["status"]

    def test_builtin_read_only_tools(self):
        registry = ToolRegistry(ALL_SPECS, read_only=True)

        assert sorted(t.name for t in registry.list_tools()) == [
            "context_list_targets",
            "context_status",
        ]

    async def test_call_tool_dispatches(self, ctx):
        registry = ToolRegistry([_make_spec("status")])

        result = await registry.call_tool("status", None, ctx)

        assert result.content[0].text == "ok:status:{}"

    async def test_unknown_tool_raises(self, ctx):
        registry = ToolRegistry([_make_spec("status")])

        with pytest.raises(ValueError, match="Unknown tool: nope"):
            await registry.call_tool("nope", {}, ctx)

    async def test_filtered_tool_raises(self, ctx):
        registry = ToolRegistry([_make_spec("sync", writes=True)], read_only=True)

        with pytest.raises(ValueError):
            await registry.call_tool("sync", {}, ctx)

    async def test_validation_error_translated(self, ctx):
        async def handler(ctx, args):
            raise UnknownTargetError("emacs", "agents")

        registry = ToolRegistry([_make_spec("sync", handler=handler)])

        result = await registry.call_tool("sync", {}, ctx)

        assert result.isError is True
        assert result.content[0].text.startswith("Error (unknown_target):")

    async def test_unexpected_error_is_server_error(self, ctx):
        async def handler(ctx, args):
            raise PermissionError("denied")

        registry = ToolRegistry([_make_spec("sync", handler=handler)])

        result = await registry.call_tool("sync", {}, ctx)

        assert result.isError is True
        assert result.content[0].text.startswith("Error (server_error): denied")


def test_server_context_is_frozen(tmp_path):
    ctx = ServerContext(settings=Settings(), repo_root=tmp_path)
    with pytest.raises(AttributeError):
        ctx.repo_root = Path("/")
