"""MCP Server for context sync using stdio transport.

This module implements the Model Context Protocol server that lets AI
agents sync the repository's ``.context`` tree into tool directories.

Transport: stdio (for Claude Desktop/Code, Cursor integration)
Protocol: JSON-RPC 2.0 over MCP
"""

import argparse
import asyncio
import logging
import sys

import mcp.server.stdio
import mcp.types as types
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions

from .. import __version__
from ..logger import setup_logging
from .lifespan import server_lifespan
from .tools import ALL_SPECS, ServerContext, ToolRegistry, build_error_response

logger = logging.getLogger(__name__)

SERVER_NAME = "context-sync"

# Initialize server instance
server = Server(SERVER_NAME)

# Global server context (initialized in lifespan)
_context: ServerContext | None = None

# Global registry instance (initialized in main)
_registry: ToolRegistry | None = None


# ---------------------------------------------------------------------------
# Global accessors
# ---------------------------------------------------------------------------


def get_context() -> ServerContext:
    """Get the global ServerContext instance.

    Raises:
        RuntimeError: If the context is not initialized
    """
    if _context is None:
        raise RuntimeError(
            "ServerContext not initialized. Server lifespan not started."
        )
    return _context


def set_context(ctx: ServerContext | None) -> None:
    """Set the global ServerContext instance, or None to clear."""
    global _context
    _context = ctx


def get_registry() -> ToolRegistry:
    """Get the global ToolRegistry instance.

    Raises:
        RuntimeError: If registry is not initialized
    """
    if _registry is None:
        raise RuntimeError("ToolRegistry not initialized.")
    return _registry


def set_registry(registry: ToolRegistry | None) -> None:
    """Set the global ToolRegistry instance, or None to clear."""
    global _registry
    _registry = registry


# ---------------------------------------------------------------------------
# MCP protocol handlers
# ---------------------------------------------------------------------------


@server.list_tools()
async def handle_list_tools() -> list[types.Tool]:
    """List available context tools."""
    return get_registry().list_tools()


@server.call_tool()
async def handle_call_tool(
    name: str, arguments: dict | None
) -> types.CallToolResult:
    """Handle tool execution via ToolRegistry dispatch.

    Args:
        name: The name of the tool to execute.
        arguments: Tool arguments (optional).

    Returns:
        CallToolResult with tool output content and optional isError flag.
    """
    ctx = get_context()
    try:
        return await get_registry().call_tool(name, arguments, ctx)
    except ValueError as e:
        # Unknown or filtered-out tool name
        return build_error_response(
            "unknown_tool",
            str(e),
            "Use list_tools to see available tools.",
        )


# ---------------------------------------------------------------------------
# Server lifecycle
# ---------------------------------------------------------------------------


async def main(config_overrides: dict | None = None):
    """Run the MCP server with stdio transport.

    Sets up logging for MCP mode (file only, never stdout), loads
    configuration through the lifespan manager and serves over stdio.

    Args:
        config_overrides: Optional dict of CLI values (context_dir,
            stale_after_days, debug, repo_root, log_file, read_only)
    """
    overrides = config_overrides or {}

    # Must run before stdio_server so nothing reaches stdout
    setup_logging(
        mode="mcp",
        debug=bool(overrides.get("debug")),
        log_file=overrides.get("log_file"),
    )

    read_only = bool(overrides.get("read_only"))
    registry = ToolRegistry(ALL_SPECS, read_only=read_only)
    logger.info(
        "Registered %d tools (of %d total)",
        registry.tool_count(),
        len(ALL_SPECS),
    )
    if read_only:
        print(
            f"Read-only mode ({registry.tool_count()} of {len(ALL_SPECS)} tools enabled)",
            file=sys.stderr,
        )
    set_registry(registry)

    # set_context() is called here rather than in the lifespan: under
    # `python -m context_sync.mcp.server` this module is __main__, and a
    # relative import from lifespan.py would update a second copy.
    async with server_lifespan(config_overrides=overrides) as lifespan_ctx:
        set_context(lifespan_ctx["context"])
        try:
            async with mcp.server.stdio.stdio_server() as (
                read_stream,
                write_stream,
            ):
                init_options = InitializationOptions(
                    server_name=SERVER_NAME,
                    server_version=__version__,
                    capabilities=server.get_capabilities(
                        notification_options=NotificationOptions(),
                        experimental_capabilities={},
                    ),
                )
                await server.run(read_stream, write_stream, init_options)
        finally:
            set_context(None)
            set_registry(None)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="context-sync-mcp",
        description="Context Sync MCP Server - sync .context into AI tool directories over MCP",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Serve the current directory
  context-sync-mcp

  # Serve another repository with a custom context root
  context-sync-mcp --repo-root /path/to/repo --context-dir docs/context

  # Only expose tools that never write
  context-sync-mcp --read-only

Note: This server uses stdio transport for JSON-RPC communication with MCP clients.
All user-facing messages are written to stderr. Do not pipe stdin/stdout manually.
        """,
    )
    parser.add_argument(
        "--repo-root",
        help="Repository root used when a tool call omits repo_path (default: current directory)",
    )
    parser.add_argument(
        "--context-dir",
        help="Context root relative to the repository (overrides CONTEXT_SYNC_DIR and config files)",
    )
    parser.add_argument(
        "--stale-after-days",
        type=int,
        help="Days before generated docs count as outdated (default: 7)",
    )
    parser.add_argument(
        "--read-only",
        action="store_true",
        help="Expose only tools that do not write to the repository",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--log-file",
        default="/tmp/context-sync-mcp.log",
        help="Log file path (default: /tmp/context-sync-mcp.log)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"context-sync-mcp version {__version__}",
    )
    return parser


def run() -> None:
    """Entry point that handles errors gracefully and parses CLI arguments."""
    args = build_parser().parse_args()

    config_overrides: dict = {}
    if args.repo_root:
        config_overrides["repo_root"] = args.repo_root
    if args.context_dir:
        config_overrides["context_dir"] = args.context_dir
    if args.stale_after_days is not None:
        config_overrides["stale_after_days"] = args.stale_after_days
    if args.read_only:
        config_overrides["read_only"] = True
    if args.debug:
        config_overrides["debug"] = True
    if args.log_file:
        config_overrides["log_file"] = args.log_file

    try:
        asyncio.run(main(config_overrides=config_overrides))
    except RuntimeError:
        # Error already printed to stderr by lifespan manager
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(0)


if __name__ == "__main__":
    run()
