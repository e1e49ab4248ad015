"""MCP tool handlers for context sync.

Defines five tools:

- ``context_quick_sync`` -- sync every category to its tool targets.
- ``context_status`` -- item counts and docs freshness.
- ``context_init`` -- scaffold the context directory.
- ``context_init_commands`` -- seed the predefined command files.
- ``context_list_targets`` -- registered targets and presets.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import mcp.types as types

from ...generators import InitService, generate_commands
from ...sync.models import QuickSyncOptions
from ...sync.orchestrator import QuickSyncService
from ...sync.reporter import (
    format_quick_sync_result,
    format_stats,
    format_step_reports,
    quick_sync_to_json,
)
from ...sync.state import StateDetector
from ...sync.targets import Category, list_targets, preset_names
from .errors import build_error_response
from .registry import ServerContext, ToolSpec

logger = logging.getLogger(__name__)

_REPO_PATH_PROPERTY = {
    "type": "string",
    "description": "Repository root (absolute path). Defaults to the server's working directory.",
}


def _target_list_property(category: Category) -> dict:
    return {
        "type": "array",
        "items": {"type": "string"},
        "description": (
            f"{category.value.capitalize()} targets or presets "
            f"({', '.join(preset_names(category))}). Omit for all, [] to skip."
        ),
    }


# ---------------------------------------------------------------------------
# Tool definitions
# ---------------------------------------------------------------------------


QUICK_SYNC_TOOL = types.Tool(
    name="context_quick_sync",
    description=(
        "Copy .context agents, skills, commands and docs into each AI tool's "
        "directory (.claude, .cursor, .github, .agent, ...). Reports counts "
        "per category and whether docs are outdated."
    ),
    annotations=types.ToolAnnotations(
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "repo_path": _REPO_PATH_PROPERTY,
            "skip_agents": {"type": "boolean", "default": False},
            "skip_skills": {"type": "boolean", "default": False},
            "skip_commands": {"type": "boolean", "default": False},
            "skip_docs": {"type": "boolean", "default": False},
            "force": {
                "type": "boolean",
                "default": False,
                "description": "Overwrite generation-once files",
            },
            "dry_run": {
                "type": "boolean",
                "default": False,
                "description": "Preview counts without writing",
            },
            "verbose": {
                "type": "boolean",
                "default": False,
                "description": "Include the per-file result for every target",
            },
            "agent_targets": _target_list_property(Category.AGENTS),
            "skill_targets": _target_list_property(Category.SKILLS),
            "command_targets": _target_list_property(Category.COMMANDS),
            "doc_targets": _target_list_property(Category.DOCS),
        },
        "required": [],
    },
)

STATUS_TOOL = types.Tool(
    name="context_status",
    description="Show context item counts per category and whether generated docs are outdated.",
    annotations=types.ToolAnnotations(
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
    inputSchema={
        "type": "object",
        "properties": {"repo_path": _REPO_PATH_PROPERTY},
        "required": [],
    },
)

INIT_TOOL = types.Tool(
    name="context_init",
    description=(
        "Create the .context directory structure (docs, agents, skills, "
        "commands) and seed the predefined commands."
    ),
    annotations=types.ToolAnnotations(
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "repo_path": _REPO_PATH_PROPERTY,
            "type": {
                "type": "string",
                "enum": ["docs", "agents", "both"],
                "default": "both",
                "description": "What to scaffold",
            },
            "force_commands": {
                "type": "boolean",
                "default": False,
                "description": "Overwrite existing predefined command files",
            },
        },
        "required": [],
    },
)

INIT_COMMANDS_TOOL = types.Tool(
    name="context_init_commands",
    description="Write the predefined slash commands into .context/commands (existing files are kept unless force).",
    annotations=types.ToolAnnotations(
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "repo_path": _REPO_PATH_PROPERTY,
            "force": {"type": "boolean", "default": False},
            "dry_run": {"type": "boolean", "default": False},
        },
        "required": [],
    },
)

LIST_TARGETS_TOOL = types.Tool(
    name="context_list_targets",
    description="List sync targets (key, destination, format) and presets for each category.",
    annotations=types.ToolAnnotations(
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "category": {
                "type": "string",
                "enum": [c.value for c in Category],
                "description": "Only list this category",
            },
        },
        "required": [],
    },
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _repo_root(ctx: ServerContext, args: dict[str, Any]) -> Path:
    repo_path = args.get("repo_path")
    return Path(repo_path).expanduser() if repo_path else ctx.repo_root


def _text_result(text: str, structured: dict | None = None) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text)],
        structuredContent=structured,
    )


def _selection(args: dict[str, Any], key: str, default: list[str] | None) -> list[str] | None:
    if key not in args or args[key] is None:
        return default
    value = args[key]
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return list(value)


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


async def _handle_quick_sync(
    ctx: ServerContext, args: dict[str, Any]
) -> types.CallToolResult:
    """Handle the ``context_quick_sync`` tool."""
    settings = ctx.settings
    options = QuickSyncOptions(
        skip_agents=bool(args.get("skip_agents", False)),
        skip_skills=bool(args.get("skip_skills", False)),
        skip_commands=bool(args.get("skip_commands", False)),
        skip_docs=bool(args.get("skip_docs", False)),
        force=bool(args.get("force", False)),
        dry_run=bool(args.get("dry_run", False)),
        agent_targets=_selection(args, "agent_targets", settings.agent_targets),
        skill_targets=_selection(args, "skill_targets", settings.skill_targets),
        command_targets=_selection(args, "command_targets", settings.command_targets),
        doc_targets=_selection(args, "doc_targets", settings.doc_targets),
    )
    repo_root = _repo_root(ctx, args)
    if not repo_root.is_dir():
        return build_error_response(
            "not_found",
            f"Repository path does not exist: {repo_root}",
            "Pass repo_path as an absolute path to an existing repository.",
        )

    service = QuickSyncService(
        context_dir=settings.context_dir,
        stale_after_days=settings.stale_after_days,
    )
    result = await service.run(repo_root, options)
    verbose = bool(args.get("verbose", False))
    text = format_quick_sync_result(result, dry_run=options.dry_run)
    if verbose and result.reports:
        text += "\n\n" + format_step_reports(result)
    return _text_result(text, quick_sync_to_json(result, verbose=verbose))


async def _handle_status(
    ctx: ServerContext, args: dict[str, Any]
) -> types.CallToolResult:
    """Handle the ``context_status`` tool."""
    settings = ctx.settings
    repo_root = _repo_root(ctx, args)
    service = QuickSyncService(
        context_dir=settings.context_dir,
        stale_after_days=settings.stale_after_days,
    )
    stats = await service.get_stats(repo_root)
    state = await StateDetector(
        repo_root,
        context_dir=settings.context_dir,
        stale_after_days=settings.stale_after_days,
    ).detect()

    lines = [
        f"Context status for {repo_root / settings.context_dir}",
        format_stats(stats),
        f"  Freshness: {state.state.value}",
    ]
    structured = {
        "stats": stats.model_dump(mode="json"),
        "freshness": state.model_dump(mode="json"),
    }
    return _text_result("\n".join(lines), structured)


async def _handle_init(
    ctx: ServerContext, args: dict[str, Any]
) -> types.CallToolResult:
    """Handle the ``context_init`` tool."""
    service = InitService(context_dir=ctx.settings.context_dir)
    result = await service.run(
        _repo_root(ctx, args),
        scaffold_type=args.get("type"),
        force_commands=bool(args.get("force_commands", False)),
    )
    lines = [f"Scaffolded {result.output_dir} ({result.scaffold_type})"]
    for step in result.steps:
        line = f"  {step.step}: {step.status.value}"
        if step.count:
            line += f" ({step.count} files)"
        if step.error:
            line += f" -- {step.error}"
        lines.append(line)
    return _text_result("\n".join(lines), result.model_dump(mode="json"))


async def _handle_init_commands(
    ctx: ServerContext, args: dict[str, Any]
) -> types.CallToolResult:
    """Handle the ``context_init_commands`` tool."""
    context_root = _repo_root(ctx, args).resolve() / ctx.settings.context_dir
    result = await generate_commands(
        context_root,
        force=bool(args.get("force", False)),
        dry_run=bool(args.get("dry_run", False)),
    )
    lines = [f"Commands directory: {result.commands_dir}"]
    if result.generated:
        lines.append(f"  Generated: {', '.join(result.generated)}")
    if result.skipped:
        lines.append(f"  Skipped (already present): {', '.join(result.skipped)}")
    if result.failed:
        lines.append(f"  Failed: {'; '.join(result.failed)}")
    return _text_result("\n".join(lines), result.model_dump(mode="json"))


async def _handle_list_targets(
    ctx: ServerContext, args: dict[str, Any]
) -> types.CallToolResult:
    """Handle the ``context_list_targets`` tool."""
    requested = args.get("category")
    categories = [Category(requested)] if requested else list(Category)

    lines: list[str] = []
    structured: dict[str, Any] = {}
    for category in categories:
        targets = list_targets(category)
        lines.append(f"{category.value}:")
        for target in targets:
            lines.append(
                f"  {target.key:<12} {target.path:<20} {target.family.value}"
            )
        lines.append(f"  presets: {', '.join(preset_names(category))}")
        structured[category.value] = {
            "targets": [t.model_dump(mode="json") for t in targets],
            "presets": preset_names(category),
        }
    return _text_result("\n".join(lines), structured)


CONTEXT_SPECS: list[ToolSpec] = [
    ToolSpec(tool=QUICK_SYNC_TOOL, writes=True, handler=_handle_quick_sync),
    ToolSpec(tool=STATUS_TOOL, writes=False, handler=_handle_status),
    ToolSpec(tool=INIT_TOOL, writes=True, handler=_handle_init),
    ToolSpec(tool=INIT_COMMANDS_TOOL, writes=True, handler=_handle_init_commands),
    ToolSpec(tool=LIST_TARGETS_TOOL, writes=False, handler=_handle_list_targets),
]

CONTEXT_TOOLS: list[types.Tool] = [spec.tool for spec in CONTEXT_SPECS]
