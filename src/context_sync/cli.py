"""Command-line interface for context sync.

Subcommands:

- ``sync``    -- copy ``.context`` into every selected tool directory.
- ``status``  -- item counts and docs freshness.
- ``init``    -- scaffold ``.context`` and seed predefined commands.
- ``targets`` -- print the target registry and presets.

Exit codes: 0 on success, 1 when a sync recorded errors, 2 on invalid
arguments, configuration or target names.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from . import __version__
from .config import Settings, load_effective_config
from .config_loader import ensure_config
from .errors import ContextSyncError
from .generators import SCAFFOLD_TYPES, InitService
from .logger import setup_logging
from .sync.models import QuickSyncOptions
from .sync.orchestrator import QuickSyncService
from .sync.reporter import (
    format_quick_sync_result,
    format_stats,
    format_step_reports,
    quick_sync_to_json,
)
from .sync.state import StateDetector
from .sync.targets import Category, list_targets, preset_names

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_SYNC_ERRORS = 1
EXIT_USAGE = 2


def _split_targets(value: str | None) -> list[str] | None:
    """Parse ``"claude,cursor"`` into a list; ``""`` means skip."""
    if value is None:
        return None
    return [part.strip() for part in value.split(",") if part.strip()]


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


async def _cmd_sync(args: argparse.Namespace, settings: Settings) -> int:
    options = QuickSyncOptions(
        skip_agents=args.skip_agents,
        skip_skills=args.skip_skills,
        skip_commands=args.skip_commands,
        skip_docs=args.skip_docs,
        force=args.force,
        dry_run=args.dry_run,
        agent_targets=_split_targets(args.agents) if args.agents is not None else settings.agent_targets,
        skill_targets=_split_targets(args.skills) if args.skills is not None else settings.skill_targets,
        command_targets=_split_targets(args.commands) if args.commands is not None else settings.command_targets,
        doc_targets=_split_targets(args.docs) if args.docs is not None else settings.doc_targets,
    )
    service = QuickSyncService(
        context_dir=settings.context_dir,
        stale_after_days=settings.stale_after_days,
    )
    result = await service.run(Path(args.repo), options)

    if args.json:
        print(json.dumps(quick_sync_to_json(result, verbose=args.verbose), indent=2))
    else:
        print(format_quick_sync_result(result, dry_run=options.dry_run))
        if args.verbose and result.reports:
            print()
            print(format_step_reports(result))
    return EXIT_SYNC_ERRORS if result.errors else EXIT_OK


async def _cmd_status(args: argparse.Namespace, settings: Settings) -> int:
    repo = Path(args.repo)
    service = QuickSyncService(
        context_dir=settings.context_dir,
        stale_after_days=settings.stale_after_days,
    )
    stats = await service.get_stats(repo)
    state = await StateDetector(
        repo,
        context_dir=settings.context_dir,
        stale_after_days=settings.stale_after_days,
    ).detect()

    if args.json:
        payload = {
            "stats": stats.model_dump(mode="json"),
            "freshness": state.model_dump(mode="json"),
        }
        print(json.dumps(payload, indent=2))
        return EXIT_OK

    print(f"Context: {repo.resolve() / settings.context_dir}")
    print(format_stats(stats))
    print(f"  Freshness: {state.state.value}")
    return EXIT_OK


async def _cmd_init(args: argparse.Namespace, settings: Settings) -> int:
    service = InitService(context_dir=settings.context_dir)
    result = await service.run(
        Path(args.repo),
        scaffold_type=args.type,
        docs_only=args.docs_only,
        agents_only=args.agents_only,
        force_commands=args.force_commands,
    )
    if args.write_config:
        print(f"Config: {ensure_config(cwd=Path(args.repo).resolve())}")
    print(f"Scaffolded {result.output_dir} ({result.scaffold_type})")
    for step in result.steps:
        line = f"  {step.step}: {step.status.value}"
        if step.count:
            line += f" ({step.count} files)"
        if step.error:
            line += f" -- {step.error}"
        print(line)
    return EXIT_OK


async def _cmd_targets(args: argparse.Namespace, settings: Settings) -> int:
    categories = [Category(args.category)] if args.category else list(Category)
    for category in categories:
        print(f"{category.value}:")
        for target in list_targets(category):
            print(
                f"  {target.key:<12} {target.path:<20} "
                f"{target.family.value:<9} {target.overwrite.value}"
            )
        print(f"  presets: {', '.join(preset_names(category))}")
    return EXIT_OK


_COMMANDS = {
    "sync": _cmd_sync,
    "status": _cmd_status,
    "init": _cmd_init,
    "targets": _cmd_targets,
}


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="context-sync",
        description="Sync a repository's .context tree into AI tool directories",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Sync everything into every tool directory
  context-sync sync

  # Preview, agents to Claude and GitHub only, no docs
  context-sync sync --dry-run --agents claude,github --skip-docs

  # Skip skills entirely by selecting no targets
  context-sync sync --skills ""

  # Scaffold .context with docs and agents, then seed commands
  context-sync init both
        """,
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--debug-format",
        choices=["text", "json"],
        default="text",
        help="Log line format (default: text)",
    )
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument(
        "--context-dir",
        help="Context root relative to the repository (overrides CONTEXT_SYNC_DIR and config files)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"context-sync version {__version__}",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    sync = sub.add_parser("sync", help="Copy .context into tool directories")
    sync.add_argument("repo", nargs="?", default=".", help="Repository root (default: .)")
    sync.add_argument("--skip-agents", action="store_true")
    sync.add_argument("--skip-skills", action="store_true")
    sync.add_argument("--skip-commands", action="store_true")
    sync.add_argument("--skip-docs", action="store_true", help="Skip rules export and the freshness check")
    sync.add_argument("--force", action="store_true", help="Overwrite generation-once files")
    sync.add_argument("--dry-run", action="store_true", help="Report counts without writing")
    for flag, category in (
        ("--agents", Category.AGENTS),
        ("--skills", Category.SKILLS),
        ("--commands", Category.COMMANDS),
        ("--docs", Category.DOCS),
    ):
        sync.add_argument(
            flag,
            metavar="NAMES",
            help=f"Comma-separated {category.value} targets or presets ({', '.join(preset_names(category))})",
        )
    sync.add_argument("--json", action="store_true", help="Print the result as JSON")
    sync.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Also list every file written or failed, per target",
    )

    status = sub.add_parser("status", help="Show item counts and docs freshness")
    status.add_argument("repo", nargs="?", default=".", help="Repository root (default: .)")
    status.add_argument(
        "--stale-after-days",
        type=int,
        help="Days before docs count as outdated (default: 7)",
    )
    status.add_argument("--json", action="store_true", help="Print the result as JSON")

    init = sub.add_parser("init", help="Scaffold .context and seed commands")
    init.add_argument("type", nargs="?", default="both", help=f"Scaffold type: {', '.join(SCAFFOLD_TYPES)}")
    init.add_argument("--repo", default=".", help="Repository root (default: .)")
    init.add_argument("--docs-only", action="store_true")
    init.add_argument("--agents-only", action="store_true")
    init.add_argument("--force-commands", action="store_true", help="Overwrite predefined command files")
    init.add_argument(
        "--write-config",
        action="store_true",
        help="Also write a starter .context_sync/config.yml",
    )

    targets = sub.add_parser("targets", help="List sync targets and presets")
    targets.add_argument("category", nargs="?", choices=[c.value for c in Category])

    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``context-sync`` console script."""
    args = build_parser().parse_args(argv)

    try:
        settings, unified = load_effective_config(
            {
                "context_dir": args.context_dir,
                "stale_after_days": getattr(args, "stale_after_days", None),
                "debug": args.debug,
            }
        )
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_USAGE

    setup_logging(
        mode="cli",
        debug=settings.debug,
        log_file=args.log_file or unified.logging.file,
        debug_format=args.debug_format,
        level=unified.logging.level,
    )
    logger.debug("Running %s (context dir: %s)", args.command, settings.context_dir)

    try:
        return asyncio.run(_COMMANDS[args.command](args, settings))
    except ContextSyncError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
