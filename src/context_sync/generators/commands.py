"""Seed ``<context>/commands`` with the predefined command templates.

Templates are written through the sync engine with an ``if_absent``
target, so user edits to an existing command file survive re-runs
unless ``force`` is set.
"""

import logging
from pathlib import Path

from context_sync.sync.engine import SyncEngine
from context_sync.sync.models import ContentItem, GenerateResult
from context_sync.sync.targets import Category, seed_target

from .templates import PREDEFINED_COMMANDS, CommandTemplate

logger = logging.getLogger(__name__)


def _to_item(template: CommandTemplate) -> ContentItem:
    text = template.content.rstrip() + "\n"
    return ContentItem(
        filename=template.filename,
        raw=text.encode("utf-8"),
        text=text,
    )


async def generate_commands(
    context_dir: Path,
    force: bool = False,
    dry_run: bool = False,
    templates: tuple[CommandTemplate, ...] = PREDEFINED_COMMANDS,
) -> GenerateResult:
    """Write the command templates into ``<context_dir>/commands``.

    Args:
        context_dir: Absolute context root (``<repo>/.context``).
        force: Overwrite command files that already exist.
        dry_run: Report what would be written without writing.
        templates: Templates to seed (defaults to the built-ins).

    Returns:
        ``GenerateResult`` listing generated and skipped filenames.
    """
    commands_dir = context_dir / Category.COMMANDS.value
    report = await SyncEngine(Category.COMMANDS).sync_items(
        [_to_item(t) for t in templates],
        [seed_target(commands_dir)],
        force=force,
        dry_run=dry_run,
    )

    result = GenerateResult(
        commands_dir=str(commands_dir),
        generated=[r.source for r in report.written + report.skipped_dry_run],
        skipped=[r.source for r in report.skipped_exists],
        failed=[f"{r.source}: {r.error}" for r in report.failed],
    )
    logger.info(
        "Seeded %s: %d generated, %d skipped, %d failed",
        commands_dir,
        len(result.generated),
        len(result.skipped),
        len(result.failed),
    )
    return result
