"""Context sync core.

Public API for replicating canonical markdown context (agents, skills,
commands, docs) from a single source tree into the directories each
tool integration reads.

Architecture
------------
The source of truth is ``<repo>/.context/<category>/*.md``.  Each tool
gets a *copy*, reshaped by its target's format family.  Copies are
one-way: the source is never written.

Modules:

- ``targets``      -- Static registry of targets and presets, resolution.
- ``engine``       -- ``SyncEngine``: per (file, target) replication.
- ``state``        -- ``StateDetector``: docs freshness classification.
- ``orchestrator`` -- ``QuickSyncService``: one pass per category.
- ``models``       -- pydantic data contracts.
- ``reporter``     -- Human-readable and JSON report formatting.

Usage example
-------------
::

    from pathlib import Path
    from context_sync.sync import (
        QuickSyncOptions,
        QuickSyncService,
        format_quick_sync_result,
    )

    service = QuickSyncService(context_dir=".context")

    # Dry-run first to preview counts
    preview = await service.run(Path("."), QuickSyncOptions(dry_run=True))

    # Sync agents to Claude only, leave skills alone
    result = await service.run(
        Path("."),
        QuickSyncOptions(agent_targets=["claude"], skip_skills=True),
    )
    print(format_quick_sync_result(result))
"""

from .engine import SyncEngine, list_content_items
from .models import (
    ContentItem,
    DocsState,
    Freshness,
    GenerateResult,
    ProjectStats,
    QuickSyncOptions,
    QuickSyncResult,
    StepOutcome,
    StepStatus,
    SyncOutcome,
    SyncReport,
    SyncResult,
)
from .orchestrator import QuickSyncService, fold_outcomes
from .reporter import (
    format_dry_run_preview,
    format_quick_sync_result,
    format_stats,
    format_step_reports,
    format_sync_report,
    quick_sync_to_json,
    report_to_json,
)
from .state import StateDetector, write_generation_marker
from .targets import (
    Category,
    OverwritePolicy,
    ResolvedTarget,
    SyncTarget,
    list_targets,
    resolve_targets,
)

__all__ = [
    "Category",
    "ContentItem",
    "DocsState",
    "Freshness",
    "GenerateResult",
    "OverwritePolicy",
    "ProjectStats",
    "QuickSyncOptions",
    "QuickSyncResult",
    "QuickSyncService",
    "ResolvedTarget",
    "StateDetector",
    "StepOutcome",
    "StepStatus",
    "SyncEngine",
    "SyncOutcome",
    "SyncReport",
    "SyncResult",
    "SyncTarget",
    "fold_outcomes",
    "format_dry_run_preview",
    "format_quick_sync_result",
    "format_stats",
    "format_step_reports",
    "format_sync_report",
    "list_content_items",
    "list_targets",
    "quick_sync_to_json",
    "report_to_json",
    "resolve_targets",
    "write_generation_marker",
]
