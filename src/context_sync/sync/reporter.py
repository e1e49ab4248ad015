"""Sync report formatting functions.

Provides human-readable and machine-readable output for sync operations:

- ``format_sync_report`` -- full summary of one engine call.
- ``format_dry_run_preview`` -- dry-run preview grouped by target.
- ``format_quick_sync_result`` -- step-by-step quick sync summary.
- ``format_step_reports`` -- per-pair detail behind a quick sync.
- ``format_stats`` -- project statistics block.
- ``report_to_json`` / ``quick_sync_to_json`` -- structured dicts for MCP
  tool output and ``--json``.
"""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

from .models import StepStatus, SyncOutcome

if TYPE_CHECKING:
    from .models import ProjectStats, QuickSyncResult, SyncReport

_STEP_LABELS = {
    "agents": "Agents synced",
    "skills": "Skills exported",
    "commands": "Commands synced",
    "rules": "Rules exported",
    "docs": "Docs",
}

# ------------------------------------------------------------------
# Engine report
# ------------------------------------------------------------------


def format_sync_report(report: SyncReport) -> str:
    """Format a complete sync report as human-readable text.

    Sections are only included when they contain at least one result.
    Up-to-date pairs are summarised by count only.

    Args:
        report: The completed sync report.

    Returns:
        Multi-line formatted string.
    """
    lines: list[str] = []

    header = f"Sync report for '{report.category}'"
    if report.dry_run:
        header += " (DRY RUN)"
    lines.append(header)
    if report.source_dir:
        lines.append(f"Source: {report.source_dir}")
    lines.append(f"Started: {report.started_at}")
    if report.completed_at:
        lines.append(f"Completed: {report.completed_at}")
    lines.append("")

    lines.append(
        f"Synced {report.item_count} files: "
        f"{len(report.written)} written, "
        f"{len(report.skipped_exists)} up to date, "
        f"{len(report.failed)} errors"
    )
    lines.append("")

    if report.written:
        lines.append("Written:")
        for r in report.written:
            lines.append(f"  {r.source} -> {r.destination}")
        lines.append("")

    if report.failed:
        lines.append("Errors:")
        for r in report.failed:
            lines.append(f"  [{r.target}] {r.source}: {r.error}")
        lines.append("")

    return "\n".join(lines).rstrip()


def format_dry_run_preview(report: SyncReport) -> str:
    """Format a dry-run preview grouped by target.

    Each proposed write is shown as ``source -> destination``.
    """
    lines: list[str] = []
    lines.append("DRY RUN -- No changes will be made")
    lines.append(f"Category: {report.category}")
    lines.append("")

    groups: dict[str, list[tuple[str, str]]] = defaultdict(list)
    for r in report.skipped_dry_run:
        groups[r.target].append((r.source, r.destination))

    for target, pairs in groups.items():
        lines.append(f"[{target}]")
        for source, destination in pairs:
            lines.append(f"  {source} -> {destination}")
        lines.append("")

    unchanged = len(report.skipped_exists)
    if unchanged > 0:
        lines.append(f"Unchanged: {unchanged} files")
        lines.append("")

    if not groups:
        lines.append("No changes needed.")
        lines.append("")

    return "\n".join(lines).rstrip()


# ------------------------------------------------------------------
# Quick sync
# ------------------------------------------------------------------


def format_quick_sync_result(result: QuickSyncResult, dry_run: bool = False) -> str:
    """Format a quick sync result, one line per step."""
    lines: list[str] = []
    lines.append("Quick sync (DRY RUN)" if dry_run else "Quick sync")
    lines.append("")

    for outcome in result.steps:
        label = _STEP_LABELS.get(outcome.step, outcome.step)
        match outcome.status:
            case StepStatus.COMPLETED if outcome.step == "docs":
                text = outcome.detail
            case StepStatus.COMPLETED:
                text = str(outcome.count)
                if outcome.detail:
                    text += f" ({outcome.detail})"
            case StepStatus.FAILED:
                text = f"failed: {outcome.error}"
            case _:
                text = outcome.status.value.replace("_", " ")
                if outcome.detail:
                    text += f" ({outcome.detail})"
        lines.append(f"  {label}: {text}")

    if result.outdated_days is not None:
        lines.append("")
        lines.append(
            f"Docs are {result.outdated_days} days old; consider regenerating."
        )

    if result.errors:
        lines.append("")
        lines.append(f"Errors ({len(result.errors)}):")
        for error in result.errors:
            lines.append(f"  {error}")

    return "\n".join(lines).rstrip()


def format_step_reports(result: QuickSyncResult) -> str:
    """Format the per-pair engine reports behind a quick sync.

    Dry-run reports render as a preview of the proposed writes.
    """
    sections = [
        format_dry_run_preview(report) if report.dry_run else format_sync_report(report)
        for report in result.reports
    ]
    return "\n\n".join(sections)


def format_stats(stats: ProjectStats) -> str:
    """Format project statistics as an aligned block."""
    lines = [
        f"  Docs:     {stats.docs}",
        f"  Agents:   {stats.agents}",
        f"  Skills:   {stats.skills}",
        f"  Commands: {stats.commands}",
    ]
    if stats.days_old is not None:
        lines.append(f"  Docs age: {stats.days_old} days (outdated)")
    return "\n".join(lines)


# ------------------------------------------------------------------
# JSON output
# ------------------------------------------------------------------


def report_to_json(report: SyncReport) -> dict:
    """Convert a sync report to a JSON-serialisable dict.

    Returns:
        Dict with ``category``, ``dry_run``, ``summary`` counts and the
        per-pair ``results`` list.
    """
    summary = {outcome.value: 0 for outcome in SyncOutcome}
    for r in report.results:
        summary[r.outcome.value] += 1
    return {
        "category": report.category,
        "source_dir": report.source_dir,
        "dry_run": report.dry_run,
        "started_at": report.started_at,
        "completed_at": report.completed_at,
        "items": list(report.items),
        "summary": summary,
        "results": [r.model_dump(mode="json") for r in report.results],
    }


def quick_sync_to_json(result: QuickSyncResult, verbose: bool = False) -> dict:
    """Convert a quick sync result to a JSON-serialisable dict.

    With *verbose*, ``reports`` holds ``report_to_json`` for every engine
    call so each (file, target) pair is listed.
    """
    data = result.model_dump(mode="json", exclude={"steps"})
    data["steps"] = [
        step.model_dump(mode="json", exclude={"docs_state", "reports"})
        for step in result.steps
    ]
    if verbose:
        data["reports"] = [report_to_json(r) for r in result.reports]
    return data
