"""Tests for sync reporter formatting functions.

Covers:
- format_sync_report with various result combinations
- format_dry_run_preview grouping by target
- format_quick_sync_result step lines, outdated notice and errors
- format_step_reports per-pair detail
- format_stats
- report_to_json / quick_sync_to_json structure
"""

from __future__ import annotations

import json

from context_sync.sync.models import (
    DocsState,
    Freshness,
    ProjectStats,
    QuickSyncResult,
    StateDetails,
    StepOutcome,
    StepStatus,
    SyncOutcome,
    SyncReport,
    SyncResult,
)
from context_sync.sync.reporter import (
    format_dry_run_preview,
    format_quick_sync_result,
    format_stats,
    format_step_reports,
    format_sync_report,
    quick_sync_to_json,
    report_to_json,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_report(
    results: list[SyncResult] | None = None,
    dry_run: bool = False,
    items: list[str] | None = None,
) -> SyncReport:
    """Build a SyncReport with sensible defaults."""
    return SyncReport(
        category="commands",
        source_dir="/repo/.context/commands",
        dry_run=dry_run,
        items=items or [],
        results=results or [],
        started_at="2026-02-07T10:00:00Z",
        completed_at="2026-02-07T10:01:00Z",
    )


def _result(
    outcome: SyncOutcome,
    source: str = "review.md",
    target: str = "cursor",
    error: str | None = None,
) -> SyncResult:
    return SyncResult(
        category="commands",
        target=target,
        source=source,
        destination=f"/repo/.{target}/{source}",
        outcome=outcome,
        error=error,
    )


# ---------------------------------------------------------------------------
# format_sync_report
# ---------------------------------------------------------------------------


class TestFormatSyncReport:
    def test_written_and_failed_sections(self):
        report = _make_report(
            [
                _result(SyncOutcome.WRITTEN, "a.md"),
                _result(SyncOutcome.SKIPPED_EXISTS, "b.md"),
                _result(SyncOutcome.FAILED, "c.md", error="permission denied"),
            ],
            items=["a.md", "b.md", "c.md"],
        )

        text = format_sync_report(report)

        assert text.startswith("Sync report for 'commands'")
        assert "Synced 3 files: 1 written, 1 up to date, 1 errors" in text
        assert "a.md -> /repo/.cursor/a.md" in text
        assert "[cursor] c.md: permission denied" in text
        assert "b.md ->" not in text

    def test_empty_report_is_concise(self):
        text = format_sync_report(_make_report())

        assert "Written:" not in text
        assert "Errors:" not in text
        assert "Synced 0 files" in text

    def test_dry_run_header(self):
        assert "(DRY RUN)" in format_sync_report(_make_report(dry_run=True))


# ---------------------------------------------------------------------------
# format_dry_run_preview
# ---------------------------------------------------------------------------


class TestFormatDryRunPreview:
    def test_grouped_by_target(self):
        report = _make_report(
            [
                _result(SyncOutcome.SKIPPED_DRY_RUN, "a.md", "cursor"),
                _result(SyncOutcome.SKIPPED_DRY_RUN, "a.md", "antigravity"),
                _result(SyncOutcome.SKIPPED_EXISTS, "b.md", "cursor"),
            ],
            dry_run=True,
        )

        text = format_dry_run_preview(report)

        assert text.startswith("DRY RUN -- No changes will be made")
        assert text.index("[cursor]") < text.index("[antigravity]")
        assert "Unchanged: 1 files" in text

    def test_nothing_to_do(self):
        report = _make_report([_result(SyncOutcome.SKIPPED_EXISTS)], dry_run=True)

        assert "No changes needed." in format_dry_run_preview(report)


# ---------------------------------------------------------------------------
# format_quick_sync_result
# ---------------------------------------------------------------------------


def _quick_result(**overrides) -> QuickSyncResult:
    steps = [
        StepOutcome(step="agents", status=StepStatus.COMPLETED, count=2, detail="targets: claude"),
        StepOutcome(step="skills", status=StepStatus.SKIPPED, detail="skip flag set"),
        StepOutcome(step="commands", status=StepStatus.FAILED, error="commands: boom"),
        StepOutcome(step="rules", status=StepStatus.NOTHING_TO_SYNC),
        StepOutcome(
            step="docs",
            status=StepStatus.COMPLETED,
            detail="outdated (9 days since generation)",
            docs_state=DocsState(
                state=Freshness.OUTDATED,
                details=StateDetails(days_behind=9, threshold_days=7),
            ),
        ),
    ]
    fields = {
        "agents_synced": 2,
        "outdated_days": 9,
        "errors": ["commands: boom"],
        "steps": steps,
    }
    fields.update(overrides)
    return QuickSyncResult(**fields)


class TestFormatQuickSyncResult:
    def test_one_line_per_step(self):
        text = format_quick_sync_result(_quick_result())

        assert "  Agents synced: 2 (targets: claude)" in text
        assert "  Skills exported: skipped (skip flag set)" in text
        assert "  Commands synced: failed: commands: boom" in text
        assert "  Rules exported: nothing to sync" in text
        assert "  Docs: outdated (9 days since generation)" in text

    def test_outdated_notice_and_errors(self):
        text = format_quick_sync_result(_quick_result())

        assert "Docs are 9 days old; consider regenerating." in text
        assert "Errors (1):" in text

    def test_dry_run_header(self):
        text = format_quick_sync_result(QuickSyncResult(), dry_run=True)

        assert text == "Quick sync (DRY RUN)"


class TestFormatStepReports:
    def test_one_section_per_report(self):
        commands = _make_report(
            [
                _result(SyncOutcome.WRITTEN, "review.md"),
                _result(SyncOutcome.FAILED, "plan.md", error="denied"),
            ],
            items=["plan.md", "review.md"],
        )
        step = StepOutcome(step="commands", status=StepStatus.COMPLETED, count=2, reports=[commands])

        text = format_step_reports(QuickSyncResult(steps=[step]))

        assert text.startswith("Sync report for 'commands'")
        assert "  review.md -> /repo/.cursor/review.md" in text
        assert "  [cursor] plan.md: denied" in text

    def test_dry_run_reports_render_as_preview(self):
        preview = _make_report([_result(SyncOutcome.SKIPPED_DRY_RUN)], dry_run=True)
        step = StepOutcome(step="commands", status=StepStatus.COMPLETED, reports=[preview])

        text = format_step_reports(QuickSyncResult(steps=[step]))

        assert text.startswith("DRY RUN -- No changes will be made")
        assert "[cursor]" in text

    def test_no_reports(self):
        assert format_step_reports(_quick_result()) == ""


# ---------------------------------------------------------------------------
# format_stats
# ---------------------------------------------------------------------------


class TestFormatStats:
    def test_counts(self):
        text = format_stats(ProjectStats(docs=1, agents=2, skills=3, commands=4))

        assert "Agents:   2" in text
        assert "Docs age" not in text

    def test_outdated_age(self):
        text = format_stats(ProjectStats(days_old=12))

        assert text.endswith("Docs age: 12 days (outdated)")


# ---------------------------------------------------------------------------
# JSON output
# ---------------------------------------------------------------------------


class TestJsonOutput:
    def test_report_summary_counts_every_outcome(self):
        report = _make_report(
            [
                _result(SyncOutcome.WRITTEN, "a.md"),
                _result(SyncOutcome.WRITTEN, "b.md"),
                _result(SyncOutcome.FAILED, "c.md", error="x"),
            ],
            items=["a.md", "b.md", "c.md"],
        )

        data = report_to_json(report)

        assert data["summary"] == {
            "written": 2,
            "skipped_exists": 0,
            "skipped_dry_run": 0,
            "failed": 1,
        }
        assert data["results"][2]["error"] == "x"
        assert data["items"] == ["a.md", "b.md", "c.md"]
        json.dumps(data)

    def test_quick_sync_json(self):
        data = quick_sync_to_json(_quick_result())

        assert data["agents_synced"] == 2
        assert data["outdated_days"] == 9
        assert [s["status"] for s in data["steps"]] == [
            "completed",
            "skipped",
            "failed",
            "nothing_to_sync",
            "completed",
        ]
        assert "docs_state" not in data["steps"][-1]
        assert "reports" not in data
        assert "reports" not in data["steps"][0]
        json.dumps(data)

    def test_quick_sync_json_verbose_lists_pairs(self):
        report = _make_report([_result(SyncOutcome.WRITTEN)], items=["review.md"])
        step = StepOutcome(step="commands", status=StepStatus.COMPLETED, count=1, reports=[report])

        data = quick_sync_to_json(QuickSyncResult(commands_synced=1, steps=[step]), verbose=True)

        assert len(data["reports"]) == 1
        assert data["reports"][0]["summary"]["written"] == 1
        assert data["reports"][0]["results"][0]["source"] == "review.md"
        json.dumps(data)
