"""Pydantic models for the context sync core.

Defines the data contracts shared by the sync modules:

- ``ContentItem``: One markdown file read from a source directory.
- ``SyncOutcome``: Enum of per-pair outcomes.
- ``SyncResult``: Outcome of syncing one item into one target.
- ``SyncReport``: Aggregate results for one engine call.
- ``StepStatus`` / ``StepOutcome``: Typed outcome of one orchestrator step.
- ``QuickSyncOptions`` / ``QuickSyncResult``: Orchestrator input/output.
- ``Freshness`` / ``DocsState``: State detector classification.
- ``ProjectStats``, ``GenerateResult``, ``ScaffoldResult``.

All models are frozen (immutable) for safety.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class ContentItem(BaseModel):
    """A markdown document read from a canonical source directory.

    Attributes:
        filename: Base filename (kebab-case, ``.md``).
        raw: Exact file bytes, used for verbatim mirroring.
        text: Decoded content, used by transforming formats.
        front_matter: Parsed leading front matter (empty if none).
    """

    filename: str
    raw: bytes
    text: str
    front_matter: dict = {}

    model_config = {"frozen": True}


class SyncOutcome(str, Enum):
    """Possible outcomes for one (item, target) pair."""

    WRITTEN = "written"
    SKIPPED_EXISTS = "skipped_exists"
    SKIPPED_DRY_RUN = "skipped_dry_run"
    FAILED = "failed"


class SyncResult(BaseModel):
    """Result of syncing one item into one target.

    Attributes:
        category: Content category (``agents``, ``commands``...).
        target: Target key the item was synced to.
        source: Source filename.
        destination: Absolute destination path.
        outcome: What happened.
        error: Failure reason when ``outcome`` is ``FAILED``.
    """

    category: str
    target: str
    source: str
    destination: str
    outcome: SyncOutcome
    error: str | None = None

    model_config = {"frozen": True}

    @property
    def success(self) -> bool:
        return self.outcome != SyncOutcome.FAILED


class SyncReport(BaseModel):
    """Aggregate report for one sync engine call.

    Attributes:
        category: Content category that was synced.
        source_dir: Source directory that was read.
        dry_run: Whether writes were suppressed.
        items: Source filenames found, in processing order.
        results: Per-pair results, ordered by target then item.
        started_at: ISO 8601 timestamp when sync started.
        completed_at: ISO 8601 timestamp when sync completed.
    """

    category: str
    source_dir: str
    dry_run: bool = False
    items: list[str] = []
    results: list[SyncResult] = []
    started_at: str
    completed_at: str | None = None

    model_config = {"frozen": True}

    def _with(self, outcome: SyncOutcome) -> list[SyncResult]:
        return [r for r in self.results if r.outcome == outcome]

    @property
    def written(self) -> list[SyncResult]:
        """Results where the destination was written."""
        return self._with(SyncOutcome.WRITTEN)

    @property
    def skipped_exists(self) -> list[SyncResult]:
        """Results left untouched because the destination already existed."""
        return self._with(SyncOutcome.SKIPPED_EXISTS)

    @property
    def skipped_dry_run(self) -> list[SyncResult]:
        """Results that would have been written outside dry-run."""
        return self._with(SyncOutcome.SKIPPED_DRY_RUN)

    @property
    def failed(self) -> list[SyncResult]:
        """Results where the write failed."""
        return self._with(SyncOutcome.FAILED)

    @property
    def planned_writes(self) -> int:
        """Number of writes performed, or that a real run would perform."""
        return len(self.written) + len(self.skipped_dry_run)

    @property
    def item_count(self) -> int:
        return len(self.items)

    def error_messages(self) -> list[str]:
        """Flatten failures into ``"<category>/<target>: <file>: <reason>"`` strings."""
        return [
            f"{r.category}/{r.target}: {r.source}: {r.error}"
            for r in self.failed
        ]

    def summary(self) -> str:
        """Format a human-readable summary of the sync run.

        Returns:
            Multi-line summary string with counts by outcome.
        """
        lines = [
            f"Sync report for '{self.category}'"
            + (" (dry run)" if self.dry_run else ""),
            f"  Items:          {self.item_count}",
            f"  Written:        {len(self.written)}",
            f"  Would write:    {len(self.skipped_dry_run)}",
            f"  Up to date:     {len(self.skipped_exists)}",
            f"  Failed:         {len(self.failed)}",
            f"  Total:          {len(self.results)}",
        ]
        return "\n".join(lines)


class GenerateResult(BaseModel):
    """Result of seeding a source directory from built-in templates.

    Attributes:
        commands_dir: Directory that was seeded.
        generated: Filenames written (or that would be, on dry-run).
        skipped: Filenames left alone because they already existed.
        failed: ``"<file>: <reason>"`` for templates that could not be
            written.
    """

    commands_dir: str
    generated: list[str] = []
    skipped: list[str] = []
    failed: list[str] = []

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Freshness
# ---------------------------------------------------------------------------


class Freshness(str, Enum):
    """Documentation freshness classification."""

    FRESH = "fresh"
    OUTDATED = "outdated"
    UNKNOWN = "unknown"


class StateDetails(BaseModel):
    """Supporting data for a freshness classification.

    Attributes:
        days_behind: Whole days since the last generation marker.
        last_generated: ISO 8601 timestamp of the marker.
        marker: Path that supplied the timestamp.
        threshold_days: Days after which docs count as outdated.
    """

    days_behind: int | None = None
    last_generated: str | None = None
    marker: str | None = None
    threshold_days: int

    model_config = {"frozen": True}


class DocsState(BaseModel):
    """Result of ``StateDetector.detect``."""

    state: Freshness
    details: StateDetails

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------


class StepStatus(str, Enum):
    """How an orchestrator or scaffold step finished."""

    COMPLETED = "completed"
    SKIPPED = "skipped"
    NOTHING_TO_SYNC = "nothing_to_sync"
    UNAVAILABLE = "unavailable"
    FAILED = "failed"


class StepOutcome(BaseModel):
    """Typed outcome of one step.

    Attributes:
        step: Step name (``agents``, ``skills``, ``commands``, ``rules``,
            ``docs``).
        status: How the step finished.
        count: Items processed (not successful writes).
        error: Failure reason when ``status`` is ``FAILED`` or
            ``UNAVAILABLE``.
        file_errors: Per-file failures recorded while the step completed.
        detail: Short human-readable note.
        docs_state: Freshness classification (docs step only).
        reports: Engine reports behind a completed sync step.
    """

    step: str
    status: StepStatus
    count: int = 0
    error: str | None = None
    file_errors: list[str] = []
    detail: str = ""
    docs_state: DocsState | None = None
    reports: list[SyncReport] = []

    model_config = {"frozen": True}


class QuickSyncOptions(BaseModel):
    """Options for ``QuickSyncService.run``.

    Target lists: ``None`` selects the ``all`` preset; an empty list
    skips the step just like its ``skip_*`` flag.
    """

    skip_agents: bool = False
    skip_skills: bool = False
    skip_commands: bool = False
    skip_docs: bool = False
    force: bool = False
    dry_run: bool = False
    agent_targets: list[str] | None = None
    skill_targets: list[str] | None = None
    command_targets: list[str] | None = None
    doc_targets: list[str] | None = None

    model_config = {"frozen": True}


class QuickSyncResult(BaseModel):
    """Aggregate result of one quick sync run."""

    agents_synced: int = 0
    skills_exported: int = 0
    commands_synced: int = 0
    rules_exported: int = 0
    docs_updated: bool = False
    outdated_days: int | None = None
    errors: list[str] = []
    steps: list[StepOutcome] = []

    model_config = {"frozen": True}

    @property
    def reports(self) -> list[SyncReport]:
        """Engine reports of every step, in step order."""
        return [report for step in self.steps for report in step.reports]


class ProjectStats(BaseModel):
    """Counts of context items per category."""

    docs: int = 0
    agents: int = 0
    skills: int = 0
    commands: int = 0
    days_old: int | None = None

    model_config = {"frozen": True}


class ScaffoldResult(BaseModel):
    """Result of ``InitService.run``."""

    output_dir: str
    scaffold_type: str
    docs_generated: int = 0
    agents_generated: int = 0
    skills_generated: int = 0
    commands_generated: int = 0
    steps: list[StepOutcome] = []

    model_config = {"frozen": True}
