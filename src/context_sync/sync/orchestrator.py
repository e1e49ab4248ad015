"""Quick sync orchestration across content categories.

``QuickSyncService.run`` drives one pass per category against the
selected targets:

1. ``agents``   -- ``<context>/agents``   -> agent targets (mirror).
2. ``skills``   -- ``<context>/skills``   -> skill targets.
3. ``commands`` -- ``<context>/commands`` -> command targets.  Mirror
   targets go through one batched engine call; workflow targets through
   the transformer path.  Both share a single source snapshot.
4. ``rules``    -- ``<context>/docs``     -> doc rule targets.
5. ``docs``     -- freshness check through ``StateDetector``.

Every step returns a ``StepOutcome``.  An exception inside a step is
recorded as a ``FAILED`` outcome and the remaining steps still run.  The
``QuickSyncResult`` is folded from the outcomes once all steps finished.
Target names are validated up front, so an unknown name fails the whole
run before any file is written.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from pathlib import Path

from context_sync.core.async_utils import run_sync
from context_sync.file_handler import count_markdown_files, path_exists_async
from context_sync.formats import is_verbatim

from .engine import SyncEngine, list_content_items
from .models import (
    Freshness,
    ProjectStats,
    QuickSyncOptions,
    QuickSyncResult,
    StepOutcome,
    StepStatus,
    SyncReport,
)
from .state import DEFAULT_CONTEXT_DIR, DEFAULT_STALE_AFTER_DAYS, StateDetector
from .targets import Category, ResolvedTarget, resolve_targets

logger = logging.getLogger(__name__)

Step = Callable[[Path, QuickSyncOptions], Awaitable[StepOutcome]]

STEP_AGENTS = "agents"
STEP_SKILLS = "skills"
STEP_COMMANDS = "commands"
STEP_RULES = "rules"
STEP_DOCS = "docs"


class QuickSyncService:
    """Sync every content category of a project in one call.

    Args:
        context_dir: Context root, relative to the repository root.
        stale_after_days: Freshness threshold passed to ``StateDetector``.
    """

    def __init__(
        self,
        context_dir: str = DEFAULT_CONTEXT_DIR,
        stale_after_days: int = DEFAULT_STALE_AFTER_DAYS,
    ) -> None:
        self.context_dir = context_dir
        self.stale_after_days = stale_after_days

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def run(
        self, repo_root: Path, options: QuickSyncOptions | None = None
    ) -> QuickSyncResult:
        """Run every step in order and fold the outcomes.

        Raises:
            UnknownTargetError: If any target selection names an unknown
                preset or key.  Raised before anything is written.
        """
        root = Path(repo_root).resolve()
        options = options or QuickSyncOptions()
        self._validate_selections(root, options)

        pipeline: list[tuple[str, Step]] = [
            (STEP_AGENTS, self._sync_agents),
            (STEP_SKILLS, self._sync_skills),
            (STEP_COMMANDS, self._sync_commands),
            (STEP_RULES, self._export_rules),
            (STEP_DOCS, self._check_docs),
        ]

        outcomes: list[StepOutcome] = []
        for name, step in pipeline:
            outcomes.append(await self._run_step(name, step, root, options))
        return fold_outcomes(outcomes)

    async def get_stats(self, repo_root: Path) -> ProjectStats:
        """Count context items per category and report docs age."""
        root = Path(repo_root).resolve()
        context_root = root / self.context_dir
        counts = {
            category: await run_sync(
                count_markdown_files, context_root / category.value
            )
            for category in Category
        }
        state = await self._detector(root).detect()
        days_old = (
            state.details.days_behind
            if state.state == Freshness.OUTDATED
            else None
        )
        return ProjectStats(
            docs=counts[Category.DOCS],
            agents=counts[Category.AGENTS],
            skills=counts[Category.SKILLS],
            commands=counts[Category.COMMANDS],
            days_old=days_old,
        )

    # ------------------------------------------------------------------
    # Step plumbing
    # ------------------------------------------------------------------

    async def _run_step(
        self,
        name: str,
        step: Step,
        root: Path,
        options: QuickSyncOptions,
    ) -> StepOutcome:
        try:
            outcome = await step(root, options)
        except Exception as exc:
            logger.error("Step '%s' failed: %s", name, exc)
            return StepOutcome(
                step=name,
                status=StepStatus.FAILED,
                error=f"{name}: {exc}",
            )
        logger.info(
            "Step '%s' %s (%d items)", name, outcome.status.value, outcome.count
        )
        return outcome

    def _validate_selections(
        self, root: Path, options: QuickSyncOptions
    ) -> None:
        for category, selection in (
            (Category.AGENTS, options.agent_targets),
            (Category.SKILLS, options.skill_targets),
            (Category.COMMANDS, options.command_targets),
            (Category.DOCS, options.doc_targets),
        ):
            resolve_targets(category, selection, root)

    def _source(self, root: Path, category: Category) -> Path:
        return root / self.context_dir / category.value

    def _detector(self, root: Path) -> StateDetector:
        return StateDetector(
            root,
            context_dir=self.context_dir,
            stale_after_days=self.stale_after_days,
        )

    @staticmethod
    def _skipped(name: str, skip: bool, selection: list[str] | None) -> StepOutcome | None:
        if skip:
            return StepOutcome(step=name, status=StepStatus.SKIPPED, detail="skip flag set")
        if selection is not None and not selection:
            return StepOutcome(step=name, status=StepStatus.SKIPPED, detail="no targets selected")
        return None

    async def _sync_category(
        self,
        name: str,
        category: Category,
        skip: bool,
        selection: list[str] | None,
        root: Path,
        options: QuickSyncOptions,
    ) -> StepOutcome:
        skipped = self._skipped(name, skip, selection)
        if skipped is not None:
            return skipped

        source = self._source(root, category)
        if not await path_exists_async(source):
            return StepOutcome(
                step=name,
                status=StepStatus.NOTHING_TO_SYNC,
                detail=f"{source} not found",
            )

        targets = resolve_targets(category, selection, root)
        report = await SyncEngine(category).sync(
            source, targets, force=options.force, dry_run=options.dry_run
        )
        return _completed(name, report, targets)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def _sync_agents(self, root: Path, options: QuickSyncOptions) -> StepOutcome:
        return await self._sync_category(
            STEP_AGENTS,
            Category.AGENTS,
            options.skip_agents,
            options.agent_targets,
            root,
            options,
        )

    async def _sync_skills(self, root: Path, options: QuickSyncOptions) -> StepOutcome:
        return await self._sync_category(
            STEP_SKILLS,
            Category.SKILLS,
            options.skip_skills,
            options.skill_targets,
            root,
            options,
        )

    async def _sync_commands(self, root: Path, options: QuickSyncOptions) -> StepOutcome:
        skipped = self._skipped(STEP_COMMANDS, options.skip_commands, options.command_targets)
        if skipped is not None:
            return skipped

        source = self._source(root, Category.COMMANDS)
        if not await path_exists_async(source):
            return StepOutcome(
                step=STEP_COMMANDS,
                status=StepStatus.NOTHING_TO_SYNC,
                detail=f"{source} not found",
            )

        targets = resolve_targets(Category.COMMANDS, options.command_targets, root)
        mirrors = [t for t in targets if is_verbatim(t.family)]
        transformed = [t for t in targets if not is_verbatim(t.family)]

        items = await list_content_items(source)
        engine = SyncEngine(Category.COMMANDS)
        file_errors: list[str] = []
        reports: list[SyncReport] = []
        for batch in (mirrors, transformed):
            if not batch:
                continue
            report = await engine.sync_items(
                items,
                batch,
                force=options.force,
                dry_run=options.dry_run,
                source_dir=source,
            )
            file_errors.extend(report.error_messages())
            reports.append(report)

        return StepOutcome(
            step=STEP_COMMANDS,
            status=StepStatus.COMPLETED,
            count=len(items),
            file_errors=file_errors,
            detail=_target_detail(targets),
            reports=reports,
        )

    async def _export_rules(self, root: Path, options: QuickSyncOptions) -> StepOutcome:
        return await self._sync_category(
            STEP_RULES,
            Category.DOCS,
            options.skip_docs,
            options.doc_targets,
            root,
            options,
        )

    async def _check_docs(self, root: Path, options: QuickSyncOptions) -> StepOutcome:
        if options.skip_docs:
            return StepOutcome(step=STEP_DOCS, status=StepStatus.SKIPPED, detail="skip flag set")
        state = await self._detector(root).detect()
        detail = state.state.value
        if state.details.days_behind is not None:
            detail += f" ({state.details.days_behind} days since generation)"
        return StepOutcome(
            step=STEP_DOCS,
            status=StepStatus.COMPLETED,
            detail=detail,
            docs_state=state,
        )


# ------------------------------------------------------------------
# Folding
# ------------------------------------------------------------------


def _target_detail(targets: list[ResolvedTarget]) -> str:
    return "targets: " + ", ".join(t.key for t in targets)


def _completed(name: str, report: SyncReport, targets: list[ResolvedTarget]) -> StepOutcome:
    return StepOutcome(
        step=name,
        status=StepStatus.COMPLETED,
        count=report.item_count,
        file_errors=report.error_messages(),
        detail=_target_detail(targets),
        reports=[report],
    )


def fold_outcomes(outcomes: list[StepOutcome]) -> QuickSyncResult:
    """Aggregate step outcomes into a ``QuickSyncResult``.

    Counts come from ``COMPLETED`` steps only.  ``errors`` lists per-file
    failures and step failures in step order.
    """
    counts: dict[str, int] = {}
    errors: list[str] = []
    docs_updated = False
    outdated_days: int | None = None

    for outcome in outcomes:
        errors.extend(outcome.file_errors)
        if outcome.status == StepStatus.FAILED and outcome.error:
            errors.append(outcome.error)
        if outcome.status == StepStatus.COMPLETED:
            counts[outcome.step] = outcome.count

        if outcome.step == STEP_DOCS and outcome.docs_state is not None:
            details = outcome.docs_state.details
            if (
                outcome.docs_state.state == Freshness.OUTDATED
                and details.days_behind
            ):
                outdated_days = details.days_behind
            else:
                docs_updated = True

    return QuickSyncResult(
        agents_synced=counts.get(STEP_AGENTS, 0),
        skills_exported=counts.get(STEP_SKILLS, 0),
        commands_synced=counts.get(STEP_COMMANDS, 0),
        rules_exported=counts.get(STEP_RULES, 0),
        docs_updated=docs_updated,
        outdated_days=outdated_days,
        errors=errors,
        steps=outcomes,
    )
