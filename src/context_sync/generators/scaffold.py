"""Scaffold the context directory for a repository.

``InitService.run`` prepares ``<repo>/<context_dir>`` for the selected
scaffold type:

1. ``docs``     -- create ``docs/`` and run the docs generator, if any;
   only a generator run writes the generation marker.
2. ``agents``   -- create ``agents/`` and run the agents generator, if any.
3. ``skills``   -- ``both`` only; optional, failures degrade to
   ``UNAVAILABLE``.
4. ``commands`` -- seed predefined commands; optional, failures degrade
   to ``UNAVAILABLE``.

Content generation is pluggable through the ``ContentGenerator``
protocol.  Without a generator a step only creates its directory.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from context_sync.core.async_utils import run_sync
from context_sync.errors import ContextSyncError, InvalidScaffoldTypeError
from context_sync.sync.models import ScaffoldResult, StepOutcome, StepStatus
from context_sync.sync.state import DEFAULT_CONTEXT_DIR, write_generation_marker
from context_sync.sync.targets import Category

from .commands import generate_commands

logger = logging.getLogger(__name__)

SCAFFOLD_DOCS = "docs"
SCAFFOLD_AGENTS = "agents"
SCAFFOLD_BOTH = "both"
SCAFFOLD_TYPES = [SCAFFOLD_DOCS, SCAFFOLD_AGENTS, SCAFFOLD_BOTH]

DIRECTORY_ONLY = "directory only"


class ContentGenerator(Protocol):
    """Produces markdown files for one category of the context tree."""

    async def generate(self, repo_root: Path, output_dir: Path) -> int:
        """Write files into *output_dir* and return how many were written."""
        ...


def resolve_scaffold_type(
    value: str | None = None,
    docs_only: bool = False,
    agents_only: bool = False,
) -> str:
    """Normalise a scaffold type.

    ``docs_only`` and ``agents_only`` take precedence over *value*.

    Examples:
        >>> resolve_scaffold_type("DOCS")
        'docs'
        >>> resolve_scaffold_type(None, agents_only=True)
        'agents'

    Raises:
        InvalidScaffoldTypeError: If *value* is not docs, agents or both.
    """
    if docs_only:
        return SCAFFOLD_DOCS
    if agents_only:
        return SCAFFOLD_AGENTS
    normalized = (value or SCAFFOLD_BOTH).strip().lower()
    if normalized not in SCAFFOLD_TYPES:
        raise InvalidScaffoldTypeError(value or "", SCAFFOLD_TYPES)
    return normalized


class InitService:
    """Create and fill the context directory.

    Args:
        context_dir: Context root, relative to the repository root.
        generators: Optional content generator per category.
    """

    def __init__(
        self,
        context_dir: str = DEFAULT_CONTEXT_DIR,
        generators: dict[Category, ContentGenerator] | None = None,
    ) -> None:
        self.context_dir = context_dir
        self._generators = dict(generators or {})

    async def run(
        self,
        repo_root: Path,
        scaffold_type: str | None = SCAFFOLD_BOTH,
        docs_only: bool = False,
        agents_only: bool = False,
        force_commands: bool = False,
    ) -> ScaffoldResult:
        """Scaffold ``<repo_root>/<context_dir>``.

        Raises:
            InvalidScaffoldTypeError: If *scaffold_type* is not allowed.
            ContextSyncError: If *repo_root* is not a directory.
        """
        resolved = resolve_scaffold_type(scaffold_type, docs_only, agents_only)
        root = Path(repo_root).resolve()
        if not root.is_dir():
            raise ContextSyncError(f"Repository path does not exist: {root}")
        output_dir = root / self.context_dir

        steps: list[StepOutcome] = []
        if resolved in (SCAFFOLD_DOCS, SCAFFOLD_BOTH):
            steps.append(await self._generate(Category.DOCS, root, output_dir))
        if resolved in (SCAFFOLD_AGENTS, SCAFFOLD_BOTH):
            steps.append(await self._generate(Category.AGENTS, root, output_dir))
        if resolved == SCAFFOLD_BOTH:
            steps.append(
                await self._optional(
                    Category.SKILLS.value,
                    self._generate(Category.SKILLS, root, output_dir),
                )
            )
        steps.append(
            await self._optional(
                Category.COMMANDS.value,
                self._seed_commands(output_dir, force_commands),
            )
        )

        counts = {
            s.step: s.count for s in steps if s.status == StepStatus.COMPLETED
        }
        # Only a docs generator run refreshes the marker
        if any(
            s.step == Category.DOCS.value and s.detail != DIRECTORY_ONLY
            for s in steps
        ):
            await run_sync(write_generation_marker, output_dir)

        logger.info("Scaffolded %s (%s)", output_dir, resolved)
        return ScaffoldResult(
            output_dir=str(output_dir),
            scaffold_type=resolved,
            docs_generated=counts.get(Category.DOCS.value, 0),
            agents_generated=counts.get(Category.AGENTS.value, 0),
            skills_generated=counts.get(Category.SKILLS.value, 0),
            commands_generated=counts.get(Category.COMMANDS.value, 0),
            steps=steps,
        )

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def _generate(
        self, category: Category, root: Path, output_dir: Path
    ) -> StepOutcome:
        target_dir = output_dir / category.value
        await run_sync(target_dir.mkdir, parents=True, exist_ok=True)
        generator = self._generators.get(category)
        if generator is None:
            return StepOutcome(
                step=category.value,
                status=StepStatus.COMPLETED,
                detail=DIRECTORY_ONLY,
            )
        count = await generator.generate(root, target_dir)
        return StepOutcome(
            step=category.value, status=StepStatus.COMPLETED, count=count
        )

    async def _seed_commands(self, output_dir: Path, force: bool) -> StepOutcome:
        result = await generate_commands(output_dir, force=force)
        if result.failed:
            raise OSError("; ".join(result.failed))
        return StepOutcome(
            step=Category.COMMANDS.value,
            status=StepStatus.COMPLETED,
            count=len(result.generated),
            detail=f"{len(result.skipped)} already present",
        )

    @staticmethod
    async def _optional(name: str, step) -> StepOutcome:
        """Await *step*, degrading any failure to ``UNAVAILABLE``."""
        try:
            return await step
        except Exception as exc:
            logger.warning("Optional step '%s' unavailable: %s", name, exc)
            return StepOutcome(
                step=name, status=StepStatus.UNAVAILABLE, error=str(exc)
            )
