"""Sync engine that copies a source directory into resolved targets.

The ``SyncEngine`` replicates canonical markdown files into every
destination directory it is given:

1. Takes one snapshot of the source directory (listing and contents).
2. For each destination, for each item, computes the destination path
   and payload through the target's format family.
3. Applies the target's overwrite policy (``always`` or ``if_absent``).
4. Writes the payload, or records what would be written on dry-run.
5. Builds and returns a ``SyncReport``.

Error handling is per-pair: a single write failure is recorded as a
``FAILED`` result and processing continues with the next pair.  The
source directory is never modified.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from context_sync.file_handler import (
    decode_bytes,
    list_markdown_files_async,
    path_exists_async,
    read_file_bytes_async,
    write_file_async,
)
from context_sync.formats import (
    is_verbatim,
    parse_front_matter,
    transform_content,
    transform_filename,
)
from context_sync.sync.models import (
    ContentItem,
    SyncOutcome,
    SyncReport,
    SyncResult,
)
from context_sync.sync.targets import (
    Category,
    OverwritePolicy,
    ResolvedTarget,
)

logger = logging.getLogger(__name__)


async def list_content_items(source_dir: Path) -> list[ContentItem]:
    """Read every ``.md`` file directly inside *source_dir*.

    Args:
        source_dir: Canonical source directory for one category.

    Returns:
        Items sorted by filename.  Empty if the directory is missing.
    """
    items: list[ContentItem] = []
    for filename in await list_markdown_files_async(source_dir):
        raw = await read_file_bytes_async(source_dir / filename)
        if raw is None:
            # Removed between listing and read
            logger.warning("Source file vanished: %s", source_dir / filename)
            continue
        text, _ = decode_bytes(raw)
        fields, _ = parse_front_matter(text)
        items.append(
            ContentItem(
                filename=filename,
                raw=raw,
                text=text,
                front_matter=fields,
            )
        )
    return items


class SyncEngine:
    """Replicate content items of one category into resolved targets.

    Args:
        category: Content category, used to label results.
    """

    def __init__(self, category: Category) -> None:
        self.category = category

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def sync(
        self,
        source_dir: Path,
        destinations: list[ResolvedTarget],
        force: bool = False,
        dry_run: bool = False,
    ) -> SyncReport:
        """Sync every markdown file in *source_dir* into *destinations*.

        A missing source directory is not an error: the report is empty.
        """
        if not await path_exists_async(source_dir):
            logger.info("Nothing to sync: %s does not exist", source_dir)
            now = datetime.now(timezone.utc).isoformat()
            return SyncReport(
                category=self.category.value,
                source_dir=str(source_dir),
                dry_run=dry_run,
                started_at=now,
                completed_at=now,
            )

        items = await list_content_items(source_dir)
        return await self.sync_items(
            items, destinations, force=force, dry_run=dry_run, source_dir=source_dir
        )

    async def sync_items(
        self,
        items: list[ContentItem],
        destinations: list[ResolvedTarget],
        force: bool = False,
        dry_run: bool = False,
        source_dir: Path | None = None,
    ) -> SyncReport:
        """Sync an already-read snapshot of items into *destinations*.

        Pairs are processed sequentially, target by target.

        Args:
            items: Content items to replicate.
            destinations: Resolved targets to write into.
            force: Replace existing files on ``if_absent`` targets.
            dry_run: Resolve and count without writing.
            source_dir: Where the items came from (for the report).

        Returns:
            A ``SyncReport`` with one result per (target, item) pair.
        """
        started_at = datetime.now(timezone.utc).isoformat()
        results: list[SyncResult] = []

        for target in destinations:
            for item in items:
                try:
                    result = await self._sync_pair(item, target, force, dry_run)
                except Exception as exc:
                    logger.error(
                        "Error syncing %s -> %s (%s): %s",
                        item.filename,
                        target.destination,
                        target.key,
                        exc,
                    )
                    result = SyncResult(
                        category=self.category.value,
                        target=target.key,
                        source=item.filename,
                        destination=str(target.destination),
                        outcome=SyncOutcome.FAILED,
                        error=str(exc) or type(exc).__name__,
                    )
                results.append(result)

        return SyncReport(
            category=self.category.value,
            source_dir=str(source_dir) if source_dir else "",
            dry_run=dry_run,
            items=[item.filename for item in items],
            results=results,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc).isoformat(),
        )

    # ------------------------------------------------------------------
    # Per-pair sync
    # ------------------------------------------------------------------

    async def _sync_pair(
        self,
        item: ContentItem,
        target: ResolvedTarget,
        force: bool,
        dry_run: bool,
    ) -> SyncResult:
        """Sync one item into one target and return its result."""
        destination = target.destination / transform_filename(
            target.family, item.filename
        )
        payload = self._render(item, target)

        if await self._is_up_to_date(destination, payload, target, force):
            outcome = SyncOutcome.SKIPPED_EXISTS
        elif dry_run:
            outcome = SyncOutcome.SKIPPED_DRY_RUN
        else:
            await write_file_async(destination, payload)
            outcome = SyncOutcome.WRITTEN

        logger.debug(
            "%s %s -> %s", outcome.value, item.filename, destination
        )
        return SyncResult(
            category=self.category.value,
            target=target.key,
            source=item.filename,
            destination=str(destination),
            outcome=outcome,
        )

    @staticmethod
    def _render(item: ContentItem, target: ResolvedTarget) -> bytes:
        """Return the bytes *target* should hold for *item*."""
        if is_verbatim(target.family):
            return item.raw
        return transform_content(
            target.family, item.text, item.filename
        ).encode("utf-8")

    @staticmethod
    async def _is_up_to_date(
        destination: Path,
        payload: bytes,
        target: ResolvedTarget,
        force: bool,
    ) -> bool:
        """Decide whether the destination can be left as it is.

        ``always`` targets skip only byte-identical files, so the
        destination always ends up matching the source.  ``if_absent``
        targets skip any existing file unless *force* is set.
        """
        match target.overwrite:
            case OverwritePolicy.ALWAYS:
                existing = await read_file_bytes_async(destination)
                return existing == payload
            case OverwritePolicy.IF_ABSENT:
                if force:
                    return False
                return await path_exists_async(destination)
