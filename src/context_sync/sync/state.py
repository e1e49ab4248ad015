"""Documentation freshness detection.

Classifies the generated documentation under ``<context>/docs`` as fresh,
outdated or unknown from filesystem metadata alone:

* **Marker first** -- ``docs/.last-generated`` holds the ISO 8601
  timestamp of the last generation run.  If its content cannot be parsed
  the file's mtime is used instead.
* **Docs fallback** -- without a marker the newest mtime among
  ``docs/*.md`` stands in for the generation time.
* **Read-only** -- ``StateDetector`` never writes.  The marker is written
  separately by ``write_generation_marker`` after a scaffold run.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from pathlib import Path

from context_sync.core.async_utils import run_sync
from context_sync.file_handler import write_file

from .models import DocsState, Freshness, StateDetails

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT_DIR = ".context"
DEFAULT_STALE_AFTER_DAYS = 7
MARKER_FILENAME = ".last-generated"

_SECONDS_PER_DAY = 86_400


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _from_mtime(path: Path) -> datetime:
    return datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)


def _parse_timestamp(text: str) -> datetime | None:
    """Parse an ISO 8601 timestamp; naive values are taken as UTC."""
    try:
        parsed = datetime.fromisoformat(text.strip())
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class StateDetector:
    """Classify documentation freshness for one project.

    Args:
        project_path: Repository root.
        context_dir: Context root, relative to *project_path* or absolute.
        stale_after_days: Docs older than this many days are outdated.
        now: Clock override, mainly for tests.
    """

    def __init__(
        self,
        project_path: Path,
        context_dir: str | Path = DEFAULT_CONTEXT_DIR,
        stale_after_days: int = DEFAULT_STALE_AFTER_DAYS,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self._docs_dir = Path(project_path) / context_dir / "docs"
        self._threshold = stale_after_days
        self._now = now or _utc_now

    @property
    def docs_dir(self) -> Path:
        return self._docs_dir

    # ------------------------------------------------------------------
    # Detection
    # ------------------------------------------------------------------

    async def detect(self) -> DocsState:
        """Classify the docs as ``fresh``, ``outdated`` or ``unknown``."""
        return await run_sync(self.detect_sync)

    def detect_sync(self) -> DocsState:
        """Blocking variant of ``detect``."""
        found = self._last_generated()
        if found is None:
            logger.debug("No generation marker under %s", self._docs_dir)
            return DocsState(
                state=Freshness.UNKNOWN,
                details=StateDetails(threshold_days=self._threshold),
            )

        last_generated, source = found
        elapsed = self._now() - last_generated
        days_behind = max(0, int(elapsed.total_seconds() // _SECONDS_PER_DAY))
        outdated = elapsed > timedelta(days=self._threshold)
        state = Freshness.OUTDATED if outdated else Freshness.FRESH

        logger.debug(
            "Docs %s: %d days since %s (%s)",
            state.value,
            days_behind,
            last_generated.isoformat(),
            source,
        )
        return DocsState(
            state=state,
            details=StateDetails(
                days_behind=days_behind,
                last_generated=last_generated.isoformat(),
                marker=str(source),
                threshold_days=self._threshold,
            ),
        )

    def _last_generated(self) -> tuple[datetime, Path] | None:
        """Return the generation time and the path that supplied it."""
        marker = self._docs_dir / MARKER_FILENAME
        if marker.is_file():
            try:
                stamp = _parse_timestamp(marker.read_text(encoding="utf-8"))
            except (OSError, UnicodeDecodeError):
                stamp = None
            return (stamp or _from_mtime(marker)), marker

        if not self._docs_dir.is_dir():
            return None
        docs = [p for p in self._docs_dir.glob("*.md") if p.is_file()]
        if not docs:
            return None
        newest = max(docs, key=lambda p: p.stat().st_mtime)
        return _from_mtime(newest), newest


def write_generation_marker(
    context_root: Path, when: datetime | None = None
) -> Path:
    """Record *when* (default: now) as the last documentation generation.

    Args:
        context_root: Absolute context root (``<repo>/.context``).
        when: Generation time; naive values are taken as UTC.

    Returns:
        Path of the marker file.
    """
    stamp = when or _utc_now()
    if stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=timezone.utc)
    marker = context_root / "docs" / MARKER_FILENAME
    write_file(marker, stamp.isoformat() + "\n")
    logger.info("Wrote generation marker %s", marker)
    return marker
