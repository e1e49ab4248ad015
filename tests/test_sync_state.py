"""Tests for documentation freshness detection."""

import os
from datetime import datetime, timedelta, timezone

from context_sync.sync.models import Freshness
from context_sync.sync.state import (
    MARKER_FILENAME,
    StateDetector,
    write_generation_marker,
)

GENERATED = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def _clock(days: float):
    return lambda: GENERATED + timedelta(days=days)


def _docs(repo):
    docs = repo / ".context" / "docs"
    docs.mkdir(parents=True, exist_ok=True)
    return docs


class TestDetect:
    async def test_unknown_without_docs(self, repo):
        state = await StateDetector(repo).detect()

        assert state.state == Freshness.UNKNOWN
        assert state.details.days_behind is None
        assert state.details.threshold_days == 7

    async def test_unknown_with_empty_docs_dir(self, repo):
        _docs(repo)

        state = await StateDetector(repo).detect()

        assert state.state == Freshness.UNKNOWN

    async def test_fresh_within_threshold(self, repo):
        write_generation_marker(repo / ".context", GENERATED)

        state = await StateDetector(repo, now=_clock(2.5)).detect()

        assert state.state == Freshness.FRESH
        assert state.details.days_behind == 2
        assert state.details.last_generated == GENERATED.isoformat()

    async def test_outdated_past_threshold(self, repo):
        write_generation_marker(repo / ".context", GENERATED)

        state = await StateDetector(repo, now=_clock(10)).detect()

        assert state.state == Freshness.OUTDATED
        assert state.details.days_behind == 10
        assert state.details.marker.endswith(MARKER_FILENAME)

    async def test_exact_threshold_is_fresh(self, repo):
        write_generation_marker(repo / ".context", GENERATED)

        state = await StateDetector(repo, now=_clock(7)).detect()

        assert state.state == Freshness.FRESH
        assert state.details.days_behind == 7

    async def test_custom_threshold(self, repo):
        write_generation_marker(repo / ".context", GENERATED)

        state = await StateDetector(repo, stale_after_days=1, now=_clock(3)).detect()

        assert state.state == Freshness.OUTDATED
        assert state.details.threshold_days == 1

    async def test_future_marker_clamps_to_zero(self, repo):
        write_generation_marker(repo / ".context", GENERATED)

        state = await StateDetector(repo, now=_clock(-1)).detect()

        assert state.state == Freshness.FRESH
        assert state.details.days_behind == 0

    async def test_naive_marker_is_utc(self, repo):
        docs = _docs(repo)
        (docs / MARKER_FILENAME).write_text("2026-01-01T12:00:00\n")

        state = await StateDetector(repo, now=_clock(1)).detect()

        assert state.details.days_behind == 1

    async def test_unparseable_marker_falls_back_to_mtime(self, repo):
        docs = _docs(repo)
        marker = docs / MARKER_FILENAME
        marker.write_text("not a timestamp")
        stamp = GENERATED.timestamp()
        os.utime(marker, (stamp, stamp))

        state = await StateDetector(repo, now=_clock(9)).detect()

        assert state.state == Freshness.OUTDATED
        assert state.details.days_behind == 9

    async def test_newest_doc_mtime_without_marker(self, repo):
        docs = _docs(repo)
        old = docs / "old.md"
        new = docs / "new.md"
        old.write_text("# Old")
        new.write_text("# New")
        os.utime(old, (GENERATED.timestamp() - 86_400 * 30,) * 2)
        os.utime(new, (GENERATED.timestamp(),) * 2)

        state = await StateDetector(repo, now=_clock(3)).detect()

        assert state.state == Freshness.FRESH
        assert state.details.marker == str(new)

    async def test_custom_context_dir(self, repo):
        write_generation_marker(repo / "ctx", GENERATED)

        detector = StateDetector(repo, context_dir="ctx", now=_clock(1))

        assert detector.docs_dir == repo / "ctx" / "docs"
        assert (await detector.detect()).state == Freshness.FRESH

    async def test_detect_never_writes(self, repo):
        await StateDetector(repo).detect()

        assert list(repo.iterdir()) == []


class TestWriteGenerationMarker:
    def test_creates_docs_dir(self, tmp_path):
        marker = write_generation_marker(tmp_path / ".context", GENERATED)

        assert marker == tmp_path / ".context" / "docs" / MARKER_FILENAME
        assert marker.read_text() == GENERATED.isoformat() + "\n"

    def test_naive_time_written_as_utc(self, tmp_path):
        marker = write_generation_marker(tmp_path, datetime(2026, 3, 4, 5, 6))

        assert marker.read_text().strip() == "2026-03-04T05:06:00+00:00"

    def test_defaults_to_now(self, tmp_path):
        before = datetime.now(timezone.utc)

        marker = write_generation_marker(tmp_path)

        written = datetime.fromisoformat(marker.read_text().strip())
        assert written >= before
