from __future__ import annotations

import asyncio
import json
from datetime import datetime
from pathlib import Path

import pytest

from liftlog.core.dates import from_datetime, truncate_to_day
from liftlog.storage.byte_store import DiskStorage, MemoryStorage
from liftlog.workout.codec import WorkoutDecodeError
from liftlog.workout.program_store import ProgramStore


def _day(day: int, hour: int = 0) -> int:
    return from_datetime(datetime(2024, 10, day, hour, 0))


def test_skipped_days_are_truncated_and_strictly_increasing() -> None:
    async def _run() -> None:
        store = ProgramStore(MemoryStorage())
        assert await store.get_skipped_days() == []

        assert await store.skip_day(_day(7, 18)) == [_day(7)]
        # Same day again and an earlier day are both ignored.
        assert await store.skip_day(_day(7, 9)) == [_day(7)]
        assert await store.skip_day(_day(6, 9)) == [_day(7)]
        assert await store.skip_day(_day(9, 1)) == [_day(7), _day(9)]

        assert await store.get_skipped_days() == [_day(7), _day(9)]

    asyncio.run(_run())


def test_skipped_days_persist_as_json_document(tmp_path: Path) -> None:
    async def _run() -> None:
        await ProgramStore(DiskStorage(tmp_path)).skip_day(_day(8, 12))
        assert await ProgramStore(DiskStorage(tmp_path)).get_skipped_days() == [truncate_to_day(_day(8, 12))]

    asyncio.run(_run())

    document = json.loads((tmp_path / "program" / "programs.json").read_text(encoding="utf-8"))
    assert document == {"skippedDays": [_day(8)]}


def test_corrupt_program_document_raises(tmp_path: Path) -> None:
    (tmp_path / "program").mkdir()
    (tmp_path / "program" / "programs.json").write_text('{"skippedDays": 3}', encoding="utf-8")

    async def _run() -> None:
        with pytest.raises(WorkoutDecodeError):
            await ProgramStore(DiskStorage(tmp_path)).get_skipped_days()

    asyncio.run(_run())
