"""Persisted program state (skipped days) kept next to the workout partitions."""

from __future__ import annotations

import json

from loguru import logger

from liftlog.core.dates import iso_day, truncate_to_day
from liftlog.core.errors import StorageKeyNotFound
from liftlog.storage.byte_store import ByteStorage, make_key
from liftlog.workout.codec import WorkoutDecodeError

_PROGRAM_DOCUMENT = "programs"


class ProgramStore:
    def __init__(self, storage: ByteStorage, namespace: str = "program") -> None:
        self._storage = storage
        self._key = make_key(namespace, _PROGRAM_DOCUMENT)

    async def get_skipped_days(self) -> list[int]:
        document = await self._read()
        return list(document["skippedDays"])

    async def skip_day(self, timestamp_ms: int) -> list[int]:
        """Record ``timestamp_ms``'s day as skipped; earlier or repeated days are ignored."""
        day = truncate_to_day(timestamp_ms)
        document = await self._read()
        skipped: list[int] = document["skippedDays"]
        if not skipped or skipped[-1] < day:
            skipped.append(day)
            logger.info(f"Skipping {iso_day(day)}, rotation resumes the next day")
            await self._storage.write_all(self._key, json.dumps(document).encode("utf-8"))
        else:
            logger.info(f"Ignoring skip for {iso_day(day)}, not after the last skipped day")
        return list(skipped)

    async def _read(self) -> dict:
        try:
            raw = await self._storage.read_all(self._key)
        except StorageKeyNotFound:
            return {"skippedDays": []}
        try:
            document = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise WorkoutDecodeError(f"Invalid program document: {exc}") from exc
        if not isinstance(document, dict) or not isinstance(document.get("skippedDays", []), list):
            raise WorkoutDecodeError("Program document must hold a 'skippedDays' array")
        document.setdefault("skippedDays", [])
        return document
