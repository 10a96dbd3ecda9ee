"""Date-partitioned persistence for workout records.

Each partition (a calendar month by default, or a calendar year) is one JSON
array in the byte storage. Writes read the whole partition, upsert by id and
rewrite it.
"""

from __future__ import annotations

import asyncio

from loguru import logger

from liftlog.core.clock import Clock, SystemClock
from liftlog.core.dates import add_days, to_datetime, truncate_to_day
from liftlog.core.errors import StorageKeyNotFound
from liftlog.core.settings import PartitionPolicy
from liftlog.storage.byte_store import ByteStorage, make_key, split_key
from liftlog.workout.codec import decode_partition, encode_partition
from liftlog.workout.model import Workout


def partition_key(timestamp_ms: int, policy: PartitionPolicy = "month") -> str:
    moment = to_datetime(timestamp_ms)
    if policy == "year":
        return f"{moment.year:04d}"
    if policy == "month":
        return f"{moment.year:04d}-{moment.month:02d}"
    raise ValueError(f"Unknown partition policy '{policy}'")


class PartitionedWorkoutStore:
    def __init__(
        self,
        storage: ByteStorage,
        namespace: str = "workouts",
        policy: PartitionPolicy = "month",
        clock: Clock | None = None,
    ) -> None:
        self._storage = storage
        self._namespace = namespace
        self._policy = policy
        self._clock = clock or SystemClock()
        self._locks: dict[str, asyncio.Lock] = {}

    def partition_for(self, timestamp_ms: int) -> str:
        return partition_key(timestamp_ms, self._policy)

    async def save(self, workout: Workout) -> None:
        partition = self.partition_for(workout.started_at)
        async with self._lock(partition):
            workouts = await self._read_partition(partition)
            updated = [item for item in workouts if item.id != workout.id]
            replaced = len(updated) != len(workouts)
            updated.append(workout)
            await self._write_partition(partition, updated)
        logger.info(
            f"{'Updated' if replaced else 'Saved'} workout {workout.id} in partition {partition}"
        )

    async def get_workouts(self, timestamp_ms: int) -> list[Workout]:
        """Workouts started within one day of ``timestamp_ms``.

        Only the partition of ``timestamp_ms`` is read, so a window that
        crosses into the next partition misses the records stored there.
        """
        partition = self.partition_for(timestamp_ms)
        end = add_days(timestamp_ms, 1)
        async with self._lock(partition):
            workouts = await self._read_partition(partition)
        return [item for item in workouts if timestamp_ms <= item.started_at < end]

    async def get_in_progress_workout(self) -> Workout | None:
        today = truncate_to_day(self._clock.now())
        for workout in await self.get_workouts(today):
            if workout.ended_at is None:
                return workout
        return None

    async def get_workout(self, workout_id: str, started_at: int) -> Workout | None:
        partition = self.partition_for(started_at)
        async with self._lock(partition):
            workouts = await self._read_partition(partition)
        return next((item for item in workouts if item.id == workout_id), None)

    async def delete_workout(self, workout_id: str, started_at: int) -> bool:
        partition = self.partition_for(started_at)
        async with self._lock(partition):
            workouts = await self._read_partition(partition)
            remaining = [item for item in workouts if item.id != workout_id]
            if len(remaining) == len(workouts):
                return False
            await self._write_partition(partition, remaining)
        logger.info(f"Deleted workout {workout_id} from partition {partition}")
        return True

    async def get_all_workouts(self) -> list[Workout]:
        out: list[Workout] = []
        for key in await self._storage.list_keys(self._namespace):
            _, partition = split_key(key)
            async with self._lock(partition):
                out.extend(await self._read_partition(partition))
        return sorted(out, key=lambda item: item.started_at)

    def _lock(self, partition: str) -> asyncio.Lock:
        lock = self._locks.get(partition)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[partition] = lock
        return lock

    async def _read_partition(self, partition: str) -> list[Workout]:
        key = make_key(self._namespace, partition)
        if not await self._storage.exists(key):
            return []
        try:
            data = await self._storage.read_all(key)
        except StorageKeyNotFound:
            return []
        workouts = decode_partition(data)
        logger.debug(f"Read {len(workouts)} workouts from partition {partition}")
        return workouts

    async def _write_partition(self, partition: str, workouts: list[Workout]) -> None:
        key = make_key(self._namespace, partition)
        logger.debug(f"Writing {len(workouts)} workouts to partition {partition}")
        await self._storage.write_all(key, encode_partition(workouts))
