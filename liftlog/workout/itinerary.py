"""Daily itinerary: workouts already done plus scheduled plans still to do."""

from __future__ import annotations

from loguru import logger

from liftlog.core.dates import iso_day, truncate_to_day
from liftlog.workout.model import Itinerary, WorkoutPlan
from liftlog.workout.program_store import ProgramStore
from liftlog.workout.schedule import ProgramSchedule
from liftlog.workout.store import PartitionedWorkoutStore


def scheduled_workout_id(timestamp_ms: int, plan: WorkoutPlan) -> str:
    """Deterministic id of the workout performing ``plan`` on that day."""
    return f"{iso_day(truncate_to_day(timestamp_ms))}-{plan.name}"


class ItineraryService:
    def __init__(
        self,
        store: PartitionedWorkoutStore,
        schedule: ProgramSchedule,
        program_store: ProgramStore | None = None,
    ) -> None:
        self._store = store
        self._schedule = schedule
        self._program_store = program_store

    async def get_itinerary(self, timestamp_ms: int) -> Itinerary:
        day = truncate_to_day(timestamp_ms)
        workouts = await self._store.get_workouts(day)
        skipped = await self._program_store.get_skipped_days() if self._program_store else []
        scheduled = self._schedule.get_workout_plans(day, skipped)

        done_ids = {workout.id for workout in workouts}
        pending = tuple(
            plan for plan in scheduled if scheduled_workout_id(day, plan) not in done_ids
        )
        logger.info(
            f"Itinerary for {iso_day(day)}: {len(workouts)} done, {len(pending)} to do"
        )
        return Itinerary(workouts=tuple(workouts), workout_plans=pending)

    async def skip_day(self, timestamp_ms: int) -> list[int]:
        if self._program_store is None:
            raise RuntimeError("Skipping days requires a program store")
        return await self._program_store.skip_day(timestamp_ms)
