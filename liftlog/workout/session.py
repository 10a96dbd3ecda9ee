"""A live workout session bound to the workout store."""

from __future__ import annotations

from typing import Any, Callable

from loguru import logger

from liftlog.core.clock import Clock, SystemClock
from liftlog.core.ids import IdGenerator, RandomIdGenerator
from liftlog.workout import activity as engine
from liftlog.workout.itinerary import scheduled_workout_id
from liftlog.workout.model import (
    ActivityType,
    Workout,
    WorkoutActivity,
    WorkoutActivityPlan,
    WorkoutPlan,
)
from liftlog.workout.store import PartitionedWorkoutStore


class WorkoutSession:
    """Holds the single activity plan of one session.

    Every state change is checkpointed as an in-progress record (no
    ``ended_at``) so the session can be resumed; ``commit`` stores the finished
    workout and releases the plan.
    """

    def __init__(
        self,
        store: PartitionedWorkoutStore,
        clock: Clock | None = None,
        ids: IdGenerator | None = None,
    ) -> None:
        self._store = store
        self._clock = clock or SystemClock()
        self._ids = ids or RandomIdGenerator()
        self._plan: WorkoutActivityPlan | None = None

    @property
    def plan(self) -> WorkoutActivityPlan:
        if self._plan is None:
            raise RuntimeError("No workout in progress")
        return self._plan

    @property
    def is_active(self) -> bool:
        return self._plan is not None

    @property
    def activity(self) -> WorkoutActivity:
        return engine.current_activity(self.plan)

    async def start(self, plan: WorkoutPlan, scheduled_for: int | None = None) -> WorkoutActivityPlan:
        """Begin ``plan``; an in-progress workout from today is resumed instead.

        ``scheduled_for`` marks the plan as the itinerary entry of that day so
        the itinerary stops listing it once the workout is stored.
        """
        if await self.resume() is not None:
            logger.info(f"Resuming in-progress workout {self.plan.workout_id} instead of {plan.name}")
            return self.plan
        now = self._clock.now()
        workout_id = scheduled_workout_id(scheduled_for, plan) if scheduled_for is not None else None
        if workout_id is not None and await self._store.get_workout(workout_id, now) is not None:
            # The scheduled entry was already performed; keep that record.
            logger.info(f"Workout {workout_id} already stored, starting {plan.name} under a new id")
            workout_id = None
        self._plan = engine.create_activity_plan(plan, self._ids, now, workout_id)
        logger.info(f"Started workout {self._plan.workout_id} ({plan.name})")
        await self.checkpoint()
        return self._plan

    async def repeat(self, workout: Workout) -> WorkoutActivityPlan:
        if await self.resume() is not None:
            return self.plan
        self._plan = engine.repeat_workout(workout, self._ids, self._clock.now())
        logger.info(f"Repeating workout {workout.id} as {self._plan.workout_id}")
        await self.checkpoint()
        return self._plan

    async def resume(self) -> WorkoutActivityPlan | None:
        if self._plan is not None:
            return self._plan
        workout = await self._store.get_in_progress_workout()
        if workout is None:
            return None
        self._plan = engine.resume_workout(workout)
        return self._plan

    async def complete_set(self, set_id: str) -> WorkoutActivity:
        return await self._transition(engine.complete_set(self.plan, set_id, self._clock.now()))

    async def complete_rest(self, set_id: str) -> WorkoutActivity:
        return await self._transition(engine.complete_rest(self.plan, set_id, self._clock.now()))

    async def apply(
        self,
        edit: Callable[..., WorkoutActivityPlan],
        *args: Any,
        **kwargs: Any,
    ) -> WorkoutActivityPlan:
        """Run one of the pure edits from ``liftlog.workout.activity`` on the plan."""
        await self._transition(edit(self.plan, *args, **kwargs))
        return self.plan

    async def tick(self) -> WorkoutActivity:
        """Finish the current rest once its duration has elapsed."""
        current = self.activity
        if current.type is not ActivityType.RESTING or current.set_id is None:
            return current
        found = engine.find_set(self.plan, current.set_id)
        if found is not None and engine.is_rest_elapsed(found[1], self._clock.now()):
            return await self.complete_rest(current.set_id)
        return current

    async def checkpoint(self) -> None:
        await self._store.save(engine.to_workout(self.plan))

    async def commit(self) -> Workout:
        workout = engine.finish_workout(self.plan, self._clock.now())
        await self._store.save(workout)
        self._plan = None
        logger.info(f"Committed workout {workout.id} with {len(workout.exercises)} exercises")
        return workout

    async def abandon(self) -> None:
        plan = self.plan
        await self._store.delete_workout(plan.workout_id, plan.started_at)
        self._plan = None
        logger.info(f"Abandoned workout {plan.workout_id}")

    async def _transition(self, updated: WorkoutActivityPlan) -> WorkoutActivity:
        previous = self.plan
        if updated is previous:
            return self.activity
        self._plan = updated
        await self.checkpoint()
        moved = self._store.partition_for(updated.started_at) != self._store.partition_for(previous.started_at)
        if moved or updated.workout_id != previous.workout_id:
            await self._store.delete_workout(previous.workout_id, previous.started_at)
        return self.activity
