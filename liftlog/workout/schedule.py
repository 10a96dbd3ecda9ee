"""Cyclic program schedule: which plans are due on a given day."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Sequence

from loguru import logger

from liftlog.core.dates import calendar_day, days_between, truncate_to_day
from liftlog.workout.library import DEFAULT_ROTATION
from liftlog.workout.model import WorkoutPlan

DEFAULT_ORIGIN = date(2024, 10, 5)


class ProgramSchedule:
    """Maps calendar days onto a fixed rotation starting at ``origin``.

    Day ``origin`` uses rotation entry 0, the next day entry 1, and so on,
    wrapping every ``len(rotation)`` days in both directions. Each skipped day
    before the requested one pushes the rotation back by a day; a skipped day
    itself is a rest day.
    """

    def __init__(
        self,
        rotation: Sequence[Sequence[WorkoutPlan]] = DEFAULT_ROTATION,
        origin: date = DEFAULT_ORIGIN,
    ) -> None:
        if not rotation:
            raise ValueError("Program rotation must contain at least one day")
        self._rotation = tuple(tuple(day) for day in rotation)
        self._origin = origin

    @property
    def length(self) -> int:
        return len(self._rotation)

    @property
    def origin(self) -> date:
        return self._origin

    def day_index(self, timestamp_ms: int, skipped_days: Iterable[int] = ()) -> int:
        day = truncate_to_day(timestamp_ms)
        delta = days_between(self._origin, calendar_day(day))
        delta -= sum(1 for skipped in {truncate_to_day(s) for s in skipped_days} if skipped < day)
        return delta % len(self._rotation)

    def get_workout_plans(
        self, timestamp_ms: int, skipped_days: Iterable[int] = ()
    ) -> tuple[WorkoutPlan, ...]:
        skipped = {truncate_to_day(s) for s in skipped_days}
        if truncate_to_day(timestamp_ms) in skipped:
            logger.debug(f"Day {calendar_day(timestamp_ms)} was skipped, treating as rest day")
            return ()
        index = self.day_index(timestamp_ms, skipped)
        logger.debug(f"Rotation day {index} for {calendar_day(timestamp_ms)}")
        return self._rotation[index]
