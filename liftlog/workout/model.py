"""Workout domain models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class DifficultyType(str, Enum):
    WEIGHT = "WEIGHT"
    BODYWEIGHT = "BODYWEIGHT"
    ASSISTED_BODYWEIGHT = "ASSISTED_BODYWEIGHT"
    WEIGHTED_BODYWEIGHT = "WEIGHTED_BODYWEIGHT"
    TIME = "TIME"


class SetStatus(str, Enum):
    UNSTARTED = "UNSTARTED"
    RESTING = "RESTING"
    FINISHED = "FINISHED"


class ActivityType(str, Enum):
    EXERCISING = "EXERCISING"
    RESTING = "RESTING"
    FINISHED = "FINISHED"


@dataclass(frozen=True)
class WeightDifficulty:
    weight: float
    reps: int


@dataclass(frozen=True)
class BodyweightDifficulty:
    reps: int


@dataclass(frozen=True)
class AssistedDifficulty:
    assistance_weight: float
    reps: int


@dataclass(frozen=True)
class TimeDifficulty:
    duration: int


Difficulty = Union[WeightDifficulty, BodyweightDifficulty, AssistedDifficulty, TimeDifficulty]


def default_difficulty(difficulty_type: DifficultyType) -> Difficulty:
    if difficulty_type is DifficultyType.ASSISTED_BODYWEIGHT:
        return AssistedDifficulty(assistance_weight=0, reps=0)
    if difficulty_type is DifficultyType.TIME:
        return TimeDifficulty(duration=60)
    if difficulty_type in (DifficultyType.WEIGHT, DifficultyType.WEIGHTED_BODYWEIGHT):
        return WeightDifficulty(weight=0, reps=0)
    return BodyweightDifficulty(reps=0)


@dataclass(frozen=True)
class SetPlan:
    difficulty: Difficulty


@dataclass(frozen=True)
class ExercisePlan:
    name: str
    rest: int
    sets: tuple[SetPlan, ...]


@dataclass(frozen=True)
class WorkoutPlan:
    name: str
    exercises: tuple[ExercisePlan, ...]

    @property
    def total_sets(self) -> int:
        return sum(len(exercise.sets) for exercise in self.exercises)


@dataclass(frozen=True)
class WorkoutSet:
    id: str
    status: SetStatus
    difficulty: Difficulty
    rest_duration: int
    rest_started_at: int | None = None
    rest_ended_at: int | None = None


@dataclass(frozen=True)
class Exercise:
    id: str
    name: str
    rest_duration: int
    sets: tuple[WorkoutSet, ...]


@dataclass(frozen=True)
class Workout:
    id: str
    name: str
    started_at: int
    exercises: tuple[Exercise, ...]
    ended_at: int | None = None

    @property
    def in_progress(self) -> bool:
        return self.ended_at is None


@dataclass(frozen=True)
class WorkoutActivityPlan:
    """Live, replace-only view of the workout being performed."""

    workout_id: str
    name: str
    started_at: int
    exercises: tuple[Exercise, ...]


@dataclass(frozen=True)
class WorkoutActivity:
    type: ActivityType
    set_id: str | None = None
    exercise_id: str | None = None
    exercise_name: str | None = None
    difficulty: Difficulty | None = None
    rest_duration: int | None = None
    rest_started_at: int | None = None


@dataclass(frozen=True)
class WorkoutSummary:
    total_reps: int
    total_weight_lifted: float
    total_duration_ms: int
    total_hold_time_sec: int


@dataclass(frozen=True)
class Itinerary:
    workouts: tuple[Workout, ...]
    workout_plans: tuple[WorkoutPlan, ...]
