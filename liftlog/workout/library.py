"""Built-in push/pull/legs plans and the default nine-day rotation."""

from __future__ import annotations

from liftlog.workout.model import (
    BodyweightDifficulty,
    ExercisePlan,
    SetPlan,
    TimeDifficulty,
    WeightDifficulty,
    WorkoutPlan,
)


def _weighted(*pairs: tuple[float, int]) -> tuple[SetPlan, ...]:
    return tuple(SetPlan(WeightDifficulty(weight=weight, reps=reps)) for weight, reps in pairs)


def _bodyweight(*reps: int) -> tuple[SetPlan, ...]:
    return tuple(SetPlan(BodyweightDifficulty(reps=count)) for count in reps)


def _timed(*durations: int) -> tuple[SetPlan, ...]:
    return tuple(SetPlan(TimeDifficulty(duration=seconds)) for seconds in durations)


PUSH = WorkoutPlan(
    name="Push",
    exercises=(
        ExercisePlan("Bench-Press", 30, _weighted((90, 6), (110, 6), (120, 6), (130, 6))),
        ExercisePlan("Pike Pushups", 30, _bodyweight(6, 6, 6, 6)),
        ExercisePlan("Dips", 30, _bodyweight(6, 6, 6, 6)),
        ExercisePlan("Face Pulls", 30, _weighted((10, 6), (10, 6), (10, 6), (10, 6))),
    ),
)

PULL = WorkoutPlan(
    name="Pull",
    exercises=(
        ExercisePlan("Pull Ups", 60, _bodyweight(8, 8, 8, 8)),
        ExercisePlan("Barbell Rows", 60, _weighted((60, 8), (70, 8), (70, 8))),
        ExercisePlan("Chin Ups", 45, _bodyweight(8, 8, 8)),
        ExercisePlan("Hammer Curls", 30, _weighted((12.5, 10), (12.5, 10), (12.5, 10))),
    ),
)

NECK = WorkoutPlan(
    name="Neck",
    exercises=(
        ExercisePlan("Neck Curls", 30, _weighted((2.5, 20))),
        ExercisePlan("Neck Extensions", 30, _weighted((2.5, 20))),
        ExercisePlan("Neck Flexions", 30, _weighted((2.5, 20))),
    ),
)

NORMAL_LEG = WorkoutPlan(
    name="Leg",
    exercises=(
        ExercisePlan("Squat", 90, _weighted((60, 8), (80, 6), (100, 5), (100, 5))),
        ExercisePlan("Romanian Deadlift", 90, _weighted((60, 8), (70, 8), (70, 8))),
        ExercisePlan("Calf Raises", 30, _bodyweight(15, 15, 15)),
        ExercisePlan("Plank", 30, _timed(60, 60)),
    ),
)

PAUSE_LEG = WorkoutPlan(
    name="Pause Leg",
    exercises=(
        ExercisePlan("Pause Squat", 120, _weighted((60, 5), (70, 5), (80, 5))),
        ExercisePlan("Bulgarian Split Squat", 60, _weighted((10, 8), (10, 8), (10, 8))),
        ExercisePlan("Wall Sit", 30, _timed(45, 45)),
    ),
)

PLANS: tuple[WorkoutPlan, ...] = (PUSH, PULL, NECK, NORMAL_LEG, PAUSE_LEG)

DEFAULT_ROTATION: tuple[tuple[WorkoutPlan, ...], ...] = (
    (PUSH, NECK),
    (PULL, NECK),
    (NORMAL_LEG,),
    (),
    (PUSH, NECK),
    (PULL, NECK),
    (PAUSE_LEG,),
    (),
    (),
)


def list_plans() -> tuple[WorkoutPlan, ...]:
    return PLANS


def get_plan(name: str) -> WorkoutPlan:
    plan = next((item for item in PLANS if item.name == name), None)
    if plan is None:
        raise ValueError(f"Unknown workout plan '{name}'")
    return plan
