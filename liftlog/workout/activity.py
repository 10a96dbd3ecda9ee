"""Live workout progression and pure edits of an in-progress plan.

Every function here takes a plan value and returns a new one; inputs are
never mutated. The edit functions accept either a ``WorkoutActivityPlan`` or a
stored ``Workout`` (both expose ``exercises``), so the same operations serve
the live player and edits of completed workouts.

Edits that target an unknown set or exercise id return the input unchanged.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterator, Mapping, Sequence, TypeVar

from liftlog.core.dates import SECOND_MS
from liftlog.core.ids import EXERCISE_PREFIX, SET_PREFIX, WORKOUT_PREFIX, IdGenerator
from liftlog.workout.model import (
    ActivityType,
    AssistedDifficulty,
    BodyweightDifficulty,
    DifficultyType,
    Exercise,
    SetStatus,
    TimeDifficulty,
    WeightDifficulty,
    Workout,
    WorkoutActivity,
    WorkoutActivityPlan,
    WorkoutPlan,
    WorkoutSet,
    WorkoutSummary,
    default_difficulty,
)

PlanT = TypeVar("PlanT", Workout, WorkoutActivityPlan)
T = TypeVar("T")

DEFAULT_REST_SEC = 60


# -- construction -----------------------------------------------------------


def create_activity_plan(
    plan: WorkoutPlan,
    ids: IdGenerator,
    now: int,
    workout_id: str | None = None,
) -> WorkoutActivityPlan:
    exercises = tuple(
        Exercise(
            id=ids.generate(EXERCISE_PREFIX),
            name=exercise.name,
            rest_duration=exercise.rest,
            sets=tuple(
                WorkoutSet(
                    id=ids.generate(SET_PREFIX),
                    status=SetStatus.UNSTARTED,
                    difficulty=set_plan.difficulty,
                    rest_duration=exercise.rest,
                )
                for set_plan in exercise.sets
            ),
        )
        for exercise in plan.exercises
    )
    return WorkoutActivityPlan(
        workout_id=workout_id or ids.generate(WORKOUT_PREFIX),
        name=plan.name,
        started_at=now,
        exercises=exercises,
    )


def repeat_workout(workout: Workout, ids: IdGenerator, now: int) -> WorkoutActivityPlan:
    """Start a fresh session with the same exercises and targets as ``workout``."""
    exercises = tuple(
        Exercise(
            id=ids.generate(EXERCISE_PREFIX),
            name=exercise.name,
            rest_duration=exercise.rest_duration,
            sets=tuple(
                WorkoutSet(
                    id=ids.generate(SET_PREFIX),
                    status=SetStatus.UNSTARTED,
                    difficulty=item.difficulty,
                    rest_duration=exercise.rest_duration,
                )
                for item in exercise.sets
            ),
        )
        for exercise in workout.exercises
    )
    return WorkoutActivityPlan(
        workout_id=ids.generate(WORKOUT_PREFIX),
        name=workout.name,
        started_at=now,
        exercises=exercises,
    )


def resume_workout(workout: Workout) -> WorkoutActivityPlan:
    return WorkoutActivityPlan(
        workout_id=workout.id,
        name=workout.name,
        started_at=workout.started_at,
        exercises=workout.exercises,
    )


def to_workout(plan: WorkoutActivityPlan, ended_at: int | None = None) -> Workout:
    return Workout(
        id=plan.workout_id,
        name=plan.name,
        started_at=plan.started_at,
        exercises=plan.exercises,
        ended_at=ended_at,
    )


def finish_workout(plan: WorkoutActivityPlan, now: int) -> Workout:
    """Commit the session: drop unstarted sets, close open rests, stamp the end."""
    exercises = []
    for exercise in plan.exercises:
        sets = tuple(
            replace(item, status=SetStatus.FINISHED, rest_ended_at=now)
            if item.status is SetStatus.RESTING
            else item
            for item in exercise.sets
            if item.status is not SetStatus.UNSTARTED
        )
        if sets:
            exercises.append(replace(exercise, sets=sets))
    return to_workout(replace(plan, exercises=tuple(exercises)), ended_at=now)


# -- queries ----------------------------------------------------------------


def iter_sets(plan: Workout | WorkoutActivityPlan) -> Iterator[tuple[Exercise, WorkoutSet]]:
    for exercise in plan.exercises:
        for item in exercise.sets:
            yield exercise, item


def find_set(
    plan: Workout | WorkoutActivityPlan, set_id: str
) -> tuple[Exercise, WorkoutSet] | None:
    return next(((e, s) for e, s in iter_sets(plan) if s.id == set_id), None)


def get_exercise(plan: Workout | WorkoutActivityPlan, exercise_id: str) -> Exercise | None:
    return next((item for item in plan.exercises if item.id == exercise_id), None)


def current_set(plan: Workout | WorkoutActivityPlan) -> tuple[Exercise, WorkoutSet] | None:
    return next(((e, s) for e, s in iter_sets(plan) if s.status is not SetStatus.FINISHED), None)


def current_activity(plan: Workout | WorkoutActivityPlan) -> WorkoutActivity:
    found = current_set(plan)
    if found is None:
        return WorkoutActivity(type=ActivityType.FINISHED)
    exercise, item = found
    if item.status is SetStatus.RESTING:
        return WorkoutActivity(
            type=ActivityType.RESTING,
            set_id=item.id,
            exercise_id=exercise.id,
            exercise_name=exercise.name,
            rest_duration=item.rest_duration,
            rest_started_at=item.rest_started_at,
        )
    return WorkoutActivity(
        type=ActivityType.EXERCISING,
        set_id=item.id,
        exercise_id=exercise.id,
        exercise_name=exercise.name,
        difficulty=item.difficulty,
    )


def next_unfinished_set(
    plan: Workout | WorkoutActivityPlan, set_id: str
) -> tuple[Exercise, WorkoutSet] | None:
    pending = [(e, s) for e, s in iter_sets(plan) if s.status is not SetStatus.FINISHED]
    for index, (_, item) in enumerate(pending):
        if item.id == set_id:
            return pending[index + 1] if index + 1 < len(pending) else None
    return None


def rest_ends_at(item: WorkoutSet) -> int | None:
    if item.rest_started_at is None:
        return None
    return item.rest_started_at + item.rest_duration * SECOND_MS


def is_rest_elapsed(item: WorkoutSet, now: int) -> bool:
    ends_at = rest_ends_at(item)
    return item.status is SetStatus.RESTING and ends_at is not None and ends_at <= now


def rest_remaining_ms(item: WorkoutSet, now: int) -> int:
    ends_at = rest_ends_at(item)
    if item.status is not SetStatus.RESTING or ends_at is None:
        return 0
    return max(0, ends_at - now)


def summarize(
    workout: Workout | WorkoutActivityPlan,
    bodyweight: float,
    now: int,
    difficulty_types: Mapping[str, DifficultyType] | None = None,
) -> WorkoutSummary:
    """Totals over every started set; ``difficulty_types`` maps exercise names."""
    total_reps = 0
    total_weight = 0.0
    total_hold = 0
    types = difficulty_types or {}
    for exercise, item in iter_sets(workout):
        if item.status is SetStatus.UNSTARTED:
            continue
        difficulty = item.difficulty
        kind = types.get(exercise.name)
        if isinstance(difficulty, TimeDifficulty):
            total_hold += difficulty.duration
        elif isinstance(difficulty, AssistedDifficulty):
            total_reps += difficulty.reps
            total_weight += (bodyweight - difficulty.assistance_weight) * difficulty.reps
        elif isinstance(difficulty, WeightDifficulty):
            total_reps += difficulty.reps
            base = bodyweight if kind is DifficultyType.WEIGHTED_BODYWEIGHT else 0
            total_weight += (base + difficulty.weight) * difficulty.reps
        elif isinstance(difficulty, BodyweightDifficulty):
            total_reps += difficulty.reps
            total_weight += bodyweight * difficulty.reps

    ended_at = getattr(workout, "ended_at", None)
    return WorkoutSummary(
        total_reps=total_reps,
        total_weight_lifted=total_weight,
        total_duration_ms=(ended_at if ended_at is not None else now) - workout.started_at,
        total_hold_time_sec=total_hold,
    )


# -- set transitions --------------------------------------------------------


def complete_set(plan: PlanT, set_id: str, now: int) -> PlanT:
    """UNSTARTED -> RESTING, or straight to FINISHED when nothing follows."""
    found = find_set(plan, set_id)
    if found is None or found[1].status is not SetStatus.UNSTARTED:
        return plan
    if next_unfinished_set(plan, set_id) is None:
        return update_set(plan, set_id, status=SetStatus.FINISHED)
    return update_set(plan, set_id, status=SetStatus.RESTING, rest_started_at=now)


def complete_rest(plan: PlanT, set_id: str, now: int) -> PlanT:
    found = find_set(plan, set_id)
    if found is None or found[1].status is not SetStatus.RESTING:
        return plan
    return update_set(plan, set_id, status=SetStatus.FINISHED, rest_ended_at=now)


# -- edits ------------------------------------------------------------------


def update_set(plan: PlanT, set_id: str, **changes: object) -> PlanT:
    if find_set(plan, set_id) is None:
        return plan
    changes.pop("id", None)
    exercises = tuple(
        replace(
            exercise,
            sets=tuple(replace(s, **changes) if s.id == set_id else s for s in exercise.sets),
        )
        if any(s.id == set_id for s in exercise.sets)
        else exercise
        for exercise in plan.exercises
    )
    return replace(plan, exercises=exercises)


def remove_set(plan: PlanT, set_id: str) -> PlanT:
    if find_set(plan, set_id) is None:
        return plan
    exercises = []
    for exercise in plan.exercises:
        sets = tuple(item for item in exercise.sets if item.id != set_id)
        if sets:
            exercises.append(replace(exercise, sets=sets) if len(sets) != len(exercise.sets) else exercise)
    return replace(plan, exercises=tuple(exercises))


def duplicate_last_set(plan: PlanT, exercise_id: str, ids: IdGenerator) -> PlanT:
    exercise = get_exercise(plan, exercise_id)
    if exercise is None or not exercise.sets:
        return plan
    last = exercise.sets[-1]
    copy = WorkoutSet(
        id=ids.generate(SET_PREFIX),
        status=SetStatus.UNSTARTED,
        difficulty=last.difficulty,
        rest_duration=last.rest_duration,
    )
    return update_exercise(plan, exercise_id, sets=exercise.sets + (copy,))


def update_exercise(plan: PlanT, exercise_id: str, **changes: object) -> PlanT:
    if get_exercise(plan, exercise_id) is None:
        return plan
    changes.pop("id", None)
    exercises = tuple(
        replace(item, **changes) if item.id == exercise_id else item for item in plan.exercises
    )
    return replace(plan, exercises=exercises)


def remove_exercise(plan: PlanT, exercise_id: str) -> PlanT:
    if get_exercise(plan, exercise_id) is None:
        return plan
    return replace(plan, exercises=tuple(e for e in plan.exercises if e.id != exercise_id))


def update_workout(plan: PlanT, **changes: object) -> PlanT:
    return replace(plan, **changes)


def update_rest(plan: PlanT, exercise_id: str, rest_duration: int) -> PlanT:
    """Change an exercise's rest; finished sets keep the rest they were done with."""
    exercise = get_exercise(plan, exercise_id)
    if exercise is None:
        return plan
    sets = tuple(
        item if item.status is SetStatus.FINISHED else replace(item, rest_duration=rest_duration)
        for item in exercise.sets
    )
    return update_exercise(plan, exercise_id, sets=sets, rest_duration=rest_duration)


def add_exercise(
    plan: PlanT,
    name: str,
    difficulty_type: DifficultyType,
    ids: IdGenerator,
    rest_duration: int = DEFAULT_REST_SEC,
) -> PlanT:
    exercise = Exercise(
        id=ids.generate(EXERCISE_PREFIX),
        name=name,
        rest_duration=rest_duration,
        sets=(
            WorkoutSet(
                id=ids.generate(SET_PREFIX),
                status=SetStatus.UNSTARTED,
                difficulty=default_difficulty(difficulty_type),
                rest_duration=rest_duration,
            ),
        ),
    )
    return replace(plan, exercises=plan.exercises + (exercise,))


def reorder_exercises(plan: PlanT, exercise_ids: Sequence[str], now: int) -> PlanT:
    """Reorder by id; exercises not listed keep their relative order at the end.

    When the reorder changes which set is current, any open rest is closed so
    the user is not left resting on a set that is no longer next.
    """
    by_id = {item.id: item for item in plan.exercises}
    ordered = [by_id[i] for i in dict.fromkeys(exercise_ids) if i in by_id]
    listed = {item.id for item in ordered}
    ordered.extend(item for item in plan.exercises if item.id not in listed)
    reordered = replace(plan, exercises=tuple(ordered))

    before = current_set(plan)
    after = current_set(reordered)
    before_id = before[1].id if before else None
    after_id = after[1].id if after else None
    if before_id == after_id:
        return reordered

    exercises = tuple(
        replace(
            exercise,
            sets=tuple(
                replace(item, status=SetStatus.FINISHED, rest_ended_at=now)
                if item.status is SetStatus.RESTING
                else item
                for item in exercise.sets
            ),
        )
        for exercise in reordered.exercises
    )
    return replace(reordered, exercises=exercises)


def move_exercise(plan: PlanT, from_index: int, to_index: int) -> PlanT:
    if not 0 <= from_index < len(plan.exercises):
        return plan
    return replace(plan, exercises=pop_and_insert(plan.exercises, from_index, to_index))


def pop_and_insert(items: Sequence[T], pop_index: int, insert_index: int) -> tuple[T, ...]:
    """Return a copy of ``items`` with one element moved; ``items`` is left alone."""
    item = items[pop_index]
    removed = list(items[:pop_index]) + list(items[pop_index + 1 :])
    return tuple(removed[:insert_index]) + (item,) + tuple(removed[insert_index:])
