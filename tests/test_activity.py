from __future__ import annotations

import copy

from liftlog.core.ids import SequentialIdGenerator
from liftlog.workout import activity
from liftlog.workout.library import NECK, PUSH
from liftlog.workout.model import (
    ActivityType,
    BodyweightDifficulty,
    DifficultyType,
    ExercisePlan,
    SetPlan,
    SetStatus,
    TimeDifficulty,
    WeightDifficulty,
    WorkoutActivityPlan,
    WorkoutPlan,
)

T0 = 1_728_115_200_000

THREE_SETS = WorkoutPlan(
    name="Bench Day",
    exercises=(
        ExercisePlan(
            "Bench-Press",
            90,
            (
                SetPlan(WeightDifficulty(weight=60, reps=8)),
                SetPlan(WeightDifficulty(weight=70, reps=6)),
                SetPlan(WeightDifficulty(weight=80, reps=4)),
            ),
        ),
    ),
)


def _plan(source: WorkoutPlan = THREE_SETS) -> WorkoutActivityPlan:
    return activity.create_activity_plan(source, SequentialIdGenerator(), T0)


def _set_ids(plan: WorkoutActivityPlan) -> list[str]:
    return [item.id for _, item in activity.iter_sets(plan)]


def test_create_activity_plan_copies_targets_with_fresh_ids() -> None:
    plan = activity.create_activity_plan(PUSH, SequentialIdGenerator(), T0, workout_id="2024-10-05-Push")

    assert plan.workout_id == "2024-10-05-Push"
    assert plan.name == "Push"
    assert plan.started_at == T0
    assert len(plan.exercises) == len(PUSH.exercises)
    ids = _set_ids(plan)
    assert len(ids) == len(set(ids)) == PUSH.total_sets
    first = plan.exercises[0]
    assert first.rest_duration == 30
    assert first.sets[0].difficulty == WeightDifficulty(weight=90, reps=6)
    assert all(item.status is SetStatus.UNSTARTED for _, item in activity.iter_sets(plan))


def test_progression_exercising_resting_finished() -> None:
    plan = _plan()
    s1, s2, s3 = _set_ids(plan)

    current = activity.current_activity(plan)
    assert current.type is ActivityType.EXERCISING
    assert current.set_id == s1
    assert current.exercise_name == "Bench-Press"
    assert current.difficulty == WeightDifficulty(weight=60, reps=8)

    plan = activity.complete_set(plan, s1, T0 + 1_000)
    current = activity.current_activity(plan)
    assert current.type is ActivityType.RESTING
    assert current.set_id == s1
    assert current.rest_duration == 90
    assert current.rest_started_at == T0 + 1_000

    plan = activity.complete_rest(plan, s1, T0 + 91_000)
    current = activity.current_activity(plan)
    assert current.type is ActivityType.EXERCISING
    assert current.set_id == s2

    plan = activity.complete_rest(activity.complete_set(plan, s2, T0 + 120_000), s2, T0 + 210_000)
    # Nothing follows the last set, so it finishes without a rest.
    plan = activity.complete_set(plan, s3, T0 + 240_000)
    assert activity.find_set(plan, s3)[1].rest_started_at is None

    assert activity.current_activity(plan).type is ActivityType.FINISHED
    assert activity.current_activity(plan).set_id is None


def test_transitions_ignore_sets_in_the_wrong_state() -> None:
    plan = _plan()
    s1 = _set_ids(plan)[0]

    assert activity.complete_rest(plan, s1, T0) is plan
    resting = activity.complete_set(plan, s1, T0)
    assert activity.complete_set(resting, s1, T0 + 5) is resting


def test_rest_elapsed_boundary() -> None:
    plan = activity.complete_set(_plan(), _set_ids(_plan())[0], T0)
    _, resting = activity.current_set(plan)

    assert activity.is_rest_elapsed(resting, T0 + 89_999) is False
    assert activity.rest_remaining_ms(resting, T0 + 89_000) == 1_000
    assert activity.is_rest_elapsed(resting, T0 + 90_000) is True
    assert activity.rest_remaining_ms(resting, T0 + 95_000) == 0


def test_update_set_is_pure_and_preserves_id() -> None:
    plan = _plan()
    snapshot = copy.deepcopy(plan)
    target = _set_ids(plan)[1]

    updated = activity.update_set(plan, target, difficulty=WeightDifficulty(weight=72.5, reps=6), id="st-hijack")

    assert plan == snapshot
    assert updated is not plan
    _, changed = activity.find_set(updated, target)
    assert changed.id == target
    assert changed.difficulty == WeightDifficulty(weight=72.5, reps=6)
    assert activity.find_set(updated, "st-hijack") is None


def test_unknown_ids_are_silent_noops() -> None:
    plan = _plan()
    ids = SequentialIdGenerator()

    assert activity.update_set(plan, "missing", status=SetStatus.FINISHED) is plan
    assert activity.remove_set(plan, "missing") is plan
    assert activity.duplicate_last_set(plan, "missing", ids) is plan
    assert activity.update_exercise(plan, "missing", name="x") is plan
    assert activity.remove_exercise(plan, "missing") is plan
    assert activity.update_rest(plan, "missing", 10) is plan
    assert activity.complete_set(plan, "missing", T0) is plan


def test_remove_set_drops_emptied_exercise() -> None:
    plan = activity.create_activity_plan(NECK, SequentialIdGenerator(), T0)
    only_set = plan.exercises[0].sets[0].id

    updated = activity.remove_set(plan, only_set)

    assert len(updated.exercises) == len(plan.exercises) - 1
    assert updated.exercises[0] == plan.exercises[1]


def test_duplicate_last_set_appends_unstarted_copy() -> None:
    ids = SequentialIdGenerator()
    plan = activity.create_activity_plan(NECK, ids, T0)
    exercise = plan.exercises[0]
    finished = activity.complete_rest(
        activity.complete_set(plan, exercise.sets[0].id, T0), exercise.sets[0].id, T0 + 30_000
    )

    updated = activity.duplicate_last_set(finished, exercise.id, ids)

    first, second = activity.get_exercise(updated, exercise.id).sets
    assert second.id != first.id
    assert second.status is SetStatus.UNSTARTED
    assert second.difficulty == first.difficulty
    assert second.rest_duration == first.rest_duration
    assert second.rest_started_at is None and second.rest_ended_at is None
    assert len(activity.get_exercise(finished, exercise.id).sets) == 1


def test_update_and_remove_exercise() -> None:
    plan = activity.create_activity_plan(PUSH, SequentialIdGenerator(), T0)
    first, second = plan.exercises[0].id, plan.exercises[1].id

    renamed = activity.update_exercise(plan, first, name="Incline Press", id="nope")
    assert renamed.exercises[0].name == "Incline Press"
    assert renamed.exercises[0].id == first

    removed = activity.remove_exercise(plan, first)
    assert [e.id for e in removed.exercises][0] == second
    assert len(plan.exercises) == len(PUSH.exercises)


def test_update_workout_merges_top_level_fields() -> None:
    plan = _plan()

    updated = activity.update_workout(plan, name="Evening Bench")

    assert updated.name == "Evening Bench"
    assert updated.exercises == plan.exercises
    assert plan.name == "Bench Day"


def test_update_rest_keeps_finished_sets() -> None:
    plan = _plan()
    s1 = _set_ids(plan)[0]
    plan = activity.complete_rest(activity.complete_set(plan, s1, T0), s1, T0 + 90_000)
    exercise_id = plan.exercises[0].id

    updated = activity.update_rest(plan, exercise_id, 120)

    exercise = activity.get_exercise(updated, exercise_id)
    assert exercise.rest_duration == 120
    assert [item.rest_duration for item in exercise.sets] == [90, 120, 120]


def test_add_exercise_uses_default_difficulty() -> None:
    ids = SequentialIdGenerator()
    plan = activity.create_activity_plan(THREE_SETS, ids, T0)

    updated = activity.add_exercise(plan, "Plank", DifficultyType.TIME, ids)

    added = updated.exercises[-1]
    assert added.name == "Plank"
    assert added.rest_duration == 60
    assert added.sets[0].difficulty == TimeDifficulty(duration=60)
    assert len(plan.exercises) == 1


def test_reorder_exercises_closes_rest_when_current_set_changes() -> None:
    ids = SequentialIdGenerator()
    plan = activity.create_activity_plan(NECK, ids, T0)
    a, b, c = (e.id for e in plan.exercises)
    plan = activity.duplicate_last_set(plan, a, ids)
    resting_id = plan.exercises[0].sets[0].id
    plan = activity.complete_set(plan, resting_id, T0)
    assert activity.current_activity(plan).type is ActivityType.RESTING

    same_current = activity.reorder_exercises(plan, [a, c, b], T0 + 5_000)
    assert activity.find_set(same_current, resting_id)[1].status is SetStatus.RESTING
    assert [e.id for e in same_current.exercises] == [a, c, b]

    moved = activity.reorder_exercises(plan, [c, a, b], T0 + 5_000)
    _, closed = activity.find_set(moved, resting_id)
    assert closed.status is SetStatus.FINISHED
    assert closed.rest_ended_at == T0 + 5_000
    assert activity.current_activity(moved).exercise_id == c

    partial = activity.reorder_exercises(plan, [b], T0)
    assert [e.id for e in partial.exercises] == [b, a, c]


def test_move_exercise_is_pure() -> None:
    plan = activity.create_activity_plan(PUSH, SequentialIdGenerator(), T0)
    before = [e.id for e in plan.exercises]

    moved = activity.move_exercise(plan, 0, 2)

    assert [e.id for e in plan.exercises] == before
    assert [e.id for e in moved.exercises] == [before[1], before[2], before[0], before[3]]
    assert activity.move_exercise(plan, 9, 0) is plan
    assert activity.pop_and_insert((1, 2, 3), 2, 0) == (3, 1, 2)


def test_finish_workout_drops_unstarted_and_closes_rest() -> None:
    plan = activity.create_activity_plan(PUSH, SequentialIdGenerator(), T0)
    first = plan.exercises[0]
    plan = activity.complete_rest(activity.complete_set(plan, first.sets[0].id, T0), first.sets[0].id, T0 + 30_000)
    plan = activity.complete_set(plan, first.sets[1].id, T0 + 60_000)

    workout = activity.finish_workout(plan, T0 + 70_000)

    assert workout.id == plan.workout_id
    assert workout.ended_at == T0 + 70_000
    assert len(workout.exercises) == 1
    done = workout.exercises[0].sets
    assert [item.status for item in done] == [SetStatus.FINISHED, SetStatus.FINISHED]
    assert done[1].rest_ended_at == T0 + 70_000


def test_resume_keeps_ids_and_statuses() -> None:
    plan = _plan()
    s1 = _set_ids(plan)[0]
    snapshot = activity.to_workout(activity.complete_set(plan, s1, T0))

    resumed = activity.resume_workout(snapshot)

    assert resumed.workout_id == snapshot.id
    assert activity.current_activity(resumed).type is ActivityType.RESTING


def test_repeat_workout_resets_progress() -> None:
    ids = SequentialIdGenerator()
    plan = activity.create_activity_plan(THREE_SETS, ids, T0)
    s1 = _set_ids(plan)[0]
    done = activity.finish_workout(activity.complete_set(plan, s1, T0), T0 + 1_000)

    again = activity.repeat_workout(done, ids, T0 + 86_400_000)

    assert again.workout_id != done.id
    assert again.started_at == T0 + 86_400_000
    assert [item.status for _, item in activity.iter_sets(again)] == [SetStatus.UNSTARTED]
    assert next(activity.iter_sets(again))[1].difficulty == WeightDifficulty(weight=60, reps=8)


def test_summarize_counts_started_sets() -> None:
    plan = activity.create_activity_plan(
        WorkoutPlan(
            name="Mixed",
            exercises=(
                ExercisePlan("Bench-Press", 60, (SetPlan(WeightDifficulty(weight=100, reps=5)),)),
                ExercisePlan("Dips", 60, (SetPlan(BodyweightDifficulty(reps=10)),)),
                ExercisePlan("Weighted Dips", 60, (SetPlan(WeightDifficulty(weight=10, reps=5)),)),
                ExercisePlan("Plank", 60, (SetPlan(TimeDifficulty(duration=45)),)),
                ExercisePlan("Squat", 60, (SetPlan(WeightDifficulty(weight=200, reps=1)),)),
            ),
        ),
        SequentialIdGenerator(),
        T0,
    )
    for exercise in plan.exercises[:4]:
        set_id = exercise.sets[0].id
        plan = activity.complete_rest(activity.complete_set(plan, set_id, T0), set_id, T0 + 60_000)

    summary = activity.summarize(
        plan,
        bodyweight=80,
        now=T0 + 600_000,
        difficulty_types={"Weighted Dips": DifficultyType.WEIGHTED_BODYWEIGHT},
    )

    assert summary.total_reps == 20
    assert summary.total_weight_lifted == 100 * 5 + 80 * 10 + (80 + 10) * 5
    assert summary.total_hold_time_sec == 45
    assert summary.total_duration_ms == 600_000


def test_complete_set_never_skips_rest_when_sets_follow() -> None:
    plan = _plan()
    s1, s2, _ = _set_ids(plan)

    # Completing a later set first still leaves the earlier one current.
    plan = activity.complete_set(plan, s2, T0)
    assert activity.find_set(plan, s2)[1].status is SetStatus.RESTING
    assert activity.current_activity(plan).set_id == s1

    plan = activity.complete_set(plan, s1, T0 + 1_000)
    assert activity.find_set(plan, s1)[1].status is SetStatus.RESTING
