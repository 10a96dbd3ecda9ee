"""JSON encoding of workout records, partitions and plan files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from liftlog.workout.model import (
    AssistedDifficulty,
    BodyweightDifficulty,
    Difficulty,
    Exercise,
    ExercisePlan,
    SetPlan,
    SetStatus,
    TimeDifficulty,
    WeightDifficulty,
    Workout,
    WorkoutPlan,
    WorkoutSet,
)

_STATUS_BY_INDEX = (SetStatus.UNSTARTED, SetStatus.RESTING, SetStatus.FINISHED)


class WorkoutDecodeError(ValueError):
    """Raised when stored or user-provided workout JSON is invalid."""


def difficulty_to_dict(difficulty: Difficulty) -> dict[str, Any]:
    if isinstance(difficulty, WeightDifficulty):
        return {"weight": difficulty.weight, "reps": difficulty.reps}
    if isinstance(difficulty, AssistedDifficulty):
        return {"assistanceWeight": difficulty.assistance_weight, "reps": difficulty.reps}
    if isinstance(difficulty, TimeDifficulty):
        return {"duration": difficulty.duration}
    return {"reps": difficulty.reps}


def difficulty_from_dict(raw: object, where: str) -> Difficulty:
    if not isinstance(raw, dict):
        raise WorkoutDecodeError(f"{where}: difficulty must be an object")
    if "assistanceWeight" in raw:
        return AssistedDifficulty(
            assistance_weight=_number(raw.get("assistanceWeight"), "assistanceWeight", where),
            reps=_int(raw.get("reps"), "reps", where),
        )
    if "duration" in raw:
        return TimeDifficulty(duration=_int(raw.get("duration"), "duration", where))
    if "weight" in raw:
        return WeightDifficulty(
            weight=_number(raw.get("weight"), "weight", where),
            reps=_int(raw.get("reps"), "reps", where),
        )
    if "reps" in raw:
        return BodyweightDifficulty(reps=_int(raw.get("reps"), "reps", where))
    raise WorkoutDecodeError(f"{where}: unrecognised difficulty {sorted(raw)}")


def workout_to_dict(workout: Workout) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": workout.id,
        "name": workout.name,
        "startedAt": workout.started_at,
        "exercises": [
            {
                "id": exercise.id,
                "name": exercise.name,
                "restDuration": exercise.rest_duration,
                "sets": [_set_to_dict(item) for item in exercise.sets],
            }
            for exercise in workout.exercises
        ],
    }
    if workout.ended_at is not None:
        payload["endedAt"] = workout.ended_at
    return payload


def _set_to_dict(item: WorkoutSet) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": item.id,
        "status": item.status.value,
        "difficulty": difficulty_to_dict(item.difficulty),
        "restDuration": item.rest_duration,
    }
    if item.rest_started_at is not None:
        payload["restStartedAt"] = item.rest_started_at
    if item.rest_ended_at is not None:
        payload["restEndedAt"] = item.rest_ended_at
    return payload


def workout_from_dict(raw: object) -> Workout:
    if not isinstance(raw, dict):
        raise WorkoutDecodeError("Workout record must be an object")
    workout_id = _str(raw.get("id"), "id", "Workout")
    where = f"Workout {workout_id}"
    exercises_obj = raw.get("exercises", [])
    if not isinstance(exercises_obj, list):
        raise WorkoutDecodeError(f"{where}: 'exercises' must be an array")
    return Workout(
        id=workout_id,
        name=_str(raw.get("name"), "name", where),
        started_at=_int(raw.get("startedAt"), "startedAt", where),
        ended_at=_optional_int(raw.get("endedAt"), "endedAt", where),
        exercises=tuple(_exercise_from_dict(item, where) for item in exercises_obj),
    )


def _exercise_from_dict(raw: object, parent: str) -> Exercise:
    if not isinstance(raw, dict):
        raise WorkoutDecodeError(f"{parent}: exercise must be an object")
    exercise_id = _str(raw.get("id"), "id", parent)
    where = f"{parent} exercise {exercise_id}"
    rest_duration = _int(raw.get("restDuration", 0), "restDuration", where)
    sets_obj = raw.get("sets", [])
    if not isinstance(sets_obj, list):
        raise WorkoutDecodeError(f"{where}: 'sets' must be an array")
    return Exercise(
        id=exercise_id,
        name=_str(raw.get("name"), "name", where),
        rest_duration=rest_duration,
        sets=tuple(_set_from_dict(item, where, rest_duration) for item in sets_obj),
    )


def _set_from_dict(raw: object, parent: str, default_rest: int) -> WorkoutSet:
    if not isinstance(raw, dict):
        raise WorkoutDecodeError(f"{parent}: set must be an object")
    set_id = _str(raw.get("id"), "id", parent)
    where = f"{parent} set {set_id}"
    return WorkoutSet(
        id=set_id,
        status=_status(raw.get("status"), where),
        difficulty=difficulty_from_dict(raw.get("difficulty"), where),
        rest_duration=_int(raw.get("restDuration", default_rest), "restDuration", where),
        rest_started_at=_optional_int(raw.get("restStartedAt"), "restStartedAt", where),
        rest_ended_at=_optional_int(raw.get("restEndedAt"), "restEndedAt", where),
    )


def encode_partition(workouts: list[Workout]) -> bytes:
    payload = [workout_to_dict(workout) for workout in workouts]
    return json.dumps(payload, ensure_ascii=True).encode("utf-8")


def decode_partition(data: bytes) -> list[Workout]:
    try:
        payload = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise WorkoutDecodeError(f"Invalid partition JSON: {exc}") from exc
    if not isinstance(payload, list):
        raise WorkoutDecodeError("Partition must be a JSON array of workouts")
    return [workout_from_dict(item) for item in payload]


def plan_to_dict(plan: WorkoutPlan) -> dict[str, Any]:
    return {
        "name": plan.name,
        "exercises": [
            {
                "name": exercise.name,
                "rest": exercise.rest,
                "sets": [{"difficulty": difficulty_to_dict(item.difficulty)} for item in exercise.sets],
            }
            for exercise in plan.exercises
        ],
    }


def plan_from_dict(raw: object) -> WorkoutPlan:
    if not isinstance(raw, dict):
        raise WorkoutDecodeError("Workout plan must be an object")
    name = _str(raw.get("name"), "name", "Workout plan").strip()
    if not name:
        raise WorkoutDecodeError("Workout plan: 'name' must not be empty")
    exercises_obj = raw.get("exercises")
    if not isinstance(exercises_obj, list):
        raise WorkoutDecodeError(f"Plan {name}: 'exercises' must be an array")

    exercises: list[ExercisePlan] = []
    for i, item in enumerate(exercises_obj):
        where = f"Plan {name} exercise {i + 1}"
        if not isinstance(item, dict):
            raise WorkoutDecodeError(f"{where}: must be an object")
        rest = _int(item.get("rest", 60), "rest", where)
        if rest < 0:
            raise WorkoutDecodeError(f"{where}: rest must be >= 0")
        sets_obj = item.get("sets")
        if not isinstance(sets_obj, list) or not sets_obj:
            raise WorkoutDecodeError(f"{where}: 'sets' must be a non-empty array")
        sets = []
        for j, raw_set in enumerate(sets_obj):
            # Plan files may inline the difficulty or nest it under "difficulty".
            source = raw_set.get("difficulty", raw_set) if isinstance(raw_set, dict) else raw_set
            sets.append(SetPlan(difficulty=difficulty_from_dict(source, f"{where} set {j + 1}")))
        exercises.append(
            ExercisePlan(name=_str(item.get("name"), "name", where), rest=rest, sets=tuple(sets))
        )
    return WorkoutPlan(name=name, exercises=tuple(exercises))


def load_rotation(path: str | Path) -> tuple[tuple[WorkoutPlan, ...], ...]:
    """Load a rotation file: ``{"plans": [...], "rotation": [["Push"], [], ...]}``."""
    file_path = Path(path)
    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise WorkoutDecodeError(f"Invalid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise WorkoutDecodeError("Program JSON must be an object")
    plans_obj = data.get("plans")
    rotation_obj = data.get("rotation")
    if not isinstance(plans_obj, list):
        raise WorkoutDecodeError("Program field 'plans' must be an array")
    if not isinstance(rotation_obj, list) or not rotation_obj:
        raise WorkoutDecodeError("Program field 'rotation' must be a non-empty array")

    by_name = {}
    for raw in plans_obj:
        plan = plan_from_dict(raw)
        by_name[plan.name] = plan

    rotation: list[tuple[WorkoutPlan, ...]] = []
    for i, day in enumerate(rotation_obj):
        if not isinstance(day, list):
            raise WorkoutDecodeError(f"Rotation day {i + 1}: must be an array of plan names")
        missing = [name for name in day if name not in by_name]
        if missing:
            raise WorkoutDecodeError(f"Rotation day {i + 1}: unknown plans {missing}")
        rotation.append(tuple(by_name[name] for name in day))
    return tuple(rotation)


def _status(raw: object, where: str) -> SetStatus:
    if isinstance(raw, int) and not isinstance(raw, bool) and 0 <= raw < len(_STATUS_BY_INDEX):
        return _STATUS_BY_INDEX[raw]
    if isinstance(raw, str):
        try:
            return SetStatus(raw.strip().upper())
        except ValueError:
            pass
    raise WorkoutDecodeError(f"{where}: invalid status {raw!r}")


def _str(raw: object, field_name: str, where: str) -> str:
    if not isinstance(raw, str):
        raise WorkoutDecodeError(f"{where}: field '{field_name}' must be a string")
    return raw


def _number(raw: object, field_name: str, where: str) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise WorkoutDecodeError(f"{where}: field '{field_name}' must be a number")
    return raw


def _int(raw: object, field_name: str, where: str) -> int:
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise WorkoutDecodeError(f"{where}: field '{field_name}' must be an integer")
    return raw


def _optional_int(raw: object, field_name: str, where: str) -> int | None:
    if raw is None:
        return None
    return _int(raw, field_name, where)
