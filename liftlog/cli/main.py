"""Terminal CLI entrypoint for liftlog."""

from __future__ import annotations

import argparse
import asyncio
import json
from dataclasses import dataclass
from pathlib import Path

from liftlog.core.clock import Clock, SystemClock
from liftlog.core.dates import iso_day, parse_day, to_datetime, truncate_to_day
from liftlog.core.errors import StorageUnavailable
from liftlog.core.logger import setup_logger
from liftlog.core.settings import Settings
from liftlog.storage.byte_store import DiskStorage
from liftlog.workout.codec import load_rotation, workout_to_dict
from liftlog.workout.itinerary import ItineraryService
from liftlog.workout.library import DEFAULT_ROTATION
from liftlog.workout.model import SetStatus, Workout
from liftlog.workout.program_store import ProgramStore
from liftlog.workout.schedule import ProgramSchedule
from liftlog.workout.store import PartitionedWorkoutStore


@dataclass(frozen=True)
class Services:
    store: PartitionedWorkoutStore
    itinerary: ItineraryService


def build_services(settings: Settings, clock: Clock | None = None) -> Services:
    clock = clock or SystemClock()
    storage = DiskStorage(settings.data_dir)
    rotation = load_rotation(settings.program_file) if settings.program_file else DEFAULT_ROTATION
    store = PartitionedWorkoutStore(
        storage,
        namespace=settings.workout_namespace,
        policy=settings.partition_policy,
        clock=clock,
    )
    itinerary = ItineraryService(
        store,
        ProgramSchedule(rotation, origin=settings.program_origin),
        ProgramStore(storage, namespace=settings.program_namespace),
    )
    return Services(store=store, itinerary=itinerary)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="liftlog workout session engine")
    parser.add_argument(
        "--itinerary",
        nargs="?",
        const="today",
        default=None,
        metavar="DATE",
        help="Show done and pending workouts for DATE (YYYY-MM-DD, default today)",
    )
    parser.add_argument(
        "--in-progress",
        action="store_true",
        help="Show today's unfinished workout, if any",
    )
    parser.add_argument("--history", default=None, metavar="DATE", help="List workouts stored for DATE")
    parser.add_argument(
        "--skip-day",
        nargs="?",
        const="today",
        default=None,
        metavar="DATE",
        help="Skip DATE; the rotation resumes the next day",
    )
    parser.add_argument("--export", action="store_true", help="Print every stored workout as JSON")
    parser.add_argument("--data-dir", type=Path, default=None, help="Override LIFTLOG_DATA_DIR")
    parser.add_argument("--log-level", default=None, help="Override LIFTLOG_LOG_LEVEL")
    return parser


def _resolve_day(raw: str, clock: Clock) -> int:
    if raw == "today":
        return truncate_to_day(clock.now())
    return parse_day(raw)


def _describe_workout(workout: Workout) -> str:
    started = to_datetime(workout.started_at).strftime("%H:%M")
    sets = [item for exercise in workout.exercises for item in exercise.sets]
    finished = sum(1 for item in sets if item.status is SetStatus.FINISHED)
    state = "in progress" if workout.in_progress else "done"
    return f"{workout.name:<24} {started}  {finished}/{len(sets)} sets  [{state}]"


async def run_itinerary(services: Services, day: int) -> int:
    itinerary = await services.itinerary.get_itinerary(day)
    print(f"Itinerary for {iso_day(day)}")
    if not itinerary.workouts and not itinerary.workout_plans:
        print("  Rest day")
        return 0
    for workout in itinerary.workouts:
        print(f"  {_describe_workout(workout)}")
    for plan in itinerary.workout_plans:
        print(f"  {plan.name:<24} {len(plan.exercises)} exercises, {plan.total_sets} sets  [to do]")
    return 0


async def run_in_progress(services: Services) -> int:
    workout = await services.store.get_in_progress_workout()
    if workout is None:
        print("No workout in progress")
        return 0
    print(_describe_workout(workout))
    return 0


async def run_history(services: Services, day: int) -> int:
    workouts = await services.store.get_workouts(day)
    if not workouts:
        print(f"No workouts stored for {iso_day(day)}")
        return 0
    for workout in workouts:
        print(f"{workout.id:<32} {_describe_workout(workout)}")
    return 0


async def run_skip_day(services: Services, day: int) -> int:
    skipped = await services.itinerary.skip_day(day)
    print(f"Skipped days: {', '.join(iso_day(item) for item in skipped) or '-'}")
    return 0


async def run_export(services: Services) -> int:
    workouts = await services.store.get_all_workouts()
    print(json.dumps([workout_to_dict(item) for item in workouts], indent=2))
    return 0


def main(argv: list[str] | None = None, clock: Clock | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    clock = clock or SystemClock()

    overrides: dict[str, object] = {}
    if args.data_dir is not None:
        overrides["data_dir"] = args.data_dir
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    settings = Settings(**overrides)
    setup_logger(settings.log_level)

    try:
        services = build_services(settings, clock)
        if args.itinerary is not None:
            return asyncio.run(run_itinerary(services, _resolve_day(args.itinerary, clock)))
        if args.in_progress:
            return asyncio.run(run_in_progress(services))
        if args.history is not None:
            return asyncio.run(run_history(services, _resolve_day(args.history, clock)))
        if args.skip_day is not None:
            return asyncio.run(run_skip_day(services, _resolve_day(args.skip_day, clock)))
        if args.export:
            return asyncio.run(run_export(services))
    except (StorageUnavailable, ValueError) as exc:
        print(f"Error: {exc}")
        return 2

    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
