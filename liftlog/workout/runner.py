"""Background ticker that closes rests for a live workout session."""

from __future__ import annotations

import asyncio
from typing import Callable, Optional

from loguru import logger

from liftlog.workout.model import ActivityType, WorkoutActivity
from liftlog.workout.session import WorkoutSession

ActivityCallback = Callable[[WorkoutActivity], None]
FinishCallback = Callable[[bool], None]


class SessionRunner:
    def __init__(self, session: WorkoutSession, period_sec: float = 1.0) -> None:
        if period_sec <= 0:
            raise ValueError("Tick period must be > 0")
        self._session = session
        self._period_sec = period_sec
        self._task: Optional[asyncio.Task[None]] = None
        self._stop_event = asyncio.Event()

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self, on_activity: ActivityCallback, on_finish: FinishCallback) -> None:
        if self.is_running:
            raise RuntimeError("Session runner already running")
        if not self._session.is_active:
            raise RuntimeError("No workout in progress")

        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._run(on_activity, on_finish))

    async def stop(self) -> None:
        if not self.is_running:
            return

        self._stop_event.set()
        assert self._task is not None
        await self._task
        self._task = None

    async def wait(self) -> None:
        if self._task is not None:
            await self._task

    async def _run(self, on_activity: ActivityCallback, on_finish: FinishCallback) -> None:
        completed = False
        try:
            while not self._stop_event.is_set():
                current = await self._session.tick()
                on_activity(current)
                if current.type is ActivityType.FINISHED:
                    completed = True
                    break
                try:
                    await asyncio.wait_for(self._stop_event.wait(), timeout=self._period_sec)
                except asyncio.TimeoutError:
                    pass
        finally:
            logger.debug(f"Session runner stopped (completed={completed})")
            on_finish(completed)
