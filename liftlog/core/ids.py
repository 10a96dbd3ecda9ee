"""Opaque id generation for workouts, exercises and sets."""

from __future__ import annotations

from typing import Protocol
from uuid import uuid4

SET_PREFIX = "st"
EXERCISE_PREFIX = "ex"
WORKOUT_PREFIX = "wrk"


class IdGenerator(Protocol):
    def generate(self, prefix: str) -> str: ...


class RandomIdGenerator:
    def __init__(self, length: int = 8) -> None:
        self._length = length

    def generate(self, prefix: str) -> str:
        return f"{prefix}-{uuid4().hex[: self._length]}"


class SequentialIdGenerator:
    """Deterministic ids (``st-1``, ``st-2``...), one counter per prefix."""

    def __init__(self) -> None:
        self._counters: dict[str, int] = {}

    def generate(self, prefix: str) -> str:
        value = self._counters.get(prefix, 0) + 1
        self._counters[prefix] = value
        return f"{prefix}-{value}"
