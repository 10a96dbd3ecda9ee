"""Error taxonomy shared by the storage layer and the workout engine."""

from __future__ import annotations


class LiftlogError(Exception):
    """Base class for engine errors."""


class StorageError(LiftlogError):
    pass


class StorageUnavailable(StorageError):
    """Underlying storage failed for a reason other than not-found."""


class StorageKeyNotFound(StorageError):
    """Requested key does not exist in the byte storage."""

    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Storage key not found: {self.key}"
