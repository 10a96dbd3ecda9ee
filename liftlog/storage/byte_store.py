"""Key/value byte storage backing the partitioned stores.

Keys are ``namespace/name`` strings. ``DiskStorage`` maps them to
``<base_dir>/<namespace>/<name>.json``; ``MemoryStorage`` keeps them in a dict.
"""

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import Protocol

from loguru import logger

from liftlog.core.errors import StorageKeyNotFound, StorageUnavailable

_SUFFIX = ".json"


class ByteStorage(Protocol):
    async def exists(self, key: str) -> bool: ...

    async def read_all(self, key: str) -> bytes: ...

    async def write_all(self, key: str, data: bytes) -> None: ...

    async def list_keys(self, namespace: str) -> list[str]: ...


def make_key(namespace: str, name: str) -> str:
    return f"{namespace}/{name}"


def split_key(key: str) -> tuple[str, str]:
    namespace, sep, name = key.partition("/")
    if not sep or not namespace or not name or "/" in name:
        raise ValueError(f"Invalid storage key '{key}', expected 'namespace/name'")
    return namespace, name


class MemoryStorage:
    def __init__(self) -> None:
        self._data: dict[str, bytes] = {}

    async def exists(self, key: str) -> bool:
        return key in self._data

    async def read_all(self, key: str) -> bytes:
        try:
            return self._data[key]
        except KeyError:
            raise StorageKeyNotFound(key) from None

    async def write_all(self, key: str, data: bytes) -> None:
        split_key(key)
        self._data[key] = bytes(data)

    async def list_keys(self, namespace: str) -> list[str]:
        prefix = f"{namespace}/"
        return sorted(key for key in self._data if key.startswith(prefix))


class DiskStorage:
    def __init__(self, base_dir: Path) -> None:
        self._base_dir = Path(base_dir)

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def _path(self, key: str) -> Path:
        namespace, name = split_key(key)
        return self._base_dir / namespace / f"{name}{_SUFFIX}"

    async def exists(self, key: str) -> bool:
        path = self._path(key)
        return await asyncio.to_thread(path.is_file)

    async def read_all(self, key: str) -> bytes:
        path = self._path(key)
        logger.debug(f"Reading {path}")
        try:
            return await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError:
            raise StorageKeyNotFound(key) from None
        except OSError as exc:
            raise StorageUnavailable(f"Unable to read {path}: {exc}") from exc

    async def write_all(self, key: str, data: bytes) -> None:
        path = self._path(key)
        logger.debug(f"Writing {len(data)} bytes to {path}")
        try:
            await asyncio.to_thread(self._write_replace, path, data)
        except OSError as exc:
            raise StorageUnavailable(f"Unable to write {path}: {exc}") from exc

    async def list_keys(self, namespace: str) -> list[str]:
        directory = self._base_dir / namespace
        try:
            names = await asyncio.to_thread(_list_stems, directory)
        except OSError as exc:
            raise StorageUnavailable(f"Unable to list {directory}: {exc}") from exc
        return [make_key(namespace, name) for name in names]

    def _write_replace(self, path: Path, data: bytes) -> None:
        _ensure_directory(path.parent)
        tmp = path.with_name(f".{path.name}.tmp")
        tmp.write_bytes(data)
        os.replace(tmp, path)


def _ensure_directory(directory: Path) -> None:
    if directory.is_dir():
        return
    try:
        directory.mkdir(parents=True)
    except FileExistsError:
        # Another caller created it between the check and mkdir.
        if not directory.is_dir():
            raise
        logger.warning(f"Directory {directory} was created concurrently, continuing")


def _list_stems(directory: Path) -> list[str]:
    if not directory.is_dir():
        return []
    return sorted(item.stem for item in directory.glob(f"*{_SUFFIX}") if item.is_file())
