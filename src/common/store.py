"""Async key-value persistence for pipeline state.

Everything the pipeline persists (feeds, keywords, cached articles, seen IDs,
credentials, notifications) goes through ``get``/``put`` on one of these.
"""

from __future__ import annotations

import asyncio
import copy
import json
import logging
import os
from pathlib import Path
from typing import Any

from common.config import StoreConfig

logger = logging.getLogger(__name__)


class KeyValueStore:
    """Base interface: values must be JSON-compatible."""

    async def get(self, key: str) -> Any | None:
        raise NotImplementedError

    async def put(self, key: str, value: Any) -> None:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(initial or {})

    async def get(self, key: str) -> Any | None:
        # callers get a copy
        return copy.deepcopy(self._data.get(key))

    async def put(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)


class JsonFileStore(KeyValueStore):
    """Single JSON document on disk, rewritten atomically on every put.

    Several processes (the poller and the management CLIs) share one file, so
    every get and put reads the current document from disk; nothing is cached
    between calls.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = asyncio.Lock()

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        with self.path.open() as f:
            return json.load(f)

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(f"{self.path.suffix}.{os.getpid()}.tmp")
        with tmp_path.open("w") as f:
            json.dump(data, f, ensure_ascii=False, default=str)
        os.replace(tmp_path, self.path)

    def _get(self, key: str) -> Any | None:
        return self._read().get(key)

    def _put(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    async def get(self, key: str) -> Any | None:
        async with self._lock:
            return await asyncio.to_thread(self._get, key)

    async def put(self, key: str, value: Any) -> None:
        async with self._lock:
            await asyncio.to_thread(self._put, key, copy.deepcopy(value))


def open_store(config: StoreConfig) -> KeyValueStore:
    """Create the store backend named in config."""
    if config.backend == "memory":
        return MemoryStore()
    if config.backend == "json":
        return JsonFileStore(config.path)
    raise ValueError(f"Unknown store backend: {config.backend}")
