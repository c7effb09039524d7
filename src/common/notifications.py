"""User-facing notifications, logged and kept in the store."""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime

from common.datetime import parse_datetime, utc_now
from common.serialization import serialize_dataclass
from common.store import KeyValueStore

logger = logging.getLogger(__name__)

NOTIFICATIONS_KEY = "notifications"
MAX_NOTIFICATIONS = 50

INFO = "info"
SUCCESS = "success"
ERROR = "error"

_LOG_LEVELS = {INFO: logging.INFO, SUCCESS: logging.INFO, ERROR: logging.ERROR}


@dataclass
class Notification:
    id: str
    level: str
    message: str
    timestamp: datetime


class Notifier:
    def __init__(self, store: KeyValueStore, limit: int = MAX_NOTIFICATIONS) -> None:
        self.store = store
        self.limit = limit
        self._lock = asyncio.Lock()

    async def notify(self, level: str, message: str) -> Notification:
        logger.log(_LOG_LEVELS.get(level, logging.INFO), message)
        notification = Notification(
            id=uuid.uuid4().hex,
            level=level,
            message=message,
            timestamp=utc_now(),
        )
        async with self._lock:
            stored = await self.store.get(NOTIFICATIONS_KEY) or []
            stored.insert(0, serialize_dataclass(notification))
            await self.store.put(NOTIFICATIONS_KEY, stored[: self.limit])
        return notification

    async def error(self, message: str) -> Notification:
        return await self.notify(ERROR, message)

    async def success(self, message: str) -> Notification:
        return await self.notify(SUCCESS, message)

    async def recent(self) -> list[Notification]:
        """Newest first."""
        stored = await self.store.get(NOTIFICATIONS_KEY) or []
        return [
            Notification(
                id=n["id"],
                level=n["level"],
                message=n["message"],
                timestamp=parse_datetime(n["timestamp"]),
            )
            for n in stored
        ]
