"""Persisted set of previously seen article IDs, used for the "new" marker."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Iterable

from common.datetime import parse_datetime
from common.store import KeyValueStore

logger = logging.getLogger(__name__)

SEEN_KEY = "seen_article_ids"


class SeenArticles:
    """IDs seen by earlier polls, trimmed to the freshness window."""

    def __init__(self, store: KeyValueStore, retention: timedelta) -> None:
        self.store = store
        self.retention = retention
        self._lock = asyncio.Lock()

    async def mark_seen(self, article_ids: Iterable[str], now: datetime) -> set[str]:
        """Record ids as seen and return the ones that were not seen before."""
        async with self._lock:
            stored = await self.store.get(SEEN_KEY) or {}
            cutoff = now - self.retention
            seen = {
                article_id: first_seen
                for article_id, first_seen in stored.items()
                if parse_datetime(first_seen) >= cutoff
            }
            trimmed = len(stored) - len(seen)

            new_ids = set()
            for article_id in article_ids:
                if article_id not in seen:
                    new_ids.add(article_id)
                    seen[article_id] = now.isoformat()

            await self.store.put(SEEN_KEY, seen)

        if trimmed:
            logger.debug("Trimmed %d seen ids older than %s", trimmed, cutoff)
        return new_ids
