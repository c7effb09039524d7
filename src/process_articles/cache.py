"""Durable cache of fully processed articles, keyed by source URL."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from common.datetime import utc_now
from common.models import Article, CachedArticle
from common.store import KeyValueStore

logger = logging.getLogger(__name__)

CACHE_KEY = "article_cache"


class ArticleCache:
    def __init__(
        self,
        store: KeyValueStore,
        retention: timedelta,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.store = store
        self.retention = retention
        self.clock = clock
        self._lock = asyncio.Lock()

    def _expired(self, entry: CachedArticle, now: datetime) -> bool:
        return now - entry.cache_date >= self.retention

    async def _entries(self) -> dict[str, dict]:
        return await self.store.get(CACHE_KEY) or {}

    async def get(self, url: str) -> Optional[CachedArticle]:
        """Cached entry for url; expired entries read as a miss."""
        data = (await self._entries()).get(url)
        if data is None:
            logger.debug("Cache miss: %s", url)
            return None

        entry = CachedArticle.from_dict(data)
        if self._expired(entry, self.clock()):
            logger.debug("Cached article expired: %s", url)
            return None
        return entry

    async def put(self, article: Article) -> CachedArticle:
        if not article.rewritten_content:
            raise ValueError(f"Refusing to cache unrewritten article {article.url}")

        entry = CachedArticle(
            url=article.url,
            id=article.id,
            title=article.title,
            content=article.content,
            rewritten_content=article.rewritten_content,
            source=article.source,
            timestamp=article.timestamp,
            cache_date=self.clock(),
        )
        async with self._lock:
            entries = await self._entries()
            entries[article.url] = entry.to_dict()
            await self.store.put(CACHE_KEY, entries)

        logger.info("Cached article %s", article.url)
        return entry

    async def clear_expired(self) -> int:
        """Evict entries past the retention window; returns how many were removed."""
        now = self.clock()
        async with self._lock:
            entries = await self._entries()
            kept = {
                url: data for url, data in entries.items()
                if not self._expired(CachedArticle.from_dict(data), now)
            }
            removed = len(entries) - len(kept)
            if removed:
                await self.store.put(CACHE_KEY, kept)

        logger.info("Cleared %d expired cached articles", removed)
        return removed
