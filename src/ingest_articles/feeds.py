"""Feed registry: configured sources and their health status."""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Optional

from common.config import FeedSource
from common.datetime import utc_now
from common.models import FEED_ACTIVE, FEED_ERROR, Feed
from common.store import KeyValueStore

logger = logging.getLogger(__name__)

FEEDS_KEY = "feeds"


class FeedRegistry:
    def __init__(self, store: KeyValueStore, defaults: Iterable[FeedSource] = ()) -> None:
        self.store = store
        self.defaults = list(defaults)
        self._lock = asyncio.Lock()

    async def all(self) -> list[Feed]:
        stored = await self.store.get(FEEDS_KEY)
        if stored is None:
            return [Feed(name=f.name, url=f.url) for f in self.defaults]
        return [Feed.from_dict(f) for f in stored]

    async def _save(self, feeds: list[Feed]) -> None:
        await self.store.put(FEEDS_KEY, [f.to_dict() for f in feeds])

    async def add(self, name: str, url: str) -> Feed:
        name, url = name.strip(), url.strip()
        if not name or not url:
            raise ValueError("Feed name and URL are required")

        async with self._lock:
            feeds = await self.all()
            if any(f.url == url for f in feeds):
                raise ValueError(f"Feed already configured: {url}")
            feed = Feed(name=name, url=url, status=FEED_ACTIVE, last_update=utc_now())
            feeds.append(feed)
            await self._save(feeds)

        logger.info("Added feed %s (%s)", name, url)
        return feed

    async def remove(self, url: str) -> None:
        async with self._lock:
            feeds = await self.all()
            remaining = [f for f in feeds if f.url != url]
            if len(remaining) == len(feeds):
                raise KeyError(url)
            await self._save(remaining)
        logger.info("Removed feed %s", url)

    async def update_status(self, url: str, status: str, error: Optional[str] = None) -> None:
        if status not in (FEED_ACTIVE, FEED_ERROR):
            raise ValueError(f"Invalid feed status: {status}")

        async with self._lock:
            feeds = await self.all()
            for feed in feeds:
                if feed.url == url:
                    feed.status = status
                    feed.error = error if status == FEED_ERROR else None
                    feed.last_update = utc_now()
            await self._save(feeds)
