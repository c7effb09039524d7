"""In-memory article list shared between the poll cycle and its consumers."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from common.models import ERROR, PUBLISHED, REJECTED, SCHEDULED, Article
from common.store import KeyValueStore

logger = logging.getLogger(__name__)

ARTICLES_KEY = "articles"


class ArticleBoard:
    """Articles keyed by id, in arrival order.

    Every update goes through ``upsert_polled`` or ``merge`` so concurrent
    completions never duplicate an id or resurrect a terminal article.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store
        self._articles: dict[str, Article] = {}
        self._lock = asyncio.Lock()
        self.cycle = 0

    async def load(self) -> None:
        self._articles = {a.id: a for a in await self._stored()}
        logger.info("Loaded %d articles", len(self._articles))

    async def _stored(self) -> list[Article]:
        return [Article.from_dict(a) for a in await self.store.get(ARTICLES_KEY) or []]

    def _absorb(self, stored: list[Article]) -> None:
        """Take in what other processes wrote.

        A stored terminal status wins over a local one that is not terminal,
        and ids only the store knows are added.
        """
        for article in stored:
            local = self._articles.get(article.id)
            if local is None or (article.is_terminal and not local.is_terminal):
                self._articles[article.id] = article

    async def refresh(self) -> None:
        stored = await self._stored()
        async with self._lock:
            self._absorb(stored)

    async def save(self) -> None:
        stored = await self._stored()
        async with self._lock:
            self._absorb(stored)
            snapshot = [a.to_dict() for a in self._articles.values()]
        await self.store.put(ARTICLES_KEY, snapshot)

    def start_cycle(self) -> int:
        self.cycle += 1
        return self.cycle

    def get(self, article_id: str) -> Optional[Article]:
        return self._articles.get(article_id)

    def all(self) -> list[Article]:
        return list(self._articles.values())

    def scheduled(self) -> list[Article]:
        articles = [a for a in self._articles.values() if a.status == SCHEDULED and a.scheduled_time]
        return sorted(articles, key=lambda a: a.scheduled_time)

    def errors(self) -> list[Article]:
        return [a for a in self._articles.values() if a.status == ERROR]

    def progress(self) -> tuple[int, int]:
        """(articles with rewritten content, all articles)."""
        processed = sum(1 for a in self._articles.values() if a.rewritten_content)
        return processed, len(self._articles)

    async def upsert_polled(self, articles: list[Article]) -> list[Article]:
        """Merge a polling pass; returns the board's version of each article."""
        merged = []
        async with self._lock:
            for article in articles:
                existing = self._articles.get(article.id)
                if existing is None:
                    self._articles[article.id] = article
                    merged.append(article)
                else:
                    existing.is_new = article.is_new
                    merged.append(existing)
        return merged

    async def merge(self, article: Article, cycle: int) -> bool:
        """Apply a processing result; stale-cycle results and terminal articles are skipped."""
        async with self._lock:
            if cycle != self.cycle:
                logger.info("Discarding result for %s from superseded cycle %d", article.id, cycle)
                return False

            existing = self._articles.get(article.id)
            if existing is not None and existing.is_terminal:
                logger.info("Article %s is %s, not overwriting", article.id, existing.status)
                return False

            self._articles[article.id] = article
            return True

    async def _set_status(self, article_id: str, status: str) -> Article:
        async with self._lock:
            article = self._articles.get(article_id)
            if article is None:
                raise KeyError(article_id)
            if article.is_terminal:
                raise ValueError(f"Article {article_id} is already {article.status}")
            updated = article.evolve(status=status)
            self._articles[article_id] = updated
        await self.save()
        return updated

    async def hold(self, article_id: str) -> Article:
        """Hold an article back from publishing."""
        return await self._set_status(article_id, REJECTED)

    async def mark_published(self, article_id: str) -> Article:
        return await self._set_status(article_id, PUBLISHED)
