"""Crawl -> rewrite -> cache -> schedule for each candidate article."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from common.models import ERROR, SCHEDULED, Article
from common.notifications import Notifier
from process_articles.board import ArticleBoard
from process_articles.cache import ArticleCache
from process_articles.schedule import ScheduleState
from rewrite_articles.rewrite_articles import RewriteError

logger = logging.getLogger(__name__)

CrawlFn = Callable[[str], Awaitable[Optional[str]]]
RewriteFn = Callable[[str], Awaitable[str]]


class ArticleProcessor:
    """Runs the enrichment steps for single articles.

    ``crawl`` returns None when no fuller body could be fetched; ``rewrite``
    raises RewriteError (or a subclass) on failure.
    """

    def __init__(
        self,
        cache: ArticleCache,
        schedule: ScheduleState,
        crawl: CrawlFn,
        rewrite: RewriteFn,
        notifier: Optional[Notifier] = None,
    ) -> None:
        self.cache = cache
        self.schedule = schedule
        self.crawl = crawl
        self.rewrite = rewrite
        self.notifier = notifier
        self._in_flight: set[str] = set()

    async def process_article(self, article: Article) -> Article:
        """Enrich one article. Rewrite errors propagate to the caller."""
        if article.is_terminal:
            return article

        cached = await self.cache.get(article.url)
        if cached is not None:
            logger.info("Cache hit for %s", article.url)
            return article.evolve(
                content=cached.content,
                rewritten_content=cached.rewritten_content,
                status=SCHEDULED,
                scheduled_time=article.scheduled_time or self.schedule.assign(),
                error=None,
            )

        crawled = await self.crawl(article.url)
        if crawled:
            content = crawled
        else:
            logger.info("Using feed content for %s", article.url)
            content = article.content

        rewritten = await self.rewrite(content)

        processed = article.evolve(content=content, rewritten_content=rewritten)
        await self.cache.put(processed)

        return processed.evolve(
            status=SCHEDULED,
            scheduled_time=self.schedule.assign(),
            error=None,
        )

    async def _process_one(self, article: Article) -> tuple[str, Article]:
        if article.url in self._in_flight:
            logger.info("Already processing %s, skipping duplicate", article.url)
            return article.id, article

        self._in_flight.add(article.url)
        try:
            return article.id, await self.process_article(article)
        except RewriteError as e:
            logger.error("Failed to process %s: %s", article.url, e)
            if self.notifier is not None:
                await self.notifier.error(f"Failed to process \"{article.title}\": {e}")
            return article.id, article.evolve(status=ERROR, error=str(e))
        except Exception as e:
            logger.exception("Unexpected error processing %s", article.url)
            return article.id, article.evolve(status=ERROR, error=f"Unexpected error: {e}")
        finally:
            self._in_flight.discard(article.url)

    async def process_batch(
        self,
        articles: list[Article],
        board: ArticleBoard,
        cycle: int,
    ) -> list[Article]:
        """Process articles concurrently and merge each result into the board by id."""
        tasks = [asyncio.create_task(self._process_one(article)) for article in articles]

        results = []
        for finished in asyncio.as_completed(tasks):
            article_id, result = await finished
            if await board.merge(result, cycle):
                results.append(result)
            else:
                logger.debug("Result for %s not merged", article_id)

        scheduled = sum(1 for a in results if a.status == SCHEDULED)
        failed = sum(1 for a in results if a.status == ERROR)
        logger.info("Processed %d articles: %d scheduled, %d failed", len(results), scheduled, failed)
        return results
