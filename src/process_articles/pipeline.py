"""Wiring of the pipeline's state containers and providers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

from common.config import Config
from common.credentials import load_credentials
from common.datetime import utc_now
from common.notifications import Notifier
from common.store import KeyValueStore, open_store
from crawl_articles.crawl_articles import build_crawlers, crawl
from ingest_articles.feeds import FeedRegistry
from ingest_articles.keywords import KeywordRegistry
from ingest_articles.seen import SeenArticles
from process_articles.board import ArticleBoard
from process_articles.cache import ArticleCache
from process_articles.process_articles import ArticleProcessor
from process_articles.schedule import ScheduleState
from publish_articles.publish_articles import PublishError, publish_article
from rewrite_articles.rewrite_articles import rewrite_article

logger = logging.getLogger(__name__)


@dataclass
class Pipeline:
    config: Config
    store: KeyValueStore
    feeds: FeedRegistry
    keywords: KeywordRegistry
    seen: SeenArticles
    cache: ArticleCache
    schedule: ScheduleState
    board: ArticleBoard
    notifier: Notifier
    processor: ArticleProcessor

    async def publish(self, article_id: str, status: str | None = None) -> dict:
        """Publish a board article and mark it published."""
        article = self.board.get(article_id)
        if article is None:
            raise KeyError(article_id)

        credentials = await load_credentials(self.store)
        try:
            post = await publish_article(article, credentials, self.config.publish, status)
        except PublishError as e:
            await self.notifier.error(str(e))
            raise

        await self.board.mark_published(article_id)
        await self.notifier.success(f"Article \"{article.title}\" published successfully")
        return post


def build_pipeline(config: Config, store: KeyValueStore | None = None) -> Pipeline:
    """Create a pipeline whose providers read credentials from the store on each call."""
    if store is None:
        store = open_store(config.store)

    schedule = ScheduleState.starting_at(
        utc_now(),
        timedelta(minutes=config.schedule.initial_offset_minutes),
        timedelta(minutes=config.schedule.stagger_minutes),
    )
    cache = ArticleCache(store, timedelta(days=config.cache.retention_days))
    notifier = Notifier(store)

    async def crawl_with_configured(url: str):
        credentials = await load_credentials(store)
        return await crawl(url, build_crawlers(config, credentials))

    async def rewrite_with_configured(content: str) -> str:
        credentials = await load_credentials(store)
        return await rewrite_article(content, credentials.openai_api_key, config.rewrite)

    processor = ArticleProcessor(
        cache=cache,
        schedule=schedule,
        crawl=crawl_with_configured,
        rewrite=rewrite_with_configured,
        notifier=notifier,
    )

    return Pipeline(
        config=config,
        store=store,
        feeds=FeedRegistry(store, config.feeds),
        keywords=KeywordRegistry(store, config.keywords),
        seen=SeenArticles(store, timedelta(hours=config.poll.freshness_hours)),
        cache=cache,
        schedule=schedule,
        board=ArticleBoard(store),
        notifier=notifier,
        processor=processor,
    )
