"""Poll feeds and turn fresh, keyword-matching items into candidate articles."""

import logging
from datetime import datetime, timedelta

from common.config import Config
from common.hashing import generate_article_id
from common.models import PENDING, Article, Keyword
from ingest_articles.clean_articles.clean import clean_text
from ingest_articles.feeds import FeedRegistry
from ingest_articles.fetch_articles.fetch_articles import fetch_articles
from ingest_articles.fetch_articles.fetch_rss_articles import is_fresh
from ingest_articles.keywords import article_matches
from ingest_articles.models import FeedItem
from ingest_articles.seen import SeenArticles

logger = logging.getLogger(__name__)


def to_article(item: FeedItem) -> Article:
    return Article(
        id=generate_article_id(item.source, item.identity),
        title=clean_text(item.title),
        content=item.content,
        source=item.source,
        url=item.url,
        timestamp=item.published_at,
        status=PENDING,
    )


def select_candidates(
    items: list[FeedItem],
    keywords: list[Keyword],
    now: datetime,
    freshness: timedelta,
) -> list[FeedItem]:
    """Apply the freshness gate, then the keyword gate."""
    fresh = [item for item in items if is_fresh(item.published_at, now, freshness)]
    if len(fresh) < len(items):
        logger.info("Dropped %d stale items", len(items) - len(fresh))

    matching = [
        item for item in fresh
        if article_matches(item.title, clean_text(item.content), keywords)
    ]
    if len(matching) < len(fresh):
        logger.info("Dropped %d items without keyword matches", len(fresh) - len(matching))
    return matching


async def ingest_articles(
    registry: FeedRegistry,
    keywords: list[Keyword],
    seen: SeenArticles,
    config: Config,
    now: datetime,
) -> list[Article]:
    """Fetch all feeds and return candidate articles, flagged is_new where unseen."""
    feeds = await registry.all()
    logger.info("Ingesting articles from %d feeds", len(feeds))

    results = await fetch_articles(feeds, registry, config.http)
    items = [item for result in results for item in result.items]
    if not items:
        logger.warning("0 items fetched")
        return []

    freshness = timedelta(hours=config.poll.freshness_hours)
    candidates = select_candidates(items, keywords, now, freshness)

    articles: dict[str, Article] = {}
    for item in candidates:
        article = to_article(item)
        if article.id not in articles:
            articles[article.id] = article

    new_ids = await seen.mark_seen(articles.keys(), now)
    for article in articles.values():
        article.is_new = article.id in new_ids

    logger.info("%d candidate articles (%d new)", len(articles), len(new_ids))
    return list(articles.values())
