"""Poll every configured feed."""

import asyncio
import logging

from common.config import HttpConfig
from common.models import Feed
from ingest_articles.feeds import FeedRegistry
from ingest_articles.fetch_articles.fetch_rss_articles import fetch_feed
from ingest_articles.models import FeedFetchResult

logger = logging.getLogger(__name__)


async def fetch_articles(
    feeds: list[Feed],
    registry: FeedRegistry,
    config: HttpConfig,
) -> list[FeedFetchResult]:
    """Fetch all feeds concurrently; one feed's failure leaves the others untouched."""
    results = await asyncio.gather(*(fetch_feed(feed, registry, config) for feed in feeds))

    failed = [r.feed.name for r in results if not r.ok]
    if failed:
        logger.warning("%d of %d feeds failed: %s", len(failed), len(feeds), ", ".join(failed))
    logger.info("Total items collected: %d", sum(len(r.items) for r in results))
    return list(results)
