"""RSS feed fetching."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import feedparser
import requests
from dateutil.parser import parse as parse_date

from common.config import HttpConfig
from common.http import fetch_via_relay
from common.models import FEED_ACTIVE, FEED_ERROR, Feed
from ingest_articles.feeds import FeedRegistry
from ingest_articles.models import FeedFetchResult, FeedItem

logger = logging.getLogger(__name__)

# Timezone abbreviations for date parsing
TZINFOS = {
    "EST": timezone(timedelta(hours=-5)),
    "EDT": timezone(timedelta(hours=-4)),
    "CST": timezone(timedelta(hours=-6)),
    "CDT": timezone(timedelta(hours=-5)),
    "MST": timezone(timedelta(hours=-7)),
    "MDT": timezone(timedelta(hours=-6)),
    "PST": timezone(timedelta(hours=-8)),
    "PDT": timezone(timedelta(hours=-7)),
    "GMT": timezone.utc,
    "UTC": timezone.utc,
    "BST": timezone(timedelta(hours=1)),
    "SRT": timezone(timedelta(hours=-3)),
}


class FeedError(Exception):
    """Feed could not be retrieved or is not a usable RSS/Atom document."""


def fetch_items(feed: Feed, config: HttpConfig) -> list[FeedItem]:
    """Retrieve and parse one feed into normalized items.

    Raises FeedError on transport failures and malformed documents.
    """
    try:
        response = fetch_via_relay(feed.url, config)
    except requests.RequestException as e:
        raise FeedError(f"Failed to retrieve {feed.name}: {e}") from e

    parsed = feedparser.parse(response.content)
    if parsed.bozo and not parsed.entries:
        reason = getattr(parsed, "bozo_exception", None) or "no channel or items"
        raise FeedError(f"Malformed feed {feed.name}: {reason}")
    if not parsed.entries and not parsed.feed:
        raise FeedError(f"Malformed feed {feed.name}: no channel or items")

    items = []
    seen_identities: set[str] = set()
    for entry in parsed.entries:
        try:
            item = _parse_entry(entry, feed.name, seen_identities)
            if item is not None:
                items.append(item)
        except Exception as e:
            logger.warning("Failed to parse entry from %s: %s", feed.name, e)
            continue

    return items


def _parse_entry(entry, source: str, seen_identities: set) -> FeedItem | None:
    """Parse a single RSS entry into a FeedItem."""
    url = (entry.get("link") or "").strip()
    if not url:
        logger.warning("Skipping entry without link from %s", source)
        return None

    identity = (entry.get("id") or entry.get("guid") or url).strip()
    if identity in seen_identities:
        return None

    title = (entry.get("title") or "").strip()
    if not title:
        logger.warning("Skipping entry without title from %s: %s", source, url)
        return None

    content = (entry.get("summary") or entry.get("description") or "").strip()

    seen_identities.add(identity)

    return FeedItem(
        source=source,
        identity=identity,
        title=title,
        content=content,
        url=url,
        published_at=_parse_published_date(entry),
    )


def _parse_published_date(entry) -> datetime | None:
    """Extract and parse the published date from an RSS entry."""
    published = entry.get("published") or entry.get("pubDate") or entry.get("updated")
    if not published:
        return None

    try:
        dt = parse_date(published, tzinfos=TZINFOS)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt
    except (ValueError, OverflowError):
        return None


def is_fresh(published_at: Optional[datetime], now: datetime, window: timedelta) -> bool:
    """Items without a date, or older than the window, are not fresh."""
    if published_at is None:
        return False
    return now - published_at <= window


async def fetch_feed(feed: Feed, registry: FeedRegistry, config: HttpConfig) -> FeedFetchResult:
    """Poll one feed and record its health; never raises past the feed."""
    logger.info("Fetching feed %s", feed.name)
    try:
        items = await asyncio.to_thread(fetch_items, feed, config)
    except Exception as e:
        logger.error("Feed %s failed: %s", feed.name, e)
        await registry.update_status(feed.url, FEED_ERROR, str(e))
        return FeedFetchResult(feed=feed, error=str(e))

    await registry.update_status(feed.url, FEED_ACTIVE)
    logger.info("Found %d items in %s", len(items), feed.name)
    return FeedFetchResult(feed=feed, items=items)
