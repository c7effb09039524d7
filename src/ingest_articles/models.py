"""Data models for the ingest_articles pipeline stage."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from common.models import Feed


@dataclass
class FeedItem:
    """Raw item parsed from an RSS/Atom feed entry."""
    source: str
    identity: str
    title: str
    content: str
    url: str
    published_at: Optional[datetime]


@dataclass
class FeedFetchResult:
    """Outcome of polling one feed. ``error`` is set when the poll failed."""
    feed: Feed
    items: list[FeedItem] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None
