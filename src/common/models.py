"""Shared data models for the news rewrite pipeline."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Optional

from common.datetime import parse_datetime, utc_now
from common.serialization import serialize_dataclass

FEED_ACTIVE = "active"
FEED_ERROR = "error"

PENDING = "pending"
SCHEDULED = "scheduled"
PUBLISHED = "published"
REJECTED = "rejected"
ERROR = "error"

ARTICLE_STATUSES = (PENDING, SCHEDULED, PUBLISHED, REJECTED, ERROR)
TERMINAL_STATUSES = (PUBLISHED, REJECTED)


@dataclass
class Feed:
    """A configured RSS/Atom source and its health after the last poll."""
    name: str
    url: str
    status: str = FEED_ACTIVE
    last_update: Optional[datetime] = None
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return serialize_dataclass(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Feed:
        return cls(
            name=data["name"],
            url=data["url"],
            status=data.get("status", FEED_ACTIVE),
            last_update=parse_datetime(data.get("last_update")),
            error=data.get("error"),
        )


@dataclass
class Keyword:
    id: str
    text: str
    active: bool = True

    def to_dict(self) -> dict[str, Any]:
        return serialize_dataclass(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Keyword:
        return cls(id=str(data["id"]), text=data["text"], active=bool(data.get("active", True)))


@dataclass
class Article:
    """An article moving through the pipeline.

    ``rewritten_content`` is None while the article is still being processed.
    ``published`` and ``rejected`` are terminal statuses.
    """
    id: str
    title: str
    content: str
    source: str
    url: str
    timestamp: datetime
    status: str = PENDING
    rewritten_content: Optional[str] = None
    scheduled_time: Optional[datetime] = None
    is_new: bool = False
    error: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def evolve(self, **changes: Any) -> Article:
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return serialize_dataclass(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Article:
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            content=data.get("content", ""),
            source=data.get("source", ""),
            url=data["url"],
            timestamp=parse_datetime(data.get("timestamp")) or utc_now(),
            status=data.get("status", PENDING),
            rewritten_content=data.get("rewritten_content"),
            scheduled_time=parse_datetime(data.get("scheduled_time")),
            is_new=bool(data.get("is_new", False)),
            error=data.get("error"),
        )


@dataclass
class CachedArticle:
    """Fully processed (crawled + rewritten) content, keyed by article URL."""
    url: str
    id: str
    title: str
    content: str
    rewritten_content: str
    source: str
    timestamp: datetime
    cache_date: datetime

    def to_dict(self) -> dict[str, Any]:
        return serialize_dataclass(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CachedArticle:
        return cls(
            url=data["url"],
            id=data.get("id", ""),
            title=data.get("title", ""),
            content=data.get("content", ""),
            rewritten_content=data["rewritten_content"],
            source=data.get("source", ""),
            timestamp=parse_datetime(data.get("timestamp")) or utc_now(),
            cache_date=parse_datetime(data["cache_date"]),
        )
