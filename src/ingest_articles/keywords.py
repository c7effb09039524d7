"""Keyword filtering and the user-managed keyword list."""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Iterable

from common.models import Keyword
from common.store import KeyValueStore

logger = logging.getLogger(__name__)

KEYWORDS_KEY = "keywords"


def matches(text: str, keywords: Iterable[Keyword]) -> bool:
    """True if any active keyword is a case-insensitive substring of text.

    With no active keywords every text matches.
    """
    active = [k.text.lower() for k in keywords if k.active]
    if not active:
        return True

    lower_text = (text or "").lower()
    return any(keyword in lower_text for keyword in active)


def article_matches(title: str, content: str, keywords: Iterable[Keyword]) -> bool:
    keywords = list(keywords)
    return matches(title, keywords) or matches(content, keywords)


class KeywordRegistry:
    """Ordered keyword list persisted in the store."""

    def __init__(self, store: KeyValueStore, defaults: Iterable[str] = ()) -> None:
        self.store = store
        self.defaults = list(defaults)
        self._lock = asyncio.Lock()

    async def all(self) -> list[Keyword]:
        stored = await self.store.get(KEYWORDS_KEY)
        if stored is None:
            return [Keyword(id=str(i), text=text) for i, text in enumerate(self.defaults, 1)]
        return [Keyword.from_dict(k) for k in stored]

    async def _save(self, keywords: list[Keyword]) -> None:
        await self.store.put(KEYWORDS_KEY, [k.to_dict() for k in keywords])

    async def add(self, text: str) -> Keyword:
        text = text.strip()
        if not text:
            raise ValueError("Keyword must not be empty")

        async with self._lock:
            keywords = await self.all()
            if any(k.text.lower() == text.lower() for k in keywords):
                raise ValueError(f"Keyword already exists: {text}")
            keyword = Keyword(id=uuid.uuid4().hex[:8], text=text)
            keywords.append(keyword)
            await self._save(keywords)

        logger.info("Added keyword %r", text)
        return keyword

    async def remove(self, keyword_id: str) -> None:
        async with self._lock:
            keywords = await self.all()
            remaining = [k for k in keywords if k.id != keyword_id]
            if len(remaining) == len(keywords):
                raise KeyError(keyword_id)
            await self._save(remaining)
        logger.info("Removed keyword %s", keyword_id)

    async def toggle(self, keyword_id: str) -> Keyword:
        async with self._lock:
            keywords = await self.all()
            for keyword in keywords:
                if keyword.id == keyword_id:
                    keyword.active = not keyword.active
                    await self._save(keywords)
                    logger.info("Keyword %r active=%s", keyword.text, keyword.active)
                    return keyword
        raise KeyError(keyword_id)
