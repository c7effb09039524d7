"""Fetch a fuller HTML rendering of an article than the feed provides.

Crawlers are tried in order:
1. Firecrawl scrape API (only when a Firecrawl key is configured)
2. raw page through the relay + selector extraction (readability fallback)

The first non-empty result wins. If every crawler fails -> returns None,
which callers treat as "keep the feed-supplied content".
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Sequence

import requests

from common.config import Config, CrawlConfig, HttpConfig
from common.credentials import Credentials
from common.html import embed_images
from common.http import fetch_via_relay
from crawl_articles.selectors import (
    CONTENT_SELECTORS,
    EXCLUDE_SELECTORS,
    IMAGE_SELECTORS,
    extract_content,
)

logger = logging.getLogger(__name__)


class Crawler:
    name = "crawler"

    def crawl(self, url: str) -> Optional[str]:
        raise NotImplementedError


class FirecrawlCrawler(Crawler):
    name = "firecrawl"

    def __init__(self, api_key: str, config: CrawlConfig) -> None:
        self.api_key = api_key
        self.config = config

    def _payload(self, url: str) -> dict:
        return {
            "url": url,
            "formats": ["html"],
            "onlyMainContent": True,
            "includeTags": CONTENT_SELECTORS + IMAGE_SELECTORS,
            "excludeTags": EXCLUDE_SELECTORS,
            "waitFor": 1000,
        }

    def crawl(self, url: str) -> Optional[str]:
        response = requests.post(
            self.config.firecrawl_url,
            json=self._payload(url),
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            timeout=self.config.request_timeout,
        )
        response.raise_for_status()

        result = response.json()
        if not result.get("success"):
            logger.warning("Firecrawl reported failure for %s: %s", url, result.get("error"))
            return None

        document = result.get("data") or {}
        content = document.get("html") or ""
        if not content.strip():
            return None

        images = list(document.get("images") or [])
        og_image = (document.get("metadata") or {}).get("ogImage")
        if og_image:
            images.append(og_image)
        return embed_images(content, images)


class RelayCrawler(Crawler):
    name = "relay"

    def __init__(self, config: HttpConfig) -> None:
        self.config = config

    def crawl(self, url: str) -> Optional[str]:
        response = fetch_via_relay(url, self.config)
        return extract_content(response.content, url)


def build_crawlers(config: Config, credentials: Credentials) -> list[Crawler]:
    crawlers: list[Crawler] = []
    if credentials.firecrawl_api_key:
        crawlers.append(FirecrawlCrawler(credentials.firecrawl_api_key, config.crawl))
    else:
        logger.info("No Firecrawl key configured, crawling through the relay only")
    crawlers.append(RelayCrawler(config.http))
    return crawlers


def crawl_article(url: str, crawlers: Sequence[Crawler]) -> Optional[str]:
    """Try each crawler in turn. Never raises."""
    for crawler in crawlers:
        try:
            content = crawler.crawl(url)
            if content:
                logger.info("Crawled %s with %s", url, crawler.name)
                return content
        except Exception as e:
            logger.warning("%s failed for %s: %s", crawler.name, url, e)

    logger.info("All crawlers failed for %s", url)
    return None


async def crawl(url: str, crawlers: Sequence[Crawler]) -> Optional[str]:
    return await asyncio.to_thread(crawl_article, url, crawlers)
