"""Push finished articles to a WordPress site through its REST API."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import requests

from common.config import PublishConfig
from common.credentials import Credentials
from common.models import Article

logger = logging.getLogger(__name__)

POSTS_PATH = "/wp-json/wp/v2/posts"
POST_STATUSES = ("publish", "draft")


class PublishError(Exception):
    """The CMS did not accept the post."""


class PublishValidationError(PublishError):
    """The article is not ready to publish; nothing was sent."""


class PublishConfigError(PublishError):
    """CMS credentials or site URL are missing; nothing was sent."""


def posts_endpoint(site_url: str) -> str:
    return f"{site_url.rstrip('/')}{POSTS_PATH}"


def validate_publishable(article: Article) -> None:
    if not article.rewritten_content or not article.rewritten_content.strip():
        raise PublishValidationError(
            f"Article \"{article.title}\" is still processing and cannot be published yet"
        )
    if article.is_terminal:
        raise PublishValidationError(f"Article \"{article.title}\" is already {article.status}")


def create_post(payload: dict[str, Any], credentials: Credentials, config: PublishConfig) -> dict:
    """POST a post to the configured site. Expects 201 Created."""
    if not credentials.wordpress_token or not credentials.wordpress_site_url:
        raise PublishConfigError("WordPress configuration missing. Please check your settings.")

    endpoint = posts_endpoint(credentials.wordpress_site_url)
    try:
        response = requests.post(
            endpoint,
            json=payload,
            headers={
                "Authorization": f"Bearer {credentials.wordpress_token}",
                "Content-Type": "application/json",
            },
            timeout=config.request_timeout,
        )
    except requests.RequestException as e:
        raise PublishError(f"Failed to publish to WordPress: {e}") from e

    if response.status_code != 201:
        raise PublishError(
            f"Failed to publish to WordPress: HTTP {response.status_code} {response.text[:200]}"
        )

    logger.info("Created post at %s", endpoint)
    return response.json()


async def publish_article(
    article: Article,
    credentials: Credentials,
    config: PublishConfig,
    status: str | None = None,
) -> dict:
    """Publish the rewritten article; validation happens before any network call."""
    status = status or config.post_status
    if status not in POST_STATUSES:
        raise PublishValidationError(f"Invalid post status: {status}")

    validate_publishable(article)
    payload = {
        "title": article.title,
        "content": article.rewritten_content,
        "status": status,
    }
    return await asyncio.to_thread(create_post, payload, credentials, config)
