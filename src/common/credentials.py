"""Provider credentials, read from the store with environment fallbacks."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from common.store import KeyValueStore

load_dotenv()

logger = logging.getLogger(__name__)

OPENAI = "openai"
FIRECRAWL = "firecrawl"
WORDPRESS = "wordpress"
WORDPRESS_SITE_URL = "wordpressSiteUrl"

CREDENTIAL_KEYS = (OPENAI, FIRECRAWL, WORDPRESS, WORDPRESS_SITE_URL)

ENV_FALLBACKS = {
    OPENAI: "OPENAI_API_KEY",
    FIRECRAWL: "FIRECRAWL_API_KEY",
    WORDPRESS: "WP_API_TOKEN",
    WORDPRESS_SITE_URL: "WP_SITE_URL",
}


@dataclass
class Credentials:
    openai_api_key: Optional[str] = None
    firecrawl_api_key: Optional[str] = None
    wordpress_token: Optional[str] = None
    wordpress_site_url: Optional[str] = None


def _store_key(name: str) -> str:
    return f"credentials.{name}"


async def save_credential(store: KeyValueStore, name: str, value: str) -> None:
    if name not in CREDENTIAL_KEYS:
        raise ValueError(f"Unknown credential: {name}")
    value = value.strip()
    if name == WORDPRESS_SITE_URL:
        value = value.rstrip("/")
    await store.put(_store_key(name), value)
    logger.info("Saved %s credential", name)


async def get_credential(store: KeyValueStore, name: str) -> Optional[str]:
    value = await store.get(_store_key(name))
    if not value:
        value = os.environ.get(ENV_FALLBACKS[name])
    return value or None


async def load_credentials(store: KeyValueStore) -> Credentials:
    return Credentials(
        openai_api_key=await get_credential(store, OPENAI),
        firecrawl_api_key=await get_credential(store, FIRECRAWL),
        wordpress_token=await get_credential(store, WORDPRESS),
        wordpress_site_url=await get_credential(store, WORDPRESS_SITE_URL),
    )
