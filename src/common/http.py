"""HTTP helpers for fetching third-party pages through the relay."""

from __future__ import annotations

import logging
from urllib.parse import quote

import requests

from common.config import HttpConfig

logger = logging.getLogger(__name__)


def relay_url(url: str, relay: str) -> str:
    """Prefix url with the relay endpoint; an empty relay means direct access."""
    if not relay:
        return url
    return f"{relay}{quote(url, safe='')}"


def fetch_via_relay(url: str, config: HttpConfig) -> requests.Response:
    """GET url through the configured relay with a bounded timeout.

    Raises requests.RequestException on transport errors, timeouts, and
    non-2xx responses.
    """
    target = relay_url(url, config.relay_url)
    logger.debug("GET %s", target)
    response = requests.get(
        target,
        timeout=config.request_timeout,
        headers={"User-Agent": config.user_agent},
    )
    response.raise_for_status()
    return response
