"""Selector-based extraction of the main article body from a page."""

from __future__ import annotations

import logging
from typing import Optional, Union
from urllib.parse import urljoin

from lxml import etree
from lxml import html as lxml_html
from lxml.cssselect import CSSSelector
from readability import Document

from common.html import embed_images

logger = logging.getLogger(__name__)

CONTENT_SELECTORS = [
    "article",
    ".article-content",
    ".post-content",
    ".entry-content",
    ".content",
    "main",
    "#main-content",
    ".main-content",
    ".article-body",
    ".story-content",
    ".post",
    ".news-content",
]

IMAGE_SELECTORS = [
    "img",
    ".article-image",
    ".featured-image",
    ".post-image",
    "picture source",
    ".wp-post-image",
    ".attachment-post-thumbnail",
]

EXCLUDE_SELECTORS = [
    ".advertisement",
    ".ad",
    ".social-share",
    ".comments",
    ".related-posts",
    ".sidebar",
    ".nav",
    ".navigation",
    ".menu",
    ".footer",
    ".header",
    ".widget",
    "nav",
    "aside",
    "script",
    "style",
]


def _remove_noise(tree) -> None:
    for selector in EXCLUDE_SELECTORS:
        for element in CSSSelector(selector)(tree):
            parent = element.getparent()
            if parent is not None:
                element.drop_tree()


def _image_urls(tree, base_url: str) -> list[str]:
    urls = []
    for img in CSSSelector("img")(tree):
        src = img.get("src") or img.get("data-src")
        if src and not src.startswith("data:"):
            absolute = urljoin(base_url, src)
            if absolute not in urls:
                urls.append(absolute)
    return urls


def _inner_html(element) -> str:
    parts = [element.text or ""]
    parts.extend(etree.tostring(child, encoding="unicode", method="html") for child in element)
    return "".join(parts).strip()


def extract_content(page_html: Union[str, bytes], base_url: str) -> Optional[str]:
    """Return the first matching content area's HTML with page images embedded.

    Falls back to readability when none of the content selectors match.
    Raw response bytes keep the page's own encoding declaration usable.
    """
    if not page_html or not page_html.strip():
        return None

    tree = lxml_html.fromstring(page_html)
    tree.make_links_absolute(base_url, resolve_base_href=True)
    images = _image_urls(tree, base_url)
    _remove_noise(tree)

    for selector in CONTENT_SELECTORS:
        found = CSSSelector(selector)(tree)
        if found:
            content = _inner_html(found[0])
            if content:
                logger.debug("Found content using selector %s", selector)
                return embed_images(content, images)

    logger.debug("No content selector matched %s, trying readability", base_url)
    summary = Document(page_html).summary(html_partial=True)
    text = lxml_html.fromstring(summary).text_content().strip() if summary else ""
    if not text:
        return None
    return embed_images(summary, images)
