"""HTML helpers for keeping article images attached to content."""

from __future__ import annotations

import re
from typing import Iterable

IMG_TAG_RE = re.compile(r"<img\b[^>]*>", re.IGNORECASE)
IMG_SRC_RE = re.compile(r"""\bsrc\s*=\s*["']([^"']+)["']""", re.IGNORECASE)


def image_tag(src: str) -> str:
    return f'<img src="{src}" class="article-image" loading="lazy" />'


def embed_images(html: str, image_urls: Iterable[str]) -> str:
    """Append an <img> for every image URL not already referenced in html."""
    for url in image_urls:
        if url and url not in html:
            html += image_tag(url)
    return html


def find_image_tags(html: str) -> list[str]:
    return IMG_TAG_RE.findall(html or "")


def _tag_src(tag: str) -> str | None:
    match = IMG_SRC_RE.search(tag)
    return match.group(1) if match else None


def reattach_images(original: str, rewritten: str) -> str:
    """Re-attach <img> tags from the original that the rewritten text lost.

    A tag counts as present if its src appears anywhere in the rewritten text.
    """
    for tag in find_image_tags(original):
        src = _tag_src(tag)
        marker = src or tag
        if marker not in rewritten:
            rewritten = f"{rewritten}\n{tag}"
    return rewritten
