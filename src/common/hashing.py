"""Hashing utilities."""

import hashlib


def generate_article_id(source: str, identity: str) -> str:
    """Generate a stable article ID from the feed name and the item's guid or link."""
    return hashlib.sha256(f"{source}:{identity.strip()}".encode()).hexdigest()[:16]
