"""Configuration loader for the news rewrite pipeline."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

CONFIG_DIR = Path(__file__).resolve().parent.parent.parent / "configs"


@dataclass
class FeedSource:
    name: str
    url: str


@dataclass
class PollConfig:
    interval_minutes: int = 30
    freshness_hours: int = 48


@dataclass
class ScheduleConfig:
    initial_offset_minutes: int = 30
    stagger_minutes: int = 30


@dataclass
class CacheConfig:
    retention_days: int = 7


@dataclass
class HttpConfig:
    relay_url: str = "https://api.allorigins.win/raw?url="
    request_timeout: int = 30
    user_agent: str = "news-rewrite/1.0 (RSS reader)"


@dataclass
class CrawlConfig:
    firecrawl_url: str = "https://api.firecrawl.dev/v1/scrape"
    request_timeout: int = 60


@dataclass
class RewriteConfig:
    model: str = "gpt-4o-mini"
    temperature: float = 0.7
    request_timeout: int = 60


@dataclass
class PublishConfig:
    post_status: str = "publish"
    request_timeout: int = 30


@dataclass
class StoreConfig:
    backend: str = "json"  # "json" or "memory"
    path: str = "data/store.json"


@dataclass
class Config:
    poll: PollConfig = field(default_factory=PollConfig)
    schedule: ScheduleConfig = field(default_factory=ScheduleConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    crawl: CrawlConfig = field(default_factory=CrawlConfig)
    rewrite: RewriteConfig = field(default_factory=RewriteConfig)
    publish: PublishConfig = field(default_factory=PublishConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    feeds: list[FeedSource] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)


def load_config(config_name: str | None = None, config_path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file.

    Args:
        config_name: Name of config file under ``configs/`` (without .yaml).
                    If None, uses CONFIG_ENV env var or "default".
        config_path: Explicit path to a YAML file; overrides config_name.

    Returns:
        Loaded Config object
    """
    if config_path is None:
        if config_name is None:
            config_name = os.environ.get("CONFIG_ENV", "default")
        config_path = CONFIG_DIR / f"{config_name}.yaml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        data = yaml.safe_load(f) or {}

    return parse_config(data)


def parse_config(data: dict) -> Config:
    """Parse config dictionary into Config object."""
    poll = data.get("poll", {})
    schedule = data.get("schedule", {})
    cache = data.get("cache", {})
    http = data.get("http", {})
    crawl = data.get("crawl", {})
    rewrite = data.get("rewrite", {})
    publish = data.get("publish", {})
    store = data.get("store", {})

    return Config(
        poll=PollConfig(
            interval_minutes=poll.get("interval_minutes", 30),
            freshness_hours=poll.get("freshness_hours", 48),
        ),
        schedule=ScheduleConfig(
            initial_offset_minutes=schedule.get("initial_offset_minutes", 30),
            stagger_minutes=schedule.get("stagger_minutes", 30),
        ),
        cache=CacheConfig(
            retention_days=cache.get("retention_days", 7),
        ),
        http=HttpConfig(
            relay_url=http.get("relay_url", HttpConfig.relay_url),
            request_timeout=http.get("request_timeout", 30),
            user_agent=http.get("user_agent", HttpConfig.user_agent),
        ),
        crawl=CrawlConfig(
            firecrawl_url=crawl.get("firecrawl_url", CrawlConfig.firecrawl_url),
            request_timeout=crawl.get("request_timeout", 60),
        ),
        rewrite=RewriteConfig(
            model=rewrite.get("model", "gpt-4o-mini"),
            temperature=rewrite.get("temperature", 0.7),
            request_timeout=rewrite.get("request_timeout", 60),
        ),
        publish=PublishConfig(
            post_status=publish.get("post_status", "publish"),
            request_timeout=publish.get("request_timeout", 30),
        ),
        store=StoreConfig(
            backend=store.get("backend", "json"),
            path=store.get("path", "data/store.json"),
        ),
        feeds=[FeedSource(name=f["name"], url=f["url"]) for f in data.get("feeds", [])],
        keywords=list(data.get("keywords", [])),
    )


# Global config instance (loaded on first access)
_config: Config | None = None


def get_config() -> Config:
    """Get the current configuration (lazy-loaded)."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: Config):
    """Set the global configuration (useful for testing)."""
    global _config
    _config = config


def reset_config():
    """Reset the global configuration (forces reload on next access)."""
    global _config
    _config = None
