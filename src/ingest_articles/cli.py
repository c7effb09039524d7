"""CLI for managing feeds, keywords and provider credentials."""

from __future__ import annotations

import asyncio
import logging

from common.cli_helpers import config_from_args, setup_logging
from common.credentials import save_credential
from common.notifications import Notifier
from common.store import open_store
from ingest_articles.feeds import FeedRegistry
from ingest_articles.helpers import format_status_line, parse_manage_args
from ingest_articles.keywords import KeywordRegistry
from process_articles.board import ArticleBoard

logger = logging.getLogger(__name__)


async def _list_state(feeds: FeedRegistry, keywords: KeywordRegistry, board: ArticleBoard, notifier: Notifier) -> None:
    print("Feeds:")
    for feed in await feeds.all():
        print(format_status_line(f"{feed.name} {feed.url}", feed.status, feed.error or ""))

    print("Keywords:")
    for keyword in await keywords.all():
        print(format_status_line(f"{keyword.id} {keyword.text}", "on" if keyword.active else "off"))

    await board.load()
    processed, total = board.progress()
    print(f"Articles ({processed}/{total} processed):")
    for article in board.all():
        when = article.scheduled_time.isoformat() if article.scheduled_time else ""
        print(format_status_line(f"{article.id} {article.title}", article.status, article.error or when))

    print("Notifications:")
    for notification in (await notifier.recent())[:10]:
        print(f"  {notification.timestamp:%Y-%m-%d %H:%M} {notification.level}: {notification.message}")


async def run(args) -> None:
    config = config_from_args(args)
    store = open_store(config.store)
    feeds = FeedRegistry(store, config.feeds)
    keywords = KeywordRegistry(store, config.keywords)

    if args.command == "list":
        await _list_state(feeds, keywords, ArticleBoard(store), Notifier(store))
    elif args.command == "add-feed":
        await feeds.add(args.name, args.url)
    elif args.command == "remove-feed":
        await feeds.remove(args.url)
    elif args.command == "add-keyword":
        await keywords.add(args.text)
    elif args.command == "remove-keyword":
        await keywords.remove(args.id)
    elif args.command == "toggle-keyword":
        await keywords.toggle(args.id)
    elif args.command == "set-credential":
        await save_credential(store, args.name, args.value)


def main() -> None:
    args = parse_manage_args()
    setup_logging(args.verbose)
    try:
        asyncio.run(run(args))
    except (KeyError, ValueError) as e:
        logger.error("%s", e)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
