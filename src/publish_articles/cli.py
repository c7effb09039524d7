"""CLI for publishing or holding processed articles."""

from __future__ import annotations

import argparse
import asyncio
import logging

from common.cli_helpers import add_common_args, config_from_args, setup_logging
from process_articles.pipeline import build_pipeline
from publish_articles.publish_articles import PublishError

logger = logging.getLogger(__name__)


def parse_publish_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Publish a processed article to WordPress.")
    add_common_args(parser)
    parser.add_argument("--article-id", required=True)
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--hold", action="store_true", help="Hold the article back from publishing.")
    group.add_argument("--draft", action="store_true", help="Create the post as a draft.")
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> None:
    config = config_from_args(args)
    pipeline = build_pipeline(config)
    await pipeline.board.load()

    if args.hold:
        article = await pipeline.board.hold(args.article_id)
        await pipeline.notifier.success(f"Article \"{article.title}\" held from publishing")
        return

    post = await pipeline.publish(args.article_id, status="draft" if args.draft else None)
    logger.info("Created post %s", post.get("id"))


def main() -> None:
    args = parse_publish_args()
    setup_logging(args.verbose)
    try:
        asyncio.run(run(args))
    except (KeyError, ValueError, PublishError) as e:
        logger.error("%s", e)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
