"""CLI for polling feeds and processing articles."""

from __future__ import annotations

import argparse
import asyncio
import logging

from common.cli_helpers import add_common_args, config_from_args, setup_logging
from process_articles.pipeline import build_pipeline
from process_articles.poll import poll_forever, run_poll_cycle

logger = logging.getLogger(__name__)


def parse_poll_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Poll feeds and rewrite matching articles.")
    add_common_args(parser)
    parser.add_argument("--once", action="store_true", help="Run a single poll cycle and exit.")
    parser.add_argument(
        "--interval-minutes",
        type=int,
        default=None,
        help="Refresh interval (default: poll.interval_minutes from config).",
    )
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> None:
    config = config_from_args(args)
    pipeline = build_pipeline(config)

    if args.once:
        await pipeline.board.load()
        results = await run_poll_cycle(pipeline)
        for article in results:
            logger.info("%s [%s] %s", article.id, article.status, article.title)
        return

    await poll_forever(pipeline, args.interval_minutes)


def main() -> None:
    args = parse_poll_args()
    setup_logging(args.verbose)
    try:
        asyncio.run(run(args))
    except KeyboardInterrupt:
        logger.info("Stopped")


if __name__ == "__main__":
    main()
