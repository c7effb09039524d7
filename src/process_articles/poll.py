"""One polling cycle, and the loop that repeats it on the refresh interval."""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta

from common.datetime import utc_now
from common.models import Article
from ingest_articles.ingest_articles import ingest_articles
from process_articles.pipeline import Pipeline

logger = logging.getLogger(__name__)


async def run_poll_cycle(pipeline: Pipeline) -> list[Article]:
    """Fetch, filter, and process; returns the articles processed in this cycle."""
    config = pipeline.config
    cycle = pipeline.board.start_cycle()
    now = utc_now()
    logger.info("Starting poll cycle %d", cycle)

    await pipeline.board.refresh()
    await pipeline.cache.clear_expired()
    pipeline.schedule.seed(now, timedelta(minutes=config.schedule.initial_offset_minutes))

    keywords = await pipeline.keywords.all()
    candidates = await ingest_articles(pipeline.feeds, keywords, pipeline.seen, config, now)

    polled = await pipeline.board.upsert_polled(candidates)
    to_process = [article for article in polled if not article.is_terminal]
    logger.info(
        "Cycle %d: %d candidates, %d to process",
        cycle, len(polled), len(to_process),
    )

    results = await pipeline.processor.process_batch(to_process, pipeline.board, cycle)
    await pipeline.board.save()

    processed, total = pipeline.board.progress()
    logger.info("Cycle %d finished: %d/%d articles processed", cycle, processed, total)
    return results


async def poll_forever(pipeline: Pipeline, interval_minutes: int | None = None) -> None:
    """Run poll cycles until cancelled. A failing cycle is logged, not fatal."""
    interval = interval_minutes or pipeline.config.poll.interval_minutes
    await pipeline.board.load()

    while True:
        try:
            await run_poll_cycle(pipeline)
        except Exception:
            logger.exception("Poll cycle failed")
            await pipeline.notifier.error("Failed to refresh feeds")
        logger.info("Next refresh in %d minutes", interval)
        await asyncio.sleep(interval * 60)
