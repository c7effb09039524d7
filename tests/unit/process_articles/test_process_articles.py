"""Tests for process_articles.process_articles module."""

import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

from common.models import ERROR, PENDING, PUBLISHED, REJECTED, SCHEDULED, Article
from common.notifications import Notifier
from common.store import MemoryStore
from process_articles.board import ArticleBoard
from process_articles.cache import CACHE_KEY, ArticleCache
from process_articles.process_articles import ArticleProcessor
from process_articles.schedule import ScheduleState
from rewrite_articles.rewrite_articles import RewriteAuthError

NOW = datetime(2024, 5, 3, 12, 0, tzinfo=timezone.utc)
FIRST_SLOT = NOW + timedelta(minutes=30)


def _article(article_id: str = "a1", **changes) -> Article:
    article = Article(
        id=article_id,
        title=f"Title {article_id}",
        content="<p>Feed summary</p>",
        source="Waterkant",
        url=f"https://www.waterkant.net/{article_id}",
        timestamp=NOW,
    )
    return article.evolve(**changes) if changes else article


class Harness:
    def __init__(self, crawl_result="<p>Full page</p>", rewrite_result="<p>Rewritten</p>") -> None:
        self.store = MemoryStore()
        self.cache = ArticleCache(self.store, timedelta(days=7), clock=lambda: NOW)
        self.schedule = ScheduleState.starting_at(NOW, timedelta(minutes=30), timedelta(minutes=30))
        self.notifier = Notifier(self.store)
        self.crawl = AsyncMock(return_value=crawl_result)
        self.rewrite = AsyncMock(return_value=rewrite_result)
        self.processor = ArticleProcessor(
            cache=self.cache,
            schedule=self.schedule,
            crawl=self.crawl,
            rewrite=self.rewrite,
            notifier=self.notifier,
        )


class TestProcessArticle:
    def test_crawl_rewrite_cache_schedule(self) -> None:
        h = Harness()

        result = asyncio.run(h.processor.process_article(_article()))

        h.crawl.assert_awaited_once_with("https://www.waterkant.net/a1")
        h.rewrite.assert_awaited_once_with("<p>Full page</p>")
        assert result.status == SCHEDULED
        assert result.content == "<p>Full page</p>"
        assert result.rewritten_content == "<p>Rewritten</p>"
        assert result.scheduled_time == FIRST_SLOT
        assert asyncio.run(h.cache.get(result.url)) is not None

    def test_cache_hit_skips_crawl_and_rewrite(self) -> None:
        h = Harness()
        cached = _article(rewritten_content="<p>Cached rewrite</p>", content="<p>Cached page</p>")
        asyncio.run(h.cache.put(cached))

        result = asyncio.run(h.processor.process_article(_article()))

        h.crawl.assert_not_awaited()
        h.rewrite.assert_not_awaited()
        assert result.status == SCHEDULED
        assert result.rewritten_content == "<p>Cached rewrite</p>"
        assert result.scheduled_time == FIRST_SLOT

    def test_cache_hit_keeps_existing_slot(self) -> None:
        h = Harness()
        asyncio.run(h.cache.put(_article(rewritten_content="<p>Cached</p>")))
        slot = NOW + timedelta(hours=5)

        result = asyncio.run(h.processor.process_article(_article(status=SCHEDULED, scheduled_time=slot)))

        assert result.scheduled_time == slot
        assert h.schedule.next_slot == FIRST_SLOT

    def test_failed_crawl_falls_back_to_feed_content(self) -> None:
        h = Harness(crawl_result=None)

        result = asyncio.run(h.processor.process_article(_article()))

        h.rewrite.assert_awaited_once_with("<p>Feed summary</p>")
        assert result.content == "<p>Feed summary</p>"
        assert result.status == SCHEDULED

    def test_terminal_articles_untouched(self) -> None:
        h = Harness()
        for status in (PUBLISHED, REJECTED):
            article = _article(status=status)
            assert asyncio.run(h.processor.process_article(article)) is article
        h.crawl.assert_not_awaited()


class TestProcessBatch:
    def _run(self, h: Harness, articles: list[Article]) -> tuple[ArticleBoard, list[Article]]:
        board = ArticleBoard(h.store)

        async def run():
            cycle = board.start_cycle()
            await board.upsert_polled(articles)
            return await h.processor.process_batch(articles, board, cycle)

        return board, asyncio.run(run())

    def test_auth_failure_marks_error_and_notifies(self) -> None:
        h = Harness()
        h.rewrite.side_effect = RewriteAuthError("OpenAI rejected the API key (401).")

        board, results = self._run(h, [_article()])

        article = board.get("a1")
        assert article.status == ERROR
        assert "401" in article.error
        assert article.rewritten_content is None
        assert article.scheduled_time is None
        assert asyncio.run(h.cache.get(article.url)) is None
        assert asyncio.run(h.store.get(CACHE_KEY)) is None
        notifications = asyncio.run(h.notifier.recent())
        assert notifications[0].level == "error"
        assert "401" in notifications[0].message

    def test_one_failure_does_not_affect_others(self) -> None:
        h = Harness()

        async def rewrite(content):
            if "boom" in content:
                raise RuntimeError("unexpected")
            return "<p>ok</p>"

        async def crawl(url):
            return "<p>boom</p>" if url.endswith("bad") else None

        h.rewrite.side_effect = rewrite
        h.crawl.side_effect = crawl

        board, results = self._run(h, [_article("good"), _article("bad")])

        assert board.get("good").status == SCHEDULED
        assert board.get("bad").status == ERROR
        assert board.get("bad").error.startswith("Unexpected error")
        assert len(results) == 2

    def test_slots_are_distinct(self) -> None:
        h = Harness()

        board, _ = self._run(h, [_article(f"a{i}") for i in range(4)])

        slots = sorted(a.scheduled_time for a in board.all())
        assert slots == [FIRST_SLOT + timedelta(minutes=30 * i) for i in range(4)]

    def test_duplicate_url_in_flight_is_skipped(self) -> None:
        h = Harness()
        started = asyncio.Event()
        release = asyncio.Event()

        async def slow_crawl(url):
            started.set()
            await release.wait()
            return "<p>Full page</p>"

        h.crawl.side_effect = slow_crawl
        article = _article()

        async def run():
            first = asyncio.create_task(h.processor._process_one(article))
            await started.wait()
            duplicate = await h.processor._process_one(article)
            release.set()
            return duplicate, await first

        (_, duplicate), (_, processed) = asyncio.run(run())

        assert duplicate.status == PENDING
        assert processed.status == SCHEDULED
        h.crawl.assert_awaited_once()
