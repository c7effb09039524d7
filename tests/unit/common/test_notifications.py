"""Tests for common.notifications module."""

import asyncio

from common.notifications import ERROR, SUCCESS, Notifier
from common.store import MemoryStore


class TestNotifier:
    def test_recent_is_newest_first(self) -> None:
        notifier = Notifier(MemoryStore())

        async def scenario():
            await notifier.error("first")
            await notifier.success("second")
            return await notifier.recent()

        recent = asyncio.run(scenario())
        assert [n.message for n in recent] == ["second", "first"]
        assert [n.level for n in recent] == [SUCCESS, ERROR]

    def test_capped_at_limit(self) -> None:
        notifier = Notifier(MemoryStore(), limit=3)

        async def scenario():
            for i in range(5):
                await notifier.error(f"n{i}")
            return await notifier.recent()

        assert [n.message for n in asyncio.run(scenario())] == ["n4", "n3", "n2"]

    def test_concurrent_notifications_are_not_lost(self) -> None:
        notifier = Notifier(MemoryStore())

        async def scenario():
            await asyncio.gather(*(notifier.error(f"n{i}") for i in range(10)))
            return await notifier.recent()

        assert len(asyncio.run(scenario())) == 10

    def test_survives_new_notifier_on_same_store(self) -> None:
        store = MemoryStore()
        asyncio.run(Notifier(store).error("persisted"))
        assert asyncio.run(Notifier(store).recent())[0].message == "persisted"
