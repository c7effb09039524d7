"""Publication slot assignment."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass
class ScheduleState:
    """Next free publication slot, advanced by a fixed stagger per article."""
    next_slot: datetime
    stagger: timedelta = timedelta(minutes=30)

    @classmethod
    def starting_at(cls, now: datetime, initial_offset: timedelta, stagger: timedelta) -> ScheduleState:
        return cls(next_slot=now + initial_offset, stagger=stagger)

    def seed(self, now: datetime, initial_offset: timedelta) -> None:
        """Restart slot assignment for a new polling cycle."""
        self.next_slot = now + initial_offset

    def assign(self) -> datetime:
        slot = self.next_slot
        self.next_slot = slot + self.stagger
        return slot
