"""Contribution calendar values and computed streak snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True, slots=True)
class ContributionDay:
    """Activity count for one calendar day."""

    date: date
    count: int


@dataclass(frozen=True, slots=True)
class StreakSnapshot:
    """Streak statistics produced by one calculation."""

    current_streak: int = 0
    longest_streak: int = 0
    total_count: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "current_streak": self.current_streak,
            "longest_streak": self.longest_streak,
            "total_count": self.total_count,
        }
