"""Streak statistics over a daily contribution calendar."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Sequence

from gitstreak.models.contribution import ContributionDay, StreakSnapshot


def compute_streak(days: Iterable[ContributionDay], *, today: date) -> StreakSnapshot:
    """Compute current streak, longest streak and total count.

    `days` may arrive in any order. The current streak counts back from the
    most recent day when that day is today or yesterday; a zero-count today
    is skipped so a streak ending yesterday stays alive.
    """

    ordered = sorted(days, key=lambda item: item.date)
    if not ordered:
        return StreakSnapshot()

    total = sum(day.count for day in ordered)
    current = _current_streak(ordered, today=today)
    longest = max(_longest_streak(ordered), current)

    return StreakSnapshot(current_streak=current, longest_streak=longest, total_count=total)


def _current_streak(ordered: Sequence[ContributionDay], *, today: date) -> int:
    newest_first = list(reversed(ordered))
    anchor = newest_first[0]
    if (today - anchor.date).days > 1:
        return 0

    start = 0
    previous: ContributionDay | None = None
    if anchor.date == today and anchor.count == 0:
        start = 1
        previous = anchor

    streak = 0
    for day in newest_first[start:]:
        if day.count <= 0:
            break
        if previous is not None and (previous.date - day.date).days != 1:
            break
        streak += 1
        previous = day
    return streak


def _longest_streak(ordered: Sequence[ContributionDay]) -> int:
    longest = 0
    run = 0
    previous: ContributionDay | None = None
    for day in ordered:
        if day.count > 0:
            if previous is not None and (day.date - previous.date).days == 1:
                run += 1
            else:
                run = 1
        else:
            run = 0
        longest = max(longest, run)
        previous = day
    return longest
