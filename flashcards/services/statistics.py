"""Dashboard statistics derived from a learner's progress records."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo

from loguru import logger

from flashcards.config import settings
from flashcards.services.stores import ProgressStore
from flashcards.utils.clock import local_date, local_day_bounds, resolve_timezone, utcnow
from flashcards.utils.exceptions import Unauthorized


@dataclass(slots=True)
class StatusBreakdown:
    new: int
    known: int
    unknown: int


@dataclass(slots=True)
class StreakStats:
    current: int
    longest: int
    last_study_date: date | None = None


@dataclass(slots=True)
class UserStatistics:
    total: int
    today: int
    this_week: int
    remaining: int
    breakdown: StatusBreakdown | None = None
    streak: StreakStats | None = None


def calculate_streak(study_dates: Iterable[date], today: date) -> StreakStats:
    """Reduce activity dates to current and longest runs of consecutive days.

    ``current`` counts back from ``today``, or from yesterday when there has
    been no activity yet today.
    """

    days = sorted(set(study_dates))
    if not days:
        return StreakStats(current=0, longest=0, last_study_date=None)

    longest = 0
    run = 0
    previous: date | None = None
    for day in days:
        if previous is not None and day - previous == timedelta(days=1):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = day

    active = set(days)
    cursor = today if today in active else today - timedelta(days=1)
    current = 0
    while cursor in active:
        current += 1
        cursor -= timedelta(days=1)

    return StreakStats(current=current, longest=longest, last_study_date=days[-1])


class StatisticsService:
    """Aggregate learner metrics for the dashboard.

    Every call recomputes from the store. Calendar days are taken in ``tz``,
    which is passed in rather than read from the host clock.
    """

    def __init__(
        self,
        progress_store: ProgressStore,
        *,
        tz: tzinfo | None = None,
        streak_window_days: int | None = None,
        week_window_days: int | None = None,
    ) -> None:
        self.progress_store = progress_store
        self.tz = tz or resolve_timezone(settings.STATS_TIMEZONE)
        self.streak_window_days = streak_window_days or settings.STREAK_WINDOW_DAYS
        self.week_window_days = week_window_days or settings.WEEK_WINDOW_DAYS

    def compute_statistics(
        self,
        user_id: str,
        *,
        now: datetime | None = None,
        include_breakdown: bool = True,
        include_streak: bool = True,
    ) -> UserStatistics:
        """Return totals, today/week counts, remaining words and optional extras."""

        if not user_id:
            raise Unauthorized("User ID is required for statistics")

        now = now or utcnow()
        day_start, day_end = local_day_bounds(now, self.tz)
        counts = self.progress_store.snapshot_counts(
            user_id,
            day_start=day_start,
            day_end=day_end,
            week_start=now - timedelta(days=self.week_window_days),
        )

        stats = UserStatistics(
            total=counts.total,
            today=counts.today,
            this_week=counts.this_week,
            remaining=max(0, counts.vocabulary_size - counts.known),
        )
        if include_breakdown:
            stats.breakdown = StatusBreakdown(
                new=counts.new, known=counts.known, unknown=counts.unknown
            )
        if include_streak:
            stats.streak = self.compute_streak(user_id, now=now)

        logger.debug(
            "Computed statistics",
            user_id=user_id,
            total=stats.total,
            today=stats.today,
            this_week=stats.this_week,
            remaining=stats.remaining,
        )
        return stats

    def compute_streak(self, user_id: str, *, now: datetime | None = None) -> StreakStats:
        now = now or utcnow()
        since = now - timedelta(days=self.streak_window_days)
        reviewed = self.progress_store.read_review_times(user_id, since)
        dates = [local_date(value, self.tz) for value in reviewed]
        return calculate_streak(dates, today=local_date(now, self.tz))
