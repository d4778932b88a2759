"""Training-day-aware streak accounting.

A streak counts consecutive *training days* with a completed session, not
calendar days. With Monday/Wednesday/Friday training, completing Monday,
Wednesday and Friday is a streak of three even though the dates are two
days apart.
"""

import logging
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Iterable

from ..models.training import TrainingSystem, day_of_week
from ..models.user_profile import StreakState

logger = logging.getLogger(__name__)

# How far back previous_training_day looks
LOOKBACK_DAYS = 7


def parse_session_date(value) -> date:
    """Normalise a date, datetime or ISO string to a date.

    Raises:
        ValueError: If a string is not an ISO date
        TypeError: For any other type
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])
    raise TypeError(f"Cannot read a date from {type(value).__name__}")


def _date_or_today(value) -> date:
    try:
        return parse_session_date(value)
    except (ValueError, TypeError):
        return date.today()


def resolve_training_days(system: TrainingSystem | None) -> list[int]:
    """Training days of week (0 = Sunday) for a training system.

    Explicit days win. Without them, the pattern is ``days_per_week``
    consecutive days starting at the start date's day of week.
    """
    if system is None:
        return []
    if system.training_days_of_week:
        return list(system.training_days_of_week)
    if system.start_date is not None and system.days_per_week > 0:
        start = day_of_week(system.start_date)
        return sorted({(start + i) % 7 for i in range(min(system.days_per_week, 7))})
    return []


class StreakAccountant:
    """Computes streaks over a set of completed dates."""

    def __init__(self, training_days: Iterable[int], completed_dates: Iterable):
        self.training_days = frozenset(training_days)
        self.completed = frozenset(parse_session_date(d) for d in completed_dates)

    def is_training_day(self, d: date) -> bool:
        return day_of_week(d) in self.training_days

    def previous_training_day(self, d: date) -> date | None:
        """The closest earlier training day within a week, if any."""
        for offset in range(1, LOOKBACK_DAYS + 1):
            candidate = d - timedelta(days=offset)
            if self.is_training_day(candidate):
                return candidate
        return None

    def _walk_back(self, start: date) -> int:
        streak = 1
        current = start
        while True:
            previous = self.previous_training_day(current)
            if previous is None or previous not in self.completed:
                return streak
            streak += 1
            current = previous

    def compute_streak(self, completed_on: date) -> int:
        """Streak value for a session completed on ``completed_on``.

        A completion off the training pattern starts over at 1. A second
        completion on the same date is counted from the most recent earlier
        training-day completion, so it does not lengthen the streak.
        """
        if not self.training_days:
            return 1
        if not self.is_training_day(completed_on):
            return 1

        if completed_on in self.completed:
            earlier = [
                d for d in self.completed if d < completed_on and self.is_training_day(d)
            ]
            if not earlier:
                return 1
            anchor = max(earlier)
            if anchor != self.previous_training_day(completed_on):
                return 1
            return self._walk_back(anchor) + 1

        return self._walk_back(completed_on)

    def compute_longest_streak(self) -> int:
        """Longest run of consecutive training-day completions in the history."""
        if not self.completed:
            return 0

        dates = sorted(d for d in self.completed if self.is_training_day(d))
        if not dates:
            return 1

        longest = run = 1
        for previous, current in zip(dates, dates[1:]):
            if self.previous_training_day(current) == previous:
                run += 1
            else:
                run = 1
            longest = max(longest, run)
        return longest


def update_streak_state(
    state: StreakState,
    completed_on,
    history_dates: Iterable,
    system: TrainingSystem | None,
) -> StreakState:
    """New streak counters after completing a session.

    ``history_dates`` must not yet include the session being completed.
    A missing ``longest_streak`` is reconstructed from history once; after
    that it only ever grows. Bad dates or a missing training system never
    fail the completion: the streak falls back to 1.
    """
    longest = state.longest_streak

    try:
        completed_date = parse_session_date(completed_on)
        history = [parse_session_date(d) for d in history_dates]
        accountant = StreakAccountant(resolve_training_days(system), history)
        current = accountant.compute_streak(completed_date)
        if longest is None:
            longest = StreakAccountant(
                accountant.training_days, history + [completed_date]
            ).compute_longest_streak()
    except (ValueError, TypeError, KeyError, AttributeError) as e:
        logger.warning("Streak computation failed, falling back to 1: %s", e)
        current = 1
        completed_date = _date_or_today(completed_on)

    return replace(
        state,
        current_streak=current,
        longest_streak=max(longest or 0, current),
        last_session_date=completed_date,
        total_sessions=state.total_sessions + 1,
    )
