"""Tests for projected metrics."""

from datetime import date

from regain.models.exercises import Discipline
from regain.models.history import CompletedSession, PerformedVariation
from regain.services.metrics import RATING_WINDOW, calculate_metrics_summary, system_rating


def _completed(summary, day=1):
    return CompletedSession(date=date(2024, 1, day), discipline=Discipline.PILATES, metrics_summary=summary)


class TestMetricsSummary:
    """Tests for calculate_metrics_summary."""

    def test_average_rounds_half_up(self, catalog):
        """Test the per-session average rounds halves upward."""
        performed = [
            PerformedVariation("push-up", "pu-knees"),
            PerformedVariation("push-up", "pu-full"),
        ]
        summary = calculate_metrics_summary(performed, catalog)
        assert summary == {"mobility": 3, "rotation": 1, "flexibility": 4}

    def test_variations_without_metrics_ignored(self, catalog):
        """Test variations lacking metrics do not dilute the average."""
        performed = [
            PerformedVariation("push-up", "pu-full"),
            PerformedVariation("push-up", "pu-single-leg"),
            PerformedVariation("gone", "unknown"),
        ]
        summary = calculate_metrics_summary(performed, catalog)
        assert summary == {"mobility": 4, "rotation": 1, "flexibility": 4}

    def test_nothing_to_average(self, catalog):
        """Test zeros when no performed variation carries metrics."""
        summary = calculate_metrics_summary([PerformedVariation("row", "row-incline")], catalog)
        assert summary == {"mobility": 0, "rotation": 0, "flexibility": 0}


class TestSystemRating:
    """Tests for system_rating."""

    def test_averages_recent_sessions(self):
        """Test the rating averages the session summaries."""
        sessions = [
            _completed({"mobility": 4, "rotation": 1, "flexibility": 2}),
            _completed({"mobility": 5, "rotation": 2, "flexibility": 2}),
        ]
        assert system_rating(sessions) == {"mobility": 5, "rotation": 2, "flexibility": 2}

    def test_window_limits_history(self):
        """Test only the most recent sessions count."""
        sessions = [_completed({"mobility": 2, "rotation": 2, "flexibility": 2})] * RATING_WINDOW
        sessions.append(_completed({"mobility": 100, "rotation": 100, "flexibility": 100}))
        assert system_rating(sessions) == {"mobility": 2, "rotation": 2, "flexibility": 2}

    def test_sessions_without_summary_skipped(self):
        """Test history recorded without metrics is ignored."""
        sessions = [_completed(None), _completed({"mobility": 3, "rotation": None, "flexibility": 1})]
        assert system_rating(sessions) == {"mobility": 3, "rotation": 0, "flexibility": 1}

    def test_empty_history(self):
        """Test zeros without history."""
        assert system_rating([]) == {"mobility": 0, "rotation": 0, "flexibility": 0}
