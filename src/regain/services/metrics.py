"""Projected mobility, rotation and flexibility ratings."""

import math

from ..models.exercises import Exercise, Variation
from ..models.history import CompletedSession, PerformedVariation

METRIC_NAMES = ("mobility", "rotation", "flexibility")

# Completed sessions averaged into the system rating
RATING_WINDOW = 20


def _zero_metrics() -> dict[str, int]:
    return {name: 0 for name in METRIC_NAMES}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _variation_index(exercises: list[Exercise]) -> dict[str, Variation]:
    return {v.id: v for ex in exercises for v in ex.variations}


def calculate_metrics_summary(
    performed: list[PerformedVariation],
    exercises: list[Exercise],
) -> dict[str, int]:
    """Average the catalog metrics of the variations performed in a session.

    Variations without metrics are left out of the average. With nothing
    to average, every metric is 0.
    """
    index = _variation_index(exercises)
    totals = _zero_metrics()
    counted = 0

    for pv in performed:
        variation = index.get(pv.variation_id)
        if variation is None or not variation.metrics:
            continue
        for name in METRIC_NAMES:
            totals[name] += variation.metrics.get(name) or 0
        counted += 1

    if counted == 0:
        return _zero_metrics()
    return {name: _round_half_up(totals[name] / counted) for name in METRIC_NAMES}


def system_rating(completed_sessions: list[CompletedSession]) -> dict[str, int]:
    """Average metrics over the most recent completed sessions.

    Args:
        completed_sessions: History, newest first
    """
    summaries = [
        s.metrics_summary
        for s in completed_sessions[:RATING_WINDOW]
        if isinstance(s.metrics_summary, dict)
    ]
    if not summaries:
        return _zero_metrics()

    rating = {}
    for name in METRIC_NAMES:
        values = [summary.get(name) for summary in summaries]
        total = sum(v for v in values if isinstance(v, (int, float)))
        rating[name] = _round_half_up(total / len(summaries))
    return rating
