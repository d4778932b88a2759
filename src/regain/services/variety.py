"""Variety guard: avoid repeating the previous session's exercises."""

import logging
import random

from ..models.exercises import Exercise
from ..models.training import Session

logger = logging.getLogger(__name__)


def exercise_ids_in_session(session: Session | None) -> set[str]:
    """Exercise IDs planned in any phase of a session."""
    if session is None:
        return set()
    return {pv.exercise_id for pv in session.all_variations()}


def ensure_variety(
    candidates: list[Exercise],
    previous_sessions: list[Session] | None,
    requested: int,
) -> list[Exercise]:
    """Drop exercises used in the most recent previous session.

    Only the last entry of ``previous_sessions`` is consulted. When fewer
    than ``requested`` exercises would remain, the candidates are returned
    unfiltered.
    """
    if not previous_sessions:
        return list(candidates)

    recent = exercise_ids_in_session(previous_sessions[-1])
    fresh = [ex for ex in candidates if ex.id not in recent]
    if len(fresh) < requested:
        logger.info(
            "Variety guard bypassed: %d fresh of %d candidates, %d requested",
            len(fresh),
            len(candidates),
            requested,
        )
        return list(candidates)
    return fresh


def sample_exercises(
    pool: list[Exercise],
    count: int,
    rng: random.Random | None = None,
) -> list[Exercise]:
    """Uniform random choice of up to ``count`` exercises without replacement."""
    rng = rng or random.Random()
    if count <= 0:
        return []
    return rng.sample(list(pool), min(count, len(pool)))
