"""Progressive overload tracking.

Three completed sessions at a variation unlock the next harder one. The
tracker reads and updates the profile's :class:`MilestoneMap`; it keeps no
other state.
"""

import logging

from ..models.exercises import Exercise, Variation
from ..models.user_profile import OVERLOAD_THRESHOLD, MilestoneMap

logger = logging.getLogger(__name__)


class OverloadTracker:
    """Chooses and advances variations from milestone counts."""

    def __init__(self, milestones: MilestoneMap | None = None):
        self.milestones = milestones if milestones is not None else MilestoneMap()

    def get_current_variation(self, exercise: Exercise) -> Variation | None:
        """The variation the user is currently working on.

        Among recorded variations still below the threshold, the one with
        the highest count wins, ties going to catalog order. With no
        record at all, the easiest variation is returned. When every
        recorded variation has reached the threshold, the hardest of them
        is current, so an upgrade is never lost.
        """
        if not exercise.variations:
            return None

        known = [
            v for v in exercise.variations if self.milestones.has_record(exercise.id, v.id)
        ]
        if not known:
            return exercise.lowest_variation

        current = None
        highest = -1
        for variation in known:
            count = self.milestones.count(exercise.id, variation.id)
            if count < OVERLOAD_THRESHOLD and count > highest:
                highest = count
                current = variation

        if current is None:
            current = known[-1]
        return current

    def is_milestone_achieved(self, exercise_id: str, variation_id: str) -> bool:
        """True once the variation's count has reached the threshold."""
        return self.milestones.count(exercise_id, variation_id) >= OVERLOAD_THRESHOLD

    def get_next_variation(self, exercise: Exercise, variation_id: str) -> Variation | None:
        """The next harder variation, or None at the top or for an unknown ID."""
        for index, variation in enumerate(exercise.variations):
            if variation.id == variation_id:
                if index + 1 < len(exercise.variations):
                    return exercise.variations[index + 1]
                return None
        return None

    def update_milestone(self, exercise_id: str, variation_id: str) -> int:
        """Record one completed session at a variation.

        Returns:
            The new count, never above the threshold
        """
        count = self.milestones.increment(exercise_id, variation_id)
        if count == OVERLOAD_THRESHOLD:
            logger.info("Milestone reached for %s/%s", exercise_id, variation_id)
        return count

    def select_variation_for_user(self, exercise: Exercise) -> Variation | None:
        """The variation to plan: current, or the next one once it is mastered.

        At the hardest variation the current one keeps being served.
        """
        current = self.get_current_variation(exercise)
        if current is None:
            return None

        if self.is_milestone_achieved(exercise.id, current.id):
            upgrade = self.get_next_variation(exercise, current.id)
            if upgrade is not None:
                return upgrade
        return current

    def reset(self, exercise_id: str) -> None:
        """Forget all progress on an exercise, back to its easiest variation."""
        self.milestones.clear(exercise_id)
