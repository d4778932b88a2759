"""Session completion workflow.

Completing a session is the one place where ordering matters: the streak is
computed from history that does not yet contain the session. Reading that
history, computing the new milestones and streak, and writing the history
row, profile and the session's completed flag all happen inside one write
transaction, so two completions arriving together cannot overwrite each
other's counters.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from pathlib import Path

from ..db.repositories import CompletedSessionRepository, UserProfileRepository
from ..exceptions import ProfileNotFoundError
from ..models.exercises import Exercise
from ..models.history import CompletedSession, PerformedVariation
from ..models.training import Phase, Session, TrainingSystem
from ..models.user_profile import OVERLOAD_THRESHOLD, StreakState, UserProfile
from .metrics import RATING_WINDOW, calculate_metrics_summary, system_rating
from .overload import OverloadTracker
from .streak import StreakAccountant, resolve_training_days, update_streak_state

logger = logging.getLogger(__name__)


@dataclass
class CompletionResult:
    """Outcome of completing a session."""

    completed_session: CompletedSession
    streak: StreakState
    advanced: list[str] = field(default_factory=list)  # Exercise IDs that reached a milestone


def apply_milestones(profile: UserProfile, completed: CompletedSession) -> tuple[UserProfile, list[str]]:
    """Count each distinct (exercise, variation) pair once.

    Returns:
        (profile with updated milestones, exercise IDs that reached the threshold)
    """
    tracker = OverloadTracker(profile.milestones.copy())
    advanced = []
    seen = set()
    for pv in completed.performed_variations():
        key = (pv.exercise_id, pv.variation_id)
        if key in seen:
            continue
        seen.add(key)
        before = tracker.milestones.count(*key)
        if tracker.update_milestone(*key) == OVERLOAD_THRESHOLD and before < OVERLOAD_THRESHOLD:
            advanced.append(pv.exercise_id)
    return replace(profile, milestones=tracker.milestones), advanced


class CompletionService:
    """Records completed sessions and keeps milestones and streaks current."""

    def __init__(self, db_path: Path | None = None):
        self.profiles = UserProfileRepository(db_path)
        self.history = CompletedSessionRepository(db_path)

    async def complete_session(
        self,
        profile_id: int,
        session: Session,
        performed: dict[Phase, list[PerformedVariation]] | None = None,
        completed_on: date | None = None,
        exercises: list[Exercise] | None = None,
        duration_seconds: int = 0,
    ) -> CompletionResult:
        """Complete a planned session for a user.

        Args:
            profile_id: Owner of the session
            session: The planned session
            performed: What was actually done per phase; defaults to the plan
            completed_on: Completion date; defaults to today
            exercises: Catalog, used for the projected metrics summary
            duration_seconds: Time spent

        Raises:
            ProfileNotFoundError: If the profile does not exist
        """
        completed_on = completed_on or date.today()
        completed = CompletedSession.from_session(
            session, completed_on, performed=performed, duration_seconds=duration_seconds
        )
        if exercises:
            completed = replace(
                completed,
                metrics_summary=calculate_metrics_summary(
                    completed.performed_variations(), exercises
                ),
            )

        advanced = []

        def apply(
            profile: UserProfile | None,
            system: TrainingSystem | None,
            history_dates: list[date],
        ) -> tuple[UserProfile, CompletedSession, TrainingSystem | None]:
            if profile is None:
                raise ProfileNotFoundError(f"Profile {profile_id} not found")

            streak = update_streak_state(profile.streak, completed_on, history_dates, system)
            updated, reached = apply_milestones(profile, completed)
            advanced.extend(reached)

            if system is not None and session.id is not None:
                planned = system.get_session(session.id)
                if planned is not None:
                    planned.completed = True
                else:
                    logger.info("Session %s is not part of the active training system", session.id)

            return replace(updated, streak=streak), completed, system

        completed_id, profile, completed = await self.history.record_completion(profile_id, apply)
        logger.info(
            "Profile %s completed session %s on %s, streak %d",
            profile_id,
            session.id,
            completed_on,
            profile.streak.current_streak,
        )

        return CompletionResult(
            completed_session=replace(completed, id=completed_id),
            streak=profile.streak,
            advanced=advanced,
        )

    async def backfill_longest_streak(self, profile_id: int) -> StreakState:
        """Reconstruct the best streak from full history.

        The stored value never decreases.

        Raises:
            ProfileNotFoundError: If the profile does not exist
        """

        def apply(profile: UserProfile, system: TrainingSystem | None, dates: list[date]) -> StreakState:
            reconstructed = StreakAccountant(resolve_training_days(system), dates).compute_longest_streak()
            return replace(
                profile.streak,
                longest_streak=max(profile.streak.longest_streak or 0, reconstructed),
            )

        return await self.profiles.apply_streak(profile_id, apply)

    async def rating(self, profile_id: int) -> dict[str, int]:
        """System rating from the user's recent completed sessions."""
        recent = await self.history.list_recent(profile_id, limit=RATING_WINDOW)
        return system_rating(recent)
