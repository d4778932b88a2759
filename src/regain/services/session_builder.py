"""Session and training-system assembly.

Candidates flow through the selection filters, the variety guard and a
random draw; the overload tracker then decides which variation of each
drawn exercise is planned.
"""

import logging
import random
import uuid
from datetime import date, timedelta

from ..config import DEFAULT_PHASE_COUNTS
from ..exceptions import CatalogUnavailableError
from ..models.exercises import Discipline, Exercise
from ..models.training import (
    Phase,
    PlannedVariation,
    Session,
    TrainingFramework,
    TrainingSystem,
    day_of_week,
    default_training_days,
    framework_parts,
)
from ..models.user_profile import UserProfile
from .filters import selection_chain
from .overload import OverloadTracker
from .variety import ensure_variety, sample_exercises

logger = logging.getLogger(__name__)


class SessionBuilder:
    """Builds sessions for one user from the catalog."""

    def __init__(
        self,
        exercises: list[Exercise],
        profile: UserProfile,
        phase_counts: dict[Phase, int] | None = None,
        rng: random.Random | None = None,
    ):
        """Initialize the builder.

        Args:
            exercises: Normalised catalog
            profile: User whose preferences and milestones drive selection
            phase_counts: Exercises requested per phase
            rng: Random source, injectable for reproducible plans
        """
        self.exercises = list(exercises)
        self.profile = profile
        self.phase_counts = dict(DEFAULT_PHASE_COUNTS)
        if phase_counts:
            self.phase_counts.update(phase_counts)
        self.rng = rng or random.Random()
        self.tracker = OverloadTracker(profile.milestones)

    def _candidates(
        self,
        phase: Phase,
        discipline: Discipline | str | None,
        framework: str | None,
    ) -> list[Exercise]:
        chain = selection_chain(
            discipline=discipline,
            framework=framework,
            phase=phase,
            equipment=self.profile.equipment,
            discomforts=self.profile.discomforts,
        )
        return chain.apply(self.exercises)

    def build_session(
        self,
        discipline: Discipline | str,
        framework: str,
        session_date: date | None = None,
        day_index: int = 0,
        previous_sessions: list[Session] | None = None,
    ) -> Session:
        """Assemble one session with warmup, workout and cooldown phases.

        Raises:
            CatalogUnavailableError: If the catalog is empty
        """
        if not self.exercises:
            raise CatalogUnavailableError("Cannot build a session from an empty catalog")

        session = Session(
            id=uuid.uuid4().hex,
            day_index=day_index,
            date=session_date,
            day_of_week=day_of_week(session_date) if session_date else None,
            discipline=Discipline.parse(discipline),
            framework=framework,
        )

        used: set[str] = set()
        for phase in Phase:
            requested = self.phase_counts.get(phase, 0)
            pool = self._candidates(phase, discipline, framework)
            pool = ensure_variety(pool, previous_sessions, requested)

            # Same exercise should not appear twice in one session
            unused = [ex for ex in pool if ex.id not in used]
            if len(unused) >= requested:
                pool = unused

            chosen = sample_exercises(pool, requested, self.rng)
            if len(chosen) < requested:
                logger.warning(
                    "%s phase of %s %s session has %d of %d exercises",
                    phase.value,
                    session.discipline.display_name,
                    framework,
                    len(chosen),
                    requested,
                )

            for exercise in chosen:
                variation = self.tracker.select_variation_for_user(exercise)
                if variation is None:
                    continue
                session.phases[phase].append(PlannedVariation.from_variation(exercise, variation))
                used.add(exercise.id)

        return session

    def build_training_system(
        self,
        start_date: date,
        days_per_week: int | None = None,
        framework: str | None = None,
        disciplines: list[Discipline] | None = None,
        training_days: list[int] | None = None,
        previous_sessions: list[Session] | None = None,
    ) -> TrainingSystem:
        """Plan one week of sessions on the training-day pattern.

        Sessions follow the order of the training-day pattern, each dated
        on the first matching day on or after ``start_date``. Composite
        frameworks rotate by part and disciplines rotate through the
        user's preferred list.
        """
        days_per_week = days_per_week or self.profile.days_per_week
        framework = framework or TrainingFramework.PUSH_PULL.value
        training_days = list(training_days or default_training_days(days_per_week))
        disciplines = disciplines or self.profile.preferred_disciplines or [Discipline.PILATES]
        parts = framework_parts(framework) or [framework]

        history = list(previous_sessions or [])
        start_dow = day_of_week(start_date)
        sessions = []
        for index, dow in enumerate(training_days):
            session_date = start_date + timedelta(days=(dow - start_dow) % 7)
            session = self.build_session(
                discipline=disciplines[index % len(disciplines)],
                framework=parts[index % len(parts)],
                session_date=session_date,
                day_index=index,
                previous_sessions=history,
            )
            sessions.append(session)
            history.append(session)

        logger.info(
            "Planned %d sessions from %s on days %s", len(sessions), start_date, training_days
        )
        return TrainingSystem(
            start_date=start_date,
            days_per_week=days_per_week,
            training_days_of_week=training_days,
            framework=framework,
            sessions=sessions,
            profile_id=self.profile.id,
        )


def swap_variation(
    session: Session,
    phase: Phase | str,
    exercise_id: str,
    replacement: PlannedVariation,
) -> PlannedVariation:
    """Replace a planned exercise in a session phase.

    Returns:
        The variation that was replaced

    Raises:
        ValueError: If the exercise is not planned in that phase
    """
    planned = session.phases.get(Phase(phase), [])
    for index, current in enumerate(planned):
        if current.exercise_id == exercise_id:
            planned[index] = replacement
            return current
    raise ValueError(f"Exercise {exercise_id} is not in the {Phase(phase).value} phase")
