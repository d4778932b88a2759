"""Training system, session and phase models."""

from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from enum import Enum

from ..exceptions import SessionNotFoundError
from .exercises import Bilaterality, Discipline, Exercise, ProgressionType, TargetMuscles, Variation


class Phase(str, Enum):
    """The three phases of every session, in order."""

    WARMUP = "warmup"
    WORKOUT = "workout"
    COOLDOWN = "cooldown"


class TrainingFramework(str, Enum):
    """Muscle-group rotation schemes for a training week."""

    PUSH_PULL = "Push/Pull"
    UPPER_LOWER = "Upper/Lower"
    CHEST_BACK_LEGS = "Chest/Back/Legs"
    FULL_BODY = "Full Body"
    PUSH_PULL_LEGS = "Push/Pull/Legs"


@dataclass(frozen=True)
class PhaseCriteria:
    """Difficulty and progression bands a variation must satisfy for a phase."""

    max_difficulty: float
    min_difficulty: float = 0
    progression_types: frozenset[ProgressionType] | None = None  # None accepts all
    bilateral_qualifies: bool = False  # Bilateral variations bypass progression_types

    def difficulty_in_band(self, difficulty: float) -> bool:
        """Check the difficulty window alone."""
        return self.min_difficulty <= difficulty <= self.max_difficulty

    def accepts(self, variation: Variation) -> bool:
        """Check a variation against the full phase criteria."""
        if not self.difficulty_in_band(variation.difficulty_score):
            return False
        if self.progression_types is None:
            return True
        if variation.progression_type in self.progression_types:
            return True
        return (
            self.bilateral_qualifies
            and variation.bilaterality == Bilaterality.BILATERAL
        )


PHASE_CRITERIA: dict[Phase, PhaseCriteria] = {
    Phase.WARMUP: PhaseCriteria(
        max_difficulty=4,
        progression_types=frozenset({ProgressionType.STABILITY, ProgressionType.DURATION}),
        bilateral_qualifies=True,
    ),
    Phase.WORKOUT: PhaseCriteria(min_difficulty=3, max_difficulty=9),
    Phase.COOLDOWN: PhaseCriteria(
        max_difficulty=5,
        progression_types=frozenset(
            {ProgressionType.STABILITY, ProgressionType.RANGE_OF_MOTION}
        ),
    ),
}


# Framework part -> muscles it emphasises
FRAMEWORK_MUSCLE_MAPPINGS: dict[str, dict[str, list[str]]] = {
    "Push": {
        "primary": ["chest", "shoulders", "triceps"],
        "secondary": ["front delts", "upper chest"],
    },
    "Pull": {
        "primary": ["back", "biceps", "rear delts"],
        "secondary": ["lats", "rhomboids", "traps"],
    },
    "Legs": {
        "primary": ["quads", "glutes", "hamstrings", "calves"],
        "secondary": ["hip flexors", "adductors"],
    },
    "Upper": {
        "primary": ["chest", "back", "shoulders", "biceps", "triceps"],
        "secondary": ["traps", "rear delts", "front delts"],
    },
    "Lower": {
        "primary": ["quads", "glutes", "hamstrings", "calves"],
        "secondary": ["hip flexors", "adductors", "abductors"],
    },
    "Core": {
        "primary": ["abs", "core", "obliques"],
        "secondary": ["lower back", "hip flexors"],
    },
    "Chest": {
        "primary": ["chest", "upper chest"],
        "secondary": ["front delts", "triceps"],
    },
    "Back": {
        "primary": ["back", "lats", "rhomboids"],
        "secondary": ["rear delts", "biceps", "traps"],
    },
    "Full Body": {
        "primary": ["chest", "back", "shoulders", "quads", "glutes", "hamstrings", "core"],
        "secondary": ["biceps", "triceps", "calves", "abs"],
    },
}


def framework_parts(framework: str) -> list[str]:
    """Split a composite framework label ("Push/Pull") into its parts."""
    return [part.strip() for part in framework.split("/") if part.strip()]


def framework_muscles(part: str) -> frozenset[str]:
    """Primary and secondary muscles for one framework part (case-insensitive)."""
    for name, mapping in FRAMEWORK_MUSCLE_MAPPINGS.items():
        if name.lower() == part.strip().lower():
            return frozenset(
                m.lower() for m in mapping["primary"] + mapping["secondary"]
            )
    return frozenset()


def day_of_week(d: date) -> int:
    """Day-of-week index with 0 = Sunday through 6 = Saturday."""
    return (d.weekday() + 1) % 7


def week_start(d: date) -> date:
    """Monday of the week containing d."""
    return d - timedelta(days=d.weekday())


DEFAULT_TRAINING_PATTERNS: dict[int, list[int]] = {
    2: [1, 4],  # Monday, Thursday
    3: [1, 3, 5],  # Monday, Wednesday, Friday
    4: [1, 3, 5, 0],  # Monday, Wednesday, Friday, Sunday
    5: [1, 2, 4, 5, 6],
    6: [1, 2, 3, 4, 5, 6],
    7: [0, 1, 2, 3, 4, 5, 6],
}


def default_training_days(days_per_week: int) -> list[int]:
    """Standard training-day pattern for a weekly frequency."""
    if days_per_week in DEFAULT_TRAINING_PATTERNS:
        return list(DEFAULT_TRAINING_PATTERNS[days_per_week])
    if days_per_week <= 0:
        return []

    # Spread evenly starting from Monday
    step = 7 // days_per_week
    return sorted((i * step + 1) % 7 for i in range(days_per_week))


@dataclass
class PlannedVariation:
    """A chosen variation placed in a session phase."""

    exercise_id: str
    exercise_name: str
    variation_id: str
    variation_name: str
    difficulty_score: float
    bilaterality: Bilaterality
    progression_type: ProgressionType
    target_muscles: TargetMuscles = field(default_factory=TargetMuscles)
    technique_cues: list[str] = field(default_factory=list)

    @classmethod
    def from_variation(cls, exercise: Exercise, variation: Variation) -> "PlannedVariation":
        """Place a catalog variation in a session."""
        return cls(
            exercise_id=exercise.id,
            exercise_name=exercise.name,
            variation_id=variation.id,
            variation_name=variation.name,
            difficulty_score=variation.difficulty_score,
            bilaterality=variation.bilaterality,
            progression_type=variation.progression_type,
            target_muscles=variation.target_muscles,
            technique_cues=list(variation.technique_cues),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "exercise_id": self.exercise_id,
            "exercise_name": self.exercise_name,
            "variation_id": self.variation_id,
            "variation_name": self.variation_name,
            "difficulty_score": self.difficulty_score,
            "bilaterality": self.bilaterality.value,
            "progression_type": self.progression_type.value,
            "target_muscles": self.target_muscles.to_dict(),
            "technique_cues": self.technique_cues,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PlannedVariation":
        """Create from dictionary."""
        return cls(
            exercise_id=data["exercise_id"],
            exercise_name=data.get("exercise_name", ""),
            variation_id=data["variation_id"],
            variation_name=data.get("variation_name", ""),
            difficulty_score=float(data.get("difficulty_score", 0)),
            bilaterality=Bilaterality(data.get("bilaterality", "bilateral")),
            progression_type=ProgressionType(data.get("progression_type", "stability")),
            target_muscles=TargetMuscles.from_dict(data.get("target_muscles")),
            technique_cues=data.get("technique_cues", []),
        )


def _empty_phases() -> dict[Phase, list[PlannedVariation]]:
    return {phase: [] for phase in Phase}


@dataclass
class Session:
    """A planned training session with its three phases."""

    day_index: int
    date: date | None
    discipline: Discipline
    framework: str
    phases: dict[Phase, list[PlannedVariation]] = field(default_factory=_empty_phases)
    day_of_week: int | None = None  # Pattern day this session belongs to
    completed: bool = False
    moved: bool = False  # Set when the session was rescheduled off its pattern day
    id: str | None = None

    def all_variations(self) -> list[PlannedVariation]:
        """Every planned variation across the phases, in phase order."""
        return [pv for phase in Phase for pv in self.phases.get(phase, [])]

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "day_index": self.day_index,
            "date": self.date.isoformat() if self.date else None,
            "day_of_week": self.day_of_week,
            "discipline": self.discipline.value,
            "framework": self.framework,
            "phases": {
                phase.value: [pv.to_dict() for pv in self.phases.get(phase, [])]
                for phase in Phase
            },
            "completed": self.completed,
            "moved": self.moved,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Session":
        """Create from dictionary."""
        phases_data = data.get("phases", {})
        return cls(
            id=data.get("id"),
            day_index=data.get("day_index", 0),
            date=date.fromisoformat(data["date"][:10]) if data.get("date") else None,
            day_of_week=data.get("day_of_week"),
            discipline=Discipline.parse(data["discipline"]),
            framework=data.get("framework", ""),
            phases={
                phase: [PlannedVariation.from_dict(pv) for pv in phases_data.get(phase.value, [])]
                for phase in Phase
            },
            completed=data.get("completed", False),
            moved=data.get("moved", False),
        )


@dataclass
class TrainingSystem:
    """One generation cycle of sessions on a weekly training-day pattern."""

    start_date: date | None
    days_per_week: int
    training_days_of_week: list[int] = field(default_factory=list)
    framework: str = TrainingFramework.PUSH_PULL.value
    sessions: list[Session] = field(default_factory=list)
    id: int | None = None
    profile_id: int | None = None

    def get_session(self, session_id: str) -> Session | None:
        """Find a session by ID."""
        for session in self.sessions:
            if session.id == session_id:
                return session
        return None

    def reschedule_session(self, session_id: str, new_date: date) -> Session:
        """Move a session to another date.

        The weekly training-day pattern is left untouched; the session keeps
        its pattern day and is flagged as moved.

        Raises:
            SessionNotFoundError: If no session has the given ID
        """
        session = self.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        if session.day_of_week is None and session.date is not None:
            session.day_of_week = day_of_week(session.date)
        session.date = new_date
        session.moved = True
        return session

    def session_for_date(self, target: date) -> Session | None:
        """Resolve the session shown on a calendar date.

        A session scheduled on exactly that date wins. Otherwise the weekly
        pattern supplies the session for a training day, unless a session
        for that pattern day was moved elsewhere within the same week.
        """
        if self.start_date and target < self.start_date:
            return None

        for session in self.sessions:
            if session.date == target:
                return session

        dow = day_of_week(target)
        if dow not in self.training_days_of_week:
            return None
        index = self.training_days_of_week.index(dow)
        if index >= len(self.sessions):
            return None

        for session in self.sessions:
            if (
                session.moved
                and session.day_of_week == dow
                and session.date is not None
                and week_start(session.date) == week_start(target)
            ):
                return None

        template = self.sessions[index]
        return replace(
            template,
            id=None,
            date=target,
            day_of_week=dow,
            completed=False,
            moved=False,
            phases={phase: list(pvs) for phase, pvs in template.phases.items()},
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "days_per_week": self.days_per_week,
            "training_days_of_week": self.training_days_of_week,
            "framework": self.framework,
            "sessions": [s.to_dict() for s in self.sessions],
        }

    @classmethod
    def from_dict(
        cls,
        data: dict,
        id: int | None = None,
        profile_id: int | None = None,
    ) -> "TrainingSystem":
        """Create from dictionary."""
        start = data.get("start_date")
        return cls(
            id=id,
            profile_id=profile_id,
            start_date=date.fromisoformat(start[:10]) if start else None,
            days_per_week=data.get("days_per_week", 0),
            training_days_of_week=list(data.get("training_days_of_week") or []),
            framework=data.get("framework", TrainingFramework.PUSH_PULL.value),
            sessions=[Session.from_dict(s) for s in data.get("sessions", [])],
        )
