"""User profile data models."""

from dataclasses import dataclass, field
from datetime import date, datetime

from .exercises import Discipline

# Completed sessions at one variation before the next one unlocks
OVERLOAD_THRESHOLD = 3


class MilestoneMap:
    """Per-exercise completed-session counts for each variation.

    Counts are kept within 0..OVERLOAD_THRESHOLD.
    """

    def __init__(self, counts: dict[str, dict[str, int]] | None = None):
        self._counts: dict[str, dict[str, int]] = {}
        for exercise_id, variations in (counts or {}).items():
            for variation_id, count in variations.items():
                self._counts.setdefault(exercise_id, {})[variation_id] = _clamp(count)

    def for_exercise(self, exercise_id: str) -> dict[str, int]:
        """Recorded counts for one exercise (a copy)."""
        return dict(self._counts.get(exercise_id, {}))

    def count(self, exercise_id: str, variation_id: str) -> int:
        """Recorded count, 0 when there is no record."""
        return self._counts.get(exercise_id, {}).get(variation_id, 0)

    def has_record(self, exercise_id: str, variation_id: str) -> bool:
        """Whether a count was ever recorded for the variation."""
        return variation_id in self._counts.get(exercise_id, {})

    def increment(self, exercise_id: str, variation_id: str) -> int:
        """Add one completed session, clamped at the threshold."""
        current = self.count(exercise_id, variation_id)
        updated = min(current + 1, OVERLOAD_THRESHOLD)
        self._counts.setdefault(exercise_id, {})[variation_id] = updated
        return updated

    def clear(self, exercise_id: str) -> None:
        """Drop every record for an exercise."""
        self._counts.pop(exercise_id, None)

    def copy(self) -> "MilestoneMap":
        """Independent copy."""
        return MilestoneMap(self.to_dict())

    def to_dict(self) -> dict[str, dict[str, int]]:
        """Convert to dictionary for storage."""
        return {ex_id: dict(counts) for ex_id, counts in self._counts.items()}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MilestoneMap):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"MilestoneMap({self._counts!r})"


def _clamp(count) -> int:
    return max(0, min(int(count), OVERLOAD_THRESHOLD))


@dataclass
class StreakState:
    """Adherence counters stored on the profile."""

    current_streak: int = 0
    longest_streak: int | None = None  # None until backfilled
    last_session_date: date | None = None
    total_sessions: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "current_streak": self.current_streak,
            "longest_streak": self.longest_streak,
            "last_session_date": (
                self.last_session_date.isoformat() if self.last_session_date else None
            ),
            "total_sessions": self.total_sessions,
        }

    @classmethod
    def from_dict(cls, data: dict | None) -> "StreakState":
        """Create from dictionary."""
        data = data or {}
        last = data.get("last_session_date")
        return cls(
            current_streak=data.get("current_streak", 0),
            longest_streak=data.get("longest_streak"),
            last_session_date=date.fromisoformat(last[:10]) if last else None,
            total_sessions=data.get("total_sessions", 0),
        )


@dataclass
class UserProfile:
    """Training preferences and progress owned by one user."""

    name: str
    preferred_disciplines: list[Discipline] = field(default_factory=list)
    discomforts: list[str] = field(default_factory=list)  # Muscles to keep out of primary load
    equipment: list[str] = field(default_factory=list)
    days_per_week: int = 3
    milestones: MilestoneMap = field(default_factory=MilestoneMap)
    streak: StreakState = field(default_factory=StreakState)
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "name": self.name,
            "preferred_disciplines": [d.value for d in self.preferred_disciplines],
            "discomforts": self.discomforts,
            "equipment": self.equipment,
            "days_per_week": self.days_per_week,
            "milestones": self.milestones.to_dict(),
            "streak": self.streak.to_dict(),
        }

    @classmethod
    def from_dict(
        cls,
        data: dict,
        id: int | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ) -> "UserProfile":
        """Create from dictionary."""
        return cls(
            id=id,
            name=data["name"],
            preferred_disciplines=[
                Discipline.parse(d) for d in data.get("preferred_disciplines", [])
            ],
            discomforts=data.get("discomforts", []),
            equipment=data.get("equipment", []),
            days_per_week=data.get("days_per_week", 3),
            milestones=MilestoneMap(data.get("milestones")),
            streak=StreakState.from_dict(data.get("streak")),
            created_at=created_at,
            updated_at=updated_at,
        )

    def get_summary(self) -> str:
        """Generate a short text summary."""
        summary = f"User: {self.name}\n"
        if self.preferred_disciplines:
            summary += "Disciplines: " + ", ".join(
                d.display_name for d in self.preferred_disciplines
            ) + "\n"
        summary += f"Training days: {self.days_per_week}/week\n"
        if self.equipment:
            summary += f"Equipment: {', '.join(self.equipment)}\n"
        if self.discomforts:
            summary += f"Discomforts: {', '.join(self.discomforts)}\n"
        summary += (
            f"Streak: {self.streak.current_streak} "
            f"(best {self.streak.longest_streak or 0}), "
            f"{self.streak.total_sessions} sessions\n"
        )
        return summary
