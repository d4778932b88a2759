"""Completed-session history models."""

from dataclasses import dataclass, field
from datetime import date, datetime

from .exercises import Discipline
from .training import Phase, Session


@dataclass(frozen=True)
class SetRecord:
    """One performed set. Fields absent for the modality stay None."""

    weight: float | None = None  # in kg
    reps: int | None = None
    duration_seconds: int | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "weight": self.weight,
            "reps": self.reps,
            "duration_seconds": self.duration_seconds,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SetRecord":
        """Create from dictionary."""
        return cls(
            weight=data.get("weight"),
            reps=data.get("reps"),
            duration_seconds=data.get("duration_seconds"),
        )


@dataclass(frozen=True)
class PerformedVariation:
    """A variation actually performed, with its sets."""

    exercise_id: str
    variation_id: str
    sets: tuple[SetRecord, ...] = ()

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "exercise_id": self.exercise_id,
            "variation_id": self.variation_id,
            "sets": [s.to_dict() for s in self.sets],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PerformedVariation":
        """Create from dictionary."""
        return cls(
            exercise_id=data["exercise_id"],
            variation_id=data["variation_id"],
            sets=tuple(SetRecord.from_dict(s) for s in data.get("sets", [])),
        )


@dataclass(frozen=True)
class CompletedSession:
    """Immutable record of a session as it was performed."""

    date: date
    discipline: Discipline
    framework: str = ""
    phases: dict = field(default_factory=dict, hash=False)  # Phase -> tuple[PerformedVariation]
    duration_seconds: int = 0
    metrics_summary: dict | None = field(default=None, hash=False)
    session_id: str | None = None
    completed_at: datetime | None = None
    id: int | None = None

    @classmethod
    def from_session(
        cls,
        session: Session,
        completed_on: date,
        performed: dict[Phase, list[PerformedVariation]] | None = None,
        duration_seconds: int = 0,
    ) -> "CompletedSession":
        """Record a planned session as completed.

        When no explicit performance is given, every planned variation is
        taken as performed without set details.
        """
        if performed is None:
            performed = {
                phase: [
                    PerformedVariation(pv.exercise_id, pv.variation_id)
                    for pv in session.phases.get(phase, [])
                ]
                for phase in Phase
            }
        return cls(
            date=completed_on,
            discipline=session.discipline,
            framework=session.framework,
            phases={phase: tuple(performed.get(phase, [])) for phase in Phase},
            duration_seconds=duration_seconds,
            session_id=session.id,
            completed_at=datetime.now(),
        )

    def performed_variations(self) -> list[PerformedVariation]:
        """All performed variations in phase order."""
        return [pv for phase in Phase for pv in self.phases.get(phase, ())]

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "date": self.date.isoformat(),
            "discipline": self.discipline.value,
            "framework": self.framework,
            "phases": {
                phase.value: [pv.to_dict() for pv in self.phases.get(phase, ())]
                for phase in Phase
            },
            "duration_seconds": self.duration_seconds,
            "metrics_summary": self.metrics_summary,
            "session_id": self.session_id,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict, id: int | None = None) -> "CompletedSession":
        """Create from dictionary."""
        phases_data = data.get("phases", {})
        completed_at = None
        if data.get("completed_at"):
            completed_at = datetime.fromisoformat(data["completed_at"])

        return cls(
            id=id,
            date=date.fromisoformat(data["date"][:10]),
            discipline=Discipline.parse(data["discipline"]),
            framework=data.get("framework", ""),
            phases={
                phase: tuple(
                    PerformedVariation.from_dict(pv) for pv in phases_data.get(phase.value, [])
                )
                for phase in Phase
            },
            duration_seconds=data.get("duration_seconds", 0),
            metrics_summary=data.get("metrics_summary"),
            session_id=data.get("session_id"),
            completed_at=completed_at,
        )
