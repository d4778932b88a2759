"""Exercise and variation definitions."""

from dataclasses import dataclass, field
from enum import Enum


class Discipline(str, Enum):
    """Training modalities an exercise belongs to."""

    PILATES = "pilates"
    ANIMAL_FLOW = "animal_flow"
    WEIGHTS = "weights"
    CROSSFIT = "crossfit"
    CALISTHENICS = "calisthenics"
    YOGA = "yoga"

    @property
    def display_name(self) -> str:
        """Human-readable label."""
        return DISCIPLINE_LABELS[self]

    @classmethod
    def parse(cls, label: "str | Discipline") -> "Discipline":
        """Resolve a discipline from a case-insensitive label.

        Accepts enum values ("animal_flow"), display names ("Animal Flow")
        and the document store's spellings ("animal-flow", "animalflow").

        Raises:
            ValueError: If the label is not a known discipline
        """
        if isinstance(label, Discipline):
            return label
        key = str(label).strip().lower()
        key = key.replace("-", "_").replace(" ", "_")
        if key in DISCIPLINE_ALIASES:
            return DISCIPLINE_ALIASES[key]
        return cls(key)


DISCIPLINE_LABELS = {
    Discipline.PILATES: "Pilates",
    Discipline.ANIMAL_FLOW: "Animal Flow",
    Discipline.WEIGHTS: "Weights",
    Discipline.CROSSFIT: "Crossfit",
    Discipline.CALISTHENICS: "Calisthenics",
    Discipline.YOGA: "Yoga",
}

DISCIPLINE_ALIASES = {
    "animalflow": Discipline.ANIMAL_FLOW,
}


class ProgressionType(str, Enum):
    """How a variation makes an exercise harder."""

    STABILITY = "stability"
    LEVERAGE = "leverage"
    DURATION = "duration"
    FORM = "form"
    RANGE_OF_MOTION = "range_of_motion"
    LOAD = "load"


class Bilaterality(str, Enum):
    """Whether both sides work together or one at a time."""

    BILATERAL = "bilateral"
    UNILATERAL = "unilateral"


def _fold_muscles(muscles) -> frozenset[str]:
    return frozenset(m.strip().lower() for m in muscles if m and m.strip())


@dataclass(frozen=True)
class TargetMuscles:
    """Primary and secondary muscles, case-folded."""

    primary: frozenset[str] = frozenset()
    secondary: frozenset[str] = frozenset()

    def __post_init__(self):
        object.__setattr__(self, "primary", _fold_muscles(self.primary))
        object.__setattr__(self, "secondary", _fold_muscles(self.secondary))

    @property
    def all(self) -> frozenset[str]:
        """Union of primary and secondary muscles."""
        return self.primary | self.secondary

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "primary": sorted(self.primary),
            "secondary": sorted(self.secondary),
        }

    @classmethod
    def from_dict(cls, data: dict | None) -> "TargetMuscles":
        """Create from dictionary."""
        data = data or {}
        return cls(
            primary=frozenset(data.get("primary", [])),
            secondary=frozenset(data.get("secondary", [])),
        )


@dataclass(frozen=True)
class Variation:
    """A difficulty-graded implementation of an exercise."""

    id: str
    name: str
    exercise_id: str
    difficulty_score: float
    bilaterality: Bilaterality = Bilaterality.BILATERAL
    progression_type: ProgressionType = ProgressionType.STABILITY
    target_muscles: TargetMuscles = field(default_factory=TargetMuscles)
    technique_cues: tuple[str, ...] = ()
    equipment: tuple[str, ...] = ()  # Required equipment, empty for none
    metrics: dict | None = field(default=None, hash=False)  # mobility / rotation / flexibility

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "name": self.name,
            "exercise_id": self.exercise_id,
            "difficulty_score": self.difficulty_score,
            "bilaterality": self.bilaterality.value,
            "progression_type": self.progression_type.value,
            "target_muscles": self.target_muscles.to_dict(),
            "technique_cues": list(self.technique_cues),
            "equipment": list(self.equipment),
            "metrics": self.metrics,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Variation":
        """Create from dictionary."""
        return cls(
            id=data["id"],
            name=data["name"],
            exercise_id=data["exercise_id"],
            difficulty_score=float(data.get("difficulty_score", 0)),
            bilaterality=Bilaterality(data.get("bilaterality", "bilateral")),
            progression_type=ProgressionType(data.get("progression_type", "stability")),
            target_muscles=TargetMuscles.from_dict(data.get("target_muscles")),
            technique_cues=tuple(data.get("technique_cues", [])),
            equipment=tuple(data.get("equipment", [])),
            metrics=data.get("metrics"),
        )


@dataclass(frozen=True)
class Exercise:
    """A catalog exercise with its variations ordered by difficulty."""

    id: str
    name: str
    discipline: Discipline
    variations: tuple[Variation, ...]
    description: str = ""
    frameworks: tuple[str, ...] = ()

    def __post_init__(self):
        # Stable sort keeps catalog order among equal difficulties
        ordered = tuple(sorted(self.variations, key=lambda v: v.difficulty_score))
        object.__setattr__(self, "variations", ordered)

    def variation(self, variation_id: str) -> Variation | None:
        """Look up one of this exercise's variations by ID."""
        for variation in self.variations:
            if variation.id == variation_id:
                return variation
        return None

    @property
    def lowest_variation(self) -> Variation | None:
        """The easiest variation, or None for an empty exercise."""
        return self.variations[0] if self.variations else None

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "name": self.name,
            "discipline": self.discipline.value,
            "variations": [v.to_dict() for v in self.variations],
            "description": self.description,
            "frameworks": list(self.frameworks),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Exercise":
        """Create from dictionary."""
        return cls(
            id=data["id"],
            name=data["name"],
            discipline=Discipline.parse(data["discipline"]),
            variations=tuple(Variation.from_dict(v) for v in data.get("variations", [])),
            description=data.get("description", ""),
            frameworks=tuple(data.get("frameworks", [])),
        )
