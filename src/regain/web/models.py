"""Pydantic request bodies for the regain API."""

from datetime import date

from pydantic import BaseModel, Field

from ..models.exercises import Discipline
from ..models.training import Phase, TrainingFramework


class ProfileCreateRequest(BaseModel):
    """Body for POST /profiles."""
    name: str = Field(min_length=1)
    preferred_disciplines: list[Discipline] = Field(default_factory=list)
    discomforts: list[str] = Field(default_factory=list)
    equipment: list[str] = Field(default_factory=list)
    days_per_week: int = Field(default=3, ge=1, le=7)


class GeneratePlanRequest(BaseModel):
    """Body for POST /plans/{profile_id}."""
    start_date: date | None = None
    framework: TrainingFramework = TrainingFramework.PUSH_PULL
    days_per_week: int | None = Field(default=None, ge=1, le=7)
    training_days: list[int] | None = None
    disciplines: list[Discipline] | None = None
    seed: int | None = None


class SwapRequest(BaseModel):
    """Body for POST /plans/{profile_id}/sessions/{session_id}/swap."""
    phase: Phase
    exercise_id: str
    replacement_variation_id: str


class MoveRequest(BaseModel):
    """Body for POST /plans/{profile_id}/sessions/{session_id}/move."""
    new_date: date


class SetBody(BaseModel):
    """One performed set; every field is optional."""
    weight: float | None = None
    reps: int | None = None
    duration_seconds: int | None = None


class PerformedVariationBody(BaseModel):
    """A variation actually performed, with its sets."""
    exercise_id: str
    variation_id: str
    sets: list[SetBody] = Field(default_factory=list)


class CompleteRequest(BaseModel):
    """Body for POST /progress/{profile_id}/complete."""
    session_id: str
    completed_on: date | None = None
    duration_seconds: int = Field(default=0, ge=0)
    performed: dict[Phase, list[PerformedVariationBody]] | None = None
