"""Data models for regain."""

from .exercises import Bilaterality, Discipline, Exercise, ProgressionType, TargetMuscles, Variation
from .history import CompletedSession, PerformedVariation, SetRecord
from .training import Phase, PlannedVariation, Session, TrainingFramework, TrainingSystem
from .user_profile import OVERLOAD_THRESHOLD, MilestoneMap, StreakState, UserProfile

__all__ = [
    "Bilaterality",
    "CompletedSession",
    "Discipline",
    "Exercise",
    "MilestoneMap",
    "OVERLOAD_THRESHOLD",
    "PerformedVariation",
    "Phase",
    "PlannedVariation",
    "ProgressionType",
    "Session",
    "SetRecord",
    "StreakState",
    "TargetMuscles",
    "TrainingFramework",
    "TrainingSystem",
    "UserProfile",
    "Variation",
]
