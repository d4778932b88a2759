"""Services for regain."""

from .alternatives import find_alternative_variations
from .completion import CompletionResult, CompletionService
from .filters import (
    FilterChain,
    filter_by_discipline,
    filter_by_discomfort,
    filter_by_equipment,
    filter_by_framework,
    filter_by_phase,
    selection_chain,
)
from .metrics import calculate_metrics_summary, system_rating
from .overload import OverloadTracker
from .session_builder import SessionBuilder, swap_variation
from .streak import StreakAccountant, resolve_training_days, update_streak_state
from .variety import ensure_variety, sample_exercises

__all__ = [
    "find_alternative_variations",
    "CompletionResult",
    "CompletionService",
    "FilterChain",
    "filter_by_discipline",
    "filter_by_discomfort",
    "filter_by_equipment",
    "filter_by_framework",
    "filter_by_phase",
    "selection_chain",
    "calculate_metrics_summary",
    "system_rating",
    "OverloadTracker",
    "SessionBuilder",
    "swap_variation",
    "StreakAccountant",
    "resolve_training_days",
    "update_streak_state",
    "ensure_variety",
    "sample_exercises",
]
