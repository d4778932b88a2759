"""Alternative-variation matching for manual exercise swaps."""

from ..models.exercises import Exercise, Variation
from ..models.training import PHASE_CRITERIA, Phase, PlannedVariation

# Minimum share of target muscles a substitute must have in common
MIN_SIMILARITY = 0.5

MAX_ALTERNATIVES = 3


def _muscle_similarity(reference: frozenset[str], candidate: frozenset[str]) -> float:
    if not reference or not candidate:
        return 0.0
    return len(reference & candidate) / max(len(reference), len(candidate))


def _biomechanical_bonus(reference: PlannedVariation, candidate: Variation) -> int:
    bonus = 0
    if candidate.bilaterality != reference.bilaterality:
        bonus += 2
    if candidate.progression_type != reference.progression_type:
        bonus += 1
    if candidate.difficulty_score != reference.difficulty_score:
        bonus += 1
    return bonus


def find_alternative_variations(
    reference: PlannedVariation,
    exercises: list[Exercise],
    phase: Phase | str,
    limit: int = MAX_ALTERNATIVES,
) -> list[PlannedVariation]:
    """Rank substitutes for a planned variation from other exercises.

    Candidates must share at least half of their target muscles with the
    reference and sit inside the phase's difficulty band. Among those,
    variations that move differently (other side pattern, progression
    type or difficulty) rank higher.

    Args:
        reference: The variation being replaced
        exercises: Full catalog
        phase: Phase the replacement will be placed in
        limit: Maximum number of results

    Returns:
        Up to ``limit`` variations, best first
    """
    reference_muscles = reference.target_muscles.all
    if not reference_muscles:
        return []

    criteria = PHASE_CRITERIA[Phase(phase)]
    scored: list[tuple[float, PlannedVariation]] = []

    for exercise in exercises:
        if exercise.id == reference.exercise_id:
            continue
        for variation in exercise.variations:
            similarity = _muscle_similarity(reference_muscles, variation.target_muscles.all)
            if similarity < MIN_SIMILARITY:
                continue
            if not criteria.difficulty_in_band(variation.difficulty_score):
                continue

            score = similarity * 10 + _biomechanical_bonus(reference, variation)
            scored.append((score, PlannedVariation.from_variation(exercise, variation)))

    # Stable sort keeps catalog order among equal scores
    scored.sort(key=lambda item: item[0], reverse=True)
    return [planned for _, planned in scored[:limit]]
