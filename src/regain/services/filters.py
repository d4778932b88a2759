"""Selection filters over the exercise catalog.

Each filter takes the exercise list and one criterion and returns the
matching subset. A criterion of ``None`` (or an empty list) passes the
list through unchanged. :class:`FilterChain` composes them and skips any
stage that would leave nothing to choose from.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable

from ..models.exercises import Discipline, Exercise, Variation
from ..models.training import PHASE_CRITERIA, Phase, framework_muscles, framework_parts

logger = logging.getLogger(__name__)


def filter_by_discipline(
    exercises: list[Exercise], discipline: Discipline | str | None
) -> list[Exercise]:
    """Keep exercises of one discipline (case-insensitive)."""
    if not discipline:
        return list(exercises)
    try:
        wanted = Discipline.parse(discipline)
    except ValueError:
        logger.warning("Unknown discipline %r matches no exercise", discipline)
        return []
    return [ex for ex in exercises if ex.discipline == wanted]


def filter_by_framework(exercises: list[Exercise], framework: str | None) -> list[Exercise]:
    """Keep exercises with a variation working a muscle of the framework.

    Composite labels such as "Push/Pull" match on any of their parts.
    """
    if not framework:
        return list(exercises)

    muscles: frozenset[str] = frozenset()
    for part in framework_parts(framework):
        muscles |= framework_muscles(part)

    return [
        ex
        for ex in exercises
        if any(v.target_muscles.all & muscles for v in ex.variations)
    ]


def variation_fits_phase(variation: Variation, phase: Phase | str) -> bool:
    """Check one variation against a phase's difficulty and progression bands."""
    return PHASE_CRITERIA[Phase(phase)].accepts(variation)


def filter_by_phase(exercises: list[Exercise], phase: Phase | str | None) -> list[Exercise]:
    """Keep exercises with at least one variation suitable for the phase."""
    if not phase:
        return list(exercises)
    return [
        ex for ex in exercises if any(variation_fits_phase(v, phase) for v in ex.variations)
    ]


def filter_by_equipment(
    exercises: list[Exercise], equipment: list[str] | None
) -> list[Exercise]:
    """Keep exercises with a variation the user has the equipment for.

    An empty equipment list means the user did not declare any, so
    nothing is filtered.
    """
    if not equipment:
        return list(exercises)

    available = {e.strip().lower() for e in equipment}
    return [
        ex
        for ex in exercises
        if any({e.lower() for e in v.equipment} <= available for v in ex.variations)
    ]


def filter_by_discomfort(
    exercises: list[Exercise], discomforts: list[str] | None
) -> list[Exercise]:
    """Drop exercises that load a discomfort area as a primary muscle.

    Secondary-muscle overlap does not exclude an exercise.
    """
    if not discomforts:
        return list(exercises)

    areas = {d.strip().lower() for d in discomforts if d.strip()}
    return [
        ex
        for ex in exercises
        if not any(v.target_muscles.primary & areas for v in ex.variations)
    ]


FilterFn = Callable[[list[Exercise]], list[Exercise]]


@dataclass
class FilterChain:
    """Ordered filter stages with an empty-result fallback.

    A stage whose output is empty is skipped and the pool from the
    previous stage is carried forward, so a non-empty input never comes
    out empty.
    """

    stages: list[tuple[str, FilterFn]] = field(default_factory=list)

    def add(self, name: str, fn: FilterFn) -> "FilterChain":
        """Append a stage and return the chain."""
        self.stages.append((name, fn))
        return self

    def apply(self, exercises: list[Exercise]) -> list[Exercise]:
        """Run every stage in order."""
        pool = list(exercises)
        for name, fn in self.stages:
            filtered = fn(pool)
            if not filtered and pool:
                logger.info("Filter stage %r emptied the pool of %d, skipped", name, len(pool))
                continue
            pool = filtered
        return pool


def selection_chain(
    discipline: Discipline | str | None = None,
    framework: str | None = None,
    phase: Phase | str | None = None,
    equipment: list[str] | None = None,
    discomforts: list[str] | None = None,
) -> FilterChain:
    """The standard discipline, framework, phase, equipment, discomfort chain."""
    return (
        FilterChain()
        .add("discipline", lambda pool: filter_by_discipline(pool, discipline))
        .add("framework", lambda pool: filter_by_framework(pool, framework))
        .add("phase", lambda pool: filter_by_phase(pool, phase))
        .add("equipment", lambda pool: filter_by_equipment(pool, equipment))
        .add("discomfort", lambda pool: filter_by_discomfort(pool, discomforts))
    )
