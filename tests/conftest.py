"""Pytest configuration and fixtures."""

import pytest
import tempfile
from pathlib import Path

from regain.models.exercises import (
    Bilaterality,
    Discipline,
    Exercise,
    ProgressionType,
    TargetMuscles,
    Variation,
)
from regain.models.user_profile import UserProfile


def _variation(
    exercise_id,
    variation_id,
    difficulty,
    primary,
    secondary=(),
    bilaterality=Bilaterality.BILATERAL,
    progression=ProgressionType.STABILITY,
    equipment=(),
    metrics=None,
):
    return Variation(
        id=variation_id,
        name=variation_id.replace("-", " ").title(),
        exercise_id=exercise_id,
        difficulty_score=difficulty,
        bilaterality=bilaterality,
        progression_type=progression,
        target_muscles=TargetMuscles(primary=frozenset(primary), secondary=frozenset(secondary)),
        equipment=tuple(equipment),
        metrics=metrics,
    )


@pytest.fixture
def temp_db_path():
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest.fixture
def push_up():
    """Pilates push-up with three graded variations."""
    return Exercise(
        id="push-up",
        name="Push Up",
        discipline=Discipline.PILATES,
        variations=(
            _variation("push-up", "pu-knees", 2, ["chest", "triceps"], ["shoulders"],
                       metrics={"mobility": 2, "rotation": 0, "flexibility": 3}),
            _variation("push-up", "pu-full", 4, ["chest", "triceps"], ["shoulders"],
                       progression=ProgressionType.FORM,
                       metrics={"mobility": 4, "rotation": 1, "flexibility": 4}),
            _variation("push-up", "pu-single-leg", 7, ["chest", "triceps"], ["shoulders"],
                       bilaterality=Bilaterality.UNILATERAL,
                       progression=ProgressionType.LEVERAGE),
        ),
    )


@pytest.fixture
def catalog(push_up):
    """Small catalog covering every phase and several disciplines."""
    return [
        push_up,
        Exercise(
            id="row",
            name="Bodyweight Row",
            discipline=Discipline.CALISTHENICS,
            variations=(
                _variation("row", "row-incline", 3, ["back", "biceps"], ["rear delts"],
                           equipment=["rings"]),
                _variation("row", "row-horizontal", 6, ["back", "biceps"], ["rear delts"],
                           progression=ProgressionType.LEVERAGE, equipment=["rings"]),
            ),
        ),
        Exercise(
            id="squat",
            name="Squat",
            discipline=Discipline.PILATES,
            variations=(
                _variation("squat", "squat-box", 2, ["quads", "glutes"], ["hamstrings"]),
                _variation("squat", "squat-split", 5, ["quads", "glutes"], ["hamstrings"],
                           bilaterality=Bilaterality.UNILATERAL,
                           progression=ProgressionType.DURATION),
            ),
        ),
        Exercise(
            id="roll-up",
            name="Roll Up",
            discipline=Discipline.PILATES,
            variations=(
                _variation("roll-up", "roll-up-assisted", 1, ["abs", "core"], ["lower back"],
                           progression=ProgressionType.RANGE_OF_MOTION),
                _variation("roll-up", "roll-up-classic", 4, ["abs", "core"], ["lower back"],
                           progression=ProgressionType.RANGE_OF_MOTION),
            ),
        ),
        Exercise(
            id="beast",
            name="Beast",
            discipline=Discipline.ANIMAL_FLOW,
            variations=(
                _variation("beast", "beast-hold", 2, ["shoulders", "core"], ["quads"],
                           progression=ProgressionType.DURATION),
                _variation("beast", "beast-reach", 5, ["shoulders", "core"], ["quads"],
                           bilaterality=Bilaterality.UNILATERAL),
            ),
        ),
        Exercise(
            id="press",
            name="Dumbbell Press",
            discipline=Discipline.WEIGHTS,
            variations=(
                _variation("press", "press-floor", 3, ["chest", "shoulders", "triceps"],
                           progression=ProgressionType.LOAD, equipment=["dumbbells"]),
                _variation("press", "press-bench", 6, ["chest", "shoulders", "triceps"],
                           progression=ProgressionType.LOAD, equipment=["dumbbells", "bench"]),
            ),
        ),
    ]


@pytest.fixture
def sample_user_profile():
    """Create a sample user profile for testing."""
    return UserProfile(
        name="Test User",
        preferred_disciplines=[Discipline.PILATES, Discipline.ANIMAL_FLOW],
        discomforts=[],
        equipment=[],
        days_per_week=3,
    )


@pytest.fixture
def catalog_records():
    """Raw store records in the shapes the document store produces."""
    exercises = [
        {
            "id": "hundred",
            "name": "The Hundred",
            "targetMuscleGroups": ["Abs", "Core", "Hip Flexors", "Front Delts"],
            "frameworks": ["Core"],
        },
        {
            "id": "crab",
            "name": "Crab Reach",
            "description": "Reach from crab.",
            "targetMuscleGroups": ["Glutes", "Shoulders"],
        },
        {"id": "lonely", "name": "No Variations"},
    ]
    variations = [
        {
            "id": "hundred-hard",
            "exerciseId": "hundred",
            "name": "Hundred, Low Legs",
            "difficulty": 7,
            "disciplines": ["pilates"],
            "metadata": {"bilaterality": True},
        },
        {
            "id": "hundred-easy",
            "exerciseId": "hundred",
            "name": "Hundred, Tabletop",
            "difficulty": 2,
            "disciplines": ["pilates"],
            "instructions": ["Knees over hips"],
        },
        {
            "variationId": "crab-reach",
            "exerciseId": "crab",
            "name": "Crab Reach",
            "difficulty_score": 5,
            "disciplines": ["animal-flow"],
            "metadata": {"bilaterality": False},
            "progression_type": "range_of_motion",
        },
        {"id": "orphan", "exerciseId": "missing", "name": "Orphan", "difficulty": 1},
        {"id": "no-parent", "name": "No Parent", "difficulty": 1},
    ]
    return exercises, variations
