"""Tests for alternative-variation matching."""

import pytest

from regain.models.exercises import Bilaterality, Discipline, Exercise, ProgressionType, TargetMuscles, Variation
from regain.models.training import Phase, PlannedVariation
from regain.services.alternatives import MAX_ALTERNATIVES, MIN_SIMILARITY, find_alternative_variations


def _lunge():
    def variation(vid, difficulty, primary, bilaterality, progression):
        return Variation(
            id=vid,
            name=vid,
            exercise_id="lunge",
            difficulty_score=difficulty,
            bilaterality=bilaterality,
            progression_type=progression,
            target_muscles=TargetMuscles(primary=frozenset(primary)),
        )

    return Exercise(
        id="lunge",
        name="Lunge",
        discipline=Discipline.CALISTHENICS,
        variations=(
            variation("lunge-static", 2, ["quads", "glutes", "hamstrings"],
                      Bilaterality.BILATERAL, ProgressionType.STABILITY),
            variation("lunge-half", 3, ["quads", "glutes"],
                      Bilaterality.BILATERAL, ProgressionType.STABILITY),
            variation("lunge-walk", 4, ["quads", "glutes", "hamstrings"],
                      Bilaterality.UNILATERAL, ProgressionType.DURATION),
            variation("lunge-calf", 5, ["quads", "glutes", "calves", "adductors"],
                      Bilaterality.BILATERAL, ProgressionType.STABILITY),
            variation("lunge-jump", 8, ["quads", "glutes", "hamstrings"],
                      Bilaterality.UNILATERAL, ProgressionType.LOAD),
        ),
    )


def _squat_box(catalog):
    squat = next(ex for ex in catalog if ex.id == "squat")
    return PlannedVariation.from_variation(squat, squat.variations[0])


class TestFindAlternatives:
    """Tests for find_alternative_variations."""

    def test_same_muscles_other_exercise(self, catalog, push_up):
        """Test only other exercises with shared muscles are offered."""
        reference = PlannedVariation.from_variation(push_up, push_up.variations[1])
        result = find_alternative_variations(reference, catalog, Phase.WORKOUT)
        assert [pv.variation_id for pv in result] == ["press-floor", "press-bench"]

    def test_never_reference_exercise(self, catalog, push_up):
        """Test variations of the reference exercise are excluded."""
        reference = PlannedVariation.from_variation(push_up, push_up.variations[0])
        for phase in Phase:
            result = find_alternative_variations(reference, catalog, phase)
            assert all(pv.exercise_id != "push-up" for pv in result)

    def test_phase_band_applies(self, catalog, push_up):
        """Test candidates outside the phase's difficulty band are dropped."""
        reference = PlannedVariation.from_variation(push_up, push_up.variations[1])
        result = find_alternative_variations(reference, catalog, "warmup")
        assert [pv.variation_id for pv in result] == ["press-floor"]

    def test_ranked_by_biomechanical_difference(self, catalog):
        """Test substitutes that move differently rank first."""
        result = find_alternative_variations(_squat_box(catalog), catalog + [_lunge()], Phase.COOLDOWN)
        assert [pv.variation_id for pv in result] == ["lunge-walk", "lunge-static", "lunge-half"]

    def test_at_most_three(self, catalog):
        """Test the result is capped."""
        result = find_alternative_variations(_squat_box(catalog), catalog + [_lunge()], Phase.WORKOUT)
        assert len(result) <= MAX_ALTERNATIVES

    @pytest.mark.parametrize("limit", [1, 2])
    def test_custom_limit(self, catalog, limit):
        """Test a smaller limit keeps the best candidates."""
        result = find_alternative_variations(
            _squat_box(catalog), catalog + [_lunge()], Phase.COOLDOWN, limit=limit
        )
        assert [pv.variation_id for pv in result] == ["lunge-walk", "lunge-static"][:limit]

    def test_similarity_threshold_inclusive(self, catalog):
        """Test a candidate sharing exactly half its muscles qualifies."""
        lunge = _lunge()
        result = find_alternative_variations(
            _squat_box(catalog), [lunge], Phase.COOLDOWN, limit=10
        )
        ids = [pv.variation_id for pv in result]
        assert "lunge-calf" in ids
        assert MIN_SIMILARITY == 0.5

    def test_no_match(self, catalog):
        """Test an empty result when nothing shares enough muscles."""
        assert find_alternative_variations(_squat_box(catalog), catalog, Phase.COOLDOWN) == []

    def test_reference_without_muscles(self, catalog, push_up):
        """Test a reference with no target muscles has no alternatives."""
        reference = PlannedVariation.from_variation(push_up, push_up.variations[0])
        reference.target_muscles = TargetMuscles()
        assert find_alternative_variations(reference, catalog, Phase.WORKOUT) == []
