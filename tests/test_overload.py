"""Tests for progressive overload tracking."""

from regain.models.user_profile import OVERLOAD_THRESHOLD, MilestoneMap
from regain.services.overload import OverloadTracker


class TestCurrentVariation:
    """Tests for get_current_variation."""

    def test_new_user_starts_at_lowest(self, push_up):
        """Test no record means the easiest variation."""
        tracker = OverloadTracker()
        assert tracker.get_current_variation(push_up).id == "pu-knees"

    def test_highest_count_below_threshold(self, push_up):
        """Test the variation with the most progress is current."""
        tracker = OverloadTracker(MilestoneMap({"push-up": {"pu-knees": 1, "pu-full": 2}}))
        assert tracker.get_current_variation(push_up).id == "pu-full"

    def test_ties_go_to_catalog_order(self, push_up):
        """Test equal counts resolve to the easier variation."""
        tracker = OverloadTracker(MilestoneMap({"push-up": {"pu-full": 1, "pu-knees": 1}}))
        assert tracker.get_current_variation(push_up).id == "pu-knees"

    def test_all_mastered_keeps_hardest_recorded(self, push_up):
        """Test mastered variations keep the hardest recorded one current."""
        tracker = OverloadTracker(MilestoneMap({"push-up": {"pu-knees": 3, "pu-full": 3}}))
        assert tracker.get_current_variation(push_up).id == "pu-full"

    def test_unknown_recorded_ids_ignored(self, push_up):
        """Test records for variations no longer in the catalog are ignored."""
        tracker = OverloadTracker(MilestoneMap({"push-up": {"retired": 2}}))
        assert tracker.get_current_variation(push_up).id == "pu-knees"


class TestUpgrade:
    """Tests for milestone checks and upgrades."""

    def test_milestone_achieved_only_at_threshold(self):
        """Test achievement is exactly a count of three."""
        milestones = MilestoneMap()
        tracker = OverloadTracker(milestones)
        for _ in range(OVERLOAD_THRESHOLD - 1):
            tracker.update_milestone("push-up", "pu-knees")
            assert not tracker.is_milestone_achieved("push-up", "pu-knees")
        tracker.update_milestone("push-up", "pu-knees")
        assert tracker.is_milestone_achieved("push-up", "pu-knees")

    def test_update_clamped(self):
        """Test counts never exceed the threshold."""
        tracker = OverloadTracker()
        counts = [tracker.update_milestone("push-up", "pu-knees") for _ in range(4)]
        assert counts == [1, 2, 3, 3]

    def test_next_variation(self, push_up):
        """Test the next harder variation is returned."""
        tracker = OverloadTracker()
        assert tracker.get_next_variation(push_up, "pu-knees").id == "pu-full"
        assert tracker.get_next_variation(push_up, "pu-single-leg") is None
        assert tracker.get_next_variation(push_up, "missing") is None

    def test_upgrade_after_three_sessions(self, push_up):
        """Test three completions move selection up one variation."""
        tracker = OverloadTracker()
        selected = []
        for _ in range(7):
            variation = tracker.select_variation_for_user(push_up)
            selected.append(variation.id)
            tracker.update_milestone("push-up", variation.id)

        assert selected == [
            "pu-knees", "pu-knees", "pu-knees",
            "pu-full", "pu-full", "pu-full",
            "pu-single-leg",
        ]

    def test_difficulty_never_decreases(self, push_up):
        """Test selected difficulty is monotonic as sessions accumulate."""
        tracker = OverloadTracker()
        previous = 0
        for _ in range(12):
            variation = tracker.select_variation_for_user(push_up)
            assert variation.difficulty_score >= previous
            previous = variation.difficulty_score
            tracker.update_milestone("push-up", variation.id)

    def test_hardest_variation_is_ceiling(self, push_up):
        """Test the hardest variation keeps being served once mastered."""
        tracker = OverloadTracker(
            MilestoneMap({"push-up": {"pu-knees": 3, "pu-full": 3, "pu-single-leg": 3}})
        )
        assert tracker.select_variation_for_user(push_up).id == "pu-single-leg"

    def test_reset(self, push_up):
        """Test reset returns the exercise to its easiest variation."""
        milestones = MilestoneMap({"push-up": {"pu-knees": 3, "pu-full": 2}})
        tracker = OverloadTracker(milestones)
        tracker.reset("push-up")

        assert milestones.for_exercise("push-up") == {}
        assert tracker.select_variation_for_user(push_up).id == "pu-knees"
