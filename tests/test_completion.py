"""Tests for the session completion workflow."""

import asyncio
import random
from dataclasses import replace
from datetime import date

import pytest

from regain.db import CompletedSessionRepository, TrainingSystemRepository, UserProfileRepository, init_db
from regain.exceptions import ProfileNotFoundError
from regain.models.exercises import Discipline
from regain.models.history import CompletedSession, PerformedVariation
from regain.models.training import Phase, PlannedVariation, Session
from regain.models.user_profile import MilestoneMap, StreakState
from regain.services.completion import CompletionService
from regain.services.session_builder import SessionBuilder

MON = date(2024, 1, 1)
WED = date(2024, 1, 3)
FRI = date(2024, 1, 5)

PHASE_COUNTS = {Phase.WARMUP: 1, Phase.WORKOUT: 2, Phase.COOLDOWN: 1}


async def _setup(db_path, profile, catalog):
    """Store a profile and a planned week, returning both with IDs."""
    await init_db(db_path)
    profile_id = await UserProfileRepository(db_path).create(profile)
    profile = replace(profile, id=profile_id)

    builder = SessionBuilder(catalog, profile, PHASE_COUNTS, random.Random(2))
    system = builder.build_training_system(MON)
    system.id = await TrainingSystemRepository(db_path).create(system)
    return profile, system


def _push_up_session(push_up, *phases):
    session = Session(day_index=0, date=MON, discipline=Discipline.PILATES, framework="Push")
    for phase in phases:
        session.phases[phase].append(PlannedVariation.from_variation(push_up, push_up.variations[0]))
    return session


class TestCompleteSession:
    """Tests for CompletionService.complete_session."""

    def test_first_completion(self, temp_db_path, sample_user_profile, catalog):
        """Test history, milestones, streak and the session flag are stored."""

        async def run():
            profile, system = await _setup(temp_db_path, sample_user_profile, catalog)
            session = system.sessions[0]
            result = await CompletionService(temp_db_path).complete_session(
                profile.id, session, completed_on=MON, exercises=catalog
            )
            stored = await UserProfileRepository(temp_db_path).get(profile.id)
            stored_system = await TrainingSystemRepository(temp_db_path).get(system.id)
            dates = await CompletedSessionRepository(temp_db_path).list_dates(profile.id)
            return session, result, stored, stored_system, dates

        session, result, stored, stored_system, dates = asyncio.run(run())

        assert result.completed_session.id is not None
        assert result.completed_session.session_id == session.id
        assert result.completed_session.metrics_summary is not None
        assert result.streak.current_streak == 1
        assert result.streak.longest_streak == 1
        assert result.streak.total_sessions == 1
        assert stored.streak == result.streak
        for pv in session.all_variations():
            assert stored.milestones.count(pv.exercise_id, pv.variation_id) >= 1
        assert stored_system.get_session(session.id).completed is True
        assert dates == [MON]

    def test_streak_over_training_week(self, temp_db_path, sample_user_profile, catalog):
        """Test Monday, Wednesday and Friday completions build a streak of three."""

        async def run():
            profile, system = await _setup(temp_db_path, sample_user_profile, catalog)
            service = CompletionService(temp_db_path)
            results = []
            for session, day in zip(system.sessions, [MON, WED, FRI]):
                results.append(await service.complete_session(profile.id, session, completed_on=day))
            return results

        results = asyncio.run(run())
        assert [r.streak.current_streak for r in results] == [1, 2, 3]
        assert results[-1].streak.longest_streak == 3

    def test_same_day_repeat(self, temp_db_path, sample_user_profile, catalog):
        """Test a second completion on the same day keeps the streak."""

        async def run():
            profile, system = await _setup(temp_db_path, sample_user_profile, catalog)
            service = CompletionService(temp_db_path)
            await service.complete_session(profile.id, system.sessions[0], completed_on=MON)
            first = await service.complete_session(profile.id, system.sessions[1], completed_on=WED)
            second = await service.complete_session(profile.id, system.sessions[2], completed_on=WED)
            return first, second

        first, second = asyncio.run(run())
        assert first.streak.current_streak == second.streak.current_streak == 2
        assert second.streak.total_sessions == 3

    def test_milestone_advance_reported_once(self, temp_db_path, sample_user_profile, catalog, push_up):
        """Test a variation performed twice in a session counts once."""
        profile = replace(
            sample_user_profile, milestones=MilestoneMap({"push-up": {"pu-knees": 2}})
        )

        async def run():
            stored_profile, _ = await _setup(temp_db_path, profile, catalog)
            session = _push_up_session(push_up, Phase.WARMUP, Phase.WORKOUT)
            result = await CompletionService(temp_db_path).complete_session(
                stored_profile.id, session, completed_on=MON
            )
            stored = await UserProfileRepository(temp_db_path).get(stored_profile.id)
            return result, stored

        result, stored = asyncio.run(run())
        assert result.advanced == ["push-up"]
        assert stored.milestones.count("push-up", "pu-knees") == 3

    def test_performed_overrides_plan(self, temp_db_path, sample_user_profile, catalog, push_up):
        """Test explicitly performed variations drive the milestones."""

        async def run():
            profile, _ = await _setup(temp_db_path, sample_user_profile, catalog)
            session = _push_up_session(push_up, Phase.WORKOUT)
            performed = {Phase.WORKOUT: [PerformedVariation("push-up", "pu-full")]}
            await CompletionService(temp_db_path).complete_session(
                profile.id, session, performed=performed, completed_on=MON
            )
            return await UserProfileRepository(temp_db_path).get(profile.id)

        stored = asyncio.run(run())
        assert stored.milestones.count("push-up", "pu-full") == 1
        assert not stored.milestones.has_record("push-up", "pu-knees")

    def test_missing_profile(self, temp_db_path, push_up):
        """Test completing for an unknown profile raises and records nothing."""

        async def run():
            await init_db(temp_db_path)
            with pytest.raises(ProfileNotFoundError):
                await CompletionService(temp_db_path).complete_session(999, _push_up_session(push_up))
            return await CompletedSessionRepository(temp_db_path).list_dates(999)

        assert asyncio.run(run()) == []


class TestCompletionTransaction:
    """Tests for completions written concurrently or failing part way."""

    def test_simultaneous_completions_both_count(self, temp_db_path, sample_user_profile, catalog):
        """Test two completions awaited together do not overwrite each other."""

        async def run():
            profile, system = await _setup(temp_db_path, sample_user_profile, catalog)
            service = CompletionService(temp_db_path)
            results = await asyncio.gather(
                service.complete_session(profile.id, system.sessions[0], completed_on=MON),
                service.complete_session(profile.id, system.sessions[1], completed_on=WED),
            )
            stored = await UserProfileRepository(temp_db_path).get(profile.id)
            stored_system = await TrainingSystemRepository(temp_db_path).get(system.id)
            dates = await CompletedSessionRepository(temp_db_path).list_dates(profile.id)
            return system, results, stored, stored_system, dates

        system, results, stored, stored_system, dates = asyncio.run(run())

        assert sorted(r.streak.total_sessions for r in results) == [1, 2]
        last = max(results, key=lambda r: r.streak.total_sessions)
        assert stored.streak == last.streak
        assert stored.streak.total_sessions == 2
        if last.completed_session.date == WED:
            assert stored.streak.current_streak == 2
            assert stored.streak.longest_streak == 2
        assert [s.completed for s in stored_system.sessions] == [True, True, False]
        assert dates == [MON, WED]
        for session in system.sessions[:2]:
            for pv in session.all_variations():
                assert stored.milestones.has_record(pv.exercise_id, pv.variation_id)

    def test_failed_profile_write_rolls_back(self, temp_db_path, sample_user_profile, catalog):
        """Test a profile update that matches no row leaves no history behind."""

        async def run():
            profile, system = await _setup(temp_db_path, sample_user_profile, catalog)
            session = system.sessions[0]
            completed = CompletedSession.from_session(session, MON)

            def apply(stored, active, dates):
                active.get_session(session.id).completed = True
                return replace(stored, id=999), completed, active

            history = CompletedSessionRepository(temp_db_path)
            with pytest.raises(ProfileNotFoundError):
                await history.record_completion(profile.id, apply)

            return (
                await history.list_dates(profile.id),
                await UserProfileRepository(temp_db_path).get(profile.id),
                await TrainingSystemRepository(temp_db_path).get(system.id),
            )

        dates, stored, stored_system = asyncio.run(run())

        assert dates == []
        assert stored.streak.total_sessions == 0
        assert stored.milestones.to_dict() == {}
        assert not any(s.completed for s in stored_system.sessions)

    def test_failed_computation_rolls_back(self, temp_db_path, sample_user_profile, catalog):
        """Test an error raised while computing the completion writes nothing."""

        async def run():
            profile, _ = await _setup(temp_db_path, sample_user_profile, catalog)

            def apply(stored, active, dates):
                raise ValueError("bad completion")

            history = CompletedSessionRepository(temp_db_path)
            with pytest.raises(ValueError):
                await history.record_completion(profile.id, apply)
            return await history.list_dates(profile.id)

        assert asyncio.run(run()) == []


class TestBackfillAndRating:
    """Tests for longest-streak backfill and the system rating."""

    def test_backfill_rebuilds_longest(self, temp_db_path, sample_user_profile, catalog):
        """Test a lost best streak is rebuilt from history."""

        async def run():
            profile, system = await _setup(temp_db_path, sample_user_profile, catalog)
            service = CompletionService(temp_db_path)
            for session, day in zip(system.sessions, [MON, WED, FRI]):
                await service.complete_session(profile.id, session, completed_on=day)

            repo = UserProfileRepository(temp_db_path)
            stored = await repo.get(profile.id)
            await repo.update(replace(stored, streak=StreakState(current_streak=3)))
            return await service.backfill_longest_streak(profile.id)

        streak = asyncio.run(run())
        assert streak.longest_streak == 3
        assert streak.current_streak == 3

    def test_backfill_never_lowers(self, temp_db_path, sample_user_profile, catalog):
        """Test a stored best streak above history is kept."""
        profile = replace(sample_user_profile, streak=StreakState(longest_streak=9))

        async def run():
            stored, _ = await _setup(temp_db_path, profile, catalog)
            return await CompletionService(temp_db_path).backfill_longest_streak(stored.id)

        assert asyncio.run(run()).longest_streak == 9

    def test_rating_from_history(self, temp_db_path, sample_user_profile, catalog, push_up):
        """Test the rating averages stored session summaries."""

        async def run():
            profile, _ = await _setup(temp_db_path, sample_user_profile, catalog)
            service = CompletionService(temp_db_path)
            performed = {
                Phase.WORKOUT: [
                    PerformedVariation("push-up", "pu-knees"),
                    PerformedVariation("push-up", "pu-full"),
                ]
            }
            await service.complete_session(
                profile.id, _push_up_session(push_up), performed=performed,
                completed_on=MON, exercises=catalog,
            )
            return await service.rating(profile.id)

        assert asyncio.run(run()) == {"mobility": 3, "rotation": 1, "flexibility": 4}
