"""Training plan routes."""

import logging
import random
from datetime import date

from fastapi import APIRouter, HTTPException, Request

from ...config import get_settings
from ...db import TrainingSystemRepository
from ...exceptions import CatalogUnavailableError, SessionNotFoundError
from ...models.training import Phase, PlannedVariation, Session, TrainingSystem
from ...services.alternatives import find_alternative_variations
from ...services.session_builder import SessionBuilder, swap_variation
from ..deps import get_app_db_path, require_catalog, require_profile, require_system
from ..models import GeneratePlanRequest, MoveRequest, SwapRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/plans", tags=["plans"])


def _system_response(system: TrainingSystem) -> dict:
    return {"id": system.id, "profile_id": system.profile_id, **system.to_dict()}


def _require_session(system: TrainingSystem, session_id: str) -> Session:
    session = system.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
    return session


def _require_planned(session: Session, phase: Phase, exercise_id: str) -> PlannedVariation:
    for planned in session.phases.get(phase, []):
        if planned.exercise_id == exercise_id:
            return planned
    raise HTTPException(
        status_code=404,
        detail=f"Exercise {exercise_id} is not in the {phase.value} phase",
    )


@router.get("/{profile_id}")
async def get_plan(request: Request, profile_id: int):
    """Active training system of a profile."""
    db_path = get_app_db_path(request)
    await require_profile(db_path, profile_id)
    system = await require_system(db_path, profile_id)
    return _system_response(system)


@router.post("/{profile_id}", status_code=201)
async def generate_plan(request: Request, profile_id: int, body: GeneratePlanRequest):
    """Generate a new training system for a profile."""
    db_path = get_app_db_path(request)
    profile = await require_profile(db_path, profile_id)
    exercises = await require_catalog(db_path)

    repo = TrainingSystemRepository(db_path)
    previous = await repo.get_active(profile_id)

    builder = SessionBuilder(
        exercises,
        profile,
        phase_counts=get_settings().phase_counts,
        rng=random.Random(body.seed) if body.seed is not None else None,
    )
    try:
        system = builder.build_training_system(
            start_date=body.start_date or date.today(),
            days_per_week=body.days_per_week,
            framework=body.framework.value,
            disciplines=body.disciplines,
            training_days=body.training_days,
            previous_sessions=previous.sessions if previous else None,
        )
    except CatalogUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e

    system.profile_id = profile_id
    system.id = await repo.create(system)
    logger.info("Generated training system %s for profile %s", system.id, profile_id)
    return _system_response(system)


@router.get("/{profile_id}/calendar/{on_date}")
async def session_for_date(request: Request, profile_id: int, on_date: date):
    """Session shown on a calendar date, or null."""
    system = await require_system(get_app_db_path(request), profile_id)
    session = system.session_for_date(on_date)
    return {"date": on_date.isoformat(), "session": session.to_dict() if session else None}


@router.get("/{profile_id}/sessions/{session_id}/alternatives")
async def alternatives(
    request: Request,
    profile_id: int,
    session_id: str,
    exercise_id: str,
    phase: Phase = Phase.WORKOUT,
):
    """Up to three substitutes for a planned exercise."""
    db_path = get_app_db_path(request)
    system = await require_system(db_path, profile_id)
    session = _require_session(system, session_id)
    current = _require_planned(session, phase, exercise_id)

    exercises = await require_catalog(db_path)
    return {
        "alternatives": [
            alt.to_dict() for alt in find_alternative_variations(current, exercises, phase)
        ]
    }


@router.post("/{profile_id}/sessions/{session_id}/swap")
async def swap(request: Request, profile_id: int, session_id: str, body: SwapRequest):
    """Replace a planned exercise with a catalog variation."""
    db_path = get_app_db_path(request)
    system = await require_system(db_path, profile_id)
    session = _require_session(system, session_id)
    _require_planned(session, body.phase, body.exercise_id)

    exercises = await require_catalog(db_path)
    for exercise in exercises:
        variation = exercise.variation(body.replacement_variation_id)
        if variation is not None:
            break
    else:
        raise HTTPException(
            status_code=404,
            detail=f"Variation {body.replacement_variation_id} not found",
        )

    swap_variation(
        session, body.phase, body.exercise_id, PlannedVariation.from_variation(exercise, variation)
    )
    await TrainingSystemRepository(db_path).update(system)
    return session.to_dict()


@router.post("/{profile_id}/sessions/{session_id}/move")
async def move(request: Request, profile_id: int, session_id: str, body: MoveRequest):
    """Reschedule a session to another date."""
    db_path = get_app_db_path(request)
    system = await require_system(db_path, profile_id)
    try:
        session = system.reschedule_session(session_id, body.new_date)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    await TrainingSystemRepository(db_path).update(system)
    return session.to_dict()
