"""Progress tracking routes."""

import logging

from fastapi import APIRouter, HTTPException, Request

from ...data.catalog_loader import load_catalog
from ...exceptions import CatalogUnavailableError, ProfileNotFoundError
from ...models.history import PerformedVariation, SetRecord
from ...services.completion import CompletionService
from ..deps import get_app_db_path, require_profile, require_system
from ..models import CompleteRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/progress", tags=["progress"])


@router.post("/{profile_id}/complete")
async def complete_session(request: Request, profile_id: int, body: CompleteRequest):
    """Record a completed session and return the updated streak."""
    db_path = get_app_db_path(request)
    await require_profile(db_path, profile_id)
    system = await require_system(db_path, profile_id)
    session = system.get_session(body.session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Session {body.session_id} not found")

    performed = None
    if body.performed is not None:
        performed = {
            phase: [
                PerformedVariation(
                    exercise_id=pv.exercise_id,
                    variation_id=pv.variation_id,
                    sets=tuple(SetRecord(**s.model_dump()) for s in pv.sets),
                )
                for pv in items
            ]
            for phase, items in body.performed.items()
        }

    try:
        exercises = await load_catalog(db_path)
    except CatalogUnavailableError as e:
        logger.warning("Completing without a metrics summary: %s", e)
        exercises = None

    try:
        result = await CompletionService(db_path).complete_session(
            profile_id,
            session,
            performed=performed,
            completed_on=body.completed_on,
            exercises=exercises,
            duration_seconds=body.duration_seconds,
        )
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    return {
        "completed_session": {"id": result.completed_session.id, **result.completed_session.to_dict()},
        "streak": result.streak.to_dict(),
        "advanced": result.advanced,
    }


@router.get("/{profile_id}/streak")
async def get_streak(request: Request, profile_id: int):
    """Streak counters and system rating of a profile."""
    db_path = get_app_db_path(request)
    profile = await require_profile(db_path, profile_id)
    rating = await CompletionService(db_path).rating(profile_id)
    return {"streak": profile.streak.to_dict(), "rating": rating}


@router.post("/{profile_id}/backfill")
async def backfill(request: Request, profile_id: int):
    """Rebuild the best streak from full history."""
    db_path = get_app_db_path(request)
    await require_profile(db_path, profile_id)
    streak = await CompletionService(db_path).backfill_longest_streak(profile_id)
    return {"streak": streak.to_dict()}
