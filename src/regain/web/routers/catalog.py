"""Exercise catalog routes."""

from fastapi import APIRouter, Request

from ...models.exercises import Discipline
from ...models.training import Phase
from ...services.filters import filter_by_discipline, filter_by_framework, filter_by_phase
from ..deps import get_app_db_path, require_catalog

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("")
async def list_catalog(
    request: Request,
    discipline: Discipline | None = None,
    framework: str | None = None,
    phase: Phase | None = None,
):
    """List catalog exercises, optionally narrowed by filters."""
    exercises = await require_catalog(get_app_db_path(request))
    exercises = filter_by_discipline(exercises, discipline)
    exercises = filter_by_framework(exercises, framework)
    exercises = filter_by_phase(exercises, phase)
    return {"exercises": [ex.to_dict() for ex in exercises]}
