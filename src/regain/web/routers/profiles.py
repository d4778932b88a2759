"""User profile routes."""

from fastapi import APIRouter, Request

from ...db import UserProfileRepository
from ...models.user_profile import UserProfile
from ..deps import get_app_db_path, require_profile
from ..models import ProfileCreateRequest

router = APIRouter(prefix="/profiles", tags=["profiles"])


def _profile_response(profile: UserProfile) -> dict:
    return {"id": profile.id, **profile.to_dict()}


@router.post("", status_code=201)
async def create_profile(request: Request, body: ProfileCreateRequest):
    """Create a profile."""
    repo = UserProfileRepository(get_app_db_path(request))
    profile = UserProfile(
        name=body.name,
        preferred_disciplines=body.preferred_disciplines,
        discomforts=[d.strip().lower() for d in body.discomforts],
        equipment=[e.strip().lower() for e in body.equipment],
        days_per_week=body.days_per_week,
    )
    profile.id = await repo.create(profile)
    return _profile_response(profile)


@router.get("/{profile_id}")
async def get_profile(request: Request, profile_id: int):
    """Get a profile."""
    profile = await require_profile(get_app_db_path(request), profile_id)
    return _profile_response(profile)
