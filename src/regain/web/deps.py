"""Shared dependencies for the regain API."""

from pathlib import Path

from fastapi import HTTPException, Request

from ..data.catalog_loader import load_catalog
from ..db import TrainingSystemRepository, UserProfileRepository
from ..exceptions import CatalogUnavailableError
from ..models.exercises import Exercise
from ..models.training import TrainingSystem
from ..models.user_profile import UserProfile


def get_app_db_path(request: Request) -> Path:
    """Database path from app state."""
    return request.app.state.db_path


async def require_profile(db_path: Path, profile_id: int) -> UserProfile:
    """Load a profile or answer 404."""
    profile = await UserProfileRepository(db_path).get(profile_id)
    if profile is None:
        raise HTTPException(status_code=404, detail=f"Profile {profile_id} not found")
    return profile


async def require_system(db_path: Path, profile_id: int) -> TrainingSystem:
    """Load the active training system or answer 404."""
    system = await TrainingSystemRepository(db_path).get_active(profile_id)
    if system is None:
        raise HTTPException(
            status_code=404, detail=f"Profile {profile_id} has no training system"
        )
    return system


async def require_catalog(db_path: Path) -> list[Exercise]:
    """Load the catalog or answer 503."""
    try:
        return await load_catalog(db_path)
    except CatalogUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
