"""Database layer for regain."""

from .engine import get_db_path, init_db
from .repositories import (
    CatalogRepository,
    CompletedSessionRepository,
    TrainingSystemRepository,
    UserProfileRepository,
)

__all__ = [
    "get_db_path",
    "init_db",
    "CatalogRepository",
    "CompletedSessionRepository",
    "TrainingSystemRepository",
    "UserProfileRepository",
]
