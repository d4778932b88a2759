"""CLI commands for regain."""

from .init import init
from .plan import plan
from .profile import profile
from .progress import progress
from .serve import serve

__all__ = [
    "init",
    "plan",
    "profile",
    "progress",
    "serve",
]
