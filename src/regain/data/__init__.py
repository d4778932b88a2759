"""Data loading utilities."""

from .catalog_loader import (
    build_catalog,
    load_catalog,
    load_catalog_from_json,
    seed_catalog_from_json,
)

__all__ = [
    "build_catalog",
    "load_catalog",
    "load_catalog_from_json",
    "seed_catalog_from_json",
]
