"""Exercise catalog loader.

The document store keeps exercises and variations as separate collections
whose field names drifted over time. Everything is normalised here so the
rest of the package only ever sees :class:`Exercise` and :class:`Variation`.
"""

import json
import logging
from pathlib import Path

import aiosqlite

from ..config import get_settings
from ..db.engine import get_db_path
from ..db.repositories import CatalogRepository
from ..exceptions import CatalogUnavailableError
from ..models.exercises import (
    Bilaterality,
    Discipline,
    Exercise,
    ProgressionType,
    TargetMuscles,
    Variation,
)

logger = logging.getLogger(__name__)

# Muscles from an exercise's targetMuscleGroups treated as primary
PRIMARY_MUSCLE_COUNT = 3


def get_catalog_json_path() -> Path:
    """Get the path to the static fallback catalog."""
    return get_settings().fallback_catalog_path


def infer_progression_type(difficulty: float) -> ProgressionType:
    """Guess the progression type of a variation from its difficulty."""
    if difficulty >= 7:
        return ProgressionType.LEVERAGE
    if difficulty >= 5:
        return ProgressionType.DURATION
    if difficulty >= 3:
        return ProgressionType.FORM
    return ProgressionType.STABILITY


def _parse_bilaterality(record: dict) -> Bilaterality:
    value = record.get("bilaterality")
    if value is None:
        value = (record.get("metadata") or {}).get("bilaterality")
    if value is None:
        return Bilaterality.BILATERAL
    if isinstance(value, bool):
        return Bilaterality.BILATERAL if value else Bilaterality.UNILATERAL
    return Bilaterality(str(value).strip().lower())


def _parse_discipline(exercise_record: dict, variation_records: list[dict]) -> Discipline:
    labels = []
    if exercise_record.get("discipline"):
        labels.append(exercise_record["discipline"])
    if variation_records and variation_records[0].get("disciplines"):
        labels.append(variation_records[0]["disciplines"][0])

    for label in labels:
        try:
            return Discipline.parse(label)
        except ValueError:
            logger.warning(
                "Unknown discipline %r on exercise %s", label, exercise_record.get("id")
            )
    return Discipline.PILATES


def _exercise_muscles(exercise_record: dict) -> TargetMuscles:
    groups = exercise_record.get("targetMuscleGroups") or []
    return TargetMuscles(
        primary=frozenset(groups[:PRIMARY_MUSCLE_COUNT]),
        secondary=frozenset(groups[PRIMARY_MUSCLE_COUNT:]),
    )


def normalize_variation(record: dict, exercise_record: dict) -> Variation:
    """Build a Variation from a raw store record.

    Raises:
        KeyError: If the record has no ID or name
        ValueError: If a field holds an unusable value
    """
    variation_id = record.get("id") or record.get("variationId")
    if not variation_id:
        raise KeyError("id")

    difficulty = record.get("difficulty_score", record.get("difficulty"))
    difficulty = float(difficulty or 0)

    progression = record.get("progression_type") or record.get("progressionType")
    progression_type = (
        ProgressionType(progression) if progression else infer_progression_type(difficulty)
    )

    muscles = record.get("target_muscles")
    target_muscles = (
        TargetMuscles.from_dict(muscles) if muscles else _exercise_muscles(exercise_record)
    )

    return Variation(
        id=str(variation_id),
        name=record["name"],
        exercise_id=str(exercise_record["id"]),
        difficulty_score=difficulty,
        bilaterality=_parse_bilaterality(record),
        progression_type=progression_type,
        target_muscles=target_muscles,
        technique_cues=tuple(record.get("technique_cues") or record.get("instructions") or ()),
        equipment=tuple(record.get("equipment") or ()),
        metrics=record.get("metrics"),
    )


def build_catalog(
    exercise_records: list[dict],
    variation_records: list[dict],
) -> list[Exercise]:
    """Join raw variation records onto their exercises.

    Orphan or malformed records are logged and skipped; exercises left
    without any variation are dropped.
    """
    exercise_by_id = {}
    for record in exercise_records:
        if not record.get("id") or not record.get("name"):
            logger.warning("Skipping exercise record without id/name: %r", record)
            continue
        exercise_by_id[str(record["id"])] = record

    grouped: dict[str, list[dict]] = {}
    for record in variation_records:
        exercise_id = record.get("exerciseId") or record.get("exercise_id")
        if not exercise_id:
            logger.warning("Variation %s missing exerciseId, skipping", record.get("id"))
            continue
        if str(exercise_id) not in exercise_by_id:
            logger.warning(
                "Variation %s references unknown exercise %s, skipping",
                record.get("id"),
                exercise_id,
            )
            continue
        grouped.setdefault(str(exercise_id), []).append(record)

    exercises = []
    for exercise_id, record in exercise_by_id.items():
        raw_variations = grouped.get(exercise_id, [])
        variations = []
        for raw in raw_variations:
            try:
                variations.append(normalize_variation(raw, record))
            except (KeyError, ValueError, TypeError) as e:
                logger.warning("Skipping invalid variation %s: %s", raw.get("id"), e)

        if not variations:
            logger.info("Dropping exercise %s: no variations", exercise_id)
            continue

        exercises.append(
            Exercise(
                id=exercise_id,
                name=record["name"],
                discipline=_parse_discipline(record, raw_variations),
                variations=tuple(variations),
                description=record.get("description")
                or f"{record['name']} - A {record.get('category') or 'core'} exercise",
                frameworks=tuple(record.get("frameworks") or ()),
            )
        )

    logger.info(
        "Built catalog of %d exercises from %d exercise and %d variation records",
        len(exercises),
        len(exercise_records),
        len(variation_records),
    )
    return exercises


def read_catalog_records(path: Path) -> tuple[list[dict], list[dict]]:
    """Read raw records from a catalog JSON file."""
    with open(path) as f:
        data = json.load(f)
    return data.get("exercises", []), data.get("variations", [])


def load_catalog_from_json(path: Path | None = None) -> list[Exercise]:
    """Load the catalog from the static JSON file.

    Returns:
        List of exercises, empty if the file does not exist
    """
    json_path = path or get_catalog_json_path()
    if not json_path.exists():
        return []

    exercise_records, variation_records = read_catalog_records(json_path)
    return build_catalog(exercise_records, variation_records)


async def load_catalog(
    db_path: Path | None = None,
    fallback_path: Path | None = None,
) -> list[Exercise]:
    """Load the catalog from the store, falling back to the static file.

    Raises:
        CatalogUnavailableError: If neither source yields any exercise
    """
    repo = CatalogRepository(db_path or get_db_path())
    exercises: list[Exercise] = []
    try:
        exercise_records, variation_records = await repo.fetch_records()
        exercises = build_catalog(exercise_records, variation_records)
    except (aiosqlite.Error, OSError, ValueError) as e:
        logger.warning("Catalog store read failed, using fallback file: %s", e)

    if exercises:
        return exercises

    json_path = fallback_path or get_catalog_json_path()
    try:
        exercises = load_catalog_from_json(json_path)
    except (OSError, ValueError) as e:
        raise CatalogUnavailableError(f"Could not read fallback catalog {json_path}: {e}") from e

    if not exercises:
        raise CatalogUnavailableError(
            f"No exercises in the store and none in fallback catalog {json_path}"
        )
    logger.info("Loaded %d exercises from fallback catalog %s", len(exercises), json_path)
    return exercises


async def seed_catalog_from_json(
    db_path: Path | None = None,
    path: Path | None = None,
) -> int:
    """Seed the store with the records of the static catalog file.

    Returns:
        Number of exercise records stored
    """
    json_path = path or get_catalog_json_path()
    if not json_path.exists():
        return 0

    exercise_records, variation_records = read_catalog_records(json_path)
    repo = CatalogRepository(db_path or get_db_path())
    return await repo.save_records(exercise_records, variation_records)
