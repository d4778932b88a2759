"""Data access layer for regain."""

import json
from datetime import date, datetime
from pathlib import Path
from typing import Callable

import aiosqlite

from ..exceptions import ProfileNotFoundError
from ..models.history import CompletedSession
from ..models.training import TrainingSystem
from ..models.user_profile import StreakState, UserProfile
from .engine import get_db_path

# (profile, active system, history dates) -> (profile, completion, system) to write
CompletionApply = Callable[
    [UserProfile | None, TrainingSystem | None, list[date]],
    tuple[UserProfile, CompletedSession, TrainingSystem | None],
]


def _parse_timestamp(value) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


class CatalogRepository:
    """Repository for raw catalog records.

    Records are stored as the documents they arrive as; normalisation into
    Exercise objects happens in the catalog loader.
    """

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def fetch_records(self) -> tuple[list[dict], list[dict]]:
        """Return (exercise_records, variation_records)."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute("SELECT data FROM exercises ORDER BY rowid")
            exercise_rows = await cursor.fetchall()
            cursor = await db.execute("SELECT data FROM variations ORDER BY rowid")
            variation_rows = await cursor.fetchall()

        return (
            [json.loads(row["data"]) for row in exercise_rows],
            [json.loads(row["data"]) for row in variation_rows],
        )

    async def save_records(
        self,
        exercise_records: list[dict],
        variation_records: list[dict],
    ) -> int:
        """Store raw records, replacing existing ones with the same ID.

        Returns:
            Number of exercise records written
        """
        async with aiosqlite.connect(self.db_path) as db:
            for record in exercise_records:
                await db.execute(
                    "INSERT OR REPLACE INTO exercises (id, data) VALUES (?, ?)",
                    (str(record["id"]), json.dumps(record)),
                )
            for record in variation_records:
                exercise_id = record.get("exerciseId") or record.get("exercise_id")
                variation_id = record.get("id") or record.get("variationId")
                await db.execute(
                    "INSERT OR REPLACE INTO variations (id, exercise_id, data) VALUES (?, ?, ?)",
                    (str(variation_id), exercise_id, json.dumps(record)),
                )
            await db.commit()

        return len(exercise_records)


class UserProfileRepository:
    """Repository for user profiles."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, profile: UserProfile) -> int:
        """Create a new user profile."""
        data = profile.to_dict()
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                """
                INSERT INTO user_profiles
                (name, preferred_disciplines, discomforts, equipment, days_per_week,
                 milestones, streak)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                self._profile_values(data),
            )
            await db.commit()
            return cursor.lastrowid

    async def get(self, profile_id: int) -> UserProfile | None:
        """Get a user profile by ID."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            return await self._fetch(db, profile_id)

    async def get_latest(self) -> UserProfile | None:
        """Get the most recently created/updated profile."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT * FROM user_profiles ORDER BY updated_at DESC, id DESC LIMIT 1"
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_profile(row)

    async def update(self, profile: UserProfile) -> None:
        """Update an existing profile."""
        if profile.id is None:
            raise ValueError("Profile must have an ID to update")

        async with aiosqlite.connect(self.db_path) as db:
            await self._update(db, profile)
            await db.commit()

    async def apply_streak(
        self,
        profile_id: int,
        apply: Callable[[UserProfile, TrainingSystem | None, list[date]], StreakState],
    ) -> StreakState:
        """Recompute and store a profile's streak in one write transaction.

        ``apply`` receives the profile, its active system and its history
        dates as read inside the transaction; only the streak column is
        written back.

        Raises:
            ProfileNotFoundError: If the profile does not exist
        """
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            await db.execute("BEGIN IMMEDIATE")
            try:
                profile = await self._fetch(db, profile_id)
                if profile is None:
                    raise ProfileNotFoundError(f"Profile {profile_id} not found")
                system = await TrainingSystemRepository._fetch_active(db, profile_id)
                dates = await CompletedSessionRepository._fetch_dates(db, profile_id)

                streak = apply(profile, system, dates)
                await db.execute(
                    """
                    UPDATE user_profiles SET streak = ?, updated_at = CURRENT_TIMESTAMP
                    WHERE id = ?
                    """,
                    (json.dumps(streak.to_dict()), profile_id),
                )
                await db.commit()
            except Exception:
                await db.rollback()
                raise

        return streak

    @staticmethod
    async def _fetch(db: aiosqlite.Connection, profile_id: int) -> UserProfile | None:
        cursor = await db.execute(
            "SELECT * FROM user_profiles WHERE id = ?", (profile_id,)
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return UserProfileRepository._row_to_profile(row)

    @staticmethod
    async def _update(db: aiosqlite.Connection, profile: UserProfile) -> int:
        """Issue the UPDATE on an open connection without committing.

        Returns:
            Number of rows changed
        """
        cursor = await db.execute(
            """
            UPDATE user_profiles SET
                name = ?, preferred_disciplines = ?, discomforts = ?, equipment = ?,
                days_per_week = ?, milestones = ?, streak = ?,
                updated_at = CURRENT_TIMESTAMP
            WHERE id = ?
            """,
            (*UserProfileRepository._profile_values(profile.to_dict()), profile.id),
        )
        return cursor.rowcount

    @staticmethod
    def _profile_values(data: dict) -> tuple:
        return (
            data["name"],
            json.dumps(data["preferred_disciplines"]),
            json.dumps(data["discomforts"]),
            json.dumps(data["equipment"]),
            data["days_per_week"],
            json.dumps(data["milestones"]),
            json.dumps(data["streak"]),
        )

    @staticmethod
    def _row_to_profile(row: aiosqlite.Row) -> UserProfile:
        """Convert a database row to a UserProfile."""
        data = {
            "name": row["name"],
            "preferred_disciplines": json.loads(row["preferred_disciplines"] or "[]"),
            "discomforts": json.loads(row["discomforts"] or "[]"),
            "equipment": json.loads(row["equipment"] or "[]"),
            "days_per_week": row["days_per_week"],
            "milestones": json.loads(row["milestones"] or "{}"),
            "streak": json.loads(row["streak"] or "{}"),
        }
        return UserProfile.from_dict(
            data,
            id=row["id"],
            created_at=_parse_timestamp(row["created_at"]),
            updated_at=_parse_timestamp(row["updated_at"]),
        )


class TrainingSystemRepository:
    """Repository for generated training systems."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, system: TrainingSystem) -> int:
        """Store a new training system for its profile."""
        if system.profile_id is None:
            raise ValueError("Training system must belong to a profile")

        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                "INSERT INTO training_systems (profile_id, data) VALUES (?, ?)",
                (system.profile_id, json.dumps(system.to_dict())),
            )
            await db.commit()
            return cursor.lastrowid

    async def get(self, system_id: int) -> TrainingSystem | None:
        """Get a training system by ID."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT * FROM training_systems WHERE id = ?", (system_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_system(row)

    async def get_active(self, profile_id: int) -> TrainingSystem | None:
        """Get the most recently generated system for a profile."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            return await self._fetch_active(db, profile_id)

    async def update(self, system: TrainingSystem) -> None:
        """Update an existing training system."""
        if system.id is None:
            raise ValueError("Training system must have an ID to update")

        async with aiosqlite.connect(self.db_path) as db:
            await self._update(db, system)
            await db.commit()

    @staticmethod
    async def _fetch_active(db: aiosqlite.Connection, profile_id: int) -> TrainingSystem | None:
        cursor = await db.execute(
            """
            SELECT * FROM training_systems WHERE profile_id = ?
            ORDER BY id DESC LIMIT 1
            """,
            (profile_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return TrainingSystemRepository._row_to_system(row)

    @staticmethod
    async def _update(db: aiosqlite.Connection, system: TrainingSystem) -> None:
        await db.execute(
            "UPDATE training_systems SET data = ? WHERE id = ?",
            (json.dumps(system.to_dict()), system.id),
        )

    @staticmethod
    def _row_to_system(row: aiosqlite.Row) -> TrainingSystem:
        """Convert a database row to a TrainingSystem."""
        return TrainingSystem.from_dict(
            json.loads(row["data"]),
            id=row["id"],
            profile_id=row["profile_id"],
        )


class CompletedSessionRepository:
    """Repository for completed-session history."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def list_for_profile(self, profile_id: int) -> list[CompletedSession]:
        """All completed sessions for a profile, oldest first."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                """
                SELECT * FROM completed_sessions WHERE profile_id = ?
                ORDER BY session_date ASC, id ASC
                """,
                (profile_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_completed(row) for row in rows]

    async def list_dates(self, profile_id: int) -> list[date]:
        """Dates of every completed session for a profile, oldest first."""
        async with aiosqlite.connect(self.db_path) as db:
            return await self._fetch_dates(db, profile_id)

    async def list_recent(self, profile_id: int, limit: int = 20) -> list[CompletedSession]:
        """Most recent completed sessions, newest first."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                """
                SELECT * FROM completed_sessions WHERE profile_id = ?
                ORDER BY session_date DESC, id DESC LIMIT ?
                """,
                (profile_id, limit),
            )
            rows = await cursor.fetchall()
            return [self._row_to_completed(row) for row in rows]

    async def record_completion(
        self,
        profile_id: int,
        apply: CompletionApply,
    ) -> tuple[int, UserProfile, CompletedSession]:
        """Read, compute and write a completion in one write transaction.

        The transaction is opened with ``BEGIN IMMEDIATE`` so concurrent
        completions for the same database run one after the other; each
        sees the profile, active system and history the previous one
        committed. ``apply`` turns that state into the profile (milestones
        and streak), the completed session and the system carrying the
        session's completed flag. The history row, profile and system are
        committed together or not at all.

        Returns:
            (completed-session row ID, stored profile, stored completion)

        Raises:
            ProfileNotFoundError: If the profile row cannot be updated
        """
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            await db.execute("BEGIN IMMEDIATE")
            try:
                profile = await UserProfileRepository._fetch(db, profile_id)
                system = await TrainingSystemRepository._fetch_active(db, profile_id)
                dates = await self._fetch_dates(db, profile_id)

                profile, completed, system = apply(profile, system, dates)

                cursor = await db.execute(
                    """
                    INSERT INTO completed_sessions (profile_id, session_date, data)
                    VALUES (?, ?, ?)
                    """,
                    (profile_id, completed.date.isoformat(), json.dumps(completed.to_dict())),
                )
                completed_id = cursor.lastrowid
                if await UserProfileRepository._update(db, profile) != 1:
                    raise ProfileNotFoundError(f"Profile {profile.id} not found")
                if system is not None and system.id is not None:
                    await TrainingSystemRepository._update(db, system)
                await db.commit()
            except Exception:
                await db.rollback()
                raise

        return completed_id, profile, completed

    @staticmethod
    async def _fetch_dates(db: aiosqlite.Connection, profile_id: int) -> list[date]:
        cursor = await db.execute(
            """
            SELECT session_date FROM completed_sessions WHERE profile_id = ?
            ORDER BY session_date ASC, id ASC
            """,
            (profile_id,),
        )
        rows = await cursor.fetchall()
        return [date.fromisoformat(row[0][:10]) for row in rows]

    @staticmethod
    def _row_to_completed(row: aiosqlite.Row) -> CompletedSession:
        """Convert a database row to a CompletedSession."""
        return CompletedSession.from_dict(json.loads(row["data"]), id=row["id"])
