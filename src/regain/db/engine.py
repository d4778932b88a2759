"""Database engine setup and initialization."""

from pathlib import Path

import aiosqlite

from ..config import get_settings


def get_db_path(data_dir: Path | None = None) -> Path:
    """Get the database file path."""
    if data_dir is None:
        data_dir = get_settings().data_dir
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / "regain.db"


async def _run_migrations(db: aiosqlite.Connection) -> None:
    """Run database migrations for schema updates."""
    # Profiles created before adherence tracking carry no streak document
    cursor = await db.execute("PRAGMA table_info(user_profiles)")
    columns = await cursor.fetchall()
    profile_columns = {col[1] for col in columns}

    if "streak" not in profile_columns:
        await db.execute("ALTER TABLE user_profiles ADD COLUMN streak TEXT DEFAULT '{}'")

    await db.commit()


async def init_db(db_path: Path | None = None) -> None:
    """Initialize the database schema."""
    if db_path is None:
        db_path = get_db_path()

    async with aiosqlite.connect(db_path) as db:
        # Exercise catalog
        await db.execute("""
            CREATE TABLE IF NOT EXISTS exercises (
                id TEXT PRIMARY KEY,
                data TEXT NOT NULL
            )
        """)

        # Variations reference their exercise by ID and are joined in-process
        await db.execute("""
            CREATE TABLE IF NOT EXISTS variations (
                id TEXT PRIMARY KEY,
                exercise_id TEXT,
                data TEXT NOT NULL
            )
        """)

        # User profiles
        await db.execute("""
            CREATE TABLE IF NOT EXISTS user_profiles (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                preferred_disciplines TEXT DEFAULT '[]',
                discomforts TEXT DEFAULT '[]',
                equipment TEXT DEFAULT '[]',
                days_per_week INTEGER DEFAULT 3,
                milestones TEXT DEFAULT '{}',
                streak TEXT DEFAULT '{}',
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        # Training systems, sessions embedded as a JSON document
        await db.execute("""
            CREATE TABLE IF NOT EXISTS training_systems (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                profile_id INTEGER NOT NULL,
                data TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (profile_id) REFERENCES user_profiles(id) ON DELETE CASCADE
            )
        """)

        # Completed-session history
        await db.execute("""
            CREATE TABLE IF NOT EXISTS completed_sessions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                profile_id INTEGER NOT NULL,
                session_date TEXT NOT NULL,
                data TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (profile_id) REFERENCES user_profiles(id) ON DELETE CASCADE
            )
        """)

        # Create indexes for common queries
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_variations_exercise
            ON variations(exercise_id)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_training_systems_profile
            ON training_systems(profile_id)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_completed_sessions_profile_date
            ON completed_sessions(profile_id, session_date)
        """)

        await db.commit()

        # Run migrations for existing databases
        await _run_migrations(db)
