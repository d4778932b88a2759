"""Runtime configuration from environment variables."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from .models.training import Phase

load_dotenv()

# Default data directory
DATA_DIR = Path(__file__).parent.parent.parent / "data"

DEFAULT_PHASE_COUNTS = {
    Phase.WARMUP: 3,
    Phase.WORKOUT: 5,
    Phase.COOLDOWN: 3,
}


@dataclass
class Settings:
    """Resolved settings for one process."""

    data_dir: Path = DATA_DIR
    catalog_path: Path | None = None
    log_level: str = "WARNING"
    phase_counts: dict[Phase, int] = field(default_factory=lambda: dict(DEFAULT_PHASE_COUNTS))

    @property
    def fallback_catalog_path(self) -> Path:
        """Static catalog file used when the store has no catalog."""
        return self.catalog_path or self.data_dir / "regain_catalog.json"


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {value!r}") from e


def get_settings() -> Settings:
    """Build settings from the environment (and a .env file when present)."""
    data_dir = Path(os.getenv("REGAIN_DATA_DIR", str(DATA_DIR)))
    catalog_path = os.getenv("REGAIN_CATALOG_PATH")

    return Settings(
        data_dir=data_dir,
        catalog_path=Path(catalog_path) if catalog_path else None,
        log_level=os.getenv("REGAIN_LOG_LEVEL", "WARNING").upper(),
        phase_counts={
            Phase.WARMUP: _env_int("REGAIN_WARMUP_COUNT", DEFAULT_PHASE_COUNTS[Phase.WARMUP]),
            Phase.WORKOUT: _env_int("REGAIN_WORKOUT_COUNT", DEFAULT_PHASE_COUNTS[Phase.WORKOUT]),
            Phase.COOLDOWN: _env_int(
                "REGAIN_COOLDOWN_COUNT", DEFAULT_PHASE_COUNTS[Phase.COOLDOWN]
            ),
        },
    )
