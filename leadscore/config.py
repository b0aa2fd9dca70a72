"""Configuration settings for the lead score engine."""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///./leadscore.db"


def get_database_url() -> str:
    """
    Get the database URL from the environment.

    LEADSCORE_DATABASE_URL wins over DATABASE_URL; falls back to a local
    SQLite file.
    """
    return (
        os.environ.get("LEADSCORE_DATABASE_URL")
        or os.environ.get("DATABASE_URL")
        or DEFAULT_DATABASE_URL
    )


def _env_int(name: str, default: int) -> int:
    """Integer from the environment, or default when unset or invalid."""
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r (not an integer)", name, raw)
        return default


@dataclass
class ScoringConfig:
    """Configuration for keyword weights and tag thresholds."""

    # Points per keyword hit
    commercial_hit_points: int = 8
    premium_hit_points: int = 6
    scale_hit_points: int = 5

    # Tag thresholds (evaluated on clamped totals)
    high_ticket_threshold: int = 60
    goldmine_min_reviews: int = 30
    goldmine_min_opportunity: int = 50
    leadgen_threshold: int = 65
    quick_win_min_opportunity: int = 70
    quick_win_min_rating: float = 4.5


@dataclass
class Settings:
    """Unified settings with YAML override support."""

    database_url: str = field(default_factory=get_database_url)

    # Bulk rescoring
    batch_size: int = field(default_factory=lambda: _env_int("LEADSCORE_BATCH_SIZE", 100))
    max_workers: int = field(default_factory=lambda: _env_int("LEADSCORE_MAX_WORKERS", 4))

    # Reporting
    top_categories: int = 10

    scoring: ScoringConfig = field(default_factory=ScoringConfig)


def _apply(target, data: dict) -> None:
    names = {f.name for f in fields(target)}
    for key, value in data.items():
        if key in names and not isinstance(getattr(target, key), ScoringConfig):
            setattr(target, key, value)


def load_config(path: Optional[str] = None) -> Settings:
    """
    Load settings from YAML file with environment overrides.

    Priority: environment > config file > defaults

    Args:
        path: Path to YAML config file (optional)

    Returns:
        Settings instance with merged configuration
    """
    settings = Settings()

    if path:
        config_path = Path(path)
        if config_path.exists():
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}

            _apply(settings, data)
            if isinstance(data.get("scoring"), dict):
                _apply(settings.scoring, data["scoring"])

    # Environment overrides (always win)
    if os.environ.get("LEADSCORE_DATABASE_URL") or os.environ.get("DATABASE_URL"):
        settings.database_url = get_database_url()
    if os.environ.get("LEADSCORE_BATCH_SIZE"):
        settings.batch_size = _env_int("LEADSCORE_BATCH_SIZE", settings.batch_size)
    if os.environ.get("LEADSCORE_MAX_WORKERS"):
        settings.max_workers = _env_int("LEADSCORE_MAX_WORKERS", settings.max_workers)

    return settings
