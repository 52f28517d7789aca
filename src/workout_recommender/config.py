"""Configuration settings for the workout recommender."""

from pathlib import Path
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


# __file__ = src/workout_recommender/config.py
PACKAGE_ROOT = Path(__file__).parent
PROJECT_ROOT = PACKAGE_ROOT.parent.parent


class Settings(BaseSettings):
    """Engine settings loaded from environment variables.

    Every field can be overridden with a ``WORKOUT_RECOMMENDER_`` prefixed
    environment variable or an entry in the project's ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="WORKOUT_RECOMMENDER_",
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Session defaults
    default_session_minutes: int = 45

    # Scoring weights
    problem_weight: float = 0.25
    preference_weight: float = 0.1

    # Scoring switches
    exclude_sore_muscles: bool = True
    target_undertrained_muscles: bool = True
    avoid_recent_exercises: bool = True

    # Number of most recent workouts whose exercises count as "recently used"
    recent_workout_count: int = 3

    # Coverage entries returned for display
    coverage_display_limit: int = 10

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
