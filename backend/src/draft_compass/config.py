"""Engine configuration via pydantic-settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DRAFT_COMPASS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Knowledge directory (champions.json, counters.json, winrates.json)
    knowledge_dir: str = "knowledge"

    # Queue used when a caller does not name one: "soloq" or "flex"
    default_queue: str = "soloq"

    # Output sizes
    recommendation_limit: int = 5
    substitution_limit: int = 3
    op_pick_limit: int = 10

    log_level: str = "INFO"

    @computed_field
    @property
    def knowledge_path(self) -> Path:
        """Knowledge directory resolved against the repo root when relative."""
        path = Path(self.knowledge_dir)
        if path.is_absolute():
            return path
        return Path(__file__).parents[3] / path


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
