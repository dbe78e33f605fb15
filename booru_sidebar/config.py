"""Application configuration."""
from pydantic_settings import BaseSettings
from functools import lru_cache

from .utils.shell_utils import DEFAULT_USER_AGENT


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # API Settings
    app_name: str = "Booru Sidebar Utils"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Downloads
    default_user_agent: str = DEFAULT_USER_AGENT

    # Similarity Settings
    # Candidates are truncated before scoring; partial ratio is quadratic in window size
    max_candidate_length: int = 256
    max_query_length: int = 256
    max_candidates: int = 5000
    default_rank_limit: int = 20
    default_min_score: float = 0.0

    # CORS Settings
    cors_origins: str = "*"  # Comma-separated origins, or '*' for all

    model_config = {
        "env_prefix": "BOORU_SIDEBAR_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    def get_cors_origins(self) -> list[str]:
        """Split the configured CORS origins."""
        if self.cors_origins == "*":
            return ["*"]
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
