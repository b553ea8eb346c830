from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Service settings, read from the environment and an optional ``.env``."""

    # Server
    BACKEND_HOST: str = "0.0.0.0"
    BACKEND_PORT: int = 8000
    APP_DEBUG: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # JSON lines in production, console output in dev

    # Sessions
    PRACTICE_SESSION_SIZE: int = Field(10, ge=1, le=100)
    CANDIDATE_POOL_FACTOR: int = Field(3, ge=1)  # ranked words kept per target word before sampling

    # Score weights; ScoringConfig rejects a set that does not sum to 1
    SCORE_FREQUENCY_WEIGHT: float = 0.5
    SCORE_ACCURACY_WEIGHT: float = 0.3
    SCORE_SPACED_WEIGHT: float = 0.2

    # Review intervals, as fractions of the learner's vocabulary size
    INTERVAL_IMMEDIATE: float = 0.05
    INTERVAL_SHORT: float = 0.15
    INTERVAL_MEDIUM: float = 0.35
    INTERVAL_LONG: float = 0.60

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
