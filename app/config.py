from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    WINSORIZE_MIN_SAMPLES: int = 5
    WINSORIZE_IQR_MULTIPLIER: float = 1.5
    DEFAULT_NUMERIC_FILL: float = 0
    DEFAULT_BOOLEAN_FILL: bool = False
    DEFAULT_TEXT_FILL: str = "Unknown"
    MAX_ROWS: int = 100_000
    AUDIT_LOG_LIMIT: int = 1000
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]
    DEBUG: bool = False

    class Config:
        env_file = ".env"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
