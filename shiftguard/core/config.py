from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./shiftguard.db"

    # Conflict detection
    CROSS_MIDNIGHT_CONFLICTS: bool = False
    ENFORCE_ROLE_MATCH: bool = False

    # Workload report thresholds (percent of max weekly hours)
    OVER_UTILIZATION_THRESHOLD: float = 100.0
    UNDER_UTILIZATION_THRESHOLD: float = 50.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )


settings = Settings()
