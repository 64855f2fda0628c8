"""
FitStreak engine configuration.
Loads variables from the .env file.
"""

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database URL (Railway/Render format)
    # If set, overrides PostgreSQL individual vars
    DATABASE_URL: str | None = None

    # PostgreSQL (individual vars, fallback if DATABASE_URL not set)
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "fitstreak"
    POSTGRES_USER: str = "fitstreak"
    POSTGRES_PASSWORD: SecretStr | None = None

    # Environment (development | production)
    ENVIRONMENT: str = "development"

    # Canonical timezone for all day-boundary arithmetic
    STREAK_TIMEZONE: str = "UTC"

    # Optimistic-lock retries before a stale write is surfaced to the caller
    STALE_WRITE_RETRIES: int = 5

    # Challenges ending within this window get the "ending soon" notice
    ENDING_SOON_WINDOW_HOURS: int = 24

    # Daily sweep times (HH:MM, canonical timezone)
    STREAK_SWEEP_TIME: str = "00:00"
    CHALLENGE_SWEEP_TIME: str = "00:05"
    REMINDER_TIME: str = "20:00"

    # HTTP server (run_api.py)
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # Token for the external cron tick endpoint
    CRON_TOKEN: SecretStr | None = None

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    @field_validator("STREAK_SWEEP_TIME", "CHALLENGE_SWEEP_TIME", "REMINDER_TIME")
    @classmethod
    def validate_hhmm(cls, v: str) -> str:
        hour, _, minute = v.partition(":")
        if not (hour.isdigit() and minute.isdigit()):
            raise ValueError(f"Expected HH:MM, got {v!r}")
        if not (0 <= int(hour) <= 23 and 0 <= int(minute) <= 59):
            raise ValueError(f"Time out of range: {v!r}")
        return f"{int(hour):02d}:{int(minute):02d}"

    @field_validator("STALE_WRITE_RETRIES", "ENDING_SOON_WINDOW_HOURS")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Must be at least 1")
        return v

    @property
    def database_url(self) -> str:
        """
        Database URL in the scheme Tortoise expects (`postgres://`).

        Priority:
        1. DATABASE_URL env var (Railway/Render give `postgresql://`)
        2. PostgreSQL individual vars (production)
        3. SQLite (development)
        """
        if self.DATABASE_URL:
            scheme, sep, rest = self.DATABASE_URL.partition("://")
            if scheme == "postgresql":
                scheme = "postgres"
            return f"{scheme}{sep}{rest}"

        if self.ENVIRONMENT == "production":
            if not self.POSTGRES_PASSWORD:
                raise ValueError("POSTGRES_PASSWORD required for production")
            return (
                f"postgres://{self.POSTGRES_USER}:"
                f"{self.POSTGRES_PASSWORD.get_secret_value()}"
                f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
            )

        return "sqlite://db.sqlite3"


config = Settings()
