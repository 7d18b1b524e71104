from typing import Any

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded with Pydantic BaseSettings.
    Values are read from environment variables and the .env file.
    """

    # API Configuration
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Hospital Appointment Booking API"
    PROJECT_DESCRIPTION: str = "Patient appointment booking workflow for the hospital portal"
    VERSION: str = "0.1.0"

    # Environment
    ENVIRONMENT: str = Field("development", description="Runtime environment (development, staging, production)")
    DEBUG: bool = Field(False, description="Enable debug mode (docs endpoints, permissive CORS)")
    LOG_LEVEL: str = Field("INFO", description="Root log level")
    CORS_ORIGINS: list[str] = Field(default=[], description="Allowed CORS origins outside debug mode")

    # Error tracking
    SENTRY_DSN: str | None = Field(None, description="Sentry DSN (disabled when empty)")

    # Slot schedule
    BOOKING_SLOT_START_HOUR: int = Field(9, description="First bookable hour of the day (inclusive)")
    BOOKING_SLOT_END_HOUR: int = Field(16, description="Last bookable hour of the day (inclusive)")
    BOOKING_LUNCH_HOUR: int | None = Field(12, description="Hour skipped every day for lunch")
    BOOKING_SUGGESTION_WINDOW_DAYS: int = Field(14, description="Days scanned for alternative dates")
    BOOKING_MAX_SUGGESTIONS: int = Field(3, description="Maximum alternative dates suggested")
    BOOKING_UPCOMING_DAYS: int = Field(7, description="Days shown in the date picker")
    BOOKING_REDIRECT_SECONDS: int = Field(10, description="Success view countdown before redirect (0 disables)")

    # Simulated collaborators
    BOOKING_SLOT_AVAILABILITY_RATE: float = Field(0.7, description="Probability that a listed slot is open")
    BOOKING_FULLY_BOOKED_RATE: float = Field(0.1, description="Probability that a whole day is booked")
    BOOKING_RACE_LOSS_RATE: float = Field(0.05, description="Probability of losing a slot at selection time")
    BOOKING_SUBMISSION_SUCCESS_RATE: float = Field(0.9, description="Probability that the backend accepts a booking")
    BOOKING_RANDOM_SEED: int | None = Field(None, description="Seed for reproducible simulations")

    # Sessions
    BOOKING_SESSION_TTL_SECONDS: int = Field(1800, description="Idle booking sessions expire after this many seconds")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator(
        "BOOKING_SLOT_AVAILABILITY_RATE",
        "BOOKING_FULLY_BOOKED_RATE",
        "BOOKING_RACE_LOSS_RATE",
        "BOOKING_SUBMISSION_SUCCESS_RATE",
    )
    @classmethod
    def validate_rate(cls, v: float) -> float:
        """Rates are probabilities."""
        if not 0.0 <= v <= 1.0:
            raise ValueError("must be between 0 and 1")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            raise ValueError(f"Invalid log level: {v}")
        return level

    @computed_field
    @property
    def is_development(self) -> bool:
        """Is the app running in development mode?"""
        return self.DEBUG or self.ENVIRONMENT.lower() in ["development", "dev", "local"]

    @computed_field
    @property
    def simulation_config(self) -> dict[str, Any]:
        """Parameters for the simulated collaborators."""
        return {
            "availability_rate": self.BOOKING_SLOT_AVAILABILITY_RATE,
            "fully_booked_rate": self.BOOKING_FULLY_BOOKED_RATE,
            "race_loss_rate": self.BOOKING_RACE_LOSS_RATE,
            "success_rate": self.BOOKING_SUBMISSION_SUCCESS_RATE,
            "seed": self.BOOKING_RANDOM_SEED,
        }


# Settings singleton
_settings_instance = None


def get_settings() -> Settings:
    """
    Return a cached Settings instance.
    Avoids reading the environment more than once.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
