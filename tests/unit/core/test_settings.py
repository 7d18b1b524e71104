"""
Tests for application settings.
"""

import pytest
from pydantic import ValidationError

from app.config.settings import Settings, get_settings


class TestSettings:
    """Tests for Settings."""

    def test_environment_from_env(self) -> None:
        settings = Settings(_env_file=None)
        assert settings.ENVIRONMENT == "test"
        assert settings.BOOKING_REDIRECT_SECONDS == 0
        assert settings.is_development is False

    def test_log_level_is_normalized(self) -> None:
        assert Settings(_env_file=None, LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"

    def test_invalid_log_level(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, LOG_LEVEL="verbose")

    @pytest.mark.parametrize(
        "field", ["BOOKING_SLOT_AVAILABILITY_RATE", "BOOKING_RACE_LOSS_RATE", "BOOKING_SUBMISSION_SUCCESS_RATE"]
    )
    def test_rates_must_be_probabilities(self, field) -> None:
        with pytest.raises(ValidationError, match="between 0 and 1"):
            Settings(_env_file=None, **{field: 1.5})

    def test_simulation_config(self) -> None:
        settings = Settings(_env_file=None, BOOKING_RANDOM_SEED=3)
        assert settings.simulation_config == {
            "availability_rate": 0.7,
            "fully_booked_rate": 0.1,
            "race_loss_rate": 0.05,
            "success_rate": 0.9,
            "seed": 3,
        }

    def test_debug_means_development(self) -> None:
        assert Settings(_env_file=None, DEBUG=True).is_development is True

    def test_get_settings_is_cached(self) -> None:
        assert get_settings() is get_settings()
