"""Configuration settings for the logbook scanner and eligibility engine.

This module centralizes configuration values and settings
for easy maintenance and extension.
"""

import os
from datetime import date
from pathlib import Path


class Config:
    """Application configuration."""

    # Application info
    APP_NAME = "Learner Logbook Eligibility"
    VERSION = "1.0.0"

    # Logging
    LOG_LEVEL = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    # Row validation settings
    MAX_SESSION_HOURS = 2  # Break required after 2 continuous hours
    MIN_SESSION_MINUTES = 5
    MAX_DAILY_HOURS = 8
    EARLIEST_PLAUSIBLE_DATE = date(2020, 1, 1)
    DURATION_TOLERANCE_MINUTES = 5  # Handwriting/rounding slack
    ODOMETER_DISTANCE_THRESHOLD_KM = 200
    MAX_AVERAGE_SPEED_KMH = 100

    # Eligibility rules
    PROFESSIONAL_CREDIT_CAP_HOURS = 10
    PROFESSIONAL_CREDIT_MULTIPLIER = 3
    SAFER_DRIVER_CREDIT_HOURS = 20
    VRU_CREDIT_HOURS = 10
    FIRST_AID_CREDIT_HOURS = 5
    MIN_AGE_AT_ISSUE = 17
    RED_PATHWAY_AGE_LIMIT = 25
    LICENCE_VALIDITY_YEARS = 5

    # Vision extraction API
    VISION_API_ENDPOINT = os.environ.get(
        "VISION_API_ENDPOINT", "https://api.anthropic.com/v1/messages"
    )
    VISION_API_VERSION = "2023-06-01"
    VISION_MODEL = os.environ.get("VISION_MODEL", "claude-sonnet-4-20250514")
    VISION_MAX_TOKENS = 4096
    VISION_TIMEOUT_SECONDS = 120

    # Output settings
    OUTPUT_DIR = Path("output")
    JSON_INDENT = 2

    # Paths
    PROJECT_ROOT = Path(__file__).parent.parent
    TESTS_DIR = PROJECT_ROOT / "tests"
    FIXTURES_DIR = TESTS_DIR / "fixtures"

    @classmethod
    def get_output_dir(cls) -> Path:
        """Get output directory, creating if it doesn't exist."""
        output_dir = cls.PROJECT_ROOT / cls.OUTPUT_DIR
        output_dir.mkdir(parents=True, exist_ok=True)
        return output_dir

    @classmethod
    def get_vision_api_key(cls):
        """Read the vision API key from the environment (None if unset)."""
        return os.environ.get("VISION_API_KEY")

    @classmethod
    def validation_rules(cls):
        """Build the default row validation rule set."""
        from .models.schema import ValidationRules

        return ValidationRules(
            max_session_hours=cls.MAX_SESSION_HOURS,
            min_session_minutes=cls.MIN_SESSION_MINUTES,
            max_daily_hours=cls.MAX_DAILY_HOURS,
            earliest_plausible_date=cls.EARLIEST_PLAUSIBLE_DATE,
            duration_tolerance_minutes=cls.DURATION_TOLERANCE_MINUTES,
            odometer_distance_threshold_km=cls.ODOMETER_DISTANCE_THRESHOLD_KM,
            max_average_speed_kmh=cls.MAX_AVERAGE_SPEED_KMH,
        )
