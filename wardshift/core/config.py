"""
Configuration for the WardShift backend.
Values are read from the environment (and a local .env file, if present).
"""

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Service-level settings."""

    HOST: str = os.getenv("WARDSHIFT_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("WARDSHIFT_PORT", "8000"))
    DEBUG: bool = _as_bool(os.getenv("WARDSHIFT_DEBUG", "false"))
    LOG_LEVEL: str = os.getenv("WARDSHIFT_LOG_LEVEL", "INFO").upper()

    CORS_ORIGINS: List[str] = [
        origin.strip()
        for origin in os.getenv(
            "WARDSHIFT_CORS_ORIGINS",
            "http://localhost:5173,http://localhost:3000"
        ).split(",")
        if origin.strip()
    ]

    DATABASE_URL: str = os.getenv("WARDSHIFT_DATABASE_URL", "sqlite:///./wardshift.db")

    # Insert the development accounts on startup
    SEED_DEMO_DATA: bool = _as_bool(os.getenv("WARDSHIFT_SEED_DEMO_DATA", "true"))

    SESSION_HEADER: str = "X-Session-Token"


class SchedulingRules:
    """Timing rules for auto-generated tasks (hours from the triggering event)."""

    RADIAL_SHEATH_HEPARIN_HOURS: int = 2
    FEMORAL_SHEATH_HEPARIN_HOURS: int = 6
    DISCHARGE_REPORT_HOURS: int = 24
    DEATH_REPORT_HOURS: int = 4

    AUTO_TASK_AUTHOR: str = "System (Auto-generated)"

    MIN_BIRTH_YEAR: int = 1900
