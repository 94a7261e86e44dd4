"""
junglesales.settings
====================

Configuration settings for the Jungle Sales application.

Plain module constants cover the database and HTTP server; the decay job
options live on a pydantic :class:`Settings` model so they can be read
from the environment or a ``.env`` file.
"""

from __future__ import annotations

import os
from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings

# ---------------------------------------------------------------------------
# Base directories
# ---------------------------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent

# Database settings
# ---------------------------------------------------------------------------
DB_FILE = os.environ.get("JUNGLESALES_DB_FILE", BASE_DIR / "junglesales.db")
DB_URL = f"sqlite:///{DB_FILE}"
DB_ECHO = os.environ.get("JUNGLESALES_DB_ECHO", "False").lower() == "true"

# API settings
# ---------------------------------------------------------------------------
API_HOST = os.environ.get("JUNGLESALES_API_HOST", "127.0.0.1")
API_PORT = int(os.environ.get("JUNGLESALES_API_PORT", "3000"))

# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL = os.environ.get("JUNGLESALES_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# ---------------------------------------------------------------------------
# Pydantic settings model for the decay job
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Decay job options, loaded from ``JUNGLESALES_*`` environment variables."""

    decay_at: str = Field(
        "13:18",
        pattern=r"^([01]\d|2[0-3]):[0-5]\d$",
        description="Daily time-of-day (HH:MM) the decay tick fires",
    )
    decay_prevent_overlap: bool = Field(
        True, description="Skip a tick that starts while another is still running"
    )
    decay_auto_enroll: bool = Field(
        False, description="Give unenrolled companies a fresh countdown on each tick"
    )
    decay_enroll_window: int = Field(
        7, ge=1, description="Countdown given on enrollment (the 1000 sentinel always resets to 7)"
    )
    decay_poll_seconds: float = Field(
        30.0, gt=0, description="How often the scheduler loop checks for due jobs"
    )
    api_run_scheduler: bool = Field(
        False, description="Run the decay scheduler inside the API process"
    )

    class Config:
        """Configuration for the settings model."""
        env_prefix = "JUNGLESALES_"
        env_file = ".env"
        case_sensitive = False


settings = Settings()
