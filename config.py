"""
Runtime settings for the civic portal API, read from the environment.

Malformed values are logged and replaced by their defaults.
"""

import logging
import math
import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

logger = logging.getLogger(__name__)

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        value = None
    if value is None or not math.isfinite(value) or value <= 0:
        logger.warning("%s=%r is not a positive number; using %g", name, raw, default)
        return default
    return value


def _env_choice(name: str, choices: tuple, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().upper()
    if value not in choices:
        logger.warning("%s=%r is not one of %s; using %s", name, raw, ", ".join(choices), default)
        return default
    return value


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None:
        return default
    items = [item.strip() for item in raw.split(",") if item.strip()]
    return items or default


class Settings(BaseModel):
    database_url: Optional[str] = None
    database_name: str = "civic_portal"
    admin_token: Optional[str] = None
    query_timeout_seconds: float = 10.0
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database_url=os.getenv("DATABASE_URL") or None,
            database_name=os.getenv("DATABASE_NAME") or "civic_portal",
            admin_token=os.getenv("ADMIN_TOKEN") or None,
            query_timeout_seconds=_env_float("QUERY_TIMEOUT_SECONDS", 10.0),
            cors_origins=_env_list("CORS_ORIGINS", ["*"]),
            log_level=_env_choice("LOG_LEVEL", LOG_LEVELS, "INFO"),
        )


settings = Settings.from_env()
