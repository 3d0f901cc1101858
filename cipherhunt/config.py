"""
Configuration - environment driven settings.

Variables:
    CIPHERHUNT_ENV              deployment environment name
    CIPHERHUNT_LOG_LEVEL        root log level (DEBUG, INFO, ...)
    CIPHERHUNT_PATH_LIMIT       how many visited nodes are kept for "go back"
    CIPHERHUNT_ALLOWED_ORIGINS  comma-separated CORS origins for the HTTP app
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_PATH_LIMIT = 50
MIN_PATH_LIMIT = 2


@dataclass(frozen=True)
class Settings:
    """Runtime settings."""
    env: str = "development"
    log_level: str = "INFO"
    path_limit: int = DEFAULT_PATH_LIMIT
    allowed_origins: tuple[str, ...] = ("*",)

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from CIPHERHUNT_* environment variables."""
        return cls(
            env=os.getenv("CIPHERHUNT_ENV", "development"),
            log_level=os.getenv("CIPHERHUNT_LOG_LEVEL", "INFO").upper(),
            path_limit=_path_limit_from_env(),
            allowed_origins=tuple(
                origin.strip()
                for origin in os.getenv("CIPHERHUNT_ALLOWED_ORIGINS", "*").split(",")
                if origin.strip()
            ) or ("*",),
        )


def _path_limit_from_env() -> int:
    raw = os.getenv("CIPHERHUNT_PATH_LIMIT")
    if raw is None:
        return DEFAULT_PATH_LIMIT
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer CIPHERHUNT_PATH_LIMIT=%r", raw)
        return DEFAULT_PATH_LIMIT
    if value < MIN_PATH_LIMIT:
        logger.warning("CIPHERHUNT_PATH_LIMIT=%d below minimum, using %d", value, MIN_PATH_LIMIT)
        return MIN_PATH_LIMIT
    return value


def configure_logging(settings: Settings | None = None) -> None:
    """Configure root logging once for the process."""
    settings = settings or Settings.from_env()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
