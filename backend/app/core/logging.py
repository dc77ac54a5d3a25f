from __future__ import annotations

from logging.config import dictConfig
from pathlib import Path

from app.core.config import settings

LOG_DIR = Path(__file__).resolve().parents[2] / "logs"
LOG_FILE = LOG_DIR / "app.log"

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "uvicorn.asgi")


def setup_logging() -> None:
    """Configure application-wide logging."""

    LOG_DIR.mkdir(parents=True, exist_ok=True)
    level = settings.log_level.upper()

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
            },
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "formatter": "standard",
                "filename": str(LOG_FILE),
                "maxBytes": 5 * 1024 * 1024,
                "backupCount": 5,
                "encoding": "utf-8",
            },
        },
        "loggers": {
            name: {"handlers": ["console", "file"], "level": "INFO", "propagate": False}
            for name in UVICORN_LOGGERS
        },
        "root": {
            "handlers": ["console", "file"],
            "level": level,
        },
    }

    dictConfig(config)


__all__ = ["setup_logging"]
