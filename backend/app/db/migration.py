from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from alembic import command
from alembic.config import Config

from app.core.config import settings

logger = logging.getLogger(__name__)


def _candidate_roots(start: Path) -> Iterable[Path]:
    """Yield potential project roots to look for Alembic configuration files."""

    current = start.resolve()
    for candidate in (current, *current.parents):
        yield candidate


def _find_project_root() -> Path:
    """Locate the directory containing ``alembic.ini``.

    The configuration lives at the repository root next to ``backend/``; when
    the backend is packaged on its own it is copied next to the sources.
    """

    for candidate in _candidate_roots(Path(__file__).parent):
        if (candidate / "alembic.ini").exists():
            return candidate

    raise RuntimeError("Unable to locate alembic.ini. Ensure it is bundled with the backend.")


def build_config(database_url: str | None = None) -> Config:
    project_root = _find_project_root()
    config = Config(str(project_root / "alembic.ini"))
    config.set_main_option("script_location", str(project_root / "alembic"))
    config.set_main_option("sqlalchemy.url", database_url or settings.database_url)
    return config


def run_migrations(database_url: str | None = None) -> None:
    """Apply the latest Alembic migrations to the configured database."""

    config = build_config(database_url)
    logger.info("Applying database migrations")
    command.upgrade(config, "head")
