from __future__ import annotations

import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from app.db.base import Base
from app.services.institution import get_or_create_settings
from app.services.resources import ensure_default_resource_types
from app.services.time_grid import ensure_default_time_grid

logger = logging.getLogger(__name__)


def ensure_schema(engine: Engine) -> list[str]:
    """Creates missing tables for local databases. Returns the names created.

    Production schemas are managed by Alembic; this only fills gaps in
    developer and demo databases.
    """
    import app.models  # noqa: F401

    existing = set(inspect(engine).get_table_names())
    missing = [table.name for table in Base.metadata.sorted_tables if table.name not in existing]
    if missing:
        Base.metadata.create_all(bind=engine)
        logger.info("Created tables: %s", ", ".join(missing))
    return missing


def seed_reference_data(db: Session) -> None:
    """Default time grid, resource types and settings row. Idempotent."""
    ensure_default_time_grid(db)
    ensure_default_resource_types(db)
    db.commit()
    get_or_create_settings(db)
