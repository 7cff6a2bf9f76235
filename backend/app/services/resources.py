from __future__ import annotations

import re
import unicodedata

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.resource import DEFAULT_RESOURCE_TYPES, ResourceType


def slugify_type(label: str) -> str:
    """Slug used as the type key, e.g. "Sala de Música" becomes "sala_de_musica"."""
    normalized = unicodedata.normalize("NFD", label.strip().lower())
    without_accents = "".join(ch for ch in normalized if unicodedata.category(ch) != "Mn")
    return re.sub(r"[^a-z0-9]", "_", without_accents)


def ensure_default_resource_types(db: Session) -> None:
    existing = set(db.execute(select(ResourceType.value)).scalars())
    missing = [ResourceType(value=value, label=label) for value, label in DEFAULT_RESOURCE_TYPES if value not in existing]
    if missing:
        db.add_all(missing)
        db.flush()


def list_resource_types(db: Session) -> list[ResourceType]:
    ensure_default_resource_types(db)
    return list(db.execute(select(ResourceType).order_by(ResourceType.label.asc())).scalars())


def add_resource_type(db: Session, label: str) -> tuple[ResourceType, bool]:
    """Returns the type for ``label`` and whether it was created. Caller commits."""
    ensure_default_resource_types(db)
    value = slugify_type(label)
    existing = db.get(ResourceType, value)
    if existing is not None:
        return existing, False
    record = ResourceType(value=value, label=label.strip())
    db.add(record)
    db.flush()
    return record, True
