from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker

from app.core.config import get_settings


def build_engine(url: str, *, echo: bool = False, **engine_options) -> Engine:
    url = url.strip()
    # Hosted Postgres URLs are usually handed out without a driver suffix.
    if url.startswith("postgres://"):
        url = "postgresql+psycopg://" + url.removeprefix("postgres://")
    elif url.startswith("postgresql://"):
        url = "postgresql+psycopg://" + url.removeprefix("postgresql://")

    connect_args: dict[str, object] = {}
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite":
        connect_args["check_same_thread"] = False
    elif (parsed.host or "").lower().endswith("supabase.com") and "sslmode" not in parsed.query:
        connect_args["sslmode"] = "require"

    return create_engine(url, echo=echo, pool_pre_ping=True, connect_args=connect_args, **engine_options)


settings = get_settings()
engine = build_engine(settings.database_url, echo=settings.database_echo)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
