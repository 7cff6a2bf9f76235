"""Process-wide logging for the API.

Modules log through ``logging.getLogger(__name__)``; this module only wires
handlers once at startup.
"""

from __future__ import annotations

import logging
import logging.config

from app.core.config import BACKEND_DIR

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_FILE = BACKEND_DIR / "logs" / "schooldesk.log"


def _resolve_level(environment: str, level_name: str | None) -> str:
    name = (level_name or "").strip().upper()
    if name and isinstance(logging.getLevelName(name), int):
        return name
    return "INFO" if environment == "production" else "DEBUG"


def build_logging_config(environment: str, level_name: str | None = None) -> dict:
    env = (environment or "development").strip().lower()
    level = _resolve_level(env, level_name)
    handlers: dict[str, dict] = {
        "console": {"class": "logging.StreamHandler", "formatter": "plain", "level": level},
    }
    if env == "production":
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": "plain",
            "level": level,
            "filename": str(LOG_FILE),
            "maxBytes": 5 * 1024 * 1024,
            "backupCount": 3,
            "encoding": "utf-8",
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"plain": {"format": LOG_FORMAT}},
        "handlers": handlers,
        "root": {"level": level, "handlers": list(handlers)},
        "loggers": {
            # SQL echo belongs to Settings.database_echo.
            "sqlalchemy.engine": {"level": "WARNING"},
            "uvicorn.access": {"level": level},
        },
    }


def setup_logging(*, environment: str, level_name: str | None = None) -> None:
    if logging.getLogger().handlers:
        return
    config = build_logging_config(environment, level_name)
    if "file" in config["handlers"]:
        LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(config)
