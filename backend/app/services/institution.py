from __future__ import annotations

import logging
from datetime import date

from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.models.institution_settings import InstitutionSettings
from app.schemas.calendar import AcademicConfig
from app.schemas.settings import DEFAULT_SESSION_TIMEOUTS, InstitutionSettingsOut
from app.services.academic_calendar import default_academic_config

logger = logging.getLogger(__name__)

SETTINGS_ID = 1


def get_or_create_settings(db: Session) -> InstitutionSettings:
    record = db.get(InstitutionSettings, SETTINGS_ID)
    if record is None:
        record = InstitutionSettings(
            id=SETTINGS_ID,
            session_timeouts=dict(DEFAULT_SESSION_TIMEOUTS),
            semantic_colors={},
            academic_config={},
        )
        db.add(record)
        db.commit()
        db.refresh(record)
    return record


def load_academic_config(record: InstitutionSettings) -> AcademicConfig:
    """Stored configuration, or this year's defaults when none was saved."""
    if record.academic_config:
        try:
            return AcademicConfig.model_validate(record.academic_config)
        except ValidationError:
            logger.warning("Stored academic configuration is invalid; using defaults")
    return default_academic_config(date.today().year)


def session_timeout_for(record: InstitutionSettings, role_label: str) -> int | None:
    timeouts = {**DEFAULT_SESSION_TIMEOUTS, **(record.session_timeouts or {})}
    return timeouts.get(role_label)


def settings_out(record: InstitutionSettings) -> InstitutionSettingsOut:
    return InstitutionSettingsOut(
        institution_name=record.institution_name,
        logo_url=record.logo_url,
        has_night_shift=record.has_night_shift,
        lunch_color=record.lunch_color,
        semantic_colors=record.semantic_colors or {},
        available_weeks=record.available_weeks,
        session_timeouts={**DEFAULT_SESSION_TIMEOUTS, **(record.session_timeouts or {})},
        academic_config=load_academic_config(record),
    )
