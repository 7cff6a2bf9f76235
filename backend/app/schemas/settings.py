from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from app.schemas.calendar import AcademicConfig
from app.schemas.common import HEX_COLOR_PATTERN

SESSION_TIMEOUT_ROLES = ("Administrador", "Coordenador", "Professor", "Colaborador")
DEFAULT_SESSION_TIMEOUTS = {
    "Administrador": 20,
    "Coordenador": 45,
    "Professor": 60,
    "Colaborador": 15,
}
MAX_AVAILABLE_WEEKS = 8


class InstitutionSettingsBase(BaseModel):
    institution_name: str = Field(min_length=1, max_length=200)
    logo_url: str | None = Field(default=None, max_length=1000)
    has_night_shift: bool = True
    lunch_color: str = "#f97316"
    semantic_colors: dict[str, str] = Field(default_factory=dict)
    available_weeks: int = Field(default=2, ge=1, le=MAX_AVAILABLE_WEEKS)
    session_timeouts: dict[str, int] = Field(default_factory=lambda: dict(DEFAULT_SESSION_TIMEOUTS))

    @field_validator("lunch_color")
    @classmethod
    def validate_color(cls, value: str) -> str:
        if not HEX_COLOR_PATTERN.match(value):
            raise ValueError("Color must be a #RRGGBB hex value")
        return value.lower()

    @field_validator("session_timeouts")
    @classmethod
    def validate_timeouts(cls, value: dict[str, int]) -> dict[str, int]:
        unknown = set(value) - set(SESSION_TIMEOUT_ROLES)
        if unknown:
            raise ValueError(f"Unknown session timeout roles: {', '.join(sorted(unknown))}")
        for role, minutes in value.items():
            if minutes < 1 or minutes > 24 * 60:
                raise ValueError(f"Session timeout for {role} must be between 1 and 1440 minutes")
        return {**DEFAULT_SESSION_TIMEOUTS, **value}


class InstitutionSettingsUpdate(InstitutionSettingsBase):
    pass


class InstitutionSettingsOut(InstitutionSettingsBase):
    academic_config: AcademicConfig | None = None

    model_config = {"from_attributes": True}


class BrandingOut(BaseModel):
    institution_name: str
    logo_url: str | None = None
    lunch_color: str
    semantic_colors: dict[str, str] = Field(default_factory=dict)
    has_night_shift: bool
