import datetime as dt
from typing import Literal

from pydantic import BaseModel, Field, model_validator

CalendarEventType = Literal[
    "outros",
    "prova_parcial",
    "prova_bimestral",
    "feriado",
    "sabado_letivo",
    "evento",
    "limite_prova",
    "fim_bimestre",
    "inicio_bimestre",
    "limite_media",
    "jornada",
    "gincana",
    "recuperacao",
    "recuperacao_final",
    "culminancia",
    "conselho",
    "ano_inicio",
    "ano_fim",
    "proximo_ano",
    "recuperacao_final_inicio",
    "recuperacao_final_fim",
]


class CalendarEventCreate(BaseModel):
    date: dt.date
    title: str = Field(min_length=1, max_length=200)
    type: CalendarEventType = "outros"
    description: str | None = Field(default=None, max_length=1000)


class CalendarEventUpdate(BaseModel):
    date: dt.date | None = None
    title: str | None = Field(default=None, min_length=1, max_length=200)
    type: CalendarEventType | None = None
    description: str | None = Field(default=None, max_length=1000)


class CalendarEventOut(BaseModel):
    id: str
    date: dt.date
    title: str
    type: str
    description: str | None = None
    is_system: bool = False

    model_config = {"from_attributes": True}


class AcademicYearConfig(BaseModel):
    year: str = Field(pattern=r"^\d{4}$")
    start_date: dt.date
    end_date: dt.date
    next_year_start_date: dt.date
    recovery_start_date: dt.date
    recovery_end_date: dt.date

    @model_validator(mode="after")
    def validate_order(self) -> "AcademicYearConfig":
        if self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        if self.recovery_end_date < self.recovery_start_date:
            raise ValueError("recovery_end_date must not precede recovery_start_date")
        return self


class AcademicTerm(BaseModel):
    id: int = Field(ge=1, le=4)
    label: str = Field(min_length=1, max_length=50)
    start: dt.date
    end: dt.date
    color: str = Field(default="", max_length=100)

    @model_validator(mode="after")
    def validate_order(self) -> "AcademicTerm":
        if self.end < self.start:
            raise ValueError("term end must not precede its start")
        return self


class AcademicConfig(BaseModel):
    year_config: AcademicYearConfig
    terms: list[AcademicTerm] = Field(min_length=1, max_length=4)


class CalendarResetRequest(BaseModel):
    confirmation_phrase: str
