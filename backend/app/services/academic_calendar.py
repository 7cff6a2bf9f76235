"""Academic calendar: manual events plus markers derived from the year configuration."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.models.calendar_event import CalendarEvent
from app.schemas.calendar import AcademicConfig, AcademicTerm, AcademicYearConfig

RESET_CONFIRMATION_PHRASE = "Eu desejo apagar todas as datas deste ano letivo"
SYSTEM_EVENT_PREFIX = "sys-"
SYSTEM_EVENT_DESCRIPTION = "Configuração do Ano Letivo"

TERM_COLORS = (
    "bg-blue-50/50 border-blue-100",
    "bg-green-50/50 border-green-100",
    "bg-orange-50/50 border-orange-100",
    "bg-purple-50/50 border-purple-100",
)


@dataclass(frozen=True)
class CalendarEntry:
    id: str
    date: date
    title: str
    type: str
    description: str | None = None
    is_system: bool = False


def default_academic_config(year: int) -> AcademicConfig:
    return AcademicConfig(
        year_config=AcademicYearConfig(
            year=str(year),
            start_date=date(year, 2, 1),
            end_date=date(year, 12, 20),
            next_year_start_date=date(year + 1, 2, 1),
            recovery_start_date=date(year, 12, 21),
            recovery_end_date=date(year, 12, 30),
        ),
        terms=[
            AcademicTerm(id=1, label="1º Bimestre", start=date(year, 2, 10), end=date(year, 4, 15), color=TERM_COLORS[0]),
            AcademicTerm(id=2, label="2º Bimestre", start=date(year, 4, 16), end=date(year, 6, 30), color=TERM_COLORS[1]),
            AcademicTerm(id=3, label="3º Bimestre", start=date(year, 8, 1), end=date(year, 9, 30), color=TERM_COLORS[2]),
            AcademicTerm(id=4, label="4º Bimestre", start=date(year, 10, 1), end=date(year, 12, 15), color=TERM_COLORS[3]),
        ],
    )


def system_events(config: AcademicConfig) -> list[CalendarEntry]:
    year = config.year_config
    markers = [
        (year.start_date, "Início Ano Letivo", "ano_inicio", "start"),
        (year.end_date, "Fim Ano Letivo", "ano_fim", "end"),
        (year.next_year_start_date, "Início Próximo Ano", "proximo_ano", "next-start"),
        (year.recovery_start_date, "Início Recuperação Final", "recuperacao_final_inicio", "rec-start"),
        (year.recovery_end_date, "Fim Recuperação Final", "recuperacao_final_fim", "rec-end"),
    ]
    for term in config.terms:
        markers.append((term.start, f"Início {term.label}", "inicio_bimestre", f"term-{term.id}-start"))
        markers.append((term.end, f"Fim {term.label}", "fim_bimestre", f"term-{term.id}-end"))

    return [
        CalendarEntry(
            id=f"{SYSTEM_EVENT_PREFIX}{suffix}",
            date=when,
            title=title,
            type=kind,
            description=SYSTEM_EVENT_DESCRIPTION,
            is_system=True,
        )
        for when, title, kind, suffix in markers
    ]


def list_manual_events(db: Session, *, start: date | None = None, end: date | None = None) -> list[CalendarEvent]:
    query = select(CalendarEvent)
    if start is not None:
        query = query.where(CalendarEvent.date >= start)
    if end is not None:
        query = query.where(CalendarEvent.date <= end)
    return list(db.execute(query.order_by(CalendarEvent.date.asc(), CalendarEvent.title.asc())).scalars())


def merged_events(
    config: AcademicConfig | None,
    manual: list[CalendarEvent],
    *,
    start: date | None = None,
    end: date | None = None,
) -> list[CalendarEntry]:
    """System markers first, then manual events, each group sorted by date."""
    generated = system_events(config) if config is not None else []
    if start is not None:
        generated = [item for item in generated if item.date >= start]
    if end is not None:
        generated = [item for item in generated if item.date <= end]
    generated.sort(key=lambda item: item.date)
    stored = [
        CalendarEntry(id=item.id, date=item.date, title=item.title, type=item.type, description=item.description)
        for item in manual
    ]
    return [*generated, *stored]


def is_system_event_id(event_id: str) -> bool:
    return event_id.startswith(SYSTEM_EVENT_PREFIX)


def clear_manual_events(db: Session) -> int:
    """Deletes every manual event. Caller commits."""
    result = db.execute(delete(CalendarEvent))
    return result.rowcount or 0
