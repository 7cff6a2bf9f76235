"""Bookable time grid: ordering, night-shift filtering and display labels."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.time_slot import NIGHT_SHIFT_START_HOUR, SlotKind, TimeSlot


class SlotLike(Protocol):
    label: str
    start_time: str
    end_time: str


SlotT = TypeVar("SlotT", bound=SlotLike)

DEFAULT_TIME_GRID: tuple[tuple[str, str, str, SlotKind], ...] = (
    ("1ª", "07:00", "07:50", SlotKind.class_),
    ("2ª", "07:50", "08:40", SlotKind.class_),
    ("Intervalo", "08:40", "09:00", SlotKind.break_),
    ("3ª", "09:00", "09:50", SlotKind.class_),
    ("4ª", "09:50", "10:40", SlotKind.class_),
    ("5ª", "10:40", "11:30", SlotKind.class_),
    ("Almoço", "11:30", "13:00", SlotKind.lunch),
    ("6ª", "13:00", "13:50", SlotKind.class_),
    ("7ª", "13:50", "14:40", SlotKind.class_),
    ("Intervalo", "14:40", "15:00", SlotKind.break_),
    ("8ª", "15:00", "15:50", SlotKind.class_),
    ("9ª", "15:50", "16:40", SlotKind.class_),
    ("10ª", "18:30", "19:20", SlotKind.class_),
    ("11ª", "19:20", "20:10", SlotKind.class_),
    ("Intervalo", "20:10", "20:20", SlotKind.break_),
    ("12ª", "20:20", "21:10", SlotKind.class_),
    ("13ª", "21:10", "22:00", SlotKind.class_),
)


def start_hour(slot: SlotLike) -> int:
    return int(slot.start_time.split(":")[0])


def is_night_slot(slot: SlotLike) -> bool:
    return start_hour(slot) >= NIGHT_SHIFT_START_HOUR


def visible_slots(all_slots: Sequence[SlotT], has_night_shift: bool) -> list[SlotT]:
    """Slots shown on the grid. Without a night shift every slot starting at
    18:00 or later is dropped, whatever its kind. Input order is kept."""
    if has_night_shift:
        return list(all_slots)
    return [slot for slot in all_slots if not is_night_slot(slot)]


def lesson_label(slot: SlotLike | None) -> str:
    if slot is None or "ª" not in slot.label:
        return "Aula"
    return slot.label.split("ª")[0] + "ª Aula"


def slot_time_label(slot: SlotLike) -> str:
    return f"{slot.start_time} - {slot.end_time}"


def conflict_time_label(slot: SlotLike | None) -> str:
    if slot is None:
        return "Aula"
    return f"{lesson_label(slot)} ({slot_time_label(slot)})"


def list_time_slots(db: Session) -> list[TimeSlot]:
    return list(db.execute(select(TimeSlot).order_by(TimeSlot.position.asc())).scalars())


def ensure_default_time_grid(db: Session) -> list[TimeSlot]:
    """Creates the default grid when no slot exists yet. Caller commits."""
    existing = list_time_slots(db)
    if existing:
        return existing
    slots = [
        TimeSlot(label=label, start_time=start, end_time=end, kind=kind, position=index)
        for index, (label, start, end, kind) in enumerate(DEFAULT_TIME_GRID, start=1)
    ]
    db.add_all(slots)
    db.flush()
    return slots
