from types import SimpleNamespace

from app.models.time_slot import SlotKind, TimeSlot
from app.services.time_grid import (
    DEFAULT_TIME_GRID,
    conflict_time_label,
    ensure_default_time_grid,
    lesson_label,
    list_time_slots,
    slot_time_label,
    visible_slots,
)


def make_slot(label, start, end, kind="class"):
    return SimpleNamespace(label=label, start_time=start, end_time=end, kind=kind)


GRID = [
    make_slot("1ª", "07:00", "07:50"),
    make_slot("Intervalo", "09:30", "09:50", kind="break"),
    make_slot("9ª", "17:10", "18:00"),
    make_slot("Intervalo", "18:00", "18:20", kind="break"),
    make_slot("10ª", "18:20", "19:10"),
    make_slot("13ª", "21:10", "22:00"),
]


def test_visible_slots_keeps_everything_with_night_shift():
    assert visible_slots(GRID, True) == GRID


def test_visible_slots_drops_night_slots_of_every_kind():
    visible = visible_slots(GRID, False)

    assert [slot.start_time for slot in visible] == ["07:00", "09:30", "17:10"]
    assert all(int(slot.start_time[:2]) < 18 for slot in visible)


def test_visible_slots_empty_grid():
    assert visible_slots([], False) == []
    assert visible_slots([], True) == []


def test_lesson_and_time_labels():
    slot = make_slot("1ª", "08:00", "08:50")

    assert lesson_label(slot) == "1ª Aula"
    assert slot_time_label(slot) == "08:00 - 08:50"
    assert conflict_time_label(slot) == "1ª Aula (08:00 - 08:50)"


def test_lesson_label_without_ordinal_falls_back():
    assert lesson_label(make_slot("Almoço", "11:30", "13:00")) == "Aula"
    assert lesson_label(None) == "Aula"
    assert conflict_time_label(None) == "Aula"


def test_default_grid_is_seeded_once(db_session):
    created = ensure_default_time_grid(db_session)
    db_session.commit()
    again = ensure_default_time_grid(db_session)

    assert len(created) == len(DEFAULT_TIME_GRID)
    assert [slot.id for slot in again] == [slot.id for slot in created]
    slots = list_time_slots(db_session)
    assert [slot.position for slot in slots] == sorted(slot.position for slot in slots)
    assert {slot.kind for slot in slots} == {SlotKind.class_, SlotKind.break_, SlotKind.lunch}
    assert any(slot.is_night for slot in slots)


def test_time_slot_is_night_property():
    assert TimeSlot(label="10ª", start_time="18:30", end_time="19:20", position=1).is_night
    assert not TimeSlot(label="9ª", start_time="15:50", end_time="16:40", position=2).is_night
