"""Teacher double-commitment checks and per-cell availability over cached allocations."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import asdict, dataclass, field
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.professional import Professional
from app.models.school_class import SchoolClass
from app.models.subject import Subject
from app.models.time_slot import TimeSlot
from app.services.time_grid import SlotLike, conflict_time_label, lesson_label

FREE_ACTIVITY_MARKER = "livre"


class ClassAllocationLike(Protocol):
    teacher_id: str | None
    class_id: str
    subject_id: str
    time_slot_id: str
    day_of_week: str
    year: str
    semester: str


class ComplementaryLike(Protocol):
    id: str
    teacher_id: str
    time_slot_id: str
    day_of_week: str
    year: str
    semester: str
    activity: str


@dataclass(frozen=True)
class AllocationCandidate:
    class_id: str
    day_of_week: str
    time_slot_id: str
    year: str
    semesters: tuple[str, ...]
    teacher_id: str | None = None


@dataclass(frozen=True)
class ActivityCandidate:
    teacher_id: str
    day_of_week: str
    time_slot_id: str
    year: str
    semester: str
    replaces_id: str | None = None


@dataclass(frozen=True)
class ScheduleConflict:
    kind: str  # "class" | "activity"
    semester: str
    day: str
    time: str
    description: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class SlotAvailability:
    day: str
    time_slot_id: str
    busy: list[dict] = field(default_factory=list)
    free: list[dict] = field(default_factory=list)
    complementary: list[dict] = field(default_factory=list)


def _same_cell(record, *, teacher_id: str, day: str, time_slot_id: str, year: str, semester: str) -> bool:
    return (
        record.teacher_id == teacher_id
        and record.day_of_week == day
        and record.time_slot_id == time_slot_id
        and record.year == year
        and record.semester == semester
    )


class ConflictDetector:
    """Pre-write check that a teacher is not committed twice in one slot.

    Teaching and complementary activities live in different tables, so no
    single database key can express the rule; the check runs against the
    cached allocation set before every write.
    """

    def __init__(
        self,
        teacher_names: Mapping[str, str],
        class_names: Mapping[str, str],
        time_slots: Mapping[str, SlotLike],
        subject_names: Mapping[str, str] | None = None,
    ):
        self.teacher_names = teacher_names
        self.class_names = class_names
        self.time_slots = time_slots
        self.subject_names = subject_names or {}

    @classmethod
    def from_session(cls, db: Session) -> "ConflictDetector":
        teachers = db.execute(select(Professional)).scalars()
        classes = db.execute(select(SchoolClass)).scalars()
        slots = db.execute(select(TimeSlot)).scalars()
        subjects = db.execute(select(Subject)).scalars()
        return cls(
            teacher_names={item.id: item.display_name for item in teachers},
            class_names={item.id: item.display_name for item in classes},
            time_slots={item.id: item for item in slots},
            subject_names={item.id: item.name for item in subjects},
        )

    def teacher_name(self, teacher_id: str | None) -> str:
        return self.teacher_names.get(teacher_id or "", "Professor")

    def time_label(self, time_slot_id: str) -> str:
        return conflict_time_label(self.time_slots.get(time_slot_id))

    def detect(
        self,
        candidate: AllocationCandidate,
        allocations: Iterable[ClassAllocationLike],
        complementary: Iterable[ComplementaryLike],
    ) -> list[ScheduleConflict]:
        if not candidate.teacher_id:
            return []

        allocations = list(allocations)
        complementary = list(complementary)
        teacher_name = self.teacher_name(candidate.teacher_id)
        time_label = self.time_label(candidate.time_slot_id)
        conflicts: list[ScheduleConflict] = []

        for semester in candidate.semesters:
            cell = dict(
                teacher_id=candidate.teacher_id,
                day=candidate.day_of_week,
                time_slot_id=candidate.time_slot_id,
                year=candidate.year,
                semester=semester,
            )
            # Re-saving the same class cell is an edit, not a clash.
            clash = next(
                (a for a in allocations if _same_cell(a, **cell) and a.class_id != candidate.class_id),
                None,
            )
            if clash is not None:
                class_name = self.class_names.get(clash.class_id, "Outra Turma")
                conflicts.append(
                    ScheduleConflict(
                        kind="class",
                        semester=semester,
                        day=candidate.day_of_week,
                        time=time_label,
                        description=f"{teacher_name} já está na turma {class_name}",
                    )
                )

            activity = next((c for c in complementary if _same_cell(c, **cell)), None)
            if activity is not None:
                conflicts.append(
                    ScheduleConflict(
                        kind="activity",
                        semester=semester,
                        day=candidate.day_of_week,
                        time=time_label,
                        description=f"{teacher_name} tem atividade complementar registrada de {activity.activity}",
                    )
                )

        return conflicts

    def detect_activity_conflicts(
        self,
        candidate: ActivityCandidate,
        allocations: Iterable[ClassAllocationLike],
        complementary: Iterable[ComplementaryLike],
    ) -> list[ScheduleConflict]:
        """A teacher holds at most one commitment per slot: teaching or one activity."""
        teacher_name = self.teacher_name(candidate.teacher_id)
        time_label = self.time_label(candidate.time_slot_id)
        cell = dict(
            teacher_id=candidate.teacher_id,
            day=candidate.day_of_week,
            time_slot_id=candidate.time_slot_id,
            year=candidate.year,
            semester=candidate.semester,
        )
        conflicts: list[ScheduleConflict] = []

        for allocation in allocations:
            if _same_cell(allocation, **cell):
                class_name = self.class_names.get(allocation.class_id, "Outra Turma")
                conflicts.append(
                    ScheduleConflict(
                        kind="class",
                        semester=candidate.semester,
                        day=candidate.day_of_week,
                        time=time_label,
                        description=f"{teacher_name} já está na turma {class_name}",
                    )
                )
                break

        for activity in complementary:
            if activity.id != candidate.replaces_id and _same_cell(activity, **cell):
                conflicts.append(
                    ScheduleConflict(
                        kind="activity",
                        semester=candidate.semester,
                        day=candidate.day_of_week,
                        time=time_label,
                        description=f"{teacher_name} tem atividade complementar registrada de {activity.activity}",
                    )
                )
                break

        return conflicts

    def conflict_message(self, conflicts: Sequence[ScheduleConflict], *, class_id: str, time_slot_id: str) -> str:
        current_class = self.class_names.get(class_id, "")
        if len(conflicts) == 1:
            c = conflicts[0]
            return (
                f"Não é possível salvar este horário na turma {current_class}, pois existe conflito em "
                f"{c.semester}º Semestre - {c.day}, {c.time}:\n\n{c.description}"
            )
        header = f"{lesson_label(self.time_slots.get(time_slot_id)).upper()} - {conflicts[0].day.upper()}"
        lines = "\n".join(f"• {c.semester}º Semestre: {c.description}" for c in conflicts)
        return (
            f"Não é possível salvar este horário na turma {current_class}, pois existem conflitos:"
            f"\n\n{header}\n\n{lines}"
        )

    def slot_availability(
        self,
        *,
        day: str,
        time_slot_id: str,
        year: str,
        semesters: Sequence[str],
        allocations: Iterable[ClassAllocationLike],
        complementary: Iterable[ComplementaryLike],
    ) -> SlotAvailability:
        """Who is teaching, free or otherwise occupied in one grid cell.

        Teachers with no record at all are not listed; "free" means an explicit
        activity whose text contains "livre".
        """
        result = SlotAvailability(day=day, time_slot_id=time_slot_id)

        def in_cell(record) -> bool:
            return (
                record.day_of_week == day
                and record.time_slot_id == time_slot_id
                and record.year == year
                and record.semester in semesters
            )

        for allocation in allocations:
            if not in_cell(allocation):
                continue
            result.busy.append(
                {
                    "teacher_id": allocation.teacher_id,
                    "teacher_name": self.teachers_or_unknown(allocation.teacher_id),
                    "class_name": self.class_names.get(allocation.class_id, "Unknown"),
                    "subject_name": self.subject_names.get(allocation.subject_id, "Unknown"),
                    "semester": allocation.semester,
                }
            )

        for activity in complementary:
            if not in_cell(activity):
                continue
            entry = {
                "teacher_id": activity.teacher_id,
                "teacher_name": self.teachers_or_unknown(activity.teacher_id),
                "activity": activity.activity,
                "semester": activity.semester,
            }
            if FREE_ACTIVITY_MARKER in activity.activity.lower():
                result.free.append(entry)
            else:
                result.complementary.append(entry)

        return result

    def teachers_or_unknown(self, teacher_id: str | None) -> str:
        return self.teacher_names.get(teacher_id or "", "Desconhecido")
