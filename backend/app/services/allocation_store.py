"""Cached view of class and complementary allocations for one school year."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable, Sequence
from dataclasses import asdict, dataclass, replace

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from app.core.exceptions import StoreError
from app.models.allocation import CLASS_ALLOCATION_KEY, WEEKDAYS, ClassAllocation, ComplementaryAllocation
from app.services.change_feed import ChangeEvent, ChangeFeed

logger = logging.getLogger(__name__)

CLASS_TABLE = ClassAllocation.__tablename__
COMPLEMENTARY_TABLE = ComplementaryAllocation.__tablename__


@dataclass(frozen=True)
class AllocationRecord:
    id: str | None
    class_id: str
    subject_id: str
    time_slot_id: str
    day_of_week: str
    year: str
    semester: str
    teacher_id: str | None = None
    room: str | None = None

    @classmethod
    def from_model(cls, row: ClassAllocation) -> "AllocationRecord":
        return cls(
            id=row.id,
            class_id=row.class_id,
            subject_id=row.subject_id,
            time_slot_id=row.time_slot_id,
            day_of_week=row.day_of_week,
            year=row.year,
            semester=row.semester,
            teacher_id=row.teacher_id,
            room=row.room,
        )


@dataclass(frozen=True)
class ComplementaryRecord:
    id: str | None
    teacher_id: str
    time_slot_id: str
    day_of_week: str
    year: str
    semester: str
    activity: str

    @classmethod
    def from_model(cls, row: ComplementaryAllocation) -> "ComplementaryRecord":
        return cls(
            id=row.id,
            teacher_id=row.teacher_id,
            time_slot_id=row.time_slot_id,
            day_of_week=row.day_of_week,
            year=row.year,
            semester=row.semester,
            activity=row.activity,
        )


@dataclass(frozen=True)
class TeacherWeekEntry:
    kind: str  # "class" | "activity"
    id: str
    day_of_week: str
    time_slot_id: str
    class_id: str | None = None
    subject_id: str | None = None
    room: str | None = None
    activity: str | None = None


class AllocationStore:
    """In-memory view of one year's class and complementary allocations.

    The database is the source of truth: every mutation goes to it first and
    the cache is then rebuilt by ``refresh``. Change notifications from other
    writers trigger the same full re-fetch through ``handle_change``.
    """

    def __init__(self, db: Session, *, feed: ChangeFeed | None = None):
        self.db = db
        self.feed = feed
        self.year: str | None = None
        self.allocations: list[AllocationRecord] = []
        self.complementary: list[ComplementaryRecord] = []
        self._unsubscribe = None

    # -- synchronisation -------------------------------------------------

    def refresh(self, year: str) -> None:
        try:
            class_rows = self.db.execute(
                select(ClassAllocation)
                .where(ClassAllocation.year == year)
                .execution_options(populate_existing=True)
            ).scalars()
            allocations = [AllocationRecord.from_model(row) for row in class_rows]
            comp_rows = self.db.execute(
                select(ComplementaryAllocation)
                .where(ComplementaryAllocation.year == year)
                .execution_options(populate_existing=True)
            ).scalars()
            complementary = [ComplementaryRecord.from_model(row) for row in comp_rows]
        except SQLAlchemyError as exc:
            logger.exception("Failed to fetch allocations for year %s", year)
            raise StoreError("Unable to load allocations") from exc

        self.year = year
        self.allocations = allocations
        self.complementary = complementary
        logger.debug(
            "Loaded %d class and %d complementary allocations for %s",
            len(allocations),
            len(complementary),
            year,
        )

    def attach(self, feed: ChangeFeed) -> None:
        self.detach()
        self.feed = feed
        self._unsubscribe = feed.subscribe(self.handle_change)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def handle_change(self, event: ChangeEvent) -> None:
        if event.table not in (CLASS_TABLE, COMPLEMENTARY_TABLE):
            return
        if self.year is None:
            return
        logger.debug("Refreshing allocations after %s on %s", event.action, event.table)
        self.refresh(self.year)

    def _ensure_loaded(self, year: str) -> None:
        if self.year != year:
            self.refresh(year)

    def _publish(self, table: str, action: str, record_id: str | None, payload: dict | None = None) -> None:
        if self.feed is not None:
            self.feed.publish(ChangeEvent(table=table, action=action, record_id=record_id, payload=payload or {}))

    def _fail(self, message: str, exc: SQLAlchemyError) -> StoreError:
        self.db.rollback()
        logger.exception(message)
        return StoreError(message)

    # -- queries ---------------------------------------------------------

    def class_grid(self, class_id: str, year: str, semesters: Sequence[str]) -> list[AllocationRecord]:
        self._ensure_loaded(year)
        return [a for a in self.allocations if a.class_id == class_id and a.semester in semesters]

    def for_semesters(self, semesters: Sequence[str]) -> tuple[list[AllocationRecord], list[ComplementaryRecord]]:
        return (
            [a for a in self.allocations if a.semester in semesters],
            [c for c in self.complementary if c.semester in semesters],
        )

    def teacher_week(self, teacher_id: str, year: str, semester: str, slot_order: Sequence[str]) -> list[TeacherWeekEntry]:
        """Class and activity entries of one teacher, ordered by weekday then slot.

        Entries whose slot is not in ``slot_order`` (breaks, hidden night
        slots) are left out.
        """
        self._ensure_loaded(year)
        positions = {slot_id: index for index, slot_id in enumerate(slot_order)}
        entries: list[TeacherWeekEntry] = []
        for a in self.allocations:
            if a.teacher_id == teacher_id and a.semester == semester and a.time_slot_id in positions:
                entries.append(
                    TeacherWeekEntry(
                        kind="class",
                        id=a.id,
                        day_of_week=a.day_of_week,
                        time_slot_id=a.time_slot_id,
                        class_id=a.class_id,
                        subject_id=a.subject_id,
                        room=a.room,
                    )
                )
        for c in self.complementary:
            if c.teacher_id == teacher_id and c.semester == semester and c.time_slot_id in positions:
                entries.append(
                    TeacherWeekEntry(
                        kind="activity",
                        id=c.id,
                        day_of_week=c.day_of_week,
                        time_slot_id=c.time_slot_id,
                        activity=c.activity,
                    )
                )

        def sort_key(entry: TeacherWeekEntry) -> tuple[int, int]:
            day_index = WEEKDAYS.index(entry.day_of_week) if entry.day_of_week in WEEKDAYS else len(WEEKDAYS)
            return day_index, positions[entry.time_slot_id]

        return sorted(entries, key=sort_key)

    # -- class allocations ----------------------------------------------

    def add(self, allocation: AllocationRecord) -> AllocationRecord:
        """Upsert on the cell key; an occupied cell gets the new teacher, subject and room.

        This does not check teacher conflicts; run ConflictDetector first.
        """
        values = {
            "class_id": allocation.class_id,
            "subject_id": allocation.subject_id,
            "time_slot_id": allocation.time_slot_id,
            "day_of_week": allocation.day_of_week,
            "year": allocation.year,
            "semester": allocation.semester,
            "teacher_id": allocation.teacher_id or None,
            "room": allocation.room or None,
        }
        try:
            self._upsert_class_allocation(values)
            self.db.commit()
            row = self.db.execute(
                select(ClassAllocation)
                .where(*(getattr(ClassAllocation, name) == values[name] for name in CLASS_ALLOCATION_KEY))
                .execution_options(populate_existing=True)
            ).scalar_one()
            stored = AllocationRecord.from_model(row)
        except SQLAlchemyError as exc:
            raise self._fail("Error saving class allocation", exc) from exc

        self._publish(CLASS_TABLE, "upsert", stored.id, asdict(stored))
        self.refresh(allocation.year)
        return stored

    def _upsert_class_allocation(self, values: dict) -> None:
        dialect = self.db.get_bind().dialect.name
        if dialect in ("postgresql", "sqlite"):
            if dialect == "postgresql":
                from sqlalchemy.dialects.postgresql import insert
            else:
                from sqlalchemy.dialects.sqlite import insert

            statement = insert(ClassAllocation).values(id=str(uuid.uuid4()), **values)
            statement = statement.on_conflict_do_update(
                index_elements=list(CLASS_ALLOCATION_KEY),
                set_={
                    "teacher_id": statement.excluded.teacher_id,
                    "subject_id": statement.excluded.subject_id,
                    "room": statement.excluded.room,
                    "updated_at": func.now(),
                },
            )
            self.db.execute(statement)
            return

        existing = self.db.execute(
            select(ClassAllocation).where(*(getattr(ClassAllocation, name) == values[name] for name in CLASS_ALLOCATION_KEY))
        ).scalar_one_or_none()
        if existing is None:
            self.db.add(ClassAllocation(**values))
        else:
            existing.teacher_id = values["teacher_id"]
            existing.subject_id = values["subject_id"]
            existing.room = values["room"]
        self.db.flush()

    def remove(self, allocation_id: str) -> bool:
        try:
            result = self.db.execute(delete(ClassAllocation).where(ClassAllocation.id == allocation_id))
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._fail("Error removing class allocation", exc) from exc

        self.allocations = [a for a in self.allocations if a.id != allocation_id]
        if not result.rowcount:
            return False
        self._publish(CLASS_TABLE, "delete", allocation_id)
        return True

    def copy(self, source_semester: str, target_semester: str, year: str, class_id: str) -> int:
        """Overwrite the target semester grid of one class with the source grid.

        Source rows are read first; an empty source leaves the target
        untouched. Delete and insert share one transaction, so a failed
        insert restores the previous target rows.
        """
        try:
            source_rows = list(
                self.db.execute(
                    select(ClassAllocation).where(
                        ClassAllocation.year == year,
                        ClassAllocation.semester == source_semester,
                        ClassAllocation.class_id == class_id,
                    )
                ).scalars()
            )
        except SQLAlchemyError as exc:
            raise self._fail("Error fetching source semester", exc) from exc

        if not source_rows:
            logger.warning(
                "Copy %s -> %s for class %s/%s skipped: source semester is empty",
                source_semester,
                target_semester,
                class_id,
                year,
            )
            return 0

        copies = [
            ClassAllocation(
                class_id=row.class_id,
                teacher_id=row.teacher_id,
                subject_id=row.subject_id,
                time_slot_id=row.time_slot_id,
                day_of_week=row.day_of_week,
                year=row.year,
                semester=target_semester,
                room=row.room,
            )
            for row in source_rows
        ]
        try:
            self.db.execute(
                delete(ClassAllocation).where(
                    ClassAllocation.year == year,
                    ClassAllocation.semester == target_semester,
                    ClassAllocation.class_id == class_id,
                )
            )
            self.db.add_all(copies)
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._fail("Error copying semester schedule", exc) from exc

        logger.info(
            "Copied %d allocations of class %s from semester %s to %s (%s)",
            len(copies),
            class_id,
            source_semester,
            target_semester,
            year,
        )
        self._publish(
            CLASS_TABLE,
            "copy",
            None,
            {"class_id": class_id, "year": year, "source": source_semester, "target": target_semester},
        )
        self.refresh(year)
        return len(copies)

    # -- complementary allocations --------------------------------------

    def add_complementary(self, allocation: ComplementaryRecord) -> ComplementaryRecord:
        """Plain insert; duplicate detection is the caller's job."""
        row = ComplementaryAllocation(
            teacher_id=allocation.teacher_id,
            time_slot_id=allocation.time_slot_id,
            day_of_week=allocation.day_of_week,
            year=allocation.year,
            semester=allocation.semester,
            activity=allocation.activity,
        )
        try:
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        except SQLAlchemyError as exc:
            raise self._fail("Error adding complementary allocation", exc) from exc

        stored = ComplementaryRecord.from_model(row)
        if self.year == stored.year:
            self.complementary = [*self.complementary, stored]
        self._publish(COMPLEMENTARY_TABLE, "insert", stored.id, asdict(stored))
        return stored

    def update_complementary(
        self,
        allocation_id: str,
        activity: str,
        *,
        day_of_week: str | None = None,
        time_slot_id: str | None = None,
    ) -> ComplementaryRecord | None:
        row = self.db.get(ComplementaryAllocation, allocation_id)
        if row is None:
            return None
        try:
            row.activity = activity
            if day_of_week is not None:
                row.day_of_week = day_of_week
            if time_slot_id is not None:
                row.time_slot_id = time_slot_id
            self.db.commit()
            self.db.refresh(row)
        except SQLAlchemyError as exc:
            raise self._fail("Error updating complementary allocation", exc) from exc

        stored = ComplementaryRecord.from_model(row)
        self.complementary = [stored if c.id == allocation_id else c for c in self.complementary]
        self._publish(COMPLEMENTARY_TABLE, "update", stored.id, asdict(stored))
        return stored

    def remove_complementary(self, allocation_id: str) -> bool:
        try:
            result = self.db.execute(delete(ComplementaryAllocation).where(ComplementaryAllocation.id == allocation_id))
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._fail("Error removing complementary allocation", exc) from exc

        self.complementary = [c for c in self.complementary if c.id != allocation_id]
        if not result.rowcount:
            return False
        self._publish(COMPLEMENTARY_TABLE, "delete", allocation_id)
        return True

    def get_complementary(self, allocation_id: str) -> ComplementaryRecord | None:
        return next((c for c in self.complementary if c.id == allocation_id), None)


def records_for_semesters(
    template: AllocationRecord, semesters: Iterable[str]
) -> list[AllocationRecord]:
    return [replace(template, semester=semester) for semester in semesters]
