import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday")
SEMESTERS = ("1", "2")

CLASS_ALLOCATION_KEY = ("class_id", "time_slot_id", "day_of_week", "year", "semester")


class ClassAllocation(Base):
    __tablename__ = "class_allocations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    teacher_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("professionals.id", ondelete="SET NULL"), nullable=True, index=True
    )
    subject_id: Mapped[str] = mapped_column(String(36), ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False)
    class_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("school_classes.id", ondelete="CASCADE"), nullable=False
    )
    time_slot_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("time_slots.id", ondelete="CASCADE"), nullable=False
    )
    day_of_week: Mapped[str] = mapped_column(String(10), nullable=False)
    year: Mapped[str] = mapped_column(String(4), nullable=False, index=True)
    semester: Mapped[str] = mapped_column(String(1), nullable=False)
    room: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (UniqueConstraint(*CLASS_ALLOCATION_KEY, name="uq_class_allocations_cell"),)


class ComplementaryAllocation(Base):
    """Non-teaching commitment of a teacher (planning, meetings, free period)."""

    __tablename__ = "complementary_allocations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    teacher_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("professionals.id", ondelete="CASCADE"), nullable=False
    )
    time_slot_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("time_slots.id", ondelete="CASCADE"), nullable=False
    )
    day_of_week: Mapped[str] = mapped_column(String(10), nullable=False)
    year: Mapped[str] = mapped_column(String(4), nullable=False, index=True)
    semester: Mapped[str] = mapped_column(String(1), nullable=False)
    activity: Mapped[str] = mapped_column(String(200), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("ix_complementary_allocations_teacher_cell", "teacher_id", "day_of_week", "time_slot_id", "year"),
    )
