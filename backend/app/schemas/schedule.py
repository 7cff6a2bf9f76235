from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from app.models.allocation import WEEKDAYS
from app.schemas.common import YEAR_PATTERN, strip_or_none

Semester = Literal["1", "2"]


def _validate_day(value: str) -> str:
    day = value.strip()
    if day not in WEEKDAYS:
        raise ValueError(f"day_of_week must be one of {', '.join(WEEKDAYS)}")
    return day


class ClassAllocationIn(BaseModel):
    class_id: str
    subject_id: str
    time_slot_id: str
    day_of_week: str
    year: str = Field(pattern=YEAR_PATTERN)
    semesters: list[Semester] = Field(default_factory=lambda: ["1"], min_length=1, max_length=2)
    teacher_id: str | None = None
    room: str | None = Field(default=None, max_length=100)

    @field_validator("day_of_week")
    @classmethod
    def validate_day(cls, value: str) -> str:
        return _validate_day(value)

    @field_validator("teacher_id", "room")
    @classmethod
    def normalize_optional(cls, value: str | None) -> str | None:
        return strip_or_none(value)

    @field_validator("semesters")
    @classmethod
    def dedupe_semesters(cls, value: list[str]) -> list[str]:
        return sorted(set(value))


class ClassAllocationOut(BaseModel):
    id: str
    class_id: str
    subject_id: str
    time_slot_id: str
    day_of_week: str
    year: str
    semester: Semester
    teacher_id: str | None = None
    room: str | None = None

    model_config = {"from_attributes": True}


def _strip_activity(value: str) -> str:
    trimmed = value.strip()
    if not trimmed:
        raise ValueError("activity cannot be empty")
    return trimmed


class ComplementaryAllocationIn(BaseModel):
    teacher_id: str
    time_slot_id: str
    day_of_week: str
    year: str = Field(pattern=YEAR_PATTERN)
    semester: Semester
    activity: str = Field(min_length=1, max_length=200)

    @field_validator("day_of_week")
    @classmethod
    def validate_day(cls, value: str) -> str:
        return _validate_day(value)

    @field_validator("activity")
    @classmethod
    def strip_activity(cls, value: str) -> str:
        return _strip_activity(value)


class ComplementaryAllocationUpdate(BaseModel):
    """Edits the activity text and optionally moves it to another cell."""

    activity: str = Field(min_length=1, max_length=200)
    day_of_week: str | None = None
    time_slot_id: str | None = None

    @field_validator("day_of_week")
    @classmethod
    def validate_day(cls, value: str | None) -> str | None:
        return None if value is None else _validate_day(value)

    @field_validator("activity")
    @classmethod
    def strip_activity(cls, value: str) -> str:
        return _strip_activity(value)


class ComplementaryAllocationOut(BaseModel):
    id: str
    teacher_id: str
    time_slot_id: str
    day_of_week: str
    year: str
    semester: Semester
    activity: str

    model_config = {"from_attributes": True}


class ScheduleConflictOut(BaseModel):
    kind: Literal["class", "activity"]
    semester: Semester
    day: str
    time: str
    description: str

    model_config = {"from_attributes": True}


class SemesterCopyRequest(BaseModel):
    class_id: str
    year: str = Field(pattern=YEAR_PATTERN)
    source_semester: Semester = "1"
    target_semester: Semester = "2"
    confirm: bool = False

    @model_validator(mode="after")
    def validate_semesters(self) -> "SemesterCopyRequest":
        if self.source_semester == self.target_semester:
            raise ValueError("source_semester and target_semester must differ")
        return self


class SemesterCopyResult(BaseModel):
    copied: int
    target_had_allocations: bool


class SlotAvailabilityOut(BaseModel):
    day: str
    time_slot_id: str
    busy: list[dict]
    free: list[dict]
    complementary: list[dict]

    model_config = {"from_attributes": True}


class TeacherWeekEntryOut(BaseModel):
    kind: Literal["class", "activity"]
    id: str
    day_of_week: str
    time_slot_id: str
    class_id: str | None = None
    subject_id: str | None = None
    room: str | None = None
    activity: str | None = None

    model_config = {"from_attributes": True}
