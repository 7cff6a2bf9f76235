from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import strip_or_none


class BookingCreate(BaseModel):
    time_slot_id: str
    date: date
    class_id: str
    subject_id: str
    professional_id: str | None = None
    description: str | None = Field(default=None, max_length=500)

    @field_validator("description", "professional_id")
    @classmethod
    def normalize_optional(cls, value: str | None) -> str | None:
        return strip_or_none(value)


class BookingUpdate(BaseModel):
    class_id: str | None = None
    subject_id: str | None = None
    professional_id: str | None = None
    description: str | None = Field(default=None, max_length=500)


class BookingOut(BaseModel):
    id: str
    resource_id: str
    time_slot_id: str
    date: date
    class_id: str
    subject_id: str
    professional_id: str
    description: str | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class WeekBookingsOut(BaseModel):
    resource_id: str
    week_offset: int
    week_start: date
    week_end: date
    days: list[date]
    read_only: bool
    bookings: list[BookingOut]
