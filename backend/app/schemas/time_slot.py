from pydantic import BaseModel, Field, field_validator, model_validator

from app.models.time_slot import SlotKind
from app.schemas.common import TIME_PATTERN, parse_time_to_minutes


def _validate_time(value: str | None) -> str | None:
    if value is not None and not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    return value


class TimeSlotBase(BaseModel):
    label: str = Field(min_length=1, max_length=50)
    start_time: str
    end_time: str
    kind: SlotKind = SlotKind.class_

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        return _validate_time(value)

    @model_validator(mode="after")
    def validate_order(self) -> "TimeSlotBase":
        if parse_time_to_minutes(self.end_time) <= parse_time_to_minutes(self.start_time):
            raise ValueError("end_time must be after start_time")
        return self


class TimeSlotCreate(TimeSlotBase):
    position: int | None = Field(default=None, ge=0)


class TimeSlotUpdate(BaseModel):
    label: str | None = Field(default=None, min_length=1, max_length=50)
    start_time: str | None = None
    end_time: str | None = None
    kind: SlotKind | None = None

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, value: str | None) -> str | None:
        return _validate_time(value)


class TimeSlotOut(TimeSlotBase):
    id: str
    position: int
    is_night: bool

    model_config = {"from_attributes": True}
