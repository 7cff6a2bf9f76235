import uuid
from enum import Enum

from sqlalchemy import Enum as SAEnum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base

NIGHT_SHIFT_START_HOUR = 18


class SlotKind(str, Enum):
    class_ = "class"
    break_ = "break"
    lunch = "lunch"


class TimeSlot(Base):
    __tablename__ = "time_slots"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    label: Mapped[str] = mapped_column(String(50), nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    kind: Mapped[SlotKind] = mapped_column(
        SAEnum(SlotKind, name="slot_kind", values_callable=lambda kinds: [item.value for item in kinds]),
        nullable=False,
        default=SlotKind.class_,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    @property
    def is_night(self) -> bool:
        return int(self.start_time.split(":")[0]) >= NIGHT_SHIFT_START_HOUR
