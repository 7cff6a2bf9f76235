import uuid

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


def class_display_name(series: str | None, name: str | None) -> str:
    return " ".join(part for part in (series, name) if part)


class SchoolClass(Base):
    __tablename__ = "school_classes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    series: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    __table_args__ = (UniqueConstraint("series", "name", name="uq_school_classes_series_name"),)

    @property
    def display_name(self) -> str:
        return class_display_name(self.series, self.name)
