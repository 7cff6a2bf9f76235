import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.db.base import Base
from app.models.professional import Professional
from app.models.school_class import SchoolClass


class Student(Base):
    __tablename__ = "students"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    enrollment_id: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    class_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("school_classes.id", ondelete="SET NULL"), nullable=True
    )
    pdt_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("professionals.id", ondelete="SET NULL"), nullable=True
    )
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="Aguardando Laudo")
    photo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    diagnosis: Mapped[str | None] = mapped_column(String(500), nullable=True)
    pcd_profile: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    attachments: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
    created_by: Mapped[str | None] = mapped_column(String(200), nullable=True)
    created_by_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(200), nullable=True)
    updated_by_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())

    school_class: Mapped[SchoolClass | None] = relationship(lazy="joined")
    pdt: Mapped[Professional | None] = relationship(lazy="joined")
