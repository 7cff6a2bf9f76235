from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base


class InstitutionSettings(Base):
    __tablename__ = "institution_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=1)
    institution_name: Mapped[str] = mapped_column(String(200), nullable=False, default="O NOME DA ESCOLA AQUI")
    logo_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    has_night_shift: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    lunch_color: Mapped[str] = mapped_column(String(20), nullable=False, default="#f97316")
    semantic_colors: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    available_weeks: Mapped[int] = mapped_column(Integer, nullable=False, default=2)
    session_timeouts: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    academic_config: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
