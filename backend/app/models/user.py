import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base


class UserRole(str, Enum):
    admin = "admin"
    coordinator = "coordinator"
    teacher = "teacher"
    staff = "staff"


# Roles allowed to manage any resource booking, not just their own.
BOOKING_MANAGER_ROLES = frozenset({UserRole.admin, UserRole.coordinator, UserRole.staff})

# Labels used by the institution session-timeout table.
ROLE_LABELS = {
    UserRole.admin: "Administrador",
    UserRole.coordinator: "Coordenador",
    UserRole.teacher: "Professor",
    UserRole.staff: "Colaborador",
}


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(SAEnum(UserRole, name="user_role"), nullable=False)
    professional_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("professionals.id", ondelete="SET NULL"), nullable=True
    )
    is_active: Mapped[bool] = mapped_column(nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
