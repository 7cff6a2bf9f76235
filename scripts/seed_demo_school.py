"""Seed a demo school: accounts, classes, subjects, teachers and a first schedule.

Run:
  PYTHONPATH=backend python scripts/seed_demo_school.py
"""

from __future__ import annotations

import os
from datetime import date
from typing import Iterable

from sqlalchemy import select

from app.core.security import get_password_hash
from app.db.bootstrap import ensure_schema, seed_reference_data
from app.db.session import SessionLocal, engine
from app.models.professional import TEACHER_KIND, Professional
from app.models.resource import Resource
from app.models.school_class import SchoolClass
from app.models.subject import Subject
from app.models.time_slot import SlotKind, TimeSlot
from app.models.user import User, UserRole
from app.services.allocation_store import AllocationRecord, AllocationStore

DEFAULT_PASSWORD = os.getenv("DEMO_PASSWORD", "DemoPass123!")
DEMO_YEAR = os.getenv("DEMO_YEAR", str(date.today().year))

TEACHERS = (
    ("Ana Souza", "Ana"),
    ("Bruno Lima", None),
    ("Carla Mendes", "Profª Carla"),
)
CLASSES = (("7º Ano", "A"), ("7º Ano", "B"), ("1ª Série", "Enfermagem"))
SUBJECTS = ("Matemática", "Português", "Ciências", "História")
RESOURCES = (
    ("Laboratório de Informática", "lab", "30 computadores"),
    ("Projetor 01", "projector", "Sala dos professores"),
    ("Auditório", "auditorium", "120 lugares"),
)


def _env_email(key: str, default: str) -> str:
    value = os.getenv(key, "").strip()
    return value or default


DEMO_ACCOUNTS = {
    "admin": ("Demo Admin", _env_email("DEMO_ADMIN_EMAIL", "admin.demo@schooldesk.local"), UserRole.admin),
    "coordinator": (
        "Demo Coordenação",
        _env_email("DEMO_COORDINATOR_EMAIL", "coord.demo@schooldesk.local"),
        UserRole.coordinator,
    ),
    "teacher": ("Ana Souza", _env_email("DEMO_TEACHER_EMAIL", "ana.demo@schooldesk.local"), UserRole.teacher),
}


def _get_or_create(session, model, where, **values):
    existing = session.execute(select(model).where(*where)).scalar_one_or_none()
    if existing is not None:
        return existing
    record = model(**values)
    session.add(record)
    session.flush()
    return record


def _seed_matrix() -> dict[str, list]:
    with SessionLocal() as session:
        teachers = [
            _get_or_create(session, Professional, [Professional.name == name], name=name, alias=alias, kind=TEACHER_KIND)
            for name, alias in TEACHERS
        ]
        classes = [
            _get_or_create(
                session,
                SchoolClass,
                [SchoolClass.series == series, SchoolClass.name == name],
                series=series,
                name=name,
            )
            for series, name in CLASSES
        ]
        subjects = [_get_or_create(session, Subject, [Subject.name == name], name=name) for name in SUBJECTS]
        for name, kind, details in RESOURCES:
            _get_or_create(session, Resource, [Resource.name == name], name=name, type=kind, details=details)
        session.commit()
        return {
            "teachers": [item.id for item in teachers],
            "classes": [item.id for item in classes],
            "subjects": [item.id for item in subjects],
        }


def _upsert_user(name: str, email: str, role: UserRole, professional_id: str | None) -> User:
    with SessionLocal() as session:
        existing = session.execute(select(User).where(User.email == email)).scalar_one_or_none()
        if existing is None:
            existing = User(
                name=name,
                email=email,
                hashed_password=get_password_hash(DEFAULT_PASSWORD),
                role=role,
                professional_id=professional_id,
                is_active=True,
            )
            session.add(existing)
        else:
            existing.name = name
            existing.role = role
            existing.professional_id = professional_id
            existing.is_active = True
        session.commit()
        session.refresh(existing)
        return existing


def _seed_schedule(ids: dict[str, list]) -> int:
    with SessionLocal() as session:
        lesson_slots = list(
            session.execute(
                select(TimeSlot).where(TimeSlot.kind == SlotKind.class_).order_by(TimeSlot.position.asc())
            ).scalars()
        )[:3]
        store = AllocationStore(session)
        store.refresh(DEMO_YEAR)
        if store.allocations:
            return 0
        written = 0
        for offset, slot in enumerate(lesson_slots):
            store.add(
                AllocationRecord(
                    id=None,
                    class_id=ids["classes"][0],
                    subject_id=ids["subjects"][offset % len(ids["subjects"])],
                    time_slot_id=slot.id,
                    day_of_week="Monday",
                    year=DEMO_YEAR,
                    semester="1",
                    teacher_id=ids["teachers"][offset % len(ids["teachers"])],
                )
            )
            written += 1
        return written


def _print_accounts(items: Iterable[tuple[str, User]]) -> None:
    print("\nDemo accounts ready:")
    for label, user in items:
        print(f"  - {label}: {user.email} | role={user.role.value}")
    print(f"\nPassword for all demo accounts: {DEFAULT_PASSWORD}")


def main() -> None:
    ensure_schema(engine)
    with SessionLocal() as session:
        seed_reference_data(session)

    ids = _seed_matrix()
    users = {
        key: _upsert_user(name, email, role, ids["teachers"][0] if role == UserRole.teacher else None)
        for key, (name, email, role) in DEMO_ACCOUNTS.items()
    }
    written = _seed_schedule(ids)
    print(f"Seeded {written} class allocations for {DEMO_YEAR}")
    _print_accounts(users.items())


if __name__ == "__main__":
    main()
