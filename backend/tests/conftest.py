import os
from datetime import date
from types import SimpleNamespace

# The app builds its engine at import time; keep it off the production database.
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.api.deps import get_db
from app.db.base import Base
from app.main import app
from app.models.professional import Professional
from app.models.resource import Resource
from app.models.school_class import SchoolClass
from app.models.subject import Subject
from app.models.time_slot import SlotKind, TimeSlot

PASSWORD = "password123"


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture()
def school(db_session):
    """Two teachers, classes 7A and 7B, one subject, three lesson slots and a lab."""
    ana = Professional(name="Ana")
    bruno = Professional(name="Bruno Lima", alias="Prof. Bruno")
    class_7a = SchoolClass(series="", name="7A")
    class_7b = SchoolClass(series="", name="7B")
    math = Subject(name="Matemática")
    slot_1 = TimeSlot(label="1ª", start_time="08:00", end_time="08:50", kind=SlotKind.class_, position=1)
    slot_2 = TimeSlot(label="2ª", start_time="08:50", end_time="09:40", kind=SlotKind.class_, position=2)
    slot_3 = TimeSlot(label="3ª", start_time="10:00", end_time="10:50", kind=SlotKind.class_, position=4)
    lab = Resource(name="Lab1", type="lab", details="Laboratório de ciências")
    db_session.add_all([ana, bruno, class_7a, class_7b, math, slot_1, slot_2, slot_3, lab])
    db_session.commit()
    return SimpleNamespace(
        ana=ana,
        bruno=bruno,
        class_7a=class_7a,
        class_7b=class_7b,
        math=math,
        slot_1=slot_1,
        slot_2=slot_2,
        slot_3=slot_3,
        lab=lab,
    )


def register_user(client, payload):
    response = client.post("/api/auth/register", json=payload)
    assert response.status_code == 201
    return response.json()


def login_user(client, email, password, role):
    response = client.post(
        "/api/auth/login",
        json={"email": email, "password": password, "role": role},
    )
    assert response.status_code == 200
    return response.json()["access_token"]


def auth_headers(client, role, *, email=None, professional_id=None, name=None):
    email = email or f"{role}@example.com"
    payload = {
        "name": name or f"{role.title()} User",
        "email": email,
        "password": PASSWORD,
        "role": role,
    }
    if professional_id is not None:
        payload["professional_id"] = professional_id
    register_user(client, payload)
    token = login_user(client, email, PASSWORD, role)
    return {"Authorization": f"Bearer {token}"}


def this_monday() -> date:
    today = date.today()
    return date.fromordinal(today.toordinal() - today.weekday())


@pytest.fixture()
def login_as(client):
    """Registers a user with the given role and returns bearer headers for it."""

    def _login(role, **kwargs):
        return auth_headers(client, role, **kwargs)

    return _login


@pytest.fixture()
def monday():
    return this_monday()
