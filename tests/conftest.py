# tests/conftest.py

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine, select

from booking.auth import create_access_token, hash_password
from booking.db import get_session, init_db
from booking.main import app
from booking.models import BusinessHours, Service, User

MONDAY = datetime(2030, 1, 7)
TUESDAY = datetime(2030, 1, 8)
SUNDAY = datetime(2030, 1, 6)


def make_hours(**overrides) -> BusinessHours:
    values = {
        "open_time": "09:00",
        "close_time": "17:00",
        "slot_duration_minutes": 60,
        "working_days": [1, 2, 3, 4, 5, 6],
        "break_start": "13:00",
        "break_end": "14:00",
    }
    values.update(overrides)
    return BusinessHours(**values)


def auth_headers(user: User) -> dict:
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine, session):
    init_db(engine)

    def override_get_session():
        return session

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


def _make_user(session, name, email, role):
    user = User(name=name, email=email, password_hash=hash_password("password123"), role=role)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def admin(session):
    return _make_user(session, "Ada Admin", "admin@example.com", "admin")


@pytest.fixture
def customer(session):
    return _make_user(session, "Carl Customer", "carl@example.com", "customer")


@pytest.fixture
def other_customer(session):
    return _make_user(session, "Olga Other", "olga@example.com", "customer")


@pytest.fixture
def services(client, session):
    # client fixture seeds the default catalog
    return session.exec(select(Service).order_by(Service.id)).all()
