import os
import pathlib
import sys
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SKIP_DB_INIT"] = "1"
os.environ["APP_TIMEZONE"] = "UTC"

import models  # noqa: E402,F401
from database import Base, get_db  # noqa: E402
from dates import current_time  # noqa: E402
from main import app  # noqa: E402
from models.user import User  # noqa: E402


class Clock:
    """Stand-in for the request clock; tests move `now` between calls."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, year, month, day, hour=12):
        self.now = datetime(year, month, day, hour, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def clock():
    return Clock(datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def client(session_factory, clock):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[current_time] = clock
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(name=None, **fields):
        counter["n"] += 1
        name = name or f"user{counter['n']}"
        user = User(name=name, email=f"{name.lower()}@example.com", hashed_password="x", **fields)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def register(client):
    def _register(name="Alice", email=None, password="secret123"):
        res = client.post("/api/v1/auth/register", json={
            "name": name,
            "email": email or f"{name.lower()}@example.com",
            "password": password,
        })
        assert res.status_code == 201, res.text
        data = res.json()["data"]
        return data["user"]["id"], {"Authorization": f"Bearer {data['token']}"}

    return _register
