"""Pytest fixtures: file-backed SQLite database per test, isolated rate limiter."""
from datetime import datetime, timezone, timedelta
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from registrar.database import Base, get_db
from registrar.main import app
from registrar.services.rate_limiter import rate_limiter

# Import all models so they register with Base.metadata
import registrar.models  # noqa: F401


@pytest.fixture(scope="function")
def db_engine(tmp_path):
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )

    # Enable WAL mode for better concurrency
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db(session_factory):
    """Yield a database session, closed after the test."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(session_factory):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    rate_limiter.clear()
    yield
    rate_limiter.clear()


# ---------------------------------------------------------------------------
# Helpers: create collaborator records via the API, return the JSON response dict
# ---------------------------------------------------------------------------
def create_test_user(client: TestClient, name: str = "Test User", username: str = None) -> dict:
    """Helper: POST /api/users and return response JSON."""
    resp = client.post("/api/users/", json={"name": name, "username": username})
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_test_calendar(client: TestClient, owner_id: str, name: str = "Test Calendar") -> dict:
    """Helper: POST /api/calendars and return response JSON."""
    resp = client.post("/api/calendars/", params={"actor_user_id": owner_id}, json={"name": name})
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_test_event(client: TestClient, creator_id: str, calendar_id: str, name: str = "Test Event", **policy) -> dict:
    """Helper: POST /api/events and return response JSON. ``policy`` sets registration flags."""
    start = datetime.now(timezone.utc) + timedelta(days=1)
    payload = {
        "calendar_id": calendar_id,
        "name": name,
        "start_time_utc": start.isoformat(),
        "end_time_utc": (start + timedelta(hours=2)).isoformat(),
        **policy,
    }
    resp = client.post("/api/events/", params={"actor_user_id": creator_id}, json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def setup_event(client: TestClient, **policy):
    """Create an organizer with a calendar and one event. Returns (organizer, event)."""
    organizer = create_test_user(client, name="Organizer")
    calendar = create_test_calendar(client, organizer["user_id"])
    event = create_test_event(client, organizer["user_id"], calendar["calendar_id"], **policy)
    return organizer, event


def as_user(user: dict) -> dict:
    """Query params identifying the acting user."""
    return {"actor_user_id": user["user_id"]}


def rsvp(client: TestClient, event: dict, user: dict, status: str = "going", **fields):
    return client.post(f"/api/rsvps/{event['event_id']}", params=as_user(user), json={"status": status, **fields})
