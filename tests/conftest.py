"""
tests/conftest.py — Shared pytest configuration and fixtures.

Sets dummy environment variables BEFORE any app module is imported,
so that pydantic-settings doesn't fail on missing required fields.
"""

import os
from datetime import datetime, timedelta, timezone

import pytest

# ── Set dummy env vars before any app module is imported ─────────────────────
# This runs at collection time, before tests execute.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("QSTASH_TOKEN", "test-token")
os.environ.setdefault("QSTASH_URL", "https://qstash.test")

from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.db.models import Base, ClientStatus, InteractionType  # noqa: E402
from app.engine.models import ClientRecord, Interaction  # noqa: E402

NOW = datetime(2024, 6, 15, 10, 30, tzinfo=timezone.utc)


# ── Engine fixtures ──────────────────────────────────────────────────────────

@pytest.fixture
def now() -> datetime:
    return NOW


def make_record(
    client_id="1",
    name="Ana Torres",
    status=ClientStatus.ACTIVE,
    interactions=0,
    days_since_contact=0,
    days_as_client=200,
    now=NOW,
) -> ClientRecord:
    """Build a snapshot with `interactions` entries and the given ages in days."""
    last = now - timedelta(days=days_since_contact)
    return ClientRecord(
        id=str(client_id),
        name=name,
        phone="+34 600 123 456",
        status=status,
        last_interaction_at=last,
        interactions=tuple(
            Interaction(
                id=f"{client_id}-{i}",
                date=last,
                description=f"Interaction {i}",
                type=InteractionType.CALL,
            )
            for i in range(interactions)
        ),
        created_at=now - timedelta(days=days_as_client),
        updated_at=last,
    )


@pytest.fixture
def record_factory():
    return make_record


# ── In-memory DB fixtures ────────────────────────────────────────────────────

@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def db(db_engine):
    """Provide a fresh in-memory SQLite session for each test."""
    Session = sessionmaker(bind=db_engine, expire_on_commit=False)
    session = Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def api_client(db_engine):
    """FastAPI TestClient whose get_db dependency points at the in-memory DB."""
    from fastapi.testclient import TestClient

    from api.main import app
    from app.db.session import get_db

    Session = sessionmaker(bind=db_engine, autoflush=False, expire_on_commit=False)

    def override_get_db():
        session = Session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()

