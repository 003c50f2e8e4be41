"""
Shared fixtures for the ticket management tests.

Every test gets its own in-memory SQLite database; the application's
get_db and get_settings dependencies are overridden to point at it.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone

# Must be set before app.config is imported anywhere
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.bootstrap import bootstrap
from app.config import Settings, get_settings
from app.database import get_db
from app.main import app

ADMIN_PASSWORD = "s3cret-admin-pass"


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        ENVIRONMENT="test",
        BCRYPT_ROUNDS=4,
        ADMIN_PASSWORD=ADMIN_PASSWORD,
        JWT_SECRET_KEY="test-jwt-secret-key-long-enough-for-hs256",
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture
def bootstrapped_engine(engine, test_settings):
    bootstrap(engine, settings=test_settings)
    return engine


@pytest.fixture
def db_session(bootstrapped_engine):
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=bootstrapped_engine)
    session = SessionLocal()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def client(bootstrapped_engine, test_settings):
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=bootstrapped_engine)

    def override_get_db():
        db = SessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_admin(**overrides) -> dict:
    doc = {"username": "operator", "password_hash": "$2b$04$hash", "role": "admin"}
    doc.update(overrides)
    return doc


def make_customer(**overrides) -> dict:
    doc = {"email": "jane@example.com", "password_hash": "$2b$04$hash", "full_name": "Jane Doe"}
    doc.update(overrides)
    return doc


def make_event(**overrides) -> dict:
    doc = {
        "event_name": "Spring Concert",
        "event_date": datetime(2026, 5, 1, 19, 0, tzinfo=timezone.utc),
        "ticket_limit": 100,
    }
    doc.update(overrides)
    return doc


def make_ticket(**overrides) -> dict:
    doc = {
        "customer_id": 1,
        "event_id": 1,
        "qr_code_data": "QR-0001",
        "payment_status": "pending",
        "check_in_status": "not_checked_in",
    }
    doc.update(overrides)
    return doc


DOCUMENT_FACTORIES = {
    "admins": make_admin,
    "customers": make_customer,
    "events": make_event,
    "tickets": make_ticket,
}
