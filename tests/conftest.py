"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown (in-memory SQLite, tables rebuilt per test)
- Seed data: companies c1-c3, users u1/u2/admin, jobs Job1-Job3
- FastAPI test client
- Bearer tokens for each seeded user
"""

import os

# Must be set before the application modules read their settings
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite://")
os.environ.setdefault("BCRYPT_WORK_FACTOR", "4")
os.environ.setdefault("JSON_LOGS", "false")

import re

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobly.core.database import Base, execute, get_db
from jobly.core.security import create_token, get_password_hash
import jobly.models  # noqa: F401  registers the tables on Base.metadata
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ILIKE = re.compile(r"\bILIKE\b", re.IGNORECASE)


@event.listens_for(engine, "connect")
def enable_foreign_keys(dbapi_connection, connection_record):
    """SQLite only enforces foreign keys (and ON DELETE CASCADE) when asked."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@event.listens_for(engine, "before_cursor_execute", retval=True)
def ilike_as_like(conn, cursor, statement, parameters, context, executemany):
    """SQLite has no ILIKE; its LIKE is already case-insensitive for ASCII."""
    return ILIKE.sub("LIKE", statement), parameters


@pytest.fixture
def db_session():
    """
    Create a fresh database session for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def job_ids(db_session):
    """
    Seed companies, users and jobs.

    Returns:
        Ids of Job1, Job2, Job3 in insertion order
    """
    execute(
        db_session,
        """INSERT INTO companies (handle, name, num_employees, description, logo_url)
           VALUES ('c1', 'C1', 1, 'Desc1', 'http://c1.img'),
                  ('c2', 'C2', 2, 'Desc2', 'http://c2.img'),
                  ('c3', 'C3', 3, 'Desc3', 'http://c3.img')""",
    )

    execute(
        db_session,
        """INSERT INTO users (username, password, first_name, last_name, email, is_admin)
           VALUES ('u1', $1, 'U1F', 'U1L', 'user1@user.com', $4),
                  ('u2', $2, 'U2F', 'U2L', 'user2@user.com', $4),
                  ('admin', $3, 'AdminF', 'AdminL', 'admin@admin.com', $5)""",
        [
            get_password_hash("password1"),
            get_password_hash("password2"),
            get_password_hash("adminpass"),
            False,
            True,
        ],
    )

    rows = execute(
        db_session,
        """INSERT INTO jobs (title, salary, equity, company_handle)
           VALUES ('Job1', 50000, 0.01, 'c1'),
                  ('Job2', 60000, 0, 'c1'),
                  ('Job3', 70000, 0.02, 'c2')
           RETURNING id""",
    )
    db_session.commit()

    return sorted(row["id"] for row in rows)


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with overridden database dependency.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def u1_token():
    return create_token({"username": "u1", "isAdmin": False})


@pytest.fixture
def u2_token():
    return create_token({"username": "u2", "isAdmin": False})


@pytest.fixture
def admin_token():
    return create_token({"username": "admin", "isAdmin": True})
