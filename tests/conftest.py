"""
Pytest configuration and fixtures.
"""

from __future__ import annotations

import os
import uuid
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text
from sqlalchemy.orm import Session

# Force test DB when pytest runs; don't inherit from .env (avoids polluting sermon_planner_dev)
_test_user = os.getenv("PGUSER") or os.getenv("USER") or "postgres"
_test_url = f"postgresql+psycopg://{_test_user}@localhost:5432/sermon_planner_test"
os.environ["DATABASE_URL"] = _test_url
os.environ["UUID_STRATEGY"] = "builtin"

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


@pytest.fixture
def client() -> TestClient:
    """FastAPI test client."""
    from sermon_planner.main import app

    return TestClient(app)


@pytest.fixture(autouse=True)
def _clear_loader_caches() -> None:
    """Clear cached settings and sample data before and after each test.

    Tests that patch the environment or point the loader at a temp file must
    not leak their cached result into later tests.
    """
    from sermon_planner.config import get_settings
    from sermon_planner.seeds.loader import load_sample_data

    get_settings.cache_clear()
    load_sample_data.cache_clear()
    yield
    get_settings.cache_clear()
    load_sample_data.cache_clear()


@pytest.fixture(scope="session")
def _ensure_migrations() -> None:
    """Create test DB if needed and run migrations once per test session."""
    import subprocess
    import sys

    from sqlalchemy import create_engine
    from sqlalchemy.exc import ProgrammingError

    # Create test database if it doesn't exist (CREATE DATABASE requires autocommit)
    _create_db_url = f"postgresql+psycopg://{_test_user}@localhost:5432/postgres"
    engine = create_engine(_create_db_url)
    try:
        with engine.connect().execution_options(isolation_level="AUTOCOMMIT") as conn:
            exists = conn.execute(
                text("SELECT 1 FROM pg_database WHERE datname = 'sermon_planner_test'")
            ).scalar()
            if not exists:
                conn.execute(text("CREATE DATABASE sermon_planner_test"))
    except ProgrammingError:
        pass  # lost a race with another session creating it
    finally:
        engine.dispose()

    result = subprocess.run(
        [sys.executable, "-m", "alembic", "upgrade", "head"],
        cwd=PROJECT_ROOT,
        capture_output=True,
        text=True,
        timeout=60,
        env=os.environ.copy(),
    )
    assert result.returncode == 0, f"alembic upgrade head failed: {result.stderr}"


@pytest.fixture
def db(_ensure_migrations: None) -> Session:
    """Database session for schema tests. All changes are rolled back after each test."""
    from sermon_planner.db import engine

    connection = engine.connect()
    transaction = connection.begin()
    session = Session(
        bind=connection,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


def _insert(db: Session, sql: str, **params) -> uuid.UUID:
    return db.execute(text(sql + " RETURNING id"), params).scalar_one()


# Parent rows for the join tables. created_by on workspaces is a plain uuid
# (users reference workspaces), so it is filled with a throwaway value first.


@pytest.fixture
def organization_id(db: Session) -> uuid.UUID:
    suffix = uuid.uuid4().hex[:8]
    return _insert(
        db,
        "INSERT INTO organizations (name, subdomain) VALUES (:name, :subdomain)",
        name=f"Test Church {suffix}",
        subdomain=f"test-{suffix}",
    )


@pytest.fixture
def workspace_id(db: Session, organization_id: uuid.UUID) -> uuid.UUID:
    return _insert(
        db,
        "INSERT INTO workspaces (organization_id, name, church_name, planning_year, "
        "start_date, end_date, created_by) VALUES (:org, '2025 Planning', 'Test Church', "
        "2025, '2025-01-01', '2025-12-31', :created_by)",
        org=organization_id,
        created_by=uuid.uuid4(),
    )


@pytest.fixture
def user_id(db: Session, organization_id: uuid.UUID, workspace_id: uuid.UUID) -> uuid.UUID:
    suffix = uuid.uuid4().hex[:8]
    return _insert(
        db,
        "INSERT INTO users (firebase_uid, organization_id, default_workspace_id, email, "
        "display_name) VALUES (:uid, :org, :ws, :email, 'Test Pastor')",
        uid=f"uid-{suffix}",
        org=organization_id,
        ws=workspace_id,
        email=f"pastor-{suffix}@example.org",
    )


@pytest.fixture
def make_theme(db: Session, workspace_id: uuid.UUID, user_id: uuid.UUID):
    """Factory inserting a theme in the test workspace; returns its id."""

    def _make(name: str | None = None) -> uuid.UUID:
        return _insert(
            db,
            "INSERT INTO themes (workspace_id, name, created_by) VALUES (:ws, :name, :user)",
            ws=workspace_id,
            name=name or f"Theme {uuid.uuid4().hex[:8]}",
            user=user_id,
        )

    return _make


@pytest.fixture
def theme_id(make_theme) -> uuid.UUID:
    return make_theme("Faith")


@pytest.fixture
def series_id(db: Session, workspace_id: uuid.UUID, user_id: uuid.UUID) -> uuid.UUID:
    return _insert(
        db,
        "INSERT INTO sermon_series (workspace_id, title, start_date, created_by) "
        "VALUES (:ws, 'Foundations', '2025-01-05', :user)",
        ws=workspace_id,
        user=user_id,
    )


@pytest.fixture
def make_sermon(db: Session, workspace_id: uuid.UUID, user_id: uuid.UUID):
    """Factory inserting a sermon; returns its id."""

    def _make(service_date: date = date(2025, 1, 5), series: uuid.UUID | None = None) -> uuid.UUID:
        return _insert(
            db,
            "INSERT INTO sermons (workspace_id, series_id, speaker_id, title, service_date, "
            "created_by) VALUES (:ws, :series, :user, :title, :service_date, :user)",
            ws=workspace_id,
            series=series,
            user=user_id,
            title=f"Sermon {uuid.uuid4().hex[:8]}",
            service_date=service_date,
        )

    return _make


@pytest.fixture
def sermon_id(make_sermon) -> uuid.UUID:
    return make_sermon()


@pytest.fixture
def make_resource(db: Session, workspace_id: uuid.UUID, user_id: uuid.UUID):
    """Factory inserting a media resource stored at a file path; returns its id."""

    def _make(
        sermon: uuid.UUID | None = None,
        series: uuid.UUID | None = None,
        parent: uuid.UUID | None = None,
    ) -> uuid.UUID:
        return _insert(
            db,
            "INSERT INTO media_resources (workspace_id, sermon_id, series_id, parent_resource_id, "
            "title, resource_type, file_path, uploaded_by) VALUES (:ws, :sermon, :series, :parent, "
            ":title, 'slides', :path, :user)",
            ws=workspace_id,
            sermon=sermon,
            series=series,
            parent=parent,
            title=f"Slides {uuid.uuid4().hex[:8]}",
            path=f"/uploads/{uuid.uuid4().hex}.pptx",
            user=user_id,
        )

    return _make
