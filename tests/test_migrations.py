"""Alembic migration tests.

Revision modules are run directly under ``Operations.context`` on a
connection whose transaction is rolled back afterwards; PostgreSQL DDL is
transactional, so the migrated test database is left untouched.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from alembic import command
from alembic.operations import Operations
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import inspect, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import ProgrammingError

import sermon_planner
from sermon_planner import migrations
from sermon_planner.schema.verify import REQUIRED_TABLES

SERMON_THEMES_REV = "20250115_0008_sermon_themes"
SERIES_THEMES_REV = "20250115_0009_series_themes"
TRIGGERS_REV = "20250115_0014_triggers"
EXPECTED_CHAIN = [
    "20250115_0001_uuid_extension",
    "20250115_0002_organizations",
    "20250115_0003_workspaces",
    "20250115_0004_users",
    "20250115_0005_themes",
    "20250115_0006_sermon_series",
    "20250115_0007_sermons",
    SERMON_THEMES_REV,
    SERIES_THEMES_REV,
    "20250115_0010_media_resources",
    "20250115_0011_collaborators",
    "20250115_0012_activity_logs",
    "20250115_0013_export_history",
    TRIGGERS_REV,
]
# Revisions whose tables reference sermons or sermon_series, newest first
DEPENDENT_REVS = ("20250115_0011_collaborators", "20250115_0010_media_resources")
# Revisions that no other table references, with the table each creates
TABLE_REVS = [
    (SERMON_THEMES_REV, "sermon_themes"),
    (SERIES_THEMES_REV, "series_themes"),
    ("20250115_0010_media_resources", "media_resources"),
    ("20250115_0011_collaborators", "collaborators"),
    ("20250115_0012_activity_logs", "activity_logs"),
    ("20250115_0013_export_history", "export_history"),
]


@pytest.fixture
def conn(_ensure_migrations: None) -> Connection:
    """Connection inside a transaction that is always rolled back."""
    from sermon_planner.db import engine

    connection = engine.connect()
    transaction = connection.begin()
    try:
        yield connection
    finally:
        transaction.rollback()
        connection.close()


def _run(connection: Connection, revision: str, direction: str) -> None:
    module = migrations.load_revision_module(revision)
    with Operations.context(MigrationContext.configure(connection)):
        getattr(module, direction)()


def _tables(connection: Connection) -> set[str]:
    return set(inspect(connection).get_table_names())


def _triggers(connection: Connection, table: str) -> set[str]:
    return set(
        connection.execute(
            text("SELECT trigger_name FROM information_schema.triggers WHERE event_object_table = :t"),
            {"t": table},
        ).scalars()
    )


def _structure(connection: Connection, table: str) -> dict:
    inspector = inspect(connection)
    return {
        "columns": [
            (c["name"], str(c["type"]), c["nullable"], str(c["default"]))
            for c in inspector.get_columns(table)
        ],
        "pk": inspector.get_pk_constraint(table)["constrained_columns"],
        "fks": sorted(
            (
                fk["name"],
                tuple(fk["constrained_columns"]),
                fk["referred_table"],
                fk["options"].get("ondelete"),
                fk["options"].get("onupdate"),
            )
            for fk in inspector.get_foreign_keys(table)
        ),
        "uniques": sorted((u["name"], tuple(u["column_names"])) for u in inspector.get_unique_constraints(table)),
        "checks": sorted((c["name"], c["sqltext"]) for c in inspector.get_check_constraints(table)),
        "indexes": sorted((i["name"], tuple(i["column_names"])) for i in inspector.get_indexes(table)),
    }


# ---------------------------------------------------------------------------
# Revision chain (no database)
# ---------------------------------------------------------------------------


def test_revision_chain_is_linear() -> None:
    script = ScriptDirectory.from_config(migrations.get_alembic_config())
    chain = [rev.revision for rev in script.walk_revisions("base", "heads")]
    assert list(reversed(chain)) == EXPECTED_CHAIN
    assert migrations.get_head_revision() == EXPECTED_CHAIN[-1]


def test_revision_ids_fit_alembic_version_column() -> None:
    """alembic_version.version_num is VARCHAR(32)."""
    for revision in EXPECTED_CHAIN:
        assert len(revision) <= 32, revision


@pytest.mark.parametrize("revision", ["nope", "20250115"])
def test_load_revision_module_unknown_revision(revision: str) -> None:
    """Unknown and ambiguous ids both surface as KeyError."""
    with pytest.raises(KeyError, match="Unknown revision"):
        migrations.load_revision_module(revision)


def test_load_revision_module_returns_migration() -> None:
    module = migrations.load_revision_module(SERMON_THEMES_REV)
    assert module.revision == SERMON_THEMES_REV
    assert callable(module.upgrade)
    assert callable(module.downgrade)


def test_alembic_config_uses_packaged_scripts() -> None:
    location = Path(migrations.get_alembic_config().get_main_option("script_location"))
    assert location == migrations.MIGRATIONS_DIR
    assert location.parent == Path(sermon_planner.__file__).resolve().parent
    assert (location / "env.py").is_file()
    assert (location / "script.py.mako").is_file()


def test_alembic_config_works_without_ini_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """An installed package has no alembic.ini beside it."""
    monkeypatch.setattr(migrations, "ALEMBIC_INI", tmp_path / "alembic.ini")
    config = migrations.get_alembic_config()
    assert config.config_file_name is None
    assert migrations.get_head_revision() == TRIGGERS_REV


def test_offline_upgrade_emits_join_table_ddl(capsys: pytest.CaptureFixture[str]) -> None:
    """alembic upgrade --sql renders the whole chain without a database."""
    command.upgrade(migrations.get_alembic_config(), "head", sql=True)
    out = capsys.readouterr().out
    assert "CREATE TABLE sermon_themes" in out
    assert "CREATE TABLE series_themes" in out
    assert "CONSTRAINT unq_sermon_themes_sermon_theme UNIQUE (sermon_id, theme_id)" in out
    assert "CREATE INDEX idx_series_themes_emphasis ON series_themes (emphasis_level)" in out
    assert "CREATE TRIGGER trigger_sermon_themes_update_usage" in out
    for table in ("media_resources", "collaborators", "activity_logs", "export_history"):
        assert f"CREATE TABLE {table}" in out
    assert "CREATE OR REPLACE FUNCTION log_activity()" in out
    assert "CREATE TRIGGER trigger_media_resources_activity_log" in out
    assert out.index("CREATE TABLE activity_logs") < out.index("CREATE OR REPLACE FUNCTION log_activity()")


def test_offline_downgrade_drops_join_tables(capsys: pytest.CaptureFixture[str]) -> None:
    command.downgrade(migrations.get_alembic_config(), f"{SERIES_THEMES_REV}:base", sql=True)
    out = capsys.readouterr().out
    assert "DROP TABLE IF EXISTS series_themes" in out
    assert "DROP TABLE IF EXISTS sermon_themes" in out
    assert out.index("DROP TABLE IF EXISTS series_themes") < out.index("DROP TABLE IF EXISTS sermons")


# ---------------------------------------------------------------------------
# Up / down contract
# ---------------------------------------------------------------------------


@pytest.mark.integration
@pytest.mark.parametrize(("revision", "table"), TABLE_REVS)
def test_down_then_up_restores_structure(conn: Connection, revision: str, table: str) -> None:
    before = _structure(conn, table)

    _run(conn, revision, "downgrade")
    assert table not in _tables(conn)

    _run(conn, revision, "upgrade")
    assert table in _tables(conn)
    assert _structure(conn, table) == before


@pytest.mark.integration
@pytest.mark.parametrize(("revision", "table"), TABLE_REVS)
def test_down_is_idempotent(conn: Connection, revision: str, table: str) -> None:
    """Running down on an already-dropped table is a no-op, not an error."""
    _run(conn, revision, "downgrade")
    _run(conn, revision, "downgrade")
    assert table not in _tables(conn)


@pytest.mark.integration
def test_down_then_up_at_head_needs_triggers_revision_again(conn: Connection) -> None:
    """Triggers on a join table belong to the triggers revision, not to the table's own."""
    attached = {"trigger_sermon_themes_updated_at", "trigger_sermon_themes_update_usage"}
    assert attached <= _triggers(conn, "sermon_themes")

    _run(conn, SERMON_THEMES_REV, "downgrade")
    _run(conn, SERMON_THEMES_REV, "upgrade")
    assert _triggers(conn, "sermon_themes") == set()

    _run(conn, TRIGGERS_REV, "upgrade")
    assert attached <= _triggers(conn, "sermon_themes")


@pytest.mark.integration
@pytest.mark.parametrize("revision", [SERMON_THEMES_REV, SERIES_THEMES_REV])
def test_up_fails_when_table_exists(conn: Connection, revision: str) -> None:
    with pytest.raises(ProgrammingError, match="already exists"):
        with conn.begin_nested():
            _run(conn, revision, "upgrade")


@pytest.mark.integration
def test_sermon_themes_up_fails_without_parent_tables(conn: Connection) -> None:
    for revision in (*DEPENDENT_REVS, SERIES_THEMES_REV, SERMON_THEMES_REV, "20250115_0007_sermons"):
        _run(conn, revision, "downgrade")
    with pytest.raises(ProgrammingError, match="sermons"):
        with conn.begin_nested():
            _run(conn, SERMON_THEMES_REV, "upgrade")
    assert "sermon_themes" not in _tables(conn)


@pytest.mark.integration
def test_series_themes_up_fails_without_parent_tables(conn: Connection) -> None:
    for revision in (
        *DEPENDENT_REVS,
        SERIES_THEMES_REV,
        SERMON_THEMES_REV,
        "20250115_0007_sermons",
        "20250115_0006_sermon_series",
    ):
        _run(conn, revision, "downgrade")
    with pytest.raises(ProgrammingError, match="sermon_series"):
        with conn.begin_nested():
            _run(conn, SERIES_THEMES_REV, "upgrade")


@pytest.mark.integration
def test_join_tables_can_be_dropped_in_either_order(conn: Connection) -> None:
    """Neither join table depends on the other."""
    _run(conn, SERMON_THEMES_REV, "downgrade")
    assert "series_themes" in _tables(conn)
    _run(conn, SERIES_THEMES_REV, "downgrade")
    assert not {"sermon_themes", "series_themes"} & _tables(conn)


@pytest.mark.integration
def test_command_downgrade_and_upgrade_on_caller_connection(conn: Connection) -> None:
    """migrations.downgrade/upgrade run through env.py on the given connection."""
    assert migrations.get_current_revision(conn) == migrations.get_head_revision()

    migrations.downgrade("20250115_0007_sermons", connection=conn)
    assert migrations.get_current_revision(conn) == "20250115_0007_sermons"
    assert not {"sermon_themes", "series_themes"} & _tables(conn)

    migrations.upgrade("head", connection=conn)
    assert migrations.get_current_revision(conn) == migrations.get_head_revision()
    assert set(REQUIRED_TABLES) <= _tables(conn)
