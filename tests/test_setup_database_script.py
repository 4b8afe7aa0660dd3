"""Tests for the setup_database CLI (database calls patched)."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError, ProgrammingError

from sermon_planner.schema.verify import SchemaReport, TableStats
from sermon_planner.scripts import setup_database

MODULE = "sermon_planner.scripts.setup_database"


def _ok_report() -> SchemaReport:
    return SchemaReport(
        revision="20250115_0014_triggers",
        tables=[TableStats(name="sermon_themes", row_count=0, index_count=5)],
        trigger_count=17,
    )


@pytest.fixture
def mocks():
    """Patch every database touchpoint of the script."""
    with (
        patch(f"{MODULE}.check_db_connection") as check,
        patch(f"{MODULE}.ensure_uuid_extension") as extension,
        patch(f"{MODULE}.migrations.upgrade") as upgrade,
        patch(f"{MODULE}.seed_sample_data", return_value={"sermon_themes": 4}) as seed,
        patch(f"{MODULE}.verify_schema", return_value=_ok_report()) as verify,
        patch(f"{MODULE}.engine") as engine,
    ):
        yield MagicMock(
            check=check, extension=extension, upgrade=upgrade, seed=seed, verify=verify, engine=engine
        )


def test_main_migrates_and_verifies(mocks, capsys: pytest.CaptureFixture[str]) -> None:
    setup_database.main([])

    mocks.check.assert_called_once()
    mocks.extension.assert_called_once()
    mocks.upgrade.assert_called_once_with("head")
    mocks.seed.assert_not_called()
    out = capsys.readouterr().out
    assert "Schema revision: 20250115_0014_triggers" in out
    assert "sermon_themes: 0 rows, 5 indexes" in out
    assert "--seed" in out


def test_main_seeds_when_requested(mocks, capsys: pytest.CaptureFixture[str]) -> None:
    setup_database.main(["--seed", "--target", "20250115_0009_series_themes"])

    mocks.upgrade.assert_called_once_with("20250115_0009_series_themes")
    mocks.seed.assert_called_once()
    assert "Seeded sample data: sermon_themes=4" in capsys.readouterr().out


def test_main_exits_when_tables_missing(mocks) -> None:
    mocks.verify.return_value = SchemaReport(revision="x", missing_tables=["series_themes"])
    with pytest.raises(SystemExit) as exc_info:
        setup_database.main([])
    assert exc_info.value.code == 1


def test_main_prints_troubleshooting_on_db_error(mocks, capsys: pytest.CaptureFixture[str]) -> None:
    mocks.check.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))
    with pytest.raises(SystemExit) as exc_info:
        setup_database.main([])
    assert exc_info.value.code == 1
    assert "Troubleshooting" in capsys.readouterr().out
    mocks.upgrade.assert_not_called()


def test_ensure_uuid_extension_skipped_for_builtin(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("UUID_STRATEGY", "builtin")
    with patch(f"{MODULE}.engine") as engine:
        setup_database.ensure_uuid_extension()
    engine.begin.assert_not_called()


def test_ensure_uuid_extension_warns_without_privileges(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("UUID_STRATEGY", "uuid-ossp")
    with patch(f"{MODULE}.engine") as engine:
        engine.begin.side_effect = ProgrammingError("CREATE EXTENSION", {}, Exception("permission denied"))
        setup_database.ensure_uuid_extension()
    engine.begin.assert_called_once()
