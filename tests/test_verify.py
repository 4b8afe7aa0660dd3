"""Tests for post-migration schema verification."""

from __future__ import annotations

import pytest
from sqlalchemy import text
from sqlalchemy.orm import Session

from sermon_planner.migrations import get_head_revision
from sermon_planner.schema.verify import REQUIRED_TABLES, SchemaReport, TableStats, verify_schema


def test_required_tables_in_dependency_order() -> None:
    order = {name: i for i, name in enumerate(REQUIRED_TABLES)}
    assert order["sermons"] < order["sermon_themes"]
    assert order["themes"] < order["sermon_themes"]
    assert order["sermon_series"] < order["series_themes"]
    assert order["themes"] < order["series_themes"]
    for child in ("media_resources", "collaborators", "activity_logs", "export_history"):
        assert order["workspaces"] < order[child]
        assert order["users"] < order[child]
    assert order["sermons"] < order["media_resources"]
    assert order["sermon_series"] < order["collaborators"]


def test_report_ok_requires_revision_and_all_tables() -> None:
    assert SchemaReport(revision="abc").ok
    assert not SchemaReport(revision=None).ok
    assert not SchemaReport(revision="abc", missing_tables=["sermon_themes"]).ok


@pytest.mark.integration
def test_verify_schema_on_migrated_database(db: Session) -> None:
    report = verify_schema(db.connection())
    assert report.ok
    assert report.revision == get_head_revision()
    assert report.missing_tables == []
    assert [t.name for t in report.tables] == list(REQUIRED_TABLES)
    # 11 updated_at triggers, 4 activity-log triggers, theme usage and series count
    assert report.trigger_count >= 17

    stats = {t.name: t for t in report.tables}
    assert isinstance(stats["sermon_themes"], TableStats)
    # 4 indexes plus the index backing the pair unique constraint
    assert stats["sermon_themes"].index_count >= 5
    assert stats["series_themes"].index_count >= 5


@pytest.mark.integration
def test_verify_schema_counts_rows(db: Session, sermon_id, theme_id) -> None:
    before = {t.name: t.row_count for t in verify_schema(db.connection()).tables}
    db.execute(
        text("INSERT INTO sermon_themes (sermon_id, theme_id) VALUES (:s, :t)"),
        {"s": sermon_id, "t": theme_id},
    )
    after = {t.name: t.row_count for t in verify_schema(db.connection()).tables}
    assert after["sermon_themes"] == before["sermon_themes"] + 1


@pytest.mark.integration
def test_verify_schema_reports_missing_table(db: Session) -> None:
    db.execute(text("DROP TABLE series_themes"))
    report = verify_schema(db.connection())
    assert not report.ok
    assert report.missing_tables == ["series_themes"]
    assert "series_themes" not in [t.name for t in report.tables]
