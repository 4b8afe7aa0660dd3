"""Post-migration verification: required tables, row/index counts, triggers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy import inspect, text
from sqlalchemy.engine import Connection

from sermon_planner.migrations import get_current_revision

logger = logging.getLogger(__name__)

# Dependency order: parents before the tables that reference them
REQUIRED_TABLES: tuple[str, ...] = (
    "organizations",
    "workspaces",
    "users",
    "themes",
    "sermon_series",
    "sermons",
    "sermon_themes",
    "series_themes",
    "media_resources",
    "collaborators",
    "activity_logs",
    "export_history",
)


@dataclass
class TableStats:
    name: str
    row_count: int
    index_count: int


@dataclass
class SchemaReport:
    """Result of :func:`verify_schema`."""

    revision: str | None
    missing_tables: list[str] = field(default_factory=list)
    tables: list[TableStats] = field(default_factory=list)
    trigger_count: int = 0

    @property
    def ok(self) -> bool:
        return self.revision is not None and not self.missing_tables


def verify_schema(connection: Connection, schema: str = "public") -> SchemaReport:
    """Inspect the connected database and report on the required tables."""
    inspector = inspect(connection)
    existing = set(inspector.get_table_names(schema=schema))
    report = SchemaReport(revision=get_current_revision(connection))
    report.missing_tables = [t for t in REQUIRED_TABLES if t not in existing]

    for table in REQUIRED_TABLES:
        if table not in existing:
            continue
        # table names come from REQUIRED_TABLES, never from input
        row_count = connection.execute(text(f'SELECT COUNT(*) FROM "{schema}"."{table}"')).scalar_one()
        index_count = len(inspector.get_indexes(table, schema=schema))
        report.tables.append(TableStats(name=table, row_count=row_count, index_count=index_count))

    report.trigger_count = connection.execute(
        text(
            "SELECT COUNT(DISTINCT trigger_name) FROM information_schema.triggers "
            "WHERE trigger_schema = :schema"
        ),
        {"schema": schema},
    ).scalar_one()

    if report.missing_tables:
        logger.warning("Schema is missing tables: %s", ", ".join(report.missing_tables))
    else:
        logger.info(
            "Schema verified at revision %s (%d tables, %d triggers)",
            report.revision,
            len(report.tables),
            report.trigger_count,
        )
    return report
