"""Insert the sample dataset.

Tables are reflected from the live database, so the seeder always matches
whatever revision the schema is at. Clearing runs in reverse dependency
order; inserting runs in dependency order.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

import sqlalchemy as sa
from sqlalchemy.engine import Connection

from sermon_planner.schema.verify import REQUIRED_TABLES
from sermon_planner.seeds.loader import load_sample_data

logger = logging.getLogger(__name__)


def clear_tables(connection: Connection) -> None:
    """Delete all rows from the schema's tables, children first."""
    metadata = sa.MetaData()
    for name in reversed(REQUIRED_TABLES):
        table = sa.Table(name, metadata, autoload_with=connection)
        result = connection.execute(table.delete())
        logger.debug("Cleared %s (%d rows)", name, result.rowcount)


def _coerce_row(table: sa.Table, row: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in row.items():
        if key not in table.c:
            raise ValueError(f"Sample data column {table.name}.{key} does not exist")
        if isinstance(value, str) and isinstance(table.c[key].type, sa.Uuid):
            value = uuid.UUID(value)
        out[key] = value
    return out


def seed_sample_data(connection: Connection, data: dict[str, Any] | None = None) -> dict[str, int]:
    """Replace table contents with the sample dataset. Returns rows inserted per table.

    Runs on the caller's connection; committing is the caller's job.
    """
    dataset = data if data is not None else load_sample_data()
    clear_tables(connection)

    metadata = sa.MetaData()
    counts: dict[str, int] = {}
    for name in REQUIRED_TABLES:
        rows = dataset.get(name) or []
        if not rows:
            counts[name] = 0
            continue
        table = sa.Table(name, metadata, autoload_with=connection)
        # one statement per row: rows may omit different optional columns
        for row in rows:
            connection.execute(table.insert(), _coerce_row(table, row))
        counts[name] = len(rows)
        logger.info("Seeded %s with %d rows", name, len(rows))
    return counts
