"""Set up the Sermon Planner database: migrate, optionally seed, verify.

Usage:
    python -m sermon_planner.scripts.setup_database [--seed] [--target REVISION]
"""

from __future__ import annotations

import argparse
import logging
import sys

from sqlalchemy import text
from sqlalchemy.exc import ProgrammingError, SQLAlchemyError

from sermon_planner import migrations
from sermon_planner.config import get_settings
from sermon_planner.db.session import check_db_connection, engine
from sermon_planner.schema.verify import SchemaReport, verify_schema
from sermon_planner.seeds import seed_sample_data

logger = logging.getLogger(__name__)

TROUBLESHOOTING = """Troubleshooting:
  1. Ensure PostgreSQL is running
  2. Check DATABASE_URL (or PGHOST/PGPORT/PGUSER/PGDATABASE) in .env
  3. Verify the database user can create tables and extensions
  4. Check that the database exists"""


def ensure_uuid_extension() -> None:
    """Create the configured UUID extension up front; warn instead of failing on privileges."""
    extension = get_settings().uuid_strategy.extension
    if extension is None:
        return
    try:
        with engine.begin() as conn:
            conn.execute(text(f'CREATE EXTENSION IF NOT EXISTS "{extension}"'))
        logger.info("Extension %s ready", extension)
    except ProgrammingError as e:
        logger.warning(
            "Could not create extension %s (may require superuser privileges): %s", extension, e
        )


def print_report(report: SchemaReport) -> None:
    print(f"Schema revision: {report.revision or '(none)'}")
    if report.missing_tables:
        print("Missing tables:")
        for name in report.missing_tables:
            print(f"  - {name}")
    else:
        print(f"All {len(report.tables)} required tables exist")
    for stats in report.tables:
        print(f"  - {stats.name}: {stats.row_count} rows, {stats.index_count} indexes")
    print(f"Triggers: {report.trigger_count}")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Set up the Sermon Planner database")
    parser.add_argument("--seed", "-s", action="store_true", help="Load sample data after migrating")
    parser.add_argument("--target", default="head", help="Alembic revision to upgrade to (default: head)")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        check_db_connection()
        logger.info("Database connection verified")

        ensure_uuid_extension()
        migrations.upgrade(args.target)

        if args.seed:
            with engine.begin() as conn:
                counts = seed_sample_data(conn)
            print("Seeded sample data: " + ", ".join(f"{t}={n}" for t, n in counts.items()))

        with engine.connect() as conn:
            report = verify_schema(conn)
    except SQLAlchemyError as e:
        logger.error("Database setup failed: %s", e)
        print(TROUBLESHOOTING)
        sys.exit(1)

    print_report(report)
    if not report.ok:
        sys.exit(1)
    if not args.seed:
        print("To populate with sample data, run: python -m sermon_planner.scripts.setup_database --seed")


if __name__ == "__main__":
    main()
