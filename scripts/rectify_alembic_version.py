#!/usr/bin/env python3
"""Rectify alembic_version when the DB records a revision missing from the chain.

Use when alembic_version points to a revision that no longer exists in
sermon_planner/migrations/versions/ (for example the triggers revision
before it moved to 0014), causing "Can't locate revision" errors.

Usage:
    python scripts/rectify_alembic_version.py [TARGET_REVISION]

Default TARGET_REVISION is 'head'. The target must be a revision in the
chain, and every table created up to it must already exist; otherwise
nothing is written. This rewrites bookkeeping, not tables.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from sermon_planner.config import get_settings
from sermon_planner.db.session import engine
from sermon_planner.migrations import get_head_revision, tables_at_revision
from sermon_planner.schema.verify import verify_schema

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Point alembic_version at an existing revision")
    parser.add_argument("target", nargs="?", default="head", help="Revision to record (default: head)")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    target = get_head_revision() if args.target.lower() == "head" else args.target
    try:
        expected = tables_at_revision(target)
    except KeyError:
        logger.error("Revision %s is not in the migration chain", target)
        sys.exit(1)

    settings = get_settings()
    print(f"Connecting to {settings.database_url.split('@')[-1] if '@' in settings.database_url else 'DB'}...")

    try:
        with engine.begin() as conn:
            report = verify_schema(conn)
            missing = [t for t in report.missing_tables if t in expected]
            if missing:
                logger.error(
                    "Refusing to record %s: tables %s do not exist", target, ", ".join(missing)
                )
                sys.exit(1)

            print(f"Setting alembic_version to {target} (was {report.revision or 'unset'})")
            result = conn.execute(
                text("UPDATE alembic_version SET version_num = :target"),
                {"target": target},
            )
            if result.rowcount == 0:
                conn.execute(
                    text("INSERT INTO alembic_version (version_num) VALUES (:target)"),
                    {"target": target},
                )
                print("Inserted new alembic_version row.")
            else:
                print(f"Updated alembic_version ({result.rowcount} row(s)).")
    except SQLAlchemyError as e:
        logger.error("Could not rectify alembic_version: %s", e)
        sys.exit(1)

    print("Done. Run: alembic current")


if __name__ == "__main__":
    main()
