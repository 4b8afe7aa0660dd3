"""Alembic environment for the schema, plus thin wrappers around its command API.

The revision scripts live in ``versions/`` next to this module and ship with
the package, so the helpers work from an installed wheel as well as from a
checkout. ``alembic.ini`` at the repository root is only needed for the
``alembic`` CLI and its logging config; when it is absent the script
location is set programmatically. Errors propagate to the caller.
"""

from __future__ import annotations

import logging
from pathlib import Path
from types import ModuleType

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from alembic.script.revision import ResolutionError
from alembic.util import CommandError
from sqlalchemy.engine import Connection

from sermon_planner.schema.types import TableSpec

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = MIGRATIONS_DIR.parent.parent
ALEMBIC_INI = PROJECT_ROOT / "alembic.ini"


def get_alembic_config(connection: Connection | None = None, database_url: str | None = None) -> Config:
    """Return an Alembic Config for this project.

    A connection is handed to env.py via ``config.attributes`` so migrations
    run inside the caller's transaction.
    """
    config = Config(str(ALEMBIC_INI)) if ALEMBIC_INI.is_file() else Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    if database_url:
        config.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    if connection is not None:
        config.attributes["connection"] = connection
    return config


def get_head_revision() -> str:
    """Return the head revision of the migration chain."""
    script = ScriptDirectory.from_config(get_alembic_config())
    head = script.get_current_head()
    if head is None:
        raise RuntimeError(f"No migration head found. Check {MIGRATIONS_DIR / 'versions'}.")
    return head


def get_current_revision(connection: Connection) -> str | None:
    """Return the revision recorded in alembic_version, or None for an unmigrated DB."""
    return MigrationContext.configure(connection).get_current_revision()


def upgrade(target: str = "head", connection: Connection | None = None) -> None:
    logger.info("Upgrading schema to %s", target)
    command.upgrade(get_alembic_config(connection), target)


def downgrade(target: str, connection: Connection | None = None) -> None:
    logger.info("Downgrading schema to %s", target)
    command.downgrade(get_alembic_config(connection), target)


def load_revision_module(revision: str) -> ModuleType:
    """Return the imported migration module for a revision id.

    Raises KeyError for an id that is not in the chain.
    """
    script = ScriptDirectory.from_config(get_alembic_config())
    try:
        rev = script.get_revision(revision)
    except (CommandError, ResolutionError) as exc:
        raise KeyError(f"Unknown revision {revision!r}") from exc
    if rev is None:
        raise KeyError(f"Unknown revision {revision!r}")
    return rev.module


def tables_at_revision(revision: str) -> set[str]:
    """Names of the tables created by ``revision`` and every revision below it.

    Raises KeyError for an id that is not in the chain.
    """
    load_revision_module(revision)
    script = ScriptDirectory.from_config(get_alembic_config())
    return {
        value.name
        for rev in script.iterate_revisions(revision, "base")
        for value in vars(rev.module).values()
        if isinstance(value, TableSpec)
    }
