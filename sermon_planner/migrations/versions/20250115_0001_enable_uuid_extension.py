"""Enable the extension that backs UUID primary key defaults.

Revision ID: 20250115_0001_uuid_extension
Revises:
Create Date: 2025-01-15

UUID_STRATEGY=builtin (default) needs nothing on PostgreSQL 13+;
pgcrypto / uuid-ossp install the matching extension.
Downgrade leaves the extension installed: it may predate this schema.
"""

from collections.abc import Sequence

from alembic import op
from sermon_planner.schema.renderer import create_uuid_extension

revision: str = "20250115_0001_uuid_extension"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    create_uuid_extension()


def downgrade() -> None:
    pass
