"""Create sermon_themes: sermon <-> theme association with relevance details.

Revision ID: 20250115_0008_sermon_themes
Revises: 20250115_0007_sermons
Create Date: 2025-01-15

Requires sermons and themes. Downgrade is DROP TABLE IF EXISTS and can be
run repeatedly. Nothing stops two rows for one sermon from both having
is_primary_theme = true.

The updated_at and usage-count triggers on this table are created by
20250115_0014_triggers. Dropping the table drops them too, so running
downgrade then upgrade of this revision alone leaves the table without
triggers until the triggers revision is applied again.
"""

from collections.abc import Sequence

from sermon_planner.schema import (
    CheckSpec,
    ColumnSpec,
    IndexSpec,
    TableSpec,
    UniqueSpec,
    foreign_key,
    timestamps,
    uuid_primary_key,
)
from sermon_planner.schema.renderer import create_table, drop_table

revision: str = "20250115_0008_sermon_themes"
down_revision: str | None = "20250115_0007_sermons"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

SERMON_THEMES = TableSpec(
    name="sermon_themes",
    columns=(
        uuid_primary_key(),
        foreign_key("sermon_id", "sermons"),
        foreign_key("theme_id", "themes"),
        ColumnSpec(
            "is_primary_theme",
            "boolean",
            nullable=False,
            default=False,
            comment="Whether this is the primary theme for the sermon",
        ),
        ColumnSpec(
            "relevance_score",
            "integer",
            comment="1-10 score of how relevant this theme is to the sermon",
        ),
        ColumnSpec(
            "connection_notes",
            "text",
            comment="Notes on how this theme connects to the sermon",
        ),
        *timestamps(),
    ),
    checks=(
        CheckSpec(
            "chk_sermon_themes_valid_score",
            "relevance_score IS NULL OR (relevance_score >= 1 AND relevance_score <= 10)",
        ),
    ),
    uniques=(UniqueSpec("unq_sermon_themes_sermon_theme", ("sermon_id", "theme_id")),),
    indexes=(
        IndexSpec("idx_sermon_themes_sermon", ("sermon_id",)),
        IndexSpec("idx_sermon_themes_theme", ("theme_id",)),
        IndexSpec("idx_sermon_themes_primary", ("is_primary_theme",)),
        IndexSpec("idx_sermon_themes_score", ("relevance_score",)),
    ),
)


def upgrade() -> None:
    create_table(SERMON_THEMES)


def downgrade() -> None:
    drop_table(SERMON_THEMES)
