"""Create series_themes: sermon series <-> theme association with emphasis details.

Revision ID: 20250115_0009_series_themes
Revises: 20250115_0008_sermon_themes
Create Date: 2025-01-15

Same shape as sermon_themes, scoped to sermon_series. Downgrade is
DROP TABLE IF EXISTS and can be run repeatedly. As with sermon_themes, the
updated_at trigger comes from 20250115_0014_triggers and is not restored
by re-running this revision alone.
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

revision: str = "20250115_0009_series_themes"
down_revision: str | None = "20250115_0008_sermon_themes"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

SERIES_THEMES = TableSpec(
    name="series_themes",
    columns=(
        uuid_primary_key(),
        foreign_key("series_id", "sermon_series"),
        foreign_key("theme_id", "themes"),
        ColumnSpec(
            "is_primary_theme",
            "boolean",
            nullable=False,
            default=False,
            comment="Whether this is the primary theme for the series",
        ),
        ColumnSpec(
            "emphasis_level",
            "integer",
            comment="1-5 level of emphasis this theme receives in the series",
        ),
        ColumnSpec(
            "series_connection",
            "text",
            comment="How this theme is woven throughout the series",
        ),
        *timestamps(),
    ),
    checks=(
        CheckSpec(
            "chk_series_themes_valid_emphasis",
            "emphasis_level IS NULL OR (emphasis_level >= 1 AND emphasis_level <= 5)",
        ),
    ),
    uniques=(UniqueSpec("unq_series_themes_series_theme", ("series_id", "theme_id")),),
    indexes=(
        IndexSpec("idx_series_themes_series", ("series_id",)),
        IndexSpec("idx_series_themes_theme", ("theme_id",)),
        IndexSpec("idx_series_themes_primary", ("is_primary_theme",)),
        IndexSpec("idx_series_themes_emphasis", ("emphasis_level",)),
    ),
)


def upgrade() -> None:
    create_table(SERIES_THEMES)


def downgrade() -> None:
    drop_table(SERIES_THEMES)
