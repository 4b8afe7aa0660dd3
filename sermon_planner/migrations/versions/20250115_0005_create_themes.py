"""Create themes table.

Revision ID: 20250115_0005_themes
Revises: 20250115_0004_users
Create Date: 2025-01-15

sermon_count / last_used are maintained by the sermon_themes usage trigger
(see 20250115_0014_triggers).
"""

from collections.abc import Sequence

from sermon_planner.schema import (
    CheckSpec,
    ColumnSpec,
    IndexSpec,
    TableSpec,
    UniqueSpec,
    foreign_key,
    jsonb,
    soft_delete,
    timestamps,
    uuid_primary_key,
)
from sermon_planner.schema.renderer import create_table, drop_table

revision: str = "20250115_0005_themes"
down_revision: str | None = "20250115_0004_users"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

THEMES = TableSpec(
    name="themes",
    columns=(
        uuid_primary_key(),
        foreign_key("workspace_id", "workspaces"),
        ColumnSpec(
            "name",
            "string",
            length=255,
            nullable=False,
            comment='Theme name (e.g., "Faith", "Hope", "Love")',
        ),
        ColumnSpec("description", "text", comment="Detailed description of the theme"),
        ColumnSpec("theme_scripture", "text", comment="Primary scripture reference for theme"),
        ColumnSpec(
            "color", "string", length=7, nullable=False, default="#3B82F6", comment="Hex color code for theme"
        ),
        ColumnSpec("icon", "string", length=50, comment="Icon identifier for theme"),
        ColumnSpec(
            "display_order", "integer", nullable=False, default=1, comment="Order for displaying themes"
        ),
        ColumnSpec("is_active", "boolean", nullable=False, default=True),
        jsonb("associated_months", [], comment="Array of month numbers (1-12) when theme is emphasized"),
        jsonb("associated_seasons", [], comment="Array of seasons (advent, lent, easter, etc.)"),
        jsonb("key_concepts", [], comment="Array of key concepts/words for this theme"),
        jsonb("scripture_references", [], comment="Array of supporting scripture references"),
        jsonb("suggested_topics", [], comment="Array of suggested sermon topics"),
        ColumnSpec("notes", "text", comment="Additional notes about the theme"),
        ColumnSpec(
            "sermon_count",
            "integer",
            nullable=False,
            default=0,
            comment="Number of sermons using this theme",
        ),
        ColumnSpec("last_used", "timestamp", comment="Last time this theme was used in a sermon"),
        jsonb("metadata", {}, comment="Additional theme metadata"),
        foreign_key("created_by", "users", on_delete="RESTRICT"),
        *timestamps(),
        soft_delete(),
    ),
    checks=(
        CheckSpec("chk_themes_positive_order", "display_order > 0"),
        CheckSpec("chk_themes_non_negative_count", "sermon_count >= 0"),
    ),
    uniques=(UniqueSpec("unq_themes_workspace_name", ("workspace_id", "name")),),
    indexes=(
        IndexSpec("idx_themes_workspace", ("workspace_id",)),
        IndexSpec("idx_themes_workspace_order", ("workspace_id", "display_order")),
        IndexSpec("idx_themes_active", ("is_active",)),
        IndexSpec("idx_themes_creator", ("created_by",)),
        IndexSpec("idx_themes_last_used", ("last_used",)),
        IndexSpec("idx_themes_usage", ("sermon_count",)),
    ),
)


def upgrade() -> None:
    create_table(THEMES)


def downgrade() -> None:
    drop_table(THEMES)
