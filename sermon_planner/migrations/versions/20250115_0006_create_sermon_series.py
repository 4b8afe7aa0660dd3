"""Create sermon_series table.

Revision ID: 20250115_0006_sermon_series
Revises: 20250115_0005_themes
Create Date: 2025-01-15

actual_sermons is maintained by the sermons count trigger
(see 20250115_0014_triggers).
"""

from collections.abc import Sequence

from sermon_planner.schema import (
    CheckSpec,
    ColumnSpec,
    IndexSpec,
    TableSpec,
    enum,
    foreign_key,
    jsonb,
    soft_delete,
    timestamps,
    uuid_primary_key,
)
from sermon_planner.schema.renderer import create_table, drop_table

revision: str = "20250115_0006_sermon_series"
down_revision: str | None = "20250115_0005_themes"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

SERMON_SERIES = TableSpec(
    name="sermon_series",
    columns=(
        uuid_primary_key(),
        foreign_key("workspace_id", "workspaces"),
        ColumnSpec("title", "string", length=255, nullable=False, comment="Series title"),
        ColumnSpec("description", "text", comment="Detailed description of the series"),
        ColumnSpec("theme_scripture", "text", comment="Primary scripture for the entire series"),
        ColumnSpec("series_image", "string", length=500, comment="URL to series artwork/image"),
        ColumnSpec(
            "color_theme",
            "string",
            length=7,
            nullable=False,
            default="#3B82F6",
            comment="Hex color for series branding",
        ),
        ColumnSpec("start_date", "date", nullable=False, comment="Series start date"),
        ColumnSpec("end_date", "date", comment="Series end date (null for ongoing)"),
        enum(
            "series_type",
            ("expository", "topical", "narrative", "seasonal", "special", "guest", "other"),
            "topical",
        ),
        ColumnSpec(
            "target_audience",
            "string",
            length=100,
            comment="Primary audience (adults, youth, families, etc.)",
        ),
        ColumnSpec(
            "estimated_sermons", "integer", nullable=False, default=1, comment="Planned number of sermons"
        ),
        ColumnSpec(
            "actual_sermons",
            "integer",
            nullable=False,
            default=0,
            comment="Current number of sermons in series",
        ),
        ColumnSpec("display_order", "integer", nullable=False, default=1, comment="Order within the year"),
        ColumnSpec("is_active", "boolean", nullable=False, default=True),
        ColumnSpec("is_published", "boolean", nullable=False, default=False, comment="Public visibility"),
        ColumnSpec("published_at", "timestamp"),
        jsonb("tags", [], comment="Array of tags for categorization"),
        jsonb("topics", [], comment="Array of main topics covered"),
        jsonb("scripture_books", [], comment="Array of Bible books covered"),
        jsonb("resources", [], comment="Array of resource links and references"),
        ColumnSpec("notes", "text", comment="Planning notes and ideas"),
        ColumnSpec("goals", "text", comment="Learning objectives and goals"),
        enum("status", ("planning", "in_progress", "completed", "archived"), "planning"),
        jsonb(
            "completion_status",
            {
                "outline_complete": False,
                "resources_gathered": False,
                "artwork_ready": False,
                "promotion_ready": False,
            },
            comment="Series preparation checklist",
        ),
        jsonb("metadata", {}, comment="Additional series metadata"),
        foreign_key("created_by", "users", on_delete="RESTRICT"),
        *timestamps(),
        soft_delete(),
    ),
    checks=(
        CheckSpec("chk_series_positive_estimated", "estimated_sermons > 0"),
        CheckSpec("chk_series_non_negative_actual", "actual_sermons >= 0"),
        CheckSpec("chk_series_positive_order", "display_order > 0"),
    ),
    indexes=(
        IndexSpec("idx_series_workspace", ("workspace_id",)),
        IndexSpec("idx_series_workspace_start", ("workspace_id", "start_date")),
        IndexSpec("idx_series_date_range", ("start_date", "end_date")),
        IndexSpec("idx_series_type", ("series_type",)),
        IndexSpec("idx_series_status", ("status",)),
        IndexSpec("idx_series_active", ("is_active",)),
        IndexSpec("idx_series_published", ("is_published",)),
        IndexSpec("idx_series_creator", ("created_by",)),
        IndexSpec("idx_series_order", ("display_order",)),
        IndexSpec(
            "idx_series_fulltext",
            expression="to_tsvector('english', title || ' ' || COALESCE(description, ''))",
        ),
    ),
)


def upgrade() -> None:
    create_table(SERMON_SERIES)


def downgrade() -> None:
    drop_table(SERMON_SERIES)
