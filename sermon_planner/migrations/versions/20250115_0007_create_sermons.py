"""Create sermons table.

Revision ID: 20250115_0007_sermons
Revises: 20250115_0006_sermon_series
Create Date: 2025-01-15
"""

from collections.abc import Sequence

from sermon_planner.schema import (
    CheckSpec,
    ColumnSpec,
    IndexSpec,
    TableSpec,
    UniqueSpec,
    enum,
    foreign_key,
    jsonb,
    soft_delete,
    timestamps,
    uuid_primary_key,
)
from sermon_planner.schema.renderer import create_table, drop_table

revision: str = "20250115_0007_sermons"
down_revision: str | None = "20250115_0006_sermon_series"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

SERMONS = TableSpec(
    name="sermons",
    columns=(
        uuid_primary_key(),
        foreign_key("workspace_id", "workspaces"),
        foreign_key("series_id", "sermon_series", nullable=True, on_delete="SET NULL"),
        foreign_key("speaker_id", "users", on_delete="RESTRICT"),
        ColumnSpec("title", "string", length=255, nullable=False, comment="Sermon title"),
        ColumnSpec("subtitle", "string", length=255, comment="Optional subtitle"),
        ColumnSpec("description", "text", comment="Sermon description/summary"),
        ColumnSpec("sermon_number", "integer", comment="Number within series (1, 2, 3, etc.)"),
        ColumnSpec("service_date", "date", nullable=False, comment="Date of service"),
        ColumnSpec("service_time", "time", nullable=False, default="11:00", comment="Service start time"),
        ColumnSpec(
            "duration_minutes", "integer", nullable=False, default=30, comment="Planned sermon duration"
        ),
        enum(
            "sermon_type",
            (
                "sunday_morning",
                "sunday_evening",
                "wednesday",
                "special_event",
                "guest_speaker",
                "series",
                "standalone",
            ),
            "sunday_morning",
        ),
        jsonb("scripture_references", [], comment="Array of scripture reference objects"),
        ColumnSpec("main_scripture", "text", comment="Primary scripture text"),
        jsonb("main_points", [], comment="Array of main sermon points"),
        ColumnSpec("sermon_outline", "text", comment="Detailed sermon outline"),
        ColumnSpec("introduction", "text", comment="Sermon introduction notes"),
        ColumnSpec("conclusion", "text", comment="Sermon conclusion notes"),
        ColumnSpec("call_to_action", "text", comment="Closing call to action"),
        ColumnSpec("target_audience", "string", length=100, comment="Primary audience"),
        jsonb("tags", [], comment="Array of topical tags"),
        ColumnSpec("context_notes", "text", comment="Cultural/historical context notes"),
        ColumnSpec("application_notes", "text", comment="Modern application notes"),
        enum("status", ("planning", "in_preparation", "ready", "delivered", "archived"), "planning"),
        jsonb(
            "preparation_status",
            {
                "outline_complete": False,
                "research_complete": False,
                "slides_complete": False,
                "notes_complete": False,
                "practice_complete": False,
                "last_updated": None,
            },
            comment="Preparation checklist",
        ),
        ColumnSpec("is_published", "boolean", nullable=False, default=False),
        ColumnSpec("published_at", "timestamp"),
        ColumnSpec("is_guest_speaker", "boolean", nullable=False, default=False),
        ColumnSpec("guest_speaker_name", "string", length=255),
        ColumnSpec("guest_speaker_bio", "string", length=1000),
        ColumnSpec("speaker_notes", "text", comment="Private notes for speaker"),
        ColumnSpec("tech_notes", "text", comment="Technical requirements and notes"),
        ColumnSpec("music_notes", "text", comment="Music and worship notes"),
        ColumnSpec("follow_up_notes", "text", comment="Post-sermon follow-up ideas"),
        jsonb("metadata", {}, comment="Additional sermon metadata"),
        ColumnSpec("view_count", "integer", nullable=False, default=0, comment="Number of views/accesses"),
        ColumnSpec("last_viewed", "timestamp"),
        foreign_key("created_by", "users", on_delete="RESTRICT"),
        *timestamps(),
        soft_delete(),
    ),
    checks=(
        CheckSpec("chk_sermons_positive_duration", "duration_minutes > 0"),
        CheckSpec("chk_sermons_positive_number", "sermon_number IS NULL OR sermon_number > 0"),
        CheckSpec("chk_sermons_non_negative_views", "view_count >= 0"),
    ),
    uniques=(UniqueSpec("unq_sermons_series_number", ("series_id", "sermon_number")),),
    indexes=(
        IndexSpec("idx_sermons_workspace", ("workspace_id",)),
        IndexSpec("idx_sermons_series", ("series_id",)),
        IndexSpec("idx_sermons_speaker", ("speaker_id",)),
        IndexSpec("idx_sermons_workspace_date", ("workspace_id", "service_date")),
        IndexSpec("idx_sermons_date", ("service_date",)),
        IndexSpec("idx_sermons_datetime", ("service_date", "service_time")),
        IndexSpec("idx_sermons_status", ("status",)),
        IndexSpec("idx_sermons_type", ("sermon_type",)),
        IndexSpec("idx_sermons_published", ("is_published",)),
        IndexSpec("idx_sermons_guest", ("is_guest_speaker",)),
        IndexSpec("idx_sermons_creator", ("created_by",)),
        IndexSpec("idx_sermons_viewed", ("last_viewed",)),
        IndexSpec(
            "idx_sermons_fulltext",
            expression=(
                "to_tsvector('english', title || ' ' || COALESCE(subtitle, '') || ' ' "
                "|| COALESCE(description, '') || ' ' || COALESCE(main_scripture, ''))"
            ),
        ),
    ),
)


def upgrade() -> None:
    create_table(SERMONS)


def downgrade() -> None:
    drop_table(SERMONS)
