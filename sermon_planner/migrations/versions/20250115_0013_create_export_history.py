"""Create export_history: generated exports, their files and recurring schedules.

Revision ID: 20250115_0013_export_history
Revises: 20250115_0012_activity_logs
Create Date: 2025-01-15
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

revision: str = "20250115_0013_export_history"
down_revision: str | None = "20250115_0012_activity_logs"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

EXPORT_HISTORY = TableSpec(
    name="export_history",
    columns=(
        uuid_primary_key(),
        foreign_key("workspace_id", "workspaces"),
        foreign_key("requested_by", "users", on_delete="RESTRICT"),
        ColumnSpec(
            "export_name", "string", length=255, nullable=False, comment="User-defined name for the export"
        ),
        enum("export_format", ("pdf", "excel", "ical", "json", "csv", "docx")),
        enum(
            "export_type",
            (
                "sermon_calendar",
                "series_overview",
                "resource_list",
                "full_workspace",
                "custom_query",
                "single_sermon",
                "single_series",
                "analytics_report",
            ),
        ),
        ColumnSpec("date_range_start", "date", comment="Start date for date-filtered exports"),
        ColumnSpec("date_range_end", "date", comment="End date for date-filtered exports"),
        jsonb("included_series_ids", [], comment="Array of series IDs to include"),
        jsonb("included_sermon_ids", [], comment="Array of sermon IDs to include"),
        jsonb("filters", {}, comment="Additional filters applied to export"),
        ColumnSpec("include_resources", "boolean", nullable=False, default=False),
        ColumnSpec("include_private_notes", "boolean", nullable=False, default=False),
        ColumnSpec("template_name", "string", length=100, comment="Template used for export"),
        jsonb("formatting_options", {}, comment="Formatting preferences"),
        jsonb("custom_fields", [], comment="Custom fields to include"),
        enum("status", ("pending", "processing", "completed", "failed", "expired"), "pending"),
        ColumnSpec("error_message", "text"),
        ColumnSpec("progress_percentage", "integer", nullable=False, default=0),
        ColumnSpec("started_at", "timestamp"),
        ColumnSpec("completed_at", "timestamp"),
        ColumnSpec("processing_time_seconds", "integer"),
        ColumnSpec("file_path", "string", length=500, comment="Path to generated file"),
        ColumnSpec("file_url", "string", length=500, comment="Temporary download URL"),
        ColumnSpec("file_size_bytes", "bigint"),
        ColumnSpec("file_hash", "string", length=64, comment="SHA-256 hash of exported file"),
        ColumnSpec("file_expires_at", "timestamp", comment="When the file will be automatically deleted"),
        ColumnSpec("total_records", "integer", comment="Number of records included in export"),
        ColumnSpec("download_count", "integer", nullable=False, default=0),
        ColumnSpec("last_downloaded", "timestamp"),
        jsonb("download_log", [], comment="Log of download events"),
        ColumnSpec("is_shareable", "boolean", nullable=False, default=False),
        ColumnSpec("share_token", "string", length=128, comment="Token for sharing export with others"),
        ColumnSpec("share_expires_at", "timestamp"),
        jsonb("shared_with", [], comment="Array of user IDs who have access"),
        ColumnSpec("is_recurring", "boolean", nullable=False, default=False),
        ColumnSpec(
            "recurrence_pattern",
            "enum",
            enum_values=("daily", "weekly", "monthly", "quarterly"),
        ),
        ColumnSpec("next_run_at", "timestamp"),
        ColumnSpec("last_run_at", "timestamp"),
        ColumnSpec("run_count", "integer", nullable=False, default=0),
        ColumnSpec("is_active_schedule", "boolean", nullable=False, default=False),
        jsonb("export_config", {}, comment="Complete export configuration for reproduction"),
        jsonb("metadata", {}, comment="Additional export metadata"),
        ColumnSpec("notes", "text", comment="User notes about this export"),
        *timestamps(),
        soft_delete(),
    ),
    checks=(
        CheckSpec(
            "chk_export_history_valid_progress",
            "progress_percentage >= 0 AND progress_percentage <= 100",
        ),
        CheckSpec(
            "chk_export_history_non_negative_size",
            "file_size_bytes IS NULL OR file_size_bytes >= 0",
        ),
        CheckSpec(
            "chk_export_history_non_negative_records",
            "total_records IS NULL OR total_records >= 0",
        ),
        CheckSpec("chk_export_history_non_negative_downloads", "download_count >= 0"),
        CheckSpec("chk_export_history_non_negative_runs", "run_count >= 0"),
        CheckSpec(
            "chk_export_history_valid_date_range",
            "date_range_start IS NULL OR date_range_end IS NULL OR date_range_end >= date_range_start",
        ),
        CheckSpec(
            "chk_export_history_valid_processing_times",
            "completed_at IS NULL OR started_at IS NULL OR completed_at >= started_at",
        ),
    ),
    indexes=(
        IndexSpec("idx_export_history_workspace", ("workspace_id",)),
        IndexSpec("idx_export_history_requester", ("requested_by",)),
        IndexSpec("idx_export_history_format", ("export_format",)),
        IndexSpec("idx_export_history_type", ("export_type",)),
        IndexSpec("idx_export_history_status", ("status",)),
        IndexSpec("idx_export_history_created", ("created_at",)),
        IndexSpec("idx_export_history_workspace_created", ("workspace_id", "created_at")),
        IndexSpec("idx_export_history_requester_created", ("requested_by", "created_at")),
        IndexSpec("idx_export_history_date_range", ("date_range_start", "date_range_end")),
        IndexSpec("idx_export_history_file_expires", ("file_expires_at",)),
        IndexSpec("idx_export_history_share_token", ("share_token",)),
        IndexSpec("idx_export_history_recurring", ("is_recurring",)),
        IndexSpec("idx_export_history_next_run", ("next_run_at",)),
        IndexSpec("idx_export_history_active_schedule", ("is_active_schedule",)),
        IndexSpec("idx_export_history_last_download", ("last_downloaded",)),
        IndexSpec(
            "idx_export_history_workspace_status_created",
            ("workspace_id", "status", "created_at"),
        ),
        IndexSpec("idx_export_history_recurring_schedule", ("is_recurring", "next_run_at")),
        IndexSpec("idx_export_history_cleanup", ("status", "file_expires_at")),
        IndexSpec(
            "idx_export_history_pending_cleanup",
            ("file_expires_at",),
            where="status = 'completed' AND file_expires_at IS NOT NULL",
        ),
        IndexSpec(
            "idx_export_history_fulltext",
            expression="to_tsvector('english', export_name || ' ' || COALESCE(notes, ''))",
        ),
    ),
)


def upgrade() -> None:
    create_table(EXPORT_HISTORY)


def downgrade() -> None:
    drop_table(EXPORT_HISTORY)
