"""Create media_resources: files and links attached to a workspace, sermon or series.

Revision ID: 20250115_0010_media_resources
Revises: 20250115_0009_series_themes
Create Date: 2025-01-15

A resource belongs to a workspace and optionally to one sermon or series.
Every row needs a location: a stored file_path or an external_url.
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

revision: str = "20250115_0010_media_resources"
down_revision: str | None = "20250115_0009_series_themes"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

MEDIA_RESOURCES = TableSpec(
    name="media_resources",
    columns=(
        uuid_primary_key(),
        foreign_key("workspace_id", "workspaces"),
        foreign_key("sermon_id", "sermons", nullable=True),
        foreign_key("series_id", "sermon_series", nullable=True),
        ColumnSpec("title", "string", length=255, nullable=False, comment="Resource title/name"),
        ColumnSpec("description", "text", comment="Resource description"),
        enum(
            "resource_type",
            (
                "outline",
                "slides",
                "audio",
                "video",
                "handout",
                "scripture",
                "research",
                "image",
                "document",
                "link",
                "other",
            ),
        ),
        ColumnSpec("filename", "string", length=255, comment="Original filename"),
        ColumnSpec("file_path", "string", length=500, comment="Storage path or URL"),
        ColumnSpec("file_url", "string", length=500, comment="Public URL if applicable"),
        ColumnSpec("file_size", "bigint", comment="File size in bytes"),
        ColumnSpec("mime_type", "string", length=100, comment="MIME type"),
        ColumnSpec("file_hash", "string", length=64, comment="SHA-256 hash for integrity"),
        ColumnSpec("external_url", "string", length=1000, comment="External URL if not a file"),
        jsonb("tags", [], comment="Array of tags for categorization"),
        ColumnSpec("display_order", "integer", nullable=False, default=1, comment="Order within parent"),
        ColumnSpec("is_public", "boolean", nullable=False, default=False, comment="Public visibility"),
        ColumnSpec("is_downloadable", "boolean", nullable=False, default=True, comment="Allow downloads"),
        enum("access_level", ("public", "workspace", "private"), "workspace"),
        jsonb("allowed_roles", ["admin", "pastor", "volunteer"], comment="Array of roles allowed to access"),
        ColumnSpec("download_count", "integer", nullable=False, default=0),
        ColumnSpec("view_count", "integer", nullable=False, default=0),
        ColumnSpec("last_accessed", "timestamp"),
        ColumnSpec("version", "string", length=20, nullable=False, default="1.0"),
        foreign_key(
            "parent_resource_id",
            "media_resources",
            nullable=True,
            on_delete="SET NULL",
            comment="Reference to parent resource for versioning",
        ),
        ColumnSpec("is_current_version", "boolean", nullable=False, default=True),
        enum("processing_status", ("pending", "processing", "completed", "failed"), "completed"),
        ColumnSpec("processing_error", "text"),
        jsonb("processing_metadata", {}, comment="Metadata from processing (dimensions, duration, etc.)"),
        ColumnSpec(
            "storage_provider",
            "string",
            length=50,
            nullable=False,
            default="local",
            comment="Storage provider (local, s3, gcs, etc.)",
        ),
        jsonb("storage_metadata", {}, comment="Provider-specific metadata"),
        jsonb("metadata", {}, comment="Additional resource metadata"),
        foreign_key("uploaded_by", "users", on_delete="RESTRICT"),
        *timestamps(),
        soft_delete(),
    ),
    checks=(
        CheckSpec("chk_resources_non_negative_size", "file_size IS NULL OR file_size >= 0"),
        CheckSpec("chk_resources_non_negative_downloads", "download_count >= 0"),
        CheckSpec("chk_resources_non_negative_views", "view_count >= 0"),
        CheckSpec("chk_resources_positive_order", "display_order > 0"),
        CheckSpec("chk_resources_has_location", "file_path IS NOT NULL OR external_url IS NOT NULL"),
    ),
    indexes=(
        IndexSpec("idx_resources_workspace", ("workspace_id",)),
        IndexSpec("idx_resources_sermon", ("sermon_id",)),
        IndexSpec("idx_resources_series", ("series_id",)),
        IndexSpec("idx_resources_type", ("resource_type",)),
        IndexSpec("idx_resources_mime", ("mime_type",)),
        IndexSpec("idx_resources_public", ("is_public",)),
        IndexSpec("idx_resources_access", ("access_level",)),
        IndexSpec("idx_resources_processing", ("processing_status",)),
        IndexSpec("idx_resources_uploader", ("uploaded_by",)),
        IndexSpec("idx_resources_hash", ("file_hash",)),
        IndexSpec("idx_resources_parent", ("parent_resource_id",)),
        IndexSpec("idx_resources_current_version", ("is_current_version", "parent_resource_id")),
        IndexSpec("idx_resources_accessed", ("last_accessed",)),
        IndexSpec("idx_resources_workspace_type", ("workspace_id", "resource_type")),
        IndexSpec(
            "idx_resources_sermon_type",
            ("sermon_id", "resource_type"),
            where="sermon_id IS NOT NULL",
        ),
        IndexSpec(
            "idx_resources_fulltext",
            expression=(
                "to_tsvector('english', title || ' ' || COALESCE(description, '') || ' ' "
                "|| COALESCE(tags::text, ''))"
            ),
        ),
    ),
)


def upgrade() -> None:
    create_table(MEDIA_RESOURCES)


def downgrade() -> None:
    drop_table(MEDIA_RESOURCES)
