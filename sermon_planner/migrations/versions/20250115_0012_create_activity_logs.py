"""Create activity_logs: append-only audit trail per workspace.

Revision ID: 20250115_0012_activity_logs
Revises: 20250115_0011_collaborators
Create Date: 2025-01-15

Rows are written by the application and by the log_activity() trigger
(see 20250115_0014_triggers). There is no updated_at column.
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
    uuid_primary_key,
)
from sermon_planner.schema.renderer import create_table, drop_table

revision: str = "20250115_0012_activity_logs"
down_revision: str | None = "20250115_0011_collaborators"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

ACTIONS = (
    "create",
    "update",
    "delete",
    "view",
    "download",
    "export",
    "invite",
    "accept_invitation",
    "login",
    "logout",
    "upload",
    "publish",
    "unpublish",
    "archive",
    "restore",
    "share",
    "comment",
    "approve",
    "reject",
    "assign",
    "complete",
)

ENTITY_TYPES = (
    "workspace",
    "user",
    "sermon",
    "series",
    "theme",
    "resource",
    "collaborator",
    "export",
    "comment",
    "assignment",
    "notification",
)

ACTIVITY_LOGS = TableSpec(
    name="activity_logs",
    columns=(
        uuid_primary_key(),
        foreign_key("workspace_id", "workspaces"),
        foreign_key("user_id", "users", nullable=True, on_delete="SET NULL"),
        enum("action", ACTIONS, comment="Type of action performed"),
        enum("entity_type", ENTITY_TYPES, comment="Type of entity affected"),
        ColumnSpec("entity_id", "uuid", comment="ID of the affected entity"),
        ColumnSpec("entity_name", "string", length=255, comment="Name/title of the affected entity"),
        ColumnSpec(
            "description",
            "text",
            nullable=False,
            comment="Human-readable description of the action",
        ),
        jsonb("changes", {}, comment="Details of what changed (before/after)"),
        jsonb("metadata", {}, comment="Additional context and metadata"),
        ColumnSpec("ip_address", "string", length=45, comment="IP address of the user"),
        ColumnSpec("user_agent", "string", length=500, comment="User agent string"),
        ColumnSpec("session_id", "string", length=128, comment="Session identifier"),
        ColumnSpec("request_id", "string", length=128, comment="Unique request identifier for tracing"),
        enum("status", ("success", "failed", "warning"), "success"),
        ColumnSpec("error_message", "text", comment="Error details if action failed"),
        ColumnSpec("execution_time_ms", "integer", comment="Time taken to execute action"),
        enum("severity", ("low", "medium", "high", "critical"), "low"),
        ColumnSpec(
            "is_sensitive",
            "boolean",
            nullable=False,
            default=False,
            comment="Whether this action involves sensitive data",
        ),
        ColumnSpec(
            "requires_audit",
            "boolean",
            nullable=False,
            default=False,
            comment="Whether this action requires special audit attention",
        ),
        jsonb("related_entities", [], comment="Array of related entity references"),
        foreign_key(
            "parent_activity_id",
            "activity_logs",
            nullable=True,
            on_delete="SET NULL",
            comment="Parent activity for grouped operations",
        ),
        ColumnSpec("created_at", "timestamp", nullable=False, default_sql="CURRENT_TIMESTAMP"),
        ColumnSpec("expires_at", "timestamp", comment="When this log entry should be archived/deleted"),
        ColumnSpec("is_archived", "boolean", nullable=False, default=False),
    ),
    checks=(
        CheckSpec(
            "chk_activity_logs_non_negative_time",
            "execution_time_ms IS NULL OR execution_time_ms >= 0",
        ),
    ),
    indexes=(
        IndexSpec("idx_activity_logs_workspace", ("workspace_id",)),
        IndexSpec("idx_activity_logs_user", ("user_id",)),
        IndexSpec("idx_activity_logs_entity", ("entity_type", "entity_id")),
        IndexSpec("idx_activity_logs_action", ("action",)),
        IndexSpec("idx_activity_logs_created", ("created_at",)),
        IndexSpec("idx_activity_logs_workspace_time", ("workspace_id", "created_at")),
        IndexSpec("idx_activity_logs_user_time", ("user_id", "created_at")),
        IndexSpec("idx_activity_logs_status", ("status",)),
        IndexSpec("idx_activity_logs_severity", ("severity",)),
        IndexSpec("idx_activity_logs_audit", ("requires_audit",)),
        IndexSpec("idx_activity_logs_sensitive", ("is_sensitive",)),
        IndexSpec("idx_activity_logs_parent", ("parent_activity_id",)),
        IndexSpec("idx_activity_logs_session", ("session_id",)),
        IndexSpec("idx_activity_logs_request", ("request_id",)),
        IndexSpec("idx_activity_logs_expires", ("expires_at",)),
        IndexSpec("idx_activity_logs_archived", ("is_archived",)),
        IndexSpec(
            "idx_activity_logs_workspace_action_time",
            ("workspace_id", "action", "created_at"),
        ),
        IndexSpec(
            "idx_activity_logs_entity_action_time",
            ("entity_type", "action", "created_at"),
        ),
        IndexSpec("idx_activity_logs_user_action_time", ("user_id", "action", "created_at")),
        IndexSpec(
            "idx_activity_logs_fulltext",
            expression="to_tsvector('english', description || ' ' || COALESCE(entity_name, ''))",
        ),
    ),
)


def upgrade() -> None:
    create_table(ACTIVITY_LOGS)


def downgrade() -> None:
    drop_table(ACTIVITY_LOGS)
