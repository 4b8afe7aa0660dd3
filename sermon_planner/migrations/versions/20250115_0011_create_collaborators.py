"""Create collaborators: workspace membership and per-sermon/per-series assignments.

Revision ID: 20250115_0011_collaborators
Revises: 20250115_0010_media_resources
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

revision: str = "20250115_0011_collaborators"
down_revision: str | None = "20250115_0010_media_resources"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

DEFAULT_PERMISSIONS = {
    "can_view": True,
    "can_edit": False,
    "can_delete": False,
    "can_publish": False,
    "can_invite": False,
    "can_manage_resources": False,
    "can_export": True,
}

DEFAULT_NOTIFICATION_PREFERENCES = {
    "email_updates": True,
    "deadline_reminders": True,
    "status_changes": True,
    "new_assignments": True,
    "frequency": "immediate",
}

COLLABORATORS = TableSpec(
    name="collaborators",
    columns=(
        uuid_primary_key(),
        foreign_key("workspace_id", "workspaces"),
        foreign_key("user_id", "users"),
        foreign_key("sermon_id", "sermons", nullable=True),
        foreign_key("series_id", "sermon_series", nullable=True),
        enum(
            "role",
            ("owner", "editor", "contributor", "reviewer", "viewer"),
            "contributor",
            comment="Role within the collaboration context",
        ),
        enum(
            "collaboration_type",
            (
                "workspace_member",
                "sermon_collaborator",
                "series_collaborator",
                "guest_contributor",
                "reviewer",
            ),
            "workspace_member",
        ),
        jsonb("permissions", DEFAULT_PERMISSIONS, comment="Specific permissions for this collaboration"),
        ColumnSpec("assignment_title", "string", length=255, comment="Specific assignment or task title"),
        ColumnSpec(
            "assignment_description",
            "text",
            comment="Description of collaboration role/responsibilities",
        ),
        ColumnSpec("assignment_start_date", "date"),
        ColumnSpec("assignment_end_date", "date"),
        enum(
            "assignment_status",
            ("active", "pending", "completed", "suspended", "expired"),
            "active",
        ),
        jsonb(
            "notification_preferences",
            DEFAULT_NOTIFICATION_PREFERENCES,
            comment="How user wants to be notified about this collaboration",
        ),
        ColumnSpec(
            "is_accepted",
            "boolean",
            nullable=False,
            default=True,
            comment="Whether user has accepted the collaboration invitation",
        ),
        ColumnSpec("invited_at", "timestamp"),
        ColumnSpec("accepted_at", "timestamp"),
        ColumnSpec("invitation_token", "string", length=128, comment="Token for invitation acceptance"),
        ColumnSpec("invitation_expires_at", "timestamp"),
        ColumnSpec("last_activity", "timestamp"),
        jsonb("activity_summary", {}, comment="Summary of user activity in this collaboration"),
        ColumnSpec(
            "contribution_count",
            "integer",
            nullable=False,
            default=0,
            comment="Number of contributions made",
        ),
        jsonb("metadata", {}, comment="Additional collaboration metadata"),
        foreign_key("invited_by", "users", on_delete="RESTRICT"),
        *timestamps(),
        soft_delete(),
    ),
    checks=(
        CheckSpec("chk_collaborators_non_negative_contributions", "contribution_count >= 0"),
        CheckSpec(
            "chk_collaborators_valid_assignment_dates",
            "assignment_start_date IS NULL OR assignment_end_date IS NULL "
            "OR assignment_end_date >= assignment_start_date",
        ),
        CheckSpec(
            "chk_collaborators_valid_invitation_expiry",
            "invitation_expires_at IS NULL OR invitation_expires_at > invited_at",
        ),
    ),
    uniques=(
        UniqueSpec("unq_collaborators_workspace_user", ("workspace_id", "user_id")),
        UniqueSpec("unq_collaborators_sermon_user", ("sermon_id", "user_id")),
        UniqueSpec("unq_collaborators_series_user", ("series_id", "user_id")),
        UniqueSpec("unq_collaborators_invitation_token", ("invitation_token",)),
    ),
    indexes=(
        IndexSpec("idx_collaborators_workspace", ("workspace_id",)),
        IndexSpec("idx_collaborators_user", ("user_id",)),
        IndexSpec("idx_collaborators_sermon", ("sermon_id",)),
        IndexSpec("idx_collaborators_series", ("series_id",)),
        IndexSpec("idx_collaborators_workspace_role", ("workspace_id", "role")),
        IndexSpec("idx_collaborators_type", ("collaboration_type",)),
        IndexSpec("idx_collaborators_status", ("assignment_status",)),
        IndexSpec("idx_collaborators_accepted", ("is_accepted",)),
        IndexSpec("idx_collaborators_inviter", ("invited_by",)),
        IndexSpec("idx_collaborators_activity", ("last_activity",)),
        IndexSpec("idx_collaborators_token", ("invitation_token",)),
        IndexSpec(
            "idx_collaborators_assignment_dates",
            ("assignment_start_date", "assignment_end_date"),
        ),
        IndexSpec(
            "idx_collaborators_active_workspace",
            ("workspace_id", "user_id"),
            where="assignment_status = 'active'",
        ),
    ),
)


def upgrade() -> None:
    create_table(COLLABORATORS)


def downgrade() -> None:
    drop_table(COLLABORATORS)
