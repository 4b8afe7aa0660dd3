"""Create users table.

Revision ID: 20250115_0004_users
Revises: 20250115_0003_workspaces
Create Date: 2025-01-15
"""

from collections.abc import Sequence

from sermon_planner.schema import (
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

revision: str = "20250115_0004_users"
down_revision: str | None = "20250115_0003_workspaces"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

DEFAULT_PREFERENCES = {
    "theme": "system",
    "notifications": {
        "email": True,
        "push": True,
        "sermon_reminders": True,
        "deadline_alerts": True,
    },
    "timezone": "America/New_York",
    "language": "en",
}

USERS = TableSpec(
    name="users",
    columns=(
        uuid_primary_key(),
        ColumnSpec(
            "firebase_uid",
            "string",
            length=128,
            nullable=False,
            unique=True,
            comment="Firebase Authentication UID",
        ),
        foreign_key("organization_id", "organizations"),
        foreign_key("default_workspace_id", "workspaces", nullable=True, on_delete="SET NULL"),
        ColumnSpec("email", "string", length=255, nullable=False, unique=True),
        ColumnSpec("display_name", "string", length=255, nullable=False),
        ColumnSpec("first_name", "string", length=100),
        ColumnSpec("last_name", "string", length=100),
        ColumnSpec("profile_picture", "string", length=500, comment="URL to profile picture"),
        ColumnSpec("phone", "string", length=50),
        ColumnSpec("title", "string", length=100, comment="Job title or role in church"),
        enum("role", ("admin", "pastor", "volunteer", "viewer"), "viewer"),
        jsonb("permissions", [], comment="Additional granular permissions"),
        jsonb("preferences", DEFAULT_PREFERENCES, nullable=False, comment="User preferences and settings"),
        ColumnSpec("is_active", "boolean", nullable=False, default=True),
        ColumnSpec("email_verified", "boolean", nullable=False, default=False),
        ColumnSpec("is_guest_speaker", "boolean", nullable=False, default=False),
        ColumnSpec("last_login", "timestamp"),
        ColumnSpec("last_activity", "timestamp"),
        ColumnSpec("last_ip", "string", length=45, comment="Last known IP address"),
        jsonb("login_history", [], comment="Recent login history"),
        jsonb("metadata", {}, comment="Additional user metadata"),
        *timestamps(),
        soft_delete(),
    ),
    indexes=(
        IndexSpec("idx_users_firebase_uid", ("firebase_uid",)),
        IndexSpec("idx_users_email", ("email",)),
        IndexSpec("idx_users_organization", ("organization_id",)),
        IndexSpec("idx_users_workspace", ("default_workspace_id",)),
        IndexSpec("idx_users_org_role", ("organization_id", "role")),
        IndexSpec("idx_users_active", ("is_active",)),
        IndexSpec("idx_users_last_login", ("last_login",)),
        IndexSpec("idx_users_created", ("created_at",)),
    ),
)


def upgrade() -> None:
    create_table(USERS)


def downgrade() -> None:
    drop_table(USERS)
