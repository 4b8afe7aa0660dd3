"""Create workspaces table (one planning period of an organization).

Revision ID: 20250115_0003_workspaces
Revises: 20250115_0002_organizations
Create Date: 2025-01-15

created_by is a plain UUID: users are created after workspaces, so there is
no FK to users here.
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

revision: str = "20250115_0003_workspaces"
down_revision: str | None = "20250115_0002_organizations"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

DEFAULT_WORKSPACE_SETTINGS = {
    "time_zone": "America/New_York",
    "default_service_time": "11:00",
    "advance_planning_weeks": 12,
    "sermon_length_minutes": 30,
    "allow_guest_speakers": True,
    "require_approval": False,
    "branding": {"primary_color": "#3B82F6", "secondary_color": "#EF4444"},
}

WORKSPACES = TableSpec(
    name="workspaces",
    columns=(
        uuid_primary_key(),
        foreign_key("organization_id", "organizations"),
        ColumnSpec(
            "name",
            "string",
            length=255,
            nullable=False,
            comment='Workspace name (e.g., "2024 Sermon Planning")',
        ),
        ColumnSpec("description", "text"),
        ColumnSpec(
            "church_name", "string", length=255, nullable=False, comment="Church name for this workspace"
        ),
        ColumnSpec("planning_year", "integer", nullable=False, comment="Year this workspace covers"),
        ColumnSpec("start_date", "date", nullable=False, comment="Planning period start date"),
        ColumnSpec("end_date", "date", nullable=False, comment="Planning period end date"),
        jsonb("address", comment="Church address object"),
        jsonb(
            "settings",
            DEFAULT_WORKSPACE_SETTINGS,
            nullable=False,
            comment="Workspace-specific settings",
        ),
        enum("subscription_tier", ("free", "basic", "premium"), "free"),
        ColumnSpec("is_active", "boolean", nullable=False, default=True),
        ColumnSpec(
            "is_template",
            "boolean",
            nullable=False,
            default=False,
            comment="Template workspace for copying",
        ),
        jsonb("metadata", {}, comment="Additional workspace metadata"),
        ColumnSpec("created_by", "uuid", nullable=False, comment="User ID who created this workspace"),
        *timestamps(),
        soft_delete(),
    ),
    checks=(CheckSpec("chk_workspaces_valid_date_range", "end_date > start_date"),),
    indexes=(
        IndexSpec("idx_workspaces_organization", ("organization_id",)),
        IndexSpec("idx_workspaces_org_year", ("organization_id", "planning_year")),
        IndexSpec("idx_workspaces_active", ("is_active",)),
        IndexSpec("idx_workspaces_year", ("planning_year",)),
        IndexSpec("idx_workspaces_date_range", ("start_date", "end_date")),
        IndexSpec("idx_workspaces_creator", ("created_by",)),
    ),
)


def upgrade() -> None:
    create_table(WORKSPACES)


def downgrade() -> None:
    drop_table(WORKSPACES)
