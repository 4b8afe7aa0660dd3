"""Create organizations table.

Revision ID: 20250115_0002_organizations
Revises: 20250115_0001_uuid_extension
Create Date: 2025-01-15
"""

from collections.abc import Sequence

from sermon_planner.schema import (
    ColumnSpec,
    IndexSpec,
    TableSpec,
    enum,
    jsonb,
    soft_delete,
    timestamps,
    uuid_primary_key,
)
from sermon_planner.schema.renderer import create_table, drop_table

revision: str = "20250115_0002_organizations"
down_revision: str | None = "20250115_0001_uuid_extension"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

ORGANIZATIONS = TableSpec(
    name="organizations",
    columns=(
        uuid_primary_key(),
        ColumnSpec("name", "string", length=255, nullable=False, comment="Organization/Church name"),
        ColumnSpec("description", "text", comment="Organization description"),
        ColumnSpec(
            "subdomain",
            "string",
            length=100,
            nullable=False,
            unique=True,
            comment="Unique subdomain for the organization",
        ),
        ColumnSpec("primary_email", "string", length=255),
        ColumnSpec("phone", "string", length=50),
        ColumnSpec("website", "string", length=255),
        jsonb("address", comment="Address object with street, city, state, zip, country"),
        jsonb("settings", {}, nullable=False, comment="Organization-wide settings and preferences"),
        enum("subscription_tier", ("free", "basic", "premium", "enterprise"), "free"),
        ColumnSpec("is_active", "boolean", nullable=False, default=True),
        ColumnSpec("trial_ends_at", "timestamp"),
        ColumnSpec("stripe_customer_id", "string"),
        ColumnSpec("stripe_subscription_id", "string"),
        jsonb("metadata", {}, comment="Additional organization metadata"),
        *timestamps(),
        soft_delete(),
    ),
    indexes=(
        IndexSpec("idx_organizations_subdomain", ("subdomain",)),
        IndexSpec("idx_organizations_active", ("is_active",)),
        IndexSpec("idx_organizations_tier", ("subscription_tier",)),
        IndexSpec("idx_organizations_created", ("created_at",)),
    ),
)


def upgrade() -> None:
    create_table(ORGANIZATIONS)


def downgrade() -> None:
    drop_table(ORGANIZATIONS)
