"""Declarative table descriptions and the DDL renderer used by the migrations."""

from sermon_planner.schema.types import (
    CheckSpec,
    ColumnSpec,
    ForeignKeySpec,
    IndexSpec,
    TableSpec,
    UniqueSpec,
    UuidStrategy,
    enum,
    foreign_key,
    jsonb,
    soft_delete,
    timestamps,
    uuid_primary_key,
)
from sermon_planner.schema.validator import TableSpecValidationError, validate_table_spec

__all__ = [
    "CheckSpec",
    "ColumnSpec",
    "ForeignKeySpec",
    "IndexSpec",
    "TableSpec",
    "TableSpecValidationError",
    "UniqueSpec",
    "UuidStrategy",
    "enum",
    "foreign_key",
    "jsonb",
    "soft_delete",
    "timestamps",
    "uuid_primary_key",
    "validate_table_spec",
]
