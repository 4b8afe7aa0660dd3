"""TableSpec validation.

Checks a table description for internal consistency before any DDL is
emitted: column names, types, primary key, and that every constraint and
index only names columns the table actually has. Raises
TableSpecValidationError on the first problem found.
"""

from __future__ import annotations

import logging

from sermon_planner.schema.types import (
    COLUMN_TYPES,
    REFERENTIAL_ACTIONS,
    ColumnSpec,
    TableSpec,
)

logger = logging.getLogger(__name__)

# PostgreSQL truncates identifiers beyond this length
MAX_IDENTIFIER_LENGTH = 63


class TableSpecValidationError(ValueError):
    """Raised when a TableSpec is structurally invalid."""

    pass


def _check_identifier(kind: str, name: str, table: str) -> None:
    if not name or not isinstance(name, str):
        raise TableSpecValidationError(f"{table}: {kind} name must be a non-empty string")
    if len(name) > MAX_IDENTIFIER_LENGTH:
        raise TableSpecValidationError(
            f"{table}: {kind} name {name!r} exceeds {MAX_IDENTIFIER_LENGTH} characters"
        )


def _validate_column(table: str, col: ColumnSpec) -> None:
    _check_identifier("column", col.name, table)
    if col.type not in COLUMN_TYPES:
        raise TableSpecValidationError(
            f"{table}.{col.name}: unknown column type {col.type!r}"
        )
    if col.type == "enum":
        if not col.enum_values:
            raise TableSpecValidationError(f"{table}.{col.name}: enum column needs enum_values")
        if col.default is not None and col.default not in col.enum_values:
            raise TableSpecValidationError(
                f"{table}.{col.name}: default {col.default!r} is not one of {list(col.enum_values)}"
            )
    elif col.enum_values:
        raise TableSpecValidationError(
            f"{table}.{col.name}: enum_values given for non-enum column"
        )
    if col.generated_id and col.type != "uuid":
        raise TableSpecValidationError(
            f"{table}.{col.name}: generated ids are only supported on uuid columns"
        )
    if col.default is not None and col.default_sql is not None:
        raise TableSpecValidationError(
            f"{table}.{col.name}: set either default or default_sql, not both"
        )
    if col.length is not None and col.type != "string":
        raise TableSpecValidationError(f"{table}.{col.name}: length only applies to string columns")
    if col.primary_key and col.nullable:
        raise TableSpecValidationError(f"{table}.{col.name}: primary key must not be nullable")
    if col.references is not None:
        _check_identifier("referenced table", col.references.table, table)
        for action in (col.references.on_delete, col.references.on_update):
            if action is not None and action.upper() not in REFERENTIAL_ACTIONS:
                raise TableSpecValidationError(
                    f"{table}.{col.name}: unknown referential action {action!r}"
                )


def validate_table_spec(spec: TableSpec) -> None:
    """Validate a TableSpec. Raises TableSpecValidationError if invalid."""
    _check_identifier("table", spec.name, spec.name or "<unnamed>")
    if not spec.columns:
        raise TableSpecValidationError(f"{spec.name}: table has no columns")

    seen: set[str] = set()
    for col in spec.columns:
        _validate_column(spec.name, col)
        if col.name in seen:
            raise TableSpecValidationError(f"{spec.name}: duplicate column {col.name!r}")
        seen.add(col.name)

    pk = [c.name for c in spec.columns if c.primary_key]
    if len(pk) != 1:
        raise TableSpecValidationError(
            f"{spec.name}: expected exactly one primary key column, got {pk}"
        )

    for check in spec.checks:
        _check_identifier("check constraint", check.name, spec.name)
        if not check.condition or not check.condition.strip():
            raise TableSpecValidationError(f"{spec.name}: check {check.name!r} has no condition")

    for unique in spec.uniques:
        _check_identifier("unique constraint", unique.name, spec.name)
        if not unique.columns:
            raise TableSpecValidationError(f"{spec.name}: unique {unique.name!r} has no columns")
        _require_columns(spec, unique.name, unique.columns, seen)

    for index in spec.indexes:
        _check_identifier("index", index.name, spec.name)
        if bool(index.columns) == bool(index.expression):
            raise TableSpecValidationError(
                f"{spec.name}: index {index.name!r} needs either columns or an expression"
            )
        _require_columns(spec, index.name, index.columns, seen)

    names = spec.constraint_names
    # enum CHECKs and single-column uniques are named by the renderer; they share the namespace
    names += [f"chk_{spec.name}_{c.name}" for c in spec.columns if c.type == "enum"]
    names += [f"unq_{spec.name}_{c.name}" for c in spec.columns if c.unique]
    dupes = sorted({n for n in names if names.count(n) > 1})
    if dupes:
        raise TableSpecValidationError(f"{spec.name}: duplicate constraint/index names {dupes}")

    logger.debug("TableSpec %s valid (%d columns)", spec.name, len(spec.columns))


def _require_columns(spec: TableSpec, owner: str, columns: tuple[str, ...], known: set[str]) -> None:
    missing = [c for c in columns if c not in known]
    if missing:
        raise TableSpecValidationError(
            f"{spec.name}: {owner!r} references unknown columns {missing}"
        )
