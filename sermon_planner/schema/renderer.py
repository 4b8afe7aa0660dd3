"""Render TableSpecs into SQLAlchemy tables and Alembic operations.

Migrations call :func:`create_table` / :func:`drop_table` inside
``upgrade()`` / ``downgrade()``; they run under Alembic's ``op`` proxy.
:func:`build_table` and :func:`render_create_sql` work offline and are what
the tests use to inspect the DDL a TableSpec produces.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql
from sqlalchemy.schema import CreateIndex, CreateTable, DropTable

from alembic import op

from sermon_planner.schema.types import ColumnSpec, IndexSpec, TableSpec, UuidStrategy
from sermon_planner.schema.validator import validate_table_spec

logger = logging.getLogger(__name__)

# VARCHAR length for string columns declared without one
DEFAULT_STRING_LENGTH = 255


def resolve_uuid_strategy(id_strategy: UuidStrategy | str | None = None) -> UuidStrategy:
    """Return the given strategy, or the configured one when None."""
    if id_strategy is None:
        from sermon_planner.config import get_settings

        return get_settings().uuid_strategy
    return UuidStrategy(id_strategy)


def enum_constraint_name(table: str, column: str) -> str:
    return f"chk_{table}_{column}"


def foreign_key_name(table: str, column: str) -> str:
    return f"fk_{table}_{column}"


def column_unique_name(table: str, column: str) -> str:
    return f"unq_{table}_{column}"


def _column_type(table: str, col: ColumnSpec) -> sa.types.TypeEngine:
    if col.type == "uuid":
        return postgresql.UUID(as_uuid=True)
    if col.type == "string":
        return sa.String(length=col.length or DEFAULT_STRING_LENGTH)
    if col.type == "text":
        return sa.Text()
    if col.type == "integer":
        return sa.Integer()
    if col.type == "bigint":
        return sa.BigInteger()
    if col.type == "float":
        return sa.Float()
    if col.type == "boolean":
        return sa.Boolean()
    if col.type == "timestamp":
        return sa.DateTime(timezone=True)
    if col.type == "date":
        return sa.Date()
    if col.type == "time":
        return sa.Time()
    if col.type == "jsonb":
        return postgresql.JSONB()
    if col.type == "enum":
        # VARCHAR + named CHECK; no PostgreSQL enum type is created
        return sa.Enum(
            *col.enum_values,
            name=enum_constraint_name(table, col.name),
            native_enum=False,
            create_constraint=True,
            length=max(len(v) for v in col.enum_values),
        )
    raise ValueError(f"Unsupported column type {col.type!r}")


def _server_default(col: ColumnSpec, strategy: UuidStrategy) -> Any:
    if col.generated_id:
        return sa.text(strategy.default_expression)
    if col.default_sql is not None:
        return sa.text(col.default_sql)
    value = col.default
    if value is None:
        return None
    if isinstance(value, bool):
        return sa.text("true" if value else "false")
    if isinstance(value, (int, float)):
        return sa.text(str(value))
    if isinstance(value, (dict, list)):
        payload = json.dumps(value, sort_keys=True).replace("'", "''")
        return sa.text(f"'{payload}'::jsonb")
    return str(value)


def _columns(spec: TableSpec, strategy: UuidStrategy) -> list[sa.Column]:
    return [
        sa.Column(
            col.name,
            _column_type(spec.name, col),
            nullable=col.nullable,
            server_default=_server_default(col, strategy),
            comment=col.comment,
        )
        for col in spec.columns
    ]


def _constraints(spec: TableSpec) -> list[sa.schema.Constraint]:
    pk = [c.name for c in spec.columns if c.primary_key]
    constraints: list[sa.schema.Constraint] = [sa.PrimaryKeyConstraint(*pk)]
    for col in spec.columns:
        ref = col.references
        if ref is not None:
            constraints.append(
                sa.ForeignKeyConstraint(
                    [col.name],
                    [f"{ref.table}.{ref.column}"],
                    name=foreign_key_name(spec.name, col.name),
                    ondelete=ref.on_delete,
                    onupdate=ref.on_update,
                )
            )
        if col.unique:
            constraints.append(
                sa.UniqueConstraint(col.name, name=column_unique_name(spec.name, col.name))
            )
    for unique in spec.uniques:
        constraints.append(sa.UniqueConstraint(*unique.columns, name=unique.name))
    for check in spec.checks:
        constraints.append(sa.CheckConstraint(check.condition, name=check.name))
    return constraints


def _index_elements(index: IndexSpec) -> list[Any]:
    if index.expression:
        return [sa.text(index.expression)]
    return list(index.columns)


def _index_kwargs(index: IndexSpec) -> dict[str, Any]:
    kwargs: dict[str, Any] = {"unique": index.unique}
    if index.where:
        kwargs["postgresql_where"] = sa.text(index.where)
    return kwargs


def build_table(
    spec: TableSpec,
    metadata: sa.MetaData | None = None,
    id_strategy: UuidStrategy | str | None = None,
) -> sa.Table:
    """Build a SQLAlchemy Table (with its indexes) from a validated spec."""
    validate_table_spec(spec)
    strategy = resolve_uuid_strategy(id_strategy)
    if metadata is None:
        metadata = sa.MetaData()
    # FK targets must be resolvable to compile; stub any the metadata lacks
    for col in spec.columns:
        ref = col.references
        if ref is not None and ref.table != spec.name and ref.table not in metadata.tables:
            sa.Table(ref.table, metadata, sa.Column(ref.column, postgresql.UUID(as_uuid=True)))
    indexes = [
        sa.Index(index.name, *_index_elements(index), **_index_kwargs(index))
        for index in spec.indexes
    ]
    return sa.Table(
        spec.name,
        metadata,
        *_columns(spec, strategy),
        *_constraints(spec),
        *indexes,
        comment=spec.comment,
    )


def render_create_sql(spec: TableSpec, id_strategy: UuidStrategy | str | None = None) -> str:
    """Compile the CREATE TABLE and CREATE INDEX statements for a TableSpec (PostgreSQL dialect)."""
    table = build_table(spec, id_strategy=id_strategy)
    dialect = postgresql.dialect()
    statements = [str(CreateTable(table).compile(dialect=dialect)).strip()]
    for index in sorted(table.indexes, key=lambda i: i.name):
        statements.append(str(CreateIndex(index).compile(dialect=dialect)).strip())
    return ";\n\n".join(statements) + ";"


def create_table(spec: TableSpec, id_strategy: UuidStrategy | str | None = None) -> None:
    """Emit CREATE TABLE plus one CREATE INDEX per IndexSpec. Database errors propagate."""
    validate_table_spec(spec)
    strategy = resolve_uuid_strategy(id_strategy)
    logger.info("Creating table %s (id default %s)", spec.name, strategy.default_expression)
    op.create_table(
        spec.name,
        *_columns(spec, strategy),
        *_constraints(spec),
        comment=spec.comment,
    )
    for index in spec.indexes:
        op.create_index(index.name, spec.name, _index_elements(index), **_index_kwargs(index))


def drop_table(table: TableSpec | str) -> None:
    """DROP TABLE IF EXISTS: a no-op when the table is already gone."""
    name = table.name if isinstance(table, TableSpec) else table
    logger.info("Dropping table %s (if exists)", name)
    op.execute(DropTable(sa.Table(name, sa.MetaData()), if_exists=True))


def create_uuid_extension(id_strategy: UuidStrategy | str | None = None) -> str | None:
    """CREATE EXTENSION IF NOT EXISTS for the strategy's extension. Returns its name, or None."""
    strategy = resolve_uuid_strategy(id_strategy)
    if strategy.extension is None:
        return None
    op.execute(f'CREATE EXTENSION IF NOT EXISTS "{strategy.extension}"')
    return strategy.extension
