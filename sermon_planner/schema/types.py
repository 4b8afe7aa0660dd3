"""Data-driven table descriptions consumed by the DDL renderer.

A migration declares each table it creates as a :class:`TableSpec` (columns
plus constraint and index specs) and hands it to
:func:`sermon_planner.schema.renderer.create_table`. Nothing in here talks to
a database.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

COLUMN_TYPES = frozenset(
    {
        "uuid",
        "string",
        "text",
        "integer",
        "bigint",
        "float",
        "boolean",
        "timestamp",
        "date",
        "time",
        "jsonb",
        "enum",
    }
)

REFERENTIAL_ACTIONS = frozenset({"CASCADE", "SET NULL", "RESTRICT", "NO ACTION", "SET DEFAULT"})


class UuidStrategy(str, Enum):
    """How UUID primary keys get their server-side default."""

    BUILTIN = "builtin"
    PGCRYPTO = "pgcrypto"
    UUID_OSSP = "uuid-ossp"

    @property
    def default_expression(self) -> str:
        if self is UuidStrategy.UUID_OSSP:
            return "uuid_generate_v4()"
        return "gen_random_uuid()"

    @property
    def extension(self) -> str | None:
        """PostgreSQL extension that provides the default, or None when built in (PG 13+)."""
        if self is UuidStrategy.BUILTIN:
            return None
        return self.value


@dataclass(frozen=True)
class ForeignKeySpec:
    """Reference from a single column to ``table(column)``."""

    table: str
    column: str = "id"
    on_delete: str | None = None
    on_update: str | None = None


@dataclass(frozen=True)
class ColumnSpec:
    """One column. ``default`` is a Python literal; ``default_sql`` is a raw SQL expression."""

    name: str
    type: str
    length: int | None = None
    nullable: bool = True
    primary_key: bool = False
    generated_id: bool = False
    default: Any = None
    default_sql: str | None = None
    unique: bool = False
    comment: str | None = None
    enum_values: tuple[str, ...] = ()
    references: ForeignKeySpec | None = None


@dataclass(frozen=True)
class CheckSpec:
    name: str
    condition: str


@dataclass(frozen=True)
class UniqueSpec:
    name: str
    columns: tuple[str, ...]


@dataclass(frozen=True)
class IndexSpec:
    """Index over plain columns or over a single SQL expression (never both)."""

    name: str
    columns: tuple[str, ...] = ()
    expression: str | None = None
    unique: bool = False
    where: str | None = None


@dataclass(frozen=True)
class TableSpec:
    """Complete description of one table: columns, constraints and indexes."""

    name: str
    columns: tuple[ColumnSpec, ...]
    checks: tuple[CheckSpec, ...] = ()
    uniques: tuple[UniqueSpec, ...] = ()
    indexes: tuple[IndexSpec, ...] = ()
    comment: str | None = None

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    def column(self, name: str) -> ColumnSpec:
        for col in self.columns:
            if col.name == name:
                return col
        raise KeyError(f"{self.name} has no column {name!r}")

    @property
    def constraint_names(self) -> list[str]:
        """Names of all named checks, unique constraints and indexes, in declaration order."""
        return (
            [c.name for c in self.checks]
            + [u.name for u in self.uniques]
            + [i.name for i in self.indexes]
        )


def uuid_primary_key(name: str = "id") -> ColumnSpec:
    """UUID primary key whose default comes from the configured :class:`UuidStrategy`."""
    return ColumnSpec(name, "uuid", nullable=False, primary_key=True, generated_id=True)


def foreign_key(
    name: str,
    table: str,
    *,
    nullable: bool = False,
    on_delete: str = "CASCADE",
    on_update: str = "CASCADE",
    comment: str | None = None,
) -> ColumnSpec:
    """UUID column referencing ``table(id)``."""
    return ColumnSpec(
        name,
        "uuid",
        nullable=nullable,
        comment=comment,
        references=ForeignKeySpec(table, "id", on_delete=on_delete, on_update=on_update),
    )


def timestamps() -> tuple[ColumnSpec, ColumnSpec]:
    """created_at / updated_at, timezone-aware, defaulting to the current timestamp."""
    return (
        ColumnSpec("created_at", "timestamp", nullable=False, default_sql="CURRENT_TIMESTAMP"),
        ColumnSpec("updated_at", "timestamp", nullable=False, default_sql="CURRENT_TIMESTAMP"),
    )


def soft_delete() -> ColumnSpec:
    return ColumnSpec("deleted_at", "timestamp", nullable=True)


def jsonb(name: str, default: Any = None, *, nullable: bool = True, comment: str | None = None) -> ColumnSpec:
    return ColumnSpec(name, "jsonb", nullable=nullable, default=default, comment=comment)


def enum(
    name: str,
    values: tuple[str, ...],
    default: str | None = None,
    *,
    comment: str | None = None,
) -> ColumnSpec:
    """Non-null enum column; rendered as VARCHAR plus a named CHECK.

    Without a default, inserts must name a value.
    """
    return ColumnSpec(
        name,
        "enum",
        nullable=False,
        default=default,
        enum_values=tuple(values),
        comment=comment,
    )
