"""Schema status response schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class TableStatusRead(BaseModel):
    """Row and index counts for one table."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    row_count: int
    index_count: int


class SchemaStatusRead(BaseModel):
    """Schema verification report (GET /api/schema/status)."""

    model_config = ConfigDict(from_attributes=True)

    ok: bool
    revision: str | None
    head: str
    up_to_date: bool
    missing_tables: list[str]
    tables: list[TableStatusRead]
    trigger_count: int
