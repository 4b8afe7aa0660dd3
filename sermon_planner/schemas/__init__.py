"""Pydantic schemas for API responses."""

from sermon_planner.schemas.status import SchemaStatusRead, TableStatusRead

__all__ = ["SchemaStatusRead", "TableStatusRead"]
