"""Sermon Planner: relational schema and migrations for sermon planning."""

__version__ = "0.1.0"
