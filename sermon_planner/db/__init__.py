"""Database package."""

from sermon_planner.db.session import check_db_connection, engine

__all__ = ["check_db_connection", "engine"]
