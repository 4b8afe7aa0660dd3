"""
Database engine management. SQLAlchemy 2.x style.

There is no ORM layer: the schema is owned by the Alembic migrations and
everything else talks to it through Core connections.
"""

from sqlalchemy import create_engine, text

from sermon_planner.config import get_settings

settings = get_settings()
engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,
    pool_size=5,
    max_overflow=10,
    echo=settings.debug,
    connect_args={
        "connect_timeout": settings.db_connect_timeout,
        "options": "-c timezone=UTC",
    },
)


def check_db_connection() -> None:
    """
    Verify database connectivity. Raises if unreachable.
    Call during application startup.
    """
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
