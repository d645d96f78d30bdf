"""
Database module - SQLAlchemy engine, sessions and schema.
"""
from app.db.postgres import get_db_session, test_postgres_connection
from app.db.tables import init_db

__all__ = [
    "get_db_session",
    "test_postgres_connection",
    "init_db"
]
