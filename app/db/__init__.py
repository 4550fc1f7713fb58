"""Database package."""
from app.db.database import (
    Base,
    async_session_maker,
    close_engine,
    engine,
    get_db,
    init_db,
)

__all__ = [
    "Base",
    "async_session_maker",
    "close_engine",
    "engine",
    "get_db",
    "init_db",
]
