from lesson_market.db.base import Base
from lesson_market.db.session import async_session_factory, engine, get_db

__all__ = ["Base", "engine", "async_session_factory", "get_db"]
