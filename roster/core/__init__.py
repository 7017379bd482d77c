from roster.core.config import get_database_url
from roster.core.database import Base, SessionLocal, build_engine, engine, get_db, init_db

__all__ = [
    "get_database_url",
    "Base",
    "SessionLocal",
    "build_engine",
    "engine",
    "get_db",
    "init_db",
]
