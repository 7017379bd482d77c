"""SQLAlchemy async engine, session per request e creazione tabelle."""

import logging
from collections.abc import AsyncIterator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from roster.core.config import get_database_url, get_sql_echo

logger = logging.getLogger(__name__)

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignora ON DELETE CASCADE se foreign_keys non e' attivo sulla connessione
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """
    Crea l'engine async. Su SQLite attiva le foreign key per ogni connessione,
    cosi' le cancellazioni a cascata sono garantite dallo store.
    """
    engine = create_async_engine(url, pool_pre_ping=True, echo=echo)
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=bind, class_=AsyncSession, expire_on_commit=False, autoflush=False)


engine = build_engine(get_database_url(), echo=get_sql_echo())
SessionLocal = build_session_factory(engine)


async def get_db() -> AsyncIterator[AsyncSession]:
    """Dependency that yields one AsyncSession per request. Never shared."""
    async with SessionLocal() as db:
        yield db


async def init_db(bind: AsyncEngine | None = None) -> None:
    """
    Crea tutte le tabelle (players, team_players, player_statistics).
    I modelli devono essere importati prima per registrare i metadata.
    """
    from roster.models import player, player_statistic, team_player  # noqa: F401

    target = bind or engine
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("create_all completato su %s", target.url.render_as_string(hide_password=True))
