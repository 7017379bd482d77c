"""Player Roster: API JSON per giocatori, assegnazioni squadra e statistiche partita."""

import logging

from fastapi import FastAPI

from roster.core.config import get_log_level
from roster.core.database import init_db
from roster.routers import health_router, players_router, statistics_router, team_players_router

app = FastAPI(
    title="Player Roster",
    description="Players, time-bounded team assignments and per-game statistics with aggregates.",
    version="0.1.0",
)

app.include_router(health_router)
app.include_router(players_router)
app.include_router(team_players_router)
app.include_router(statistics_router)


@app.on_event("startup")
async def on_startup():
    """Configura il logging e crea le tabelle mancanti all'avvio."""
    logging.basicConfig(level=get_log_level(), format="%(levelname)s [%(name)s] %(message)s")
    await init_db()
