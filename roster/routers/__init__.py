from roster.routers.health import router as health_router
from roster.routers.players import router as players_router
from roster.routers.statistics import router as statistics_router
from roster.routers.team_players import router as team_players_router

__all__ = ["health_router", "players_router", "team_players_router", "statistics_router"]
