"""
Dependency FastAPI: utente corrente dall'header X-User-Id, service per request
e traduzione ServiceResult -> JSONResponse.
"""

from fastapi import Depends, Header
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from roster.core.database import get_db
from roster.repositories import PlayerRepository, PlayerStatisticRepository, TeamPlayerRepository
from roster.schemas.common import ServiceResult
from roster.services.player_service import PlayerService
from roster.services.player_statistic_service import PlayerStatisticService
from roster.services.team_player_service import TeamPlayerService


def get_current_user_id(x_user_id: str | None = Header(default=None)) -> str | None:
    """Id opaco fornito dall'identity provider esterno. La validazione la fa il service."""
    return x_user_id


def get_player_service(db: AsyncSession = Depends(get_db)) -> PlayerService:
    return PlayerService(PlayerRepository(db))


def get_team_player_service(db: AsyncSession = Depends(get_db)) -> TeamPlayerService:
    return TeamPlayerService(TeamPlayerRepository(db), PlayerRepository(db))


def get_statistic_service(db: AsyncSession = Depends(get_db)) -> PlayerStatisticService:
    return PlayerStatisticService(PlayerStatisticRepository(db), TeamPlayerRepository(db))


def to_response(result: ServiceResult, success_status: int = 200) -> JSONResponse:
    """200/201 successo, 422 validazione, 404 id inesistente, 400 altri errori."""
    if result.success:
        return JSONResponse(status_code=success_status, content=jsonable_encoder(result.data))
    if result.is_validation_failure:
        status_code = 422
    elif result.not_found:
        status_code = 404
    else:
        status_code = 400
    return JSONResponse(
        status_code=status_code,
        content={
            "error_messages": result.error_messages,
            "validation_errors": result.validation_errors,
        },
    )
