"""API statistiche partita e aggregati giocatore."""

from datetime import date

from fastapi import APIRouter, Depends

from roster.routers.deps import get_current_user_id, get_statistic_service, to_response
from roster.schemas.statistics import CreatePlayerStatisticDto, UpdatePlayerStatisticDto
from roster.services.player_statistic_service import PlayerStatisticService

router = APIRouter(tags=["statistics"])


@router.get("/api/players/{player_id}/statistics")
async def list_player_statistics(
    player_id: int,
    start_date: date | None = None,
    end_date: date | None = None,
    team_player_id: int | None = None,
    service: PlayerStatisticService = Depends(get_statistic_service),
):
    """
    Partite del giocatore su tutte le assegnazioni, piu' recenti prima.
    Con start_date e end_date filtra l'intervallo (estremi inclusi).
    """
    if start_date is not None or end_date is not None:
        return to_response(
            await service.get_statistics_by_date_range(
                player_id,
                start_date or date.min,
                end_date or date.max,
                team_player_id=team_player_id,
            )
        )
    if team_player_id is not None:
        return to_response(await service.get_statistics_by_team_player_id(team_player_id))
    return to_response(await service.get_statistics_by_player_id(player_id))


@router.get("/api/players/{player_id}/statistics/aggregates")
async def player_aggregates(
    player_id: int,
    team_player_id: int | None = None,
    service: PlayerStatisticService = Depends(get_statistic_service),
):
    return to_response(await service.get_player_aggregates(player_id, team_player_id))


@router.get("/api/team-players/{team_player_id}/statistics")
async def list_team_player_statistics(
    team_player_id: int,
    service: PlayerStatisticService = Depends(get_statistic_service),
):
    return to_response(await service.get_statistics_by_team_player_id(team_player_id))


@router.post("/api/statistics")
async def add_statistic(
    dto: CreatePlayerStatisticDto,
    current_user_id: str | None = Depends(get_current_user_id),
    service: PlayerStatisticService = Depends(get_statistic_service),
):
    return to_response(await service.add_statistic(dto, current_user_id), success_status=201)


@router.get("/api/statistics/{statistic_id}")
async def get_statistic(statistic_id: int, service: PlayerStatisticService = Depends(get_statistic_service)):
    return to_response(await service.get_statistic_by_id(statistic_id))


@router.put("/api/statistics/{statistic_id}")
async def update_statistic(
    statistic_id: int,
    dto: UpdatePlayerStatisticDto,
    current_user_id: str | None = Depends(get_current_user_id),
    service: PlayerStatisticService = Depends(get_statistic_service),
):
    return to_response(await service.update_statistic(statistic_id, dto, current_user_id))


@router.delete("/api/statistics/{statistic_id}")
async def delete_statistic(statistic_id: int, service: PlayerStatisticService = Depends(get_statistic_service)):
    return to_response(await service.delete_statistic(statistic_id))
