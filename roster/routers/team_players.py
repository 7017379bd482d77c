"""
API assegnazioni squadra: lista per giocatore, aggiunta, modifica,
chiusura (leave) ed eliminazione fisica.
"""

from datetime import date

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from roster.routers.deps import get_current_user_id, get_team_player_service, to_response
from roster.schemas.common import ServiceResult
from roster.schemas.team_players import CreateTeamPlayerDto, UpdateTeamPlayerDto
from roster.services.team_player_service import TeamPlayerService

router = APIRouter(tags=["team-players"])


class LeaveTeamRequest(BaseModel):
    left_date: date


@router.get("/api/players/{player_id}/teams")
async def list_player_teams(
    player_id: int,
    include_inactive: bool = False,
    service: TeamPlayerService = Depends(get_team_player_service),
):
    return to_response(await service.get_teams_by_player_id(player_id, include_inactive=include_inactive))


@router.post("/api/players/{player_id}/teams")
async def add_player_to_team(
    player_id: int,
    dto: CreateTeamPlayerDto,
    current_user_id: str | None = Depends(get_current_user_id),
    service: TeamPlayerService = Depends(get_team_player_service),
):
    if dto.player_id != player_id:
        return to_response(ServiceResult.fail("Player ID mismatch."))
    return to_response(await service.add_player_to_team(dto, current_user_id), success_status=201)


@router.get("/api/team-players/{team_player_id}")
async def get_team_assignment(team_player_id: int, service: TeamPlayerService = Depends(get_team_player_service)):
    return to_response(await service.get_team_assignment_by_id(team_player_id))


@router.put("/api/team-players/{team_player_id}")
async def update_team_assignment(
    team_player_id: int,
    dto: UpdateTeamPlayerDto,
    current_user_id: str | None = Depends(get_current_user_id),
    service: TeamPlayerService = Depends(get_team_player_service),
):
    return to_response(await service.update_team_assignment(team_player_id, dto, current_user_id))


@router.post("/api/team-players/{team_player_id}/leave")
async def remove_player_from_team(
    team_player_id: int,
    body: LeaveTeamRequest,
    current_user_id: str | None = Depends(get_current_user_id),
    service: TeamPlayerService = Depends(get_team_player_service),
):
    """Chiude l'assegnazione: la riga resta nello storico con left_date valorizzata."""
    return to_response(await service.remove_player_from_team(team_player_id, body.left_date, current_user_id))


@router.delete("/api/team-players/{team_player_id}")
async def delete_team_assignment(team_player_id: int, service: TeamPlayerService = Depends(get_team_player_service)):
    return to_response(await service.delete_team_assignment(team_player_id))
