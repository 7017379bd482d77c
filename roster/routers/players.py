"""API Players: anagrafica giocatori (CRUD)."""

from fastapi import APIRouter, Depends

from roster.routers.deps import get_current_user_id, get_player_service, to_response
from roster.schemas.players import CreatePlayerDto, UpdatePlayerDto
from roster.services.player_service import PlayerService

router = APIRouter(prefix="/api/players", tags=["players"])


@router.get("")
async def list_players(user_id: str | None = None, service: PlayerService = Depends(get_player_service)):
    """Tutti i giocatori ordinati per nome; con user_id solo quelli dell'utente."""
    if user_id is not None:
        return to_response(await service.get_players_by_user_id(user_id))
    return to_response(await service.get_all_players())


@router.get("/{player_id}")
async def get_player(player_id: int, service: PlayerService = Depends(get_player_service)):
    return to_response(await service.get_player_by_id(player_id))


@router.post("")
async def create_player(
    dto: CreatePlayerDto,
    current_user_id: str | None = Depends(get_current_user_id),
    service: PlayerService = Depends(get_player_service),
):
    return to_response(await service.create_player(dto, current_user_id), success_status=201)


@router.put("/{player_id}")
async def update_player(
    player_id: int,
    dto: UpdatePlayerDto,
    current_user_id: str | None = Depends(get_current_user_id),
    service: PlayerService = Depends(get_player_service),
):
    return to_response(await service.update_player(player_id, dto, current_user_id))


@router.delete("/{player_id}")
async def delete_player(player_id: int, service: PlayerService = Depends(get_player_service)):
    """Elimina giocatore, assegnazioni e statistiche (cascade)."""
    return to_response(await service.delete_player(player_id))
