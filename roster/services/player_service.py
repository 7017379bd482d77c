"""
Servizio Player: validazione input, mapping DTO <-> entita', chiamate al
repository. Ogni errore diventa un ServiceResult, mai un'eccezione verso il chiamante.
"""

import logging

from roster.core.exceptions import EntityNotFoundError
from roster.repositories import PlayerRepository
from roster.schemas.common import ServiceResult, ValidationResult
from roster.schemas.players import CreatePlayerDto, PlayerDto, UpdatePlayerDto
from roster.services.common import joined_messages, missing_user_failure
from roster.validation import validate_create_player, validate_update_player

logger = logging.getLogger(__name__)


class PlayerService:
    def __init__(self, player_repository: PlayerRepository):
        self._players = player_repository

    async def get_all_players(self) -> ServiceResult[list[PlayerDto]]:
        try:
            players = await self._players.get_all()
            return ServiceResult.ok([PlayerDto.from_entity(p) for p in players])
        except Exception as e:
            logger.exception("Errore caricamento giocatori: %s", e)
            return ServiceResult.fail("Unable to load players. Please refresh the page.")

    async def get_players_by_user_id(self, user_id: str) -> ServiceResult[list[PlayerDto]]:
        failure = missing_user_failure(user_id)
        if failure is not None:
            return failure
        try:
            players = await self._players.get_by_user_id(user_id)
            return ServiceResult.ok([PlayerDto.from_entity(p) for p in players])
        except Exception as e:
            logger.exception("Errore caricamento giocatori user_id=%s: %s", user_id, e)
            return ServiceResult.fail("Unable to load players. Please refresh the page.")

    async def get_player_by_id(self, player_id: int) -> ServiceResult[PlayerDto]:
        try:
            player = await self._players.get_by_id(player_id)
            if player is None:
                logger.warning("Player id=%s non trovato", player_id)
                return ServiceResult.not_found_failure(f"Player with ID {player_id} could not be found.")
            return ServiceResult.ok(PlayerDto.from_entity(player))
        except Exception as e:
            logger.exception("Errore caricamento player id=%s: %s", player_id, e)
            return ServiceResult.fail("Unable to load player. Please try again.")

    async def create_player(self, dto: CreatePlayerDto, current_user_id: str) -> ServiceResult[PlayerDto]:
        failure = missing_user_failure(current_user_id)
        if failure is not None:
            return failure
        if dto is None:
            return ServiceResult.fail("Player data is required.")

        logger.info("Creazione player %r da utente %s", dto.name, current_user_id)
        validation = validate_create_player(dto)
        if not validation.is_valid:
            logger.warning("Validazione create player fallita: %s", joined_messages(validation.errors))
            return ServiceResult.validation_failed(validation)

        try:
            created = await self._players.add(dto.to_entity(current_user_id))
            logger.info("Player id=%s creato", created.id)
            return ServiceResult.ok(PlayerDto.from_entity(created))
        except Exception as e:
            logger.exception("Errore creazione player %r: %s", dto.name, e)
            return ServiceResult.fail("Unable to save player. Please try again.")

    async def update_player(
        self,
        player_id: int,
        dto: UpdatePlayerDto,
        current_user_id: str,
    ) -> ServiceResult[PlayerDto]:
        failure = missing_user_failure(current_user_id)
        if failure is not None:
            return failure
        if dto is None:
            return ServiceResult.fail("Player data is required.")

        logger.info("Aggiornamento player id=%s da utente %s", player_id, current_user_id)
        if dto.id != player_id:
            logger.warning("Player ID mismatch: url=%s dto=%s", player_id, dto.id)
            return ServiceResult.fail("Player ID mismatch.")

        validation = validate_update_player(dto)
        if not validation.is_valid:
            logger.warning(
                "Validazione update player id=%s fallita: %s", player_id, joined_messages(validation.errors)
            )
            return ServiceResult.validation_failed(validation)

        try:
            existing = await self._players.get_by_id(player_id)
            if existing is None:
                logger.warning("Player id=%s non trovato per update", player_id)
                return ServiceResult.not_found_failure(f"Player with ID {player_id} could not be found.")
            dto.apply_to(existing, current_user_id)
            updated = await self._players.update(existing)
            logger.info("Player id=%s aggiornato", player_id)
            return ServiceResult.ok(PlayerDto.from_entity(updated))
        except EntityNotFoundError:
            # cancellato tra la lettura e la scrittura
            return ServiceResult.not_found_failure(f"Player with ID {player_id} could not be found.")
        except Exception as e:
            logger.exception("Errore update player id=%s: %s", player_id, e)
            return ServiceResult.fail("Unable to save player. Please try again.")

    async def delete_player(self, player_id: int) -> ServiceResult[bool]:
        """Elimina il giocatore; assegnazioni e statistiche seguono per cascade."""
        try:
            deleted = await self._players.delete(player_id)
            if not deleted:
                return ServiceResult.not_found_failure(f"Player with ID {player_id} could not be found.")
            logger.info("Player id=%s eliminato", player_id)
            return ServiceResult.ok(True)
        except Exception as e:
            logger.exception("Errore eliminazione player id=%s: %s", player_id, e)
            return ServiceResult.fail("Unable to delete player. Please try again.")

    def validate_player(self, dto: CreatePlayerDto | UpdatePlayerDto) -> ValidationResult:
        if isinstance(dto, UpdatePlayerDto):
            return validate_update_player(dto)
        return validate_create_player(dto)
