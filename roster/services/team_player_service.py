"""
Servizio assegnazioni giocatore/squadra.
Ordine per add: validazione -> esistenza giocatore -> controllo duplicati -> insert.
La chiusura di un'assegnazione passa sempre da TeamPlayer.mark_as_left.
"""

import logging
from datetime import date

from roster.core.exceptions import ConstraintViolationError, EntityNotFoundError, InvalidOperationError
from roster.models.common import as_date, is_real_date, utc_today
from roster.repositories import PlayerRepository, TeamPlayerRepository
from roster.schemas.common import ServiceResult, ValidationResult
from roster.schemas.team_players import CreateTeamPlayerDto, TeamPlayerDto, UpdateTeamPlayerDto
from roster.services.common import joined_messages, missing_user_failure
from roster.validation import validate_create_team_player, validate_team_player, validate_update_team_player

logger = logging.getLogger(__name__)

DUPLICATE_ASSIGNMENT_FIELD = "duplicate_assignment"
DUPLICATE_ASSIGNMENT_MESSAGE = "Player already has an active assignment to this team and championship."


def _not_found(team_player_id: int) -> ServiceResult:
    return ServiceResult.not_found_failure(f"Team assignment with ID {team_player_id} could not be found.")


def _duplicate() -> ServiceResult:
    return ServiceResult.validation_failed(DUPLICATE_ASSIGNMENT_FIELD, DUPLICATE_ASSIGNMENT_MESSAGE)


class TeamPlayerService:
    def __init__(self, team_player_repository: TeamPlayerRepository, player_repository: PlayerRepository):
        self._team_players = team_player_repository
        self._players = player_repository

    async def get_teams_by_player_id(
        self,
        player_id: int,
        include_inactive: bool = False,
    ) -> ServiceResult[list[TeamPlayerDto]]:
        try:
            if include_inactive:
                items = await self._team_players.get_all_by_player_id(player_id)
            else:
                items = await self._team_players.get_active_by_player_id(player_id)
            return ServiceResult.ok([TeamPlayerDto.from_entity(tp) for tp in items])
        except Exception as e:
            logger.exception("Errore caricamento assegnazioni player_id=%s: %s", player_id, e)
            return ServiceResult.fail("Unable to load team assignments. Please refresh the page.")

    async def get_active_teams_by_player_id(self, player_id: int) -> ServiceResult[list[TeamPlayerDto]]:
        return await self.get_teams_by_player_id(player_id, include_inactive=False)

    async def get_team_assignment_by_id(self, team_player_id: int) -> ServiceResult[TeamPlayerDto]:
        try:
            item = await self._team_players.get_by_id(team_player_id, include_player=True)
            if item is None:
                logger.warning("TeamPlayer id=%s non trovato", team_player_id)
                return _not_found(team_player_id)
            return ServiceResult.ok(TeamPlayerDto.from_entity(item))
        except Exception as e:
            logger.exception("Errore caricamento assegnazione id=%s: %s", team_player_id, e)
            return ServiceResult.fail("Unable to load team assignment. Please try again.")

    async def add_player_to_team(
        self,
        dto: CreateTeamPlayerDto,
        current_user_id: str,
    ) -> ServiceResult[TeamPlayerDto]:
        failure = missing_user_failure(current_user_id)
        if failure is not None:
            return failure
        if dto is None:
            return ServiceResult.fail("Team assignment data is required.")

        logger.info(
            "Aggiunta player_id=%s a team=%s championship=%s da utente %s",
            dto.player_id, dto.team_name, dto.championship_name, current_user_id,
        )
        validation = validate_create_team_player(dto)
        if not validation.is_valid:
            logger.warning(
                "Validazione assegnazione player_id=%s fallita: %s", dto.player_id, joined_messages(validation.errors)
            )
            return ServiceResult.validation_failed(validation)

        try:
            if not await self._players.exists(dto.player_id):
                logger.warning("Player id=%s non trovato per assegnazione", dto.player_id)
                return ServiceResult.not_found_failure(f"Player with ID {dto.player_id} could not be found.")

            if await self._team_players.has_active_duplicate(dto.player_id, dto.team_name, dto.championship_name):
                logger.warning(
                    "Assegnazione attiva duplicata player_id=%s team=%s championship=%s",
                    dto.player_id, dto.team_name, dto.championship_name,
                )
                return _duplicate()

            created = await self._team_players.add(dto.to_entity(current_user_id))
            logger.info("TeamPlayer id=%s creato per player_id=%s", created.team_player_id, dto.player_id)
            return ServiceResult.ok(TeamPlayerDto.from_entity(created))
        except ConstraintViolationError:
            # insert concorrente: l'indice unico parziale ha respinto il duplicato
            logger.warning("Duplicato respinto dallo store per player_id=%s", dto.player_id)
            return _duplicate()
        except Exception as e:
            logger.exception("Errore aggiunta player_id=%s a team=%s: %s", dto.player_id, dto.team_name, e)
            return ServiceResult.fail("Unable to save team assignment. Please try again.")

    async def update_team_assignment(
        self,
        team_player_id: int,
        dto: UpdateTeamPlayerDto,
        current_user_id: str,
    ) -> ServiceResult[TeamPlayerDto]:
        failure = missing_user_failure(current_user_id)
        if failure is not None:
            return failure
        if dto is None:
            return ServiceResult.fail("Team assignment data is required.")

        logger.info("Aggiornamento TeamPlayer id=%s da utente %s", team_player_id, current_user_id)
        if dto.team_player_id != team_player_id:
            logger.warning("Team player ID mismatch: url=%s dto=%s", team_player_id, dto.team_player_id)
            return ServiceResult.fail("Team player ID mismatch.")

        try:
            existing = await self._team_players.get_by_id(team_player_id)
            if existing is None:
                logger.warning("TeamPlayer id=%s non trovato per update", team_player_id)
                return _not_found(team_player_id)

            validation = validate_update_team_player(dto)
            if not validation.is_valid:
                logger.warning(
                    "Validazione update TeamPlayer id=%s fallita: %s",
                    team_player_id, joined_messages(validation.errors),
                )
                return ServiceResult.validation_failed(validation)

            if existing.is_active and dto.names_differ_from(existing):
                duplicate = await self._team_players.has_active_duplicate(
                    existing.player_id, dto.team_name, dto.championship_name, exclude_id=team_player_id
                )
                if duplicate:
                    logger.warning("Update TeamPlayer id=%s creerebbe un duplicato attivo", team_player_id)
                    return _duplicate()

            dto.apply_to(existing, current_user_id)
            entity_validation = validate_team_player(existing)
            if not entity_validation.is_valid:
                return ServiceResult.validation_failed(entity_validation)

            await self._team_players.update(existing)
            updated = await self._team_players.get_by_id(team_player_id, include_player=True)
            if updated is None:
                return _not_found(team_player_id)
            logger.info("TeamPlayer id=%s aggiornato, attivo=%s", team_player_id, updated.is_active)
            return ServiceResult.ok(TeamPlayerDto.from_entity(updated))
        except InvalidOperationError as e:
            logger.warning("Regola di business violata su TeamPlayer id=%s: %s", team_player_id, e)
            return ServiceResult.fail(str(e))
        except EntityNotFoundError:
            return _not_found(team_player_id)
        except ConstraintViolationError:
            return _duplicate()
        except Exception as e:
            logger.exception("Errore update TeamPlayer id=%s: %s", team_player_id, e)
            return ServiceResult.fail("Unable to update team assignment. Please try again.")

    async def remove_player_from_team(
        self,
        team_player_id: int,
        left_date: date,
        current_user_id: str,
    ) -> ServiceResult[TeamPlayerDto]:
        """Chiude l'assegnazione alla data indicata (soft: la riga resta, is_active diventa False)."""
        failure = missing_user_failure(current_user_id)
        if failure is not None:
            return failure

        logger.info("Rimozione da TeamPlayer id=%s da utente %s", team_player_id, current_user_id)
        try:
            existing = await self._team_players.get_by_id(team_player_id)
            if existing is None:
                logger.warning("TeamPlayer id=%s non trovato per rimozione", team_player_id)
                return _not_found(team_player_id)

            left = as_date(left_date)
            if not is_real_date(left):
                return ServiceResult.validation_failed("left_date", "Left date is required")
            if left <= as_date(existing.joined_date):
                logger.warning("left_date non valida per TeamPlayer id=%s: precede joined_date", team_player_id)
                return ServiceResult.validation_failed("left_date", "Left date must be after the joined date")
            if left > utc_today():
                logger.warning("left_date non valida per TeamPlayer id=%s: nel futuro", team_player_id)
                return ServiceResult.validation_failed("left_date", "Left date cannot be in the future")

            existing.mark_as_left(left, current_user_id)
            await self._team_players.update(existing)
            updated = await self._team_players.get_by_id(team_player_id, include_player=True)
            if updated is None:
                return _not_found(team_player_id)
            logger.info("TeamPlayer id=%s chiuso, attivo=%s", team_player_id, updated.is_active)
            return ServiceResult.ok(TeamPlayerDto.from_entity(updated))
        except InvalidOperationError as e:
            logger.warning("Regola di business violata su TeamPlayer id=%s: %s", team_player_id, e)
            return ServiceResult.fail(str(e))
        except EntityNotFoundError:
            return _not_found(team_player_id)
        except Exception as e:
            logger.exception("Errore rimozione TeamPlayer id=%s: %s", team_player_id, e)
            return ServiceResult.fail("Unable to update team assignment. Please try again.")

    async def delete_team_assignment(self, team_player_id: int) -> ServiceResult[bool]:
        """Cancellazione fisica: le statistiche collegate seguono per cascade."""
        try:
            deleted = await self._team_players.delete(team_player_id)
            if not deleted:
                return _not_found(team_player_id)
            return ServiceResult.ok(True)
        except Exception as e:
            logger.exception("Errore eliminazione TeamPlayer id=%s: %s", team_player_id, e)
            return ServiceResult.fail("Unable to delete team assignment. Please try again.")

    def validate_team_assignment(self, dto: CreateTeamPlayerDto | UpdateTeamPlayerDto) -> ValidationResult:
        if isinstance(dto, UpdateTeamPlayerDto):
            return validate_update_team_player(dto)
        return validate_create_team_player(dto)
