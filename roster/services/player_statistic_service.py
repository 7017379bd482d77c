"""Servizio statistiche partita e aggregati per giocatore."""

import logging
from datetime import date

from roster.core.exceptions import EntityNotFoundError
from roster.repositories import PlayerStatisticRepository, TeamPlayerRepository
from roster.schemas.common import ServiceResult, ValidationResult
from roster.schemas.statistics import (
    CreatePlayerStatisticDto,
    PlayerAggregatesDto,
    PlayerStatisticDto,
    UpdatePlayerStatisticDto,
)
from roster.services.common import joined_messages, missing_user_failure
from roster.validation import validate_create_player_statistic, validate_update_player_statistic

logger = logging.getLogger(__name__)


def _not_found(statistic_id: int) -> ServiceResult:
    return ServiceResult.not_found_failure(f"Statistic with ID {statistic_id} could not be found.")


def _team_player_not_found(team_player_id: int) -> ServiceResult:
    return ServiceResult.not_found_failure(f"Team player with ID {team_player_id} could not be found.")


class PlayerStatisticService:
    def __init__(
        self,
        statistic_repository: PlayerStatisticRepository,
        team_player_repository: TeamPlayerRepository,
    ):
        self._statistics = statistic_repository
        self._team_players = team_player_repository

    async def get_statistics_by_player_id(self, player_id: int) -> ServiceResult[list[PlayerStatisticDto]]:
        try:
            items = await self._statistics.get_all_by_player_id(player_id)
            return ServiceResult.ok([PlayerStatisticDto.from_entity(s) for s in items])
        except Exception as e:
            logger.exception("Errore caricamento statistiche player_id=%s: %s", player_id, e)
            return ServiceResult.fail("Unable to load statistics. Please refresh the page.")

    async def get_statistics_by_team_player_id(self, team_player_id: int) -> ServiceResult[list[PlayerStatisticDto]]:
        try:
            items = await self._statistics.get_all_by_team_player_id(team_player_id)
            return ServiceResult.ok([PlayerStatisticDto.from_entity(s) for s in items])
        except Exception as e:
            logger.exception("Errore caricamento statistiche team_player_id=%s: %s", team_player_id, e)
            return ServiceResult.fail("Unable to load statistics. Please refresh the page.")

    async def get_statistic_by_id(self, statistic_id: int) -> ServiceResult[PlayerStatisticDto]:
        try:
            item = await self._statistics.get_by_id(statistic_id)
            if item is None:
                logger.warning("PlayerStatistic id=%s non trovata", statistic_id)
                return _not_found(statistic_id)
            return ServiceResult.ok(PlayerStatisticDto.from_entity(item))
        except Exception as e:
            logger.exception("Errore caricamento statistica id=%s: %s", statistic_id, e)
            return ServiceResult.fail("Unable to load statistic. Please try again.")

    async def get_statistics_by_date_range(
        self,
        player_id: int,
        start_date: date,
        end_date: date,
        team_player_id: int | None = None,
    ) -> ServiceResult[list[PlayerStatisticDto]]:
        try:
            items = await self._statistics.get_by_date_range(player_id, start_date, end_date, team_player_id)
            return ServiceResult.ok([PlayerStatisticDto.from_entity(s) for s in items])
        except ValueError as e:
            logger.warning("Intervallo date non valido per player_id=%s: %s", player_id, e)
            return ServiceResult.validation_failed("date_range", str(e))
        except Exception as e:
            logger.exception("Errore caricamento statistiche per intervallo player_id=%s: %s", player_id, e)
            return ServiceResult.fail("Unable to load statistics. Please refresh the page.")

    async def add_statistic(
        self,
        dto: CreatePlayerStatisticDto,
        current_user_id: str,
    ) -> ServiceResult[PlayerStatisticDto]:
        failure = missing_user_failure(current_user_id)
        if failure is not None:
            return failure
        if dto is None:
            return ServiceResult.fail("Statistic data is required.")

        logger.info(
            "Aggiunta statistica team_player_id=%s game_date=%s da utente %s",
            dto.team_player_id, dto.game_date, current_user_id,
        )
        validation = validate_create_player_statistic(dto)
        if not validation.is_valid:
            logger.warning("Validazione statistica fallita: %s", joined_messages(validation.errors))
            return ServiceResult.validation_failed(validation)

        try:
            if not await self._team_players.exists(dto.team_player_id):
                logger.warning("TeamPlayer id=%s non trovato per statistica", dto.team_player_id)
                return _team_player_not_found(dto.team_player_id)
            created = await self._statistics.add(dto.to_entity(current_user_id))
            logger.info("PlayerStatistic id=%s creata", created.player_statistic_id)
            return ServiceResult.ok(PlayerStatisticDto.from_entity(created))
        except Exception as e:
            logger.exception("Errore creazione statistica team_player_id=%s: %s", dto.team_player_id, e)
            return ServiceResult.fail("Unable to save statistic. Please try again.")

    async def update_statistic(
        self,
        statistic_id: int,
        dto: UpdatePlayerStatisticDto,
        current_user_id: str,
    ) -> ServiceResult[PlayerStatisticDto]:
        failure = missing_user_failure(current_user_id)
        if failure is not None:
            return failure
        if dto is None:
            return ServiceResult.fail("Statistic data is required.")

        logger.info("Aggiornamento statistica id=%s da utente %s", statistic_id, current_user_id)
        if dto.player_statistic_id != statistic_id:
            logger.warning("Statistic ID mismatch: url=%s dto=%s", statistic_id, dto.player_statistic_id)
            return ServiceResult.fail("Statistic ID mismatch.")

        validation = validate_update_player_statistic(dto)
        if not validation.is_valid:
            logger.warning(
                "Validazione update statistica id=%s fallita: %s", statistic_id, joined_messages(validation.errors)
            )
            return ServiceResult.validation_failed(validation)

        try:
            existing = await self._statistics.get_by_id(statistic_id)
            if existing is None:
                logger.warning("PlayerStatistic id=%s non trovata per update", statistic_id)
                return _not_found(statistic_id)

            if dto.team_player_id != existing.team_player_id and not await self._team_players.exists(
                dto.team_player_id
            ):
                logger.warning("TeamPlayer id=%s non trovato per update statistica", dto.team_player_id)
                return _team_player_not_found(dto.team_player_id)

            dto.apply_to(existing, current_user_id)
            updated = await self._statistics.update(existing)
            logger.info("PlayerStatistic id=%s aggiornata", statistic_id)
            return ServiceResult.ok(PlayerStatisticDto.from_entity(updated))
        except EntityNotFoundError:
            return _not_found(statistic_id)
        except Exception as e:
            logger.exception("Errore update statistica id=%s: %s", statistic_id, e)
            return ServiceResult.fail("Unable to save statistic. Please try again.")

    async def delete_statistic(self, statistic_id: int) -> ServiceResult[bool]:
        try:
            deleted = await self._statistics.delete(statistic_id)
            if not deleted:
                return _not_found(statistic_id)
            return ServiceResult.ok(True)
        except Exception as e:
            logger.exception("Errore eliminazione statistica id=%s: %s", statistic_id, e)
            return ServiceResult.fail("Unable to delete statistic. Please try again.")

    async def get_player_aggregates(
        self,
        player_id: int,
        team_player_id: int | None = None,
    ) -> ServiceResult[PlayerAggregatesDto]:
        try:
            aggregates = await self._statistics.get_aggregates(player_id, team_player_id)
            return ServiceResult.ok(aggregates)
        except Exception as e:
            logger.exception("Errore aggregati player_id=%s team_player_id=%s: %s", player_id, team_player_id, e)
            return ServiceResult.fail("Unable to load aggregates. Please try again.")

    def validate_statistic(self, dto: CreatePlayerStatisticDto | UpdatePlayerStatisticDto) -> ValidationResult:
        if isinstance(dto, UpdatePlayerStatisticDto):
            return validate_update_player_statistic(dto)
        return validate_create_player_statistic(dto)
