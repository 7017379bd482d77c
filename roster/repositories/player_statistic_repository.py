"""
Accesso allo store per PlayerStatistic. Le letture per giocatore passano
sempre dall'assegnazione (join su team_players); la navigation team_player
viene caricata insieme alla statistica.
"""

import logging
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.orm import joinedload

from roster.core.exceptions import EntityNotFoundError
from roster.models import PlayerStatistic, TeamPlayer
from roster.models.common import as_date
from roster.repositories.audit import apply_update_audit, stamp_created
from roster.repositories.base import BaseRepository
from roster.schemas.statistics import PlayerAggregatesDto

logger = logging.getLogger(__name__)


class PlayerStatisticRepository(BaseRepository):
    entity_type = "PlayerStatistic"
    model = PlayerStatistic
    id_column_name = "player_statistic_id"

    def _base_query(self):
        return select(PlayerStatistic).options(joinedload(PlayerStatistic.team_player))

    def _by_player(self, player_id: int):
        return (
            self._base_query()
            .join(TeamPlayer, TeamPlayer.team_player_id == PlayerStatistic.team_player_id)
            .where(TeamPlayer.player_id == player_id)
        )

    def _ordered(self, stmt):
        return stmt.order_by(PlayerStatistic.game_date.desc(), PlayerStatistic.player_statistic_id.desc())

    async def get_all_by_player_id(self, player_id: int) -> list[PlayerStatistic]:
        async with self._guard("get_all_by_player_id", player_id):
            items = await self._fetch_all(self._ordered(self._by_player(player_id)))
            logger.info("Caricate %s statistiche per player_id=%s", len(items), player_id)
            return items

    async def get_all_by_team_player_id(self, team_player_id: int) -> list[PlayerStatistic]:
        async with self._guard("get_all_by_team_player_id", team_player_id):
            stmt = self._ordered(
                self._base_query().where(PlayerStatistic.team_player_id == team_player_id)
            )
            items = await self._fetch_all(stmt)
            logger.info("Caricate %s statistiche per team_player_id=%s", len(items), team_player_id)
            return items

    async def get_by_id(self, statistic_id: int) -> PlayerStatistic | None:
        async with self._guard("get_by_id", statistic_id):
            stmt = self._base_query().where(PlayerStatistic.player_statistic_id == statistic_id)
            item = await self._fetch_one(stmt)
            if item is None:
                logger.debug("PlayerStatistic id=%s non trovata", statistic_id)
            return item

    async def get_by_date_range(
        self,
        player_id: int,
        start_date: date,
        end_date: date,
        team_player_id: int | None = None,
    ) -> list[PlayerStatistic]:
        """Partite con start_date <= game_date <= end_date. ValueError se start > end."""
        start, end = as_date(start_date), as_date(end_date)
        if start is None or end is None:
            raise ValueError("Start and end dates are required.")
        if start > end:
            raise ValueError("Start date must be on or before end date.")
        async with self._guard("get_by_date_range", player_id):
            stmt = self._by_player(player_id).where(
                PlayerStatistic.game_date >= start,
                PlayerStatistic.game_date <= end,
            )
            if team_player_id is not None:
                stmt = stmt.where(PlayerStatistic.team_player_id == team_player_id)
            items = await self._fetch_all(self._ordered(stmt))
            logger.info(
                "Caricate %s statistiche per player_id=%s tra %s e %s",
                len(items), player_id, start, end,
            )
            return items

    async def add(self, statistic: PlayerStatistic) -> PlayerStatistic:
        if statistic is None:
            raise ValueError("statistic cannot be None")
        stamp_created(statistic)
        async with self._guard("add"):
            await self._insert(statistic)
            logger.info(
                "PlayerStatistic id=%s creata per team_player_id=%s",
                statistic.player_statistic_id, statistic.team_player_id,
            )
        return await self.get_by_id(statistic.player_statistic_id)

    async def update(self, statistic: PlayerStatistic) -> PlayerStatistic:
        if statistic is None:
            raise ValueError("statistic cannot be None")
        entity_id = statistic.player_statistic_id
        async with self._guard("update", entity_id):
            existing = await self.db.get(PlayerStatistic, entity_id)
            if existing is None:
                logger.warning("PlayerStatistic id=%s non trovata per update", entity_id)
                raise EntityNotFoundError(self.entity_type, entity_id, operation="update")
            existing.team_player_id = statistic.team_player_id
            existing.game_date = statistic.game_date
            existing.minutes_played = statistic.minutes_played
            existing.is_starter = statistic.is_starter
            existing.jersey_number = statistic.jersey_number
            existing.goals = statistic.goals
            existing.assists = statistic.assists
            apply_update_audit(existing, statistic)
            await self.db.commit()
            self.db.expunge(existing)
            logger.info("PlayerStatistic id=%s aggiornata da %s", entity_id, existing.updated_by)
        return await self.get_by_id(entity_id)

    async def get_aggregates(self, player_id: int, team_player_id: int | None = None) -> PlayerAggregatesDto:
        """
        Totali e medie in una sola query aggregata sullo store.
        Nessuna partita -> aggregati a zero.
        """
        async with self._guard("get_aggregates", player_id):
            stmt = (
                select(
                    func.count(PlayerStatistic.player_statistic_id),
                    func.coalesce(func.sum(PlayerStatistic.goals), 0),
                    func.coalesce(func.sum(PlayerStatistic.assists), 0),
                    func.coalesce(func.sum(PlayerStatistic.minutes_played), 0),
                )
                .select_from(PlayerStatistic)
                .join(TeamPlayer, TeamPlayer.team_player_id == PlayerStatistic.team_player_id)
                .where(TeamPlayer.player_id == player_id)
            )
            if team_player_id is not None:
                stmt = stmt.where(PlayerStatistic.team_player_id == team_player_id)
            game_count, goals, assists, minutes = (await self.db.execute(stmt)).one()
            logger.info(
                "Aggregati player_id=%s team_player_id=%s: partite=%s gol=%s assist=%s minuti=%s",
                player_id, team_player_id, game_count, goals, assists, minutes,
            )
            return PlayerAggregatesDto.from_totals(
                game_count=int(game_count),
                goals=int(goals),
                assists=int(assists),
                minutes=int(minutes),
            )
