"""Accesso allo store per le assegnazioni TeamPlayer."""

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import joinedload

from roster.core.exceptions import EntityNotFoundError
from roster.models import TeamPlayer
from roster.models.common import is_blank
from roster.repositories.audit import apply_update_audit, stamp_created
from roster.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


def _normalized(value: str) -> str:
    return (value or "").strip().lower()


class TeamPlayerRepository(BaseRepository):
    entity_type = "TeamPlayer"
    model = TeamPlayer
    id_column_name = "team_player_id"

    def _ordered(self, stmt):
        return stmt.order_by(TeamPlayer.joined_date.desc(), TeamPlayer.team_player_id.desc())

    async def get_all_by_player_id(self, player_id: int) -> list[TeamPlayer]:
        """Tutte le assegnazioni (attive e chiuse), piu' recenti prima."""
        async with self._guard("get_all_by_player_id", player_id):
            stmt = self._ordered(select(TeamPlayer).where(TeamPlayer.player_id == player_id))
            items = await self._fetch_all(stmt)
            logger.info("Caricate %s assegnazioni per player_id=%s", len(items), player_id)
            return items

    async def get_active_by_player_id(self, player_id: int) -> list[TeamPlayer]:
        async with self._guard("get_active_by_player_id", player_id):
            stmt = self._ordered(
                select(TeamPlayer).where(
                    TeamPlayer.player_id == player_id,
                    TeamPlayer.left_date.is_(None),
                )
            )
            items = await self._fetch_all(stmt)
            logger.info("Caricate %s assegnazioni attive per player_id=%s", len(items), player_id)
            return items

    async def get_by_id(self, team_player_id: int, include_player: bool = False) -> TeamPlayer | None:
        async with self._guard("get_by_id", team_player_id):
            stmt = select(TeamPlayer).where(TeamPlayer.team_player_id == team_player_id)
            if include_player:
                stmt = stmt.options(joinedload(TeamPlayer.player))
            item = await self._fetch_one(stmt)
            if item is None:
                logger.debug("TeamPlayer id=%s non trovato", team_player_id)
            return item

    async def add(self, team_player: TeamPlayer) -> TeamPlayer:
        if team_player is None:
            raise ValueError("team_player cannot be None")
        stamp_created(team_player)
        async with self._guard("add"):
            await self._insert(team_player)
            logger.info(
                "TeamPlayer id=%s creato: player_id=%s team=%s championship=%s",
                team_player.team_player_id, team_player.player_id,
                team_player.team_name, team_player.championship_name,
            )
            return team_player

    async def update(self, team_player: TeamPlayer) -> TeamPlayer:
        if team_player is None:
            raise ValueError("team_player cannot be None")
        entity_id = team_player.team_player_id
        async with self._guard("update", entity_id):
            existing = await self.db.get(TeamPlayer, entity_id)
            if existing is None:
                logger.warning("TeamPlayer id=%s non trovato per update", entity_id)
                raise EntityNotFoundError(self.entity_type, entity_id, operation="update")
            existing.team_name = team_player.team_name
            existing.championship_name = team_player.championship_name
            existing.joined_date = team_player.joined_date
            existing.left_date = team_player.left_date
            apply_update_audit(existing, team_player)
            await self.db.commit()
            self.db.expunge(existing)
            logger.info("TeamPlayer id=%s aggiornato da %s", entity_id, existing.updated_by)
            return existing

    async def has_active_duplicate(
        self,
        player_id: int,
        team_name: str,
        championship_name: str,
        exclude_id: int | None = None,
    ) -> bool:
        """
        True se esiste gia' un'assegnazione attiva per lo stesso giocatore,
        squadra e campionato (case-insensitive, spazi esterni ignorati).
        ValueError se squadra o campionato sono vuoti.
        """
        if is_blank(team_name):
            raise ValueError("Team name cannot be null or whitespace.")
        if is_blank(championship_name):
            raise ValueError("Championship name cannot be null or whitespace.")
        async with self._guard("has_active_duplicate", player_id):
            stmt = select(1).where(
                TeamPlayer.player_id == player_id,
                func.lower(func.trim(TeamPlayer.team_name)) == _normalized(team_name),
                func.lower(func.trim(TeamPlayer.championship_name)) == _normalized(championship_name),
                TeamPlayer.left_date.is_(None),
            )
            if exclude_id is not None:
                stmt = stmt.where(TeamPlayer.team_player_id != exclude_id)
            found = (await self.db.execute(stmt.limit(1))).first() is not None
            logger.debug(
                "has_active_duplicate player_id=%s team=%s championship=%s exclude=%s -> %s",
                player_id, team_name, championship_name, exclude_id, found,
            )
            return found
