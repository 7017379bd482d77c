"""Accesso allo store per Player."""

import logging

from sqlalchemy import select

from roster.core.exceptions import EntityNotFoundError
from roster.models import Player
from roster.models.common import require_user_id
from roster.repositories.audit import apply_update_audit, stamp_created
from roster.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class PlayerRepository(BaseRepository):
    entity_type = "Player"
    model = Player
    id_column_name = "id"

    async def get_all(self) -> list[Player]:
        async with self._guard("get_all"):
            players = await self._fetch_all(select(Player).order_by(Player.name, Player.id))
            logger.info("Caricati %s giocatori", len(players))
            return players

    async def get_by_user_id(self, user_id: str) -> list[Player]:
        require_user_id(user_id)
        async with self._guard("get_by_user_id"):
            stmt = select(Player).where(Player.user_id == user_id).order_by(Player.name, Player.id)
            players = await self._fetch_all(stmt)
            logger.info("Caricati %s giocatori per user_id=%s", len(players), user_id)
            return players

    async def get_by_id(self, player_id: int) -> Player | None:
        async with self._guard("get_by_id", player_id):
            player = await self._fetch_one(select(Player).where(Player.id == player_id))
            if player is None:
                logger.debug("Player id=%s non trovato", player_id)
            return player

    async def add(self, player: Player) -> Player:
        if player is None:
            raise ValueError("player cannot be None")
        stamp_created(player)
        async with self._guard("add"):
            await self._insert(player)
            logger.info("Player id=%s creato da %s", player.id, player.created_by)
            return player

    async def update(self, player: Player) -> Player:
        """
        Salva name/date_of_birth/gender/photo_url e updated_*.
        EntityNotFoundError se la riga non esiste piu'.
        """
        if player is None:
            raise ValueError("player cannot be None")
        async with self._guard("update", player.id):
            existing = await self.db.get(Player, player.id)
            if existing is None:
                logger.warning("Player id=%s non trovato per update", player.id)
                raise EntityNotFoundError(self.entity_type, player.id, operation="update")
            existing.name = player.name
            existing.date_of_birth = player.date_of_birth
            existing.gender = player.gender
            existing.photo_url = player.photo_url
            apply_update_audit(existing, player)
            await self.db.commit()
            self.db.expunge(existing)
            logger.info("Player id=%s aggiornato da %s", existing.id, existing.updated_by)
            return existing
