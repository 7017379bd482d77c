"""Pydantic DTO per Player: input create/update e output di visualizzazione."""

from datetime import date, datetime

from pydantic import BaseModel

from roster.models import Player
from roster.models.common import require_user_id


def _strip_or_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class CreatePlayerDto(BaseModel):
    user_id: str
    name: str
    date_of_birth: date
    gender: str | None = None
    photo_url: str | None = None

    def to_entity(self, created_by: str) -> Player:
        """Nuova entita' con testi normalizzati; created_at lo stampa il repository."""
        require_user_id(created_by)
        return Player(
            user_id=self.user_id.strip(),
            name=self.name.strip(),
            date_of_birth=self.date_of_birth,
            gender=_strip_or_none(self.gender),
            photo_url=_strip_or_none(self.photo_url),
            created_by=created_by,
        )


class UpdatePlayerDto(BaseModel):
    id: int
    name: str
    date_of_birth: date
    gender: str | None = None
    photo_url: str | None = None

    def apply_to(self, player: Player, updated_by: str) -> Player:
        """
        Aggiorna in place solo name/date_of_birth/gender/photo_url.
        user_id, id, created_at e created_by restano immutati.
        """
        require_user_id(updated_by)
        player.name = self.name.strip()
        player.date_of_birth = self.date_of_birth
        player.gender = _strip_or_none(self.gender)
        player.photo_url = _strip_or_none(self.photo_url)
        player.update_last_modified(updated_by)
        return player


class PlayerDto(BaseModel):
    id: int
    user_id: str
    name: str
    date_of_birth: date
    age: int
    gender: str | None = None
    photo_url: str | None = None
    created_at: datetime
    created_by: str
    updated_at: datetime | None = None
    updated_by: str | None = None

    class Config:
        from_attributes = True

    @classmethod
    def from_entity(cls, player: Player) -> "PlayerDto":
        if player is None:
            raise ValueError("player cannot be None")
        return cls(
            id=player.id,
            user_id=player.user_id,
            name=player.name.strip(),
            date_of_birth=player.date_of_birth,
            age=player.age,
            gender=_strip_or_none(player.gender),
            photo_url=_strip_or_none(player.photo_url),
            created_at=player.created_at,
            created_by=player.created_by,
            updated_at=player.updated_at,
            updated_by=player.updated_by,
        )
