"""Pydantic DTO per le assegnazioni giocatore/squadra."""

from datetime import date, datetime

from pydantic import BaseModel

from roster.models import TeamPlayer
from roster.models.common import loaded_navigation, require_user_id


class CreateTeamPlayerDto(BaseModel):
    player_id: int
    team_name: str
    championship_name: str
    joined_date: date

    def to_entity(self, created_by: str) -> TeamPlayer:
        require_user_id(created_by)
        return TeamPlayer(
            player_id=self.player_id,
            team_name=self.team_name.strip(),
            championship_name=self.championship_name.strip(),
            joined_date=self.joined_date,
            created_by=created_by,
        )


class UpdateTeamPlayerDto(BaseModel):
    team_player_id: int
    team_name: str
    championship_name: str
    joined_date: date
    left_date: date | None = None

    def names_differ_from(self, team_player: TeamPlayer) -> bool:
        return (
            self.team_name.strip().lower() != team_player.team_name.strip().lower()
            or self.championship_name.strip().lower() != team_player.championship_name.strip().lower()
        )

    def apply_to(self, team_player: TeamPlayer, updated_by: str) -> TeamPlayer:
        """
        Applica team/championship/joined e poi, se presente, la chiusura.
        La disattivazione passa sempre da mark_as_left: un left_date diverso
        su un'assegnazione gia' chiusa solleva InvalidOperationError.
        left_date assente non riattiva un'assegnazione chiusa.
        """
        require_user_id(updated_by)
        team_player.team_name = self.team_name.strip()
        team_player.championship_name = self.championship_name.strip()
        team_player.joined_date = self.joined_date

        if self.left_date is not None and self.left_date != team_player.left_date:
            team_player.mark_as_left(self.left_date, updated_by)
        else:
            team_player.update_last_modified(updated_by)
        return team_player


class TeamPlayerDto(BaseModel):
    team_player_id: int
    player_id: int
    player_name: str | None = None
    team_name: str
    championship_name: str
    joined_date: date
    left_date: date | None = None
    is_active: bool
    duration_days: int
    created_at: datetime
    created_by: str
    updated_at: datetime | None = None
    updated_by: str | None = None

    class Config:
        from_attributes = True

    @classmethod
    def from_entity(cls, team_player: TeamPlayer) -> "TeamPlayerDto":
        if team_player is None:
            raise ValueError("team_player cannot be None")
        player = loaded_navigation(team_player, "player")
        return cls(
            team_player_id=team_player.team_player_id,
            player_id=team_player.player_id,
            player_name=player.name.strip() if player is not None else None,
            team_name=team_player.team_name.strip(),
            championship_name=team_player.championship_name.strip(),
            joined_date=team_player.joined_date,
            left_date=team_player.left_date,
            is_active=team_player.is_active,
            duration_days=team_player.duration_days(),
            created_at=team_player.created_at,
            created_by=team_player.created_by,
            updated_at=team_player.updated_at,
            updated_by=team_player.updated_by,
        )
