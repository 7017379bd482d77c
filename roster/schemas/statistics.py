"""Pydantic DTO per le statistiche partita e per gli aggregati."""

from collections.abc import Iterable
from datetime import date, datetime

from pydantic import BaseModel

from roster.models import PlayerStatistic
from roster.models.common import loaded_navigation, require_user_id


class CreatePlayerStatisticDto(BaseModel):
    team_player_id: int
    game_date: date
    minutes_played: int
    is_starter: bool
    jersey_number: int
    goals: int
    assists: int

    def to_entity(self, created_by: str) -> PlayerStatistic:
        require_user_id(created_by)
        return PlayerStatistic(
            team_player_id=self.team_player_id,
            game_date=self.game_date,
            minutes_played=self.minutes_played,
            is_starter=self.is_starter,
            jersey_number=self.jersey_number,
            goals=self.goals,
            assists=self.assists,
            created_by=created_by,
        )


class UpdatePlayerStatisticDto(BaseModel):
    player_statistic_id: int
    team_player_id: int
    game_date: date
    minutes_played: int
    is_starter: bool
    jersey_number: int
    goals: int
    assists: int

    def apply_to(self, statistic: PlayerStatistic, updated_by: str) -> PlayerStatistic:
        require_user_id(updated_by)
        statistic.team_player_id = self.team_player_id
        statistic.game_date = self.game_date
        statistic.minutes_played = self.minutes_played
        statistic.is_starter = self.is_starter
        statistic.jersey_number = self.jersey_number
        statistic.goals = self.goals
        statistic.assists = self.assists
        statistic.update_last_modified(updated_by)
        return statistic


class PlayerStatisticDto(BaseModel):
    player_statistic_id: int
    team_player_id: int
    team_name: str | None = None
    championship_name: str | None = None
    game_date: date
    minutes_played: int
    is_starter: bool
    jersey_number: int
    goals: int
    assists: int
    created_at: datetime
    created_by: str
    updated_at: datetime | None = None
    updated_by: str | None = None

    class Config:
        from_attributes = True

    @classmethod
    def from_entity(cls, statistic: PlayerStatistic) -> "PlayerStatisticDto":
        if statistic is None:
            raise ValueError("statistic cannot be None")
        team_player = loaded_navigation(statistic, "team_player")
        return cls(
            player_statistic_id=statistic.player_statistic_id,
            team_player_id=statistic.team_player_id,
            team_name=team_player.team_name.strip() if team_player is not None else None,
            championship_name=team_player.championship_name.strip() if team_player is not None else None,
            game_date=statistic.game_date,
            minutes_played=statistic.minutes_played,
            is_starter=statistic.is_starter,
            jersey_number=statistic.jersey_number,
            goals=statistic.goals,
            assists=statistic.assists,
            created_at=statistic.created_at,
            created_by=statistic.created_by,
            updated_at=statistic.updated_at,
            updated_by=statistic.updated_by,
        )


class PlayerAggregatesDto(BaseModel):
    """Totali e medie calcolati al volo, mai salvati. Medie a 0 se game_count e' 0."""
    game_count: int = 0
    total_goals: int = 0
    total_assists: int = 0
    total_minutes_played: int = 0
    average_goals: float = 0.0
    average_assists: float = 0.0
    average_minutes_played: float = 0.0

    @classmethod
    def empty(cls) -> "PlayerAggregatesDto":
        return cls()

    @classmethod
    def from_totals(cls, game_count: int, goals: int, assists: int, minutes: int) -> "PlayerAggregatesDto":
        if not game_count:
            return cls.empty()
        return cls(
            game_count=game_count,
            total_goals=goals,
            total_assists=assists,
            total_minutes_played=minutes,
            average_goals=goals / game_count,
            average_assists=assists / game_count,
            average_minutes_played=minutes / game_count,
        )

    @classmethod
    def from_statistics(cls, statistics: Iterable[PlayerStatistic]) -> "PlayerAggregatesDto":
        if statistics is None:
            raise ValueError("statistics cannot be None")
        items = list(statistics)
        return cls.from_totals(
            game_count=len(items),
            goals=PlayerStatistic.calculate_total_goals(items),
            assists=PlayerStatistic.calculate_total_assists(items),
            minutes=PlayerStatistic.calculate_total_minutes(items),
        )
