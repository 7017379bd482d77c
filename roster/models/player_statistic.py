"""
Statistiche per singola partita, legate all'assegnazione (team_player) e non
direttamente al giocatore: un cambio squadra non riattribuisce lo storico.
"""

from collections.abc import Iterable

from sqlalchemy import Boolean, Column, Date, ForeignKey, Index, Integer
from sqlalchemy.orm import relationship

from roster.core.database import Base
from roster.models.common import AuditMixin, as_date, is_blank, is_real_date, utc_today


class PlayerStatistic(AuditMixin, Base):
    __tablename__ = "player_statistics"

    player_statistic_id = Column(Integer, primary_key=True, autoincrement=True)
    team_player_id = Column(
        Integer, ForeignKey("team_players.team_player_id", ondelete="CASCADE"),
        nullable=False,
    )
    game_date = Column(Date, nullable=False)
    minutes_played = Column(Integer, nullable=False)
    is_starter = Column(Boolean, nullable=False)
    jersey_number = Column(Integer, nullable=False)
    goals = Column(Integer, nullable=False)
    assists = Column(Integer, nullable=False)

    # --- NAVIGATION ---
    team_player = relationship("TeamPlayer", viewonly=True, lazy="raise")

    # --- INDICI ---
    __table_args__ = (
        Index("ix_player_statistics_team_player_id", "team_player_id"),
        Index("ix_player_statistics_game_date", "game_date"),
        Index("ix_player_statistics_team_player_id_game_date", "team_player_id", "game_date"),
    )

    def validate(self) -> bool:
        try:
            return self._check_invariants()
        except (AttributeError, TypeError, ValueError):
            return False

    def _check_invariants(self) -> bool:
        if self.team_player_id is None or self.team_player_id <= 0:
            return False
        if not is_real_date(self.game_date) or as_date(self.game_date) > utc_today():
            return False
        if self.minutes_played is None or self.minutes_played < 0:
            return False
        if self.is_starter is None:
            return False
        if self.jersey_number is None or self.jersey_number <= 0:
            return False
        if self.goals is None or self.goals < 0:
            return False
        if self.assists is None or self.assists < 0:
            return False
        if is_blank(self.created_by):
            return False
        return True

    @staticmethod
    def calculate_total_minutes(statistics: Iterable["PlayerStatistic"]) -> int:
        if statistics is None:
            raise ValueError("statistics cannot be None")
        return sum(s.minutes_played for s in statistics)

    @staticmethod
    def calculate_total_goals(statistics: Iterable["PlayerStatistic"]) -> int:
        if statistics is None:
            raise ValueError("statistics cannot be None")
        return sum(s.goals for s in statistics)

    @staticmethod
    def calculate_total_assists(statistics: Iterable["PlayerStatistic"]) -> int:
        if statistics is None:
            raise ValueError("statistics cannot be None")
        return sum(s.assists for s in statistics)

    def __repr__(self):
        return (
            f"<PlayerStatistic id={self.player_statistic_id} team_player_id={self.team_player_id} "
            f"game_date={self.game_date}>"
        )
