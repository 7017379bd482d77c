"""
Assegnazione giocatore -> squadra in un campionato, delimitata nel tempo.
Attiva finche' left_date e' NULL; si chiude una sola volta con mark_as_left.
"""

from datetime import date

from sqlalchemy import Column, Date, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import relationship

from roster.core.database import Base
from roster.core.exceptions import InvalidOperationError
from roster.models.common import AuditMixin, as_date, is_blank, is_real_date, require_user_id, utc_now, utc_today

TEAM_NAME_MAX_LENGTH = 200
CHAMPIONSHIP_NAME_MAX_LENGTH = 200


class TeamPlayer(AuditMixin, Base):
    __tablename__ = "team_players"

    team_player_id = Column(Integer, primary_key=True, autoincrement=True)
    player_id = Column(Integer, ForeignKey("players.id", ondelete="CASCADE"), nullable=False)
    team_name = Column(String(TEAM_NAME_MAX_LENGTH), nullable=False)
    championship_name = Column(String(CHAMPIONSHIP_NAME_MAX_LENGTH), nullable=False)
    joined_date = Column(Date, nullable=False)
    left_date = Column(Date, nullable=True)

    # --- NAVIGATION (solo lettura, caricata esplicitamente dalla query) ---
    player = relationship("Player", viewonly=True, lazy="raise")

    # --- INDICI ---
    __table_args__ = (
        Index("ix_team_players_player_id", "player_id"),
        Index("ix_team_players_team_name", "team_name"),
        Index("ix_team_players_is_active", "left_date"),
        Index("ix_team_players_player_id_is_active", "player_id", "left_date"),
        Index("ix_team_players_player_team_championship", "player_id", "team_name", "championship_name"),
    )

    @property
    def is_active(self) -> bool:
        return self.left_date is None

    def is_currently_active(self) -> bool:
        return self.left_date is None

    def duration_days(self, today: date | None = None) -> int:
        """Giorni tra joined_date e left_date (o oggi se ancora attiva)."""
        end = as_date(self.left_date) or as_date(today) or utc_today()
        return (end - as_date(self.joined_date)).days

    def validate(self) -> bool:
        try:
            return self._check_invariants()
        except (AttributeError, TypeError, ValueError):
            return False

    def _check_invariants(self) -> bool:
        if is_blank(self.team_name) or len(self.team_name.strip()) > TEAM_NAME_MAX_LENGTH:
            return False
        if is_blank(self.championship_name) or len(self.championship_name.strip()) > CHAMPIONSHIP_NAME_MAX_LENGTH:
            return False
        if not is_real_date(self.joined_date):
            return False
        if self.left_date is not None:
            left = as_date(self.left_date)
            if left <= as_date(self.joined_date) or left > utc_today():
                return False
        if is_blank(self.created_by):
            return False
        return True

    def mark_as_left(self, left_date: date, user_id: str) -> None:
        """
        Unico modo ammesso per disattivare l'assegnazione.
        ValueError per user_id vuoto; InvalidOperationError se gia' chiusa,
        se left_date <= joined_date o se left_date e' nel futuro.
        In caso di errore lo stato resta invariato.
        """
        require_user_id(user_id)
        if self.left_date is not None:
            raise InvalidOperationError("Player has already left the team.")
        left = as_date(left_date)
        if not is_real_date(left):
            raise ValueError("Left date is required.")
        if left <= as_date(self.joined_date):
            raise InvalidOperationError("Left date must be after the joined date.")
        if left > utc_today():
            raise InvalidOperationError("Left date cannot be in the future.")

        self.left_date = left
        self.updated_at = utc_now()
        self.updated_by = user_id

    def __repr__(self):
        return (
            f"<TeamPlayer id={self.team_player_id} player_id={self.player_id} "
            f"team={self.team_name!r} championship={self.championship_name!r} active={self.is_active}>"
        )


# Garanzia hard contro la race check-then-insert: al massimo una assegnazione
# attiva per (player, team, championship), confronto case-insensitive.
Index(
    "ux_team_players_active_assignment",
    TeamPlayer.player_id,
    func.lower(func.trim(TeamPlayer.team_name)),
    func.lower(func.trim(TeamPlayer.championship_name)),
    unique=True,
    sqlite_where=TeamPlayer.left_date.is_(None),
    postgresql_where=TeamPlayer.left_date.is_(None),
)
