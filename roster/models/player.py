"""Player ORM model. Anagrafica del giocatore con audit."""

from datetime import date
from urllib.parse import urlparse

from sqlalchemy import Column, Date, Index, Integer, String

from roster.core.database import Base
from roster.models.common import AuditMixin, as_date, is_blank, is_real_date, utc_today

NAME_MAX_LENGTH = 200
GENDER_MAX_LENGTH = 50
PHOTO_URL_MAX_LENGTH = 500


def is_http_url(value: str) -> bool:
    """True se value e' un URL assoluto http/https."""
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class Player(AuditMixin, Base):
    __tablename__ = "players"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(450), nullable=False, index=True)
    name = Column(String(NAME_MAX_LENGTH), nullable=False)
    date_of_birth = Column(Date, nullable=False)
    gender = Column(String(GENDER_MAX_LENGTH), nullable=True)
    photo_url = Column(String(PHOTO_URL_MAX_LENGTH), nullable=True)

    __table_args__ = (
        Index("ix_players_user_id_name", "user_id", "name"),
    )

    @property
    def age(self) -> int:
        return self.calculate_age()

    def calculate_age(self, today: date | None = None) -> int:
        """
        Anni compiuti alla data odierna (UTC). Se il compleanno non e' ancora
        arrivato quest'anno si sottrae uno; nati il 29/02 compiono gli anni
        il 1/03 negli anni non bisestili.
        """
        today = as_date(today) or utc_today()
        dob = as_date(self.date_of_birth)
        age = today.year - dob.year
        if (today.month, today.day) < (dob.month, dob.day):
            age -= 1
        return age

    def validate(self) -> bool:
        """Ricontrolla gli invarianti sui valori correnti. Non modifica stato, non solleva."""
        try:
            return self._check_invariants()
        except (AttributeError, TypeError, ValueError):
            return False

    def _check_invariants(self) -> bool:
        if is_blank(self.user_id):
            return False
        if is_blank(self.name) or len(self.name.strip()) > NAME_MAX_LENGTH:
            return False
        if not is_real_date(self.date_of_birth) or as_date(self.date_of_birth) >= utc_today():
            return False
        if self.gender is not None and len(self.gender.strip()) > GENDER_MAX_LENGTH:
            return False
        if self.photo_url is not None:
            url = self.photo_url.strip()
            if len(url) > PHOTO_URL_MAX_LENGTH or not is_http_url(url):
                return False
        if is_blank(self.created_by):
            return False
        return True

    def __repr__(self):
        return f"<Player id={self.id} name={self.name!r} user_id={self.user_id!r}>"
