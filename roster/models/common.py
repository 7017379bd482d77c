"""Campi di audit comuni, helper di data UTC e accesso alle navigation."""

from datetime import date, datetime, timezone

from sqlalchemy import Column, DateTime, String, inspect

AUDIT_USER_MAX_LENGTH = 450


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_today() -> date:
    return utc_now().date()


def is_blank(value: str | None) -> bool:
    return value is None or not str(value).strip()


def as_date(value: date | datetime | None) -> date | None:
    """Normalizza datetime -> date; le date restano invariate."""
    if isinstance(value, datetime):
        return value.date()
    return value


def is_real_date(value: date | datetime | None) -> bool:
    """None e date.min non sono date reali (valore di default)."""
    value = as_date(value)
    return isinstance(value, date) and value != date.min


def require_user_id(user_id: str | None) -> None:
    if is_blank(user_id):
        raise ValueError("User ID cannot be null, empty, or whitespace.")


class AuditMixin:
    """Audit quad: CreatedAt/CreatedBy/UpdatedAt/UpdatedBy."""

    created_at = Column(DateTime(timezone=True), nullable=False)
    created_by = Column(String(AUDIT_USER_MAX_LENGTH), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    updated_by = Column(String(AUDIT_USER_MAX_LENGTH), nullable=True)

    def update_last_modified(self, user_id: str) -> None:
        """Imposta updated_at (UTC) e updated_by. ValueError se user_id e' vuoto."""
        require_user_id(user_id)
        self.updated_at = utc_now()
        self.updated_by = user_id


def loaded_navigation(entity, name: str):
    """Ritorna la relazione solo se gia' caricata dalla query, altrimenti None."""
    if name in inspect(entity).unloaded:
        return None
    return getattr(entity, name)
