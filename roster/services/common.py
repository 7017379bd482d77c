"""Helper condivisi dai service."""

from roster.models.common import is_blank
from roster.schemas.common import ServiceResult

CURRENT_USER_REQUIRED = "Current user ID cannot be null or whitespace."


def missing_user_failure(current_user_id: str | None) -> ServiceResult | None:
    """ServiceResult di errore se l'utente corrente manca, altrimenti None."""
    if is_blank(current_user_id):
        return ServiceResult.fail(CURRENT_USER_REQUIRED)
    return None


def joined_messages(errors: dict[str, list[str]]) -> str:
    return ", ".join(m for msgs in errors.values() for m in msgs)
