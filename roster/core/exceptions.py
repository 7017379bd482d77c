"""Eccezioni tipizzate del data layer."""

from typing import Any


class RepositoryError(Exception):
    """Errore dello store tradotto al confine del repository."""

    def __init__(
        self,
        message: str = "A repository operation failed.",
        operation: str | None = None,
        entity_type: str | None = None,
        entity_id: Any = None,
    ):
        super().__init__(message)
        self.operation = operation
        self.entity_type = entity_type
        self.entity_id = entity_id


class EntityNotFoundError(RepositoryError):
    """Nessuna riga con l'id richiesto."""

    def __init__(self, entity_type: str, entity_id: Any, operation: str | None = None):
        super().__init__(
            f"{entity_type} with ID {entity_id} could not be found.",
            operation=operation,
            entity_type=entity_type,
            entity_id=entity_id,
        )


class InvalidOperationError(Exception):
    """Transizione di stato non ammessa (es. mark_as_left su assegnazione gia' chiusa)."""


class ConstraintViolationError(RepositoryError):
    """Vincolo dello store violato (unique/foreign key) durante una scrittura."""
