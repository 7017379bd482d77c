"""Envelope uniformi per il service layer: ValidationResult e ServiceResult."""

from collections.abc import Iterable, Mapping
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


def _require_text(value: str | None, label: str) -> None:
    if value is None or not value.strip():
        raise ValueError(f"{label} cannot be null or whitespace.")


class ValidationResult(BaseModel):
    """Esito di validazione: campo -> lista messaggi. Vuoto se valido."""
    is_valid: bool
    errors: dict[str, list[str]] = Field(default_factory=dict)

    @classmethod
    def valid(cls) -> "ValidationResult":
        return cls(is_valid=True)

    @classmethod
    def invalid(
        cls,
        errors: Mapping[str, Iterable[str]] | str,
        messages: str | Iterable[str] | None = None,
    ) -> "ValidationResult":
        """
        invalid({"name": ["..."]}) oppure invalid("name", "...") / invalid("name", ["...", "..."]).
        """
        if isinstance(errors, str):
            _require_text(errors, "Field name")
            if messages is None:
                raise ValueError("Error messages cannot be None.")
            items = [messages] if isinstance(messages, str) else list(messages)
            if not items:
                raise ValueError("Error messages cannot be empty.")
            for m in items:
                _require_text(m, "Error message")
            return cls(is_valid=False, errors={errors: items})
        if errors is None:
            raise ValueError("Errors cannot be None.")
        return cls(is_valid=False, errors={k: list(v) for k, v in errors.items()})

    def all_messages(self) -> list[str]:
        return [m for msgs in self.errors.values() for m in msgs]


class ServiceResult(BaseModel, Generic[T]):
    """
    Esito uniforme verso il chiamante:
      - success + data
      - failure + error_messages (errore di business / infrastruttura)
      - failure + validation_errors (errori per campo)
    not_found distingue il caso "id inesistente" tra i fallimenti di business.
    """
    success: bool
    data: T | None = None
    error_messages: list[str] = Field(default_factory=list)
    validation_errors: dict[str, list[str]] = Field(default_factory=dict)
    not_found: bool = False

    @property
    def is_validation_failure(self) -> bool:
        return not self.success and bool(self.validation_errors)

    @classmethod
    def ok(cls, data: T | None = None) -> "ServiceResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, errors: str | Iterable[str], not_found: bool = False) -> "ServiceResult[T]":
        if isinstance(errors, str):
            _require_text(errors, "Error message")
            messages = [errors]
        else:
            if errors is None:
                raise ValueError("Error messages cannot be None.")
            messages = list(errors)
            if not messages:
                raise ValueError("Error messages collection cannot be empty.")
        return cls(success=False, error_messages=messages, not_found=not_found)

    @classmethod
    def not_found_failure(cls, message: str) -> "ServiceResult[T]":
        return cls.fail(message, not_found=True)

    @classmethod
    def validation_failed(
        cls,
        errors: ValidationResult | Mapping[str, Iterable[str]] | str,
        message: str | None = None,
    ) -> "ServiceResult[T]":
        """validation_failed(result) | validation_failed({"field": [...]}) | validation_failed("field", "msg")."""
        if isinstance(errors, ValidationResult):
            return cls(success=False, validation_errors=dict(errors.errors))
        if isinstance(errors, str):
            _require_text(errors, "Field name")
            _require_text(message, "Error message")
            return cls(success=False, validation_errors={errors: [message]})
        if errors is None:
            raise ValueError("Validation errors cannot be None.")
        return cls(success=False, validation_errors={k: list(v) for k, v in errors.items()})
