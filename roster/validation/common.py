"""Helper condivisi dai validator: accumulo errori per campo."""

from roster.schemas.common import ValidationResult

Errors = dict[str, list[str]]


def add_error(errors: Errors, field: str, message: str) -> None:
    errors.setdefault(field, []).append(message)


def build_result(errors: Errors) -> ValidationResult:
    if not errors:
        return ValidationResult.valid()
    return ValidationResult.invalid(errors)


def require_input(value, label: str) -> None:
    if value is None:
        raise ValueError(f"{label} cannot be None")
