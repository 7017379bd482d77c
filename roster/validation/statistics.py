"""Validazione statistiche partita (create/update/entita')."""

from datetime import date

from roster.models import PlayerStatistic
from roster.models.common import as_date, is_real_date, utc_today
from roster.schemas.common import ValidationResult
from roster.schemas.statistics import CreatePlayerStatisticDto, UpdatePlayerStatisticDto
from roster.validation.common import Errors, add_error, build_result, require_input

MAX_MINUTES_PLAYED = 120
MAX_JERSEY_NUMBER = 99


def _validate_team_player_id(team_player_id: int | None, errors: Errors) -> None:
    if team_player_id is None or team_player_id <= 0:
        add_error(errors, "team_player_id", "Team Player ID is required and must be a positive integer")


def _validate_game_date(game_date: date | None, errors: Errors) -> None:
    if not is_real_date(game_date):
        add_error(errors, "game_date", "Game date is required")
        return
    if as_date(game_date) > utc_today():
        add_error(errors, "game_date", "Game date cannot be in the future")


def _validate_minutes_played(minutes_played: int | None, errors: Errors) -> None:
    if minutes_played is None or minutes_played < 0:
        add_error(errors, "minutes_played", "Minutes played must be a non-negative integer")
    elif minutes_played > MAX_MINUTES_PLAYED:
        add_error(errors, "minutes_played", f"Minutes played must not exceed {MAX_MINUTES_PLAYED}")


def _validate_jersey_number(jersey_number: int | None, errors: Errors) -> None:
    if jersey_number is None or jersey_number <= 0:
        add_error(errors, "jersey_number", "Jersey number must be a positive integer")
    elif jersey_number > MAX_JERSEY_NUMBER:
        add_error(errors, "jersey_number", f"Jersey number must not exceed {MAX_JERSEY_NUMBER}")


def _validate_non_negative(value: int | None, field: str, label: str, errors: Errors) -> None:
    if value is None or value < 0:
        add_error(errors, field, f"{label} must be a non-negative integer")


def _validate_fields(source, errors: Errors) -> None:
    _validate_team_player_id(source.team_player_id, errors)
    _validate_game_date(source.game_date, errors)
    _validate_minutes_played(source.minutes_played, errors)
    _validate_jersey_number(source.jersey_number, errors)
    _validate_non_negative(source.goals, "goals", "Goals", errors)
    _validate_non_negative(source.assists, "assists", "Assists", errors)


def validate_create_player_statistic(dto: CreatePlayerStatisticDto) -> ValidationResult:
    require_input(dto, "dto")
    errors: Errors = {}
    _validate_fields(dto, errors)
    return build_result(errors)


def validate_update_player_statistic(dto: UpdatePlayerStatisticDto) -> ValidationResult:
    require_input(dto, "dto")
    errors: Errors = {}
    _validate_fields(dto, errors)
    return build_result(errors)


def validate_player_statistic(statistic: PlayerStatistic) -> ValidationResult:
    require_input(statistic, "statistic")
    errors: Errors = {}
    _validate_fields(statistic, errors)
    return build_result(errors)
