"""Validazione assegnazioni giocatore/squadra. Il controllo duplicati e' nel repository."""

from datetime import date

from roster.models import TeamPlayer
from roster.models.common import as_date, is_blank, is_real_date, utc_today
from roster.models.team_player import CHAMPIONSHIP_NAME_MAX_LENGTH, TEAM_NAME_MAX_LENGTH
from roster.schemas.common import ValidationResult
from roster.schemas.team_players import CreateTeamPlayerDto, UpdateTeamPlayerDto
from roster.validation.common import Errors, add_error, build_result, require_input

MAX_FUTURE_YEARS_FOR_JOINED_DATE = 1


def _validate_player_id(player_id: int | None, errors: Errors) -> None:
    if player_id is None or player_id <= 0:
        add_error(errors, "player_id", "Player ID is required and must be a positive integer")


def _validate_team_name(team_name: str | None, errors: Errors) -> None:
    if is_blank(team_name):
        add_error(errors, "team_name", "Team name is required")
        return
    if len(team_name.strip()) > TEAM_NAME_MAX_LENGTH:
        add_error(errors, "team_name", f"Team name must not exceed {TEAM_NAME_MAX_LENGTH} characters")


def _validate_championship_name(championship_name: str | None, errors: Errors) -> None:
    if is_blank(championship_name):
        add_error(errors, "championship_name", "Championship name is required")
        return
    if len(championship_name.strip()) > CHAMPIONSHIP_NAME_MAX_LENGTH:
        add_error(
            errors, "championship_name",
            f"Championship name must not exceed {CHAMPIONSHIP_NAME_MAX_LENGTH} characters",
        )


def _validate_joined_date(joined_date: date | None, errors: Errors) -> None:
    if not is_real_date(joined_date):
        add_error(errors, "joined_date", "Joined date is required")
        return
    today = utc_today()
    try:
        max_future = today.replace(year=today.year + MAX_FUTURE_YEARS_FOR_JOINED_DATE)
    except ValueError:
        max_future = today.replace(year=today.year + MAX_FUTURE_YEARS_FOR_JOINED_DATE, day=28)
    if as_date(joined_date) > max_future:
        add_error(errors, "joined_date", "Joined date cannot be more than 1 year in the future")


def _validate_left_date(left_date: date | None, joined_date: date | None, errors: Errors) -> None:
    if left_date is None:
        return
    left = as_date(left_date)
    if is_real_date(joined_date) and left <= as_date(joined_date):
        add_error(errors, "left_date", "Left date must be after the joined date")
    if left > utc_today():
        add_error(errors, "left_date", "Left date cannot be in the future")


def validate_create_team_player(dto: CreateTeamPlayerDto) -> ValidationResult:
    require_input(dto, "dto")
    errors: Errors = {}
    _validate_player_id(dto.player_id, errors)
    _validate_team_name(dto.team_name, errors)
    _validate_championship_name(dto.championship_name, errors)
    _validate_joined_date(dto.joined_date, errors)
    return build_result(errors)


def validate_update_team_player(dto: UpdateTeamPlayerDto) -> ValidationResult:
    require_input(dto, "dto")
    errors: Errors = {}
    _validate_team_name(dto.team_name, errors)
    _validate_championship_name(dto.championship_name, errors)
    _validate_joined_date(dto.joined_date, errors)
    _validate_left_date(dto.left_date, dto.joined_date, errors)
    return build_result(errors)


def validate_team_player(team_player: TeamPlayer) -> ValidationResult:
    """Stesse regole applicate all'entita' (usato dopo aver applicato un update)."""
    require_input(team_player, "team_player")
    errors: Errors = {}
    _validate_team_name(team_player.team_name, errors)
    _validate_championship_name(team_player.championship_name, errors)
    _validate_joined_date(team_player.joined_date, errors)
    _validate_left_date(team_player.left_date, team_player.joined_date, errors)
    return build_result(errors)
