"""
Validazione input Player (create/update). Funzioni pure, nessun accesso allo store.
Accumula tutti gli errori per campo invece di fermarsi al primo.
"""

from datetime import date

from roster.models.common import as_date, is_blank, is_real_date, utc_today
from roster.models.player import GENDER_MAX_LENGTH, NAME_MAX_LENGTH, PHOTO_URL_MAX_LENGTH, is_http_url
from roster.schemas.common import ValidationResult
from roster.schemas.players import CreatePlayerDto, UpdatePlayerDto
from roster.validation.common import Errors, add_error, build_result, require_input

MAX_AGE_IN_YEARS = 100

VALID_GENDER_OPTIONS = (
    "Male",
    "Female",
    "Non-binary",
    "Prefer not to say",
)


def _years_before(day: date, years: int) -> date:
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        # 29/02 -> 28/02 in anno non bisestile
        return day.replace(year=day.year - years, day=28)


def _validate_user_id(user_id: str | None, errors: Errors) -> None:
    if is_blank(user_id):
        add_error(errors, "user_id", "User ID is required.")


def _validate_name(name: str | None, errors: Errors) -> None:
    if is_blank(name):
        add_error(errors, "name", "Name is required.")
        return
    if len(name.strip()) > NAME_MAX_LENGTH:
        add_error(errors, "name", f"Name cannot exceed {NAME_MAX_LENGTH} characters.")


def _validate_date_of_birth(date_of_birth: date | None, errors: Errors) -> None:
    if not is_real_date(date_of_birth):
        add_error(errors, "date_of_birth", "Date of birth is required.")
        return
    today = utc_today()
    dob = as_date(date_of_birth)
    if dob >= today:
        add_error(errors, "date_of_birth", "Date of birth must be in the past.")
        return
    if dob < _years_before(today, MAX_AGE_IN_YEARS):
        add_error(errors, "date_of_birth", f"Date of birth cannot be more than {MAX_AGE_IN_YEARS} years ago.")


def _validate_gender(gender: str | None, errors: Errors) -> None:
    if is_blank(gender):
        return
    value = gender.strip()
    if len(value) > GENDER_MAX_LENGTH:
        add_error(errors, "gender", f"Gender cannot exceed {GENDER_MAX_LENGTH} characters.")
        return
    if value.lower() not in {g.lower() for g in VALID_GENDER_OPTIONS}:
        add_error(errors, "gender", f"Gender must be one of: {', '.join(VALID_GENDER_OPTIONS)}.")


def _validate_photo_url(photo_url: str | None, errors: Errors) -> None:
    if is_blank(photo_url):
        return
    url = photo_url.strip()
    if len(url) > PHOTO_URL_MAX_LENGTH:
        add_error(errors, "photo_url", f"Photo URL cannot exceed {PHOTO_URL_MAX_LENGTH} characters.")
        return
    if not is_http_url(url):
        add_error(errors, "photo_url", "Photo URL must be a valid HTTP or HTTPS URL.")


def validate_create_player(dto: CreatePlayerDto) -> ValidationResult:
    require_input(dto, "dto")
    errors: Errors = {}
    _validate_user_id(dto.user_id, errors)
    _validate_name(dto.name, errors)
    _validate_date_of_birth(dto.date_of_birth, errors)
    _validate_gender(dto.gender, errors)
    _validate_photo_url(dto.photo_url, errors)
    return build_result(errors)


def validate_update_player(dto: UpdatePlayerDto) -> ValidationResult:
    require_input(dto, "dto")
    errors: Errors = {}
    _validate_name(dto.name, errors)
    _validate_date_of_birth(dto.date_of_birth, errors)
    _validate_gender(dto.gender, errors)
    _validate_photo_url(dto.photo_url, errors)
    return build_result(errors)
