from roster.validation.players import validate_create_player, validate_update_player
from roster.validation.statistics import (
    validate_create_player_statistic,
    validate_player_statistic,
    validate_update_player_statistic,
)
from roster.validation.team_players import (
    validate_create_team_player,
    validate_team_player,
    validate_update_team_player,
)

__all__ = [
    "validate_create_player",
    "validate_update_player",
    "validate_create_team_player",
    "validate_update_team_player",
    "validate_team_player",
    "validate_create_player_statistic",
    "validate_update_player_statistic",
    "validate_player_statistic",
]
