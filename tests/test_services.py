from datetime import date, timedelta

import pytest
from sqlalchemy import func, select

from roster.models import PlayerStatistic, TeamPlayer
from roster.models.common import utc_today
from roster.repositories import PlayerRepository, PlayerStatisticRepository, TeamPlayerRepository
from roster.schemas.players import UpdatePlayerDto
from roster.schemas.statistics import UpdatePlayerStatisticDto
from roster.schemas.team_players import UpdateTeamPlayerDto
from roster.services.player_service import PlayerService
from roster.services.player_statistic_service import PlayerStatisticService
from roster.services.team_player_service import TeamPlayerService
from tests.factories import USER_ID, player_dto, statistic_dto, team_player_dto


@pytest.fixture
def player_service(db):
    return PlayerService(PlayerRepository(db))


@pytest.fixture
def team_service(db):
    return TeamPlayerService(TeamPlayerRepository(db), PlayerRepository(db))


@pytest.fixture
def stat_service(db):
    return PlayerStatisticService(PlayerStatisticRepository(db), TeamPlayerRepository(db))


def _update_dto(tp_id: int, **overrides) -> UpdateTeamPlayerDto:
    data = {
        "team_player_id": tp_id,
        "team_name": "Thunder FC",
        "championship_name": "Spring 2025",
        "joined_date": date(2025, 1, 10),
    }
    data.update(overrides)
    return UpdateTeamPlayerDto(**data)


async def test_emma_season(db, player_service, team_service, stat_service):
    emma = (await player_service.create_player(player_dto(name="Emma"), USER_ID)).data

    joined = await team_service.add_player_to_team(team_player_dto(emma.id), USER_ID)
    assert joined.success
    assert joined.data.is_active

    again = await team_service.add_player_to_team(team_player_dto(emma.id, team_name="thunder fc"), USER_ID)
    assert again.is_validation_failure
    assert again.validation_errors == {
        "duplicate_assignment": ["Player already has an active assignment to this team and championship."]
    }

    tp_id = joined.data.team_player_id
    for day, goals, assists in ((1, 2, 1), (8, 1, 2), (15, 0, 3)):
        added = await stat_service.add_statistic(
            statistic_dto(tp_id, game_date=date(2025, 3, day), goals=goals, assists=assists), USER_ID
        )
        assert added.success
        assert added.data.team_name == "Thunder FC"

    agg = (await stat_service.get_player_aggregates(emma.id)).data
    assert agg.game_count == 3
    assert agg.total_goals == 3
    assert agg.total_assists == 6
    assert agg.average_goals == 1.0
    assert agg.average_assists == 2.0

    left = await team_service.remove_player_from_team(tp_id, date(2025, 6, 1), USER_ID)
    assert left.success
    assert not left.data.is_active
    assert left.data.player_name == "Emma"

    twice = await team_service.remove_player_from_team(tp_id, date(2025, 6, 2), USER_ID)
    assert not twice.success
    assert twice.error_messages == ["Player has already left the team."]

    deleted = await player_service.delete_player(emma.id)
    assert deleted.success
    tp_count = (await db.execute(select(func.count()).select_from(TeamPlayer))).scalar_one()
    stat_count = (await db.execute(select(func.count()).select_from(PlayerStatistic))).scalar_one()
    assert (tp_count, stat_count) == (0, 0)


class TestPlayerService:
    async def test_create_validation_failure(self, player_service):
        result = await player_service.create_player(player_dto(name=""), USER_ID)
        assert result.is_validation_failure
        assert result.validation_errors["name"] == ["Name is required."]

    async def test_blank_current_user_is_failure(self, player_service):
        result = await player_service.create_player(player_dto(), "  ")
        assert not result.success
        assert result.error_messages == ["Current user ID cannot be null or whitespace."]

    async def test_get_missing_player(self, player_service):
        result = await player_service.get_player_by_id(5)
        assert result.not_found
        assert result.error_messages == ["Player with ID 5 could not be found."]

    async def test_update_player(self, player_service):
        created = (await player_service.create_player(player_dto(), USER_ID)).data
        dto = UpdatePlayerDto(id=created.id, name="Emma Rossi", date_of_birth=date(2012, 4, 15), gender="female")
        result = await player_service.update_player(created.id, dto, "editor")
        assert result.success
        assert result.data.name == "Emma Rossi"
        assert result.data.created_by == USER_ID
        assert result.data.updated_by == "editor"

    async def test_update_id_mismatch(self, player_service):
        dto = UpdatePlayerDto(id=2, name="Emma", date_of_birth=date(2012, 4, 15))
        result = await player_service.update_player(1, dto, USER_ID)
        assert result.error_messages == ["Player ID mismatch."]

    async def test_update_missing_player(self, player_service):
        dto = UpdatePlayerDto(id=8, name="Emma", date_of_birth=date(2012, 4, 15))
        result = await player_service.update_player(8, dto, USER_ID)
        assert result.not_found

    async def test_list_players(self, player_service):
        await player_service.create_player(player_dto(name="Zoe"), USER_ID)
        await player_service.create_player(player_dto(name="Anna"), USER_ID)
        result = await player_service.get_all_players()
        assert [p.name for p in result.data] == ["Anna", "Zoe"]

    async def test_store_failure_becomes_generic_message(self, player_service, engine):
        async with engine.begin() as conn:
            await conn.exec_driver_sql("DROP TABLE player_statistics")
            await conn.exec_driver_sql("DROP TABLE team_players")
            await conn.exec_driver_sql("DROP TABLE players")
        result = await player_service.get_all_players()
        assert not result.success
        assert result.error_messages == ["Unable to load players. Please refresh the page."]


class TestTeamPlayerService:
    async def _player(self, player_service):
        return (await player_service.create_player(player_dto(), USER_ID)).data

    async def test_add_to_missing_player(self, team_service):
        result = await team_service.add_player_to_team(team_player_dto(99), USER_ID)
        assert result.not_found
        assert result.error_messages == ["Player with ID 99 could not be found."]

    async def test_update_mismatch(self, team_service):
        result = await team_service.update_team_assignment(1, _update_dto(2), USER_ID)
        assert result.error_messages == ["Team player ID mismatch."]

    async def test_update_rename_into_duplicate(self, player_service, team_service):
        player = await self._player(player_service)
        await team_service.add_player_to_team(team_player_dto(player.id, team_name="Thunder FC"), USER_ID)
        other = (
            await team_service.add_player_to_team(team_player_dto(player.id, team_name="Lightning SC"), USER_ID)
        ).data
        result = await team_service.update_team_assignment(
            other.team_player_id, _update_dto(other.team_player_id, team_name="THUNDER fc"), USER_ID
        )
        assert result.is_validation_failure
        assert "duplicate_assignment" in result.validation_errors

    async def test_update_with_left_date_closes(self, player_service, team_service):
        player = await self._player(player_service)
        tp = (await team_service.add_player_to_team(team_player_dto(player.id), USER_ID)).data
        result = await team_service.update_team_assignment(
            tp.team_player_id,
            _update_dto(tp.team_player_id, championship_name="Spring 2025 ", left_date=date(2025, 5, 1)),
            "editor",
        )
        assert result.success
        assert not result.data.is_active
        assert result.data.left_date == date(2025, 5, 1)
        assert result.data.updated_by == "editor"

    async def test_remove_with_future_date(self, player_service, team_service):
        player = await self._player(player_service)
        tp = (await team_service.add_player_to_team(team_player_dto(player.id), USER_ID)).data
        result = await team_service.remove_player_from_team(
            tp.team_player_id, utc_today() + timedelta(days=5), USER_ID
        )
        assert result.validation_errors == {"left_date": ["Left date cannot be in the future"]}
        still = await team_service.get_team_assignment_by_id(tp.team_player_id)
        assert still.data.is_active

    async def test_inactive_only_listed_on_request(self, player_service, team_service):
        player = await self._player(player_service)
        tp = (await team_service.add_player_to_team(team_player_dto(player.id), USER_ID)).data
        await team_service.remove_player_from_team(tp.team_player_id, date(2025, 2, 1), USER_ID)
        active = await team_service.get_active_teams_by_player_id(player.id)
        everything = await team_service.get_teams_by_player_id(player.id, include_inactive=True)
        assert active.data == []
        assert len(everything.data) == 1

    async def test_delete_missing_assignment(self, team_service):
        result = await team_service.delete_team_assignment(404)
        assert result.not_found


class TestPlayerStatisticService:
    async def _assignment(self, player_service, team_service):
        player = (await player_service.create_player(player_dto(), USER_ID)).data
        tp = (await team_service.add_player_to_team(team_player_dto(player.id), USER_ID)).data
        return player, tp

    async def test_add_to_missing_team_player(self, stat_service):
        result = await stat_service.add_statistic(statistic_dto(55), USER_ID)
        assert result.not_found
        assert result.error_messages == ["Team player with ID 55 could not be found."]

    async def test_update_statistic(self, player_service, team_service, stat_service):
        _, tp = await self._assignment(player_service, team_service)
        stat = (await stat_service.add_statistic(statistic_dto(tp.team_player_id), USER_ID)).data
        dto = UpdatePlayerStatisticDto(
            player_statistic_id=stat.player_statistic_id,
            team_player_id=tp.team_player_id,
            game_date=stat.game_date,
            minutes_played=75,
            is_starter=False,
            jersey_number=9,
            goals=2,
            assists=1,
        )
        result = await stat_service.update_statistic(stat.player_statistic_id, dto, "editor")
        assert result.success
        assert (result.data.goals, result.data.minutes_played, result.data.updated_by) == (2, 75, "editor")

    async def test_update_statistic_mismatch(self, stat_service):
        dto = UpdatePlayerStatisticDto(
            player_statistic_id=3,
            team_player_id=1,
            game_date=date(2025, 3, 1),
            minutes_played=75,
            is_starter=False,
            jersey_number=9,
            goals=2,
            assists=1,
        )
        result = await stat_service.update_statistic(4, dto, USER_ID)
        assert result.error_messages == ["Statistic ID mismatch."]

    async def test_date_range_start_after_end(self, stat_service):
        result = await stat_service.get_statistics_by_date_range(1, date(2025, 3, 2), date(2025, 3, 1))
        assert result.is_validation_failure

    async def test_delete_statistic(self, player_service, team_service, stat_service):
        _, tp = await self._assignment(player_service, team_service)
        stat = (await stat_service.add_statistic(statistic_dto(tp.team_player_id), USER_ID)).data
        assert (await stat_service.delete_statistic(stat.player_statistic_id)).success
        assert (await stat_service.get_statistic_by_id(stat.player_statistic_id)).not_found
