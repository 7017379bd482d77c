import asyncio
from datetime import date

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from roster.core.exceptions import ConstraintViolationError, EntityNotFoundError, RepositoryError
from roster.models import Player, PlayerStatistic, TeamPlayer
from roster.repositories import PlayerRepository, PlayerStatisticRepository, TeamPlayerRepository
from tests.factories import make_player, make_statistic, make_team_player


async def _count(db, model, *where) -> int:
    stmt = select(func.count()).select_from(model)
    if where:
        stmt = stmt.where(*where)
    return (await db.execute(stmt)).scalar_one()


async def _drop_tables(engine) -> None:
    async with engine.begin() as conn:
        await conn.exec_driver_sql("DROP TABLE player_statistics")
        await conn.exec_driver_sql("DROP TABLE team_players")
        await conn.exec_driver_sql("DROP TABLE players")


@pytest.fixture
def players(db):
    return PlayerRepository(db)


@pytest.fixture
def team_players(db):
    return TeamPlayerRepository(db)


@pytest.fixture
def statistics(db):
    return PlayerStatisticRepository(db)


class TestPlayerRepository:
    async def test_add_stamps_created_at(self, players):
        player = await players.add(make_player())
        assert player.id is not None
        assert player.created_at is not None
        assert player.created_by == "user-123"

    async def test_add_rejects_blank_created_by(self, players):
        player = make_player()
        player.created_by = " "
        with pytest.raises(ValueError):
            await players.add(player)

    async def test_get_all_ordered_by_name(self, players):
        for name in ("Zoe", "Anna", "Marta"):
            await players.add(make_player(name=name))
        names = [p.name for p in await players.get_all()]
        assert names == ["Anna", "Marta", "Zoe"]

    async def test_get_by_user_id(self, players):
        await players.add(make_player(name="Mine"))
        await players.add(make_player(name="Other", user_id="someone-else"))
        mine = await players.get_by_user_id("user-123")
        assert [p.name for p in mine] == ["Mine"]

    async def test_get_by_id_and_exists(self, players):
        player = await players.add(make_player())
        assert (await players.get_by_id(player.id)).name == "Emma"
        assert await players.exists(player.id)
        assert await players.get_by_id(999) is None
        assert not await players.exists(999)

    async def test_update_keeps_created_fields(self, players):
        player = await players.add(make_player())
        created_at = player.created_at
        player.name = "Emma R"
        player.created_by = "tampered"
        player.update_last_modified("editor")
        updated = await players.update(player)
        assert updated.name == "Emma R"
        assert updated.created_by == "user-123"
        # SQLite restituisce datetime naive
        assert updated.created_at.replace(tzinfo=None) == created_at.replace(tzinfo=None)
        assert updated.updated_by == "editor"

    async def test_update_requires_update_last_modified(self, players):
        player = await players.add(make_player())
        player.name = "Silent"
        with pytest.raises(ValueError):
            await players.update(player)

    async def test_update_missing_row_raises_not_found(self, players):
        player = make_player()
        player.id = 4242
        player.update_last_modified("editor")
        with pytest.raises(EntityNotFoundError) as exc_info:
            await players.update(player)
        assert exc_info.value.entity_id == 4242
        assert str(exc_info.value) == "Player with ID 4242 could not be found."

    async def test_delete_missing_returns_false(self, players):
        assert await players.delete(31337) is False

    async def test_store_error_is_wrapped_with_cause(self, engine, players):
        await _drop_tables(engine)
        with pytest.raises(RepositoryError) as exc_info:
            await players.get_all()
        assert isinstance(exc_info.value.__cause__, OperationalError)
        assert exc_info.value.operation == "get_all"
        assert exc_info.value.entity_type == "Player"

    async def test_cancellation_is_not_wrapped(self, players, monkeypatch, caplog):
        started = asyncio.Event()

        async def hang(*args, **kwargs):
            started.set()
            await asyncio.Event().wait()

        monkeypatch.setattr(players.db, "execute", hang)
        task = asyncio.create_task(players.exists(5))
        await started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert "annullata" in caplog.text


class TestTeamPlayerRepository:
    async def test_reads_are_most_recent_first(self, db, players, team_players):
        player = await players.add(make_player())
        await team_players.add(make_team_player(player.id, team_name="Old", joined_date=date(2023, 1, 1)))
        await team_players.add(make_team_player(player.id, team_name="New", joined_date=date(2025, 1, 1)))
        closed = await team_players.add(make_team_player(player.id, team_name="Mid", joined_date=date(2024, 1, 1)))
        closed.mark_as_left(date(2024, 6, 1), "coach")
        await team_players.update(closed)

        all_items = await team_players.get_all_by_player_id(player.id)
        assert [tp.team_name for tp in all_items] == ["New", "Mid", "Old"]
        active = await team_players.get_active_by_player_id(player.id)
        assert [tp.team_name for tp in active] == ["New", "Old"]

    async def test_get_by_id_loads_player_on_request(self, players, team_players):
        player = await players.add(make_player())
        tp = await team_players.add(make_team_player(player.id))
        with_player = await team_players.get_by_id(tp.team_player_id, include_player=True)
        assert with_player.player.name == "Emma"

    async def test_has_active_duplicate(self, players, team_players):
        player = await players.add(make_player())
        tp = await team_players.add(make_team_player(player.id))

        assert await team_players.has_active_duplicate(player.id, "thunder fc", "SPRING 2025")
        assert await team_players.has_active_duplicate(player.id, "  Thunder FC ", "Spring 2025")
        assert not await team_players.has_active_duplicate(player.id, "Thunder FC", "Fall 2025")
        assert not await team_players.has_active_duplicate(
            player.id, "Thunder FC", "Spring 2025", exclude_id=tp.team_player_id
        )

        tp.mark_as_left(date(2025, 6, 1), "coach")
        await team_players.update(tp)
        assert not await team_players.has_active_duplicate(player.id, "Thunder FC", "Spring 2025")

    async def test_has_active_duplicate_rejects_blank_names(self, team_players):
        with pytest.raises(ValueError):
            await team_players.has_active_duplicate(1, "  ", "Spring 2025")
        with pytest.raises(ValueError):
            await team_players.has_active_duplicate(1, "Thunder FC", None)

    async def test_has_active_duplicate_error_carries_player_id(self, engine, team_players):
        await _drop_tables(engine)
        with pytest.raises(RepositoryError) as exc_info:
            await team_players.has_active_duplicate(12, "Thunder FC", "Spring 2025", exclude_id=3)
        assert exc_info.value.entity_id == 12
        assert exc_info.value.operation == "has_active_duplicate"

    async def test_untrimmed_stored_names_still_count_as_duplicates(self, players, team_players):
        player = await players.add(make_player())
        padded = make_team_player(player.id)
        padded.team_name = "  Thunder FC "
        padded.championship_name = "Spring 2025  "
        await team_players.add(padded)

        assert await team_players.has_active_duplicate(player.id, "Thunder FC", "Spring 2025")
        with pytest.raises(ConstraintViolationError):
            await team_players.add(make_team_player(player.id, team_name="thunder fc"))

    async def test_store_rejects_second_active_assignment(self, players, team_players):
        player = await players.add(make_player())
        await team_players.add(make_team_player(player.id))
        with pytest.raises(ConstraintViolationError):
            await team_players.add(make_team_player(player.id, team_name="THUNDER FC"))

    async def test_update_missing_raises_not_found(self, team_players):
        tp = make_team_player(1)
        tp.team_player_id = 77
        tp.update_last_modified("editor")
        with pytest.raises(EntityNotFoundError):
            await team_players.update(tp)


class TestPlayerStatisticRepository:
    async def _setup(self, players, team_players):
        player = await players.add(make_player())
        first = await team_players.add(make_team_player(player.id, team_name="Thunder FC"))
        second = await team_players.add(make_team_player(player.id, team_name="Lightning SC"))
        return player, first, second

    async def test_add_attaches_team_player(self, players, team_players, statistics):
        _, tp, _ = await self._setup(players, team_players)
        stat = await statistics.add(make_statistic(tp.team_player_id))
        assert stat.team_player.team_name == "Thunder FC"
        assert stat.created_at is not None

    async def test_reads_span_all_assignments_newest_first(self, players, team_players, statistics):
        player, first, second = await self._setup(players, team_players)
        await statistics.add(make_statistic(first.team_player_id, game_date=date(2025, 2, 1)))
        await statistics.add(make_statistic(second.team_player_id, game_date=date(2025, 4, 1)))
        await statistics.add(make_statistic(first.team_player_id, game_date=date(2025, 3, 1)))

        by_player = await statistics.get_all_by_player_id(player.id)
        assert [s.game_date for s in by_player] == [date(2025, 4, 1), date(2025, 3, 1), date(2025, 2, 1)]
        by_team = await statistics.get_all_by_team_player_id(first.team_player_id)
        assert len(by_team) == 2

    async def test_date_range_is_inclusive(self, players, team_players, statistics):
        player, first, second = await self._setup(players, team_players)
        for day in (1, 10, 20):
            await statistics.add(make_statistic(first.team_player_id, game_date=date(2025, 3, day)))
        await statistics.add(make_statistic(second.team_player_id, game_date=date(2025, 3, 15)))

        items = await statistics.get_by_date_range(player.id, date(2025, 3, 1), date(2025, 3, 20))
        assert len(items) == 4
        scoped = await statistics.get_by_date_range(
            player.id, date(2025, 3, 1), date(2025, 3, 20), team_player_id=first.team_player_id
        )
        assert len(scoped) == 3
        single_day = await statistics.get_by_date_range(player.id, date(2025, 3, 10), date(2025, 3, 10))
        assert [s.game_date for s in single_day] == [date(2025, 3, 10)]

    async def test_date_range_start_after_end(self, statistics):
        with pytest.raises(ValueError):
            await statistics.get_by_date_range(1, date(2025, 3, 2), date(2025, 3, 1))

    async def test_aggregates_empty(self, players, statistics):
        player = await players.add(make_player())
        agg = await statistics.get_aggregates(player.id)
        assert agg.game_count == 0
        assert agg.total_goals == 0
        assert agg.average_goals == 0.0
        assert agg.average_minutes_played == 0.0

    async def test_aggregates_all_teams_and_scoped(self, players, team_players, statistics):
        player, first, second = await self._setup(players, team_players)
        await statistics.add(make_statistic(first.team_player_id, goals=2, assists=1, minutes_played=90))
        await statistics.add(make_statistic(first.team_player_id, goals=1, assists=2, minutes_played=60))
        await statistics.add(make_statistic(second.team_player_id, goals=0, assists=3, minutes_played=30))

        agg = await statistics.get_aggregates(player.id)
        assert (agg.game_count, agg.total_goals, agg.total_assists, agg.total_minutes_played) == (3, 3, 6, 180)
        assert agg.average_goals == 1.0
        assert agg.average_assists == 2.0
        assert agg.average_minutes_played == 60.0

        scoped = await statistics.get_aggregates(player.id, team_player_id=first.team_player_id)
        assert (scoped.game_count, scoped.total_goals) == (2, 3)

    async def test_update_statistic(self, players, team_players, statistics):
        _, first, _ = await self._setup(players, team_players)
        stat = await statistics.add(make_statistic(first.team_player_id, goals=0))
        stat.goals = 4
        stat.update_last_modified("editor")
        updated = await statistics.update(stat)
        assert updated.goals == 4
        assert updated.updated_by == "editor"


class TestCascadeDelete:
    async def test_exists_and_delete_by_own_key(self, db, players, team_players, statistics):
        player = await players.add(make_player())
        tp = await team_players.add(make_team_player(player.id))
        stat = await statistics.add(make_statistic(tp.team_player_id))

        assert await team_players.exists(tp.team_player_id)
        assert await statistics.exists(stat.player_statistic_id)
        assert await statistics.delete(stat.player_statistic_id) is True
        assert not await statistics.exists(stat.player_statistic_id)
        assert await team_players.exists(tp.team_player_id)
        assert await _count(db, PlayerStatistic) == 0

    async def test_delete_player_removes_assignments_and_statistics(self, db, players, team_players, statistics):
        player = await players.add(make_player())
        tp = await team_players.add(make_team_player(player.id))
        await statistics.add(make_statistic(tp.team_player_id))

        assert await players.delete(player.id) is True
        assert await _count(db, TeamPlayer, TeamPlayer.player_id == player.id) == 0
        assert await _count(db, PlayerStatistic) == 0
        assert await _count(db, Player) == 0

    async def test_delete_team_player_leaves_siblings(self, db, players, team_players, statistics):
        player = await players.add(make_player())
        doomed = await team_players.add(make_team_player(player.id, team_name="Thunder FC"))
        sibling = await team_players.add(make_team_player(player.id, team_name="Lightning SC"))
        await statistics.add(make_statistic(doomed.team_player_id))
        await statistics.add(make_statistic(sibling.team_player_id))
        await statistics.add(make_statistic(sibling.team_player_id, game_date=date(2025, 3, 8)))

        assert await team_players.delete(doomed.team_player_id) is True
        assert await _count(db, PlayerStatistic, PlayerStatistic.team_player_id == doomed.team_player_id) == 0
        assert await _count(db, PlayerStatistic, PlayerStatistic.team_player_id == sibling.team_player_id) == 2
