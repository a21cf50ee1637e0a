"""
Unit tests for attributing tournament points to equipment and players.

The pure compute_* functions are exercised with transient ORM objects;
the database-backed leaderboards with the in-memory test database.
"""

import asyncio
from datetime import datetime, timedelta

from paddlerank.db.models import (
    Equipment,
    EquipmentType,
    EquipmentUsage,
    MatchResult,
    Player,
    Tournament,
    TournamentTier,
)
from paddlerank.services.ingestion import soft_delete
from paddlerank.stats.leaderboard import (
    EquipmentStats,
    compute_equipment_stats,
    compute_player_stats,
    get_equipment_leaderboard,
    get_leaderboards,
    get_player_leaderboard,
    rank_by_points,
    usage_covers,
)

NOW = datetime(2024, 12, 1, 12, 0)
START = datetime(2024, 3, 1)
END = datetime(2024, 6, 1)


def _player(pid: int = 1, results=()) -> Player:
    player = Player(id=pid, name=f"Player {pid}", slug=f"player-{pid}")
    for match_date, points, placement in results:
        player.match_results.append(
            MatchResult(match_date=match_date, points=points, placement=placement)
        )
    return player


def _equipment(eid: int = 1, equipment_type: EquipmentType = EquipmentType.PADDLE) -> Equipment:
    return Equipment(
        id=eid,
        name=f"Item {eid}",
        slug=f"item-{eid}",
        brand="JOOLA",
        type=equipment_type,
    )


def _use(player, equipment, start=START, end=END) -> EquipmentUsage:
    return EquipmentUsage(player=player, equipment=equipment, start_date=start, end_date=end)


class TestIntervalAttribution:

    def test_match_on_start_date_counts(self):
        paddle = _equipment()
        _use(_player(results=[(START, 50, 3)]), paddle)

        stats = compute_equipment_stats(paddle, NOW)
        assert stats.total_points == 50

    def test_match_on_end_date_counts(self):
        paddle = _equipment()
        _use(_player(results=[(END, 40, 2)]), paddle)

        assert compute_equipment_stats(paddle, NOW).total_points == 40

    def test_match_day_before_start_does_not_count(self):
        paddle = _equipment()
        _use(_player(results=[(START - timedelta(days=1), 100, 1)]), paddle)

        stats = compute_equipment_stats(paddle, NOW)
        assert stats.total_points == 0
        assert stats.total_wins == 0

    def test_match_after_end_does_not_count(self):
        paddle = _equipment()
        _use(_player(results=[(END + timedelta(days=1), 100, 1)]), paddle)

        assert compute_equipment_stats(paddle, NOW).total_points == 0

    def test_wins_count_only_first_place(self):
        paddle = _equipment()
        player = _player(results=[
            (datetime(2024, 4, 1), 100, 1),
            (datetime(2024, 4, 8), 75, 2),
            (datetime(2024, 5, 1), 150, 1),
        ])
        _use(player, paddle)

        stats = compute_equipment_stats(paddle, NOW)
        assert stats.total_points == 325
        assert stats.total_wins == 2

    def test_inverted_interval_never_matches(self):
        paddle = _equipment()
        usage = _use(_player(results=[(datetime(2024, 4, 1), 100, 1)]), paddle,
                     start=END, end=START)

        assert not usage_covers(usage, datetime(2024, 4, 1), NOW)
        assert not usage_covers(usage, END, NOW)
        assert compute_equipment_stats(paddle, NOW).total_points == 0

    def test_stored_points_are_used_as_is(self):
        paddle = _equipment()
        _use(_player(results=[(datetime(2024, 4, 1), 7, 1)]), paddle)

        assert compute_equipment_stats(paddle, NOW).total_points == 7


class TestOpenUsages:

    def test_open_usage_runs_until_now(self):
        paddle = _equipment()
        player = _player(results=[
            (datetime(2024, 11, 30), 60, 2),
            (NOW, 10, 9),
            (NOW + timedelta(days=3), 999, 1),  # scheduled after "now"
        ])
        _use(player, paddle, end=None)

        stats = compute_equipment_stats(paddle, NOW)
        assert stats.total_points == 70
        assert stats.active_pro_count == 1

    def test_active_pro_count_counts_open_usages_only(self):
        paddle = _equipment()
        _use(_player(1), paddle, end=None)
        _use(_player(2), paddle, end=None)
        _use(_player(3), paddle, end=END)

        assert compute_equipment_stats(paddle, NOW).active_pro_count == 2


class TestMultiAttribution:

    def test_paddle_and_shoes_both_credited(self):
        paddle = _equipment(1, EquipmentType.PADDLE)
        shoes = _equipment(2, EquipmentType.SHOE)
        player = _player(results=[(datetime(2024, 4, 1), 100, 1)])
        _use(player, paddle)
        _use(player, shoes)

        assert compute_equipment_stats(paddle, NOW).total_points == 100
        assert compute_equipment_stats(shoes, NOW).total_points == 100

    def test_overlapping_usages_of_same_type_each_accrue(self):
        first = _equipment(1)
        second = _equipment(2)
        player = _player(results=[(datetime(2024, 4, 1), 100, 1)])
        _use(player, first, end=None)
        _use(player, second, end=None)

        assert compute_equipment_stats(first, NOW).total_points == 100
        assert compute_equipment_stats(second, NOW).total_points == 100

    def test_two_usage_periods_of_same_item_by_one_player(self):
        paddle = _equipment()
        player = _player(results=[
            (datetime(2024, 2, 1), 10, 2),
            (datetime(2024, 4, 1), 20, 2),
            (datetime(2024, 8, 1), 30, 2),
        ])
        _use(player, paddle, start=datetime(2024, 1, 1), end=datetime(2024, 3, 1))
        _use(player, paddle, start=datetime(2024, 7, 1), end=None)

        assert compute_equipment_stats(paddle, NOW).total_points == 40

    def test_points_summed_across_players(self):
        paddle = _equipment()
        _use(_player(1, [(datetime(2024, 4, 1), 100, 1)]), paddle)
        _use(_player(2, [(datetime(2024, 4, 1), 75, 2)]), paddle)

        stats = compute_equipment_stats(paddle, NOW)
        assert stats.total_points == 175
        assert stats.total_wins == 1


class TestPlayerStats:

    def test_total_is_unconditional(self):
        player = _player(results=[
            (datetime(2020, 1, 1), 100, 1),
            (datetime(2024, 4, 1), 50, 3),
        ])

        stats = compute_player_stats(player)
        assert stats.total_points == 150
        assert stats.total_wins == 1
        assert stats.current_paddle is None
        assert stats.current_shoes is None

    def test_current_gear_is_first_open_usage_of_each_type(self):
        player = _player()
        old_paddle = _equipment(1)
        paddle = _equipment(2)
        later_paddle = _equipment(3)
        shoes = _equipment(4, EquipmentType.SHOE)
        _use(player, old_paddle, end=END)
        _use(player, paddle, end=None)
        _use(player, later_paddle, end=None)
        _use(player, shoes, end=None)

        stats = compute_player_stats(player)
        assert stats.current_paddle.slug == "item-2"
        assert stats.current_shoes.slug == "item-4"


class TestRankByPoints:

    def _stats(self, totals):
        return [
            EquipmentStats(id=i, name=f"e{i}", slug=f"e{i}", brand="b",
                           type=EquipmentType.PADDLE, total_points=points)
            for i, points in enumerate(totals)
        ]

    def test_ordering_and_truncation(self):
        ranked = rank_by_points(self._stats([50, 90, 100, 0, 90]), limit=3)
        assert [s.total_points for s in ranked] == [100, 90, 90]

    def test_ties_keep_input_order(self):
        ranked = rank_by_points(self._stats([50, 90, 100, 0, 90]), limit=3)
        assert [s.id for s in ranked] == [2, 1, 4]

    def test_limit_larger_than_input(self):
        assert len(rank_by_points(self._stats([1, 2]), limit=10)) == 2

    def test_non_positive_limit(self):
        assert rank_by_points(self._stats([1, 2]), limit=0) == []
        assert rank_by_points(self._stats([1, 2]), limit=-1) == []


class TestDatabaseLeaderboards:

    def test_equipment_leaderboard_filters_type_and_orders(self, db_session, build):
        player = build.player("Ben Johns")
        build.result(player, datetime(2024, 4, 1), 100, placement=1)
        big = build.equipment("Big", EquipmentType.PADDLE)
        small = build.equipment("Small", EquipmentType.PADDLE)
        shoes = build.equipment("Shoes", EquipmentType.SHOE)
        build.usage(player, big, START)
        build.usage(player, small, datetime(2024, 5, 1))
        build.usage(player, shoes, START)

        board = get_equipment_leaderboard(db_session, "PADDLE", limit=10, now=NOW)
        assert [row.name for row in board] == ["Big", "Small"]
        assert board[0].total_points == 100
        assert board[0].total_wins == 1
        assert board[0].active_pro_count == 1
        assert board[1].total_points == 0

    def test_equipment_leaderboard_excludes_soft_deleted_rows(self, db_session, build):
        live = build.player("Live")
        gone = build.player("Gone")
        paddle = build.equipment("Paddle")
        deleted_paddle = build.equipment("Deleted Paddle")
        cancelled = build.tournament(TournamentTier.MAJOR)

        build.result(live, datetime(2024, 4, 1), 100, placement=1)
        build.result(live, datetime(2024, 4, 2), 500, placement=1, tournament=cancelled)
        build.result(gone, datetime(2024, 4, 1), 80, placement=2)
        build.usage(live, paddle, START, None)
        build.usage(gone, paddle, START, None)
        build.usage(live, deleted_paddle, START, None)

        soft_delete(db_session, gone)
        soft_delete(db_session, deleted_paddle)
        soft_delete(db_session, cancelled)

        board = get_equipment_leaderboard(db_session, EquipmentType.PADDLE, now=NOW)
        assert [row.name for row in board] == ["Paddle"]
        assert board[0].total_points == 100
        assert board[0].active_pro_count == 1

    def test_player_leaderboard_excludes_soft_deleted_player(self, db_session, build):
        star = build.player("Deleted Star")
        regular = build.player("Regular")
        build.result(star, datetime(2024, 4, 1), 1000, placement=1)
        build.result(regular, datetime(2024, 4, 1), 50, placement=3)
        soft_delete(db_session, star)

        board = get_player_leaderboard(db_session, limit=10)
        assert [row.name for row in board] == ["Regular"]
        assert board[0].total_points == 50

    def test_player_leaderboard_reports_current_gear(self, db_session, build):
        player = build.player("Anna")
        paddle = build.equipment("Hyperion", brand="JOOLA")
        old = build.equipment("Old Paddle")
        build.usage(player, old, datetime(2022, 1, 1), datetime(2023, 1, 1))
        build.usage(player, paddle, datetime(2023, 1, 1))

        [row] = get_player_leaderboard(db_session)
        assert row.current_paddle.name == "Hyperion"
        assert row.current_paddle.brand == "JOOLA"
        assert row.current_shoes is None

    def test_reads_are_idempotent(self, db_session, build):
        player = build.player()
        paddle = build.equipment()
        build.result(player, datetime(2024, 4, 1), 100, placement=1)
        build.usage(player, paddle, START)

        first = get_equipment_leaderboard(db_session, "PADDLE", now=NOW)
        second = get_equipment_leaderboard(db_session, "PADDLE", now=NOW)
        assert first == second


def test_get_leaderboards_runs_all_three(file_session_factory):
    with file_session_factory() as session:
        player = Player(name="Ben Johns", slug="ben-johns")
        paddle = Equipment(name="Hyperion", slug="hyperion", brand="JOOLA", type=EquipmentType.PADDLE)
        shoes = Equipment(name="Hypercourt", slug="hypercourt", brand="K-Swiss", type=EquipmentType.SHOE)
        session.add_all([player, paddle, shoes])
        session.flush()
        tournament = Tournament(name="US Open", slug="us-open", tier=TournamentTier.MAJOR,
                                start_date=datetime(2024, 4, 13), end_date=datetime(2024, 4, 21))
        session.add(tournament)
        session.add(MatchResult(player=player, tournament=tournament, placement=1,
                                points=200, match_date=datetime(2024, 4, 21)))
        session.add(EquipmentUsage(player=player, equipment=paddle, start_date=datetime(2023, 1, 1)))
        session.add(EquipmentUsage(player=player, equipment=shoes, start_date=datetime(2023, 1, 1)))
        session.commit()

    boards = asyncio.run(get_leaderboards(file_session_factory, limit=5, now=NOW))

    assert set(boards) == {"paddles", "shoes", "players"}
    assert [(r.slug, r.total_points) for r in boards["paddles"]] == [("hyperion", 200)]
    assert [(r.slug, r.total_points) for r in boards["shoes"]] == [("hypercourt", 200)]
    assert boards["players"][0].total_points == 200
    assert boards["players"][0].current_paddle.slug == "hyperion"
