from __future__ import annotations

from league_fixtures import score_rows
from league_stats.io import parse_score_rows
from league_stats.notable_games import classify_games, dedupe_matchups, filter_season


def _records(*games):
    rows = []
    for g in games:
        rows += score_rows(*g)
    return parse_score_rows(rows)


def test_two_rows_for_one_game_make_one_matchup() -> None:
    records = _records((101, 2023, 3, "Alice", 120.5, "Bob", 99.25))

    matchups = dedupe_matchups(records)

    assert len(matchups) == 1
    m = matchups[0]
    assert (m.team1.name, m.team2.name) == ("Alice", "Bob")
    assert m.combined_score == 219.75
    assert m.margin == 21.25
    assert m.winner.name == "Alice"


def test_same_game_id_in_another_week_is_a_different_matchup() -> None:
    records = _records((101, 2023, 3, "Alice", 100, "Bob", 90), (101, 2023, 4, "Alice", 80, "Bob", 85))
    assert len(dedupe_matchups(records)) == 2


def test_byes_are_skipped_and_unplayed_games_kept_unless_excluded() -> None:
    records = _records(
        (1, 2023, 1, "Alice", 100, "Bye", 0),
        (2, 2023, 14, "Alice", 0, "Bob", 0),
        (3, 2023, 2, "Alice", 100, "Bob", 90),
    )
    assert [m.game_id for m in dedupe_matchups(records)] == ["2", "3"]
    assert [m.game_id for m in dedupe_matchups(records, include_unplayed=False)] == ["3"]


def test_unplayed_games_count_toward_lowest_and_closest() -> None:
    records = _records((1, 2023, 1, "Alice", 100, "Bob", 90), (2, 2023, 14, "Carol", 0, "Dave", 0))

    games = classify_games(records)
    assert [m.game_id for m in games.lowest] == ["2", "1"]
    assert [m.game_id for m in games.closest] == ["2", "1"]

    played_only = classify_games(records, include_unplayed=False)
    assert [m.game_id for m in played_only.lowest] == ["1"]


def test_classify_games_buckets_and_flags() -> None:
    records = _records(
        (1, 2023, 1, "A", 150, "B", 90),
        (2, 2023, 1, "C", 101, "D", 99),
        (3, 2023, 2, "A", 60, "C", 70),
        (4, 2023, 2, "B", 130, "D", 129),
    )

    games = classify_games(records, limit=2)

    assert [m.game_id for m in games.highest] == ["4", "1"]
    assert [m.game_id for m in games.lowest] == ["3", "2"]
    assert [m.game_id for m in games.blowouts] == ["1", "3"]
    assert [m.game_id for m in games.closest] == ["4", "2"]

    by_id = {m.game_id: m for m in games.highest + games.lowest}
    assert by_id["1"].is_blowout and not by_id["1"].is_close
    assert by_id["4"].is_close


def test_classify_games_defaults_to_six_and_is_stable() -> None:
    games = [(i, 2023, 1, f"T{i}", 100, f"U{i}", 100) for i in range(1, 9)]
    records = _records(*games)

    first = classify_games(records)
    second = classify_games(records)

    assert first == second
    assert [m.game_id for m in first.highest] == ["1", "2", "3", "4", "5", "6"]
    assert [m.game_id for m in first.closest] == ["1", "2", "3", "4", "5", "6"]


def test_no_records_is_empty() -> None:
    assert classify_games([]).is_empty


def test_filter_season() -> None:
    records = _records((1, 2022, 1, "A", 10, "B", 5), (2, 2023, 1, "A", 10, "B", 5))
    assert {r.season for r in filter_season(records, 2023)} == {2023}
    assert {r.season for r in filter_season(records, "2022")} == {2022}
    assert len(filter_season(records, "All Time")) == 4
    assert len(filter_season(records, None)) == 4
