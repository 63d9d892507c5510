from __future__ import annotations

import pytest

from league_fixtures import score_rows
from league_stats.data import PlayerWeekEntry, RosterWeek, TeamWeek
from league_stats.io import parse_score_rows
from league_stats.records import (
    RecordEntry,
    build_record_book,
    high_score_games,
    league_records,
    player_records,
    rank_entries,
    single_game_records,
    tally_team_records,
)


def _season_rows():
    rows = []
    rows += score_rows(1, 2023, 1, "A", 160, "B", 90)
    rows += score_rows(2, 2023, 1, "C", 120, "D", 100)
    rows += score_rows(3, 2023, 2, "A", 155, "C", 150)
    rows += score_rows(4, 2023, 2, "B", 95, "D", 99)
    rows += score_rows(5, 2023, 3, "A", 210, "D", 80, period="Championship")
    rows += score_rows(6, 2023, 3, "B", 85, "C", 130, period="Chumpionship")
    rows += score_rows(7, 2023, 4, "A", 100, "Bye", 0)
    rows += score_rows(8, 2023, 14, "C", 0, "D", 0)
    return parse_score_rows(rows)


def _by_name(categories):
    return {c.name: c for c in categories}


def _holders(category):
    return [e.holder for e in category.leaders]


def test_rank_entries_keeps_everyone_tied_with_third_place() -> None:
    entries = [RecordEntry(holder=h, value=v) for h, v in [("a", 5), ("b", 3), ("c", 3), ("d", 3), ("e", 1)]]

    cat = rank_entries("most", entries)

    assert _holders(cat) == ["a", "b", "c"]
    assert [e.holder for e in cat.tied] == ["d"]
    assert cat.holder.holder == "a"


def test_rank_entries_with_fewer_entries_than_places() -> None:
    cat = rank_entries("fewest", [RecordEntry(holder="a", value=2)], descending=False)
    assert _holders(cat) == ["a"]
    assert cat.tied == ()
    assert rank_entries("empty", []).holder is None


def test_tally_skips_byes_and_unplayed_games() -> None:
    tallies = tally_team_records(_season_rows())

    assert list(tallies) == ["A", "B", "C", "D"]
    assert (tallies["A"].wins, tallies["A"].losses) == (3, 0)
    assert (tallies["B"].wins, tallies["B"].losses) == (0, 3)
    assert (tallies["C"].wins, tallies["C"].losses) == (2, 1)
    assert (tallies["D"].wins, tallies["D"].losses) == (1, 2)


def test_weekly_finishes() -> None:
    tallies = tally_team_records(_season_rows())

    assert {t: tallies[t].weekly_top for t in "ABCD"} == {"A": 3, "B": 0, "C": 0, "D": 0}
    assert {t: tallies[t].weekly_top3 for t in "ABCD"} == {"A": 3, "B": 1, "C": 3, "D": 2}
    assert {t: tallies[t].weekly_worst for t in "ABCD"} == {"A": 0, "B": 2, "C": 0, "D": 1}
    assert {t: tallies[t].weekly_bottom3 for t in "ABCD"} == {"A": 0, "B": 3, "C": 3, "D": 3}


def test_league_records() -> None:
    cats = _by_name(league_records(_season_rows(), min_games_overall=3))

    assert _holders(cats["most_wins_overall"]) == ["A", "C", "D"]
    assert _holders(cats["most_losses_overall"]) == ["B", "D", "C"]
    assert [(e.holder, e.season, e.value) for e in cats["most_wins_season"].leaders][0] == ("A", 2023, 3)

    assert [e.value for e in cats["best_win_pct_overall"].leaders] == [1.0, 0.667, 0.333]
    assert _holders(cats["worst_win_pct_overall"]) == ["B", "D", "C"]
    # Nobody reaches the default games threshold for a single season.
    assert cats["best_win_pct_season"].leaders == ()

    assert _holders(cats["most_championships"]) == ["A", "B", "C"]
    assert [e.holder for e in cats["most_championships"].tied] == ["D"]
    assert cats["most_chumpionships"].holder.holder == "B"
    assert _holders(cats["most_championship_appearances"])[:2] == ["A", "D"]

    assert [(e.holder, e.value) for e in cats["longest_win_streak"].leaders] == [("A", 3), ("C", 1), ("D", 1)]
    assert _holders(cats["longest_losing_streak"]) == ["B", "C", "D"]
    assert [(e.holder, e.value) for e in cats["longest_150_plus_streak"].leaders] == [("A", 3), ("C", 1), ("B", 0)]
    assert [(e.holder, e.value) for e in cats["longest_under_100_streak"].leaders] == [("B", 3), ("D", 2), ("A", 0)]
    assert [e.holder for e in cats["longest_under_100_streak"].tied] == ["C"]


def test_single_game_records() -> None:
    cats = _by_name(single_game_records(_season_rows()))

    highest = cats["highest_score"]
    assert [(e.holder, e.value) for e in highest.leaders] == [("A", 210), ("A", 160), ("A", 155)]
    assert (highest.holder.season, highest.holder.week, highest.holder.opponent) == (2023, 3, "D")

    assert [(e.holder, e.value) for e in cats["lowest_score"].leaders] == [("D", 80), ("B", 85), ("B", 90)]
    assert [(e.holder, e.opponent, e.value) for e in cats["largest_blowout"].leaders] == [
        ("A", "D", 130),
        ("A", "B", 70),
        ("C", "B", 45),
    ]
    assert [(e.holder, e.opponent, e.value) for e in cats["closest_game"].leaders] == [
        ("D", "B", 4),
        ("A", "C", 5),
        ("C", "D", 20),
    ]


def test_closest_game_ignores_dead_heats() -> None:
    records = parse_score_rows(score_rows(1, 2023, 1, "A", 100, "B", 100) + score_rows(2, 2023, 1, "C", 101, "D", 99))
    cats = _by_name(single_game_records(records))
    assert [e.game_id for e in cats["closest_game"].leaders] == ["2"]


def test_high_score_games_sorted_by_score() -> None:
    games = high_score_games(_season_rows())
    assert [(g.team, g.score, g.result) for g in games] == [("A", 210, "W")]

    assert [g.score for g in high_score_games(_season_rows(), threshold=150)] == [210, 160, 155, 150]


def _roster(season: int, week: int, *teams: tuple[str, tuple[str, ...]]) -> RosterWeek:
    return RosterWeek(
        season=season,
        week=week,
        teams=tuple(
            TeamWeek(
                team_id=i,
                team_name=f"{owner} FC" if owner else "",
                owner=owner,
                roster=tuple(PlayerWeekEntry(player_id=n, name=n, position="RB") for n in names),
            )
            for i, (owner, names) in enumerate(teams)
        ),
    )


def test_player_records_count_distinct_names() -> None:
    weeks = [
        _roster(2023, 1, ("A", ("X", "Y")), ("B", ("X", "Z")), ("", ("Q",))),
        _roster(2023, 2, ("A", ("X", "W ")), ("B", ("Z",))),
        _roster(2022, 1, ("A", ("V",))),
    ]

    cats = _by_name(player_records(weeks, min_weeks_overall=2, min_weeks_season=2))

    assert [(e.holder, e.value) for e in cats["most_unique_players_overall"].leaders] == [("A", 4), ("B", 2)]
    assert [(e.holder, e.value) for e in cats["fewest_unique_players_overall"].leaders] == [("B", 2), ("A", 4)]
    assert [(e.holder, e.season, e.value) for e in cats["most_unique_players_season"].leaders] == [
        ("A", 2023, 3),
        ("B", 2023, 2),
    ]


def test_player_records_need_enough_roster_weeks() -> None:
    cats = _by_name(player_records([_roster(2023, 1, ("A", ("X",)))]))
    assert all(c.leaders == () for c in cats.values())


def test_build_record_book_and_category_lookup() -> None:
    book = build_record_book(_season_rows())

    assert book.category("most_wins_overall").holder.holder == "A"
    assert [g.game_id for g in book.high_score_games] == ["5"]
    assert book.category("most_unique_players_overall").leaders == ()
    with pytest.raises(KeyError):
        book.category("most_trades")
