from __future__ import annotations

import pytest

from league_fixtures import score_rows
from league_stats.data import PlayerWeekEntry, RosterWeek, TeamWeek
from league_stats.io import parse_score_rows
from league_stats.team_stats import (
    advance_streak,
    build_game_log,
    calculate_team_stats,
    format_streak,
    franchise_player_stats,
    league_overall_record,
    season_standings,
)


def _records(*games, **kwargs):
    rows = []
    for g in games:
        rows += score_rows(*g, **kwargs)
    return parse_score_rows(rows)


def test_advance_streak_and_format() -> None:
    assert advance_streak(0, None, "W") == (1, "W")
    assert advance_streak(1, "W", "W") == (2, "W")
    assert advance_streak(2, "W", "L") == (1, "L")
    assert format_streak(3, "W") == "3W"
    assert format_streak(0, None) == "None"


def test_build_game_log_is_chronological_and_skips_byes_and_unplayed() -> None:
    records = _records(
        (3, 2023, 2, "Alice", 90, "Carol", 95),
        (1, 2022, 5, "Alice", 100, "Bob", 80),
        (2, 2023, 1, "Alice", 100, "Bye", 0),
        (4, 2023, 14, "Alice", 0, "Bob", 0),
    )
    log = build_game_log(records, "Alice")
    assert [(g.season, g.week, g.opponent, g.result) for g in log] == [(2022, 5, "Bob", "W"), (2023, 2, "Carol", "L")]
    assert [g.season for g in build_game_log(records, "Alice", season=2023)] == [2023]


def test_calculate_team_stats() -> None:
    records = _records(
        (1, 2023, 1, "Alice", 210, "Bob", 100),
        (2, 2023, 2, "Alice", 120, "Carol", 100),
        (3, 2023, 3, "Alice", 90, "Dave", 100),
        (4, 2023, 4, "Alice", 95, "Bob", 99),
    ) + _records((5, 2023, 15, "Alice", 130, "Carol", 120), period="Playoffs")

    stats = calculate_team_stats(records, "Alice")

    assert stats.games == 5
    assert (stats.wins, stats.losses) == (3, 2)
    assert stats.points_for == 645
    assert stats.points_against == 519
    assert stats.highest_score == 210
    assert stats.lowest_score == 90
    assert stats.win_pct == pytest.approx(0.6)
    assert stats.games_200_plus == 1
    assert (stats.longest_win_streak, stats.longest_loss_streak) == (2, 2)
    assert stats.current_streak_display == "1W"
    assert (stats.playoff_wins, stats.playoff_losses) == (1, 0)
    assert stats.seasons == (2023,)


def test_team_with_no_games_has_zeroed_stats() -> None:
    stats = calculate_team_stats([], "Nobody")
    assert stats.games == 0
    assert stats.win_pct == 0.0
    assert stats.lowest_score == 0.0
    assert stats.current_streak_display == "None"


def test_season_standings_sorted_by_win_pct_then_points() -> None:
    records = _records(
        (1, 2023, 1, "Alice", 100, "Bob", 90),
        (2, 2023, 1, "Carol", 150, "Dave", 80),
        (3, 2023, 2, "Alice", 70, "Carol", 75),
        (4, 2023, 2, "Bob", 110, "Dave", 100),
        (5, 2022, 1, "Erin", 100, "Bob", 10),
    )

    rows = season_standings(records, 2023)
    assert [r.team for r in rows] == ["Carol", "Bob", "Alice", "Dave"]
    assert rows[0].wins == 2 and rows[0].streak == "2W"

    week_one = season_standings(records, 2023, through_week=1)
    assert [r.team for r in week_one] == ["Carol", "Alice", "Bob", "Dave"]
    assert week_one[2].losses == 1


def test_league_overall_record_ignores_ties() -> None:
    records = _records(
        (1, 2023, 1, "Alice", 100, "Bob", 90),
        (2, 2023, 1, "Carol", 100, "Dave", 120),
        (3, 2023, 2, "Alice", 50, "Carol", 70),
        (4, 2023, 2, "Bob", 60, "Dave", 40),
    )

    week_1 = league_overall_record(records, "Alice", week=1)
    assert (week_1.wins, week_1.losses) == (1, 1)

    everything = league_overall_record(records, "Alice")
    assert everything.record == "2-3"
    assert league_overall_record([], "Alice").record == "--"


def test_franchise_player_stats() -> None:
    def p(pid, slot, projected, actual):
        return PlayerWeekEntry(player_id=pid, name=f"P{pid}", position="WR", slot_position=slot, projected_points=projected, actual_points=actual)

    weeks = [
        RosterWeek(season=2023, week=1, teams=(TeamWeek(team_id=1, team_name="Alpha", owner="Alice", roster=(p(1, "WR", 10, 15), p(2, "BE", 5, 2))),)),
        RosterWeek(season=2023, week=2, teams=(TeamWeek(team_id=1, team_name="Alpha", owner="Alice", roster=(p(1, "BE", 10, 5),)),)),
        RosterWeek(season=2023, week=3, teams=(TeamWeek(team_id=2, team_name="Bravo", owner="Bob", roster=(p(9, "WR", 1, 1),)),)),
    ]

    stats = franchise_player_stats(weeks, "alice")

    assert [s.player_id for s in stats] == [1, 2]
    top = stats[0]
    assert (top.weeks_on_roster, top.weeks_started) == (2, 1)
    assert top.total_actual_points == 20
    assert top.fp_plus == 100.0
    assert top.points_per_week == 10.0
