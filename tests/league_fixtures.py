"""Helpers for building small league documents in tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def score_rows(
    game_id: int,
    season: int,
    week: int,
    team: str,
    team_score: float,
    opp: str,
    opp_score: float,
    *,
    period: str = "Regular",
    league_week: int | None = None,
) -> list[dict[str, Any]]:
    """Both per-team rows for one game, as they appear in league_score_data.json."""

    base = {
        "Game ID": game_id,
        "Season": season,
        "Week": week,
        "League Week": week if league_week is None else league_week,
        "Season Period": period,
    }
    return [
        {**base, "Team": team, "Opponent": opp, "Team Score": team_score, "Opponent Score": opp_score, "Score Diff": team_score - opp_score},
        {**base, "Team": opp, "Opponent": team, "Team Score": opp_score, "Opponent Score": team_score, "Score Diff": opp_score - team_score},
    ]


LEAGUE_RULES: list[dict[str, Any]] = [
    {
        "Season": 2022,
        "Slots": {"QB": 1, "RB": 2, "WR": 2, "TE": 1, "FLEX": 1, "D/ST": 1, "K": 1, "BE": 6, "IR": 1, "FLEX Eligible": "RB, WR, TE"},
    },
    {"Season": "default", "Slots": {"QB": 1, "RB": 2, "WR": 2, "TE": 1, "D/ST": 1}},
]

WEEK_1_ROSTERS: dict[str, Any] = {
    "teams": [
        {
            "team_id": 1,
            "team_name": "Alpha",
            "owner": "Alice",
            "roster": [
                {"playerId": 1, "name": "Quinn", "position": "QB", "proTeam": "KC", "slotPosition": "QB", "projectedPoints": 22, "actualPoints": 20},
                {"playerId": 2, "name": "Rex", "position": "RB", "proTeam": "SF", "slotPosition": "RB", "projectedPoints": 12, "actualPoints": 10},
                {"playerId": 3, "name": "Rudy", "position": "RB", "proTeam": "DAL", "slotPosition": "BE", "projectedPoints": 9, "actualPoints": 15},
                {"playerId": 4, "name": "Kip", "position": "K", "proTeam": "BAL", "slotPosition": "BE", "projectedPoints": 7, "actualPoints": 8},
            ],
        },
        {
            "team_id": 2,
            "team_name": "Bravo",
            "owner": "Bob",
            "roster": [
                {"playerId": 11, "name": "Quade", "position": "QB", "proTeam": "BUF", "slotPosition": "QB", "projectedPoints": 20, "actualPoints": 25},
                {"playerId": 12, "name": "Wes", "position": "WR", "proTeam": "MIA", "slotPosition": "WR", "projectedPoints": 11, "actualPoints": 12},
                {"playerId": 13, "name": "Walt", "position": "WR", "proTeam": "NYJ", "slotPosition": "BE", "projectedPoints": 8, "actualPoints": 0},
            ],
        },
    ]
}


def league_scores() -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    rows += score_rows(1, 2023, 1, "Alice", 120, "Bob", 100)
    rows += score_rows(2, 2023, 1, "Carol", 90, "Dave", 95)
    rows += score_rows(3, 2023, 2, "Alice", 110, "Carol", 111)
    rows += score_rows(4, 2023, 2, "Bob", 80, "Dave", 140)
    # Placeholder row the site export sometimes carries.
    rows.append({"Score Diff": 0})
    return rows


def write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")
