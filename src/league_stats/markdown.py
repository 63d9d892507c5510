"""Markdown renderers for the JSON reports built by :mod:`league_stats.main`.

Each renderer takes the ``dataclasses.asdict`` form of a report, so a saved
``season_report.json`` can be rendered later without recomputing anything.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Sequence

NO_PLAYER = "_No player selected_"
TIER_TITLES = (("first", "First Team"), ("second", "Second Team"), ("third", "Third Team"))


def _format_score(score: float | None) -> str:
    if score is None:
        return ""
    # Keep integers as integers for readability.
    if abs(score - round(score)) < 1e-9:
        return str(int(round(score)))
    return f"{score:.2f}".rstrip("0").rstrip(".")


def _format_pct(value: float | None) -> str:
    if value is None:
        return ""
    return f"{value * 100:.1f}%"


def _table(header: Sequence[str], rows: Iterable[Sequence[str]]) -> str:
    lines = ["| " + " | ".join(header) + " |", "| " + " | ".join(["---"] * len(header)) + " |"]
    for row in rows:
        lines.append("| " + " | ".join(row) + " |")
    return "\n".join(lines)


def _season_title(season: Any) -> str:
    return str(season) if season is not None else "All Time"


def all_pro_to_markdown(report: Mapping[str, Any]) -> str:
    teams: Mapping[str, Any] = report.get("teams") or {}
    limits: Mapping[str, int] = teams.get("position_limits") or {}

    lines: List[str] = [f"## All-Pro Teams ({_season_title(report.get('season'))})", ""]

    if not any(teams.get(tier) for tier, _title in TIER_TITLES):
        lines.append("No All-Pro data available.")
        return "\n".join(lines) + "\n"

    for tier, title in TIER_TITLES:
        players: Sequence[Mapping[str, Any]] = teams.get(tier) or []
        rows: List[List[str]] = []
        for position, count in limits.items():
            chosen = [p for p in players if p.get("position") == position]
            for i in range(int(count)):
                if i < len(chosen):
                    p = chosen[i]
                    rows.append(
                        [
                            position,
                            str(p.get("name", "")),
                            str(p.get("owner") or p.get("fantasy_team") or ""),
                            _format_score(p.get("total_points")),
                            str(p.get("weeks_played", "")),
                            _format_score(round(float(p.get("ppg") or 0.0), 2)),
                        ]
                    )
                else:
                    rows.append([position, NO_PLAYER, "", "", "", ""])

        lines.append(f"### {title}")
        lines.append("")
        lines.append(_table(["Pos", "Player", "Owner", "Points", "Weeks", "PPG"], rows))
        lines.append("")

    return "\n".join(lines)


def _matchup_row(m: Mapping[str, Any], *, value_key: str) -> List[str]:
    t1 = m.get("team1") or {}
    t2 = m.get("team2") or {}
    return [
        f"{m.get('season')} W{m.get('week')}",
        f"{t1.get('name')} {_format_score(t1.get('score'))}",
        f"{t2.get('name')} {_format_score(t2.get('score'))}",
        _format_score(m.get(value_key)),
    ]


def notable_games_to_markdown(report: Mapping[str, Any]) -> str:
    games: Mapping[str, Any] = report.get("games") or {}
    lines: List[str] = [f"## Notable Games ({_season_title(report.get('season'))})", ""]

    if not games.get("highest"):
        lines.append("No games found.")
        return "\n".join(lines) + "\n"

    sections = (
        ("highest", "Highest Scoring", "Combined", "combined_score"),
        ("lowest", "Lowest Scoring", "Combined", "combined_score"),
        ("blowouts", "Biggest Blowouts", "Margin", "margin"),
        ("closest", "Closest Games", "Margin", "margin"),
    )
    for key, title, value_label, value_key in sections:
        lines.append(f"### {title}")
        lines.append("")
        lines.append(
            _table(
                ["Week", "Team", "Opponent", value_label],
                (_matchup_row(m, value_key=value_key) for m in games.get(key) or []),
            )
        )
        lines.append("")

    return "\n".join(lines)


def rivalries_to_markdown(report: Mapping[str, Any]) -> str:
    lines: List[str] = [f"## Rivalries for {report.get('team')} ({_season_title(report.get('season'))})", ""]
    rivals: Sequence[Mapping[str, Any]] = report.get("rivalries") or []
    if not rivals:
        lines.append("No rivalry data available.")
        return "\n".join(lines) + "\n"

    rows = []
    for r in rivals:
        last = r.get("last_game") or {}
        rows.append(
            [
                str(r.get("opponent")),
                str(r.get("record")),
                _format_pct(r.get("win_pct")),
                f"{float(r.get('ppg_for') or 0.0):.1f}",
                f"{float(r.get('ppg_against') or 0.0):.1f}",
                str(r.get("streak_display")),
                f"{last.get('season')} W{last.get('week')}" if last else "",
            ]
        )
    lines.append(_table(["Opponent", "Record", "Win %", "PPG", "Opp PPG", "Streak", "Last"], rows))
    return "\n".join(lines) + "\n"


def _record_line(label: str, record: Mapping[str, Any], owner1: str, owner2: str) -> str:
    if record.get("never_met"):
        return f"- **{label}**: never met"
    text = f"{owner1} {record.get('owner1_wins', 0)} - {record.get('owner2_wins', 0)} {owner2}"
    if record.get("ties"):
        text += f" ({record['ties']} tied)"
    return f"- **{label}**: {text}"


def comparison_to_markdown(report: Mapping[str, Any]) -> str:
    owner1 = str(report.get("owner1"))
    owner2 = str(report.get("owner2"))
    lines: List[str] = [f"## {owner1} vs {owner2}", ""]
    lines.append(_record_line("Head to head", report.get("head_to_head") or {}, owner1, owner2))
    lines.append(_record_line("Playoffs", report.get("playoff") or {}, owner1, owner2))
    lines.append(_record_line("Same-week scoring", report.get("overall") or {}, owner1, owner2))

    closest: Optional[float] = report.get("closest_margin")
    if closest is not None:
        lines.append(f"- **Closest game**: {_format_score(closest)} points")
    lines.append("")

    rows = []
    for owner, stats in ((owner1, report.get("owner1_stats") or {}), (owner2, report.get("owner2_stats") or {})):
        rows.append(
            [
                owner,
                f"{float(stats.get('avg_score') or 0.0):.1f}",
                _format_score(stats.get("max_score")),
                _format_score(stats.get("min_score")),
                f"{float(stats.get('avg_win_margin') or 0.0):.1f}",
            ]
        )
    lines.append(_table(["Owner", "Avg", "High", "Low", "Avg win margin"], rows))
    return "\n".join(lines) + "\n"


def _improvement_line(c: Mapping[str, Any]) -> str:
    bench = c.get("bench_player") or {}
    if c.get("kind") == "swap":
        active = c.get("active_player") or {}
        return (
            f"- Start {bench.get('name')} ({_format_score(bench.get('actual_points'))}) over "
            f"{active.get('name')} ({_format_score(active.get('actual_points'))}): "
            f"+{_format_score(c.get('difference'))}"
        )
    return (
        f"- Start {bench.get('name')} in the empty {c.get('position')} slot: "
        f"+{_format_score(c.get('difference'))}"
    )


def efficiency_to_markdown(report: Mapping[str, Any]) -> str:
    title = report.get("team") or report.get("owner")
    lines: List[str] = [f"## Lineup efficiency: {title} ({report.get('season')} W{report.get('week')})", ""]
    lines.append(f"- **Actual**: {_format_score(report.get('actual_points'))}")
    lines.append(f"- **Projected**: {_format_score(report.get('projected_points'))} (FP+ {report.get('fp_plus')})")
    lines.append(f"- **Optimal**: {_format_score(report.get('optimal_points'))}")
    lines.append(f"- **Left on bench**: {_format_score(report.get('points_left_on_bench'))}")
    lines.append(f"- **Optimization score**: {report.get('optimization_score')}%")

    audit = report.get("audit")
    if audit and float(audit.get("under_reported_points") or 0.0) > 1e-6:
        exact = audit.get("exact") or {}
        lines.append(
            f"- **Exact optimum**: {_format_score(exact.get('optimal_points'))} "
            f"(score {audit.get('exact_optimization_score')}%)"
        )
    lines.append("")

    improvements = report.get("improvements") or []
    if improvements:
        lines.append("### Better lineup moves")
        lines.append("")
        lines.extend(_improvement_line(c) for c in improvements)
    else:
        lines.append("Perfect lineup.")
    return "\n".join(lines) + "\n"


RECORD_TITLES: Mapping[str, str] = {
    "most_wins_overall": "Most wins (career)",
    "most_wins_season": "Most wins (season)",
    "most_losses_overall": "Most losses (career)",
    "most_losses_season": "Most losses (season)",
    "best_win_pct_overall": "Best win % (career)",
    "best_win_pct_season": "Best win % (season)",
    "worst_win_pct_overall": "Worst win % (career)",
    "worst_win_pct_season": "Worst win % (season)",
    "most_weekly_top_scores": "Most weekly high scores",
    "most_weekly_top3_scores": "Most weekly top-3 scores",
    "most_weekly_worst_scores": "Most weekly low scores",
    "most_weekly_bottom3_scores": "Most weekly bottom-3 scores",
    "most_championships": "Most championships",
    "most_chumpionships": "Most chumpionships",
    "most_championship_appearances": "Most championship appearances",
    "most_chumpionship_appearances": "Most chumpionship appearances",
    "longest_win_streak": "Longest winning streak",
    "longest_losing_streak": "Longest losing streak",
    "longest_150_plus_streak": "Longest 150+ point streak",
    "longest_under_100_streak": "Longest sub-100 point streak",
    "highest_score": "Highest score",
    "lowest_score": "Lowest score",
    "largest_blowout": "Largest blowout",
    "closest_game": "Closest game",
    "most_unique_players_overall": "Most players rostered (career)",
    "most_unique_players_season": "Most players rostered (season)",
    "fewest_unique_players_overall": "Fewest players rostered (career)",
    "fewest_unique_players_season": "Fewest players rostered (season)",
}


def _record_holder(entry: Mapping[str, Any], *, single_game: bool) -> str:
    holder = str(entry.get("holder"))
    if single_game:
        if entry.get("opponent"):
            holder += f" vs {entry['opponent']}"
        return f"{holder} ({entry.get('season')} W{entry.get('week')})"
    if entry.get("season") is not None:
        return f"{holder} ({entry['season']})"
    return holder


def _record_value(name: str, value: Any) -> str:
    if "win_pct" in name:
        return f"{float(value or 0.0):.3f}"
    return _format_score(float(value or 0.0))


def _record_section(title: str, categories: Sequence[Mapping[str, Any]], *, single_game: bool = False) -> List[str]:
    lines: List[str] = [f"### {title}", ""]
    rows: List[List[str]] = []
    for cat in categories:
        name = str(cat.get("name"))
        entries = list(cat.get("leaders") or []) + list(cat.get("tied") or [])
        if not entries:
            rows.append([RECORD_TITLES.get(name, name), "No record", ""])
            continue
        for i, entry in enumerate(entries):
            rows.append(
                [
                    RECORD_TITLES.get(name, name) if i == 0 else "",
                    _record_holder(entry, single_game=single_game),
                    _record_value(name, entry.get("value")),
                ]
            )
    lines.append(_table(["Record", "Holder", "Value"], rows))
    lines.append("")
    return lines


def record_book_to_markdown(report: Mapping[str, Any]) -> str:
    book: Mapping[str, Any] = report.get("records") or {}
    lines: List[str] = [f"## Record Book ({_season_title(report.get('season'))})", ""]
    lines.extend(_record_section("League records", book.get("league") or []))
    lines.extend(_record_section("Single-game records", book.get("single_game") or [], single_game=True))
    lines.extend(_record_section("Player records", book.get("players") or []))

    lines.append("### 200+ point games")
    lines.append("")
    games = book.get("high_score_games") or []
    if not games:
        lines.append("No 200+ point games found.")
    else:
        lines.append(
            _table(
                ["#", "Team", "Score", "Opponent", "Opp score", "Season", "Week", "Result"],
                (
                    [
                        str(i),
                        str(g.get("team")),
                        f"{float(g.get('score') or 0.0):.1f}",
                        str(g.get("opponent")),
                        f"{float(g.get('opponent_score') or 0.0):.1f}",
                        str(g.get("season")),
                        str(g.get("week")),
                        str(g.get("result")),
                    ]
                    for i, g in enumerate(games, start=1)
                ),
            )
        )
    return "\n".join(lines) + "\n"


def standings_to_markdown(rows: Sequence[Mapping[str, Any]], *, season: Any = None) -> str:
    lines: List[str] = [f"## Standings ({_season_title(season)})", ""]
    table_rows = [
        [
            str(r.get("team")),
            f"{r.get('wins')}-{r.get('losses')}",
            _format_pct(r.get("win_pct")),
            _format_score(round(float(r.get("points_for") or 0.0), 2)),
            _format_score(round(float(r.get("points_against") or 0.0), 2)),
            str(r.get("streak")),
        ]
        for r in rows
    ]
    lines.append(_table(["Team", "Record", "Win %", "PF", "PA", "Streak"], table_rows))
    return "\n".join(lines) + "\n"


def season_report_to_markdown(report: Mapping[str, Any]) -> str:
    season = report.get("season")
    lines: List[str] = [f"# League report: {season}", ""]
    lines.append(standings_to_markdown(report.get("standings") or [], season=season))
    lines.append(notable_games_to_markdown({"season": season, "games": report.get("notable_games") or {}}))
    lines.append(all_pro_to_markdown({"season": season, "teams": report.get("all_pro") or {}}))

    eff = report.get("efficiency") or []
    if eff:
        lines.append("## Lineup efficiency")
        lines.append("")
        lines.append(
            _table(
                ["Team", "Weeks", "Actual", "Optimal", "Left on bench", "Avg score"],
                (
                    [
                        str(e.get("team")),
                        str(e.get("weeks")),
                        _format_score(round(float(e.get("actual_points") or 0.0), 2)),
                        _format_score(round(float(e.get("optimal_points") or 0.0), 2)),
                        _format_score(round(float(e.get("points_left_on_bench") or 0.0), 2)),
                        f"{float(e.get('average_optimization_score') or 0.0):.1f}%",
                    ]
                    for e in eff
                ),
            )
        )
        lines.append("")

    return "\n".join(lines) + "\n"
