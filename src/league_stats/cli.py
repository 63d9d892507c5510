"""Command-line entry point for :mod:`league_stats`.

Example
-------
league-stats --data-root ./data all-pro --season 2023
league-stats records --season all --format markdown
league-stats --data-root https://example.com/data compare "Alice" "Bob" --format markdown
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from typing import Any, Callable, Mapping, Sequence

from league_stats import markdown
from league_stats.config import load_site_config
from league_stats.constants import ALL_TIME
from league_stats.context import LeagueContext
from league_stats.main import (
    build_all_pro,
    build_game_efficiency,
    build_notable_games,
    build_owner_comparison,
    build_record_book,
    build_rivalries,
    configure_logging,
)
from league_stats.report import dumps_pretty, to_json_dict
from league_stats.sources import DataRetrievalError
from league_stats.team_stats import season_standings

logger = logging.getLogger(__name__)


def _season_arg(value: str) -> int | str:
    if value.strip().lower() in ("all", "all time", "all-time"):
        return ALL_TIME
    try:
        return int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Season must be a year or 'all', got {value!r}") from e


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="league-stats", description="Fantasy league statistics")
    parser.add_argument(
        "--data-root",
        default=None,
        help="Directory or base URL holding the league JSON files (default: ./data or $LEAGUE_STATS_DATA_ROOT)",
    )
    parser.add_argument("--config", default=None, help="Optional JSON settings file")
    parser.add_argument(
        "--format",
        choices=["json", "markdown"],
        default="json",
        help="Output format (default: json)",
    )
    parser.add_argument("--log-level", default=None, help="Logging level, e.g. DEBUG (default: INFO)")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("all-pro", help="First/second/third All-Pro teams")
    p.add_argument("--season", type=_season_arg, default=None, help="Season year or 'all' (default: all)")

    p = sub.add_parser("notable-games", help="Highest/lowest scoring games, blowouts and close games")
    p.add_argument("--season", type=_season_arg, default=None, help="Season year or 'all' (default: all)")

    p = sub.add_parser("rivalries", help="Record against each opponent for one team")
    p.add_argument("team", help="Team (owner) name as it appears in the score data")
    p.add_argument("--season", type=_season_arg, default=None, help="Season year or 'all' (default: all)")

    p = sub.add_parser("compare", help="Head-to-head and same-week comparison of two owners")
    p.add_argument("owner1")
    p.add_argument("owner2")

    p = sub.add_parser("efficiency", help="Lineup efficiency for one team in one week")
    p.add_argument("team", help="Owner or team name")
    p.add_argument("--season", type=int, required=True)
    p.add_argument("--week", type=int, required=True)
    p.add_argument("--audit", action="store_true", help="Also solve the exact best lineup with CBC")

    p = sub.add_parser("records", help="League, single-game and player records and 200+ point games")
    p.add_argument("--season", type=_season_arg, default=None, help="Season year or 'all' (default: all)")

    p = sub.add_parser("standings", help="Season standings")
    p.add_argument("--season", type=int, default=None, help="Season year (default: most recent)")
    p.add_argument("--through-week", type=int, default=None)

    return parser


def _run(args: argparse.Namespace, ctx: LeagueContext) -> tuple[Any, Callable[[Mapping[str, Any]], str]]:
    if args.command == "all-pro":
        return build_all_pro(ctx, args.season), markdown.all_pro_to_markdown
    if args.command == "notable-games":
        return build_notable_games(ctx, args.season), markdown.notable_games_to_markdown
    if args.command == "rivalries":
        return build_rivalries(ctx, args.team, args.season), markdown.rivalries_to_markdown
    if args.command == "compare":
        return build_owner_comparison(ctx, args.owner1, args.owner2), markdown.comparison_to_markdown
    if args.command == "efficiency":
        report = build_game_efficiency(ctx, args.season, args.week, args.team, audit=args.audit)
        return report, markdown.efficiency_to_markdown
    if args.command == "records":
        return build_record_book(ctx, args.season), markdown.record_book_to_markdown
    if args.command == "standings":
        season = args.season if args.season is not None else ctx.latest_season()
        if season is None:
            raise ValueError("League score data contains no seasons")
        rows = season_standings(ctx.scores, season, through_week=args.through_week)
        return rows, lambda data: markdown.standings_to_markdown(data, season=season)
    raise ValueError(f"Unknown command {args.command!r}")  # pragma: no cover


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        config = load_site_config(args.config)
    except (OSError, ValueError) as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 2

    overrides = {}
    if args.data_root:
        overrides["data_root"] = args.data_root
    if args.log_level:
        overrides["log_level"] = args.log_level
    if overrides:
        try:
            config = replace(config, **overrides)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 2

    configure_logging(level=config.log_level_number)
    ctx = LeagueContext.from_config(config)

    try:
        report, render_markdown = _run(args, ctx)
    except DataRetrievalError as e:
        logger.error("%s", e)
        return 1
    except (KeyError, ValueError) as e:
        print(f"Error: {e.args[0] if e.args else e}", file=sys.stderr)
        return 1

    if args.format == "markdown":
        print(render_markdown(to_json_dict(report)))
    else:
        print(dumps_pretty(report))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
