from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from league_stats import records as record_book
from league_stats.all_pro import AllProTeams, select_all_pro
from league_stats.constants import ALL_TIME
from league_stats.context import LeagueContext
from league_stats.formulation import LineupAudit, audit_lineup
from league_stats.notable_games import NotableGames, classify_games, filter_season
from league_stats.optimizer import Improvement, fp_plus, optimize_roster, projected_points
from league_stats.rivalry import OwnerComparison, RivalrySummary, compare_owners, rivalries
from league_stats.team_stats import StandingsRow, build_game_log, season_standings

SeasonArg = Union[int, str, None]


def configure_logging(*, level: int = logging.INFO) -> None:
    """Configure a simple root logger that writes to stderr.

    This is safe to call multiple times.
    """

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        )
    else:
        root.setLevel(level)


logger = logging.getLogger(__name__)


def _season_label(season: SeasonArg) -> str:
    if season is None or season == ALL_TIME:
        return ALL_TIME
    return str(int(season))


@dataclass(frozen=True, slots=True)
class AllProReport:
    season: str
    teams: AllProTeams


@dataclass(frozen=True, slots=True)
class NotableGamesReport:
    season: str
    games: NotableGames


@dataclass(frozen=True, slots=True)
class RivalriesReport:
    team: str
    season: str
    rivalries: Tuple[RivalrySummary, ...]


@dataclass(frozen=True, slots=True)
class RecordBookReport:
    season: str
    records: record_book.RecordBook


@dataclass(frozen=True, slots=True)
class GameEfficiency:
    season: int
    week: int
    team: str
    owner: str
    actual_points: float
    projected_points: float
    optimal_points: float
    points_left_on_bench: float
    optimization_score: int
    fp_plus: int
    improvements: Tuple[Improvement, ...]
    audit: Optional[LineupAudit] = None


@dataclass(frozen=True, slots=True)
class TeamEfficiencySummary:
    team: str
    weeks: int
    actual_points: float
    optimal_points: float
    points_left_on_bench: float
    average_optimization_score: float


@dataclass(frozen=True, slots=True)
class SeasonReport:
    season: int
    standings: Tuple[StandingsRow, ...]
    notable_games: NotableGames
    all_pro: AllProTeams
    efficiency: Tuple[TeamEfficiencySummary, ...]


def build_all_pro(ctx: LeagueContext, season: SeasonArg = None) -> AllProReport:
    """All-Pro teams for one season, or across every season for ``None``/"All Time".

    All-time selections use the most recent season's roster rules.
    """

    label = _season_label(season)
    if label == ALL_TIME:
        rosters = ctx.all_rosters()
        rules = ctx.rules_for(None)
    else:
        rosters = list(ctx.season_rosters(int(label)))
        rules = ctx.rules_for(int(label))

    logger.info("Selecting All-Pro teams for %s from %d roster weeks", label, len(rosters))
    return AllProReport(season=label, teams=select_all_pro(rosters, rules))


def build_notable_games(ctx: LeagueContext, season: SeasonArg = None) -> NotableGamesReport:
    label = _season_label(season)
    records = filter_season(ctx.scores, season)
    games = classify_games(records, limit=ctx.config.notable_games_limit)
    return NotableGamesReport(season=label, games=games)


def build_rivalries(ctx: LeagueContext, team: str, season: SeasonArg = None) -> RivalriesReport:
    label = _season_label(season)
    game_log = build_game_log(ctx.scores, team)
    if not game_log:
        raise KeyError(f"No games found for team {team!r}")
    return RivalriesReport(team=team, season=label, rivalries=tuple(rivalries(game_log, season=season)))


def build_record_book(ctx: LeagueContext, season: SeasonArg = None) -> RecordBookReport:
    """League, single-game and player records for one season or all time."""

    label = _season_label(season)
    records = filter_season(ctx.scores, season)
    rosters = ctx.all_rosters() if label == ALL_TIME else list(ctx.season_rosters(int(label)))
    return RecordBookReport(season=label, records=record_book.build_record_book(records, rosters))


def build_owner_comparison(ctx: LeagueContext, owner1: str, owner2: str) -> OwnerComparison:
    if owner1 == owner2:
        raise ValueError("Cannot compare an owner with themselves")
    return compare_owners(owner1, owner2, ctx.scores)


def build_game_efficiency(
    ctx: LeagueContext,
    season: int,
    week: int,
    team: str,
    *,
    audit: bool = False,
) -> GameEfficiency:
    """Lineup efficiency for one team in one week.

    Raises ``KeyError`` when the week's roster file or the team is not found.
    """

    roster_week = next((r for r in ctx.season_rosters(season) if r.week == week), None)
    if roster_week is None:
        raise KeyError(f"No roster data for season {season} week {week}")
    team_week = roster_week.find_team(team)
    if team_week is None:
        raise KeyError(f"Team {team!r} not found in season {season} week {week}")

    rules = ctx.rules_for(season)
    result = optimize_roster(team_week.roster, rules)
    projected = projected_points(team_week.roster)

    lineup_audit = None
    if audit:
        lineup_audit = audit_lineup(
            team_week.roster, rules, greedy=result, enable_solver_output=ctx.config.solver_output
        )

    return GameEfficiency(
        season=season,
        week=week,
        team=team_week.team_name,
        owner=team_week.owner,
        actual_points=result.actual_points,
        projected_points=projected,
        optimal_points=result.optimal_points,
        points_left_on_bench=result.points_left_on_bench,
        optimization_score=result.optimization_score,
        fp_plus=fp_plus(result.actual_points, projected),
        improvements=result.accepted_improvements,
        audit=lineup_audit,
    )


def summarise_season_efficiency(ctx: LeagueContext, season: int) -> List[TeamEfficiencySummary]:
    """Lineup efficiency totals per team over every roster week of ``season``."""

    rules = ctx.rules_for(season)
    totals: Dict[str, List[float]] = {}
    for roster_week in ctx.season_rosters(season):
        for team_week in roster_week.teams:
            result = optimize_roster(team_week.roster, rules)
            key = team_week.owner or team_week.team_name
            acc = totals.setdefault(key, [0, 0.0, 0.0, 0.0, 0.0])
            acc[0] += 1
            acc[1] += result.actual_points
            acc[2] += result.optimal_points
            acc[3] += result.points_left_on_bench
            acc[4] += result.optimization_score

    summaries = [
        TeamEfficiencySummary(
            team=team,
            weeks=int(weeks),
            actual_points=actual,
            optimal_points=optimal,
            points_left_on_bench=left,
            average_optimization_score=round(score_sum / weeks, 2) if weeks else 0.0,
        )
        for team, (weeks, actual, optimal, left, score_sum) in totals.items()
    ]
    summaries.sort(key=lambda s: s.average_optimization_score, reverse=True)
    return summaries


def build_season_report(ctx: LeagueContext, season: Optional[int] = None) -> SeasonReport:
    """Standings, notable games, All-Pro teams and lineup efficiency for one season.

    ``season`` defaults to the most recent season in the score data.
    """

    if season is None:
        season = ctx.latest_season()
        if season is None:
            raise ValueError("League score data contains no seasons")

    logger.info("Building season report for %d", season)
    return SeasonReport(
        season=season,
        standings=tuple(season_standings(ctx.scores, season)),
        notable_games=build_notable_games(ctx, season).games,
        all_pro=build_all_pro(ctx, season).teams,
        efficiency=tuple(summarise_season_efficiency(ctx, season)),
    )
