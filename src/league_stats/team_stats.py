"""Per-team game logs, records, standings and franchise roster summaries."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from league_stats.constants import ALL_TIME, BYE_OPPONENT, HIGH_SCORE_THRESHOLD, REGULAR_SEASON_PERIOD
from league_stats.data import GameLogEntry, PlayerId, RosterWeek, SeasonGameRecord

logger = logging.getLogger(__name__)


def _season_matches(record_season: int, season: Union[int, str, None]) -> bool:
    if season is None or season == ALL_TIME:
        return True
    return record_season == int(season)


def advance_streak(streak: int, streak_type: Optional[str], result: str) -> tuple[int, str]:
    """Extend a running streak or restart it at 1 when the result type changes."""

    if streak_type == result:
        return streak + 1, result
    return 1, result


def format_streak(streak: int, streak_type: Optional[str]) -> str:
    if streak > 0 and streak_type:
        return f"{streak}{streak_type}"
    return "None"


def build_game_log(
    records: Iterable[SeasonGameRecord],
    team: str,
    season: Union[int, str, None] = None,
) -> List[GameLogEntry]:
    """Chronological game log for ``team``.

    Bye rows and games not yet played (both scores 0) are left out.
    """

    log: List[GameLogEntry] = []
    for rec in records:
        if rec.team != team or rec.is_bye or rec.is_unplayed:
            continue
        if not _season_matches(rec.season, season):
            continue
        log.append(
            GameLogEntry(
                season=rec.season,
                week=rec.week,
                season_period=rec.season_period,
                opponent=rec.opponent,
                team_score=rec.team_score,
                opponent_score=rec.opponent_score,
                score_diff=rec.margin,
            )
        )

    log.sort(key=lambda g: (g.season, g.week))
    return log


@dataclass(frozen=True, slots=True)
class TeamStats:
    team: str
    games: int
    wins: int
    losses: int
    points_for: float
    points_against: float
    highest_score: float
    lowest_score: float
    win_pct: float
    avg_points_for: float
    avg_points_against: float
    point_differential: float
    avg_point_differential: float
    current_streak: int
    streak_type: Optional[str]
    current_streak_display: str
    longest_win_streak: int
    longest_loss_streak: int
    games_200_plus: int
    playoff_wins: int
    playoff_losses: int
    seasons: Tuple[int, ...]
    game_log: Tuple[GameLogEntry, ...]


def summarise_game_log(team: str, game_log: Sequence[GameLogEntry]) -> TeamStats:
    """Fold a chronological game log into a :class:`TeamStats`."""

    wins = losses = 0
    points_for = points_against = 0.0
    highest = 0.0
    lowest: Optional[float] = None
    streak, streak_type = 0, None
    longest_win = longest_loss = 0
    playoff_wins = playoff_losses = 0
    seasons: set[int] = set()

    for game in game_log:
        seasons.add(game.season)
        points_for += game.team_score
        points_against += game.opponent_score
        highest = max(highest, game.team_score)
        lowest = game.team_score if lowest is None else min(lowest, game.team_score)

        streak, streak_type = advance_streak(streak, streak_type, game.result)
        if game.result == "W":
            wins += 1
            longest_win = max(longest_win, streak)
        else:
            losses += 1
            longest_loss = max(longest_loss, streak)

        if game.season_period not in (REGULAR_SEASON_PERIOD, BYE_OPPONENT):
            if game.result == "W":
                playoff_wins += 1
            else:
                playoff_losses += 1

    games = len(game_log)
    differential = points_for - points_against

    return TeamStats(
        team=team,
        games=games,
        wins=wins,
        losses=losses,
        points_for=points_for,
        points_against=points_against,
        highest_score=highest,
        lowest_score=lowest if lowest is not None else 0.0,
        win_pct=wins / games if games else 0.0,
        avg_points_for=points_for / games if games else 0.0,
        avg_points_against=points_against / games if games else 0.0,
        point_differential=differential,
        avg_point_differential=differential / games if games else 0.0,
        current_streak=streak,
        streak_type=streak_type,
        current_streak_display=format_streak(streak, streak_type),
        longest_win_streak=longest_win,
        longest_loss_streak=longest_loss,
        games_200_plus=sum(1 for g in game_log if g.team_score >= HIGH_SCORE_THRESHOLD),
        playoff_wins=playoff_wins,
        playoff_losses=playoff_losses,
        seasons=tuple(sorted(seasons)),
        game_log=tuple(game_log),
    )


def calculate_team_stats(
    records: Iterable[SeasonGameRecord],
    team: str,
    season: Union[int, str, None] = None,
) -> TeamStats:
    return summarise_game_log(team, build_game_log(records, team, season))


@dataclass(frozen=True, slots=True)
class StandingsRow:
    team: str
    wins: int
    losses: int
    win_pct: float
    points_for: float
    avg_points_for: float
    points_against: float
    avg_points_against: float
    point_differential: float
    avg_point_differential: float
    streak: str


def season_standings(
    records: Sequence[SeasonGameRecord],
    season: int,
    through_week: Optional[int] = None,
) -> List[StandingsRow]:
    """Standings for every team that played in ``season`` (up to ``through_week``).

    Sorted by win percentage, then total points for.
    """

    in_scope = [r for r in records if r.season == season and (through_week is None or r.week <= through_week)]
    teams = sorted({r.team for r in in_scope if not r.is_bye})

    rows: List[StandingsRow] = []
    for team in teams:
        stats = summarise_game_log(team, build_game_log(in_scope, team))
        if stats.games == 0:
            continue
        rows.append(
            StandingsRow(
                team=team,
                wins=stats.wins,
                losses=stats.losses,
                win_pct=stats.win_pct,
                points_for=stats.points_for,
                avg_points_for=stats.avg_points_for,
                points_against=stats.points_against,
                avg_points_against=stats.avg_points_against,
                point_differential=stats.point_differential,
                avg_point_differential=stats.avg_point_differential,
                streak=stats.current_streak_display,
            )
        )

    rows.sort(key=lambda r: (r.win_pct, r.points_for), reverse=True)
    return rows


@dataclass(frozen=True, slots=True)
class LeagueOverallRecord:
    """Record against every other team's same-week score."""

    team: str
    wins: int
    losses: int

    @property
    def record(self) -> str:
        if self.wins or self.losses:
            return f"{self.wins}-{self.losses}"
        return "--"


def league_overall_record(
    records: Iterable[SeasonGameRecord],
    team: str,
    week: Optional[int] = None,
) -> LeagueOverallRecord:
    """Count how often ``team`` outscored each other team in the same week.

    Ties are ignored. ``week`` restricts the count to that week number in
    every season.
    """

    by_week: Dict[Tuple[int, int], Dict[str, float]] = {}
    for rec in records:
        if rec.is_bye or rec.is_unplayed:
            continue
        if week is not None and rec.week != week:
            continue
        by_week.setdefault((rec.season, rec.week), {}).setdefault(rec.team, rec.team_score)

    wins = losses = 0
    for scores in by_week.values():
        if team not in scores:
            continue
        mine = scores[team]
        for other, score in scores.items():
            if other == team:
                continue
            if mine > score:
                wins += 1
            elif mine < score:
                losses += 1

    return LeagueOverallRecord(team=team, wins=wins, losses=losses)


@dataclass(slots=True)
class FranchisePlayerStats:
    player_id: PlayerId
    name: str
    position: str
    total_projected_points: float = 0.0
    total_actual_points: float = 0.0
    weeks_on_roster: int = 0
    weeks_started: int = 0
    fp_plus: float = 0.0
    points_per_week: float = 0.0


def franchise_player_stats(weekly_rosters: Iterable[RosterWeek], owner: str) -> List[FranchisePlayerStats]:
    """Per-player usage for one franchise across the supplied roster weeks."""

    players: Dict[PlayerId, FranchisePlayerStats] = {}

    for roster_week in weekly_rosters:
        team = roster_week.find_team(owner)
        if team is None:
            continue

        for entry in team.roster:
            stats = players.get(entry.player_id)
            if stats is None:
                stats = FranchisePlayerStats(
                    player_id=entry.player_id,
                    name=entry.name or "Unknown Player",
                    position=entry.position or "Unknown",
                )
                players[entry.player_id] = stats

            stats.weeks_on_roster += 1
            if entry.is_active:
                stats.weeks_started += 1
            if entry.projected_points is not None:
                stats.total_projected_points += entry.projected_points
            if entry.actual_points is not None:
                stats.total_actual_points += entry.actual_points

    for stats in players.values():
        if stats.total_projected_points > 0:
            stats.fp_plus = round(stats.total_actual_points / stats.total_projected_points * 100, 2)
        if stats.weeks_on_roster > 0:
            stats.points_per_week = round(stats.total_actual_points / stats.weeks_on_roster, 2)

    logger.debug("Franchise %s used %d players", owner, len(players))
    return sorted(players.values(), key=lambda p: p.total_actual_points, reverse=True)

