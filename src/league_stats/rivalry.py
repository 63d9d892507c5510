"""Rivalry and head-to-head summaries.

Two views are offered:

- :func:`head_to_head` / :func:`rivalries` fold one team's game log into a
  summary per opponent (record, scoring, running streak, last meeting).
- :func:`compare_owners` compares two owners over the raw league score rows,
  exposing the direct-matchup record, the playoff record and the "overall"
  record (who scored more in the same week, whoever they actually played).
  The direct and overall records can disagree in multi-division leagues.

Games in which both sides scored exactly 0 have not been played yet and are
excluded everywhere.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from league_stats.constants import ALL_TIME, BYE_OPPONENT, RIVALRIES_LIMIT
from league_stats.data import GameLogEntry, SeasonGameRecord
from league_stats.team_stats import advance_streak

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LastMeeting:
    season: int
    week: int


@dataclass(frozen=True, slots=True)
class RivalrySummary:
    opponent: str
    games: int
    wins: int
    losses: int
    points_for: float
    points_against: float
    streak: int
    streak_type: Optional[str]
    last_game: Optional[LastMeeting]
    win_pct: float
    ppg_for: float
    ppg_against: float
    point_diff: float
    record: str
    streak_display: str


def streak_display(streak: int, streak_type: Optional[str]) -> str:
    if streak > 0 and streak_type in ("W", "L"):
        return f"{streak} {streak_type} in a row"
    return "-"


def _is_unplayed(game: GameLogEntry) -> bool:
    return game.team_score == 0 and game.opponent_score == 0


def _summarise(opponent: str, games: Iterable[GameLogEntry]) -> RivalrySummary:
    count = wins = losses = 0
    points_for = points_against = 0.0
    streak, streak_type = 0, None
    last: Optional[LastMeeting] = None

    for game in games:
        count += 1
        if game.result == "W":
            wins += 1
        else:
            losses += 1
        streak, streak_type = advance_streak(streak, streak_type, game.result)

        points_for += game.team_score
        points_against += game.opponent_score

        if last is None or (int(game.season), int(game.week)) > (int(last.season), int(last.week)):
            last = LastMeeting(season=game.season, week=game.week)

    ppg_for = points_for / count if count else 0.0
    ppg_against = points_against / count if count else 0.0

    return RivalrySummary(
        opponent=opponent,
        games=count,
        wins=wins,
        losses=losses,
        points_for=points_for,
        points_against=points_against,
        streak=streak,
        streak_type=streak_type,
        last_game=last,
        win_pct=wins / count if count else 0.0,
        ppg_for=ppg_for,
        ppg_against=ppg_against,
        point_diff=ppg_for - ppg_against,
        record=f"{wins}-{losses}",
        streak_display=streak_display(streak, streak_type),
    )


def head_to_head(game_log: Sequence[GameLogEntry], opponent: str) -> RivalrySummary:
    """Summarise a team's games against ``opponent``.

    The streak follows the order of ``game_log``; pass it chronologically.
    """

    games = [g for g in game_log if g.opponent == opponent and g.opponent != BYE_OPPONENT and not _is_unplayed(g)]
    return _summarise(opponent, games)


def rivalries(
    game_log: Sequence[GameLogEntry],
    season: Union[int, str, None] = None,
    limit: Optional[int] = RIVALRIES_LIMIT,
) -> List[RivalrySummary]:
    """One summary per opponent, most frequent opponents first."""

    opponents: List[str] = []
    for game in game_log:
        if season is not None and season != ALL_TIME and game.season != int(season):
            continue
        if game.opponent == BYE_OPPONENT or game.opponent in opponents:
            continue
        opponents.append(game.opponent)

    in_scope = [g for g in game_log if season is None or season == ALL_TIME or g.season == int(season)]
    summaries = [head_to_head(in_scope, opp) for opp in opponents]
    summaries = [s for s in summaries if s.games > 0]
    summaries.sort(key=lambda s: s.games, reverse=True)

    return summaries if limit is None else summaries[:limit]


@dataclass(frozen=True, slots=True)
class MatchupRecord:
    """Win/loss/tie tally from owner1's point of view."""

    owner1_wins: int
    owner2_wins: int
    ties: int
    total_games: int
    matchups: Tuple[SeasonGameRecord, ...] = ()
    never_met: bool = False


@dataclass(frozen=True, slots=True)
class OwnerScoringStats:
    avg_score: float
    max_score: float
    min_score: float
    avg_win_margin: float
    total_score: float


@dataclass(frozen=True, slots=True)
class OwnerComparison:
    owner1: str
    owner2: str
    head_to_head: MatchupRecord
    playoff: MatchupRecord
    overall: MatchupRecord
    owner1_stats: OwnerScoringStats
    owner2_stats: OwnerScoringStats
    closest_margin: Optional[float]


def _tally(matchups: Sequence[SeasonGameRecord], *, never_met_flag: bool = False) -> MatchupRecord:
    o1 = o2 = ties = 0
    for game in matchups:
        if game.team_score > game.opponent_score:
            o1 += 1
        elif game.team_score < game.opponent_score:
            o2 += 1
        else:
            ties += 1
    return MatchupRecord(
        owner1_wins=o1,
        owner2_wins=o2,
        ties=ties,
        total_games=len(matchups),
        matchups=tuple(matchups),
        never_met=never_met_flag and not matchups,
    )


def direct_matchups(owner1: str, owner2: str, records: Iterable[SeasonGameRecord]) -> List[SeasonGameRecord]:
    """Rows where owner1 played owner2, from owner1's side, excluding unplayed games."""

    return [r for r in records if r.team == owner1 and r.opponent == owner2 and not r.is_unplayed]


def overall_record(owner1: str, owner2: str, records: Iterable[SeasonGameRecord]) -> MatchupRecord:
    """Compare the two owners' scores in every league week both played."""

    weekly: Dict[Tuple[int, int], Dict[str, float]] = {}
    for r in records:
        if r.team not in (owner1, owner2):
            continue
        week_key = (r.season, r.league_week if r.league_week is not None else r.week)
        weekly.setdefault(week_key, {})[r.team] = r.team_score

    o1 = o2 = ties = 0
    for scores in weekly.values():
        if owner1 not in scores or owner2 not in scores:
            continue
        s1, s2 = scores[owner1], scores[owner2]
        if s1 == 0 and s2 == 0:
            continue
        if s1 > s2:
            o1 += 1
        elif s1 < s2:
            o2 += 1
        else:
            ties += 1

    return MatchupRecord(owner1_wins=o1, owner2_wins=o2, ties=ties, total_games=o1 + o2 + ties)


def scoring_stats(matchups: Sequence[SeasonGameRecord], *, as_opponent: bool = False) -> OwnerScoringStats:
    """Scoring summary for one side of a set of direct matchups.

    ``as_opponent`` reads the opponent columns, i.e. owner2's side.
    """

    def mine(g: SeasonGameRecord) -> float:
        return g.opponent_score if as_opponent else g.team_score

    def theirs(g: SeasonGameRecord) -> float:
        return g.team_score if as_opponent else g.opponent_score

    valid = [g for g in matchups if mine(g) > 0]
    if not valid:
        return OwnerScoringStats(avg_score=0.0, max_score=0.0, min_score=0.0, avg_win_margin=0.0, total_score=0.0)

    scores = [mine(g) for g in valid]
    margins = [mine(g) - theirs(g) for g in valid if mine(g) > theirs(g)]
    total = sum(scores)

    return OwnerScoringStats(
        avg_score=total / len(valid),
        max_score=max(scores),
        min_score=min(scores),
        avg_win_margin=sum(margins) / len(margins) if margins else 0.0,
        total_score=total,
    )


def closest_margin(matchups: Sequence[SeasonGameRecord]) -> Optional[float]:
    if not matchups:
        return None
    return min(abs(g.team_score - g.opponent_score) for g in matchups)


def compare_owners(owner1: str, owner2: str, records: Sequence[SeasonGameRecord]) -> OwnerComparison:
    """Head-to-head, playoff and overall comparison of two owners."""

    direct = direct_matchups(owner1, owner2, records)
    playoff = [g for g in direct if g.is_playoff]
    logger.info("%s vs %s: %d direct games (%d playoff)", owner1, owner2, len(direct), len(playoff))

    return OwnerComparison(
        owner1=owner1,
        owner2=owner2,
        head_to_head=_tally(direct),
        playoff=_tally(playoff, never_met_flag=True),
        overall=overall_record(owner1, owner2, records),
        owner1_stats=scoring_stats(direct),
        owner2_stats=scoring_stats(direct, as_opponent=True),
        closest_margin=closest_margin(direct),
    )
