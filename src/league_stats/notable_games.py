"""Notable games: highest/lowest combined scores, blowouts and nail-biters."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from league_stats.constants import ALL_TIME, BLOWOUT_MARGIN, CLOSE_GAME_MARGIN, NOTABLE_GAMES_LIMIT
from league_stats.data import SeasonGameRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TeamScore:
    name: str
    score: float


@dataclass(frozen=True, slots=True)
class Matchup:
    """One game, deduplicated from the two per-team score rows."""

    game_id: str
    season: int
    week: int
    team1: TeamScore
    team2: TeamScore
    combined_score: float
    margin: float
    is_blowout: bool
    is_close: bool

    @property
    def winner(self) -> Optional[TeamScore]:
        if self.team1.score == self.team2.score:
            return None
        return self.team1 if self.team1.score > self.team2.score else self.team2


@dataclass(frozen=True, slots=True)
class NotableGames:
    highest: Tuple[Matchup, ...]
    lowest: Tuple[Matchup, ...]
    blowouts: Tuple[Matchup, ...]
    closest: Tuple[Matchup, ...]

    @property
    def is_empty(self) -> bool:
        return not self.highest


def filter_season(
    records: Iterable[SeasonGameRecord],
    season: Union[int, str, None],
) -> List[SeasonGameRecord]:
    """Restrict records to one season; ``None`` or ``"All Time"`` keeps everything."""

    if season is None or season == ALL_TIME:
        return list(records)
    wanted = int(season)
    return [r for r in records if r.season == wanted]


def dedupe_matchups(records: Iterable[SeasonGameRecord], *, include_unplayed: bool = True) -> List[Matchup]:
    """Collapse per-team rows into one matchup per ``(game_id, week, season)``.

    The first row seen for a key wins. Bye rows never form a matchup. Rows where
    both scores are 0 (a game not yet played) are kept unless
    ``include_unplayed`` is cleared.
    """

    matchups: Dict[Tuple[str, int, int], Matchup] = {}
    for rec in records:
        if rec.is_bye:
            continue
        if rec.is_unplayed and not include_unplayed:
            continue

        key = (rec.game_id, rec.week, rec.season)
        if key in matchups:
            continue

        margin = abs(rec.team_score - rec.opponent_score)
        matchups[key] = Matchup(
            game_id=rec.game_id,
            season=rec.season,
            week=rec.week,
            team1=TeamScore(name=rec.team, score=rec.team_score),
            team2=TeamScore(name=rec.opponent, score=rec.opponent_score),
            combined_score=rec.team_score + rec.opponent_score,
            margin=margin,
            is_blowout=margin > BLOWOUT_MARGIN,
            is_close=margin < CLOSE_GAME_MARGIN,
        )

    return list(matchups.values())


def _top(matchups: Sequence[Matchup], *, key: str, descending: bool, limit: int) -> Tuple[Matchup, ...]:
    return tuple(sorted(matchups, key=lambda m: getattr(m, key), reverse=descending)[:limit])


def classify_games(
    records: Iterable[SeasonGameRecord],
    *,
    limit: int = NOTABLE_GAMES_LIMIT,
    include_unplayed: bool = True,
) -> NotableGames:
    """Bucket a set of score rows into the four notable-game lists.

    All sorts are stable, so ties keep the order the games first appeared in.
    """

    matchups = dedupe_matchups(records, include_unplayed=include_unplayed)
    logger.info("Classifying %d unique matchups", len(matchups))

    return NotableGames(
        highest=_top(matchups, key="combined_score", descending=True, limit=limit),
        lowest=_top(matchups, key="combined_score", descending=False, limit=limit),
        blowouts=_top(matchups, key="margin", descending=True, limit=limit),
        closest=_top(matchups, key="margin", descending=False, limit=limit),
    )
