"""League record book.

Career, single-season, weekly-finish, championship and streak records are
folded from the league score table. Unique-player records come from the weekly
roster files. Every category keeps its top three holders plus anyone tied
with third place.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from league_stats.constants import (
    CHAMPIONSHIP_PERIOD,
    CHUMPIONSHIP_PERIOD,
    COLD_STREAK_SCORE,
    HIGH_SCORE_THRESHOLD,
    HOT_STREAK_SCORE,
    MIN_GAMES_OVERALL_WIN_PCT,
    MIN_GAMES_SEASON_WIN_PCT,
    MIN_ROSTER_WEEKS_OVERALL,
    MIN_ROSTER_WEEKS_SEASON,
    RECORD_BOOK_PLACES,
)
from league_stats.data import RosterWeek, SeasonGameRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RecordEntry:
    holder: str
    value: float
    season: Optional[int] = None
    week: Optional[int] = None
    opponent: Optional[str] = None
    game_id: Optional[str] = None


@dataclass(frozen=True, slots=True)
class RecordCategory:
    """One record: ranked leaders, then everyone tied with the last leader."""

    name: str
    leaders: Tuple[RecordEntry, ...]
    tied: Tuple[RecordEntry, ...] = ()

    @property
    def holder(self) -> Optional[RecordEntry]:
        return self.leaders[0] if self.leaders else None


@dataclass(frozen=True, slots=True)
class HighScoreGame:
    game_id: str
    season: int
    week: int
    team: str
    score: float
    opponent: str
    opponent_score: float
    season_period: str
    result: str


@dataclass(frozen=True, slots=True)
class RecordBook:
    league: Tuple[RecordCategory, ...]
    single_game: Tuple[RecordCategory, ...]
    players: Tuple[RecordCategory, ...]
    high_score_games: Tuple[HighScoreGame, ...]

    def category(self, name: str) -> RecordCategory:
        for cat in self.league + self.single_game + self.players:
            if cat.name == name:
                return cat
        raise KeyError(f"Unknown record category {name!r}")


@dataclass(slots=True)
class TeamRecordTally:
    """Running totals for one team, fed games in chronological order."""

    team: str
    wins: int = 0
    losses: int = 0
    weekly_top: int = 0
    weekly_top3: int = 0
    weekly_worst: int = 0
    weekly_bottom3: int = 0
    championships: int = 0
    chumpionships: int = 0
    championship_appearances: int = 0
    chumpionship_appearances: int = 0
    longest_win_streak: int = 0
    longest_loss_streak: int = 0
    longest_hot_streak: int = 0
    longest_cold_streak: int = 0
    win_run: int = 0
    loss_run: int = 0
    hot_run: int = 0
    cold_run: int = 0

    @property
    def games(self) -> int:
        return self.wins + self.losses

    @property
    def win_pct(self) -> float:
        return self.wins / self.games if self.games else 0.0

    def add_game(self, rec: SeasonGameRecord) -> None:
        won = rec.team_score > rec.opponent_score
        if won:
            self.wins += 1
            self.win_run += 1
            self.loss_run = 0
            self.longest_win_streak = max(self.longest_win_streak, self.win_run)
        else:
            self.losses += 1
            self.loss_run += 1
            self.win_run = 0
            self.longest_loss_streak = max(self.longest_loss_streak, self.loss_run)

        self.hot_run = self.hot_run + 1 if rec.team_score >= HOT_STREAK_SCORE else 0
        self.longest_hot_streak = max(self.longest_hot_streak, self.hot_run)
        self.cold_run = self.cold_run + 1 if rec.team_score < COLD_STREAK_SCORE else 0
        self.longest_cold_streak = max(self.longest_cold_streak, self.cold_run)

        if rec.season_period == CHAMPIONSHIP_PERIOD:
            self.championship_appearances += 1
            if won:
                self.championships += 1
        elif rec.season_period == CHUMPIONSHIP_PERIOD:
            self.chumpionship_appearances += 1
            if not won:
                self.chumpionships += 1


def rank_entries(
    name: str,
    entries: Iterable[RecordEntry],
    *,
    descending: bool = True,
    places: int = RECORD_BOOK_PLACES,
) -> RecordCategory:
    """Stable-sort ``entries`` by value and keep the top ``places`` plus ties."""

    ordered = sorted(entries, key=lambda e: e.value, reverse=descending)
    leaders = tuple(ordered[:places])
    tied: Tuple[RecordEntry, ...] = ()
    if len(leaders) == places:
        cutoff = leaders[-1].value
        tied = tuple(e for e in ordered[places:] if e.value == cutoff)
    return RecordCategory(name=name, leaders=leaders, tied=tied)


def scored_games(records: Iterable[SeasonGameRecord]) -> List[SeasonGameRecord]:
    """Rows with a real opponent and both scores posted, oldest first."""

    games = [r for r in records if not r.is_bye and r.team_score > 0 and r.opponent_score > 0]
    games.sort(key=lambda r: (r.season, r.week))
    return games


def tally_team_records(records: Iterable[SeasonGameRecord]) -> Dict[str, TeamRecordTally]:
    games = scored_games(records)
    tallies: Dict[str, TeamRecordTally] = {}
    weekly: Dict[Tuple[int, int], List[SeasonGameRecord]] = {}

    for rec in games:
        tallies.setdefault(rec.team, TeamRecordTally(team=rec.team)).add_game(rec)
        weekly.setdefault((rec.season, rec.week), []).append(rec)

    for week_games in weekly.values():
        ordered = sorted(week_games, key=lambda r: r.team_score, reverse=True)
        tallies[ordered[0].team].weekly_top += 1
        tallies[ordered[-1].team].weekly_worst += 1
        for rec in ordered[:3]:
            tallies[rec.team].weekly_top3 += 1
        for rec in ordered[-3:]:
            tallies[rec.team].weekly_bottom3 += 1

    return tallies


def tally_season_records(records: Iterable[SeasonGameRecord]) -> Dict[Tuple[int, str], TeamRecordTally]:
    tallies: Dict[Tuple[int, str], TeamRecordTally] = {}
    for rec in scored_games(records):
        tallies.setdefault((rec.season, rec.team), TeamRecordTally(team=rec.team)).add_game(rec)
    return tallies


def league_records(
    records: Sequence[SeasonGameRecord],
    *,
    min_games_overall: int = MIN_GAMES_OVERALL_WIN_PCT,
    min_games_season: int = MIN_GAMES_SEASON_WIN_PCT,
) -> Tuple[RecordCategory, ...]:
    """Win/loss, weekly-finish, championship and streak records."""

    tallies = tally_team_records(records)
    seasons = tally_season_records(records)

    def career(attr: str) -> List[RecordEntry]:
        return [RecordEntry(holder=t.team, value=getattr(t, attr)) for t in tallies.values()]

    def single_season(attr: str) -> List[RecordEntry]:
        return [RecordEntry(holder=t.team, value=getattr(t, attr), season=s) for (s, _), t in seasons.items()]

    career_pct = [
        RecordEntry(holder=t.team, value=round(t.win_pct, 3)) for t in tallies.values() if t.games >= min_games_overall
    ]
    season_pct = [
        RecordEntry(holder=t.team, value=round(t.win_pct, 3), season=s)
        for (s, _), t in seasons.items()
        if t.games >= min_games_season
    ]

    return (
        rank_entries("most_wins_overall", career("wins")),
        rank_entries("most_wins_season", single_season("wins")),
        rank_entries("most_losses_overall", career("losses")),
        rank_entries("most_losses_season", single_season("losses")),
        rank_entries("best_win_pct_overall", career_pct),
        rank_entries("best_win_pct_season", season_pct),
        rank_entries("worst_win_pct_overall", career_pct, descending=False),
        rank_entries("worst_win_pct_season", season_pct, descending=False),
        rank_entries("most_weekly_top_scores", career("weekly_top")),
        rank_entries("most_weekly_top3_scores", career("weekly_top3")),
        rank_entries("most_weekly_worst_scores", career("weekly_worst")),
        rank_entries("most_weekly_bottom3_scores", career("weekly_bottom3")),
        rank_entries("most_championships", career("championships")),
        rank_entries("most_chumpionships", career("chumpionships")),
        rank_entries("most_championship_appearances", career("championship_appearances")),
        rank_entries("most_chumpionship_appearances", career("chumpionship_appearances")),
        rank_entries("longest_win_streak", career("longest_win_streak")),
        rank_entries("longest_losing_streak", career("longest_loss_streak")),
        rank_entries("longest_150_plus_streak", career("longest_hot_streak")),
        rank_entries("longest_under_100_streak", career("longest_cold_streak")),
    )


def single_game_records(records: Sequence[SeasonGameRecord]) -> Tuple[RecordCategory, ...]:
    """Highest and lowest team scores, largest blowouts and closest games."""

    games = scored_games(records)
    scores = [
        RecordEntry(
            holder=r.team,
            value=r.team_score,
            season=r.season,
            week=r.week,
            opponent=r.opponent,
            game_id=r.game_id,
        )
        for r in games
    ]

    seen: Set[Tuple[str, int, int]] = set()
    margins: List[RecordEntry] = []
    for r in games:
        key = (r.game_id, r.week, r.season)
        if key in seen:
            continue
        seen.add(key)
        winner, loser = (r.team, r.opponent) if r.team_score > r.opponent_score else (r.opponent, r.team)
        margins.append(
            RecordEntry(
                holder=winner,
                value=round(abs(r.team_score - r.opponent_score), 2),
                season=r.season,
                week=r.week,
                opponent=loser,
                game_id=r.game_id,
            )
        )

    return (
        rank_entries("highest_score", scores),
        rank_entries("lowest_score", scores, descending=False),
        rank_entries("largest_blowout", margins),
        # A dead heat is not a close game.
        rank_entries("closest_game", [m for m in margins if m.value > 0], descending=False),
    )


def player_records(
    weekly_rosters: Iterable[RosterWeek],
    *,
    min_weeks_overall: int = MIN_ROSTER_WEEKS_OVERALL,
    min_weeks_season: int = MIN_ROSTER_WEEKS_SEASON,
) -> Tuple[RecordCategory, ...]:
    """Most and fewest distinct players rostered, overall and in one season.

    Teams are keyed by owner (team name when the owner is blank). A team needs
    ``min_weeks_overall`` roster weeks to qualify overall and
    ``min_weeks_season`` in a season to qualify for that season.
    """

    overall: Dict[str, Set[str]] = {}
    overall_weeks: Dict[str, int] = {}
    by_season: Dict[Tuple[str, int], Set[str]] = {}
    season_weeks: Dict[Tuple[str, int], int] = {}

    for roster_week in weekly_rosters:
        for team in roster_week.teams:
            label = team.owner or team.team_name
            if not label:
                logger.debug("Skipping unnamed team %s in %s week %s", team.team_id, roster_week.season, roster_week.week)
                continue

            names = {p.name.strip() for p in team.roster if p.name and p.name.strip()}
            key = (label, roster_week.season)
            overall.setdefault(label, set()).update(names)
            overall_weeks[label] = overall_weeks.get(label, 0) + 1
            by_season.setdefault(key, set()).update(names)
            season_weeks[key] = season_weeks.get(key, 0) + 1

    overall_entries = [
        RecordEntry(holder=label, value=len(names))
        for label, names in overall.items()
        if overall_weeks[label] >= min_weeks_overall
    ]
    season_entries = [
        RecordEntry(holder=label, value=len(names), season=season)
        for (label, season), names in by_season.items()
        if season_weeks[(label, season)] >= min_weeks_season
    ]

    return (
        rank_entries("most_unique_players_overall", overall_entries),
        rank_entries("most_unique_players_season", season_entries),
        rank_entries("fewest_unique_players_overall", [e for e in overall_entries if e.value > 0], descending=False),
        rank_entries("fewest_unique_players_season", [e for e in season_entries if e.value > 0], descending=False),
    )


def high_score_games(
    records: Iterable[SeasonGameRecord],
    *,
    threshold: float = HIGH_SCORE_THRESHOLD,
) -> List[HighScoreGame]:
    """Every team score at or above ``threshold``, highest first."""

    games = [
        HighScoreGame(
            game_id=r.game_id,
            season=r.season,
            week=r.week,
            team=r.team,
            score=r.team_score,
            opponent=r.opponent,
            opponent_score=r.opponent_score,
            season_period=r.season_period,
            result="W" if r.team_score > r.opponent_score else "L",
        )
        for r in records
        if r.team_score >= threshold
    ]
    games.sort(key=lambda g: g.score, reverse=True)
    return games


def build_record_book(
    records: Iterable[SeasonGameRecord],
    weekly_rosters: Iterable[RosterWeek] = (),
) -> RecordBook:
    records = list(records)
    logger.info("Building record book from %d score rows", len(records))
    return RecordBook(
        league=league_records(records),
        single_game=single_game_records(records),
        players=player_records(weekly_rosters),
        high_score_games=tuple(high_score_games(records)),
    )
