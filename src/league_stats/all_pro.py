"""Season-long All-Pro team selection.

Player totals are folded across every weekly roster file for a season (or for
several seasons), grouped by normalised position, and the top ``3n`` players
at each position are split into first/second/third teams, where ``n`` is the
position's slot count for the season.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from league_stats.constants import FALLBACK_POSITION_LIMITS
from league_stats.data import PlayerId, RosterSlotRules, RosterWeek

logger = logging.getLogger(__name__)

TIERS: tuple[str, ...] = ("first", "second", "third")


@dataclass(frozen=True, slots=True)
class WeeklyPoints:
    season: int
    week: int
    points: float


@dataclass(slots=True)
class PlayerSeasonTotals:
    """Accumulated scoring for one player across the weeks seen."""

    player_id: PlayerId
    name: str
    position: str
    pro_team: str
    fantasy_team: str
    owner: str
    total_points: float = 0.0
    weeks_played: int = 0
    ppg: float = 0.0
    weekly_points: List[WeeklyPoints] = field(default_factory=list)

    def add_week(self, *, season: int, week: int, points: float) -> None:
        # Zero-point weeks (bye, injury) never count as a game played.
        if points > 0:
            self.total_points += points
            self.weeks_played += 1
            self.weekly_points.append(WeeklyPoints(season=season, week=week, points=points))
        self.ppg = self.total_points / self.weeks_played if self.weeks_played > 0 else 0.0


@dataclass(frozen=True, slots=True)
class AllProTeams:
    first: Tuple[PlayerSeasonTotals, ...]
    second: Tuple[PlayerSeasonTotals, ...]
    third: Tuple[PlayerSeasonTotals, ...]
    position_limits: Mapping[str, int]

    @property
    def is_empty(self) -> bool:
        return not (self.first or self.second or self.third)

    def team(self, tier: str) -> Tuple[PlayerSeasonTotals, ...]:
        if tier not in TIERS:
            raise KeyError(f"Unknown All-Pro tier {tier!r}")
        return getattr(self, tier)

    def slots(self, tier: str, position: str) -> List[Optional[PlayerSeasonTotals]]:
        """Players for one tier/position, padded with ``None`` to the slot count."""

        limit = int(self.position_limits.get(position, 0))
        chosen: List[Optional[PlayerSeasonTotals]] = [p for p in self.team(tier) if p.position == position]
        chosen.extend([None] * max(0, limit - len(chosen)))
        return chosen


def accumulate_player_totals(weekly_rosters: Iterable[RosterWeek]) -> Dict[PlayerId, PlayerSeasonTotals]:
    """Fold weekly roster files into per-player totals, keyed by player id.

    Entries without a position or without an actual score are ignored. The
    fantasy team/owner label follows the most recent appearance.
    """

    totals: Dict[PlayerId, PlayerSeasonTotals] = {}

    for roster_week in weekly_rosters:
        for team in roster_week.teams:
            for entry in team.roster:
                if not entry.position or entry.actual_points is None:
                    continue

                stats = totals.get(entry.player_id)
                if stats is None:
                    stats = PlayerSeasonTotals(
                        player_id=entry.player_id,
                        name=entry.name,
                        position=entry.natural_position,
                        pro_team=entry.pro_team,
                        fantasy_team=team.team_name,
                        owner=team.owner,
                    )
                    totals[entry.player_id] = stats

                stats.add_week(season=roster_week.season, week=roster_week.week, points=entry.points)

                if team.team_name:
                    stats.fantasy_team = team.team_name
                if team.owner:
                    stats.owner = team.owner

    logger.info("Accumulated totals for %d players", len(totals))
    return totals


def group_by_position(players: Iterable[PlayerSeasonTotals]) -> Dict[str, List[PlayerSeasonTotals]]:
    grouped: Dict[str, List[PlayerSeasonTotals]] = {}
    for p in players:
        grouped.setdefault(p.position, []).append(p)
    return grouped


def resolve_position_limits(slot_rules: Optional[RosterSlotRules]) -> Dict[str, int]:
    if slot_rules is None:
        return dict(FALLBACK_POSITION_LIMITS)
    return slot_rules.position_limits()


def split_into_tiers(
    players_by_position: Mapping[str, Sequence[PlayerSeasonTotals]],
    position_limits: Mapping[str, int],
) -> AllProTeams:
    """Rank each configured position by total points and deal out three teams."""

    first: List[PlayerSeasonTotals] = []
    second: List[PlayerSeasonTotals] = []
    third: List[PlayerSeasonTotals] = []

    for position, count in position_limits.items():
        candidates = players_by_position.get(position) or []
        if not candidates or count <= 0:
            logger.debug("No All-Pro candidates for position %s", position)
            continue

        ranked = sorted(candidates, key=lambda p: p.total_points, reverse=True)
        for index, player in enumerate(ranked[: count * 3]):
            if index < count:
                first.append(player)
            elif index < count * 2:
                second.append(player)
            else:
                third.append(player)

    return AllProTeams(
        first=tuple(first),
        second=tuple(second),
        third=tuple(third),
        position_limits=dict(position_limits),
    )


def select_all_pro(
    weekly_rosters: Iterable[RosterWeek],
    slot_rules: Optional[RosterSlotRules] = None,
) -> AllProTeams:
    """Select first/second/third All-Pro teams from a season of roster files.

    Positions missing from ``slot_rules`` are skipped; when no rules are
    supplied at all, :data:`~league_stats.constants.FALLBACK_POSITION_LIMITS`
    is used.
    """

    totals = accumulate_player_totals(weekly_rosters)
    scorers = [p for p in totals.values() if p.total_points > 0]
    logger.info("%d of %d players have positive total points", len(scorers), len(totals))

    return split_into_tiers(group_by_position(scorers), resolve_position_limits(slot_rules))
