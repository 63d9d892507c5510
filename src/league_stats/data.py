"""Domain data model for the league statistics engine.

This module is intentionally *pure*: it defines the records shared by the
optimiser and the aggregators, with no dependency on input file formats.

JSON parsing and dataset construction live in :mod:`league_stats.io`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Mapping, Optional, Sequence, Tuple, Union

from league_stats.constants import (
    BYE_OPPONENT,
    DEFAULT_FLEX_ELIGIBLE,
    DEFAULT_ROSTER_SLOTS,
    FLEX_SLOT,
    INACTIVE_SLOTS,
    NON_POSITION_SLOT_KEYS,
    POSITION_SYNONYMS,
    REGULAR_SEASON_PERIOD,
)

PlayerId = Union[int, str]


def normalize_position(code: str | None) -> str:
    """Upper-case a position code and collapse synonyms (``D/ST`` -> ``DEF``)."""

    if not code:
        return ""
    v = str(code).strip().upper()
    return POSITION_SYNONYMS.get(v, v)


@dataclass(frozen=True, slots=True)
class RosterSlotRules:
    """Starting-slot counts for one season (or the ``"default"`` row)."""

    season: Optional[int]
    slots: Mapping[str, int]
    flex_eligible: FrozenSet[str] = frozenset(DEFAULT_FLEX_ELIGIBLE)

    def __post_init__(self) -> None:
        for slot, count in self.slots.items():
            if count < 0:
                raise ValueError(f"RosterSlotRules.slots[{slot}] must be >= 0")

    def count(self, position: str) -> int:
        """Configured slot count for ``position`` (synonyms honoured), 0 if absent."""

        wanted = normalize_position(position)
        total = 0
        for slot, n in self.slots.items():
            if normalize_position(slot) == wanted:
                total += int(n)
        return total

    def position_limits(self) -> Dict[str, int]:
        """Natural positions and their counts, excluding FLEX/bench/IR keys."""

        limits: Dict[str, int] = {}
        for slot, n in self.slots.items():
            if slot in NON_POSITION_SLOT_KEYS:
                continue
            pos = normalize_position(slot)
            limits[pos] = limits.get(pos, 0) + int(n)
        return limits

    def lineup_slots(self) -> Dict[str, int]:
        """All starting slots with a positive count, FLEX included."""

        slots = self.position_limits()
        flex = int(self.slots.get(FLEX_SLOT, 0))
        if flex:
            slots[FLEX_SLOT] = flex
        return {k: v for k, v in slots.items() if v > 0}

    def is_flex_eligible(self, position: str) -> bool:
        return normalize_position(position) in {normalize_position(p) for p in self.flex_eligible}


DEFAULT_RULES = RosterSlotRules(season=None, slots=dict(DEFAULT_ROSTER_SLOTS))


@dataclass(frozen=True, slots=True)
class RosterRulesTable:
    """All roster rule sets loaded from ``roster_rules.json``."""

    rules: Tuple[RosterSlotRules, ...] = ()

    @property
    def seasons(self) -> Sequence[int]:
        return tuple(sorted(r.season for r in self.rules if r.season is not None))

    def _default_row(self) -> Optional[RosterSlotRules]:
        for r in self.rules:
            if r.season is None:
                return r
        return None

    def for_season(self, season: int | None) -> RosterSlotRules:
        """Select the rule set for ``season``.

        Exact season, else the nearest earlier season, else the table's
        ``"default"`` row, else :data:`DEFAULT_RULES`.
        """

        dated = [r for r in self.rules if r.season is not None]
        if season is not None:
            for r in dated:
                if r.season == season:
                    return r
            earlier = [r for r in dated if r.season is not None and r.season < season]
            if earlier:
                return max(earlier, key=lambda r: r.season or 0)
        return self._default_row() or DEFAULT_RULES

    def latest(self) -> RosterSlotRules:
        """Most recent season's rules (used for all-time views)."""

        dated = [r for r in self.rules if r.season is not None]
        if dated:
            return max(dated, key=lambda r: r.season or 0)
        return self._default_row() or DEFAULT_RULES


@dataclass(frozen=True, slots=True)
class PlayerWeekEntry:
    """One player's line on one team's roster for one week."""

    player_id: PlayerId
    name: str
    position: str
    pro_team: str = ""
    slot_position: str = ""
    projected_points: Optional[float] = None
    actual_points: Optional[float] = None

    @property
    def is_benched(self) -> bool:
        return self.slot_position.strip().upper() in INACTIVE_SLOTS

    @property
    def is_active(self) -> bool:
        return not self.is_benched

    @property
    def played(self) -> bool:
        return self.actual_points is not None

    @property
    def points(self) -> float:
        return float(self.actual_points) if self.actual_points is not None else 0.0

    @property
    def natural_position(self) -> str:
        return normalize_position(self.position)


@dataclass(frozen=True, slots=True)
class TeamWeek:
    """A team's complete roster for one week."""

    team_id: Optional[int]
    team_name: str
    owner: str
    roster: Tuple[PlayerWeekEntry, ...] = ()

    @property
    def active_players(self) -> Tuple[PlayerWeekEntry, ...]:
        return tuple(p for p in self.roster if p.is_active)

    @property
    def benched_players(self) -> Tuple[PlayerWeekEntry, ...]:
        return tuple(p for p in self.roster if p.is_benched)


@dataclass(frozen=True, slots=True)
class RosterWeek:
    """One weekly roster file: every team's roster for a season/week."""

    season: int
    week: int
    teams: Tuple[TeamWeek, ...] = ()

    def __post_init__(self) -> None:
        if self.week < 0:
            raise ValueError("RosterWeek.week must be >= 0")

    def find_team(self, name: str) -> Optional[TeamWeek]:
        """Find a team by owner or team name (case-insensitive)."""

        wanted = name.strip().lower()
        for team in self.teams:
            if team.owner.strip().lower() == wanted:
                return team
        for team in self.teams:
            if team.team_name.strip().lower() == wanted:
                return team
        return None


@dataclass(frozen=True, slots=True)
class SeasonGameRecord:
    """One row of league score data, from one participant's perspective."""

    game_id: str
    season: int
    week: int
    team: str
    opponent: str
    team_score: float
    opponent_score: float
    league_week: Optional[int] = None
    season_period: str = REGULAR_SEASON_PERIOD
    score_diff: Optional[float] = None
    week_score_rank: Optional[int] = None

    @property
    def is_bye(self) -> bool:
        return self.team == BYE_OPPONENT or self.opponent == BYE_OPPONENT

    @property
    def is_unplayed(self) -> bool:
        return self.team_score == 0 and self.opponent_score == 0

    @property
    def is_playoff(self) -> bool:
        return self.season_period not in (REGULAR_SEASON_PERIOD, BYE_OPPONENT)

    @property
    def margin(self) -> float:
        if self.score_diff is not None:
            return self.score_diff
        return self.team_score - self.opponent_score


@dataclass(frozen=True, slots=True)
class GameLogEntry:
    """One game from a single team's point of view."""

    season: int
    week: int
    season_period: str
    opponent: str
    team_score: float
    opponent_score: float
    score_diff: float
    result: str = field(default="")

    def __post_init__(self) -> None:
        if not self.result:
            object.__setattr__(self, "result", "W" if self.score_diff > 0 else "L")
        if self.result not in ("W", "L"):
            raise ValueError("GameLogEntry.result must be 'W' or 'L'")
