"""Greedy lineup-efficiency calculation for a single team week.

The optimiser answers "how many points did this lineup leave on the bench?".
It proposes two kinds of improvement for every benched player who scored:

- a *swap* with an active player of the same natural position who scored less
- an *empty-slot fill* when no active player occupies that position at all

Candidates are sorted once by point difference and accepted greedily, each
bench player at most once and each active player displaced at most once.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Set, Tuple, Union

from league_stats.data import PlayerId, PlayerWeekEntry, RosterSlotRules

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SwapCandidate:
    bench_player: PlayerWeekEntry
    active_player: PlayerWeekEntry
    difference: float
    kind: str = "swap"


@dataclass(frozen=True, slots=True)
class EmptySlotCandidate:
    bench_player: PlayerWeekEntry
    position: str
    difference: float
    kind: str = "empty"


Improvement = Union[SwapCandidate, EmptySlotCandidate]


@dataclass(frozen=True, slots=True)
class OptimizationResult:
    actual_points: float
    optimal_points: float
    points_left_on_bench: float
    optimization_score: int
    accepted_improvements: Tuple[Improvement, ...] = ()


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""

    return int(math.floor(value + 0.5))


def efficiency_score(actual_points: float, optimal_points: float) -> int:
    """Percentage of the optimal score realised; 100 when nothing was possible."""

    if optimal_points > 0:
        return round_half_up(actual_points / optimal_points * 100)
    return 100


def _is_required_position(position: str, slot_rules: Optional[RosterSlotRules]) -> bool:
    if slot_rules is None:
        return True
    return slot_rules.count(position) > 0


def find_improvements(
    roster: Sequence[PlayerWeekEntry],
    slot_rules: Optional[RosterSlotRules] = None,
) -> List[Improvement]:
    """List every candidate improvement, in discovery order (unsorted)."""

    active = [p for p in roster if p.is_active]
    benched = [p for p in roster if p.is_benched]

    candidates: List[Improvement] = []
    empty_positions_seen: Set[str] = set()

    for bench_player in benched:
        bench_points = bench_player.points
        if bench_points <= 0:
            continue

        position = bench_player.natural_position
        same_position_active = [p for p in active if p.natural_position == position]

        for active_player in same_position_active:
            if bench_points > active_player.points:
                candidates.append(
                    SwapCandidate(
                        bench_player=bench_player,
                        active_player=active_player,
                        difference=bench_points - active_player.points,
                    )
                )

        # One empty-slot candidate per wholly unfilled position.
        if (
            not same_position_active
            and position not in empty_positions_seen
            and _is_required_position(position, slot_rules)
        ):
            candidates.append(EmptySlotCandidate(bench_player=bench_player, position=position, difference=bench_points))
            empty_positions_seen.add(position)

    return candidates


def select_improvements(candidates: Sequence[Improvement]) -> List[Improvement]:
    """Greedily accept candidates, largest difference first.

    Python's sort is stable, so equal differences keep discovery order.
    """

    ordered = sorted(candidates, key=lambda c: c.difference, reverse=True)

    accepted: List[Improvement] = []
    used_bench: Set[PlayerId] = set()
    used_active: Set[PlayerId] = set()

    for c in ordered:
        if c.bench_player.player_id in used_bench:
            continue
        if isinstance(c, SwapCandidate):
            if c.active_player.player_id in used_active:
                continue
            used_active.add(c.active_player.player_id)
        accepted.append(c)
        used_bench.add(c.bench_player.player_id)

    return accepted


def optimize_roster(
    roster: Sequence[PlayerWeekEntry],
    slot_rules: Optional[RosterSlotRules] = None,
) -> OptimizationResult:
    """Compute the realised vs best-possible score for one team week.

    Parameters
    ----------
    roster:
        Every player on the team that week, starters and bench.
    slot_rules:
        The season's rule set. When given, positions with no configured slot
        are never treated as an unfilled required slot.
    """

    actual_points = sum(p.points for p in roster if p.is_active)

    accepted = select_improvements(find_improvements(roster, slot_rules))
    left_on_bench = sum(c.difference for c in accepted)
    optimal_points = actual_points + left_on_bench

    for c in accepted:
        if isinstance(c, SwapCandidate):
            logger.debug(
                "Improvement: %s (%s) %.2f pts over %s %.2f pts, difference %.2f",
                c.bench_player.name,
                c.bench_player.position,
                c.bench_player.points,
                c.active_player.name,
                c.active_player.points,
                c.difference,
            )
        else:
            logger.debug(
                "Improvement: %s (%s) %.2f pts into empty %s slot",
                c.bench_player.name,
                c.bench_player.position,
                c.bench_player.points,
                c.position,
            )

    return OptimizationResult(
        actual_points=actual_points,
        optimal_points=optimal_points,
        points_left_on_bench=left_on_bench,
        optimization_score=efficiency_score(actual_points, optimal_points),
        accepted_improvements=tuple(accepted),
    )


def projected_points(roster: Sequence[PlayerWeekEntry]) -> float:
    """Sum of projected points over the active lineup."""

    return sum(float(p.projected_points or 0.0) for p in roster if p.is_active)


def fp_plus(actual: float, projected: Optional[float]) -> int:
    """Actual score as a percentage of projection (0 when there is no projection)."""

    if not projected:
        return 0
    return round_half_up(actual / projected * 100)
