"""Exact best-lineup model for one team week.

The greedy calculation in :mod:`league_stats.optimizer` proposes at most one
empty-slot fill per position, so a position with two unfilled slots is only
half counted. This module solves the true assignment problem with PuLP so the
gap can be reported alongside the greedy figure. It never changes the greedy
result.

Model
-----
    a[i, s] ∈ {0,1}          player i starts in slot s (only where eligible)
    max  Σ points[i] * a[i, s]
    s.t. Σ_s a[i, s] <= 1    each player fills at most one slot
         Σ_i a[i, s] <= n[s] each slot holds at most its configured count
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import pulp

from league_stats.constants import FLEX_SLOT
from league_stats.data import PlayerWeekEntry, RosterSlotRules
from league_stats.optimizer import OptimizationResult, efficiency_score, optimize_roster

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SlotAssignment:
    slot: str
    player_id: object
    player_name: str
    points: float


@dataclass(frozen=True, slots=True)
class LineupSolution:
    status: str
    optimal_points: float
    assignments: Tuple[SlotAssignment, ...] = ()


@dataclass(frozen=True, slots=True)
class LineupAudit:
    """Greedy result next to the exact optimum for the same roster."""

    greedy: OptimizationResult
    exact: LineupSolution
    exact_optimization_score: int
    under_reported_points: float

    @property
    def greedy_is_exact(self) -> bool:
        return self.under_reported_points <= 1e-6


def eligible_slots(player: PlayerWeekEntry, lineup_slots: Dict[str, int], slot_rules: RosterSlotRules) -> List[str]:
    """Lineup slots ``player`` may fill: their own position, plus FLEX if eligible."""

    slots: List[str] = []
    position = player.natural_position
    if position in lineup_slots:
        slots.append(position)
    if FLEX_SLOT in lineup_slots and slot_rules.is_flex_eligible(position):
        slots.append(FLEX_SLOT)
    return slots


def build_lineup_problem(
    roster: Sequence[PlayerWeekEntry],
    slot_rules: RosterSlotRules,
) -> tuple[pulp.LpProblem, Dict[Tuple[int, str], pulp.LpVariable]]:
    """Create the PuLP problem and its assignment variables.

    Variable keys are ``(roster_index, slot)``; players that scored nothing are
    left out since they can never raise the objective.
    """

    problem = pulp.LpProblem(name="best_lineup", sense=pulp.LpMaximize)
    lineup_slots = slot_rules.lineup_slots()

    assign: Dict[Tuple[int, str], pulp.LpVariable] = {}
    for i, player in enumerate(roster):
        if player.points <= 0:
            continue
        for slot in eligible_slots(player, lineup_slots, slot_rules):
            assign[(i, slot)] = pulp.LpVariable(f"assign_{i}_{slot.replace('/', '_')}", cat=pulp.LpBinary)

    problem += pulp.lpSum(roster[i].points * var for (i, _slot), var in assign.items())

    for i in {i for (i, _slot) in assign}:
        problem += (
            pulp.lpSum(var for (j, _slot), var in assign.items() if j == i) <= 1,
            f"one_slot_per_player_{i}",
        )

    for slot, count in lineup_slots.items():
        slot_vars = [var for (_i, s), var in assign.items() if s == slot]
        if slot_vars:
            problem += pulp.lpSum(slot_vars) <= count, f"slot_capacity_{slot.replace('/', '_')}"

    return problem, assign


def solve_optimal_lineup(
    roster: Sequence[PlayerWeekEntry],
    slot_rules: RosterSlotRules,
    *,
    enable_solver_output: bool = False,
) -> LineupSolution:
    """Solve for the highest-scoring legal lineup with CBC."""

    problem, assign = build_lineup_problem(roster, slot_rules)
    if not assign:
        return LineupSolution(status="Optimal", optimal_points=0.0)

    status_code = problem.solve(pulp.PULP_CBC_CMD(msg=enable_solver_output))
    status = pulp.LpStatus[status_code]

    assignments: List[SlotAssignment] = []
    for (i, slot), var in assign.items():
        val = pulp.value(var)
        if val is not None and val >= 1.0 - 1e-6:
            player = roster[i]
            assignments.append(
                SlotAssignment(slot=slot, player_id=player.player_id, player_name=player.name, points=player.points)
            )

    optimal = float(sum(a.points for a in assignments))
    logger.debug("Exact lineup solve: status=%s optimal=%.2f starters=%d", status, optimal, len(assignments))
    return LineupSolution(status=status, optimal_points=optimal, assignments=tuple(assignments))


def audit_lineup(
    roster: Sequence[PlayerWeekEntry],
    slot_rules: RosterSlotRules,
    *,
    greedy: Optional[OptimizationResult] = None,
    enable_solver_output: bool = False,
) -> LineupAudit:
    """Compare the greedy efficiency figure with the exact optimum.

    The exact optimum is floored at the greedy ``optimal_points`` because the
    greedy model lets any same-position swap through even when the season's
    rules would not seat that player (e.g. a position with no configured slot).
    """

    greedy = greedy or optimize_roster(roster, slot_rules)
    exact = solve_optimal_lineup(roster, slot_rules, enable_solver_output=enable_solver_output)

    ceiling = max(exact.optimal_points, greedy.optimal_points)
    under_reported = max(0.0, ceiling - greedy.optimal_points)
    if under_reported > 1e-6:
        logger.info(
            "Greedy lineup ceiling %.2f under-reports the exact optimum %.2f by %.2f",
            greedy.optimal_points,
            ceiling,
            under_reported,
        )

    return LineupAudit(
        greedy=greedy,
        exact=exact,
        exact_optimization_score=efficiency_score(greedy.actual_points, ceiling),
        under_reported_points=under_reported,
    )
