"""Statistics for a long-running fantasy football league.

Inputs are the site's JSON documents (roster rules, per-week roster files and
the flat league score table). From them this package derives:

- lineup efficiency for a team week (:func:`optimize_roster`), with an exact
  PuLP cross-check (:func:`audit_lineup`);
- season or all-time All-Pro teams (:func:`select_all_pro`);
- notable games (:func:`classify_games`);
- rivalry and owner-vs-owner records (:func:`head_to_head`, :func:`compare_owners`);
- standings and per-team records (:func:`season_standings`, :func:`calculate_team_stats`);
- the league record book (:func:`build_record_book`).
"""

from .all_pro import AllProTeams, select_all_pro
from .context import LeagueContext
from .data import PlayerWeekEntry, RosterRulesTable, RosterSlotRules, RosterWeek, SeasonGameRecord, TeamWeek
from .formulation import audit_lineup, solve_optimal_lineup
from .notable_games import NotableGames, classify_games
from .optimizer import OptimizationResult, optimize_roster
from .records import RecordBook, build_record_book
from .rivalry import RivalrySummary, compare_owners, head_to_head, rivalries
from .sources import DataRetrievalError, LeagueDataSource
from .team_stats import calculate_team_stats, season_standings

__all__ = [
    "PlayerWeekEntry",
    "RosterRulesTable",
    "RosterSlotRules",
    "RosterWeek",
    "SeasonGameRecord",
    "TeamWeek",
    "OptimizationResult",
    "optimize_roster",
    "audit_lineup",
    "solve_optimal_lineup",
    "AllProTeams",
    "select_all_pro",
    "NotableGames",
    "classify_games",
    "RecordBook",
    "build_record_book",
    "RivalrySummary",
    "head_to_head",
    "rivalries",
    "compare_owners",
    "calculate_team_stats",
    "season_standings",
    "DataRetrievalError",
    "LeagueDataSource",
    "LeagueContext",
]
