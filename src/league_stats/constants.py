"""Project-wide constants for :mod:`league_stats`.

Literal slot codes, fallback roster rules and presentation limits live here so
the aggregation modules never hard-code them.
"""

from __future__ import annotations

from typing import Mapping

# Slot codes that do not count toward a team's score.
BENCH_SLOT: str = "BE"
INJURED_RESERVE_SLOT: str = "IR"
INACTIVE_SLOTS: frozenset[str] = frozenset({BENCH_SLOT, INJURED_RESERVE_SLOT})

FLEX_SLOT: str = "FLEX"
FLEX_ELIGIBLE_KEY: str = "FLEX Eligible"
DEFAULT_FLEX_ELIGIBLE: tuple[str, ...] = ("RB", "WR", "TE")

# Keys in a roster rule's Slots mapping that are not starting positions.
NON_POSITION_SLOT_KEYS: frozenset[str] = frozenset({FLEX_SLOT, FLEX_ELIGIBLE_KEY, BENCH_SLOT, INJURED_RESERVE_SLOT})

# Position synonyms collapse to one bucket.
POSITION_SYNONYMS: Mapping[str, str] = {
    "D/ST": "DEF",
    "DST": "DEF",
    "DEF": "DEF",
}

# Used when a rules table has neither a matching season nor a "default" row.
DEFAULT_ROSTER_SLOTS: Mapping[str, int] = {
    "QB": 1,
    "RB": 2,
    "WR": 2,
    "TE": 1,
    "FLEX": 2,
    "D/ST": 1,
    "K": 1,
    "P": 1,
    "HC": 1,
}

# All-Pro position limits when no rules were loaded at all.
FALLBACK_POSITION_LIMITS: Mapping[str, int] = {
    "QB": 1,
    "RB": 2,
    "WR": 2,
    "TE": 1,
    "K": 1,
    "DEF": 1,
}

BYE_OPPONENT: str = "Bye"
REGULAR_SEASON_PERIOD: str = "Regular"
ALL_TIME: str = "All Time"

NOTABLE_GAMES_LIMIT: int = 6
RIVALRIES_LIMIT: int = 6
BLOWOUT_MARGIN: float = 50.0
CLOSE_GAME_MARGIN: float = 5.0
HIGH_SCORE_THRESHOLD: float = 200.0

# Weeks probed when a season's roster files are discovered.
MAX_REGULAR_WEEK: int = 17

# Record book.
CHAMPIONSHIP_PERIOD: str = "Championship"
CHUMPIONSHIP_PERIOD: str = "Chumpionship"
RECORD_BOOK_PLACES: int = 3
HOT_STREAK_SCORE: float = 150.0
COLD_STREAK_SCORE: float = 100.0
MIN_GAMES_OVERALL_WIN_PCT: int = 20
MIN_GAMES_SEASON_WIN_PCT: int = 10
MIN_ROSTER_WEEKS_OVERALL: int = 8
MIN_ROSTER_WEEKS_SEASON: int = 2
