"""Per-session memoisation of loaded league documents."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from league_stats.config import SiteConfig
from league_stats.data import RosterRulesTable, RosterSlotRules, RosterWeek, SeasonGameRecord
from league_stats.sources import LeagueDataSource

logger = logging.getLogger(__name__)


@dataclass
class LeagueContext:
    """Loads each document at most once for the lifetime of the context.

    Create one per request or CLI run; nothing is shared between contexts.
    """

    source: LeagueDataSource
    config: SiteConfig = field(default_factory=SiteConfig)

    _rules: Optional[RosterRulesTable] = field(default=None, init=False, repr=False)
    _scores: Optional[Tuple[SeasonGameRecord, ...]] = field(default=None, init=False, repr=False)
    _rosters: Dict[int, Tuple[RosterWeek, ...]] = field(default_factory=dict, init=False, repr=False)

    @classmethod
    def from_config(cls, config: SiteConfig) -> "LeagueContext":
        source = LeagueDataSource(
            config.data_root,
            timeout_seconds=config.request_timeout_seconds,
            max_workers=config.max_workers,
        )
        return cls(source=source, config=config)

    @property
    def rules(self) -> RosterRulesTable:
        if self._rules is None:
            self._rules = self.source.roster_rules()
        return self._rules

    def rules_for(self, season: Optional[int]) -> RosterSlotRules:
        """Rules for ``season``; ``None`` means the most recent season's rules."""

        if season is None:
            return self.rules.latest()
        return self.rules.for_season(season)

    @property
    def scores(self) -> Tuple[SeasonGameRecord, ...]:
        if self._scores is None:
            self._scores = tuple(self.source.league_scores())
            logger.info("Loaded %d league score rows", len(self._scores))
        return self._scores

    @property
    def seasons(self) -> List[int]:
        return sorted({r.season for r in self.scores})

    def latest_season(self) -> Optional[int]:
        seasons = self.seasons
        return seasons[-1] if seasons else None

    def season_rosters(self, season: int) -> Tuple[RosterWeek, ...]:
        if season not in self._rosters:
            weeks = range(1, self.config.max_week + 1)
            self._rosters[season] = tuple(self.source.season_rosters(season, weeks))
        return self._rosters[season]

    def all_rosters(self) -> List[RosterWeek]:
        out: List[RosterWeek] = []
        for season in self.seasons:
            out.extend(self.season_rosters(season))
        return out
