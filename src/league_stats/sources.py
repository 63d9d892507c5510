"""Where league documents come from.

A :class:`LeagueDataSource` reads the site's JSON documents either from a
local directory or from an HTTP base URL, using the same relative layout::

    roster_rules.json
    league_score_data.json
    rosters/<season>/week_<n>_rosters.json

A missing document is not an error: :meth:`LeagueDataSource.read_json`
returns ``None`` and callers decide. Only the league score file is
mandatory; everything built on top of it is meaningless without it.
"""

from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Iterable, List, Optional

import requests

from league_stats.constants import MAX_REGULAR_WEEK
from league_stats.data import RosterRulesTable, RosterWeek, SeasonGameRecord
from league_stats.io import parse_roster_rules, parse_roster_week, parse_score_rows

logger = logging.getLogger(__name__)

ROSTER_RULES_FILE = "roster_rules.json"
LEAGUE_SCORES_FILE = "league_score_data.json"


class DataRetrievalError(Exception):
    pass


def roster_week_path(season: int, week: int) -> str:
    return f"rosters/{season}/week_{week}_rosters.json"


class LeagueDataSource:
    """Reads league documents from a directory or a base URL."""

    def __init__(
        self,
        root: str | Path,
        *,
        timeout_seconds: float = 30,
        session: Optional[requests.Session] = None,
        max_workers: int = 8,
    ):
        root_text = str(root)
        self.is_remote = root_text.startswith(("http://", "https://"))
        self.root: str | Path = root_text.rstrip("/") if self.is_remote else Path(root)
        self.timeout_seconds = timeout_seconds
        self.session = session
        self.max_workers = max(1, int(max_workers))

    def __repr__(self) -> str:
        return f"LeagueDataSource(root={self.root!r})"

    def _get(self, url: str) -> requests.Response:
        if self.session is not None:
            return self.session.get(url, timeout=self.timeout_seconds)
        return requests.get(url, timeout=self.timeout_seconds)

    def _read_remote(self, relative: str) -> Optional[Any]:
        url = f"{self.root}/{relative.lstrip('/')}"
        try:
            resp = self._get(url)
        except requests.RequestException as e:
            raise DataRetrievalError(f"GET {url} failed: {e}") from e

        if resp.status_code == 404:
            logger.debug("Not found: %s", url)
            return None
        if not resp.ok:
            raise DataRetrievalError(f"GET {url} failed: {resp.status_code} {resp.text}")
        try:
            return resp.json()
        except ValueError as e:
            raise DataRetrievalError(f"GET {url} returned invalid JSON") from e

    def _read_local(self, relative: str) -> Optional[Any]:
        path = Path(self.root) / relative
        if not path.exists():
            logger.debug("Not found: %s", path)
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8-sig"))
        except (OSError, json.JSONDecodeError) as e:
            raise DataRetrievalError(f"Could not read {path}: {e}") from e

    def read_json(self, relative: str) -> Optional[Any]:
        """Parsed JSON for ``relative``, or ``None`` when the document does not exist.

        Raises :class:`DataRetrievalError` when the document exists but can't
        be read or decoded.
        """

        if self.is_remote:
            return self._read_remote(relative)
        return self._read_local(relative)

    def roster_rules(self) -> RosterRulesTable:
        raw = self.read_json(ROSTER_RULES_FILE)
        if raw is None:
            logger.warning("No %s found; using built-in roster defaults", ROSTER_RULES_FILE)
            return RosterRulesTable(rules=())
        return parse_roster_rules(raw)

    def league_scores(self) -> List[SeasonGameRecord]:
        raw = self.read_json(LEAGUE_SCORES_FILE)
        if raw is None:
            raise DataRetrievalError(f"League score data not found under {self.root}")
        try:
            return parse_score_rows(raw)
        except ValueError as e:
            raise DataRetrievalError(f"League score data under {self.root} is malformed: {e}") from e

    def roster_week(self, season: int, week: int) -> Optional[RosterWeek]:
        """One weekly roster file, or ``None`` if it is missing or unusable."""

        relative = roster_week_path(season, week)
        try:
            raw = self.read_json(relative)
        except DataRetrievalError as e:
            logger.warning("Skipping roster file %s: %s", relative, e)
            return None
        if raw is None:
            return None

        try:
            return parse_roster_week(raw, season=season, week=week)
        except ValueError as e:
            logger.warning("Skipping roster file %s: %s", relative, e)
            return None

    def season_rosters(
        self,
        season: int,
        weeks: Optional[Iterable[int]] = None,
        *,
        max_workers: Optional[int] = None,
    ) -> List[RosterWeek]:
        """Fetch every available roster week for ``season`` in parallel.

        Missing weeks are dropped. The result is ordered by week regardless of
        the order the fetches complete in.
        """

        week_list = sorted(set(weeks)) if weeks is not None else list(range(1, MAX_REGULAR_WEEK + 1))
        if not week_list:
            return []

        workers = min(max_workers or self.max_workers, len(week_list))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(lambda w: self.roster_week(season, w), week_list))

        found = sorted((r for r in results if r is not None), key=lambda r: r.week)
        logger.info("Loaded %d of %d roster weeks for season %d", len(found), len(week_list), season)
        return found
