"""I/O utilities for building the engine's domain objects.

This module owns:
- file format knowledge (the site's JSON documents)
- parsing, numeric normalisation and validation
- construction of domain objects from :mod:`league_stats.data`

Keeping this separate from :mod:`league_stats.data` means the optimiser and
aggregators never see missing-field ambiguity: every record that reaches them
has been normalised here.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional

from league_stats.constants import DEFAULT_FLEX_ELIGIBLE, FLEX_ELIGIBLE_KEY, REGULAR_SEASON_PERIOD
from league_stats.data import (
    PlayerWeekEntry,
    RosterRulesTable,
    RosterSlotRules,
    RosterWeek,
    SeasonGameRecord,
    TeamWeek,
)

logger = logging.getLogger(__name__)

# Keys every league score row must carry to be usable.
REQUIRED_SCORE_KEYS: tuple[str, ...] = ("Game ID", "Season", "Week", "Team", "Opponent")


def parse_float(value: Any) -> Optional[float]:
    """Parse a numeric field leniently.

    Accepts numbers and numeric strings (stray quotes are stripped). Returns
    ``None`` for ``None``, blanks, NaN and anything unparseable.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        f = float(value)
        return None if math.isnan(f) else f

    v = str(value).strip().replace('"', "").replace("'", "").replace(",", "")
    if v == "":
        return None
    try:
        f = float(v)
    except ValueError:
        return None
    return None if math.isnan(f) else f


def parse_int(value: Any) -> Optional[int]:
    f = parse_float(value)
    if f is None:
        return None
    return int(f)


def parse_flex_eligible(value: Any) -> frozenset[str]:
    """Parse ``"RB, WR, TE"`` into a set of position codes."""

    if not value:
        return frozenset(DEFAULT_FLEX_ELIGIBLE)
    if isinstance(value, str):
        parts = [p.strip().upper() for p in value.split(",")]
    else:
        parts = [str(p).strip().upper() for p in value]
    return frozenset(p for p in parts if p)


def parse_roster_rules(raw: Any) -> RosterRulesTable:
    """Build a :class:`~league_stats.data.RosterRulesTable` from parsed JSON.

    Expected format: a list of ``{"Season": 2023 | "default", "Slots": {...}}``.
    """

    if not isinstance(raw, list):
        raise ValueError("roster_rules.json must be a JSON list")

    rules: List[RosterSlotRules] = []
    for rec in raw:
        if not isinstance(rec, dict) or not isinstance(rec.get("Slots"), dict):
            logger.warning("Skipping roster rule without a Slots mapping: %r", rec)
            continue

        season_raw = rec.get("Season")
        if isinstance(season_raw, str) and season_raw.strip().lower() == "default":
            season = None
        else:
            season = parse_int(season_raw)
            if season is None:
                logger.warning("Skipping roster rule with unparseable Season: %r", season_raw)
                continue

        slots_raw: Mapping[str, Any] = rec["Slots"]
        slots: dict[str, int] = {}
        for key, count in slots_raw.items():
            if key == FLEX_ELIGIBLE_KEY:
                continue
            n = parse_int(count)
            if n is None:
                logger.warning("Ignoring non-numeric slot count %r for %s in season %s", count, key, season_raw)
                continue
            if n < 0:
                logger.warning("Ignoring negative slot count %r for %s in season %s", count, key, season_raw)
                continue
            slots[str(key)] = n

        rules.append(
            RosterSlotRules(
                season=season,
                slots=slots,
                flex_eligible=parse_flex_eligible(slots_raw.get(FLEX_ELIGIBLE_KEY)),
            )
        )

    return RosterRulesTable(rules=tuple(rules))


def load_roster_rules_from_json(path: str | Path) -> RosterRulesTable:
    """Load roster rules from ``roster_rules.json``."""

    path = Path(path)
    return parse_roster_rules(json.loads(path.read_text(encoding="utf-8-sig")))


def _parse_player(rec: Mapping[str, Any]) -> PlayerWeekEntry:
    return PlayerWeekEntry(
        player_id=rec["playerId"],
        name=str(rec.get("name") or ""),
        position=str(rec.get("position") or ""),
        pro_team=str(rec.get("proTeam") or ""),
        slot_position=str(rec.get("slotPosition") or ""),
        projected_points=parse_float(rec.get("projectedPoints")),
        actual_points=parse_float(rec.get("actualPoints")),
    )


def parse_team_week(rec: Mapping[str, Any]) -> TeamWeek:
    """Parse one ``teams[]`` entry of a weekly roster file."""

    roster: List[PlayerWeekEntry] = []
    for player_rec in rec.get("roster") or []:
        if not isinstance(player_rec, dict) or player_rec.get("playerId") is None:
            logger.warning("Skipping roster entry without playerId for team %r", rec.get("team_name"))
            continue
        roster.append(_parse_player(player_rec))

    return TeamWeek(
        team_id=parse_int(rec.get("team_id")),
        team_name=str(rec.get("team_name") or ""),
        owner=str(rec.get("owner") or ""),
        roster=tuple(roster),
    )


def parse_roster_week(raw: Any, *, season: int, week: int) -> RosterWeek:
    """Build a :class:`~league_stats.data.RosterWeek` from a parsed weekly roster file."""

    if not isinstance(raw, dict) or not isinstance(raw.get("teams"), list):
        raise ValueError(f"Weekly roster file for {season} week {week} must be an object with a 'teams' list")

    teams: List[TeamWeek] = []
    for rec in raw["teams"]:
        if not isinstance(rec, dict) or not isinstance(rec.get("roster"), list):
            logger.warning("Skipping team without a roster list in %s week %s", season, week)
            continue
        teams.append(parse_team_week(rec))

    return RosterWeek(season=season, week=week, teams=tuple(teams))


def load_roster_week_from_json(path: str | Path, *, season: int, week: int) -> RosterWeek:
    path = Path(path)
    return parse_roster_week(json.loads(path.read_text(encoding="utf-8-sig")), season=season, week=week)


def parse_score_row(row: Mapping[str, Any]) -> Optional[SeasonGameRecord]:
    """Parse one league score row; returns ``None`` (and logs) if it is malformed."""

    missing = [k for k in REQUIRED_SCORE_KEYS if row.get(k) in (None, "")]
    if missing:
        logger.warning("Skipping league score row missing %s: %r", missing, dict(row))
        return None

    season = parse_int(row.get("Season"))
    week = parse_int(row.get("Week"))
    if season is None or week is None:
        logger.warning("Skipping league score row with unparseable Season/Week: %r", dict(row))
        return None

    return SeasonGameRecord(
        game_id=str(row["Game ID"]),
        season=season,
        week=week,
        team=str(row["Team"]),
        opponent=str(row["Opponent"]),
        team_score=parse_float(row.get("Team Score")) or 0.0,
        opponent_score=parse_float(row.get("Opponent Score")) or 0.0,
        league_week=parse_int(row.get("League Week")),
        season_period=str(row.get("Season Period") or REGULAR_SEASON_PERIOD),
        score_diff=parse_float(row.get("Score Diff")),
        week_score_rank=parse_int(row.get("Score Rank on Week", row.get("Score Rank"))),
    )


def parse_score_rows(raw: Any) -> List[SeasonGameRecord]:
    """Parse ``league_score_data.json`` (a flat list of row objects)."""

    if not isinstance(raw, list):
        raise ValueError("league_score_data.json must be a JSON list")

    records: List[SeasonGameRecord] = []
    skipped = 0
    for row in raw:
        if not isinstance(row, dict):
            skipped += 1
            continue
        rec = parse_score_row(row)
        if rec is None:
            skipped += 1
            continue
        records.append(rec)

    if skipped:
        logger.info("Parsed %d league score rows (%d skipped)", len(records), skipped)
    return records


def load_league_scores_from_json(path: str | Path) -> List[SeasonGameRecord]:
    path = Path(path)
    return parse_score_rows(json.loads(path.read_text(encoding="utf-8-sig")))


def iter_team_names(records: Iterable[SeasonGameRecord]) -> List[str]:
    """Sorted distinct team names, excluding the Bye placeholder."""

    return sorted({r.team for r in records if not r.is_bye})
