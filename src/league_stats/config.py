"""Runtime settings.

Settings come from three layers, later ones winning:

1. the dataclass defaults below;
2. an optional JSON object file, e.g. ``data/site_config.json``::

       {"data_root": "https://example.com/data", "max_workers": 4}

3. ``LEAGUE_STATS_*`` environment variables.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional

from league_stats.constants import MAX_REGULAR_WEEK, NOTABLE_GAMES_LIMIT

logger = logging.getLogger(__name__)

ENV_DATA_ROOT = "LEAGUE_STATS_DATA_ROOT"
ENV_LOG_LEVEL = "LEAGUE_STATS_LOG_LEVEL"
ENV_TIMEOUT = "LEAGUE_STATS_TIMEOUT"
ENV_MAX_WORKERS = "LEAGUE_STATS_MAX_WORKERS"
ENV_SOLVER_OUTPUT = "LEAGUE_STATS_SOLVER_OUTPUT"


@dataclass(frozen=True, slots=True)
class SiteConfig:
    data_root: str = "data"
    request_timeout_seconds: float = 30.0
    max_workers: int = 8
    max_week: int = MAX_REGULAR_WEEK
    notable_games_limit: int = NOTABLE_GAMES_LIMIT
    log_level: str = "INFO"
    solver_output: bool = False

    def __post_init__(self) -> None:
        if self.request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be > 0")
        if self.max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        if self.max_week < 1:
            raise ValueError("max_week must be >= 1")
        if self.notable_games_limit < 1:
            raise ValueError("notable_games_limit must be >= 1")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Unknown log level {self.log_level!r}")

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level.upper())


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _from_mapping(base: SiteConfig, raw: Mapping[str, Any]) -> SiteConfig:
    known = set(SiteConfig.__dataclass_fields__)
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"Unknown config keys: {unknown}")
    return replace(base, **dict(raw))


def load_site_config(
    path: str | Path | None = None,
    env: Optional[Mapping[str, str]] = None,
) -> SiteConfig:
    """Build a :class:`SiteConfig` from defaults, an optional JSON file and the environment."""

    env = os.environ if env is None else env
    config = SiteConfig()

    if path is not None:
        path = Path(path)
        parsed = json.loads(path.read_text(encoding="utf-8-sig"))
        if not isinstance(parsed, dict):
            raise ValueError(f"{path} must contain a JSON object")
        config = _from_mapping(config, parsed)
        logger.debug("Loaded settings from %s", path)

    overrides: dict[str, Any] = {}
    if env.get(ENV_DATA_ROOT):
        overrides["data_root"] = env[ENV_DATA_ROOT]
    if env.get(ENV_LOG_LEVEL):
        overrides["log_level"] = env[ENV_LOG_LEVEL]
    try:
        if env.get(ENV_TIMEOUT):
            overrides["request_timeout_seconds"] = float(env[ENV_TIMEOUT])
        if env.get(ENV_MAX_WORKERS):
            overrides["max_workers"] = int(env[ENV_MAX_WORKERS])
    except ValueError as e:
        raise ValueError(f"Invalid numeric LEAGUE_STATS_* environment setting: {e}") from e
    if env.get(ENV_SOLVER_OUTPUT) is not None:
        overrides["solver_output"] = _parse_bool(env[ENV_SOLVER_OUTPUT])

    return replace(config, **overrides) if overrides else config
