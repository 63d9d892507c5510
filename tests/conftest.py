from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure repo root (scripts/*) and this directory (league_fixtures) are importable.
_TESTS_DIR = Path(__file__).resolve().parent
for _p in (_TESTS_DIR.parent, _TESTS_DIR):
    if str(_p) not in sys.path:
        sys.path.insert(0, str(_p))

from league_fixtures import LEAGUE_RULES, WEEK_1_ROSTERS, league_scores, write_json  # noqa: E402


@pytest.fixture
def league_data_dir(tmp_path: Path) -> Path:
    """A small on-disk league: rules, one season of scores and one week of rosters."""

    root = tmp_path / "data"
    write_json(root / "roster_rules.json", LEAGUE_RULES)
    write_json(root / "league_score_data.json", league_scores())
    write_json(root / "rosters" / "2023" / "week_1_rosters.json", WEEK_1_ROSTERS)
    return root
