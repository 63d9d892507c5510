from __future__ import annotations

import json
from pathlib import Path

import pytest

from league_stats.cli import main


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("LEAGUE_STATS_DATA_ROOT", "LEAGUE_STATS_LOG_LEVEL", "LEAGUE_STATS_TIMEOUT", "LEAGUE_STATS_MAX_WORKERS"):
        monkeypatch.delenv(name, raising=False)


def test_standings_json(league_data_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["--data-root", str(league_data_dir), "standings"])
    assert rc == 0

    rows = json.loads(capsys.readouterr().out)
    assert [r["team"] for r in rows] == ["Dave", "Alice", "Carol", "Bob"]
    assert rows[0]["wins"] == 2


def test_all_pro_markdown_marks_empty_slots(league_data_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["--data-root", str(league_data_dir), "--format", "markdown", "all-pro", "--season", "2023"])
    assert rc == 0

    out = capsys.readouterr().out
    assert "## All-Pro Teams (2023)" in out
    assert "| QB | Quade | Bob | 25 | 1 | 25 |" in out
    assert "| TE | _No player selected_ |" in out


def test_compare_json(league_data_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["--data-root", str(league_data_dir), "compare", "Alice", "Bob"])
    assert rc == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["head_to_head"]["owner1_wins"] == 1
    assert payload["playoff"]["never_met"] is True


def test_efficiency_json(league_data_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["--data-root", str(league_data_dir), "efficiency", "Alice", "--season", "2023", "--week", "1"])
    assert rc == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["optimization_score"] == 70
    assert [c["kind"] for c in payload["improvements"]] == ["empty", "swap"]


def test_notable_games_all_seasons(league_data_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["--data-root", str(league_data_dir), "notable-games", "--season", "all"])
    assert rc == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["season"] == "All Time"
    assert len(payload["games"]["highest"]) == 4


def test_rivalries_markdown(league_data_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["--data-root", str(league_data_dir), "--format", "markdown", "rivalries", "Alice"])
    assert rc == 0
    out = capsys.readouterr().out
    assert "| Bob | 1-0 | 100.0% |" in out


def test_unknown_team_returns_error(league_data_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["--data-root", str(league_data_dir), "efficiency", "Zed", "--season", "2023", "--week", "1"])
    assert rc == 1
    assert "Zed" in capsys.readouterr().err


def test_missing_score_data_returns_error(tmp_path: Path) -> None:
    assert main(["--data-root", str(tmp_path), "standings"]) == 1


def test_bad_config_returns_2(tmp_path: Path) -> None:
    p = tmp_path / "site_config.json"
    p.write_text(json.dumps({"nope": 1}), encoding="utf-8")
    assert main(["--config", str(p), "standings"]) == 2


def test_bad_season_argument_exits() -> None:
    with pytest.raises(SystemExit):
        main(["all-pro", "--season", "last year"])


def test_records_json_and_markdown(league_data_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["--data-root", str(league_data_dir), "records", "--season", "2023"])
    assert rc == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["season"] == "2023"
    single_game = {c["name"]: c for c in payload["records"]["single_game"]}
    assert single_game["highest_score"]["leaders"][0]["holder"] == "Dave"

    rc = main(["--data-root", str(league_data_dir), "--format", "markdown", "records"])
    assert rc == 0
    out = capsys.readouterr().out
    assert "## Record Book (All Time)" in out
    assert "| Most wins (career) | Dave | 2 |" in out
    assert "No 200+ point games found." in out
