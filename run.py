from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path

from league_stats.config import load_site_config
from league_stats.context import LeagueContext
from league_stats.main import build_season_report, configure_logging
from league_stats.markdown import season_report_to_markdown
from league_stats.report import dumps_pretty, to_json_dict


def main() -> None:
    repo_root = Path(__file__).resolve().parent
    data_dir = repo_root / "data"
    output_dir = repo_root / "output"
    output_dir.mkdir(parents=True, exist_ok=True)

    # Optional settings file.
    # site_config.json format:
    #   {"max_workers": 4, "notable_games_limit": 10}
    config_path = data_dir / "site_config.json"
    config = load_site_config(config_path if config_path.exists() else None)
    if config.data_root == "data":
        config = replace(config, data_root=str(data_dir))

    configure_logging(level=config.log_level_number)
    ctx = LeagueContext.from_config(config)

    report = build_season_report(ctx)

    out_path = output_dir / "season_report.json"
    out_path.write_text(dumps_pretty(report), encoding="utf-8")

    md_path = output_dir / "season_report.md"
    md_path.write_text(season_report_to_markdown(to_json_dict(report)), encoding="utf-8")

    print(json.dumps({"season": report.season, "json": str(out_path), "markdown": str(md_path)}, indent=2))


if __name__ == "__main__":
    main()
