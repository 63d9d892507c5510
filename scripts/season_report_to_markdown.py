from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, List, Mapping, Optional

from league_stats.markdown import season_report_to_markdown


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Generate a markdown report from a saved season_report.json")
    parser.add_argument("report_json", type=Path, help="Path to season_report.json")
    parser.add_argument("--out", type=Path, default=None, help="Optional output markdown path")

    args = parser.parse_args(argv)

    report: Mapping[str, Any] = json.loads(args.report_json.read_text(encoding="utf-8-sig"))
    md = season_report_to_markdown(report)

    if args.out is None:
        print(md)
    else:
        args.out.write_text(md, encoding="utf-8")


if __name__ == "__main__":
    main()
