from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from typing import Any, Dict, List, Union


def to_json_dict(obj: Any) -> Union[Dict[str, Any], List[Any]]:
    """Convert a report dataclass (or a list of them) to JSON-serialisable data."""

    if isinstance(obj, (list, tuple)):
        return [to_json_dict(o) for o in obj]
    if not is_dataclass(obj) or isinstance(obj, type):
        raise TypeError(f"Expected a dataclass instance, got {type(obj).__name__}")
    return asdict(obj)


def dumps_pretty(obj: Any) -> str:
    return json.dumps(to_json_dict(obj), indent=2, sort_keys=False)
