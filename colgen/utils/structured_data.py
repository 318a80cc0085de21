from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

JSON_SUFFIXES = {".json"}


def load_structured_file(path: Path) -> Any:
    """Read a JSON or YAML document, picking the parser by file suffix."""
    raw = path.read_text(encoding="utf-8")
    if path.suffix.lower() in JSON_SUFFIXES:
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise RuntimeError(f"Invalid JSON in {path}: line {exc.lineno}: {exc.msg}") from exc

    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"Invalid YAML in {path}: {exc}") from exc


def dump_structured_data(data: Any, as_yaml: bool = True) -> str:
    if as_yaml:
        return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)
    return json.dumps(data, indent=2)
