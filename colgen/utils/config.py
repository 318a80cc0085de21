from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Dict, List

from jsonschema import Draft202012Validator

from .structured_data import load_structured_file

CONFIG_FILE = "colgen.yaml"

DEFAULT_CONFIG: Dict[str, Any] = {
    "generator": {
        "list_suffix": False,
        "imports": [],
        "func_package": "",
        "output_suffix": "_colgen.go",
    },
    "formatter": {
        "enabled": True,
        "command": ["gofmt"],
    },
}

CONFIG_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "generator": {
            "type": "object",
            "properties": {
                "list_suffix": {"type": "boolean"},
                "imports": {"type": "array", "items": {"type": "string", "minLength": 1}},
                "func_package": {"type": "string"},
                "output_suffix": {"type": "string", "pattern": r"\.go$"},
            },
            "additionalProperties": False,
        },
        "formatter": {
            "type": "object",
            "properties": {
                "enabled": {"type": "boolean"},
                "command": {
                    "type": "array",
                    "items": {"type": "string"},
                    "minItems": 1,
                },
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": False,
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def validate_config(config: Dict[str, Any]) -> List[str]:
    validator = Draft202012Validator(CONFIG_SCHEMA)
    errors: List[str] = []
    for error in sorted(validator.iter_errors(config), key=lambda item: list(item.path)):
        field = ".".join(str(part) for part in error.path) or "<root>"
        errors.append(f"{field}: {error.message}")
    return errors


def load_config(config_path: Path = Path(CONFIG_FILE)) -> Dict[str, Any]:
    config = copy.deepcopy(DEFAULT_CONFIG)
    if config_path.exists():
        user_config = load_structured_file(config_path)
        if user_config is None:
            user_config = {}
        if not isinstance(user_config, dict):
            raise RuntimeError(f"Config file {config_path} must contain a mapping/object.")
        config = _deep_merge(config, user_config)

    errors = validate_config(config)
    if errors:
        raise RuntimeError(f"Invalid config {config_path}: " + "; ".join(errors))
    return config


def split_imports(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]
