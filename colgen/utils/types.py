from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List


RULE_UNIQUE = "Unique"
RULE_MAP = "Map"
RULE_MAPP = "MapP"
RULE_INDEX = "Index"
RULE_GROUP = "Group"
FIELD_ID = "ID"


def is_map_rule(name: str) -> bool:
    return name.lower() in {RULE_MAP.lower(), RULE_MAPP.lower()}


@dataclass
class CustomRule:
    name: str = ""
    field: str = ""
    arg: str = ""


@dataclass
class Rule:
    entity_name: str
    base_gen: bool = False
    use_list_suffix: bool = False
    custom_rules: List[CustomRule] = field(default_factory=list)


@dataclass(frozen=True)
class Entity:
    name: str
    list_name: str


@dataclass
class EntityField:
    name: str
    type: str
    full_type: str
    is_exported: bool


def field_map(fields: List[EntityField]) -> Dict[str, str]:
    result: Dict[str, str] = {}
    for item in fields:
        result[item.name] = item.type
    return result


@dataclass
class StructField:
    name: str
    type: str
    tag: str = ""


@dataclass
class ReplaceRule:
    find: str
    cmd: str = ""
    entity: str = ""
    arg: str = ""
    is_full: bool = False
    with_json: bool = False
    fields: List[StructField] = field(default_factory=list)
    replace: str = ""


@dataclass
class DirectiveLines:
    package_name: str = ""
    lines: List[str] = field(default_factory=list)
    injections: List[str] = field(default_factory=list)
    assistant: List[str] = field(default_factory=list)


@dataclass
class RunReport:
    source_path: str
    output_path: str = ""
    rules: List[Rule] = field(default_factory=list)
    replacements: List[ReplaceRule] = field(default_factory=list)
    formatted: bool = False
    warnings: List[str] = field(default_factory=list)
