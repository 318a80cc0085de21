from __future__ import annotations

import re
from typing import List, Tuple

from colgen.errors import ColgenError, MissingArgError, UnknownLineError
from colgen.utils.naming import is_identifier
from colgen.utils.types import (
    RULE_GROUP,
    RULE_INDEX,
    RULE_UNIQUE,
    CustomRule,
    Rule,
    is_map_rule,
)

from .merge import merge_rules, validate_rules


# `Index(db.User)` lookalike: name and argument.
NAME_ARG_RE = re.compile(r"^(\w+)\(([\w.]+)\)$")
NAME_RE = re.compile(r"^\w+$")


def _split_spec(spec: str) -> Tuple[str, str]:
    match = NAME_ARG_RE.match(spec)
    if match:
        return match.group(1), match.group(2)
    if NAME_RE.match(spec):
        return spec, ""
    raise UnknownLineError(repr(spec))


def parse_custom_spec(spec: str) -> CustomRule:
    name, arg = _split_spec(spec)

    # UniqueTagIDs, UniqueEpisodeID
    if name.startswith(RULE_UNIQUE):
        return CustomRule(name=RULE_UNIQUE, field=name[len(RULE_UNIQUE):])

    # MapP(db), Map(db.User), mapp(db), map(db)
    if is_map_rule(name):
        if not arg:
            raise MissingArgError(repr(spec))
        return CustomRule(name=name, arg=arg)

    # Index(UserID), Group(StatusID)
    if name in {RULE_INDEX, RULE_GROUP}:
        if not arg:
            raise MissingArgError(repr(spec))
        return CustomRule(name=name, field=arg)

    return CustomRule(field=name)


def parse_custom_rule(line: str) -> List[Rule]:
    """Parse `News:UniqueTagIDs,Map(db)` into a single custom Rule."""
    parts = line.split(":")
    if len(parts) != 2:
        raise UnknownLineError(repr(line))

    entity_name = parts[0].strip()
    if not is_identifier(entity_name):
        raise UnknownLineError(repr(parts[0]))

    rule = Rule(entity_name=entity_name)
    for spec in parts[1].split(","):
        rule.custom_rules.append(parse_custom_spec(spec.strip()))
    return [rule]


def parse_entities(line: str) -> List[Rule]:
    """Parse `News,Tag` into base Rules, one per entity."""
    rules: List[Rule] = []
    for item in line.split(","):
        name = item.strip()
        if not is_identifier(name):
            raise UnknownLineError(repr(item))
        rules.append(Rule(entity_name=name, base_gen=True))
    return rules


def parse_rule_line(line: str) -> List[Rule]:
    line = line.strip()
    if not line:
        return []

    try:
        if ":" in line:
            return parse_custom_rule(line)
        if "," in line or " " not in line:
            return parse_entities(line)
    except ColgenError as exc:
        raise type(exc)(exc.subject, where=repr(line)) from exc
    raise UnknownLineError(repr(line))


def parse_rules(lines: List[str], use_list_suffix: bool = False) -> List[Rule]:
    parsed: List[Rule] = []
    for line in lines:
        parsed.extend(parse_rule_line(line))

    merged = merge_rules(parsed, use_list_suffix)
    validate_rules(merged)
    return merged
