"""Inline injection of struct + constructor pairs.

    //colgen@NewCall(db)
    //colgen@NewUser(db)
    //colgen@newUserSummary(dating.User,full,json)

Each directive line is replaced in place by the generated declaration.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from pathlib import Path
from typing import Dict, List, Optional

from colgen.errors import MissingArgError, MissingTypeError, UnknownLineError
from colgen.generator.templates import render_template
from colgen.introspect.fields import imported_fields
from colgen.introspect.goparse import split_qualified
from colgen.introspect.resolver import GoSourceResolver, TypeResolver
from colgen.utils.naming import json_tag_name
from colgen.utils.types import EntityField, ReplaceRule, StructField

logger = logging.getLogger(__name__)

INJECTION_PREFIX = "//colgen@"

REPLACE_RULE_RE = re.compile(r"^(?://colgen)?@(New|new)(\w+)\(([\w.,]+)\)$")

OPTION_FULL = "full"
OPTION_JSON = "json"


def parse_replace_rule(rule: str) -> ReplaceRule:
    match = REPLACE_RULE_RE.match(rule.strip())
    if match is None:
        raise UnknownLineError(repr(rule))

    result = ReplaceRule(find=rule, cmd=match.group(1), entity=match.group(2))
    args = match.group(3).split(",")
    result.arg = args[0]
    for option in args[1:]:
        if option == OPTION_FULL:
            result.is_full = True
        elif option == OPTION_JSON:
            result.with_json = True
        else:
            raise UnknownLineError(repr(option), where=repr(rule))

    if result.with_json and not result.is_full:
        raise MissingArgError(OPTION_FULL, where=repr(rule))

    # db => db.Entity
    if "." not in result.arg:
        result.arg = f"{result.arg}.{result.entity}"
    return result


def parse_replace_rules(rules: List[str]) -> List[ReplaceRule]:
    return [parse_replace_rule(rule) for rule in rules]


def new_fields(rule: ReplaceRule, fields: List[EntityField]) -> List[StructField]:
    if not rule.is_full:
        return []

    result: List[StructField] = []
    for item in fields:
        if not item.is_exported:
            continue
        tag = ""
        if rule.with_json:
            tag = f'`json:"{json_tag_name(item.name, rule.entity)}"`'
        result.append(StructField(name=item.name, type=item.type, tag=tag))
    return result


class Replacer:
    def __init__(self, resolver: Optional[TypeResolver] = None) -> None:
        self.resolver = resolver

    def use_package_dir(self, path: Path) -> None:
        self.resolver = GoSourceResolver(Path(path))

    def generate(self, rules: List[str]) -> List[ReplaceRule]:
        result: List[ReplaceRule] = []
        for rule in parse_replace_rules(rules):
            if rule.is_full:
                fields = imported_fields(self.resolver, rule.arg)
                if not fields:
                    raise MissingTypeError(rule.arg)
                rule = replace(rule, fields=new_fields(rule, fields))

            result.append(replace(rule, replace=self.generate_rule(rule)))
            logger.debug("prepared replacement for %s", rule.find)
        return result

    def generate_rule(self, rule: ReplaceRule) -> str:
        # an embedded field is named after its type, not the package
        return render_template("replace.go.j2", rule=rule, embedded=split_qualified(rule.arg)[1])


def apply_replacements(text: str, rules: List[ReplaceRule]) -> str:
    """Substitute every directive in a single pass over the original text."""
    table: Dict[str, str] = {}
    for rule in rules:
        table.setdefault(rule.find, rule.replace)
    if not table:
        return text

    pattern = re.compile("|".join(re.escape(key) for key in sorted(table, key=len, reverse=True)))
    return pattern.sub(lambda match: table[match.group(0)], text)
