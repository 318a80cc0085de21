from __future__ import annotations

import re

import inflection

from colgen.utils.types import Entity


LIST_SUFFIX = "List"

IDENT_RE = re.compile(r"^[A-Za-z_]\w*$")


def is_identifier(value: str) -> bool:
    return bool(IDENT_RE.match(value))


def pluralize(word: str) -> str:
    return inflection.pluralize(word)


def last_rune_to_lower(value: str) -> str:
    """Lower the last character, turning `IDS`-shaped plurals into `IDs`."""
    if not value:
        return value
    return value[:-1] + value[-1].lower()


def first_rune_to_lower(value: str) -> str:
    if not value:
        return value
    return value[0].lower() + value[1:]


def collector_name(field_name: str) -> str:
    return last_rune_to_lower(pluralize(field_name))


def new_entity(name: str, use_list: bool) -> Entity:
    list_name = name + LIST_SUFFIX
    if not use_list:
        plural = pluralize(name)
        if plural != name:
            list_name = plural
    return Entity(name=name, list_name=list_name)


def json_tag_name(field_name: str, entity: str) -> str:
    tag = field_name
    if field_name == "ID":
        tag = entity + "Id"

    tag = first_rune_to_lower(tag)
    if tag.endswith("ID"):
        tag = last_rune_to_lower(tag)
    return tag
