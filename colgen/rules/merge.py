from __future__ import annotations

from dataclasses import replace
from typing import Dict, List

from colgen.errors import MissingEntityError
from colgen.utils.types import Rule, is_map_rule


def merge_rules(rules: List[Rule], use_list_suffix: bool = False) -> List[Rule]:
    """Collapse rules per entity and return them sorted by entity name.

    The first rule for an entity seeds the entry. A later rule without custom
    rules marks the entry for base generation; otherwise its custom rules are
    appended in order.
    """
    index: Dict[str, Rule] = {}
    for rule in rules:
        existing = index.get(rule.entity_name)
        if existing is None:
            index[rule.entity_name] = replace(
                rule,
                use_list_suffix=use_list_suffix,
                custom_rules=list(rule.custom_rules),
            )
            continue

        if not rule.custom_rules:
            existing.base_gen = True
        else:
            existing.custom_rules.extend(rule.custom_rules)

    return [index[name] for name in sorted(index)]


def validate_rules(rules: List[Rule]) -> None:
    # Only converters may be declared for an entity without a collection type.
    for rule in rules:
        if rule.base_gen:
            continue
        for custom in rule.custom_rules:
            if not is_map_rule(custom.name):
                raise MissingEntityError(rule.entity_name, custom.name or custom.field)
