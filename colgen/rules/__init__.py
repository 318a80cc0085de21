from .grammar import parse_custom_rule, parse_entities, parse_rule_line, parse_rules
from .merge import merge_rules, validate_rules

__all__ = [
    "parse_rules",
    "parse_rule_line",
    "parse_custom_rule",
    "parse_entities",
    "merge_rules",
    "validate_rules",
]
