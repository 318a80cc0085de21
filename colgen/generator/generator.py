from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union

from colgen.errors import MissingFieldError, MissingTypeError
from colgen.introspect.fields import entity_fields
from colgen.introspect.resolver import GoSourceResolver, TypeResolver
from colgen.utils.config import split_imports
from colgen.utils.naming import collector_name, new_entity
from colgen.utils.types import (
    FIELD_ID,
    RULE_GROUP,
    RULE_INDEX,
    RULE_MAP,
    RULE_MAPP,
    RULE_UNIQUE,
    CustomRule,
    Entity,
    Rule,
    field_map,
    is_map_rule,
)

from .formatter import DEFAULT_FORMAT_COMMAND, format_source
from .templates import render_block, render_template

logger = logging.getLogger(__name__)


class Generator:
    """Render collection types and helpers for merged rules.

    Pass a resolver, or call `use_resolver` or `use_package_dir` before
    `generate`.
    """

    def __init__(
        self,
        package_name: str,
        imports: Union[str, Iterable[str]] = "",
        func_package: str = "",
        version: str = "devel",
        resolver: Optional[TypeResolver] = None,
        format_command: Sequence[str] = DEFAULT_FORMAT_COMMAND,
    ) -> None:
        self.package_name = package_name
        if isinstance(imports, str):
            imports = split_imports(imports)
        self.imports = sorted(imports)
        self.func_package = func_package
        self.version = version
        self.resolver = resolver
        self.format_command = tuple(format_command)

    def use_resolver(self, resolver: TypeResolver) -> None:
        self.resolver = resolver

    def use_package_dir(self, path: Path) -> None:
        self.resolver = GoSourceResolver(Path(path))

    def generate(self, rules: List[Rule]) -> str:
        blocks: List[str] = []
        for rule in rules:
            blocks.extend(self.generate_rule(rule))

        header = render_template(
            "header.go.j2",
            version=self.version,
            package_name=self.package_name,
            imports=[json.dumps(path) for path in self.imports],
        )
        if not blocks:
            return header
        return header + "\n" + "\n\n".join(blocks) + "\n"

    def format(self, source: str) -> str:
        return format_source(source, self.format_command)

    def generate_rule(self, rule: Rule) -> List[str]:
        fields = field_map(entity_fields(self.resolver, rule.entity_name))
        if not fields:
            raise MissingTypeError(rule.entity_name)

        entity = new_entity(rule.entity_name, rule.use_list_suffix)
        logger.debug("generating %s (%d fields)", entity.list_name, len(fields))

        blocks: List[str] = []
        if rule.base_gen:
            blocks.append(render_block("collection.go.j2", entity=entity))
            if FIELD_ID in fields:
                blocks.append(self._render_field(entity, FIELD_ID, fields[FIELD_ID]))
                blocks.append(self._render_index(entity, FIELD_ID, fields[FIELD_ID], ""))

        for custom in rule.custom_rules:
            try:
                blocks.append(self._render_custom(rule, entity, custom, fields))
            except MissingFieldError as exc:
                raise MissingFieldError(exc.subject, where=f"entity {rule.entity_name}") from exc
        return blocks

    def _render_custom(self, rule: Rule, entity: Entity, custom: CustomRule, fields: Dict[str, str]) -> str:
        if is_map_rule(custom.name):
            return self._render_map(entity, custom, rule.base_gen)

        if custom.field not in fields:
            raise MissingFieldError(repr(custom.field))
        field_type = fields[custom.field]

        if custom.name == RULE_UNIQUE:
            if field_type.startswith("[]"):
                return render_block(
                    "unique_slice.go.j2",
                    entity=entity,
                    field_name=custom.field,
                    field_type=field_type[2:],
                    func_name=collector_name(custom.field),
                )
            return render_block(
                "unique.go.j2",
                entity=entity,
                field_name=custom.field,
                field_type=field_type,
                func_name=collector_name(custom.field),
            )
        if custom.name == RULE_INDEX:
            return self._render_index(entity, custom.field, field_type, "By" + custom.field)
        if custom.name == RULE_GROUP:
            return render_block("group.go.j2", entity=entity, field_name=custom.field, field_type=field_type)
        return self._render_field(entity, custom.field, field_type)

    def _render_field(self, entity: Entity, field_name: str, field_type: str) -> str:
        return render_block(
            "field.go.j2",
            entity=entity,
            field_name=field_name,
            field_type=field_type,
            func_name=collector_name(field_name),
        )

    def _render_index(self, entity: Entity, field_name: str, field_type: str, func_name: str) -> str:
        return render_block(
            "index.go.j2",
            entity=entity,
            field_name=field_name,
            field_type=field_type,
            func_name=func_name,
        )

    def _render_map(self, entity: Entity, custom: CustomRule, has_type: bool) -> str:
        # map/mapp build private constructors, Map/MapP public ones.
        prefix = "new" if custom.name[:1].islower() else "New"
        helper = RULE_MAPP if custom.name.lower() == RULE_MAPP.lower() else RULE_MAP
        if self.func_package:
            helper = f"{self.func_package}.{helper}"

        input_type = custom.arg
        if "." not in input_type:
            input_type = f"{input_type}.{entity.name}"

        return render_block(
            "map.go.j2",
            entity=entity,
            prefix=prefix,
            helper=helper,
            input_type=input_type,
            return_type=entity.list_name if has_type else "[]" + entity.name,
        )
