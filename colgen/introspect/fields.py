from __future__ import annotations

import logging
from typing import FrozenSet, List, Optional, Tuple

from colgen.errors import MissingTypeError
from colgen.utils.types import EntityField

from .gotypes import GoType, NamedType, PointerType, Qualifier, StructType, full_qualifier
from .resolver import TypeResolver, is_standard_package

logger = logging.getLogger(__name__)


def collect_fields(typ: Optional[GoType], qualifier: Qualifier = full_qualifier) -> List[EntityField]:
    """Flatten the fields of a struct type, promoting embedded struct fields.

    Shadowed names are kept; callers building a map get last-write-wins.
    An embedded type that cannot be resolved raises MissingTypeError, except
    for standard library types, which are skipped with a warning.
    """
    result: List[EntityField] = []
    _fill_fields(typ, qualifier, result, frozenset())
    return result


def _fill_fields(
    typ: Optional[GoType],
    qualifier: Qualifier,
    result: List[EntityField],
    seen: FrozenSet[Tuple[str, str]],
) -> None:
    if isinstance(typ, PointerType):
        typ = typ.elem

    owner = "struct"
    if isinstance(typ, NamedType):
        owner = typ.name
        key = (typ.pkg_path, typ.name)
        if key in seen:
            return
        seen = seen | {key}
        typ = typ.underlying()

    if not isinstance(typ, StructType):
        return

    for item in typ.fields:
        if item.embedded:
            _check_embedded(item.type, owner)
            _fill_fields(item.type, qualifier, result, seen)
            continue
        result.append(
            EntityField(
                name=item.name,
                type=item.type.type_string(qualifier),
                full_type=item.type.type_string(),
                is_exported=item.exported,
            )
        )


def _check_embedded(typ: GoType, owner: str) -> None:
    if isinstance(typ, PointerType):
        typ = typ.elem
    if not isinstance(typ, NamedType) or typ.underlying() is not None:
        return
    if is_standard_package(typ.pkg_path):
        logger.warning("fields of embedded %s are not promoted: package not loaded", typ.type_string())
        return
    raise MissingTypeError(typ.type_string(), where=f"embedded in {owner}")


def entity_fields(resolver: Optional[TypeResolver], name: str) -> List[EntityField]:
    if resolver is None:
        return []
    return collect_fields(resolver.lookup(name), resolver.qualifier)


def imported_fields(resolver: Optional[TypeResolver], ref: str) -> List[EntityField]:
    if resolver is None:
        return []
    return collect_fields(resolver.lookup_imported(ref), resolver.qualifier)
