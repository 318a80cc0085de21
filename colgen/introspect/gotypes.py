from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional


# Maps a named type to the prefix printed before its name ("" for none).
Qualifier = Callable[["NamedType"], str]


def full_qualifier(named: "NamedType") -> str:
    return named.pkg_path


class GoType:
    def type_string(self, qualifier: Qualifier = full_qualifier) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.type_string()


@dataclass(eq=False)
class BasicType(GoType):
    name: str

    def type_string(self, qualifier: Qualifier = full_qualifier) -> str:
        return self.name


@dataclass(eq=False)
class OpaqueType(GoType):
    """Type kept verbatim from source (func, chan, interface, ...)."""

    text: str

    def type_string(self, qualifier: Qualifier = full_qualifier) -> str:
        return self.text


@dataclass(eq=False)
class PointerType(GoType):
    elem: GoType

    def type_string(self, qualifier: Qualifier = full_qualifier) -> str:
        return "*" + self.elem.type_string(qualifier)


@dataclass(eq=False)
class SliceType(GoType):
    elem: GoType

    def type_string(self, qualifier: Qualifier = full_qualifier) -> str:
        return "[]" + self.elem.type_string(qualifier)


@dataclass(eq=False)
class ArrayType(GoType):
    length: str
    elem: GoType

    def type_string(self, qualifier: Qualifier = full_qualifier) -> str:
        return f"[{self.length}]" + self.elem.type_string(qualifier)


@dataclass(eq=False)
class MapType(GoType):
    key: GoType
    value: GoType

    def type_string(self, qualifier: Qualifier = full_qualifier) -> str:
        return f"map[{self.key.type_string(qualifier)}]{self.value.type_string(qualifier)}"


@dataclass(eq=False)
class Field:
    name: str
    type: GoType
    embedded: bool = False

    @property
    def exported(self) -> bool:
        return bool(self.name) and self.name[0].isupper()


@dataclass(eq=False)
class StructType(GoType):
    fields: List[Field] = field(default_factory=list)

    def type_string(self, qualifier: Qualifier = full_qualifier) -> str:
        parts = []
        for item in self.fields:
            if item.embedded:
                parts.append(item.type.type_string(qualifier))
            else:
                parts.append(f"{item.name} {item.type.type_string(qualifier)}")
        return "struct{" + "; ".join(parts) + "}"


@dataclass(eq=False)
class NamedType(GoType):
    """Declared type. The underlying definition is resolved lazily."""

    pkg_path: str
    pkg_name: str
    name: str
    type_args: str = ""
    resolve: Optional[Callable[[], Optional[GoType]]] = field(default=None, repr=False)

    def underlying(self) -> Optional[GoType]:
        seen = set()
        current: GoType = self
        while isinstance(current, NamedType):
            key = (current.pkg_path, current.name)
            if key in seen or current.resolve is None:
                return None
            seen.add(key)
            resolved = current.resolve()
            if resolved is None:
                return None
            current = resolved
        return current

    def type_string(self, qualifier: Qualifier = full_qualifier) -> str:
        prefix = qualifier(self) if self.pkg_path else ""
        name = self.name + self.type_args
        return f"{prefix}.{name}" if prefix else name
