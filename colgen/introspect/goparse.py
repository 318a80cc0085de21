"""Syntax-level view of Go source files, built on tree-sitter-go.

Only what type introspection needs is kept: the package clause, imports and
top-level type declarations. Function and method bodies are never visited.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

import tree_sitter_go
from tree_sitter import Language, Node, Parser

from colgen.errors import GoParseError

logger = logging.getLogger(__name__)


GO_LANGUAGE = Language(tree_sitter_go.language())

OPAQUE_TYPES = {"function_type", "interface_type", "channel_type"}


@dataclass
class TypeRef:
    package: str
    name: str
    type_args: str = ""


@dataclass
class PointerExpr:
    elem: "TypeExpr"


@dataclass
class SliceExpr:
    elem: "TypeExpr"


@dataclass
class ArrayExpr:
    length: str
    elem: "TypeExpr"


@dataclass
class MapExpr:
    key: "TypeExpr"
    value: "TypeExpr"


@dataclass
class OpaqueExpr:
    text: str


@dataclass
class FieldDecl:
    names: List[str]
    type: "TypeExpr"
    embedded: bool = False


@dataclass
class StructExpr:
    fields: List[FieldDecl] = field(default_factory=list)


TypeExpr = Union[TypeRef, PointerExpr, SliceExpr, ArrayExpr, MapExpr, OpaqueExpr, StructExpr]


@dataclass
class TypeSpec:
    name: str
    expr: TypeExpr
    is_alias: bool = False


@dataclass
class GoFile:
    package: str = ""
    imports: Dict[str, str] = field(default_factory=dict)
    types: Dict[str, TypeSpec] = field(default_factory=dict)


def default_import_name(path: str) -> str:
    """Best guess of the package name behind an import path."""
    parts = [part for part in path.split("/") if part]
    if len(parts) > 1 and re.fullmatch(r"v\d+", parts[-1]):
        parts = parts[:-1]
    name = parts[-1] if parts else path
    name = re.sub(r"\.v\d+$", "", name)
    if name.startswith("go-"):
        name = name[3:]
    return re.sub(r"\W", "_", name)


class GoSourceParser:
    def __init__(self) -> None:
        self.parser = Parser(language=GO_LANGUAGE)

    def parse(self, source: str) -> GoFile:
        data = source.encode("utf-8")
        root = self.parser.parse(data).root_node
        if root.has_error:
            bad = _first_error(root)
            line = bad.start_point[0] + 1 if bad is not None else 0
            raise GoParseError(f"line {line}: syntax error")

        result = GoFile()
        for node in root.named_children:
            if node.type == "package_clause":
                for child in node.named_children:
                    if child.type == "package_identifier":
                        result.package = _text(child, data)
            elif node.type == "import_declaration":
                for spec in _descendants(node, "import_spec"):
                    self._add_import(spec, data, result)
            elif node.type == "type_declaration":
                for spec in node.named_children:
                    if spec.type in {"type_spec", "type_alias"}:
                        parsed = self._type_spec(spec, data)
                        result.types[parsed.name] = parsed
                        logger.debug("type %s %s", parsed.name, render_expr(parsed.expr))
        return result

    def _add_import(self, spec: Node, data: bytes, result: GoFile) -> None:
        path_node = spec.child_by_field_name("path")
        if path_node is None:
            return
        import_path = _text(path_node, data)[1:-1]
        name_node = spec.child_by_field_name("name")
        if name_node is not None and name_node.type in {"dot", "blank_identifier"}:
            return
        alias = _text(name_node, data) if name_node is not None else default_import_name(import_path)
        result.imports[alias] = import_path

    def _type_spec(self, node: Node, data: bytes) -> TypeSpec:
        name = _text(_field(node, "name"), data)
        expr = self._type(_field(node, "type"), data)
        return TypeSpec(name=name, expr=expr, is_alias=node.type == "type_alias")

    def _type(self, node: Node, data: bytes) -> TypeExpr:
        kind = node.type
        if kind == "type_identifier":
            return TypeRef(package="", name=_text(node, data))
        if kind == "qualified_type":
            return TypeRef(
                package=_text(_field(node, "package"), data),
                name=_text(_field(node, "name"), data),
            )
        if kind == "generic_type":
            base = self._type(_field(node, "type"), data)
            if not isinstance(base, TypeRef):
                return OpaqueExpr(_text(node, data))
            base.type_args = _compact(_text(_field(node, "type_arguments"), data))
            return base
        if kind == "parenthesized_type":
            return self._type(node.named_children[0], data)
        if kind == "pointer_type":
            return PointerExpr(self._type(node.named_children[0], data))
        if kind == "slice_type":
            return SliceExpr(self._type(_field(node, "element"), data))
        if kind == "array_type":
            return ArrayExpr(
                length=_compact(_text(_field(node, "length"), data)),
                elem=self._type(_field(node, "element"), data),
            )
        if kind == "map_type":
            return MapExpr(self._type(_field(node, "key"), data), self._type(_field(node, "value"), data))
        if kind == "struct_type":
            return self._struct(node, data)
        if kind not in OPAQUE_TYPES:
            logger.debug("keeping %s verbatim", kind)
        return OpaqueExpr(_compact(_text(node, data)))

    def _struct(self, node: Node, data: bytes) -> StructExpr:
        result = StructExpr()
        for body in node.named_children:
            if body.type != "field_declaration_list":
                continue
            for decl in body.named_children:
                if decl.type != "field_declaration":
                    continue
                expr = self._type(_field(decl, "type"), data)
                names = [_text(item, data) for item in decl.children_by_field_name("name")]
                if names:
                    result.fields.append(FieldDecl(names=names, type=expr))
                    continue
                # embedded T, *T, pkg.T or T[int]
                if any(child.type == "*" for child in decl.children):
                    expr = PointerExpr(expr)
                result.fields.append(FieldDecl(names=[embedded_name(expr)], type=expr, embedded=True))
        return result


def _field(node: Node, name: str) -> Node:
    child = node.child_by_field_name(name)
    if child is None:
        raise GoParseError(f"line {node.start_point[0] + 1}: {node.type} without {name}")
    return child


def _text(node: Node, data: bytes) -> str:
    return data[node.start_byte:node.end_byte].decode("utf-8")


def _compact(text: str) -> str:
    return " ".join(text.split())


def _descendants(node: Node, kind: str) -> List[Node]:
    found: List[Node] = []
    for child in node.named_children:
        if child.type == kind:
            found.append(child)
        else:
            found.extend(_descendants(child, kind))
    return found


def _first_error(node: Node) -> Optional[Node]:
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def embedded_name(expr: TypeExpr) -> str:
    if isinstance(expr, PointerExpr):
        return embedded_name(expr.elem)
    if isinstance(expr, TypeRef):
        return expr.name
    raise GoParseError(f"unsupported embedded field type {render_expr(expr)!r}")


def render_expr(expr: TypeExpr) -> str:
    if isinstance(expr, TypeRef):
        name = expr.name + expr.type_args
        return f"{expr.package}.{name}" if expr.package else name
    if isinstance(expr, PointerExpr):
        return "*" + render_expr(expr.elem)
    if isinstance(expr, SliceExpr):
        return "[]" + render_expr(expr.elem)
    if isinstance(expr, ArrayExpr):
        return f"[{expr.length}]" + render_expr(expr.elem)
    if isinstance(expr, MapExpr):
        return f"map[{render_expr(expr.key)}]{render_expr(expr.value)}"
    if isinstance(expr, StructExpr):
        parts = []
        for item in expr.fields:
            rendered = render_expr(item.type)
            parts.append(rendered if item.embedded else f"{', '.join(item.names)} {rendered}")
        return "struct{" + "; ".join(parts) + "}"
    return expr.text


def parse_go_source(source: str, parser: Optional[GoSourceParser] = None) -> GoFile:
    return (parser or GoSourceParser()).parse(source)


def split_qualified(ref: str) -> Tuple[str, str]:
    package, _, name = ref.rpartition(".")
    return package, name
