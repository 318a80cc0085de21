from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Set, Tuple

from colgen.errors import GoParseError, PackageLoadError

from .goparse import (
    ArrayExpr,
    GoFile,
    GoSourceParser,
    MapExpr,
    OpaqueExpr,
    PointerExpr,
    SliceExpr,
    StructExpr,
    TypeExpr,
    TypeRef,
    TypeSpec,
    default_import_name,
    split_qualified,
)
from .gotypes import (
    ArrayType,
    BasicType,
    Field,
    GoType,
    MapType,
    NamedType,
    OpaqueType,
    PointerType,
    Qualifier,
    SliceType,
    StructType,
)

logger = logging.getLogger(__name__)


PREDECLARED_TYPES = {
    "any",
    "bool",
    "byte",
    "comparable",
    "complex64",
    "complex128",
    "error",
    "float32",
    "float64",
    "int",
    "int8",
    "int16",
    "int32",
    "int64",
    "rune",
    "string",
    "uint",
    "uint8",
    "uint16",
    "uint32",
    "uint64",
    "uintptr",
}

MODULE_RE = re.compile(r"^\s*module\s+(\S+)", re.MULTILINE)


class TypeResolver(Protocol):
    def lookup(self, name: str) -> Optional[GoType]:
        ...

    def lookup_imported(self, ref: str) -> Optional[GoType]:
        ...

    def qualifier(self, named: NamedType) -> str:
        ...


def relative_qualifier(package_path: str) -> Qualifier:
    """Drop package paths: local types are bare, others keep the package name."""

    def qualify(named: NamedType) -> str:
        if named.pkg_path == package_path:
            return ""
        return named.pkg_name

    return qualify


def is_standard_package(import_path: str) -> bool:
    # standard library paths have no dot in their first element
    return "." not in import_path.split("/")[0]


class MappingResolver:
    """In-memory resolver over prebuilt types, keyed by name and `pkg.Type`."""

    def __init__(
        self,
        types: Optional[Dict[str, GoType]] = None,
        imported: Optional[Dict[str, GoType]] = None,
        package_path: str = "",
    ) -> None:
        self.types = dict(types or {})
        self.imported = dict(imported or {})
        self.package_path = package_path
        self.qualifier = relative_qualifier(package_path)

    def lookup(self, name: str) -> Optional[GoType]:
        return self.types.get(name)

    def lookup_imported(self, ref: str) -> Optional[GoType]:
        if ref in self.imported:
            return self.imported[ref]
        package, name = split_qualified(ref)
        for key, value in self.imported.items():
            key_package, key_name = split_qualified(key)
            if key_name == name and key_package.endswith(package):
                return value
        return None


@dataclass
class GoPackage:
    path: str
    name: str
    directory: Path
    types: Dict[str, Tuple[TypeSpec, GoFile]] = field(default_factory=dict)
    imports: List[str] = field(default_factory=list)


def find_module(directory: Path) -> Tuple[Optional[Path], str]:
    for candidate in [directory, *directory.parents]:
        go_mod = candidate / "go.mod"
        if go_mod.is_file():
            match = MODULE_RE.search(go_mod.read_text(encoding="utf-8"))
            if match:
                return candidate, match.group(1)
    return None, ""


class GoSourceResolver:
    """Resolve struct types by parsing the Go sources of a package directory.

    Imported packages are resolved when they live inside the same module
    (found through go.mod), under its vendor directory, or in
    `package_dirs`, a mapping of import path to directory. `sources` maps
    file names of the main package to text used instead of the file on disk.
    """

    def __init__(
        self,
        directory: Path,
        package_dirs: Optional[Dict[str, Path]] = None,
        sources: Optional[Dict[str, str]] = None,
    ) -> None:
        self.directory = Path(directory).resolve()
        self.sources = dict(sources or {})
        self.module_root, self.module_path = find_module(self.directory)
        self.package_dirs = {path: Path(value) for path, value in (package_dirs or {}).items()}
        self._packages: Dict[str, Optional[GoPackage]] = {}
        self._named: Dict[Tuple[str, str, str], NamedType] = {}
        self._underlying: Dict[Tuple[str, str], Optional[GoType]] = {}
        self._expanding: Set[Tuple[str, str]] = set()
        self.parser = GoSourceParser()

        package = self._load_dir(self.directory, self._import_path_for(self.directory))
        if package is None:
            raise PackageLoadError(str(self.directory), where="no Go files found")
        self.package = package
        self._packages[package.path] = package
        self.qualifier = relative_qualifier(package.path)

    def _import_path_for(self, directory: Path) -> str:
        if self.module_root is None:
            return directory.name
        relative = directory.relative_to(self.module_root).as_posix()
        if relative == ".":
            return self.module_path
        return f"{self.module_path}/{relative}"

    def _load_dir(self, directory: Path, import_path: str) -> Optional[GoPackage]:
        if not directory.is_dir():
            return None

        overrides = self.sources if directory == self.directory else {}
        names = {path.name for path in directory.glob("*.go")} | set(overrides)

        package: Optional[GoPackage] = None
        for name in sorted(names):
            if name.endswith("_test.go"):
                continue
            path = directory / name
            text = overrides[name] if name in overrides else path.read_text(encoding="utf-8")
            parsed = self.parser.parse(text)
            if package is None:
                package = GoPackage(path=import_path, name=parsed.package, directory=directory)
            elif parsed.package != package.name:
                logger.debug("skipping %s: package %s != %s", path, parsed.package, package.name)
                continue

            for spec in parsed.types.values():
                package.types[spec.name] = (spec, parsed)
            for imported in parsed.imports.values():
                if imported not in package.imports:
                    package.imports.append(imported)

        if package is not None:
            logger.debug("loaded package %s (%d types)", import_path, len(package.types))
        return package

    def _load_import(self, import_path: str) -> Optional[GoPackage]:
        if import_path in self._packages:
            return self._packages[import_path]

        directory: Optional[Path] = None
        if import_path in self.package_dirs:
            directory = self.package_dirs[import_path]
        elif self.module_root is not None:
            if import_path.startswith(self.module_path + "/"):
                directory = self.module_root / import_path[len(self.module_path) + 1:]
            elif (self.module_root / "vendor" / import_path).is_dir():
                directory = self.module_root / "vendor" / import_path

        package = self._load_dir(directory, import_path) if directory is not None else None
        self._packages[import_path] = package
        return package

    def _named_type(self, pkg_path: str, pkg_name: str, name: str, type_args: str = "") -> NamedType:
        key = (pkg_path, name, type_args)
        if key not in self._named:
            self._named[key] = NamedType(
                pkg_path=pkg_path,
                pkg_name=pkg_name,
                name=name,
                type_args=type_args,
                resolve=lambda: self._resolve(pkg_path, name),
            )
        return self._named[key]

    def _resolve(self, pkg_path: str, name: str) -> Optional[GoType]:
        key = (pkg_path, name)
        if key not in self._underlying:
            self._underlying[key] = None
            package = self._load_import(pkg_path)
            if package is not None and name in package.types:
                spec, go_file = package.types[name]
                self._underlying[key] = self._convert(spec.expr, package, go_file)
        return self._underlying[key]

    def _convert(self, expr: TypeExpr, package: GoPackage, go_file: GoFile) -> GoType:
        if isinstance(expr, TypeRef):
            if expr.package:
                import_path = go_file.imports.get(expr.package, expr.package)
                imported = self._load_import(import_path)
                if imported is None:
                    return self._named_type(import_path, default_import_name(import_path), expr.name, expr.type_args)
                return self._declared(imported, expr.name, expr.type_args)
            if expr.name in PREDECLARED_TYPES and expr.name not in package.types:
                return BasicType(expr.name + expr.type_args)
            return self._declared(package, expr.name, expr.type_args)
        if isinstance(expr, PointerExpr):
            return PointerType(self._convert(expr.elem, package, go_file))
        if isinstance(expr, SliceExpr):
            return SliceType(self._convert(expr.elem, package, go_file))
        if isinstance(expr, ArrayExpr):
            return ArrayType(expr.length, self._convert(expr.elem, package, go_file))
        if isinstance(expr, MapExpr):
            return MapType(
                self._convert(expr.key, package, go_file),
                self._convert(expr.value, package, go_file),
            )
        if isinstance(expr, StructExpr):
            fields: List[Field] = []
            for decl in expr.fields:
                field_type = self._convert(decl.type, package, go_file)
                for name in decl.names:
                    fields.append(Field(name=name, type=field_type, embedded=decl.embedded))
            return StructType(fields)
        if isinstance(expr, OpaqueExpr):
            return OpaqueType(expr.text)
        raise GoParseError(f"unsupported type expression {expr!r}")

    def _declared(self, package: GoPackage, name: str, type_args: str = "") -> GoType:
        """Type for a name declared in `package`; aliases stand for their target."""
        entry = package.types.get(name)
        if entry is None or not entry[0].is_alias:
            return self._named_type(package.path, package.name, name, type_args)

        spec, go_file = entry
        key = (package.path, name)
        if key in self._expanding:
            raise PackageLoadError(package.path, where=f"invalid recursive alias {name}")
        self._expanding.add(key)
        try:
            return self._convert(spec.expr, package, go_file)
        finally:
            self._expanding.discard(key)

    def lookup(self, name: str) -> Optional[GoType]:
        if name not in self.package.types:
            return None
        return self._declared(self.package, name)

    def lookup_imported(self, ref: str) -> Optional[GoType]:
        package_ref, name = split_qualified(ref)
        if not package_ref:
            return None
        for import_path in self.package.imports:
            if not import_path.endswith(package_ref):
                continue
            imported = self._load_import(import_path)
            if imported is not None and name in imported.types:
                return self._declared(imported, name)
        return None
