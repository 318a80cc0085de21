from __future__ import annotations

import unittest

from colgen.errors import GoParseError
from colgen.introspect.goparse import (
    PointerExpr,
    StructExpr,
    TypeRef,
    default_import_name,
    parse_go_source,
    render_expr,
)

SOURCE = """package db

import (
	"time"

	pg "github.com/go-pg/pg/v10"
	_ "github.com/lib/pq"
)

// User is a registered account.
type User struct {
	ID, ParentID int `json:"id"`
	Login        string // unique
	CreatedAt    time.Time
	Tags         []string
	Meta         map[string]*Meta
	Base
	*pg.Model
	callback func(int) error
	Page[int]
}

type (
	Meta   struct{ Key string }
	Status int
	Alias  = Status
)

type Page[T any] struct {
	Items []T; Total int
}

func (u User) Name() string {
	type local struct{ X int }
	return u.Login
}
"""


class GoParseTests(unittest.TestCase):
    def setUp(self) -> None:
        self.parsed = parse_go_source(SOURCE)

    def test_package_and_imports(self) -> None:
        self.assertEqual(self.parsed.package, "db")
        self.assertEqual(self.parsed.imports, {"time": "time", "pg": "github.com/go-pg/pg/v10"})

    def test_top_level_types_only(self) -> None:
        self.assertEqual(set(self.parsed.types), {"User", "Meta", "Status", "Alias", "Page"})
        self.assertTrue(self.parsed.types["Alias"].is_alias)

    def test_struct_fields(self) -> None:
        user = self.parsed.types["User"].expr
        self.assertIsInstance(user, StructExpr)
        fields = user.fields

        self.assertEqual(fields[0].names, ["ID", "ParentID"])
        self.assertEqual(render_expr(fields[2].type), "time.Time")
        self.assertEqual(render_expr(fields[3].type), "[]string")
        self.assertEqual(render_expr(fields[4].type), "map[string]*Meta")

        self.assertTrue(fields[5].embedded)
        self.assertEqual(fields[5].names, ["Base"])
        self.assertTrue(fields[6].embedded)
        self.assertEqual(fields[6].names, ["Model"])
        self.assertEqual(fields[6].type, PointerExpr(TypeRef(package="pg", name="Model")))

        self.assertEqual(fields[7].names, ["callback"])
        self.assertEqual(render_expr(fields[7].type), "func(int) error")

        self.assertTrue(fields[8].embedded)
        self.assertEqual(fields[8].names, ["Page"])
        self.assertEqual(render_expr(fields[8].type), "Page[int]")

    def test_generic_struct(self) -> None:
        page = self.parsed.types["Page"].expr
        self.assertEqual([item.names for item in page.fields], [["Items"], ["Total"]])
        self.assertEqual(render_expr(page.fields[0].type), "[]T")

    def test_default_import_names(self) -> None:
        self.assertEqual(default_import_name("github.com/go-pg/pg/v10"), "pg")
        self.assertEqual(default_import_name("gopkg.in/yaml.v3"), "yaml")
        self.assertEqual(default_import_name("github.com/mattn/go-sqlite3"), "sqlite3")
        self.assertEqual(default_import_name("net/http"), "http")

    def test_block_comment_inside_struct(self) -> None:
        parsed = parse_go_source("package a\n\ntype T struct {\n\tA int /* x\ny */\n\tB string\n}\n")
        self.assertEqual([item.names for item in parsed.types["T"].expr.fields], [["A"], ["B"]])

    def test_opaque_field_types_are_compacted(self) -> None:
        parsed = parse_go_source("package a\n\ntype T struct {\n\tR interface {\n\t\tRead() error\n\t}\n\tC chan int\n}\n")
        fields = parsed.types["T"].expr.fields
        self.assertEqual(render_expr(fields[0].type), "interface { Read() error }")
        self.assertEqual(render_expr(fields[1].type), "chan int")

    def test_truncated_source_fails(self) -> None:
        with self.assertRaises(GoParseError):
            parse_go_source("package")

    def test_syntax_error_reports_line(self) -> None:
        with self.assertRaisesRegex(GoParseError, r"^go parse failed: line \d+: syntax error"):
            parse_go_source("package a\n\ntype T struct {\n\tA int int (\n}\n")


if __name__ == "__main__":
    unittest.main()
