from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from colgen.errors import MissingArgError, MissingTypeError, UnknownLineError
from colgen.introspect import MappingResolver
from colgen.introspect.gotypes import BasicType, Field, NamedType, PointerType, StructType
from colgen.replacer import Replacer, apply_replacements, parse_replace_rule
from colgen.utils.types import ReplaceRule

CALL_EXPECTED = """
type Call struct {
\tdb.Call
}

func NewCall(in *db.Call) *Call {
\tif in == nil {
\t\treturn nil
\t}

\treturn &Call{
\t\tCall: *in,
\t}
}
"""

SUMMARY_EXPECTED = """
type UserSummary struct {
\tID int `json:"userSummaryId"`
\tCreatedAt time.Time `json:"createdAt"`
\tLastActivityAt *time.Time `json:"lastActivityAt"`
\tStatusID int `json:"statusId"`
}

func newUserSummary(in *dating.User) *UserSummary {
\tif in == nil {
\t\treturn nil
\t}

\treturn &UserSummary{
\t\tID: in.ID,
\t\tCreatedAt: in.CreatedAt,
\t\tLastActivityAt: in.LastActivityAt,
\t\tStatusID: in.StatusID,
\t}
}
"""


def _dating_resolver() -> MappingResolver:
    stamp = NamedType(pkg_path="time", pkg_name="time", name="Time")
    user = StructType(
        [
            Field("ID", BasicType("int")),
            Field("CreatedAt", stamp),
            Field("password", BasicType("string")),
            Field("LastActivityAt", PointerType(stamp)),
            Field("StatusID", BasicType("int")),
        ]
    )
    return MappingResolver(imported={"github.com/acme/dating.User": user}, package_path="github.com/acme/app")


class ReplaceRuleTests(unittest.TestCase):
    def test_plain_rule(self) -> None:
        self.assertEqual(
            parse_replace_rule("//colgen@NewCall(db)"),
            ReplaceRule(find="//colgen@NewCall(db)", cmd="New", entity="Call", arg="db.Call"),
        )

    def test_full_json_rule(self) -> None:
        self.assertEqual(
            parse_replace_rule("//colgen@newUserSummary(dating.User,full,json)"),
            ReplaceRule(
                find="//colgen@newUserSummary(dating.User,full,json)",
                cmd="new",
                entity="UserSummary",
                arg="dating.User",
                is_full=True,
                with_json=True,
            ),
        )

    def test_short_form(self) -> None:
        rule = parse_replace_rule("@NewUser(db)")
        self.assertEqual((rule.cmd, rule.entity, rule.arg), ("New", "User", "db.User"))

    def test_json_requires_full(self) -> None:
        with self.assertRaises(MissingArgError) as ctx:
            parse_replace_rule("//colgen@NewUser(db,json)")
        self.assertTrue(str(ctx.exception).startswith("missing arg: full"))

    def test_unknown_option(self) -> None:
        with self.assertRaises(UnknownLineError) as ctx:
            parse_replace_rule("//colgen@NewUser(db,fast)")
        self.assertIn("'fast'", str(ctx.exception))

    def test_unknown_rule(self) -> None:
        for rule in ["//colgen@MakeUser(db)", "//colgen@NewUser", "//colgen@NewUser()"]:
            with self.subTest(rule=rule):
                with self.assertRaises(UnknownLineError):
                    parse_replace_rule(rule)


class ReplacerTests(unittest.TestCase):
    def test_plain_replacement(self) -> None:
        rules = Replacer().generate(["//colgen@NewCall(db)"])
        self.assertEqual(len(rules), 1)
        self.assertEqual(rules[0].replace, CALL_EXPECTED)

    def test_embedded_field_is_named_after_the_type(self) -> None:
        rules = Replacer().generate(["//colgen@NewProfile(dating.User)"])
        self.assertIn("type Profile struct {\n\tdating.User\n}", rules[0].replace)
        self.assertIn("\t\tUser: *in,\n", rules[0].replace)

    def test_full_json_replacement_keeps_exported_fields(self) -> None:
        rules = Replacer(_dating_resolver()).generate(["//colgen@newUserSummary(dating.User,full,json)"])
        self.assertEqual([item.name for item in rules[0].fields], ["ID", "CreatedAt", "LastActivityAt", "StatusID"])
        self.assertEqual(rules[0].replace, SUMMARY_EXPECTED)

    def test_full_without_tags(self) -> None:
        rules = Replacer(_dating_resolver()).generate(["//colgen@NewUserSummary(dating.User,full)"])
        self.assertIn("\tID int\n", rules[0].replace)
        self.assertNotIn("json:", rules[0].replace)

    def test_full_replacement_from_package_dir(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "go.mod").write_text("module example.com/app\n", encoding="utf-8")
            (root / "main.go").write_text(
                'package app\n\nimport "example.com/app/db"\n\n//colgen@NewUser(db,full)\n',
                encoding="utf-8",
            )
            (root / "db").mkdir()
            (root / "db" / "db.go").write_text(
                "package db\n\ntype User struct {\n\tID int\n\tLogin string\n}\n",
                encoding="utf-8",
            )

            replacer = Replacer()
            replacer.use_package_dir(root)
            rules = replacer.generate(["//colgen@NewUser(db,full)"])

        self.assertIn("type User struct {\n\tID int\n\tLogin string\n}", rules[0].replace)
        self.assertIn("\t\tLogin: in.Login,\n", rules[0].replace)

    def test_full_with_unknown_type(self) -> None:
        with self.assertRaises(MissingTypeError):
            Replacer(_dating_resolver()).generate(["//colgen@NewAccount(dating,full)"])

    def test_apply_replacements(self) -> None:
        text = "package app\n\n//colgen@NewCall(db)\n\nfunc main() {}\n"
        rules = Replacer().generate(["//colgen@NewCall(db)"])
        self.assertEqual(
            apply_replacements(text, rules),
            "package app\n\n" + CALL_EXPECTED + "\n\nfunc main() {}\n",
        )

    def test_apply_replacements_is_single_pass(self) -> None:
        rules = [
            ReplaceRule(find="//colgen@NewA(db)", replace="//colgen@NewB(db)"),
            ReplaceRule(find="//colgen@NewB(db)", replace="type B struct{}"),
        ]
        self.assertEqual(
            apply_replacements("//colgen@NewA(db)\n//colgen@NewB(db)\n", rules),
            "//colgen@NewB(db)\ntype B struct{}\n",
        )

    def test_apply_without_rules(self) -> None:
        self.assertEqual(apply_replacements("package app\n", []), "package app\n")


if __name__ == "__main__":
    unittest.main()
