from __future__ import annotations

import unittest
from pathlib import Path

from colgen.scanner import output_path_for, scan_source

SOURCE = """package dating

import "example.com/app/db"

//go:generate colgen generate
//colgen:User,Tag
//colgen:User:UniqueStatusID,MapP(db)
//colgen@NewCall(db)
//colgen@ai:readme
	//colgen:Indented
// colgen:Spaced
"""


class ScannerTests(unittest.TestCase):
    def test_collects_directives(self) -> None:
        directives = scan_source(SOURCE)
        self.assertEqual(directives.package_name, "dating")
        self.assertEqual(directives.lines, ["User,Tag", "User:UniqueStatusID,MapP(db)"])
        self.assertEqual(directives.injections, ["//colgen@NewCall(db)"])
        self.assertEqual(directives.assistant, ["readme"])

    def test_windows_line_endings(self) -> None:
        directives = scan_source("package app\r\n//colgen:News\r\n//colgen@NewCall(db)\r\n")
        self.assertEqual(directives.package_name, "app")
        self.assertEqual(directives.lines, ["News"])
        self.assertEqual(directives.injections, ["//colgen@NewCall(db)"])

    def test_output_path(self) -> None:
        self.assertEqual(output_path_for(Path("pkg/main.go")), Path("pkg/main_colgen.go"))
        self.assertEqual(output_path_for(Path("pkg/model.go"), "_gen.go"), Path("pkg/model_gen.go"))


if __name__ == "__main__":
    unittest.main()
