from __future__ import annotations

import unittest

from colgen.utils.naming import collector_name, json_tag_name, new_entity
from colgen.utils.types import Entity


class NamingTests(unittest.TestCase):
    def test_collector_names(self) -> None:
        self.assertEqual(collector_name("ID"), "IDs")
        self.assertEqual(collector_name("TagIDs"), "TagIDs")
        self.assertEqual(collector_name("Title"), "Titles")
        self.assertEqual(collector_name("Category"), "Categories")

    def test_list_names(self) -> None:
        self.assertEqual(new_entity("Tag", use_list=False), Entity(name="Tag", list_name="Tags"))
        self.assertEqual(new_entity("Tag", use_list=True), Entity(name="Tag", list_name="TagList"))
        # plural equal to the name falls back to the suffix
        self.assertEqual(new_entity("News", use_list=False).list_name, "NewsList")

    def test_json_tags(self) -> None:
        self.assertEqual(json_tag_name("ID", "UserSummary"), "userSummaryId")
        self.assertEqual(json_tag_name("StatusID", "UserSummary"), "statusId")
        self.assertEqual(json_tag_name("CreatedAt", "UserSummary"), "createdAt")
        self.assertEqual(json_tag_name("Login", "User"), "login")


if __name__ == "__main__":
    unittest.main()
