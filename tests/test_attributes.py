"""Tests for attribute definitions and locator resolution."""

import unittest

from adocmedia.engine.attributes import (
    build_attribute_table,
    iter_attribute_definitions,
    resolve_locator,
)


class AttributeTableTest(unittest.TestCase):
    def test_last_definition_wins(self):
        table = build_attribute_table(":k: a\ntext\n:k: b\n")
        self.assertEqual(table, {"k": "b"})

    def test_definitions_in_document_order(self):
        text = ":first: 1\n:second: 2\n:first: 3\n"
        self.assertEqual(
            list(iter_attribute_definitions(text)),
            [("first", "1"), ("second", "2"), ("first", "3")],
        )

    def test_qualified_key_and_value_with_colons(self):
        table = build_attribute_table(
            ":imagesdir.local: img\n:url: https://example.com/x\n"
        )
        self.assertEqual(table["imagesdir.local"], "img")
        self.assertEqual(table["url"], "https://example.com/x")

    def test_tab_separator_and_crlf(self):
        table = build_attribute_table(":a:\tone\r\n:b: two\r\n")
        self.assertEqual(table, {"a": "one", "b": "two"})

    def test_non_definitions_are_ignored(self):
        text = "\n".join(
            [
                " :indented: no",
                ":nospace:no",
                ":_underscore: no",
                "text :inline: no",
                ":Key_1: yes",
            ]
        )
        self.assertEqual(build_attribute_table(text), {"Key_1": "yes"})

    def test_keys_are_case_sensitive(self):
        table = build_attribute_table(":Dir: A\n:dir: b\n")
        self.assertEqual(table, {"Dir": "A", "dir": "b"})

    def test_empty_document(self):
        self.assertEqual(build_attribute_table(""), {})


class ResolveLocatorTest(unittest.TestCase):
    def test_basic_cases(self):
        self.assertEqual(resolve_locator("{x}", {"x": "v"}), "v")
        self.assertEqual(resolve_locator("{y}", {"x": "v"}), "{y}")
        self.assertEqual(resolve_locator("plain", {}), "plain")
        self.assertEqual(resolve_locator("", {}), "")

    def test_multiple_placeholders_with_surrounding_text(self):
        table = {"dir": "images", "name": "cat"}
        self.assertEqual(
            resolve_locator("./{dir}/{name}-small.png", table), "./images/cat-small.png"
        )

    def test_unknown_placeholder_kept_next_to_known(self):
        self.assertEqual(
            resolve_locator("{dir}/{missing}.png", {"dir": "d"}), "d/{missing}.png"
        )

    def test_values_are_not_expanded_again(self):
        table = {"a": "{b}", "b": "x"}
        self.assertEqual(resolve_locator("{a}", table), "{b}")

    def test_unbalanced_brace_is_literal(self):
        self.assertEqual(resolve_locator("{a", {"a": "x"}), "{a")

    def test_fast_path_does_not_touch_table(self):
        class Exploding(dict):
            def get(self, key, default=None):
                raise AssertionError("table consulted")

        self.assertEqual(resolve_locator("a.png", Exploding()), "a.png")


if __name__ == "__main__":
    unittest.main()
