"""Tests for dot-path reads and slash-pointer parsing."""

from __future__ import annotations

from typing import Any

import pytest

from sdui.domain.paths import get_path, parse_keyed_segment, split_pointer, stringify

DOC: dict[str, Any] = {
    "user": {"name": "Alice", "address": {"city": "Paris"}, "tags": ["a", "b"]},
    "count": 0,
    "flag": False,
    "nothing": None,
}


def _manual(document: Any, path: str) -> Any:
    current = document
    for segment in path.split("."):
        if not isinstance(current, dict) or segment not in current:
            return None
        current = current[segment]
    return current


class TestGetPath:
    @pytest.mark.parametrize(
        "path",
        [
            "user",
            "user.name",
            "user.address.city",
            "user.address.zip",
            "user.tags",
            "user.tags.0",
            "user.name.first",
            "count",
            "flag",
            "nothing",
            "missing.deeper",
            "",
            "user..name",
        ],
    )
    def test_matches_manual_indexing(self, path: str) -> None:
        assert get_path(DOC, path) == _manual(DOC, path)

    def test_nested_value(self) -> None:
        assert get_path(DOC, "user.address.city") == "Paris"

    def test_missing_segment_is_absent(self) -> None:
        assert get_path(DOC, "user.email") is None

    def test_lists_are_never_indexed(self) -> None:
        assert get_path(DOC, "user.tags.0") is None

    def test_scalar_intermediate_is_absent(self) -> None:
        assert get_path(DOC, "user.name.length") is None

    def test_falsy_values_are_present(self) -> None:
        assert get_path(DOC, "count") == 0
        assert get_path(DOC, "flag") is False


class TestPointers:
    def test_split_drops_empty_segments(self) -> None:
        assert split_pointer("/a//b/") == ["a", "b"]

    def test_split_root(self) -> None:
        assert split_pointer("/") == []

    def test_keyed_segment(self) -> None:
        assert parse_keyed_segment("sku:abc-123") == ("sku", "abc-123")

    def test_keyed_segment_splits_on_first_colon(self) -> None:
        assert parse_keyed_segment("id:urn:x") == ("id", "urn:x")

    def test_plain_segment_is_not_keyed(self) -> None:
        assert parse_keyed_segment("products") is None

    def test_empty_key_is_not_keyed(self) -> None:
        assert parse_keyed_segment(":abc") is None


class TestStringify:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("Alice", "Alice"),
            (42, "42"),
            (1.5, "1.5"),
            (True, "true"),
            (False, "false"),
            (None, "null"),
            ({"a": 1}, '{"a":1}'),
            ([1, 2], "[1,2]"),
        ],
    )
    def test_renders_json_style(self, value: Any, expected: str) -> None:
        assert stringify(value) == expected
