"""Tests for insertion request validation."""

import pytest

from scripts.chapters.errors import InvalidArgument
from scripts.chapters.request import (
    InsertionRequest,
    derive_title,
    parse_position,
    parse_request,
)


class TestDeriveTitle:
    """Tests for derive_title."""

    def test_hyphenated_slug(self):
        assert derive_title("my-new-topic") == "My New Topic"

    def test_underscores_are_separators(self):
        assert derive_title("api_v2-notes") == "Api V2 Notes"

    def test_rest_of_word_is_kept(self):
        """Only the first letter changes; existing capitals stay."""
        assert derive_title("iOS-tips") == "IOS Tips"

    def test_repeated_separators_collapse(self):
        assert derive_title("error--handling") == "Error Handling"


class TestParsePosition:
    """Tests for parse_position."""

    @pytest.mark.parametrize("value, expected", [(1, 1), ("3", 3), (" 12 ", 12), ("007", 7)])
    def test_valid_positions(self, value, expected):
        assert parse_position(value) == expected

    @pytest.mark.parametrize("value", [0, -1, "0", "-2", "abc", "2.5", "", True])
    def test_invalid_positions_raise(self, value):
        with pytest.raises(InvalidArgument) as exc_info:
            parse_position(value)
        assert "positive integer" in str(exc_info.value)


class TestParseRequest:
    """Tests for parse_request."""

    def test_explicit_title_is_kept(self):
        request = parse_request("6", "my-new-topic", "A Custom Title")
        assert request == InsertionRequest(position=6, slug="my-new-topic", title="A Custom Title")

    def test_missing_title_is_derived(self):
        request = parse_request(2, "error-handling")
        assert request.title == "Error Handling"

    def test_blank_title_is_derived(self):
        request = parse_request(2, "error-handling", "   ")
        assert request.title == "Error Handling"

    def test_is_first(self):
        assert parse_request(1, "preface").is_first
        assert not parse_request(2, "preface").is_first

    @pytest.mark.parametrize("slug", ["", "  ", "a/b", "a\\b", "two words"])
    def test_bad_slug_raises(self, slug):
        with pytest.raises(InvalidArgument):
            parse_request(1, slug)

    def test_bad_position_raises_before_slug_check(self):
        with pytest.raises(InvalidArgument) as exc_info:
            parse_request("zero", "")
        assert "chapter number" in str(exc_info.value)

    def test_error_json(self):
        with pytest.raises(InvalidArgument) as exc_info:
            parse_request(0, "x")
        assert exc_info.value.to_json()["error"] == "invalid_argument"
