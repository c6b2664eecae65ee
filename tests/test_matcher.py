"""Tests for path pattern matching."""

import re

import pytest

from deep_redact.engine.matcher import (
    PathPattern,
    find_match,
    key_matches,
    normalise_key,
    split_dotted,
)
from deep_redact.logic.policy import RedactionPolicy

DEFAULT_POLICY = RedactionPolicy()


def compile_pattern(*segments, **policy):
    return PathPattern.compile(segments, RedactionPolicy(**policy))


class TestKeyComparison:
    """Tests for literal key comparison modes."""

    @pytest.mark.parametrize(
        "key, expected, fuzzy, case_sensitive, result",
        [
            ("password", "password", False, True, True),
            ("Password", "password", False, True, False),
            ("Pass_Word", "password", False, False, True),
            ("user-password", "password", True, True, True),
            ("USER_PASSWORD", "pass word", True, False, True),
            ("pw", "password", True, True, False),
            (0, "0", False, True, True),
        ],
    )
    def test_key_matches(self, key, expected, fuzzy, case_sensitive, result) -> None:
        assert key_matches(key, expected, fuzzy, case_sensitive) is result

    def test_normalise_key_strips_separators(self) -> None:
        assert normalise_key("X-Api_Key 2") == "xapikey2"


class TestPathPattern:
    """Tests for glob-style matching with backtracking."""

    @pytest.mark.parametrize(
        "segments, path, result",
        [
            (("password",), ("password",), True),
            (("password",), ("a", "password"), False),
            (("user", "address", "*"), ("user", "address", "city"), True),
            (("user", "address", "*"), ("user", "address"), False),
            (("user", "address", "*"), ("user", "address", "x", "y"), False),
            (("**", "ssn"), ("ssn",), True),
            (("**", "ssn"), ("a", "ssn"), True),
            (("**", "ssn"), ("a", "b", "c", "ssn"), True),
            (("**", "ssn"), ("a", "ssn", "x"), False),
            (("a", "**"), ("a",), True),
            (("a", "**"), ("a", "b", "c"), True),
            (("a", "**"), ("b",), False),
            (("**", "b", "**", "d"), ("a", "b", "c", "d"), True),
            (("**", "b", "**", "d"), ("a", "b", "c"), False),
            (("**", "a", "b"), ("a", "a", "b"), True),
            (("items", "*", "secret"), ("items", 0, "secret"), True),
        ],
    )
    def test_matches(self, segments, path, result) -> None:
        assert PathPattern.compile(segments, DEFAULT_POLICY).matches(path) is result

    def test_regex_segment(self) -> None:
        pattern = compile_pattern(re.compile(r"^card"))
        assert pattern.matches(("cardNumber",))
        assert not pattern.matches(("number",))

    def test_case_insensitive_literal(self) -> None:
        pattern = compile_pattern("APIKey", case_sensitive_key_match=False)
        assert pattern.matches(("api_key",))

    def test_fuzzy_literal(self) -> None:
        pattern = compile_pattern("**", "token", fuzzy_key_match=True)
        assert pattern.matches(("auth", "accesstoken"))
        assert not pattern.matches(("auth", "accessToken"))

    def test_first_match_wins(self) -> None:
        first = compile_pattern("**", "secret", remove=True)
        second = compile_pattern("secret")

        assert find_match([first, second], ("secret",)) is first
        assert find_match([second, first], ("secret",)) is second
        assert find_match([first, second], ("other",)) is None

    def test_split_dotted(self) -> None:
        assert split_dotted("user.address.*") == ("user", "address", "*")
        assert split_dotted("a..b.") == ("a", "b")
