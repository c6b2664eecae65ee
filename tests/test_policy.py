"""Tests for redaction policy, string tests and named rewriters."""

import re

import pytest

from deep_redact.core.domain import (
    REMOVED,
    ComputedReplacement,
    LiteralReplacement,
    StringTest,
    make_replacement,
)
from deep_redact.logic.policy import RedactionPolicy, StringPipeline
from deep_redact.logic.rewriters import (
    available_rewriters,
    get_rewriter,
    mask_email_local_part,
    mask_matches,
    redact_matches,
)


class TestRedactionPolicy:
    """Tests for policy resolution and precedence."""

    def test_defaults(self) -> None:
        policy = RedactionPolicy()
        assert policy.redact("secret") == "[REDACTED]"
        assert policy.types == frozenset({"str"})

    def test_merged_skips_unset_overrides(self) -> None:
        policy = RedactionPolicy().merged(remove=None, replacement="***")

        assert policy.remove is False
        assert policy.replacement == LiteralReplacement("***")

    def test_merged_converts_types_and_callables(self) -> None:
        policy = RedactionPolicy().merged(types=["str", "int"], replacement=len)

        assert policy.types == frozenset({"str", "int"})
        assert isinstance(policy.replacement, ComputedReplacement)

    def test_merged_returns_new_policy(self) -> None:
        base = RedactionPolicy()
        assert base.merged(remove=True) is not base
        assert base.remove is False

    @pytest.mark.parametrize(
        "value, permitted",
        [("x", True), (1, False), (None, False), (True, False)],
    )
    def test_permits_default_types(self, value, permitted) -> None:
        assert RedactionPolicy().permits(value) is permitted

    def test_remove_beats_replacement(self) -> None:
        policy = RedactionPolicy().merged(remove=True, replacement=lambda v: "computed")
        assert policy.redact("x") is REMOVED

    def test_computed_replacement_uses_source(self) -> None:
        policy = RedactionPolicy().merged(replacement=repr)

        assert policy.redact({"converted": True}, source=5) == "5"
        assert policy.redact("x") == "'x'"

    def test_literal_replacement_ignores_source(self) -> None:
        assert RedactionPolicy().redact({"converted": True}, source=5) == "[REDACTED]"

    def test_computed_replacement_beats_length(self) -> None:
        policy = RedactionPolicy().merged(
            replacement=lambda v: v[:1] + "...", replace_string_by_length=True
        )
        assert policy.redact("secret") == "s..."

    @pytest.mark.parametrize(
        "token, expected",
        [("*", "******"), ("ab", "abababababab")],
    )
    def test_length_preserving_replacement(self, token, expected) -> None:
        policy = RedactionPolicy().merged(replacement=token, replace_string_by_length=True)
        assert policy.redact("secret") == expected

    def test_length_preserving_only_applies_to_strings(self) -> None:
        policy = RedactionPolicy().merged(replace_string_by_length=True)
        assert policy.redact(12345) == "[REDACTED]"

    def test_make_replacement(self) -> None:
        assert make_replacement("x") == LiteralReplacement("x")
        assert isinstance(make_replacement(str.upper), ComputedReplacement)

    def test_removed_sentinel_is_falsy_singleton(self) -> None:
        assert not REMOVED
        assert type(REMOVED)() is REMOVED
        assert repr(REMOVED) == "REMOVED"


class TestStringPipeline:
    """Tests for ordered string-content tests."""

    def test_no_match_returns_value(self) -> None:
        pipeline = StringPipeline([StringTest(re.compile(r"\d{16}"))], RedactionPolicy())
        assert pipeline.apply("hello") == "hello"

    def test_bare_pattern_redacts_whole_string(self) -> None:
        pipeline = StringPipeline([StringTest(re.compile(r"\d{16}"))], RedactionPolicy())
        assert pipeline.apply("card 4111111111111111") == "[REDACTED]"

    def test_rewriter_receives_value_and_pattern(self) -> None:
        pattern = re.compile(r"\d{4}")
        pipeline = StringPipeline([StringTest(pattern, mask_matches)], RedactionPolicy())
        assert pipeline.apply("pin 1234") == "pin ****"

    def test_first_applicable_test_wins(self) -> None:
        tests = [
            StringTest(re.compile("b"), lambda value, pattern: "first"),
            StringTest(re.compile("a"), lambda value, pattern: "second"),
            StringTest(re.compile("b"), lambda value, pattern: "third"),
        ]
        pipeline = StringPipeline(tests, RedactionPolicy())

        assert pipeline.apply("ab") == "first"
        assert pipeline.apply("a") == "second"
        assert len(pipeline) == 3

    def test_remove_policy_returns_removed(self) -> None:
        pipeline = StringPipeline(
            [StringTest(re.compile("secret"))], RedactionPolicy(remove=True)
        )
        assert pipeline.apply("top secret") is REMOVED


class TestRewriters:
    """Tests for the named rewriters."""

    def test_mask(self) -> None:
        assert mask_matches("a 123 b 45", re.compile(r"\d+")) == "a *** b **"

    def test_redact(self) -> None:
        assert redact_matches("a 123 b", re.compile(r"\d+")) == "a [REDACTED] b"

    def test_email_local_part(self) -> None:
        pattern = re.compile(r"[\w.]+@[\w.]+")
        assert (
            mask_email_local_part("mail joe.bloggs@example.com", pattern)
            == "mail **********@example.com"
        )

    def test_lookup(self) -> None:
        assert get_rewriter("mask") is mask_matches
        assert set(available_rewriters()) == {"mask", "redact", "email_local_part"}

    def test_unknown_name_returns_none(self, caplog) -> None:
        assert get_rewriter("shred") is None
        assert "shred" in caplog.text
