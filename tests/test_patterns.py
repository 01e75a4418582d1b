"""
Tests for the pattern matcher (regex and free-text match policies).
"""

import pytest

from launchindex.errors import PatternCompileFailure
from launchindex.index.entries import (
    EntryIdentity,
    EntryKind,
    FreeTextPolicy,
    IndexEntry,
    RegexPolicy,
)
from launchindex.search.patterns import PatternMatcher, compile_pattern


def _entry(label, policy, index=0):
    return IndexEntry(
        identity=EntryIdentity("/plugins/p", "f", index),
        display_name=label,
        kind=EntryKind.PLUGIN_PATTERN_COMMAND,
        feature_code="f",
        plugin_name="P",
        match_policy=policy,
    )


def _labels(entries):
    return [e.display_name for e in entries]


class TestCompilePattern:
    def test_bare_pattern(self):
        assert compile_pattern("\\d+").search("abc123")

    def test_js_literal_is_unwrapped(self):
        pattern = compile_pattern("/^abc$/")
        assert pattern.search("abc")
        assert not pattern.search("/^abc$/")

    def test_js_flags(self):
        assert compile_pattern("/^abc$/i").search("ABC")
        assert compile_pattern("/^abc$/gi").search("ABC")

    def test_invalid_pattern_raises(self):
        with pytest.raises(PatternCompileFailure):
            compile_pattern("([")

    def test_oversized_repeat_raises_compile_failure(self):
        with pytest.raises(PatternCompileFailure):
            compile_pattern("a{4294967296}")

    def test_flags_are_honoured(self):
        assert not compile_pattern("/^abc$/").search("ABC")
        assert compile_pattern("/^a.c$/s").search("a\nc")
        assert not compile_pattern("/^a.c$/").search("a\nc")
        assert compile_pattern("/^b$/m").search("a\nb")

    def test_digit_class_is_ascii_only(self):
        pattern = compile_pattern("/^\\d{6,}$/")
        assert pattern.search("123456")
        assert not pattern.search("\u0661\u0662\u0663\u0664\u0665\u0666")

    def test_named_groups(self):
        match = compile_pattern("/(?<year>\\d{4})-\\k<year>/").search("2024-2024")
        assert match.group("year") == "2024"

    def test_lookbehind_is_not_rewritten(self):
        assert compile_pattern("(?<=\\$)\\d+").search("$42").group() == "42"
        assert not compile_pattern("(?<!-)\\b\\d+").search("-42")


class TestRegexPolicy:
    """Regex commands gate on minimum length before testing the pattern."""

    def test_length_gate(self):
        matcher = PatternMatcher([_entry("Digits", RegexPolicy(pattern="^\\d+$", min_length=3))])
        assert matcher.query("12") == []
        assert _labels(matcher.query("123")) == ["Digits"]

    def test_long_enough_but_not_matching(self):
        matcher = PatternMatcher([_entry("Digits", RegexPolicy(pattern="^\\d+$", min_length=3))])
        assert matcher.query("12a") == []

    def test_pattern_found_anywhere(self):
        matcher = PatternMatcher([_entry("Has digits", RegexPolicy(pattern="\\d{3}"))])
        assert _labels(matcher.query("abc 123 def")) == ["Has digits"]


class TestFreeTextPolicy:
    """Free-text commands accept anything in bounds that the exclude misses."""

    def test_too_long_is_rejected(self):
        matcher = PatternMatcher([_entry("Short", FreeTextPolicy(min_length=1, max_length=5))])
        assert _labels(matcher.query("abcde")) == ["Short"]
        assert matcher.query("abcdef") == []

    def test_too_short_is_rejected(self):
        matcher = PatternMatcher([_entry("Long", FreeTextPolicy(min_length=3))])
        assert matcher.query("ab") == []

    def test_exclude_rejects_within_bounds(self):
        matcher = PatternMatcher([
            _entry("Words", FreeTextPolicy(min_length=1, max_length=5, exclude="^\\d+$")),
        ])
        assert matcher.query("123") == []
        assert _labels(matcher.query("abc")) == ["Words"]

    def test_defaults_accept_any_text(self):
        matcher = PatternMatcher([_entry("Anything", FreeTextPolicy())])
        assert _labels(matcher.query("x")) == ["Anything"]


class TestPatternMatcher:
    """Test ordering and failure isolation."""

    def test_results_keep_partition_order(self):
        matcher = PatternMatcher([
            _entry("B", FreeTextPolicy(), 0),
            _entry("A", RegexPolicy(pattern="."), 1),
            _entry("C", FreeTextPolicy(), 2),
        ])
        assert _labels(matcher.query("hello")) == ["B", "A", "C"]

    def test_invalid_regex_only_disables_its_entry(self):
        matcher = PatternMatcher([
            _entry("Broken", RegexPolicy(pattern="(["), 0),
            _entry("Fine", FreeTextPolicy(), 1),
        ])
        assert _labels(matcher.query("hello")) == ["Fine"]
        assert len(matcher) == 2

    def test_invalid_exclude_disables_its_entry(self):
        matcher = PatternMatcher([
            _entry("Broken", FreeTextPolicy(exclude="(?P<"), 0),
            _entry("Fine", RegexPolicy(pattern="h"), 1),
        ])
        assert _labels(matcher.query("hello")) == ["Fine"]

    def test_missing_policy_disables_entry(self):
        matcher = PatternMatcher([_entry("No policy", None)])
        assert matcher.query("anything") == []
