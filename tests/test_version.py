"""Tests for minions.domain.minion.version."""

from __future__ import annotations

import pytest

from minions.domain.minion import (
    MinionStatus,
    ParseError,
    Priority,
    bump_version,
    classify_changes,
    compare_versions,
    format_version,
    parse_version,
)


class TestFormatAndParse:
    def test_format_version(self, make_minion):
        assert format_version(make_minion("A", version="1.2.3")) == "1.2.3"

    def test_format_missing_minion(self):
        """A missing minion formats as the null version."""
        assert format_version(None) == "0.0.0"

    def test_parse_version(self):
        assert parse_version("10.0.7") == (10, 0, 7)

    @pytest.mark.parametrize(
        "value",
        ["", "1.2", "1.2.3.4", "a.b.c", "1.-2.3", "1..3", " 1.2.3", "1.².0", "١.٢.٣"],
    )
    def test_parse_rejects_malformed(self, value):
        """Malformed strings fail loudly instead of coercing to zero."""
        with pytest.raises(ParseError):
            parse_version(value)

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_version("x")


class TestCompareVersions:
    def test_total_order(self):
        """1.2.3 < 1.2.4 < 1.3.0 < 2.0.0, pairwise."""
        ordered = ["1.2.3", "1.2.4", "1.3.0", "2.0.0"]
        for i, lower in enumerate(ordered):
            for higher in ordered[i + 1:]:
                assert compare_versions(lower, higher) < 0
                assert compare_versions(higher, lower) > 0

    def test_equal(self):
        assert compare_versions("3.1.4", "3.1.4") == 0

    def test_components_compare_numerically(self):
        """Components are integers, so 0.0.10 is newer than 0.0.9."""
        assert compare_versions("0.0.10", "0.0.9") > 0

    def test_user_component_dominates(self):
        assert compare_versions("1.0.0", "0.99.99") > 0


class TestVersionBump:
    def test_minor_field(self, make_minion):
        original = make_minion("A", title="Old")
        assert classify_changes(original, {"title": "New"}) == {"major": 0, "minor": 1}

    def test_major_fields(self, make_minion):
        original = make_minion("A")
        counts = classify_changes(
            original,
            {"status": MinionStatus.COMPLETED, "priority": Priority.URGENT},
        )
        assert counts == {"major": 2, "minor": 0}

    def test_unchanged_values_do_not_count(self, make_minion):
        original = make_minion("A", title="Same")
        assert classify_changes(original, {"title": "Same"}) == {"major": 0, "minor": 0}

    def test_enum_and_string_compare_equal(self, make_minion):
        """Submitting the current status as a plain string is not a change."""
        original = make_minion("A", status=MinionStatus.BLOCKED)
        assert classify_changes(original, {"status": "blocked"}) == {"major": 0, "minor": 0}

    def test_unlisted_field_counts_as_minor(self, make_minion):
        original = make_minion("A")
        assert classify_changes(original, {"favorite": True}) == {"major": 0, "minor": 1}

    def test_bookkeeping_fields_ignored(self, make_minion):
        original = make_minion("A")
        counts = classify_changes(original, {"children": ["x"], "dependent_on": [], "version": None})
        assert counts == {"major": 0, "minor": 0}

    def test_bump_version(self, make_minion):
        original = make_minion("A", version="1.2.3", title="Old")
        version = bump_version(original, {"title": "New", "status": MinionStatus.IN_PROGRESS})
        assert (version.user, version.major, version.minor) == ("1", "3", "4")

    def test_bump_with_user_override(self, make_minion):
        original = make_minion("A", version="1.0.0")
        version = bump_version(original, {}, user="5")
        assert (version.user, version.major, version.minor) == ("5", "0", "0")

    def test_bump_rejects_bad_user(self, make_minion):
        with pytest.raises(ParseError):
            bump_version(make_minion("A"), {}, user="five")
