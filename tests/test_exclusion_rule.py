"""
Tests for exclusion rule parsing and expansion.
"""

import dataclasses

import pendulum
import pytest

from timeexclusions.domain.exceptions import (
    MalformedDateError,
    MalformedTimeBlockError,
    UnrecognizedSyntaxError,
)
from timeexclusions.domain.exclusion import ExclusionRule, RuleKind
from timeexclusions.domain.models import TimeRange


def _dt(text: str):
    return pendulum.parse(text, tz="Europe/Berlin")


def _window(start: str, end: str) -> TimeRange:
    return TimeRange(start=_dt(start), end=_dt(end))


class TestParse:
    """Tests for ExclusionRule.parse."""

    def test_day_on(self):
        """Test 'day on' rules are additive."""
        rule = ExclusionRule.parse("exc day on 2024-03-15")

        assert rule.kind is RuleKind.DAY_ON
        assert rule.additive is True
        assert rule.tokens == ("exc", "day", "on", "2024-03-15")

    def test_day_off(self):
        """Test 'day off' rules remove time."""
        rule = ExclusionRule.parse("exc day off 2024-12-25")

        assert rule.kind is RuleKind.DAY_OFF
        assert rule.additive is False

    def test_weekday(self):
        """Test weekday rules keep their blocks and resolve the weekday."""
        rule = ExclusionRule.parse("exc monday <09:00:00 >17:00:00")

        assert rule.kind is RuleKind.WEEKDAY
        assert rule.additive is False
        assert rule.weekday == 0
        assert rule.block_tokens == ("<09:00:00", ">17:00:00")

    def test_weekday_abbreviation_and_case(self):
        """Test weekday names are matched case-insensitively, abbreviations included."""
        assert ExclusionRule.parse("exc Sat >00:00:00").weekday == 5
        assert ExclusionRule.parse("exc SUNDAY").weekday == 6

    def test_weekday_without_blocks(self):
        """Test a weekday rule with no blocks is accepted."""
        rule = ExclusionRule.parse("exc friday")

        assert rule.kind is RuleKind.WEEKDAY
        assert rule.block_tokens == ()

    def test_block_tokens_are_not_validated(self):
        """Test malformed blocks do not fail the parse."""
        rule = ExclusionRule.parse("exc monday 9-17")

        assert rule.block_tokens == ("9-17",)

    def test_initialize_alias(self):
        """Test initialize is the same entry point as parse."""
        assert ExclusionRule.initialize("exc friday") == ExclusionRule.parse("exc friday")

    @pytest.mark.parametrize(
        "line",
        [
            "exc",
            "",
            "foo monday 09:00:00-17:00:00",
            "exc notaday 09:00:00",
            "exc day on",
            "exc day off 2024-03-15 extra",
            "exc day maybe 2024-03-15",
            "EXC monday <09:00:00",
        ],
    )
    def test_rejects_unknown_syntax(self, line):
        """Test lines matching none of the shapes are rejected."""
        with pytest.raises(UnrecognizedSyntaxError, match="Unrecognized exclusion syntax"):
            ExclusionRule.parse(line)

    def test_error_carries_line(self):
        """Test the error keeps the offending line."""
        with pytest.raises(UnrecognizedSyntaxError) as exc_info:
            ExclusionRule.parse("exc notaday 09:00:00")

        assert exc_info.value.line == "exc notaday 09:00:00"

    def test_rules_are_immutable(self):
        """Test a parsed rule cannot be changed."""
        rule = ExclusionRule.parse("exc day on 2024-03-15")

        with pytest.raises(dataclasses.FrozenInstanceError):
            rule.additive = False


class TestSerialize:
    """Tests for serialize and dump."""

    def test_round_trip_normalizes_whitespace(self):
        """Test serialize reproduces an equivalent line."""
        rule = ExclusionRule.parse("  exc   monday\t<09:00:00    >17:00:00 ")

        assert rule.serialize() == "exc monday <09:00:00 >17:00:00"
        assert ExclusionRule.parse(rule.serialize()) == rule

    @pytest.mark.parametrize(
        "line",
        [
            "exc day on 2024-03-15",
            "exc day off 2024-12-25",
            "exc friday",
            "exc tuesday 12:00:00-12:45:00 >18:00:00",
        ],
    )
    def test_round_trip(self, line):
        """Test serialize(parse(line)) tokenizes like the line."""
        assert ExclusionRule.parse(line).serialize().split() == line.split()

    def test_dump(self):
        """Test the diagnostic line."""
        rule = ExclusionRule.parse("exc day off 2024-12-25")

        assert rule.dump() == "Exclusion exc day off 2024-12-25"


class TestSingleDayRanges:
    """Tests for expanding 'day on' and 'day off' rules."""

    def test_day_on_in_window(self):
        """Test a day inside the window yields exactly that day."""
        rule = ExclusionRule.parse("exc day on 2024-03-15")

        ranges = rule.ranges(_window("2024-03-01", "2024-04-01"))

        assert ranges == [_window("2024-03-15 00:00:00", "2024-03-16 00:00:00")]
        assert rule.additive is True

    def test_day_off_outside_window(self):
        """Test a day outside the window yields nothing."""
        rule = ExclusionRule.parse("exc day off 2024-05-01")

        assert rule.ranges(_window("2024-03-01", "2024-04-01")) == []

    def test_partial_overlap_is_not_clipped(self):
        """Test a day that only partially overlaps is returned whole."""
        rule = ExclusionRule.parse("exc day off 2024-03-15")

        ranges = rule.ranges(_window("2024-03-15 12:00", "2024-03-20"))

        assert ranges == [_window("2024-03-15", "2024-03-16")]

    def test_window_end_is_exclusive(self):
        """Test a day starting exactly at the window end does not overlap."""
        rule = ExclusionRule.parse("exc day off 2024-03-15")

        assert rule.ranges(_window("2024-03-01", "2024-03-15")) == []

    def test_day(self):
        """Test the calendar date of a single-day rule."""
        rule = ExclusionRule.parse("exc day off 2024-12-25")

        assert rule.day() == pendulum.date(2024, 12, 25)

    def test_malformed_date(self):
        """Test an unparseable date fails when the rule is expanded."""
        rule = ExclusionRule.parse("exc day off someday")

        with pytest.raises(MalformedDateError) as exc_info:
            rule.ranges(_window("2024-03-01", "2024-04-01"))

        assert exc_info.value.token == "someday"


class TestWeekdayRanges:
    """Tests for expanding recurring weekday rules."""

    def test_two_blocks_on_one_monday(self):
        """Test a one-week window with one Monday yields both blocks."""
        rule = ExclusionRule.parse("exc monday <09:00:00 >17:00:00")

        # 2024-11-25 is a Monday; the window end is exclusive
        ranges = rule.ranges(_window("2024-11-25", "2024-12-02"))

        assert ranges == [
            _window("2024-11-25 00:00", "2024-11-25 09:00"),
            _window("2024-11-25 17:00", "2024-11-26 00:00"),
        ]
        assert rule.additive is False

    def test_several_weeks_in_date_order(self):
        """Test every matching day yields its blocks, in date order."""
        rule = ExclusionRule.parse("exc wednesday 12:00:00-12:45:00")

        ranges = rule.ranges(_window("2024-11-25", "2024-12-16"))

        assert [r.start.to_date_string() for r in ranges] == [
            "2024-11-27",
            "2024-12-04",
            "2024-12-11",
        ]
        assert all(r.duration_minutes() == 45 for r in ranges)

    def test_blocks_in_token_order(self):
        """Test blocks within a day keep their token order."""
        rule = ExclusionRule.parse("exc friday >16:00:00 12:00:00-13:00:00 <08:00:00")

        ranges = rule.ranges(_window("2024-11-25", "2024-12-02"))

        assert [r.start.hour for r in ranges] == [16, 12, 0]

    def test_window_starting_mid_day(self):
        """Test the day containing the window start is scanned from midnight."""
        rule = ExclusionRule.parse("exc monday <09:00:00")

        ranges = rule.ranges(_window("2024-11-25 10:00", "2024-11-26"))

        assert ranges == [_window("2024-11-25 00:00", "2024-11-25 09:00")]

    def test_no_matching_day(self):
        """Test a window without the weekday yields nothing."""
        rule = ExclusionRule.parse("exc sunday >00:00:00")

        assert rule.ranges(_window("2024-11-25", "2024-11-30")) == []

    def test_zero_blocks(self):
        """Test a weekday rule without blocks yields nothing."""
        rule = ExclusionRule.parse("exc friday")

        assert rule.ranges(_window("2024-11-01", "2024-12-01")) == []

    def test_malformed_block_fails_on_expansion(self):
        """Test a malformed block only fails once a matching day is expanded."""
        rule = ExclusionRule.parse("exc monday 9-17")

        assert rule.ranges(_window("2024-11-26", "2024-12-01")) == []

        with pytest.raises(MalformedTimeBlockError):
            rule.ranges(_window("2024-11-25", "2024-12-02"))

    def test_time_blocks_validate_eagerly(self):
        """Test time_blocks() surfaces malformed blocks without a window."""
        assert len(ExclusionRule.parse("exc monday <09:00:00 >17:00:00").time_blocks()) == 2

        with pytest.raises(MalformedTimeBlockError):
            ExclusionRule.parse("exc monday <09:00:00 9-17").time_blocks()

    def test_expansion_is_repeatable(self):
        """Test expanding twice gives the same result."""
        rule = ExclusionRule.parse("exc monday <09:00:00 >17:00:00")
        window = _window("2024-11-01", "2024-12-01")

        assert rule.ranges(window) == rule.ranges(window)
