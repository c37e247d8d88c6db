"""
Exclusion rules: declarative statements about untrackable time.

An exclusion represents time such as holidays, weekends, evenings and lunch.
Rules are written one per line:

    exc monday <block> [<block> ...]    every Monday, one range per block
    exc day on <date>                   a single day made trackable again
    exc day off <date>                  a single untrackable day

Parsing only validates the shape of the line. Time blocks and dates are
interpreted when the rule is expanded over a query window.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import List, Optional, Tuple

import pendulum

from .exceptions import MalformedDateError, UnrecognizedSyntaxError
from .models import TimeRange, day_of_week
from .time_block import TimeBlock


class RuleKind(str, Enum):
    DAY_ON = "day on"
    DAY_OFF = "day off"
    WEEKDAY = "weekday"


@dataclass(frozen=True)
class ExclusionRule:
    """
    One parsed exclusion rule.

    Use ``ExclusionRule.parse(line)`` to build instances; the token sequence
    alone determines ``kind``, ``additive`` and every expansion.
    """
    tokens: Tuple[str, ...]
    kind: RuleKind
    additive: bool = False
    weekday: Optional[int] = None  # 0=Monday, 6=Sunday

    @classmethod
    def parse(cls, line: str) -> "ExclusionRule":
        """
        Validate a rule line and classify it.

        Raises:
            UnrecognizedSyntaxError: If the line is not one of the rule shapes
        """
        tokens = tuple(line.split())

        if len(tokens) >= 2 and tokens[0] == "exc":
            if len(tokens) == 4 and tokens[1] == "day" and tokens[2] == "on":
                return cls(tokens=tokens, kind=RuleKind.DAY_ON, additive=True)

            if len(tokens) == 4 and tokens[1] == "day" and tokens[2] == "off":
                return cls(tokens=tokens, kind=RuleKind.DAY_OFF, additive=False)

            weekday = day_of_week(tokens[1])
            if weekday != -1:
                return cls(
                    tokens=tokens,
                    kind=RuleKind.WEEKDAY,
                    additive=False,
                    weekday=weekday
                )

        raise UnrecognizedSyntaxError(line)

    initialize = parse

    @property
    def block_tokens(self) -> Tuple[str, ...]:
        """Time block tokens of a weekday rule (empty for single-day rules)."""
        if self.kind is RuleKind.WEEKDAY:
            return self.tokens[2:]
        return ()

    def time_blocks(self) -> List[TimeBlock]:
        """
        Parse every time block of this rule.

        Raises:
            MalformedTimeBlockError: On the first malformed block
        """
        return [TimeBlock.parse(token) for token in self.block_tokens]

    def day(self) -> date:
        """
        Return the calendar date of a 'day on'/'day off' rule.

        Raises:
            MalformedDateError: If the date token cannot be parsed
            ValueError: If called on a weekday rule
        """
        if self.kind is RuleKind.WEEKDAY:
            raise ValueError(f"Weekday rule has no single date: {self.serialize()}")

        token = self.tokens[3]
        try:
            parsed = pendulum.parse(token, exact=True)
        except ValueError as exc:
            raise MalformedDateError(token) from exc

        if isinstance(parsed, datetime):
            return parsed.date()
        if isinstance(parsed, date):
            return parsed

        raise MalformedDateError(token)

    def ranges(self, window: TimeRange) -> List[TimeRange]:
        """
        Yield the concrete ranges this rule covers within a query window.

        Single-day rules produce at most one day-long range, and only if it
        overlaps the window. Weekday rules produce one range per time block
        for every matching calendar day from the window's start day up to its
        end; those ranges are not clipped to the window.

        Raises:
            MalformedTimeBlockError: If a block of a matching day is malformed
            MalformedDateError: If a single-day rule has an invalid date
        """
        results: List[TimeRange] = []

        if self.kind is not RuleKind.WEEKDAY:
            day = self.day()
            start = window.start.set(
                year=day.year,
                month=day.month,
                day=day.day,
                hour=0,
                minute=0,
                second=0,
                microsecond=0
            )
            candidate = TimeRange(start=start, end=start.add(days=1))
            if window.overlaps(candidate):
                results.append(candidate)
            return results

        current = window.start.start_of("day")

        while current < window.end:
            if current.weekday() == self.weekday:
                day_end = current.add(days=1)

                # One range for each time block on this day
                for token in self.block_tokens:
                    results.append(TimeBlock.parse(token).resolve(current, day_end))

            current = current.add(days=1)

        return results

    def serialize(self) -> str:
        """Reproduce the rule line."""
        return " ".join(self.tokens)

    def dump(self) -> str:
        """Return a diagnostic line."""
        return "Exclusion " + " ".join(self.tokens)

    def __str__(self) -> str:
        return self.serialize()
