"""
Time block micro-parser.

A time block describes part of a calendar day:

    <HH:MM:SS           before this time    [day start, HH:MM:SS)
    >HH:MM:SS           after this time     [HH:MM:SS, day end)
    HH:MM:SS-HH:MM:SS   explicit range      [HH:MM:SS, HH:MM:SS)

Hours may be written with one digit and seconds may be omitted (``<8:00``).
"""

from dataclasses import dataclass
from datetime import time
from enum import Enum
from functools import lru_cache
from typing import Optional

from pendulum import DateTime

from .exceptions import MalformedTimeBlockError
from .models import TimeRange


class TokenCursor:
    """Left-to-right scanner over a single token."""

    def __init__(self, text: str):
        self.text = text
        self.position = 0

    def at_end(self) -> bool:
        return self.position >= len(self.text)

    def skip(self, char: str) -> bool:
        """Consume ``char`` if it is next in the input."""
        if self.text.startswith(char, self.position):
            self.position += len(char)
            return True
        return False

    def get_digits(self, min_count: int, max_count: int) -> Optional[int]:
        """Consume between min_count and max_count ASCII digits."""
        end = self.position
        while (
            end < len(self.text)
            and end - self.position < max_count
            and self.text[end] in "0123456789"
        ):
            end += 1

        if end - self.position < min_count:
            return None

        value = int(self.text[self.position:end])
        self.position = end
        return value

    def get_hms(self) -> Optional[time]:
        """
        Consume a clock time H[H]:MM[:SS].

        The cursor is left untouched when no valid time is found.
        """
        checkpoint = self.position

        hours = self.get_digits(1, 2)
        minutes = None
        if hours is not None and self.skip(":"):
            minutes = self.get_digits(2, 2)

        if minutes is None:
            self.position = checkpoint
            return None

        seconds = 0
        if self.skip(":"):
            parsed_seconds = self.get_digits(2, 2)
            if parsed_seconds is None:
                self.position = checkpoint
                return None
            seconds = parsed_seconds

        if hours > 23 or minutes > 59 or seconds > 59:
            self.position = checkpoint
            return None

        return time(hour=hours, minute=minutes, second=seconds)


class BlockKind(str, Enum):
    BEFORE = "before"
    AFTER = "after"
    RANGE = "range"


@dataclass(frozen=True)
class TimeBlock:
    """A parsed time block token."""
    kind: BlockKind
    token: str
    start: Optional[time] = None
    end: Optional[time] = None

    @classmethod
    def parse(cls, token: str) -> "TimeBlock":
        """
        Parse a time block token.

        Raises:
            MalformedTimeBlockError: If the token does not follow the grammar
        """
        return _parse_time_block(token)

    def resolve(self, day_start: DateTime, day_end: DateTime) -> TimeRange:
        """Anchor this block to the calendar day [day_start, day_end)."""
        if self.kind is BlockKind.BEFORE:
            return TimeRange(start=day_start, end=_at(day_start, self.end))

        if self.kind is BlockKind.AFTER:
            return TimeRange(start=_at(day_start, self.start), end=day_end)

        return TimeRange(
            start=_at(day_start, self.start),
            end=_at(day_start, self.end)
        )

    def __str__(self) -> str:
        return self.token


def _at(day: DateTime, clock: time) -> DateTime:
    """Place a clock time on the calendar day of ``day``."""
    return day.set(
        hour=clock.hour,
        minute=clock.minute,
        second=clock.second,
        microsecond=0
    )


@lru_cache(maxsize=256)
def _parse_time_block(token: str) -> TimeBlock:
    cursor = TokenCursor(token)

    if cursor.skip("<"):
        clock = cursor.get_hms()
        if clock is not None and cursor.at_end():
            return TimeBlock(kind=BlockKind.BEFORE, token=token, end=clock)
        raise MalformedTimeBlockError(token)

    if cursor.skip(">"):
        clock = cursor.get_hms()
        if clock is not None and cursor.at_end():
            return TimeBlock(kind=BlockKind.AFTER, token=token, start=clock)
        raise MalformedTimeBlockError(token)

    first = cursor.get_hms()
    if first is not None and cursor.skip("-"):
        second = cursor.get_hms()
        if second is not None and cursor.at_end():
            return TimeBlock(kind=BlockKind.RANGE, token=token, start=first, end=second)

    raise MalformedTimeBlockError(token)


def resolve_time_block(token: str, day_start: DateTime, day_end: DateTime) -> TimeRange:
    """Parse ``token`` and anchor it to the calendar day [day_start, day_end)."""
    return TimeBlock.parse(token).resolve(day_start, day_end)
