"""
Domain models for time ranges and calendar lookups.
"""

from dataclasses import dataclass
from typing import List

from pendulum import DateTime


# 0=Monday, 6=Sunday (same numbering as DateTime.weekday())
WEEKDAYS = {
    "mon": 0,
    "monday": 0,
    "tue": 1,
    "tuesday": 1,
    "wed": 2,
    "wednesday": 2,
    "thu": 3,
    "thursday": 3,
    "fri": 4,
    "friday": 4,
    "sat": 5,
    "saturday": 5,
    "sun": 6,
    "sunday": 6,
}

WEEKDAY_NAMES = [
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
]


def day_of_week(name: str) -> int:
    """
    Resolve a weekday name to its index.

    Accepts full English names and three-letter abbreviations, in any case.
    Returns -1 if the name is not a weekday.
    """
    return WEEKDAYS.get(name.lower(), -1)


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable half-open time range [start, end).

    Inverted ranges (end before start) are representable; they come out of
    explicit time blocks such as 17:00:00-09:00:00 and are treated as empty
    by the calculator.
    """
    start: DateTime
    end: DateTime

    def is_empty(self) -> bool:
        """Return True if the range covers no time at all."""
        return self.end <= self.start

    def duration_seconds(self) -> int:
        """Return the duration in seconds (negative for inverted ranges)."""
        return int((self.end - self.start).total_seconds())

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int(self.duration_seconds() / 60)

    def contains(self, instant: DateTime) -> bool:
        """Check if an instant lies within this range."""
        return self.start <= instant < self.end

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another."""
        return self.start < other.end and self.end > other.start

    def intersect(self, other: "TimeRange") -> "TimeRange | None":
        """
        Calculate the intersection of two time ranges.
        Returns None if there is no overlap.
        """
        if not self.overlaps(other):
            return None

        start = max(self.start, other.start)
        end = min(self.end, other.end)

        return TimeRange(start=start, end=end)

    def subtract(self, other: "TimeRange") -> List["TimeRange"]:
        """
        Remove another range from this one.

        Example:
        Self:  09:00 - 17:00
        Other: 12:00 - 13:00
        Result: [09:00-12:00, 13:00-17:00]
        """
        if not self.overlaps(other):
            return [self]

        remaining: List[TimeRange] = []
        if self.start < other.start:
            remaining.append(TimeRange(start=self.start, end=other.start))
        if other.end < self.end:
            remaining.append(TimeRange(start=other.end, end=self.end))

        return remaining

    def __str__(self) -> str:
        return (
            f"{self.start.format('YYYY-MM-DD HH:mm:ss')} - "
            f"{self.end.format('YYYY-MM-DD HH:mm:ss')}"
        )
