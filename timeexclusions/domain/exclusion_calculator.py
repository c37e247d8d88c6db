"""
Combines exclusion rules into excluded and trackable time.

Pure domain logic without any external dependencies (no configuration
files, no I/O).
"""

from typing import Iterable, List, Tuple

from pendulum import DateTime

from .exclusion import ExclusionRule
from .models import TimeRange


class ExclusionCalculator:
    """
    Calculates untrackable time from a set of exclusion rules.

    Algorithm:
    1. Expand every non-additive rule over the window
    2. Clip the ranges to the window and drop empty ones
    3. Subtract the days of all additive ('day on') rules
    4. Merge overlapping or adjacent ranges
    5. Trackable time is whatever remains of the window
    """

    def __init__(self, rules: Iterable[ExclusionRule]):
        self.rules: List[ExclusionRule] = list(rules)

    def ranges_by_rule(
        self,
        window: TimeRange
    ) -> List[Tuple[ExclusionRule, List[TimeRange]]]:
        """Expand each rule on its own, unclipped and unmerged."""
        return [(rule, rule.ranges(window)) for rule in self.rules]

    def excluded_ranges(self, window: TimeRange) -> List[TimeRange]:
        """
        Calculate the merged, sorted untrackable ranges within the window.
        """
        excluded: List[TimeRange] = []

        # Step 1 + 2: Collect all removing rules, clipped to the window
        for rule in self.rules:
            if rule.additive:
                continue

            for time_range in rule.ranges(window):
                clipped = window.intersect(time_range)
                if clipped and not clipped.is_empty():
                    excluded.append(clipped)

        # Step 3: Days marked 'on' are trackable again
        for rule in self.rules:
            if not rule.additive:
                continue

            for day in rule.ranges(window):
                excluded = self._subtract_from_all(excluded, day)

        # Step 4: Merge
        return self._merge_adjacent_ranges(excluded)

    def trackable_ranges(self, window: TimeRange) -> List[TimeRange]:
        """
        Calculate the trackable ranges within the window.

        Example:
        Window: Mon 00:00 - Tue 00:00
        Excluded: [00:00-09:00, 17:00-24:00]
        Result: [09:00-17:00]
        """
        trackable: List[TimeRange] = []
        current_start = window.start

        for excluded in self.excluded_ranges(window):
            if current_start < excluded.start:
                trackable.append(TimeRange(start=current_start, end=excluded.start))

            current_start = max(current_start, excluded.end)

        if current_start < window.end:
            trackable.append(TimeRange(start=current_start, end=window.end))

        return trackable

    def is_excluded(self, instant: DateTime) -> bool:
        """Check if a single instant falls into untrackable time."""
        day = TimeRange(
            start=instant.start_of("day"),
            end=instant.start_of("day").add(days=1)
        )
        return any(r.contains(instant) for r in self.excluded_ranges(day))

    def _subtract_from_all(
        self,
        ranges: List[TimeRange],
        removed: TimeRange
    ) -> List[TimeRange]:
        """Remove one range from every range in the list."""
        remaining: List[TimeRange] = []

        for time_range in ranges:
            remaining.extend(time_range.subtract(removed))

        return remaining

    def _merge_adjacent_ranges(
        self,
        ranges: List[TimeRange]
    ) -> List[TimeRange]:
        """
        Merge overlapping or adjacent time ranges.

        Example: [09:00-10:00, 10:00-11:00] -> [09:00-11:00]
        """
        if not ranges:
            return []

        sorted_ranges = sorted(ranges, key=lambda r: r.start)
        merged: List[TimeRange] = [sorted_ranges[0]]

        for current in sorted_ranges[1:]:
            last = merged[-1]

            if current.start <= last.end:
                merged[-1] = TimeRange(
                    start=last.start,
                    end=max(last.end, current.end)
                )
            else:
                merged.append(current)

        return merged
