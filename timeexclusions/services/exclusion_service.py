"""
Application services for expanding configured exclusion rules.

The service turns configured rule lines into ``ExclusionRule`` objects and
delegates the actual calculations to the domain-level
``ExclusionCalculator``. This keeps the CLI thin and lets tests build a
service straight from a list of lines.
"""

from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

from pendulum import DateTime

from ..config import ExclusionConfig
from ..domain.exceptions import ExclusionError
from ..domain.exclusion import ExclusionRule
from ..domain.exclusion_calculator import ExclusionCalculator
from ..domain.models import TimeRange


logger = logging.getLogger(__name__)


class ExclusionService:
    """
    Orchestrates rule loading and expansion for the configuration layer.
    """

    def __init__(
        self,
        rules: Sequence[ExclusionRule],
        timezone: str = "Europe/Berlin",
    ) -> None:
        self._rules = list(rules)
        self._timezone = timezone
        self._calculator = ExclusionCalculator(self._rules)

    @classmethod
    def from_config(cls, config: ExclusionConfig) -> "ExclusionService":
        """Build a service for a loaded configuration."""
        return cls(rules=config.get_rules(), timezone=config.timezone)

    @classmethod
    def from_lines(
        cls,
        lines: Sequence[str],
        timezone: str = "Europe/Berlin",
    ) -> "ExclusionService":
        """Build a service from raw rule lines."""
        return cls(rules=cls.load_rules(lines), timezone=timezone)

    @staticmethod
    def load_rules(lines: Sequence[str]) -> List[ExclusionRule]:
        """
        Parse rule lines, skipping blank ones.

        Raises:
            UnrecognizedSyntaxError: For the first line that is not a rule
        """
        rules: List[ExclusionRule] = []

        for position, line in enumerate(lines, 1):
            if not line.strip():
                continue
            try:
                rules.append(ExclusionRule.parse(line))
            except ExclusionError as exc:
                logger.error("Exclusion #%d rejected: %s", position, exc)
                raise

        logger.debug("Parsed %d exclusion rule(s)", len(rules))
        return rules

    @property
    def rules(self) -> List[ExclusionRule]:
        return list(self._rules)

    @property
    def timezone(self) -> str:
        return self._timezone

    def window(self, start: DateTime, end: DateTime) -> TimeRange:
        """
        Build a query window.

        Raises:
            ValueError: If the window ends before it starts
        """
        if end < start:
            raise ValueError(f"Window end {end} is before window start {start}")

        return TimeRange(start=start, end=end)

    def expand(
        self,
        start: DateTime,
        end: DateTime,
    ) -> List[Tuple[ExclusionRule, List[TimeRange]]]:
        """Expand each rule over [start, end)."""
        window = self.window(start, end)
        expanded = self._calculator.ranges_by_rule(window)

        logger.debug(
            "Expanded %d rule(s) over %s into %d range(s)",
            len(expanded),
            window,
            sum(len(ranges) for _, ranges in expanded),
        )
        return expanded

    def excluded(self, start: DateTime, end: DateTime) -> List[TimeRange]:
        """Merged untrackable time within [start, end)."""
        return self._calculator.excluded_ranges(self.window(start, end))

    def trackable(self, start: DateTime, end: DateTime) -> List[TimeRange]:
        """Trackable time within [start, end)."""
        return self._calculator.trackable_ranges(self.window(start, end))
