"""
Domain layer - Pure exclusion rule logic without I/O.
"""

from .exceptions import (
    ExclusionError,
    MalformedDateError,
    MalformedTimeBlockError,
    UnrecognizedSyntaxError,
)
from .exclusion import ExclusionRule, RuleKind
from .exclusion_calculator import ExclusionCalculator
from .models import TimeRange, day_of_week
from .time_block import BlockKind, TimeBlock

__all__ = [
    "BlockKind",
    "ExclusionCalculator",
    "ExclusionError",
    "ExclusionRule",
    "MalformedDateError",
    "MalformedTimeBlockError",
    "RuleKind",
    "TimeBlock",
    "TimeRange",
    "UnrecognizedSyntaxError",
    "day_of_week",
]
