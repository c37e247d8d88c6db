"""
timeexclusions - Exclusion rules for untrackable time (weekends, off-hours, holidays).
"""

__version__ = "0.1.0"
