"""
Domain-specific exception hierarchy for exclusion rules.
"""


class ExclusionError(Exception):
    """Base class for all exclusion rule errors."""


class UnrecognizedSyntaxError(ExclusionError, ValueError):
    """Raised when a rule line matches none of the accepted rule shapes."""

    def __init__(self, line: str):
        self.line = line
        super().__init__(f"Unrecognized exclusion syntax: '{line}'.")


class MalformedTimeBlockError(ExclusionError, ValueError):
    """Raised when a time block token does not follow the block grammar."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Malformed time block '{token}'.")


class MalformedDateError(ExclusionError, ValueError):
    """Raised when the date of a 'day on'/'day off' rule cannot be parsed."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Malformed exclusion date '{token}'.")
