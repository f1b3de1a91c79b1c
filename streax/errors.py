"""Exception types for StreaX.

Insufficient saver balances are not errors: redemption returns a falsy
result instead. These exceptions cover invalid input and bad documents.
"""


class StreaxError(Exception):
    """Base exception for StreaX."""


class ValidationError(StreaxError, ValueError):
    """Raised when user input (profile fields, task names, amounts) is invalid."""


class MalformedDataError(StreaxError, ValueError):
    """Raised when a persisted or restored document has the wrong shape."""


class IncompatibleBackupError(StreaxError):
    """Raised when a backup was written by an unsupported schema version."""

    def __init__(self, found: str, expected: str):
        self.found = found
        self.expected = expected
        super().__init__(f"Incompatible backup version: {found!r} (expected {expected!r})")


class NoDataError(StreaxError):
    """Raised when an operation needs saved data and there is none."""


class TimerStateError(StreaxError):
    """Raised when a timer action is not valid in the current phase."""

    def __init__(self, action: str, phase: str):
        self.action = action
        self.phase = phase
        super().__init__(f"Cannot {action} while timer is {phase}")
