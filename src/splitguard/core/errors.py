"""Exception hierarchy for splitguard.

Estimators never raise on short history or zero denominators; they return
neutral values instead. Exceptions are reserved for inputs the caller
must fix: bad configuration, malformed orders and executions, and
lifecycle misuse.
"""


class SplitguardError(Exception):
    """Base class for all splitguard errors."""


class ConfigurationError(SplitguardError, ValueError):
    """Strategy configuration failed validation."""


class InvalidOrderError(SplitguardError, ValueError):
    """An order descriptor is inconsistent or cannot be split."""


class InvalidExecutionError(SplitguardError, ValueError):
    """An execution notice carries a non-positive quantity or price."""


class StrategyStateError(SplitguardError, RuntimeError):
    """A lifecycle transition is not allowed from the current state."""
