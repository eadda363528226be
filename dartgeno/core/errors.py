"""Exception hierarchy for dataset transformations."""

__all__ = [
    "DartGenoError",
    "ConfigurationError",
    "DomainError",
    "ValidationError",
]


class DartGenoError(Exception):
    """Base class for all errors raised by dartgeno operations."""

    pass


class ConfigurationError(DartGenoError):
    """Caller-supplied arguments are invalid for the dataset's current state.

    Raised e.g. when no requested population remains after unknown labels are
    dropped, or when a locus metric is not present for every locus.
    """

    pass


class DomainError(DartGenoError):
    """Operation invoked against data of the wrong ploidy."""

    pass


class ValidationError(DartGenoError):
    """Internal invariant violation (matrix / metadata mismatch, bad values)."""

    pass
