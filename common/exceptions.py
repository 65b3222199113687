"""Domain-specific exceptions for the expense store and its front ends."""

class ValidationError(ValueError):
    """Raised when user input cannot be turned into an expense or view mode."""


class RecordNotFoundError(LookupError):
    """Raised when an expense id or displayed position does not resolve to a record."""


class PersistenceError(IOError):
    """Raised by storage backends when a slot cannot be read or written."""
