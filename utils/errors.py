class FinanceError(Exception):
    """Base class for errors surfaced to the user."""


class ValidationError(FinanceError, ValueError):
    """A record is missing required fields or holds invalid values. Nothing was written."""


class StorageError(FinanceError):
    """A persistence operation failed. The in-memory snapshot may be stale; reload it."""


class ImportFormatError(FinanceError, ValueError):
    """An import payload has the wrong shape. Nothing was imported."""
