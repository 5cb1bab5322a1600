"""Error taxonomy for ledger operations."""


class LedgerError(Exception):
    """Base class for attendance ledger errors."""


class ValidationError(LedgerError):
    """Raised when a caller supplies missing or invalid fields."""


class StoreError(LedgerError):
    """Raised when the backing spreadsheet cannot be reached."""


class StoreReadError(StoreError):
    """Raised when rows cannot be read from the store."""


class StoreWriteError(StoreError):
    """Raised when rows cannot be written to the store."""
