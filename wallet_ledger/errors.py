"""
Ledger error taxonomy.

Every failure the engine reports is one of four kinds. Each
carries a stable code and the HTTP status an adapter should
answer with, so callers can tell them apart without parsing
messages.
"""


class LedgerError(Exception):
    """Base class for all errors raised by the ledger engine."""

    code: str = "LEDGER_ERROR"
    http_status: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(LedgerError):
    code = "NOT_FOUND"
    http_status = 404


class InvalidArgumentError(LedgerError):
    code = "INVALID_ARGUMENT"
    http_status = 400


class InsufficientFundsError(LedgerError):
    code = "INSUFFICIENT_FUNDS"
    http_status = 422

    def __init__(self, account_id, available, requested) -> None:
        self.account_id = account_id
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient balance on account {account_id}: "
            f"available={available}, requested={requested}"
        )


class StorageError(LedgerError):
    """The store was unavailable or the unit of work failed to commit."""

    code = "STORAGE_ERROR"
    http_status = 503
    transient: bool = False


class ConcurrentUpdateError(StorageError):
    """
    Another writer changed or held an account row first.

    Raised inside a unit of work; the engine replays the whole
    read-validate-write sequence when it sees one.
    """

    transient = True
