"""Storage layer: account store, transaction log, and the unit of work spanning them."""

from wallet_ledger.repositories.accounts import AccountRepository
from wallet_ledger.repositories.transactions import TransactionLogRepository
from wallet_ledger.repositories.unit_of_work import LedgerScope, UnitOfWork

__all__ = [
    "AccountRepository",
    "TransactionLogRepository",
    "LedgerScope",
    "UnitOfWork",
]
