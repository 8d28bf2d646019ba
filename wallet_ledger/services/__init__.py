"""Business logic services."""

from wallet_ledger.services.ledger_service import LedgerService
from wallet_ledger.services.account_service import AccountService

__all__ = ["LedgerService", "AccountService"]
