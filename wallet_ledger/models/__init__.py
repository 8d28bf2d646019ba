"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from wallet_ledger.models.base import Base
from wallet_ledger.models.enums import Direction
from wallet_ledger.models.account import Account
from wallet_ledger.models.transaction import TransactionRecord

__all__ = [
    "Base",
    "Direction",
    "Account",
    "TransactionRecord",
]
