"""
Storage contracts the ledger engine depends on.

The engine only talks to these two shapes. The SQLAlchemy
repositories in this package implement them; tests may pass
any object that conforms.
"""

import uuid
from typing import Iterable, Protocol

from wallet_ledger.models.account import Account
from wallet_ledger.models.transaction import TransactionRecord


class AccountStore(Protocol):
    def find_by_id(self, account_id: uuid.UUID) -> Account: ...

    def find_for_update(
        self, account_ids: Iterable[uuid.UUID]
    ) -> dict[uuid.UUID, Account]: ...

    def save(self, account: Account) -> None: ...

    def add(self, account: Account) -> Account: ...


class TransactionLog(Protocol):
    def append(self, record: TransactionRecord) -> TransactionRecord: ...

    def list_by_account(
        self,
        account_id: uuid.UUID,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[TransactionRecord]: ...
