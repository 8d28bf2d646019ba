"""
Account repository — the Account Store backed by SQLAlchemy.

Balance writes go through the mapper's version counter, so a
write based on a stale read fails instead of overwriting a
concurrent change.
"""

import uuid
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from wallet_ledger.errors import NotFoundError
from wallet_ledger.models.account import Account


class AccountRepository:

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, account_id: uuid.UUID) -> Account:
        """Plain point lookup, no lock taken."""
        account = self.db.get(Account, account_id)
        if account is None:
            raise NotFoundError(f"Account {account_id} not found")
        return account

    def find_for_update(
        self, account_ids: Iterable[uuid.UUID]
    ) -> dict[uuid.UUID, Account]:
        """
        Lock and load accounts for a balance mutation.

        Rows are locked one at a time in ascending id order no
        matter which side of a transfer they are on. Two
        transfers running in opposite directions between the
        same pair of accounts therefore queue on the same first
        row instead of each holding the lock the other needs.

        Backends without row locks (SQLite) ignore FOR UPDATE;
        the version counter still catches the conflict at flush.
        """
        locked = {}
        for account_id in sorted(set(account_ids)):
            account = self.db.execute(
                select(Account)
                .where(Account.id == account_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            ).scalar_one_or_none()
            if account is None:
                raise NotFoundError(f"Account {account_id} not found")
            locked[account_id] = account
        return locked

    def save(self, account: Account) -> None:
        """Flush the account's pending changes inside the current unit of work."""
        self.db.add(account)
        self.db.flush()

    def add(self, account: Account) -> Account:
        self.db.add(account)
        self.db.flush()
        return account
