"""
Transaction log repository — append-only storage of records.

Records are only ever inserted and read.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from wallet_ledger.models.transaction import TransactionRecord


class TransactionLogRepository:

    def __init__(self, db: Session):
        self.db = db

    def append(self, record: TransactionRecord) -> TransactionRecord:
        """Insert a record inside the current unit of work."""
        self.db.add(record)
        self.db.flush()
        return record

    def list_by_account(
        self,
        account_id: uuid.UUID,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[TransactionRecord]:
        """Return an account's records, newest first."""
        query = (
            select(TransactionRecord)
            .where(TransactionRecord.account_id == account_id)
            # id breaks ties between records sharing a timestamp
            .order_by(
                TransactionRecord.created_at.desc(),
                TransactionRecord.id.desc(),
            )
            .offset(offset)
        )
        if limit is not None:
            query = query.limit(limit)
        return list(self.db.execute(query).scalars().all())
