"""
Wallet account model.

Holds the account identity and the denormalized current
balance. The balance is only ever changed by the ledger
engine, and every change is matched by a transaction record
written in the same unit of work.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    String, DateTime, Integer, Numeric, CheckConstraint, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from wallet_ledger.models.base import Base


class Account(Base):
    """
    A custodial wallet account.

    The version column is SQLAlchemy's optimistic concurrency
    counter: an UPDATE that finds a different version than the
    one it read affects zero rows and raises StaleDataError.
    """

    __tablename__ = "accounts"
    __table_args__ = (
        CheckConstraint("balance >= 0", name="ck_accounts_balance_non_negative"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    holder_name: Mapped[str] = mapped_column(String(200), nullable=False)
    balance: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("0")
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<Account {self.id} balance={self.balance}>"
