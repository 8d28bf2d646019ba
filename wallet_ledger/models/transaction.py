"""
Transaction record model.

One row per committed balance mutation. Records are
append-only: once written they are never updated or deleted,
so the log can always explain how an account reached its
current balance.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    String, DateTime, Numeric, ForeignKey, Index,
    CheckConstraint, Enum as SAEnum, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from wallet_ledger.models.base import Base
from wallet_ledger.models.enums import Direction


class TransactionRecord(Base):
    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transactions_amount_positive"),
        Index("ix_transactions_account_recency", "account_id", "created_at", "id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    external_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, unique=True, nullable=False, default=uuid.uuid4
    )
    account_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("accounts.id"), nullable=False
    )
    direction: Mapped[Direction] = mapped_column(
        SAEnum(Direction, name="direction_enum", create_constraint=True),
        nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(19, 4), nullable=False)
    remark: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    balance_before: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False
    )
    balance_after: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    def __repr__(self) -> str:
        return (
            f"<TransactionRecord {self.direction.value} {self.amount} "
            f"{self.balance_before} -> {self.balance_after}>"
        )
