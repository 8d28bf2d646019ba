"""
Pydantic schemas for ledger operations.

These define the HTTP contract. Amounts arrive as strings or
JSON numbers and are parsed straight into Decimal; the ledger
service re-validates them, so the engine's rules hold for
callers that bypass HTTP too.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import AliasChoices, BaseModel, Field

from wallet_ledger.models.enums import Direction


# --- Request Schemas ---

class DepositRequest(BaseModel):
    account_id: uuid.UUID
    amount: Decimal = Field(gt=0, decimal_places=4)
    remark: str = Field(default="", max_length=255)


class WithdrawalRequest(BaseModel):
    account_id: uuid.UUID
    amount: Decimal = Field(gt=0, decimal_places=4)
    remark: str = Field(default="", max_length=255)


class TransferRequest(BaseModel):
    from_account_id: uuid.UUID
    to_account_id: uuid.UUID
    amount: Decimal = Field(gt=0, decimal_places=4)
    remark: str = Field(default="", max_length=255)


# --- Response Schemas ---

class TransactionResponse(BaseModel):
    # ORM records carry an integer surrogate id; the public id is external_id
    id: uuid.UUID = Field(validation_alias=AliasChoices("external_id", "id"))
    account_id: uuid.UUID
    direction: Direction
    amount: Decimal
    remark: str
    balance_before: Decimal
    balance_after: Decimal
    created_at: datetime

    model_config = {"from_attributes": True}


class TransferResponse(BaseModel):
    """Both legs of a committed transfer."""
    debit: TransactionResponse
    credit: TransactionResponse


class ErrorResponse(BaseModel):
    error: str
    detail: str
