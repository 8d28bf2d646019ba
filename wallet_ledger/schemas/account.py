"""
Pydantic schemas for account operations.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class AccountOpen(BaseModel):
    """Request to open a new wallet account."""
    holder_name: str = Field(min_length=1, max_length=200)


class AccountResponse(BaseModel):
    id: uuid.UUID
    holder_name: str
    balance: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
