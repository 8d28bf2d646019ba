"""
Transaction API endpoints.

The API layer is thin: it parses the request and hands off to
the LedgerService, which owns validation, the unit of work and
the commit.
"""

from fastapi import APIRouter, Depends

from wallet_ledger.api.dependencies import get_ledger_service
from wallet_ledger.schemas.transaction import (
    DepositRequest,
    WithdrawalRequest,
    TransferRequest,
    TransactionResponse,
    TransferResponse,
)
from wallet_ledger.services.ledger_service import LedgerService

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.post("/deposit", response_model=TransactionResponse, status_code=201)
def deposit(
    request: DepositRequest,
    service: LedgerService = Depends(get_ledger_service),
):
    """Deposit money into an account."""
    return service.deposit(request.account_id, request.amount, request.remark)


@router.post("/withdraw", response_model=TransactionResponse, status_code=201)
def withdraw(
    request: WithdrawalRequest,
    service: LedgerService = Depends(get_ledger_service),
):
    """Withdraw money from an account."""
    return service.withdraw(request.account_id, request.amount, request.remark)


@router.post("/transfer", response_model=TransferResponse, status_code=201)
def transfer(
    request: TransferRequest,
    service: LedgerService = Depends(get_ledger_service),
):
    """Transfer money between two accounts."""
    debit, credit = service.transfer(
        request.from_account_id,
        request.to_account_id,
        request.amount,
        request.remark,
    )
    return TransferResponse(
        debit=TransactionResponse.model_validate(debit),
        credit=TransactionResponse.model_validate(credit),
    )
