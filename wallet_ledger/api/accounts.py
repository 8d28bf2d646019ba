"""
Account API endpoints.

Opening an account and reading it back, plus the per-account
transaction history. Ledger errors propagate to the app-level
exception handler, which maps them to status codes.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from wallet_ledger.api.dependencies import get_ledger_service
from wallet_ledger.errors import LedgerError
from wallet_ledger.models.base import get_db
from wallet_ledger.schemas.account import AccountOpen, AccountResponse
from wallet_ledger.schemas.transaction import TransactionResponse
from wallet_ledger.services.account_service import AccountService
from wallet_ledger.services.ledger_service import LedgerService

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.post("", response_model=AccountResponse, status_code=201)
def open_account(
    request: AccountOpen,
    db: Session = Depends(get_db),
):
    """Open a new account with a zero balance."""
    service = AccountService(db)
    try:
        account = service.open_account(request)
        db.commit()
        return account
    except LedgerError:
        db.rollback()
        raise


@router.get("/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: str,
    db: Session = Depends(get_db),
):
    """Get account details, including the current balance."""
    return AccountService(db).get_account(account_id)


@router.get(
    "/{account_id}/transactions",
    response_model=list[TransactionResponse],
)
def list_transactions(
    account_id: str,
    limit: int | None = Query(default=None, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    service: LedgerService = Depends(get_ledger_service),
):
    """Get all transaction records for an account, newest first."""
    return service.list_transactions(account_id, limit=limit, offset=offset)
