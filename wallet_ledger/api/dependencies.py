"""FastAPI dependencies shared by the routers."""

from fastapi import Depends
from sqlalchemy.orm import sessionmaker

from wallet_ledger.models.base import get_session_factory
from wallet_ledger.services.ledger_service import LedgerService


def get_ledger_service(
    session_factory: sessionmaker = Depends(get_session_factory),
) -> LedgerService:
    """The ledger engine opens its own sessions, so it gets the factory, not a session."""
    return LedgerService(session_factory)
