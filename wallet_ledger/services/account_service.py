"""
Account service — opens wallet accounts and looks them up.

Identity and credentials live elsewhere. This service only
creates the balance-holding row the ledger operates on; a
new account always starts at zero and is funded through a
deposit, never by writing the balance directly.
"""

from decimal import Decimal

from sqlalchemy.orm import Session

from wallet_ledger.errors import InvalidArgumentError
from wallet_ledger.models.account import Account
from wallet_ledger.repositories.accounts import AccountRepository
from wallet_ledger.schemas.account import AccountOpen
from wallet_ledger.services.ledger_service import parse_account_id


class AccountService:

    def __init__(self, db: Session):
        self.db = db
        self.accounts = AccountRepository(db)

    def open_account(self, request: AccountOpen) -> Account:
        """Create an account with a zero balance. The caller commits."""
        holder_name = request.holder_name.strip()
        if not holder_name:
            raise InvalidArgumentError("holder_name must not be blank")

        return self.accounts.add(
            Account(holder_name=holder_name, balance=Decimal("0"))
        )

    def get_account(self, account_id) -> Account:
        """Get an account by ID."""
        return self.accounts.find_by_id(parse_account_id(account_id))
