"""
Ledger service — the core of the wallet.

This service enforces the rules that protect money:
1. A balance never goes negative (no overdraft)
2. A transfer moves value, it never creates or destroys it
3. Every balance write is recorded by exactly one transaction
   record, committed in the same unit of work
4. Both legs of a transfer become visible together or not at all

No other code writes account balances. All financial
operations go through this service.
"""

import logging
import time
import uuid
from decimal import Decimal, InvalidOperation
from typing import Callable, TypeVar

from sqlalchemy.orm import sessionmaker

from wallet_ledger.config import get_settings
from wallet_ledger.errors import (
    ConcurrentUpdateError,
    InsufficientFundsError,
    InvalidArgumentError,
    StorageError,
)
from wallet_ledger.models.account import Account
from wallet_ledger.models.enums import Direction
from wallet_ledger.models.transaction import TransactionRecord
from wallet_ledger.repositories.unit_of_work import LedgerScope, UnitOfWork

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Matches the scale of the Numeric(19, 4) money columns.
AMOUNT_QUANTUM = Decimal("0.0001")
MAX_REMARK_LENGTH = 255


def parse_account_id(value) -> uuid.UUID:
    """Accept a UUID or its string form; anything else is a malformed identifier."""
    if isinstance(value, uuid.UUID):
        return value
    if isinstance(value, str):
        try:
            return uuid.UUID(value)
        except ValueError:
            pass
    raise InvalidArgumentError(f"Malformed account identifier: {value!r}")


def parse_amount(value) -> Decimal:
    """
    Turn a caller-supplied amount into an exact positive Decimal.

    Floats are refused outright, and so is any precision beyond
    the four places the money columns store.
    """
    if isinstance(value, (bool, float)):
        raise InvalidArgumentError(
            f"Amount must be a Decimal, int or decimal string, got {type(value).__name__}"
        )
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidArgumentError(f"Malformed amount: {value!r}")

    if not amount.is_finite():
        raise InvalidArgumentError(f"Amount must be finite, got {amount}")
    if amount <= 0:
        raise InvalidArgumentError(f"Amount must be positive, got {amount}")
    if amount.as_tuple().exponent < AMOUNT_QUANTUM.as_tuple().exponent:
        raise InvalidArgumentError(
            f"Amount {amount} has more than 4 decimal places"
        )
    return amount.quantize(AMOUNT_QUANTUM)


def parse_remark(value) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise InvalidArgumentError("Remark must be a string")
    if len(value) > MAX_REMARK_LENGTH:
        raise InvalidArgumentError(
            f"Remark must be at most {MAX_REMARK_LENGTH} characters"
        )
    return value


class LedgerService:
    """
    Deposit, withdraw, transfer and list transactions.

    Unlike the request-scoped services, this one owns its
    transaction boundary: every operation runs inside a unit of
    work opened from the session factory. That lets it replay
    the whole read-validate-write sequence in a fresh session
    when it loses a race for an account row.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        max_retries: int | None = None,
        retry_backoff: float | None = None,
    ):
        settings = get_settings()
        self.uow = UnitOfWork(session_factory)
        self.max_retries = max(
            1, max_retries if max_retries is not None else settings.LEDGER_MAX_RETRIES
        )
        self.retry_backoff = (
            retry_backoff
            if retry_backoff is not None
            else settings.LEDGER_RETRY_BACKOFF_SECONDS
        )

    def _run(self, operation: str, work: Callable[[LedgerScope], T]) -> T:
        """
        Run work inside a unit of work, replaying it on contention.

        Only ConcurrentUpdateError is retried. Validation errors
        and non-transient storage failures propagate on the first
        attempt; the unit of work has already rolled back by then.
        """
        attempt = 0
        while True:
            attempt += 1
            try:
                with self.uow.begin() as scope:
                    return work(scope)
            except ConcurrentUpdateError as e:
                if attempt >= self.max_retries:
                    logger.error(
                        "%s abandoned after %d attempts: %s",
                        operation, attempt, e.message,
                    )
                    raise StorageError(
                        f"{operation} failed after {attempt} attempts "
                        f"due to concurrent updates"
                    ) from e
                logger.warning(
                    "%s hit contention (attempt %d/%d), retrying",
                    operation, attempt, self.max_retries,
                )
                time.sleep(self.retry_backoff * attempt)
            except StorageError:
                logger.exception("%s failed in storage", operation)
                raise

    @staticmethod
    def _record(
        account: Account,
        direction: Direction,
        amount: Decimal,
        remark: str,
        balance_before: Decimal,
    ) -> TransactionRecord:
        return TransactionRecord(
            account_id=account.id,
            direction=direction,
            amount=amount,
            remark=remark,
            balance_before=balance_before,
            balance_after=account.balance,
        )

    def deposit(self, account_id, amount, remark: str = "") -> TransactionRecord:
        """
        Credit an account.

        The account row is locked for the duration of the unit,
        so the balance read here is the one the write replaces.
        """
        account_id = parse_account_id(account_id)
        amount = parse_amount(amount)
        remark = parse_remark(remark)

        def work(scope: LedgerScope) -> TransactionRecord:
            account = scope.accounts.find_for_update([account_id])[account_id]
            balance_before = account.balance
            account.balance = balance_before + amount
            scope.accounts.save(account)
            return scope.transactions.append(self._record(
                account, Direction.CREDIT, amount, remark, balance_before,
            ))

        record = self._run("deposit", work)
        logger.info(
            "Deposited %s into %s (%s -> %s)",
            amount, account_id, record.balance_before, record.balance_after,
        )
        return record

    def withdraw(self, account_id, amount, remark: str = "") -> TransactionRecord:
        """
        Debit an account.

        The funds check and the write use the same locked
        snapshot, so two withdrawals can never both pass the
        check against a balance that only covers one of them.
        """
        account_id = parse_account_id(account_id)
        amount = parse_amount(amount)
        remark = parse_remark(remark)

        def work(scope: LedgerScope) -> TransactionRecord:
            account = scope.accounts.find_for_update([account_id])[account_id]
            balance_before = account.balance
            if balance_before < amount:
                raise InsufficientFundsError(account_id, balance_before, amount)
            account.balance = balance_before - amount
            scope.accounts.save(account)
            return scope.transactions.append(self._record(
                account, Direction.DEBIT, amount, remark, balance_before,
            ))

        record = self._run("withdraw", work)
        logger.info(
            "Withdrew %s from %s (%s -> %s)",
            amount, account_id, record.balance_before, record.balance_after,
        )
        return record

    def transfer(
        self, from_id, to_id, amount, remark: str = ""
    ) -> tuple[TransactionRecord, TransactionRecord]:
        """
        Move money from one account to another.

        Both balance writes and both records belong to a single
        unit of work:
            lock both rows (ascending id order)
            validate the sender's funds
            write sender, write receiver
            append DEBIT on sender, append CREDIT on receiver
            commit
        If anything fails the unit rolls back and neither leg is
        visible. Returns (debit_record, credit_record).
        """
        from_id = parse_account_id(from_id)
        to_id = parse_account_id(to_id)
        amount = parse_amount(amount)
        remark = parse_remark(remark)

        if from_id == to_id:
            raise InvalidArgumentError("Cannot transfer to the same account")

        def work(scope: LedgerScope) -> tuple[TransactionRecord, TransactionRecord]:
            locked = scope.accounts.find_for_update([from_id, to_id])
            sender = locked[from_id]
            receiver = locked[to_id]

            sender_before = sender.balance
            receiver_before = receiver.balance
            if sender_before < amount:
                raise InsufficientFundsError(from_id, sender_before, amount)

            sender.balance = sender_before - amount
            receiver.balance = receiver_before + amount
            scope.accounts.save(sender)
            scope.accounts.save(receiver)

            debit = scope.transactions.append(self._record(
                sender, Direction.DEBIT, amount, remark, sender_before,
            ))
            credit = scope.transactions.append(self._record(
                receiver, Direction.CREDIT, amount, remark, receiver_before,
            ))
            return debit, credit

        debit, credit = self._run("transfer", work)
        logger.info("Transferred %s from %s to %s", amount, from_id, to_id)
        return debit, credit

    def list_transactions(
        self, account_id, limit: int | None = None, offset: int = 0
    ) -> list[TransactionRecord]:
        """Return all records for an account, newest first."""
        account_id = parse_account_id(account_id)
        if limit is not None and limit < 1:
            raise InvalidArgumentError("limit must be at least 1")
        if offset < 0:
            raise InvalidArgumentError("offset must not be negative")

        def work(scope: LedgerScope) -> list[TransactionRecord]:
            scope.accounts.find_by_id(account_id)
            return scope.transactions.list_by_account(
                account_id, limit=limit, offset=offset
            )

        return self._run("list_transactions", work)
