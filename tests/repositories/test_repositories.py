"""
Tests for the storage layer: account store, transaction log,
and the unit of work that spans them.
"""

import uuid
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from wallet_ledger.errors import ConcurrentUpdateError, NotFoundError, StorageError
from wallet_ledger.models import Account, Direction, TransactionRecord
from wallet_ledger.repositories.accounts import AccountRepository
from wallet_ledger.repositories.transactions import TransactionLogRepository
from wallet_ledger.repositories.unit_of_work import (
    UnitOfWork,
    is_transient,
    translate_storage_error,
)


def add_account(session, balance="0"):
    account = AccountRepository(session).add(
        Account(holder_name="Holder", balance=Decimal(balance))
    )
    session.commit()
    return account


class TestAccountRepository:

    def test_new_account_starts_at_version_one(self, db_session):
        account = add_account(db_session)
        assert account.version == 1

    def test_find_by_id_missing_raises(self, db_session):
        with pytest.raises(NotFoundError):
            AccountRepository(db_session).find_by_id(uuid.uuid4())

    def test_find_for_update_returns_every_account(self, db_session):
        a = add_account(db_session, "1")
        b = add_account(db_session, "2")

        locked = AccountRepository(db_session).find_for_update([b.id, a.id])

        assert set(locked) == {a.id, b.id}
        assert locked[a.id].balance == Decimal("1")

    def test_find_for_update_missing_raises(self, db_session):
        a = add_account(db_session)
        with pytest.raises(NotFoundError):
            AccountRepository(db_session).find_for_update([a.id, uuid.uuid4()])

    def test_save_bumps_version(self, db_session):
        account = add_account(db_session)
        repo = AccountRepository(db_session)

        account.balance = Decimal("5")
        repo.save(account)
        db_session.commit()

        assert account.version == 2

    def test_stale_write_is_refused(self, session_factory):
        with session_factory() as setup:
            account = add_account(setup, "100")

        first = session_factory()
        second = session_factory()
        try:
            mine = first.get(Account, account.id)
            theirs = second.get(Account, account.id)

            theirs.balance = Decimal("90")
            AccountRepository(second).save(theirs)
            second.commit()

            mine.balance = Decimal("80")
            with pytest.raises(StaleDataError):
                AccountRepository(first).save(mine)
        finally:
            first.rollback()
            first.close()
            second.close()


class TestTransactionLogRepository:

    def test_append_assigns_identifiers(self, db_session):
        account = add_account(db_session)
        record = TransactionLogRepository(db_session).append(TransactionRecord(
            account_id=account.id,
            direction=Direction.CREDIT,
            amount=Decimal("10"),
            remark="x",
            balance_before=Decimal("0"),
            balance_after=Decimal("10"),
        ))

        assert record.id is not None
        assert isinstance(record.external_id, uuid.UUID)

    def test_list_by_account_filters_by_owner(self, db_session):
        a = add_account(db_session)
        b = add_account(db_session)
        log = TransactionLogRepository(db_session)
        for owner in (a, b, a):
            log.append(TransactionRecord(
                account_id=owner.id,
                direction=Direction.CREDIT,
                amount=Decimal("1"),
                remark="",
                balance_before=Decimal("0"),
                balance_after=Decimal("1"),
            ))
        db_session.commit()

        assert len(log.list_by_account(a.id)) == 2
        assert len(log.list_by_account(b.id)) == 1


class TestUnitOfWork:

    def test_commits_on_success(self, session_factory):
        with session_factory() as setup:
            account = add_account(setup, "1")

        with UnitOfWork(session_factory).begin() as scope:
            acct = scope.accounts.find_by_id(account.id)
            acct.balance = Decimal("2")
            scope.accounts.save(acct)

        with session_factory() as check:
            assert check.get(Account, account.id).balance == Decimal("2")

    def test_rolls_back_on_error(self, session_factory):
        with session_factory() as setup:
            account = add_account(setup, "1")

        with pytest.raises(RuntimeError):
            with UnitOfWork(session_factory).begin() as scope:
                acct = scope.accounts.find_by_id(account.id)
                acct.balance = Decimal("2")
                scope.accounts.save(acct)
                raise RuntimeError("caller went away")

        with session_factory() as check:
            assert check.get(Account, account.id).balance == Decimal("1")

    def test_translates_sqlalchemy_errors(self, session_factory):
        with pytest.raises(StorageError) as exc_info:
            with UnitOfWork(session_factory).begin():
                raise SQLAlchemyError("boom")

        assert isinstance(exc_info.value.__cause__, SQLAlchemyError)
        assert not isinstance(exc_info.value, ConcurrentUpdateError)


class TestTransientClassification:

    def test_stale_data_is_transient(self):
        assert is_transient(StaleDataError("x"))
        assert isinstance(
            translate_storage_error(StaleDataError("x")), ConcurrentUpdateError
        )

    def test_sqlite_lock_is_transient(self):
        exc = OperationalError("UPDATE accounts", {}, Exception("database is locked"))
        assert is_transient(exc)

    def test_postgres_deadlock_is_transient(self):
        class PgError(Exception):
            pgcode = "40P01"

        exc = OperationalError("UPDATE accounts", {}, PgError("deadlock detected"))
        assert is_transient(exc)

    def test_other_failures_are_not_transient(self):
        exc = OperationalError("SELECT 1", {}, Exception("no such table: accounts"))
        assert not is_transient(exc)
        assert not is_transient(SQLAlchemyError("x"))
