"""
Unit of work — one transactional scope over both stores.

The account store and the transaction log share a single
session inside a scope, so a balance write and the record
that explains it commit together or not at all.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator

from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from wallet_ledger.errors import ConcurrentUpdateError, StorageError
from wallet_ledger.repositories.accounts import AccountRepository
from wallet_ledger.repositories.protocols import AccountStore, TransactionLog
from wallet_ledger.repositories.transactions import TransactionLogRepository


# PostgreSQL SQLSTATEs for serialization_failure, deadlock_detected,
# lock_not_available and query_canceled (lock_timeout / statement_timeout).
TRANSIENT_PGCODES = {"40001", "40P01", "55P03", "57014"}

# SQLite has no SQLSTATE; it reports contention in the message.
TRANSIENT_MESSAGES = ("database is locked", "database table is locked")


def is_transient(exc: Exception) -> bool:
    """Decide whether a storage failure is contention worth replaying."""
    if isinstance(exc, StaleDataError):
        return True
    if isinstance(exc, DBAPIError):
        pgcode = getattr(exc.orig, "pgcode", None)
        if pgcode in TRANSIENT_PGCODES:
            return True
        message = str(exc.orig).lower()
        return any(marker in message for marker in TRANSIENT_MESSAGES)
    return False


def translate_storage_error(exc: SQLAlchemyError) -> StorageError:
    """Map a SQLAlchemy failure onto the ledger's error taxonomy."""
    if is_transient(exc):
        return ConcurrentUpdateError(f"Concurrent update conflict: {exc}")
    return StorageError(f"Storage failure: {exc}")


@dataclass
class LedgerScope:
    """The stores available inside one unit of work."""
    session: Session
    accounts: AccountStore = field(init=False)
    transactions: TransactionLog = field(init=False)

    def __post_init__(self):
        self.accounts = AccountRepository(self.session)
        self.transactions = TransactionLogRepository(self.session)


class UnitOfWork:
    """
    Opens transactional scopes from a session factory.

    Each scope gets a fresh session. Leaving the block normally
    commits; any exception (including KeyboardInterrupt or a
    cancelled caller) rolls back. The session is always closed.
    SQLAlchemy failures leave as StorageError, chained to the
    original exception.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    @contextmanager
    def begin(self) -> Iterator[LedgerScope]:
        session = self.session_factory()
        try:
            yield LedgerScope(session)
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise translate_storage_error(exc) from exc
        except BaseException:
            session.rollback()
            raise
        finally:
            session.close()
