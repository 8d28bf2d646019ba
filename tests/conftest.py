"""
Shared test fixtures.

Sets up an isolated SQLite database so tests never touch the
real database. Tables are created before each test and dropped
after it, so every test starts from an empty ledger.
"""

import os

# Settings are read at import time; point them at the test
# database before anything from wallet_ledger is imported.
TEST_DATABASE_URL = "sqlite:///./test.db"
os.environ["DATABASE_URL"] = TEST_DATABASE_URL

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from wallet_ledger.main import app
from wallet_ledger.models import Account, Base
from wallet_ledger.models.base import get_db, get_session_factory
from wallet_ledger.schemas.account import AccountOpen
from wallet_ledger.services.account_service import AccountService
from wallet_ledger.services.ledger_service import LedgerService


# A file database rather than :memory:, so that sessions on
# different threads see the same data in the concurrency tests.
engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False, "timeout": 10},
)

TestSessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    expire_on_commit=False,
)


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop them after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory():
    return TestSessionLocal


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def ledger(session_factory):
    """A ledger engine on the test database with no retry delay."""
    return LedgerService(session_factory, retry_backoff=0)


@pytest.fixture
def make_account(session_factory, ledger):
    """
    Factory fixture: open an account and fund it to a starting balance.

    Funding goes through a real deposit, so a funded account
    already has one CREDIT record in its history.
    """
    def _make(balance="0", holder_name="Test Holder") -> Account:
        with session_factory() as session:
            account = AccountService(session).open_account(
                AccountOpen(holder_name=holder_name)
            )
            session.commit()
        if Decimal(balance) > 0:
            ledger.deposit(account.id, Decimal(balance), "opening balance")
        return account

    return _make


def current_balance(account_id) -> Decimal:
    """Read a balance through a fresh session, bypassing any identity map."""
    with TestSessionLocal() as session:
        return session.get(Account, account_id).balance


@pytest.fixture
def balance_of():
    return current_balance


@pytest.fixture
def client():
    """
    Provide a test client with the test database.

    Each request gets its own test session, as it would in
    production, and the ledger engine's session factory is
    overridden to point at the test database too.
    """
    def override_get_db():
        db = TestSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: TestSessionLocal
    yield TestClient(app)
    app.dependency_overrides.clear()
