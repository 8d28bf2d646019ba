"""
Database engine, session management, and base model.

Every model inherits from Base. Request handlers get a
session from get_db(); the ledger engine opens its own
sessions from SessionLocal so it can own the transaction
boundary and replay a unit of work on contention.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from wallet_ledger.config import get_settings

settings = get_settings()

# --- Engine ---
# pool_pre_ping=True tests connections before using them,
# which handles a restarted database or a stale connection.
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    echo=settings.DEBUG,
)

# --- Session Factory ---
# autoflush=False: nothing is sent to the database until we
# flush or commit explicitly.
# expire_on_commit=False: records returned from a committed
# unit of work stay readable after their session is closed.
SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


# --- Dependencies for FastAPI ---
def get_db():
    """
    Provide a database session for a single request.

    The try/finally guarantees the session is closed even if
    the endpoint raises, so connections never leak from the pool.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_factory() -> sessionmaker:
    """Provide the session factory the ledger engine opens units of work from."""
    return SessionLocal
