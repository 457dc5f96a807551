"""Database connection and session management."""
import functools
import logging
from contextlib import contextmanager
from typing import Callable, Generator, TypeVar

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from config.settings import settings
from talentx.persistence.models import Base

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable)

# Seconds a SQLite writer waits for the database lock before giving up
SQLITE_BUSY_TIMEOUT = 30

# Execution option marking connections that only read
READ_ONLY_OPTION = "talentx_read_only"


def build_engine(url: str, busy_timeout: float = SQLITE_BUSY_TIMEOUT) -> Engine:
    """Create SQLAlchemy engine with appropriate settings for the database backend.

    Args:
        url: SQLAlchemy database URL
        busy_timeout: Seconds a SQLite connection waits for a lock
    """
    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False, "timeout": busy_timeout},
        )
        _use_immediate_transactions(engine)
        return engine

    # PostgreSQL (or other server-based databases)
    return create_engine(
        url,
        echo=False,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,  # Verify connections before use
    )


def _use_immediate_transactions(engine: Engine) -> None:
    """Make SQLite write transactions take the write lock up front.

    pysqlite defers BEGIN until the first DML statement, which lets two
    writers both hold a read lock and then deadlock on upgrade. Taking
    the lock at BEGIN makes concurrent writers queue on the busy timeout.
    Connections marked ``read_only`` start a plain deferred transaction
    and never wait for writers.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin(conn):
        if conn.get_execution_options().get(READ_ONLY_OPTION):
            conn.exec_driver_sql("BEGIN")
        else:
            conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_session_factory(bind: Engine) -> sessionmaker:
    """Session factory used by request handlers and scripts."""
    return sessionmaker(autocommit=False, autoflush=False, bind=bind)


def create_read_session_factory(bind: Engine) -> sessionmaker:
    """Session factory for queries that never write (ranking, listings, stats)."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=bind.execution_options(**{READ_ONLY_OPTION: True}),
    )


def is_unique_violation(exc: IntegrityError) -> bool:
    """Whether an IntegrityError came from a unique constraint or index.

    SQLite reports "UNIQUE constraint failed", PostgreSQL reports
    "duplicate key value violates unique constraint".
    """
    message = str(getattr(exc, "orig", exc)).lower()
    return "unique" in message or "duplicate" in message


# Create engine and session factory
engine = build_engine(settings.database_url)
SessionLocal = create_session_factory(engine)


def init_db(bind: Engine | None = None) -> None:
    """Initialize the database, creating all tables."""
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database schema ready")


def drop_db(bind: Engine | None = None) -> None:
    """Drop all tables (use with caution)."""
    Base.metadata.drop_all(bind=bind or engine)


@contextmanager
def get_session(factory: sessionmaker | None = None) -> Generator[Session, None, None]:
    """Get a database session with automatic cleanup.

    Commits when the block exits cleanly and rolls back on error. A
    committed unit of work is never undone by a later failure in the
    caller.
    """
    session = (factory or SessionLocal)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def rollback_on_error(method: F) -> F:
    """Roll back the service's session when a unit of work fails.

    Wraps service methods that hold ``self.session``. Releases any
    partial writes and locks before the error reaches the caller.
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except Exception:
            self.session.rollback()
            raise

    return wrapper
