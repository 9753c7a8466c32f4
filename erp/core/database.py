from contextlib import contextmanager
import logging

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base, Session
from .config import settings

logger = logging.getLogger(__name__)


def build_engine(url: str, echo: bool = False):
    """Create an engine; SQLite gets WAL and writer serialization"""
    is_sqlite = url.startswith("sqlite")

    connect_args = {}
    if is_sqlite:
        connect_args["check_same_thread"] = False
    elif settings.PGSSLMODE:
        connect_args["sslmode"] = settings.PGSSLMODE

    engine = create_engine(
        url,
        connect_args=connect_args,
        pool_pre_ping=True,
        echo=echo
    )

    if is_sqlite:
        @event.listens_for(engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            # Hand BEGIN over to SQLAlchemy (see begin_immediate)
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

        @event.listens_for(engine, "begin")
        def begin_immediate(conn):
            # SQLite has no row locks: FOR UPDATE is dropped from the SQL, so take
            # the write lock when the transaction starts instead.
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


# Create engine
engine = build_engine(settings.SQLALCHEMY_DATABASE_URI, echo=settings.DEBUG)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()

# Dependency for FastAPI
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session):
    """Commit the session on success; roll back and re-raise on any error."""
    try:
        yield db
        db.commit()
    except Exception as e:
        db.rollback()
        logger.warning(f"Transaction rolled back: {e.__class__.__name__}: {e}")
        raise


@contextmanager
def session_scope(factory=None):
    """Own a session for one unit of work (scripts, workers)."""
    db = (factory or SessionLocal)()
    try:
        with transaction(db):
            yield db
    finally:
        db.close()
