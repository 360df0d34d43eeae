"""Database configuration and connection setup"""
import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from booking_engine.config.settings import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)


def build_engine(database_url: str, **kwargs) -> Engine:
    """
    Create an engine for the given URL.

    Server databases get a connection pool sized from settings. SQLite
    connections open every transaction with BEGIN IMMEDIATE so that the
    booking path serializes writers the same way a row lock does on
    PostgreSQL.
    """
    if database_url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        sqlite_engine = create_engine(database_url, **kwargs)
        enable_sqlite_immediate_transactions(sqlite_engine)
        return sqlite_engine

    return create_engine(
        database_url,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,
        echo=False,
        **kwargs,
    )


def enable_sqlite_immediate_transactions(sqlite_engine: Engine) -> None:
    """Hand transaction control to SQLAlchemy and take the write lock on BEGIN"""

    @event.listens_for(sqlite_engine, "connect")
    def _do_connect(dbapi_connection, connection_record):
        # disable pysqlite's own BEGIN handling
        dbapi_connection.isolation_level = None

    @event.listens_for(sqlite_engine, "begin")
    def _do_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """Database dependency for FastAPI"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind: Engine = engine):
    """Create all database tables"""
    from booking_engine.models import Base  # registers every model

    logger.info("Creating all tables...")
    Base.metadata.create_all(bind=bind)
    logger.info("Database tables created successfully")


if __name__ == "__main__":
    create_tables()
