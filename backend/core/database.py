# backend/core/database.py

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import settings
from .query_logger import setup_query_logging

IN_MEMORY_SQLITE_URLS = {"sqlite://", "sqlite:///:memory:"}


def create_db_engine(database_url: str) -> Engine:
    """
    Build an engine for PostgreSQL or SQLite.

    SQLite gets a single shared connection when in memory, so every session
    sees the same database; PostgreSQL gets the configured pool.
    """
    engine_kwargs = {
        "echo": settings.LOG_SQL_QUERIES,
        "pool_pre_ping": True,
    }

    if database_url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in IN_MEMORY_SQLITE_URLS:
            engine_kwargs["poolclass"] = StaticPool
    else:
        engine_kwargs["pool_size"] = settings.DB_POOL_SIZE
        engine_kwargs["max_overflow"] = settings.DB_MAX_OVERFLOW

    db_engine = create_engine(database_url, **engine_kwargs)

    # Foreign keys on SQLite, plus timing listeners in development
    setup_query_logging(db_engine)
    return db_engine


engine = create_db_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
