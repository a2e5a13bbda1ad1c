# backend/core/query_logger.py

import logging
import time
from contextlib import contextmanager
from typing import Any, Dict

from sqlalchemy import event
from sqlalchemy.engine import Engine

from core.config import get_settings

logger = logging.getLogger("sqlalchemy.engine")
query_logger = logging.getLogger("query_performance")

settings = get_settings()


class QueryLogger:
    """Collects query timings and flags slow statements in development"""

    def __init__(self):
        self.enabled = settings.is_development or settings.DEBUG
        self.slow_query_threshold = settings.SLOW_QUERY_THRESHOLD_SECONDS
        self.query_stats: Dict[str, Any] = {}
        self.reset_stats()

    def reset_stats(self):
        """Reset query statistics"""
        self.query_stats = {
            "total_queries": 0,
            "slow_queries": 0,
            "total_time": 0.0,
        }

    def record(self, statement: str, elapsed: float):
        self.query_stats["total_queries"] += 1
        self.query_stats["total_time"] += elapsed

        if elapsed > self.slow_query_threshold:
            self.query_stats["slow_queries"] += 1
            query_logger.warning(
                "SLOW QUERY (%.3fs): %s...", elapsed, statement[:200]
            )

    def log_query_stats(self):
        """Log accumulated query statistics"""
        if not self.enabled:
            return

        total = self.query_stats["total_queries"]
        query_logger.info(
            "Queries: %d, slow: %d, total time: %.3fs, average: %.3fs",
            total,
            self.query_stats["slow_queries"],
            self.query_stats["total_time"],
            self.query_stats["total_time"] / max(total, 1),
        )


# Singleton instance
query_logger_instance = QueryLogger()


def setup_query_logging(engine: Engine):
    """
    Attach timing listeners and SQLite pragmas to an engine.

    Foreign keys are switched on for SQLite connections regardless of the
    environment so ``ON DELETE CASCADE`` behaves as it does on PostgreSQL.
    """

    @event.listens_for(engine, "connect")
    def setup_sqlite_pragma(dbapi_conn, connection_record):
        if engine.dialect.name == "sqlite":
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys = ON")
            cursor.close()

    if not query_logger_instance.enabled:
        return

    @event.listens_for(engine, "before_cursor_execute")
    def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault("query_start_time", []).append(time.time())
        if settings.LOG_SQL_QUERIES:
            logger.debug("Start Query: %s", statement)

    @event.listens_for(engine, "after_cursor_execute")
    def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        total_time = time.time() - conn.info["query_start_time"].pop(-1)
        query_logger_instance.record(statement, total_time)
        if settings.LOG_SQL_QUERIES:
            logger.debug("Query Complete in %.3fs", total_time)


@contextmanager
def log_query_performance(operation_name: str):
    """
    Log how many queries an operation issued and how long it took.

    Example:
        with log_query_performance("reconcile_business_ratings"):
            aggregator.reconcile_all()
    """
    if not query_logger_instance.enabled:
        yield
        return

    start_queries = query_logger_instance.query_stats["total_queries"]
    start_time = time.time()

    try:
        yield
    finally:
        elapsed_time = time.time() - start_time
        query_count = query_logger_instance.query_stats["total_queries"] - start_queries
        query_logger.info(
            "Operation '%s': %d queries in %.3fs",
            operation_name,
            query_count,
            elapsed_time,
        )
        query_logger_instance.log_query_stats()
