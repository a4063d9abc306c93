"""
PostgreSQL connection handling

Two access paths:
- SQLAlchemy declarative Base (table definitions, used by scripts/init_db.py)
- psycopg2 direct connections (raw SQL in repositories)
"""
import logging
import time
from contextlib import contextmanager

import psycopg2
from psycopg2.extras import RealDictCursor
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base

from .config import settings

logger = logging.getLogger(__name__)


# ============================================================================
# SQLAlchemy Configuration (table definitions)
# ============================================================================

Base = declarative_base()


def get_engine():
    """Build an engine for schema management (create_all)"""
    return create_engine(settings.DATABASE_URL, pool_pre_ping=True)


# ============================================================================
# psycopg2 Direct Connections (for raw SQL queries)
# ============================================================================

def get_db_connection_dict():
    """
    Get a database connection with RealDictCursor (returns dictionaries)

    Example:
        conn = get_db_connection_dict()
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM orders")
        results = cursor.fetchall()  # Returns list of dicts
        cursor.close()
        conn.close()
    """
    database_url = settings.DATABASE_URL
    if not database_url:
        raise Exception("DATABASE_URL not configured")

    return psycopg2.connect(database_url, cursor_factory=RealDictCursor)


def get_db_connection_dict_with_retry(max_retries=3, retry_delay=0.5):
    """
    Get a RealDictCursor connection, retrying on OperationalError

    Backoff doubles after each failed attempt. Non-connection errors are
    raised immediately.

    Raises:
        psycopg2.OperationalError: If all retry attempts fail
    """
    last_error = None

    for attempt in range(1, max_retries + 1):
        try:
            conn = get_db_connection_dict()
            logger.debug(f"Database connection successful on attempt {attempt}")
            return conn

        except psycopg2.OperationalError as e:
            last_error = e
            logger.warning(f"Connection error on attempt {attempt}/{max_retries}: {e}")

            if attempt < max_retries:
                delay = retry_delay * (2 ** (attempt - 1))
                logger.info(f"Retrying in {delay:.2f} seconds...")
                time.sleep(delay)

    logger.error(f"All {max_retries} connection attempts failed")
    raise last_error


@contextmanager
def transaction():
    """
    Context manager yielding a connection wrapped in a single transaction.

    Commits when the block exits normally, rolls back on any exception.

    Usage:
        with transaction() as conn:
            repo.decrement_stock(product_id, 2, conn=conn)
            repo.insert(..., conn=conn)
    """
    conn = get_db_connection_dict_with_retry()
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
