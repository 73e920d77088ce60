"""
Database access for the hosted Postgres (Supabase)

This module centralizes every way the application reaches the backing store:
- psycopg2 direct connections (for repository SQL)
- Supabase client (for auth and storage)
"""
import time
import logging
from contextlib import contextmanager
from typing import Optional

import psycopg2
from psycopg2.extras import RealDictCursor
from supabase import create_client, Client

from .config import settings

logger = logging.getLogger(__name__)

CONNECTION_TIMEOUT = 10


class DatabaseNotConfiguredError(RuntimeError):
    """Raised when DATABASE_URL is missing"""


# ============================================================================
# psycopg2 Connections with Retry Logic (SSL Failure Recovery)
# ============================================================================

def _connect_with_retry(cursor_factory=None, max_retries=3, retry_delay=1.0):
    database_url = settings.DATABASE_URL
    if not database_url:
        raise DatabaseNotConfiguredError("DATABASE_URL not configured")

    last_error = None

    for attempt in range(1, max_retries + 1):
        try:
            logger.debug(f"Database connection attempt {attempt}/{max_retries}")
            conn = psycopg2.connect(
                database_url,
                cursor_factory=cursor_factory,
                connect_timeout=CONNECTION_TIMEOUT,
            )

            # Test connection with a simple query
            cursor = conn.cursor()
            cursor.execute("SELECT 1")
            cursor.close()

            logger.debug(f"Database connection successful on attempt {attempt}")
            return conn

        except psycopg2.OperationalError as e:
            last_error = e
            error_msg = str(e)

            if "SSL connection has been closed unexpectedly" in error_msg:
                logger.warning(f"SSL connection error on attempt {attempt}/{max_retries}: {error_msg}")
            else:
                logger.warning(f"Connection error on attempt {attempt}/{max_retries}: {error_msg}")

            if attempt < max_retries:
                # Exponential backoff
                delay = retry_delay * (2 ** (attempt - 1))
                logger.info(f"Retrying in {delay:.2f} seconds...")
                time.sleep(delay)
            else:
                logger.error(f"All {max_retries} connection attempts failed")

    raise last_error


def get_db_connection_with_retry(max_retries=3, retry_delay=1.0):
    """
    Get a psycopg2 connection (tuple rows) with automatic retry

    Retries on psycopg2.OperationalError with exponential backoff, which covers
    the intermittent SSL drops of the hosted database.

    Raises:
        psycopg2.OperationalError: If all retry attempts fail
    """
    return _connect_with_retry(max_retries=max_retries, retry_delay=retry_delay)


def get_db_connection_dict(max_retries=3, retry_delay=1.0):
    """
    Get a psycopg2 connection with RealDictCursor and automatic retry

    Use this for repositories and API responses (rows come back as dicts).

    Example:
        conn = get_db_connection_dict()
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM shops")
        results = cursor.fetchall()  # Returns list of dicts
        cursor.close()
        conn.close()
    """
    return _connect_with_retry(
        cursor_factory=RealDictCursor,
        max_retries=max_retries,
        retry_delay=retry_delay,
    )


# ============================================================================
# Supabase Client (auth + storage)
# ============================================================================

_supabase: Optional[Client] = None


def get_supabase() -> Client:
    """
    FastAPI dependency for the Supabase client

    The client is created on first use so that importing the application
    does not require Supabase credentials.

    Usage:
        @router.post("/upload")
        def upload(sb: Client = Depends(get_supabase)):
            ...
    """
    global _supabase
    if _supabase is None:
        if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
            raise DatabaseNotConfiguredError("SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY not configured")
        _supabase = create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
    return _supabase


@contextmanager
def db_cursor(commit: bool = False):
    """
    Context manager yielding a dict cursor; commits on success when asked,
    rolls back on error, always closes.

    Usage:
        with db_cursor(commit=True) as cursor:
            cursor.execute("DELETE FROM cart_items WHERE user_id = %s", (user_id,))
    """
    conn = get_db_connection_dict()
    cursor = conn.cursor()
    try:
        yield cursor
        if commit:
            conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        cursor.close()
        conn.close()
