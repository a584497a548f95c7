"""
PostgreSQL connection helper.
Provides get_db() for use by services.
"""

import logging
import os
from typing import Optional

import psycopg2
from psycopg2.extras import DictCursor
from dotenv import load_dotenv
from flask import current_app

# Load .env variables from the project root
load_dotenv()

DEFAULT_STATEMENT_TIMEOUT_MS = int(os.getenv("DB_STATEMENT_TIMEOUT_MS", 5000))


def get_db(database_url: Optional[str] = None, statement_timeout_ms: Optional[int] = None):
    """
    Returns a new psycopg2 connection with dictionary-based row access.

    Every statement on the connection is bounded by a server-side
    statement_timeout, so a stuck query surfaces as QueryCanceled instead
    of hanging the request.

    Usage:
        with get_db() as conn:
            with conn.cursor() as cur:
                cur.execute(...)

    Args:
        database_url (str, optional): DSN; defaults to the DATABASE_URL env var.
        statement_timeout_ms (int, optional): Per-statement timeout.

    Returns:
        psycopg2.extensions.connection: A connection object with DictCursor factory.

    Raises:
        RuntimeError: If no database URL is configured.
        psycopg2.Error: If connection fails.
    """
    dsn = database_url or os.getenv("DATABASE_URL")
    if not dsn:
        raise RuntimeError("DATABASE_URL is not set. Please set the environment variable.")

    timeout = statement_timeout_ms or DEFAULT_STATEMENT_TIMEOUT_MS

    try:
        conn = psycopg2.connect(
            dsn,
            connect_timeout=max(1, timeout // 1000),
            options=f"-c statement_timeout={timeout}",
        )
        # Rows come back as dictionaries, e.g. {"organizer_id": 1, "email": "..."}
        conn.cursor_factory = DictCursor
        return conn
    except Exception as e:
        logging.error(f"Error connecting to database: {e}")
        raise


def app_db():
    """
    New connection from the current app's configured factory.

    create_app() stores a get_db partial bound to ServiceConfig under
    app.extensions["db_connect"], so route handlers never read DATABASE_URL
    from the environment themselves.
    """
    return current_app.extensions["db_connect"]()
