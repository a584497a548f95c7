"""
Persistence for organizer records.

The database is the only arbiter of the two workflow invariants:
- the UNIQUE constraint on email rejects a duplicate registration, and
- the conditional UPDATE ... WHERE status = %s rejects a second approval.
Each write is a single statement so a failure never leaves a half-applied
change behind.
"""

import logging
from typing import Callable, Optional

import psycopg2
import psycopg2.errors

from backend.auth_service.errors import ConflictError, InternalError, NotFoundError
from backend.auth_service.models import Organizer

logger = logging.getLogger(__name__)

ORGANIZER_COLUMNS = (
    "organizer_id, organizer_name, fname, lname, email, contact_no, password_hash, status"
)


class OrganizerRepository:
    """
    psycopg2-backed organizer store.

    Args:
        connect: Zero-argument callable returning a new DB connection,
            usually a partial over backend.database.db_connection.get_db.
    """

    def __init__(self, connect: Callable):
        self._connect = connect

    def _fetch_one(self, sql: str, params: tuple, commit: bool = False):
        try:
            with self._connect() as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, params)
                    row = cur.fetchone()
                    if commit:
                        conn.commit()
                    return row
        except psycopg2.errors.UniqueViolation:
            raise ConflictError("Email (username) already registered")
        except (psycopg2.errors.QueryCanceled, psycopg2.OperationalError) as e:
            logger.error(f"Database timeout or connection loss: {e}")
            raise InternalError(str(e), retryable=True) from e
        except psycopg2.Error as e:
            logger.error(f"Database error: {e}")
            raise InternalError(str(e)) from e

    def find_by_email(self, email: str) -> Optional[Organizer]:
        sql = f"SELECT {ORGANIZER_COLUMNS} FROM organizer WHERE email = %s;"
        row = self._fetch_one(sql, (email,))
        return Organizer.from_row(row) if row else None

    def find_by_id(self, organizer_id: int) -> Optional[Organizer]:
        sql = f"SELECT {ORGANIZER_COLUMNS} FROM organizer WHERE organizer_id = %s;"
        row = self._fetch_one(sql, (organizer_id,))
        return Organizer.from_row(row) if row else None

    def insert(
        self,
        organizer_name: str,
        fname: str,
        lname: str,
        email: str,
        password_hash: str,
        status: str,
        contact_no: Optional[str] = None,
    ) -> Organizer:
        """
        Insert a new organizer.

        Raises:
            ConflictError: If the email is already taken.
        """
        sql = f"""
            INSERT INTO organizer
                (organizer_name, fname, lname, email, contact_no, password_hash, status)
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            RETURNING {ORGANIZER_COLUMNS};
        """
        row = self._fetch_one(
            sql,
            (organizer_name, fname, lname, email, contact_no, password_hash, status),
            commit=True,
        )
        return Organizer.from_row(row)

    def update_status(self, organizer_id: int, from_status: str, to_status: str) -> Organizer:
        """
        Move an organizer from one status to another in one statement.

        Raises:
            NotFoundError: If no organizer has this id.
            ConflictError: If the current status is not `from_status`.
        """
        sql = f"""
            UPDATE organizer SET status = %s
            WHERE organizer_id = %s AND status = %s
            RETURNING {ORGANIZER_COLUMNS};
        """
        row = self._fetch_one(sql, (to_status, organizer_id, from_status), commit=True)
        if row:
            return Organizer.from_row(row)

        # Nothing matched: tell apart a missing row from a status mismatch
        if self.find_by_id(organizer_id) is None:
            raise NotFoundError("Organizer not found")
        raise ConflictError(f"Organizer already {to_status}")
