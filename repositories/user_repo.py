"""
repositories/user_repo.py
--------------------------
Data access layer for user records.
"""

from typing import Optional

import psycopg2

from db.connection import Database
from models.errors import QueryExecutionError
from models.user import FarmUser
from utils.logger import get_logger

logger = get_logger(__name__)

_USER_COLUMNS = "user_id, email, password_hash, first_name, last_name, created_at"


class UserRepository:
    """Repository for reads and inserts on the users table."""

    def __init__(self, database: Database):
        self.database = database

    def get_by_email(self, email: str) -> Optional[FarmUser]:
        """
        Fetch a user by login email.

        Returns:
            FarmUser or None.
        """
        sql = f"SELECT {_USER_COLUMNS} FROM users WHERE email = %s;"
        logger.info(f"Querying DB for user with email {email}")
        try:
            result = self.database.execute(sql, (email,))
        except psycopg2.Error as e:
            raise QueryExecutionError("User lookup failed", e) from e
        return self._row_to_user(result.rows[0]) if result.rows else None

    def add(
        self,
        email: str,
        password_hash: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> FarmUser:
        """
        Insert a new user.

        Returns:
            The stored FarmUser with its `user_id` and `created_at` populated.
        """
        sql = f"""
            INSERT INTO users (email, password_hash, first_name, last_name)
            VALUES (%s, %s, %s, %s)
            RETURNING {_USER_COLUMNS};
        """
        try:
            result = self.database.execute(sql, (email, password_hash, first_name, last_name))
        except psycopg2.Error as e:
            logger.error(f"Failed to add user {email}: {e}")
            raise QueryExecutionError("User insert failed", e) from e
        user = self._row_to_user(result.rows[0])
        logger.info(f"Added user {user}")
        return user

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_user(row: dict) -> FarmUser:
        """Convert a database row to a FarmUser domain object."""
        return FarmUser(
            user_id=row["user_id"],
            email=row["email"],
            password_hash=row["password_hash"],
            first_name=row.get("first_name"),
            last_name=row.get("last_name"),
            created_at=row.get("created_at"),
        )
