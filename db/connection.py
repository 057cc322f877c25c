"""
db/connection.py
----------------
Owns the single PostgreSQL connection used by the application.
Every statement is sent with bound parameters and committed on its own;
there is no pool and no multi-statement transaction.
"""

from typing import Any, Optional, Sequence

import psycopg2
from psycopg2 import extras

from config import DATABASE_URL, STATEMENT_TIMEOUT_MS
from models.records import FieldDescriptor, QueryResult
from utils.logger import get_logger

logger = get_logger(__name__)


class Database:
    """
    Query execution service over one psycopg2 connection.

    Usage:
        database = Database.connect()
        result = database.execute("SELECT * FROM pastures WHERE owner_id = %s", (42,))
    """

    def __init__(self, connection):
        self.connection = connection

    @classmethod
    def connect(
        cls,
        dsn: str = DATABASE_URL,
        statement_timeout_ms: int = STATEMENT_TIMEOUT_MS,
    ) -> "Database":
        """
        Open the connection.

        Args:
            dsn: libpq connection string or URL.
            statement_timeout_ms: Per-statement limit applied server side,
                0 for none.

        Raises:
            psycopg2.OperationalError: If the database is unreachable.
        """
        options = None
        if statement_timeout_ms > 0:
            options = f"-c statement_timeout={int(statement_timeout_ms)}"
        try:
            connection = psycopg2.connect(dsn, options=options) if options else psycopg2.connect(dsn)
        except psycopg2.OperationalError as e:
            logger.error(f"Failed to connect to database: {e}")
            raise
        logger.info("Database connection opened.")
        return cls(connection)

    def execute(self, sql: Any, params: Optional[Sequence[Any]] = None) -> QueryResult:
        """
        Run one statement and commit it.

        Args:
            sql: SQL text with %s placeholders, or a psycopg2.sql.Composed.
            params: Values bound to the placeholders, in order.

        Returns:
            QueryResult with dict rows (empty for statements that return
            nothing), the column descriptors and the affected row count.

        Raises:
            psycopg2.Error: Whatever the driver reports; the statement is
                rolled back first.
        """
        logger.info(f"Performing query against DB: {sql}")
        conn = self.connection
        try:
            with conn.cursor(cursor_factory=extras.RealDictCursor) as cur:
                cur.execute(sql, params)
                if cur.description is not None:
                    fields = tuple(
                        FieldDescriptor(name=col.name, type_code=col.type_code)
                        for col in cur.description
                    )
                    rows = [dict(r) for r in cur.fetchall()]
                else:
                    fields = ()
                    rows = []
                rowcount = cur.rowcount
            conn.commit()
        except psycopg2.Error as e:
            if not conn.closed:
                conn.rollback()
            logger.error(f"Query failed: {e}")
            raise

        logger.info(f"Query completed successfully: {len(rows)} results returned")
        return QueryResult(rows=rows, fields=fields, rowcount=rowcount)

    def close(self) -> None:
        """Close the connection."""
        if self.connection is not None and not self.connection.closed:
            self.connection.close()
            logger.info("Database connection closed.")
