"""
repositories/record_repo.py
---------------------------
Generic insert / update / delete against the table behind a route.
Column names are quoted as identifiers and every value is a bound parameter.
"""

from typing import Any, Mapping, Optional, Union

import psycopg2
from psycopg2 import sql

from db.connection import Database
from models.errors import InvalidRecordError, QueryExecutionError
from repositories.query_registry import Route, RouteDescriptor, lookup
from utils.logger import get_logger

logger = get_logger(__name__)


def _assignments(columns: Mapping[str, Any], separator: str) -> sql.Composed:
    """'"a" = %s<sep>"b" = %s' for the given columns."""
    return sql.SQL(separator).join(
        sql.SQL("{} = {}").format(sql.Identifier(col), sql.Placeholder())
        for col in columns
    )


def _where(descriptor: RouteDescriptor, identifying: Mapping[str, Any], owner: Optional[Any]) -> sql.Composed:
    """Identifying columns joined with AND, plus the route's owner predicate when an owner is given."""
    where = _assignments(identifying, " AND ")
    if owner is not None:
        where = where + sql.SQL(" AND ") + sql.SQL(descriptor.owner_scope)
    return where


class RecordRepository:
    """Repository for writes on the record tables."""

    def __init__(self, database: Database):
        self.database = database

    # ── CREATE ────────────────────────────────────────────

    def insert(self, route: Union[str, Route], values: Mapping[str, Any]) -> int:
        """
        Insert one row into the route's table.

        Args:
            route: Route whose table receives the row.
            values: Column name -> value.

        Returns:
            Number of rows inserted.
        """
        descriptor = lookup(route)
        if not values:
            raise InvalidRecordError("Nothing to insert")

        logger.info(f"Attempting to insert data into {descriptor.table}: columns {list(values)}")
        query = sql.SQL("INSERT INTO {} ({}) VALUES ({})").format(
            sql.Identifier(descriptor.table),
            sql.SQL(", ").join(sql.Identifier(col) for col in values),
            sql.SQL(", ").join(sql.Placeholder() * len(values)),
        )
        return self._write(query, tuple(values.values()), descriptor.table)

    # ── UPDATE ────────────────────────────────────────────

    def update(
        self,
        route: Union[str, Route],
        identifying: Mapping[str, Any],
        values: Mapping[str, Any],
        owner: Optional[Any] = None,
    ) -> int:
        """
        Update the rows matching every identifying column.

        Args:
            route: Route whose table is updated.
            identifying: Column name -> value, all of which must match.
            values: Column name -> new value.
            owner: When given, only that owner's rows are touched.

        Returns:
            Number of rows updated.
        """
        descriptor = lookup(route)
        if not values:
            raise InvalidRecordError("Nothing to update")
        if not identifying:
            raise InvalidRecordError("Refusing to update without identifying columns")

        logger.info(
            f"Performing update on {descriptor.table}: set {list(values)} where {list(identifying)}"
        )
        query = sql.SQL("UPDATE {} SET {} WHERE {}").format(
            sql.Identifier(descriptor.table),
            _assignments(values, ", "),
            _where(descriptor, identifying, owner),
        )
        params = tuple(values.values()) + tuple(identifying.values())
        if owner is not None:
            params += (owner,)
        return self._write(query, params, descriptor.table)

    # ── DELETE ────────────────────────────────────────────

    def delete(
        self,
        route: Union[str, Route],
        identifying: Mapping[str, Any],
        owner: Optional[Any] = None,
    ) -> int:
        """
        Delete the rows matching every identifying column, and belonging
        to `owner` when one is given.

        Returns:
            Number of rows deleted.
        """
        descriptor = lookup(route)
        if not identifying:
            raise InvalidRecordError("Refusing to delete without identifying columns")

        logger.info(f"Performing delete on {descriptor.table} where {list(identifying)}")
        query = sql.SQL("DELETE FROM {} WHERE {}").format(
            sql.Identifier(descriptor.table),
            _where(descriptor, identifying, owner),
        )
        params = tuple(identifying.values())
        if owner is not None:
            params += (owner,)
        return self._write(query, params, descriptor.table)

    # ── OWNERSHIP ─────────────────────────────────────────

    def foreign_parents(self, route: Union[str, Route], values: Mapping[str, Any], owner: Any) -> list[str]:
        """
        Referencing columns in `values` whose target row does not belong to `owner`.
        Columns that are absent or null are not checked.
        """
        descriptor = lookup(route)
        foreign = []
        for parent in descriptor.parents:
            value = values.get(parent.column)
            if value is None:
                continue
            try:
                result = self.database.execute(parent.query, (value, owner))
            except psycopg2.Error as e:
                logger.error(f"Ownership check on {descriptor.table}.{parent.column} failed: {e}")
                raise QueryExecutionError(f"Ownership check on {descriptor.table} failed", e) from e
            total = result.rows[0]["total"] if result.rows else 0
            if not total:
                foreign.append(parent.column)
        if foreign:
            logger.warning(f"Owner {owner} referenced rows it does not own from {descriptor.table}: {foreign}")
        return foreign

    # ── HELPERS ───────────────────────────────────────────

    def _write(self, query: sql.Composed, params: tuple, table: str) -> int:
        try:
            result = self.database.execute(query, params)
        except psycopg2.Error as e:
            logger.error(f"Write on {table} failed: {e}")
            raise QueryExecutionError(f"Write on {table} failed", e) from e
        return result.rowcount
