"""
services/record_service.py
--------------------------
Business logic for browsing and editing farm records.
Orchestrates the paged query executor and the RecordRepository.
"""

from typing import Any, Iterator, Mapping, Union

from config import PAGE_SIZE
from db.connection import Database
from models.errors import ForeignRecordError
from models.records import PageRequest, PageResult
from repositories.normalizer import denormalize_field_name, normalize_field_name
from repositories.paged_repo import PagedQueryExecutor
from repositories.query_registry import Route, RouteDescriptor, lookup
from repositories.record_repo import RecordRepository
from utils.logger import get_logger

logger = get_logger(__name__)


class RecordService:
    """
    Handles paging through and writing to the record routes.

    Every read and write is scoped to the owner passed in by the caller.
    Writes may only reference animals and pastures that owner holds.
    """

    def __init__(self, database: Database, page_size: int = PAGE_SIZE):
        self.page_size = page_size
        self.executor = PagedQueryExecutor(database)
        self.repo = RecordRepository(database)

    # ── READ ──────────────────────────────────────────────

    def fetch_page(self, owner: int, route: Union[str, Route], page_number: int = 1) -> PageResult:
        """
        Fetch one page of a route for an owner.

        Raises:
            UnknownRouteError, InvalidPageNumberError, InvalidPageSizeError,
            QueryExecutionError.
        """
        descriptor = lookup(route)
        request = PageRequest.for_page(descriptor.route.value, owner, page_number, self.page_size)
        return self.executor.execute(request)

    def iter_rows(self, owner: int, route: Union[str, Route]) -> Iterator[Mapping[str, Any]]:
        """Yield every normalized row of a route, page by page."""
        page_number = 1
        while True:
            result = self.fetch_page(owner, route, page_number)
            yield from result.rows
            if page_number >= result.total_pages:
                return
            page_number += 1

    def field_names(self, owner: int, route: Union[str, Route]) -> list[str]:
        """Display names of the columns a route shows (used to build add forms)."""
        result = self.fetch_page(owner, route, 1)
        return [normalize_field_name(f.name) for f in result.field_descriptors]

    # ── WRITE ─────────────────────────────────────────────

    def add_record(self, owner: int, route: Union[str, Route], values: Mapping[str, Any]) -> int:
        """
        Insert a record. Keys may be raw column names or display names.
        The owner column is always set to `owner` when the table has one;
        referenced animals and pastures must belong to `owner`.

        Raises:
            ForeignRecordError: If a referenced row belongs to someone else.
        """
        descriptor = lookup(route)
        row = self._to_columns(values)
        if descriptor.owner_column:
            row[descriptor.owner_column] = owner
        self._check_parents(descriptor, owner, row)
        inserted = self.repo.insert(descriptor.route, row)
        logger.info(f"User {owner} added {inserted} row(s) to {descriptor.route}")
        return inserted

    def update_record(
        self,
        owner: int,
        route: Union[str, Route],
        identifying: Mapping[str, Any],
        values: Mapping[str, Any],
    ) -> int:
        """
        Update the owner's records matching `identifying`; returns rows changed.

        Raises:
            ForeignRecordError: If `values` reassigns the owner column or
                points at a row belonging to someone else.
        """
        descriptor = lookup(route)
        changes = self._to_columns(values)
        if descriptor.owner_column and descriptor.owner_column in changes:
            raise ForeignRecordError(str(descriptor.route), [descriptor.owner_column])
        self._check_parents(descriptor, owner, changes)
        updated = self.repo.update(descriptor.route, self._to_columns(identifying), changes, owner=owner)
        logger.info(f"User {owner} updated {updated} row(s) in {descriptor.route}")
        return updated

    def delete_record(self, owner: int, route: Union[str, Route], identifying: Mapping[str, Any]) -> int:
        """Delete the owner's records matching `identifying`; returns rows removed."""
        descriptor = lookup(route)
        deleted = self.repo.delete(descriptor.route, self._to_columns(identifying), owner=owner)
        logger.info(f"User {owner} deleted {deleted} row(s) from {descriptor.route}")
        return deleted

    # ── DISPLAY ───────────────────────────────────────────

    @staticmethod
    def format_page(result: PageResult, route: Union[str, Route]) -> str:
        """Render a page as plain text for a chat message."""
        name = str(lookup(route).route)
        if result.is_empty:
            if result.total_pages:
                return f"📭 Page {result.page_number} of {name} is empty (there are {result.total_pages} pages)."
            return f"📭 No {name} records yet."

        lines = [f"📋 {name} - page {result.page_number}/{result.total_pages}\n"]
        for row in result.rows:
            lines.append("• " + " | ".join(f"{key}: {value}" for key, value in row.items()))
        if result.page_number < result.total_pages:
            lines.append(f"\nNext: /records {name} {result.page_number + 1}")
        return "\n".join(lines)

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _to_columns(values: Mapping[str, Any]) -> dict[str, Any]:
        return {denormalize_field_name(key): value for key, value in values.items()}

    def _check_parents(self, descriptor: RouteDescriptor, owner: int, row: Mapping[str, Any]) -> None:
        foreign = self.repo.foreign_parents(descriptor.route, row, owner)
        if foreign:
            raise ForeignRecordError(str(descriptor.route), foreign)
