"""
repositories/paged_repo.py
--------------------------
Runs the registered paged queries for a route and returns one normalized page.
"""

import psycopg2

from db.connection import Database
from models.errors import InvalidPageSizeError, QueryExecutionError
from models.records import PageRequest, PageResult, QueryResult
from repositories.normalizer import normalize_rows
from repositories.query_registry import lookup
from utils.logger import get_logger

logger = get_logger(__name__)


def total_pages(count: int, page_size: int) -> int:
    """ceil(count / page_size); 0 when nothing matches."""
    if page_size <= 0:
        raise InvalidPageSizeError(page_size)
    return (count + page_size - 1) // page_size


class PagedQueryExecutor:
    """Executes the entity and count queries of a route for one owner."""

    def __init__(self, database: Database):
        self.database = database

    def execute(self, request: PageRequest) -> PageResult:
        """
        Fetch one page of a route.

        Args:
            request: Route, owner and page window.

        Returns:
            PageResult with normalized rows, the entity query's column
            descriptors and the total page count.

        Raises:
            UnknownRouteError: If the route is not registered.
            InvalidPageSizeError: If request.limit <= 0.
            QueryExecutionError: If either query fails.
        """
        descriptor = lookup(request.route)
        if request.limit <= 0:
            raise InvalidPageSizeError(request.limit)

        logger.info(
            f"[{request.request_id}] Performing paged query for route {descriptor.route}: "
            f"offset={request.offset} limit={request.limit} owner={request.owner}"
        )

        entity = self._run(request, descriptor.entity_query,
                           (request.owner, request.offset, request.limit))
        counted = self._run(request, descriptor.count_query, (request.owner,))

        count = self._extract_count(counted)
        rows = entity.rows[: request.limit]
        pages = total_pages(count, request.limit)

        logger.info(
            f"[{request.request_id}] {len(rows)} rows on page {request.page_number}, "
            f"{count} matching rows, {pages} pages"
        )

        return PageResult(
            rows=normalize_rows(rows, entity.fields),
            field_descriptors=entity.fields,
            total_pages=pages,
            page_number=request.page_number,
        )

    def _run(self, request: PageRequest, sql: str, params: tuple) -> QueryResult:
        try:
            return self.database.execute(sql, params)
        except psycopg2.Error as e:
            logger.error(f"[{request.request_id}] Paged query for {request.route} failed: {e}")
            raise QueryExecutionError(f"Query for route {request.route!s} failed", e) from e

    @staticmethod
    def _extract_count(result: QueryResult) -> int:
        """First column of the first row of a COUNT query."""
        if not result.rows:
            return 0
        first_row = result.rows[0]
        return int(next(iter(first_row.values())))
