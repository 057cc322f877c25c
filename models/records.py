"""
models/records.py
-----------------
Value objects passed between the database layer, the paged query
executor and the services.
"""

import uuid
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from models.errors import InvalidPageNumberError, InvalidPageSizeError

# PostgreSQL type OIDs for date, timestamp and timestamptz columns.
# time (1083) and timetz (1266) carry no date and pass through as-is.
DATE_TYPE_CODES = frozenset({1082, 1114, 1184})


@dataclass(frozen=True)
class FieldDescriptor:
    """
    Describes one result column as reported by the driver.

    Attributes:
        name: Raw column name (e.g. 'start_date').
        type_code: PostgreSQL type OID of the column.
    """
    name: str
    type_code: Optional[int] = None

    @property
    def is_date(self) -> bool:
        """True for date, timestamp and timestamptz columns."""
        return self.type_code in DATE_TYPE_CODES


@dataclass(frozen=True)
class QueryResult:
    """Raw outcome of a single statement."""
    rows: list[dict]
    fields: tuple[FieldDescriptor, ...] = ()
    rowcount: int = 0


def page_offset(page_number: int, page_size: int) -> int:
    """
    Convert a 1-based page number into a row offset.

    Raises:
        InvalidPageNumberError: If page_number < 1.
        InvalidPageSizeError: If page_size <= 0.
    """
    if page_size <= 0:
        raise InvalidPageSizeError(page_size)
    if page_number < 1:
        raise InvalidPageNumberError(page_number)
    return (page_number - 1) * page_size


@dataclass(frozen=True)
class PageRequest:
    """
    One page of one route, scoped to an owner.

    Attributes:
        route: Route name (see repositories.query_registry.Route).
        owner: user_id of the authenticated owner.
        offset: Rows to skip.
        limit: Maximum rows to return.
        request_id: Unique id used to correlate log lines.
    """
    route: str
    owner: Any
    offset: int
    limit: int
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @classmethod
    def for_page(cls, route: str, owner: Any, page_number: int, page_size: int) -> "PageRequest":
        """Build the request for a 1-based page number."""
        return cls(
            route=route,
            owner=owner,
            offset=page_offset(page_number, page_size),
            limit=page_size,
        )

    @property
    def page_number(self) -> int:
        if self.limit <= 0:
            return 1
        return self.offset // self.limit + 1


@dataclass(frozen=True)
class PageResult:
    """
    A normalized page of rows.

    Attributes:
        rows: Read-only rows keyed by display name ('Start Date').
        field_descriptors: Columns of the entity query, raw names.
        total_pages: ceil(matching rows / page size), 0 when nothing matches.
        page_number: The page these rows belong to.
    """
    rows: tuple[Mapping[str, Any], ...]
    field_descriptors: tuple[FieldDescriptor, ...]
    total_pages: int
    page_number: int = 1

    @property
    def is_empty(self) -> bool:
        return not self.rows


def freeze_row(row: Mapping[str, Any]) -> Mapping[str, Any]:
    """Return a read-only copy of a row."""
    return MappingProxyType(dict(row))
