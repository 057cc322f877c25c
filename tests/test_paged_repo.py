from datetime import date

import psycopg2
import pytest

from models.errors import (
    InvalidPageNumberError,
    InvalidPageSizeError,
    QueryExecutionError,
    UnknownRouteError,
)
from models.records import PageRequest, page_offset
from repositories.paged_repo import PagedQueryExecutor, total_pages
from tests.conftest import DATE_OID, INT_OID, TEXT_OID, count_response, rows_response


@pytest.mark.parametrize(
    "count, page_size, expected",
    [(12, 5, 3), (0, 5, 0), (5, 5, 1), (6, 5, 2), (1, 5, 1)],
)
def test_total_pages(count, page_size, expected):
    assert total_pages(count, page_size) == expected


def test_total_pages_rejects_non_positive_page_size():
    with pytest.raises(InvalidPageSizeError):
        total_pages(10, 0)


@pytest.mark.parametrize("page_number, expected", [(1, 0), (2, 5), (3, 10)])
def test_page_offset(page_number, expected):
    assert page_offset(page_number, 5) == expected


def test_page_offset_rejects_page_zero_and_bad_sizes():
    with pytest.raises(InvalidPageNumberError):
        page_offset(0, 5)
    with pytest.raises(InvalidPageSizeError):
        page_offset(1, 0)
    with pytest.raises(InvalidPageSizeError):
        page_offset(1, -5)


def test_page_request_for_page():
    request = PageRequest.for_page("livestock", 42, 3, 5)
    assert (request.offset, request.limit, request.page_number) == (10, 5, 3)


def test_page_requests_get_distinct_ids():
    ids = {PageRequest.for_page("livestock", 1, 1, 5).request_id for _ in range(100)}
    assert len(ids) == 100


def test_owner_with_no_rows_gets_an_empty_page(database, fake_conn):
    fake_conn.responses = [
        rows_response([], columns=[("livestock_id", INT_OID)]),
        count_response(0),
    ]

    with pytest.warns(UserWarning):
        result = PagedQueryExecutor(database).execute(PageRequest.for_page("livestock", 42, 1, 5))

    assert result.rows == ()
    assert result.total_pages == 0
    assert [f.name for f in result.field_descriptors] == ["livestock_id"]


def test_queries_are_bound_with_owner_offset_and_limit(database, fake_conn):
    fake_conn.responses = [
        rows_response([{"pasture_id": 11}, {"pasture_id": 12}]),
        count_response(12),
    ]

    result = PagedQueryExecutor(database).execute(PageRequest.for_page("pastures", 42, 3, 5))

    (entity_sql, entity_params), (count_sql, count_params) = fake_conn.executed
    assert entity_params == (42, 10, 5)
    assert count_params == (42,)
    assert "COUNT(*)" in count_sql
    assert result.total_pages == 3
    assert result.page_number == 3
    assert result.rows == ({"Pasture Id": 11}, {"Pasture Id": 12})


def test_rows_are_normalized_with_dates_formatted(database, fake_conn):
    fake_conn.responses = [
        rows_response(
            [{"med_id": 1, "medication_name": "Penicillin", "start_date": date(2023, 5, 1)}],
            columns=[("med_id", INT_OID), ("medication_name", TEXT_OID), ("start_date", DATE_OID)],
        ),
        count_response(1),
    ]

    result = PagedQueryExecutor(database).execute(PageRequest.for_page("medication", 7, 1, 5))

    assert result.rows == ({"Med Id": 1, "Medication Name": "Penicillin", "Start Date": "2023-05-01"},)
    assert result.field_descriptors[2].is_date


def test_page_never_exceeds_limit(database, fake_conn):
    fake_conn.responses = [
        rows_response([{"calf_id": i} for i in range(8)]),
        count_response(8),
    ]

    result = PagedQueryExecutor(database).execute(PageRequest.for_page("calves", 1, 1, 5))

    assert len(result.rows) == 5
    assert result.total_pages == 2


def test_offset_past_the_end_gives_empty_rows_but_real_page_count(database, fake_conn):
    fake_conn.responses = [rows_response([], columns=[("vacc_id", INT_OID)]), count_response(7)]

    with pytest.warns(UserWarning):
        result = PagedQueryExecutor(database).execute(PageRequest.for_page("vaccinations", 1, 9, 5))

    assert result.rows == ()
    assert result.total_pages == 2


def test_unknown_route_runs_no_queries(database, fake_conn):
    request = PageRequest(route="bogusRoute", owner=1, offset=0, limit=5)
    with pytest.raises(UnknownRouteError):
        PagedQueryExecutor(database).execute(request)
    assert fake_conn.executed == []


def test_non_positive_limit_runs_no_queries(database, fake_conn):
    request = PageRequest(route="livestock", owner=1, offset=0, limit=0)
    with pytest.raises(InvalidPageSizeError):
        PagedQueryExecutor(database).execute(request)
    assert fake_conn.executed == []


def test_entity_query_failure_skips_count_query(database, fake_conn):
    failure = psycopg2.OperationalError("server closed the connection unexpectedly")
    fake_conn.responses = [failure, count_response(3)]

    with pytest.raises(QueryExecutionError) as excinfo:
        PagedQueryExecutor(database).execute(PageRequest.for_page("livestock", 1, 1, 5))

    assert excinfo.value.cause is failure
    assert excinfo.value.__cause__ is failure
    assert len(fake_conn.executed) == 1
    assert fake_conn.rollbacks == 1


def test_count_query_failure_fails_the_whole_call(database, fake_conn):
    fake_conn.responses = [
        rows_response([{"livestock_id": 1}]),
        psycopg2.ProgrammingError("syntax error at or near \"COUNT\""),
    ]

    with pytest.raises(QueryExecutionError):
        PagedQueryExecutor(database).execute(PageRequest.for_page("livestock", 1, 1, 5))

    assert len(fake_conn.executed) == 2
