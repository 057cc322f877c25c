import pytest
from psycopg2 import sql

from models.errors import ForeignRecordError, InvalidPageNumberError, InvalidRecordError, UnknownRouteError
from models.records import PageResult
from services.record_service import RecordService
from tests.conftest import DATE_OID, INT_OID, TEXT_OID, count_response, rows_response, write_response


@pytest.fixture
def service(database):
    return RecordService(database, page_size=2)


def test_fetch_page_uses_configured_page_size(service, fake_conn):
    fake_conn.responses = [rows_response([{"livestock_id": 5}]), count_response(3)]

    result = service.fetch_page(42, "livestock", 2)

    assert fake_conn.executed[0][1] == (42, 2, 2)
    assert result.total_pages == 2
    assert result.rows == ({"Livestock Id": 5},)


def test_fetch_page_validates_before_querying(service, fake_conn):
    with pytest.raises(InvalidPageNumberError):
        service.fetch_page(42, "livestock", 0)
    with pytest.raises(UnknownRouteError):
        service.fetch_page(42, "sheep", 1)
    assert fake_conn.executed == []


def test_iter_rows_walks_every_page(service, fake_conn):
    fake_conn.responses = [
        rows_response([{"pasture_id": 1}, {"pasture_id": 2}]),
        count_response(3),
        rows_response([{"pasture_id": 3}]),
        count_response(3),
    ]

    rows = list(service.iter_rows(42, "pastures"))

    assert [r["Pasture Id"] for r in rows] == [1, 2, 3]
    assert [params for _, params in fake_conn.executed] == [(42, 0, 2), (42,), (42, 2, 2), (42,)]


def test_field_names_are_display_names(service, fake_conn):
    fake_conn.responses = [
        rows_response([], columns=[("vacc_id", INT_OID), ("vac_type", TEXT_OID), ("date_given", DATE_OID)]),
        count_response(0),
    ]

    with pytest.warns(UserWarning):
        assert service.field_names(42, "vaccinations") == ["Vacc Id", "Vac Type", "Date Given"]


def test_add_record_fills_owner_for_owned_tables(service, fake_conn):
    fake_conn.responses = [write_response(1)]

    service.add_record(42, "livestock", {"Tag Number": "A12", "species": "cattle"})

    assert fake_conn.executed[0][1] == ("A12", "cattle", 42)


def test_add_record_overrides_a_caller_supplied_owner(service, fake_conn):
    fake_conn.responses = [write_response(1)]

    service.add_record(42, "livestock", {"owner_id": "7", "tag_number": "X"})

    assert fake_conn.executed[0][1] == (42, "X")


def test_add_record_checks_the_referenced_animal_belongs_to_owner(service, fake_conn):
    fake_conn.responses = [count_response(1), write_response(1)]

    service.add_record(42, "vaccinations", {"animal_id": "3", "vac_type": "Blackleg"})

    assert fake_conn.executed[0][1] == ("3", 42)
    assert fake_conn.executed[1][1] == ("3", "Blackleg")


def test_add_record_refuses_another_owners_animal(service, fake_conn):
    fake_conn.responses = [count_response(0)]

    with pytest.raises(ForeignRecordError) as excinfo:
        service.add_record(42, "vaccinations", {"animal_id": "3", "vac_type": "Blackleg"})

    assert excinfo.value.columns == ["animal_id"]
    assert len(fake_conn.executed) == 1


def test_add_calf_checks_every_parent_column(service, fake_conn):
    fake_conn.responses = [count_response(1), count_response(0), count_response(1)]

    with pytest.raises(ForeignRecordError) as excinfo:
        service.add_record(42, "calves", {"calf_id": "20", "cow_id": "5", "sired_id": "6"})

    assert excinfo.value.columns == ["cow_id"]
    assert [params for _, params in fake_conn.executed] == [("20", 42), ("5", 42), ("6", 42)]


def test_update_record_refuses_to_reassign_the_owner(service, fake_conn):
    with pytest.raises(InvalidRecordError):
        service.update_record(42, "livestock", {"livestock_id": "4"}, {"Owner Id": "7"})

    assert fake_conn.executed == []


def test_update_record_refuses_moving_a_treatment_to_another_owners_animal(service, fake_conn):
    fake_conn.responses = [count_response(0)]

    with pytest.raises(ForeignRecordError):
        service.update_record(42, "medication", {"med_id": "2"}, {"Livestock Id": "99"})

    assert len(fake_conn.executed) == 1


def test_update_and_delete_are_scoped_to_owner(service, fake_conn):
    fake_conn.responses = [write_response(1), write_response(1), write_response(1)]

    service.update_record(42, "pastures", {"pasture_id": "8"}, {"name": "North Field"})
    service.delete_record(42, "livestock", {"livestock_id": "4"})
    service.delete_record(42, "vetVisits", {"visit_id": "9"})

    assert [params for _, params in fake_conn.executed] == [
        ("North Field", "8", 42),
        ("4", 42),
        ("9", 42),
    ]


def test_delete_on_a_join_scoped_route_is_limited_to_owned_animals(service, fake_conn):
    fake_conn.responses = [write_response(0)]

    assert service.delete_record(42, "vaccinations", {"vacc_id": "1"}) == 0

    query, params = fake_conn.executed[0]
    assert isinstance(query, sql.Composed)
    assert params == ("1", 42)
    assert "SELECT livestock_id FROM livestock WHERE owner_id = %s" in repr(query)


def test_format_page_lists_rows_and_next_page():
    result = PageResult(
        rows=({"Pasture Id": 1, "Name": "North"},),
        field_descriptors=(),
        total_pages=3,
        page_number=1,
    )

    text = RecordService.format_page(result, "pastures")

    assert "pastures - page 1/3" in text
    assert "• Pasture Id: 1 | Name: North" in text
    assert "/records pastures 2" in text


def test_format_page_for_empty_results():
    nothing = PageResult(rows=(), field_descriptors=(), total_pages=0)
    past_end = PageResult(rows=(), field_descriptors=(), total_pages=2, page_number=5)

    assert RecordService.format_page(nothing, "calves") == "📭 No calves records yet."
    assert "there are 2 pages" in RecordService.format_page(past_end, "calves")
