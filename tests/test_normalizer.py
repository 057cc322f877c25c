from datetime import date, datetime, time, timedelta, timezone

import pytest

from models.errors import NormalizationWarning
from models.records import FieldDescriptor
from repositories.normalizer import (
    denormalize_field_name,
    format_date_value,
    normalize_field_name,
    normalize_rows,
)
from tests.conftest import DATE_OID, INT_OID, TEXT_OID, TIME_OID, TIMESTAMPTZ_OID


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("start_date", "Start Date"),
        ("med_interval", "Med Interval"),
        ("name", "Name"),
        ("vac_type", "Vac Type"),
        ("Start Date", "Start Date"),
    ],
)
def test_normalize_field_name(raw, expected):
    assert normalize_field_name(raw) == expected


def test_denormalize_field_name_reverses_normalization():
    assert denormalize_field_name("Start Date") == "start_date"
    assert denormalize_field_name("vac_type") == "vac_type"


def test_empty_rows_are_returned_unchanged():
    with pytest.warns(NormalizationWarning):
        assert normalize_rows([], [FieldDescriptor("start_date", DATE_OID)]) == ()


def test_date_column_is_formatted_and_key_renamed():
    rows = [{"med_id": 1, "start_date": "2023-05-01T00:00:00Z"}]
    fields = [FieldDescriptor("med_id", INT_OID), FieldDescriptor("start_date", DATE_OID)]

    result = normalize_rows(rows, fields)

    assert result == ({"Med Id": 1, "Start Date": "2023-05-01"},)


def test_aware_datetimes_are_converted_to_utc_before_formatting():
    late_evening_in_chicago = datetime(2023, 5, 1, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
    assert format_date_value(late_evening_in_chicago) == "2023-05-02"


def test_date_values_of_each_kind():
    assert format_date_value(date(2024, 2, 29)) == "2024-02-29"
    assert format_date_value(datetime(2024, 2, 29, 13, 5)) == "2024-02-29"
    assert format_date_value(None) is None
    assert format_date_value(date(2024, 2, 29), "%d/%m/%Y") == "29/02/2024"


def test_unparseable_date_string_is_left_alone():
    assert format_date_value("not a date") == "not a date"


def test_non_date_columns_are_not_formatted():
    rows = [{"notes": "2023-05-01T00:00:00Z"}]
    result = normalize_rows(rows, [FieldDescriptor("notes", TEXT_OID)])
    assert result[0]["Notes"] == "2023-05-01T00:00:00Z"


def test_time_of_day_columns_pass_through():
    feed_time = time(6, 30)
    descriptor = FieldDescriptor("feed_time", TIME_OID)

    result = normalize_rows([{"feed_time": feed_time}], [descriptor])

    assert not descriptor.is_date
    assert result[0]["Feed Time"] == feed_time


def test_input_rows_are_not_mutated():
    rows = [{"visit_date": date(2023, 1, 2), "vet_name": "Dr. Ames"}]
    normalize_rows(rows, [FieldDescriptor("visit_date", DATE_OID)])
    assert rows == [{"visit_date": date(2023, 1, 2), "vet_name": "Dr. Ames"}]


def test_output_rows_are_read_only():
    result = normalize_rows([{"cost": 10}], [])
    with pytest.raises(TypeError):
        result[0]["Cost"] = 20


def test_renormalizing_normalized_rows_changes_nothing():
    fields = [FieldDescriptor("date_given", TIMESTAMPTZ_OID), FieldDescriptor("vac_type", TEXT_OID)]
    once = normalize_rows(
        [{"date_given": datetime(2023, 5, 1, tzinfo=timezone.utc), "vac_type": "Blackleg"}],
        fields,
    )
    twice = normalize_rows(once, fields)
    assert twice == once == ({"Date Given": "2023-05-01", "Vac Type": "Blackleg"},)


def test_colliding_names_keep_the_later_value():
    rows = [{"start_date": "first", "Start_date": "second"}]
    with pytest.warns(NormalizationWarning):
        result = normalize_rows(rows, [])
    assert result == ({"Start Date": "second"},)
