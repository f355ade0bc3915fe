from datetime import datetime, timezone

import pytest

from briteverify.utils import external_id_to_str, format_timestamp, parse_bool, parse_int, parse_timestamp


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("08-10-2021 04:03 pm", datetime(2021, 8, 10, 16, 3, tzinfo=timezone.utc)),
        ("08-10-2021 04:03 AM", datetime(2021, 8, 10, 4, 3, tzinfo=timezone.utc)),
        ("2021-07-27T21:10:10.000+0000", datetime(2021, 7, 27, 21, 10, 10, tzinfo=timezone.utc)),
        ("", None),
        (None, None),
    ],
)
def test_parse_timestamp(raw, expected):
    assert parse_timestamp(raw) == expected


def test_unparsable_timestamp_is_logged_not_raised(caplog):
    assert parse_timestamp("next tuesday") is None
    assert "next tuesday" in caplog.text


def test_format_timestamp_matches_list_format():
    assert format_timestamp(datetime(2021, 8, 10, 16, 3, tzinfo=timezone.utc)) == "08-10-2021 04:03 pm"


@pytest.mark.parametrize("raw, expected", [(True, True), ("true", True), ("False", False), (None, False)])
def test_parse_bool(raw, expected):
    assert parse_bool(raw) is expected


def test_parse_int_accepts_numeric_strings():
    assert parse_int("2") == 2
    assert parse_int(None) == 0
    assert parse_int("", default=None) is None


def test_external_id_to_str():
    assert external_id_to_str(12345) == "12345"
    assert external_id_to_str(None) is None


@pytest.mark.parametrize(
    "value",
    [
        datetime(2021, 8, 10, 16, 3, tzinfo=timezone.utc),
        datetime(2021, 7, 27, 21, 10, 10, tzinfo=timezone.utc),
        datetime(2021, 7, 27, 21, 10, 10, 250000, tzinfo=timezone.utc),
    ],
)
def test_format_timestamp_is_read_back_unchanged(value):
    assert parse_timestamp(format_timestamp(value)) == value


def test_format_timestamp_keeps_seconds_as_iso():
    assert format_timestamp(datetime(2021, 7, 27, 21, 10, 10, tzinfo=timezone.utc)) == "2021-07-27T21:10:10+00:00"
