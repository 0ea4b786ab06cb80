from datetime import date, datetime, time, timezone

import pytest

from petshop.utils.tz import combine, day_bounds, iso, parse_date


@pytest.mark.parametrize(
    "raw,esperado",
    [
        ("2024-01-01", date(2024, 1, 1)),
        (" 2024-02-29 ", date(2024, 2, 29)),
        ("2024-01-01T15:30:00Z", date(2024, 1, 1)),
        ("2024-13-01", None),
        ("ontem", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_date_is_lenient(raw, esperado):
    assert parse_date(raw) == esperado


def test_day_bounds_cover_whole_day():
    inicio, fim = day_bounds(date(2024, 1, 1))
    assert inicio == datetime(2024, 1, 1, 0, 0, 0)
    assert fim == datetime(2024, 1, 1, 23, 59, 59, 999000)
    assert inicio.tzinfo is None and fim.tzinfo is None


def test_combine_needs_both_parts():
    assert combine(date(2024, 1, 1), time(9, 30)) == datetime(2024, 1, 1, 9, 30)
    assert combine(None, time(9, 30)) is None
    assert combine(date(2024, 1, 1), None) is None


def test_combine_drops_offset():
    aware = time(9, 30, tzinfo=timezone.utc)
    assert combine(date(2024, 1, 1), aware).tzinfo is None


def test_iso():
    assert iso(datetime(2024, 1, 1, 8, 0)) == "2024-01-01T08:00:00"
    assert iso(None) is None
