from datetime import timedelta, timezone

import pytest

from core.services.tick_parser_service import InvalidTickRowError, TickParserService

from conftest import utc


@pytest.mark.parametrize(
    "raw",
    [
        "2021-12-22T03:12:45Z",
        "2021-12-22T03:12:45+00:00",
        "2021-12-22 03:12:45",
        "2021-12-22 03:12:45 UTC",
        "2021-12-22 03:12:45 +0000 UTC",
        "2021-12-22 12:12:45 +0900 JST",
        "2021-12-22 12:12:45 JST",
        "2021-12-22T12:12:45+0900",
    ],
)
def test_parse_timestamp_formats(raw):
    assert TickParserService().parse_timestamp(raw) == utc(2021, 12, 22, 3, 12, 45)


def test_parse_timestamp_truncates_nanoseconds():
    ts = TickParserService().parse_timestamp("2021-12-22 03:12:45.123456789 +0000 UTC")
    assert ts == utc(2021, 12, 22, 3, 12, 45, 123456)


def test_naive_timestamps_use_default_timezone():
    parser = TickParserService(default_tz=timezone(timedelta(hours=9)))
    assert parser.parse_timestamp("2021-12-22 12:00:00") == utc(2021, 12, 22, 3)
    # explicit zone wins over the default
    assert parser.parse_timestamp("2021-12-22 12:00:00 UTC") == utc(2021, 12, 22, 12)


@pytest.mark.parametrize("raw", ["", "not a date", "2021-13-45 99:00:00", "2021-12-22 03:00:00 XYZ", None])
def test_parse_timestamp_rejects_garbage(raw):
    with pytest.raises(InvalidTickRowError):
        TickParserService().parse_timestamp(raw)


def test_parse_price():
    assert TickParserService.parse_price("5027.5") == 5027.5
    assert TickParserService.parse_price(" 12 ") == 12.0
    assert TickParserService.parse_price(7) == 7.0


@pytest.mark.parametrize("raw", ["abc", "", "nan", "NaN", "inf", "-inf", None, True])
def test_parse_price_rejects_non_finite_or_garbage(raw):
    with pytest.raises(InvalidTickRowError):
        TickParserService.parse_price(raw)


def test_parse_row():
    tick = TickParserService().parse_row({"id": "1", "time": "2021-12-22 03:12:45 +0000 UTC", "code": " FTHD ", "price": "5027"})
    assert tick.code == "FTHD"
    assert tick.price == 5027.0
    assert tick.timestamp == utc(2021, 12, 22, 3, 12, 45)


def test_parse_row_requires_code():
    with pytest.raises(InvalidTickRowError):
        TickParserService().parse_row({"time": "2021-12-22T03:00:00Z", "code": "", "price": "1"})


@pytest.mark.parametrize(
    "raw, micros",
    [
        ("2021-12-22 03:12:45.5 UTC", 500000),
        ("2021-12-22T03:12:45.12Z", 120000),
        ("2021-12-22 03:12:45.1234 +0000 UTC", 123400),
    ],
)
def test_parse_timestamp_short_fractions(raw, micros):
    assert TickParserService().parse_timestamp(raw) == utc(2021, 12, 22, 3, 12, 45, micros)


def test_parse_timestamp_out_of_range_in_utc():
    with pytest.raises(InvalidTickRowError):
        TickParserService().parse_timestamp("0001-01-01T00:30:00+09:00")
    with pytest.raises(InvalidTickRowError):
        TickParserService(default_tz=timezone(timedelta(hours=-1))).parse_timestamp("9999-12-31 23:30:00")
