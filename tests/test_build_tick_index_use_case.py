import asyncio
import logging

from core.usecases.build_tick_index_use_case import BuildTickIndexUseCase

from conftest import ListTickSource, utc


def _build(source, **kwargs):
    return asyncio.run(BuildTickIndexUseCase(tick_source=source, **kwargs).execute())


def test_malformed_rows_are_skipped_and_ingestion_continues():
    rows = [
        {"time": "2024-01-01T10:05:00Z", "code": "AAA", "price": "5"},
        {"time": "garbage", "code": "AAA", "price": "6"},
        {"time": "2024-01-01T10:10:00Z", "code": "AAA", "price": "not-a-number"},
        {"time": "2024-01-01T10:15:00Z", "code": "AAA", "price": "nan"},
        {"time": "2024-01-01T10:20:00Z", "code": "AAA", "price": "1"},
    ]
    index = _build(ListTickSource(rows))

    assert [e.price for e in index.bucket("AAA", "2024-01-01T10")] == [5.0, 1.0]
    assert index.stats.total_rows == 5
    assert index.stats.indexed_rows == 2
    assert index.stats.skipped_rows == 3


def test_unavailable_source_yields_empty_index(caplog):
    with caplog.at_level(logging.ERROR):
        index = _build(ListTickSource([], fail_before=True))
    assert len(index) == 0
    assert index.stats.source == "memory"
    assert "unavailable" in caplog.text


def test_failure_mid_stream_keeps_rows_indexed_so_far():
    rows = [{"time": "2024-01-01T10:05:00Z", "code": "AAA", "price": "5"}]
    index = _build(ListTickSource(rows, fail_after=True))
    assert [e.price for e in index.bucket("AAA", "2024-01-01T10")] == [5.0]


def test_progress_is_logged(caplog):
    rows = [{"time": f"2024-01-01T10:{m:02d}:00Z", "code": "AAA", "price": str(m)} for m in range(4)]
    with caplog.at_level(logging.INFO):
        index = _build(ListTickSource(rows), progress_every=2)
    assert "Processed 2 rows" in caplog.text
    assert "Processed 4 rows" in caplog.text
    assert index.stats.min_time == utc(2024, 1, 1, 10, 0)
    assert index.stats.max_time == utc(2024, 1, 1, 10, 3)


def test_rows_out_of_range_in_utc_are_skipped():
    rows = [
        {"time": "0001-01-01T00:30:00+09:00", "code": "AAA", "price": "5"},
        {"time": "9999-12-31T23:30:00-01:00", "code": "AAA", "price": "6"},
        {"time": "2024-01-01T10:00:00Z", "code": "AAA", "price": "7"},
    ]
    index = _build(ListTickSource(rows))

    assert [e.price for e in index.bucket("AAA", "2024-01-01T10")] == [7.0]
    assert index.stats.indexed_rows == 1
    assert index.stats.skipped_rows == 2
