import asyncio

import pytest

from adapters.external.csv.csv_tick_source import CsvTickSource
from core.repositories.tick_source_repository import TickSourceUnavailableError
from core.usecases.build_tick_index_use_case import BuildTickIndexUseCase


async def _collect(source):
    return [row async for row in source.iter_rows()]


def test_reads_rows_with_header(tmp_path):
    path = tmp_path / "order_books.csv"
    path.write_text(
        "id,time,code,price\n"
        "1,2021-12-22 03:12:45 +0000 UTC,FTHD,5027\n"
        "2,2021-12-22 03:30:00 +0000 UTC,FTHD,5030\n",
        encoding="utf-8",
    )
    rows = asyncio.run(_collect(CsvTickSource(path)))
    assert [r["price"] for r in rows] == ["5027", "5030"]
    assert rows[0]["code"] == "FTHD"


def test_missing_file_raises_unavailable(tmp_path):
    with pytest.raises(TickSourceUnavailableError):
        asyncio.run(_collect(CsvTickSource(tmp_path / "missing.csv")))


def test_missing_columns_raise_unavailable(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("id,when,price\n1,x,2\n", encoding="utf-8")
    with pytest.raises(TickSourceUnavailableError):
        asyncio.run(_collect(CsvTickSource(path)))


def test_empty_file_yields_nothing(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("", encoding="utf-8")
    assert asyncio.run(_collect(CsvTickSource(path))) == []


def test_missing_file_builds_empty_index(tmp_path):
    uc = BuildTickIndexUseCase(tick_source=CsvTickSource(tmp_path / "missing.csv"))
    index = asyncio.run(uc.execute())
    assert len(index) == 0
    assert index.stats.source == "csv"


def test_csv_end_to_end_index(tmp_path):
    path = tmp_path / "order_books.csv"
    path.write_text(
        "\ufefftime,code,price\n"
        "2021-12-22 03:05:00 +0000 UTC,FTHD,5\n"
        "not-a-time,FTHD,100\n"
        "2021-12-22 03:10:00 +0000 UTC,FTHD,1\n",
        encoding="utf-8",
    )
    index = asyncio.run(BuildTickIndexUseCase(tick_source=CsvTickSource(path, yield_every=1)).execute())
    assert [e.price for e in index.bucket("FTHD", "2021-12-22T03")] == [5.0, 1.0]
    assert index.stats.skipped_rows == 1
