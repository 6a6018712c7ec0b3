from datetime import datetime, timezone

import pytest

from core.domain.entities.price_tick_entity import PriceTickEntity
from core.domain.tick_index import TickIndexBuilder
from core.repositories.tick_source_repository import TickSourceUnavailableError


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def build_index():
    """Build a TickIndex from (datetime, code, price) tuples, in the given order."""

    def _build(ticks, source="test"):
        builder = TickIndexBuilder(source=source)
        for ts, code, price in ticks:
            builder.add(PriceTickEntity(timestamp=ts, code=code, price=price))
        return builder.build()

    return _build


class ListTickSource:
    """In-memory tick source yielding raw rows, optionally failing."""

    name = "memory"

    def __init__(self, rows, fail_before=False, fail_after=False):
        self._rows = list(rows)
        self._fail_before = fail_before
        self._fail_after = fail_after

    async def iter_rows(self):
        if self._fail_before:
            raise TickSourceUnavailableError("source missing")
        for row in self._rows:
            yield row
        if self._fail_after:
            raise TickSourceUnavailableError("connection lost")
