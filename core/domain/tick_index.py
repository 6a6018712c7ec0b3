# core/domain/tick_index.py
from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from types import MappingProxyType
from typing import Dict, List, Mapping, NamedTuple, Optional, Set, Tuple

from core.domain.entities.index_stats_entity import IndexStatsEntity
from core.domain.entities.price_tick_entity import PriceTickEntity
from core.services.hour_bucket_service import HourBucketService


class BucketEntry(NamedTuple):
    timestamp: datetime
    price: float


Bucket = Tuple[BucketEntry, ...]


class TickIndex:
    """
    Read-only index of ticks: code -> hour bucket key -> entries.

    Entries inside a bucket are ordered by timestamp (insertion order among
    equal timestamps). Nothing mutates an index after it is built, so it can be
    shared between concurrent request handlers without locking.
    """

    def __init__(
        self,
        buckets: Mapping[str, Mapping[str, Bucket]] | None = None,
        stats: IndexStatsEntity | None = None,
    ) -> None:
        self._codes: Mapping[str, Mapping[str, Bucket]] = MappingProxyType(
            {code: MappingProxyType(dict(by_key)) for code, by_key in (buckets or {}).items()}
        )
        self._sorted_keys: Dict[str, Tuple[str, ...]] = {
            code: tuple(sorted(by_key)) for code, by_key in self._codes.items()
        }
        self._stats = stats or IndexStatsEntity()

    @classmethod
    def empty(cls, source: str = "none") -> "TickIndex":
        return cls(stats=IndexStatsEntity(source=source))

    @property
    def stats(self) -> IndexStatsEntity:
        return self._stats

    def __contains__(self, code: object) -> bool:
        return code in self._codes

    def __len__(self) -> int:
        return len(self._codes)

    def codes(self) -> Tuple[str, ...]:
        return tuple(self._codes)

    def buckets_for(self, code: str) -> Mapping[str, Bucket]:
        return self._codes.get(code, MappingProxyType({}))

    def bucket(self, code: str, key: str) -> Optional[Bucket]:
        return self.buckets_for(code).get(key)

    def sorted_keys(self, code: str) -> Tuple[str, ...]:
        """
        Bucket keys of `code` in ascending (chronological) order.
        """
        return self._sorted_keys.get(code, ())


class TickIndexBuilder:
    """
    Accumulates ticks into hour buckets and produces an immutable TickIndex.

    Usage:
        builder = TickIndexBuilder(source="csv")
        for tick in ticks:
            builder.add(tick)
        index = builder.build()
    """

    def __init__(self, *, source: str = "none") -> None:
        self._source = source
        self._buckets: Dict[str, Dict[str, List[BucketEntry]]] = defaultdict(dict)

        self._total_rows = 0
        self._indexed_rows = 0
        self._skipped_rows = 0
        self._codes: Set[str] = set()
        self._min_time: Optional[datetime] = None
        self._max_time: Optional[datetime] = None

    @property
    def total_rows(self) -> int:
        return self._total_rows

    def skip(self) -> None:
        """
        Record a row that was pulled from the source but could not be parsed.
        """
        self._total_rows += 1
        self._skipped_rows += 1

    def add(self, tick: PriceTickEntity) -> None:
        self._total_rows += 1
        self._indexed_rows += 1

        key = HourBucketService.key(tick.timestamp)
        self._buckets[tick.code].setdefault(key, []).append(BucketEntry(tick.timestamp, tick.price))

        self._codes.add(tick.code)
        if self._min_time is None or tick.timestamp < self._min_time:
            self._min_time = tick.timestamp
        if self._max_time is None or tick.timestamp > self._max_time:
            self._max_time = tick.timestamp

    def build(self) -> TickIndex:
        """
        Sort every bucket by timestamp (stable) and freeze the result.
        """
        frozen: Dict[str, Dict[str, Bucket]] = {}
        bucket_count = 0
        for code, by_key in self._buckets.items():
            frozen[code] = {
                key: tuple(sorted(entries, key=lambda e: e.timestamp))
                for key, entries in by_key.items()
            }
            bucket_count += len(by_key)

        stats = IndexStatsEntity(
            source=self._source,
            total_rows=self._total_rows,
            indexed_rows=self._indexed_rows,
            skipped_rows=self._skipped_rows,
            codes=len(self._codes),
            buckets=bucket_count,
            min_time=self._min_time,
            max_time=self._max_time,
        )
        return TickIndex(frozen, stats)
