from __future__ import annotations

import logging
import os
from bisect import bisect_left
from datetime import datetime, timezone, tzinfo
from typing import Callable, Dict, Optional, Sequence

from core.domain.entities.candle_entity import CandleEntity
from core.domain.tick_index import Bucket, TickIndex
from core.services.hour_bucket_service import ONE_HOUR, HourBucketService


def _neighbours(keys: Sequence[str], target: str) -> tuple[Optional[str], Optional[str]]:
    pos = bisect_left(keys, target)
    lower = keys[pos - 1] if pos > 0 else None
    upper = keys[pos] if pos < len(keys) else None
    return lower, upper


def closest_key_lexicographic(keys: Sequence[str], target: str) -> Optional[str]:
    """
    Closest key by string comparison: of the two sorted neighbours of `target`,
    the one sharing the longer common prefix with it (ties go to the lower key).

    This is a string heuristic, not a time distance: for target "2024-01-01T19"
    it picks "2024-01-01T10" (9 hours away) over "2024-01-01T20" (1 hour away).
    """
    lower, upper = _neighbours(keys, target)
    if lower is None or upper is None:
        return lower or upper
    if len(os.path.commonprefix([upper, target])) > len(os.path.commonprefix([lower, target])):
        return upper
    return lower


def closest_key_temporal(keys: Sequence[str], target: str) -> Optional[str]:
    """
    Closest key by absolute time difference between bucket starts
    (ties go to the earlier bucket).
    """
    lower, upper = _neighbours(keys, target)
    if lower is None or upper is None:
        return lower or upper
    at = HourBucketService.key_to_datetime(target)
    d_lower = at - HourBucketService.key_to_datetime(lower)
    d_upper = HourBucketService.key_to_datetime(upper) - at
    return upper if d_upper < d_lower else lower


FALLBACK_STRATEGIES: Dict[str, Callable[[Sequence[str], str], Optional[str]]] = {
    "lexicographic": closest_key_lexicographic,
    "temporal": closest_key_temporal,
}


class CalculateCandleUseCase:
    """
    Computes the hourly OHLC candle for a code from a TickIndex.

    Lookup order for window [start, start + 1h):
      1) bucket(start) filtered to the window
      2) bucket(start) unfiltered, if the filter removed every entry
      3) the closest other bucket of the same code (see FALLBACK_STRATEGIES)
      4) the all-zero candle

    The index is never mutated; identical calls return identical candles.
    """

    def __init__(
        self,
        *,
        index: TickIndex,
        fallback_strategy: str = "lexicographic",
        logger: logging.Logger | None = None,
    ):
        strategy = (fallback_strategy or "").strip().lower()
        if strategy not in FALLBACK_STRATEGIES:
            raise ValueError(f"unknown fallback strategy: {fallback_strategy!r}")

        self._index = index
        self._closest_key = FALLBACK_STRATEGIES[strategy]
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    def execute_for_hour(
        self,
        *,
        code: str,
        year: int,
        month: int,
        day: int,
        hour: int,
        tz: str | tzinfo | None = None,
    ) -> CandleEntity:
        """
        Candle for the hour starting at year-month-day hour:00 in `tz` (UTC by default).

        Raises:
            ValueError: impossible calendar components or unknown timezone.
        """
        start = HourBucketService.hour_start(year, month, day, hour, tz)
        self._logger.info(
            "Candle request code=%s date=%04d-%02d-%02d hour=%02d tz=%s -> start=%s",
            code,
            int(year),
            int(month),
            int(day),
            int(hour),
            tz or "UTC",
            start.isoformat(),
        )
        candle = self.execute(code=code, start=start)
        self._logger.debug("Calculated candle: %s", candle.to_dict())
        return candle

    def execute(self, *, code: str, start: datetime) -> CandleEntity:
        start = HourBucketService.to_utc(start)
        try:
            end = start + ONE_HOUR
        except OverflowError:
            end = datetime.max.replace(tzinfo=timezone.utc)

        if code not in self._index:
            self._logger.info("No data found for code=%s", code)
            return CandleEntity.empty()

        key = HourBucketService.key(start)
        bucket = self._index.bucket(code, key)

        if bucket is not None:
            in_window = [e.price for e in bucket if start <= e.timestamp < end]
            if in_window:
                return CandleEntity.from_prices(in_window)

            self._logger.info(
                "No entries of bucket %s fall in [%s, %s); using the whole bucket",
                key,
                start.isoformat(),
                end.isoformat(),
            )
            return self._from_bucket(bucket)

        closest = self._closest_key(self._index.sorted_keys(code), key)
        if closest is None:
            self._logger.info("No data found for code=%s at %s", code, key)
            return CandleEntity.empty()

        self._logger.info("No bucket %s for code=%s; using closest bucket %s", key, code, closest)
        return self._from_bucket(self._index.bucket(code, closest))

    @staticmethod
    def _from_bucket(bucket: Optional[Bucket]) -> CandleEntity:
        if not bucket:
            return CandleEntity.empty()
        return CandleEntity.from_prices([e.price for e in bucket])
