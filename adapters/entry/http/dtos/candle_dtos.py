from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class CandleOutDTO(BaseModel):
    """
    DTO returned by API for an hourly candle.

    All fields are 0 when no data was found for the requested hour.
    """

    open: float
    high: float
    low: float
    close: float


class IndexStatsOutDTO(BaseModel):
    """
    DTO returned by API for tick index diagnostics.
    """

    source: str
    total_rows: int
    indexed_rows: int
    skipped_rows: int
    codes: int
    buckets: int
    min_time: Optional[datetime] = None
    max_time: Optional[datetime] = None
