from __future__ import annotations

from datetime import datetime
from typing import Optional

from core.domain.entities.base_entity import ValueEntity


class IndexStatsEntity(ValueEntity):
    """
    Diagnostics collected while building the tick index.

    total_rows counts every row pulled from the source, including the ones
    skipped because their timestamp, code or price could not be parsed.
    """

    source: str = "none"

    total_rows: int = 0
    indexed_rows: int = 0
    skipped_rows: int = 0

    codes: int = 0
    buckets: int = 0

    min_time: Optional[datetime] = None
    max_time: Optional[datetime] = None
