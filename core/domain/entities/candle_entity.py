# core/domain/entities/candle_entity.py
from __future__ import annotations

from typing import Sequence

from core.domain.entities.base_entity import ValueEntity


class CandleEntity(ValueEntity):
    """
    Represents an hourly OHLC candle computed from indexed ticks.

    All four fields equal to 0.0 is the "no data" sentinel. A genuine zero
    price cannot be told apart from it; callers that care must special-case it.
    """

    open: float = 0.0
    high: float = 0.0
    low: float = 0.0
    close: float = 0.0

    @classmethod
    def empty(cls) -> "CandleEntity":
        return cls()

    @classmethod
    def from_prices(cls, prices: Sequence[float]) -> "CandleEntity":
        """
        Reduce prices (in stored, chronological order) to OHLC.

        open/close are positional, high/low are the numeric extrema.
        """
        if not prices:
            return cls.empty()
        return cls(
            open=float(prices[0]),
            high=float(max(prices)),
            low=float(min(prices)),
            close=float(prices[-1]),
        )

    @property
    def is_empty(self) -> bool:
        return self.open == 0.0 and self.high == 0.0 and self.low == 0.0 and self.close == 0.0
