from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from config.settings import settings
from core.domain.tick_index import TickIndex
from core.usecases.calculate_candle_use_case import CalculateCandleUseCase

from .deps import build_candle_use_case, get_tick_index
from .dtos.candle_dtos import CandleOutDTO, IndexStatsOutDTO

router = APIRouter(tags=["candle"])


@router.get("/candle", response_model=CandleOutDTO)
async def get_candle(
    code: str = Query(..., min_length=1, description="Instrument code, e.g. FTHD"),
    year: int = Query(..., ge=1, le=9999),
    month: int = Query(..., ge=1, le=12),
    day: int = Query(..., ge=1, le=31),
    hour: int = Query(..., ge=0, le=23),
    timezone: Optional[str] = Query(None, description='"UTC", "JST" or an IANA zone name'),
    uc: CalculateCandleUseCase = Depends(build_candle_use_case),
) -> CandleOutDTO:
    """
    Hourly OHLC candle for `code` starting at year-month-day hour:00 in `timezone`.

    Returns all zeros when no tick data is available for the hour.
    """
    try:
        candle = uc.execute_for_hour(
            code=code,
            year=year,
            month=month,
            day=day,
            hour=hour,
            tz=timezone or settings.DEFAULT_QUERY_TIMEZONE,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return CandleOutDTO.model_validate(candle.model_dump())


@router.get("/candle/stats", response_model=IndexStatsOutDTO)
async def get_index_stats(index: TickIndex = Depends(get_tick_index)) -> IndexStatsOutDTO:
    """
    Diagnostics of the tick index loaded at startup.
    """
    return IndexStatsOutDTO.model_validate(index.stats.model_dump())
