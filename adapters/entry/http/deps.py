from __future__ import annotations

from fastapi import HTTPException, Request

from config.settings import settings
from core.domain.tick_index import TickIndex
from core.usecases.calculate_candle_use_case import CalculateCandleUseCase


def get_tick_index(request: Request) -> TickIndex:
    """
    Return the index published on app.state by the startup supervisor.
    """
    index = getattr(request.app.state, "tick_index", None)
    if index is None:
        raise HTTPException(status_code=503, detail="tick index is not loaded yet")
    return index


def get_fallback_strategy(request: Request) -> str:
    return getattr(request.app.state, "fallback_strategy", None) or settings.FALLBACK_STRATEGY


def build_candle_use_case(request: Request) -> CalculateCandleUseCase:
    return CalculateCandleUseCase(
        index=get_tick_index(request),
        fallback_strategy=get_fallback_strategy(request),
    )
