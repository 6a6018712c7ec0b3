from __future__ import annotations

from datetime import datetime

from core.domain.entities.base_entity import ValueEntity


class PriceTickEntity(ValueEntity):
    """
    Represents one observed price for one instrument code at one instant.

    The timestamp is always timezone-aware and normalized to UTC by the parser
    before the entity is created.
    """

    timestamp: datetime
    code: str
    price: float
