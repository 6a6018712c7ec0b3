# core/domain/entities/base_entity.py
from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict


class ValueEntity(BaseModel):
    """
    Base entity for immutable domain values.

    - Instances are frozen once validated (ticks and candles never change).
    - Ignores unknown fields so raw source documents can be validated directly.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
    )

    def to_dict(self) -> Dict[str, Any]:
        """
        JSON-safe dict for HTTP payloads and logging.
        """
        return self.model_dump(mode="json")
