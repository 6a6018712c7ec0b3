from __future__ import annotations

import math
import re
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any, Mapping

from core.domain.entities.price_tick_entity import PriceTickEntity
from core.services.hour_bucket_service import ZONE_ABBREVIATIONS

_OFFSET_TOKEN_RE = re.compile(r"^([+-])(\d{2}):?(\d{2})$")
_COMPACT_OFFSET_RE = re.compile(r"([+-]\d{2})(\d{2})$")
_FRACTION_RE = re.compile(r"\.(\d+)")


class InvalidTickRowError(ValueError):
    """Raised when a raw row cannot be turned into a tick."""


class TickParserService:
    """
    Turns raw source rows into PriceTickEntity values.

    Accepted timestamps:
    - datetime objects (naive ones are interpreted in `default_tz`)
    - ISO-8601 strings, with "T" or a space between date and time
    - an optional trailing numeric offset token ("+0000", "+09:00")
    - an optional trailing zone abbreviation ("UTC", "GMT", "Z", "JST")

    Prices must be finite numbers; NaN and infinities are rejected.
    """

    def __init__(self, default_tz: tzinfo = timezone.utc) -> None:
        self._default_tz = default_tz

    def parse_timestamp(self, value: Any) -> datetime:
        if isinstance(value, datetime):
            ts = value
        else:
            ts = self._parse_timestamp_text(str(value or ""))

        try:
            if ts.tzinfo is None or ts.utcoffset() is None:
                ts = ts.replace(tzinfo=self._default_tz)
            return ts.astimezone(timezone.utc)
        except OverflowError as exc:
            raise InvalidTickRowError(f"timestamp out of range in UTC: {value!r}") from exc

    def _parse_timestamp_text(self, text: str) -> datetime:
        parts = text.strip().split()
        if not parts:
            raise InvalidTickRowError("empty timestamp")

        zone: tzinfo | None = None

        if len(parts) > 1 and parts[-1].isalpha():
            abbr = parts.pop().upper()
            zone = ZONE_ABBREVIATIONS.get(abbr)
            if zone is None:
                raise InvalidTickRowError(f"unknown zone abbreviation: {abbr}")

        if len(parts) > 1:
            m = _OFFSET_TOKEN_RE.match(parts[-1])
            if m:
                parts.pop()
                sign, hh, mm = m.groups()
                delta = timedelta(hours=int(hh), minutes=int(mm))
                zone = timezone(-delta if sign == "-" else delta)

        iso = "T".join(parts)
        if iso[-1] in "Zz":
            iso = iso[:-1] + "+00:00"
        # fromisoformat before 3.11 only takes 3 or 6 fraction digits
        iso = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), iso)
        if "T" in iso:
            iso = _COMPACT_OFFSET_RE.sub(r"\1:\2", iso)

        try:
            ts = datetime.fromisoformat(iso)
        except ValueError as exc:
            raise InvalidTickRowError(f"unparseable timestamp: {text!r}") from exc

        if ts.tzinfo is None and zone is not None:
            ts = ts.replace(tzinfo=zone)
        return ts

    @staticmethod
    def parse_price(value: Any) -> float:
        if value is None or isinstance(value, bool):
            raise InvalidTickRowError(f"invalid price: {value!r}")
        try:
            price = float(value.strip() if isinstance(value, str) else value)
        except (TypeError, ValueError) as exc:
            raise InvalidTickRowError(f"invalid price: {value!r}") from exc

        if not math.isfinite(price):
            raise InvalidTickRowError(f"non-finite price: {value!r}")
        return price

    def parse_row(self, row: Mapping[str, Any]) -> PriceTickEntity:
        code = str(row.get("code") or "").strip()
        if not code:
            raise InvalidTickRowError("missing code")

        return PriceTickEntity(
            timestamp=self.parse_timestamp(row.get("time")),
            code=code,
            price=self.parse_price(row.get("price")),
        )
