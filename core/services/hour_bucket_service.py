from __future__ import annotations

from datetime import datetime, timedelta, timezone, tzinfo
from typing import Dict
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

ONE_HOUR = timedelta(hours=1)

# Abbreviations seen in tick exports and query parameters. Fixed offsets, no DST.
ZONE_ABBREVIATIONS: Dict[str, tzinfo] = {
    "UTC": timezone.utc,
    "GMT": timezone.utc,
    "Z": timezone.utc,
    "JST": timezone(timedelta(hours=9), "JST"),
}


class UnknownTimezoneError(ValueError):
    """Raised when a timezone name is neither a known abbreviation nor an IANA zone."""


class HourBucketService:
    """
    Hour bucketing in a single, fixed time reference (UTC).

    Rules:
    - Key format: "YYYY-MM-DDTHH", zero-padded, so string order == time order.
    - Naive datetimes are rejected; callers convert to an aware instant first.
    """

    KEY_FORMAT = "%Y-%m-%dT%H"

    @staticmethod
    def to_utc(ts: datetime) -> datetime:
        if ts.tzinfo is None or ts.utcoffset() is None:
            raise ValueError(f"naive datetime is not allowed: {ts!r}")
        return ts.astimezone(timezone.utc)

    @classmethod
    def key(cls, ts: datetime) -> str:
        t = cls.to_utc(ts)
        return f"{t.year:04d}-{t.month:02d}-{t.day:02d}T{t.hour:02d}"

    @classmethod
    def key_to_datetime(cls, key: str) -> datetime:
        """
        Inverse of key(): the UTC start of the bucket.
        """
        return datetime.strptime(key, cls.KEY_FORMAT).replace(tzinfo=timezone.utc)

    @staticmethod
    def resolve_timezone(name: str | None) -> tzinfo:
        """
        Resolve "UTC", "JST" (and other known abbreviations) or an IANA zone name.
        """
        raw = (name or "UTC").strip()
        if not raw:
            return timezone.utc

        abbr = ZONE_ABBREVIATIONS.get(raw.upper())
        if abbr is not None:
            return abbr

        try:
            return ZoneInfo(raw)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise UnknownTimezoneError(f"unknown timezone: {raw}") from exc

    @classmethod
    def hour_start(cls, year: int, month: int, day: int, hour: int, tz: str | tzinfo | None = None) -> datetime:
        """
        Build the UTC start of a query window from calendar components in `tz`.

        Raises:
            ValueError: impossible date/hour (e.g. month=13, hour=24).
            UnknownTimezoneError: tz name cannot be resolved.
        """
        zone = tz if isinstance(tz, tzinfo) else cls.resolve_timezone(tz)
        local = datetime(int(year), int(month), int(day), int(hour), tzinfo=zone)
        try:
            return local.astimezone(timezone.utc)
        except OverflowError as exc:
            raise ValueError(f"date out of range: {local.isoformat()}") from exc
