from __future__ import annotations

import asyncio
import csv
from pathlib import Path
from typing import Any, AsyncIterator, Dict

from core.repositories.tick_source_repository import TickSourceRepository, TickSourceUnavailableError

REQUIRED_COLUMNS = ("time", "code", "price")


class CsvTickSource(TickSourceRepository):
    """
    Reads raw tick rows from a CSV export with a header row.

    Expected columns: time, code, price (extra columns such as `id` are passed
    through and ignored downstream). Relative paths are resolved against the
    current working directory.
    """

    name = "csv"

    def __init__(self, path: str | Path, *, encoding: str = "utf-8-sig", yield_every: int = 10_000):
        self._path = Path(path)
        self._encoding = encoding
        self._yield_every = max(int(yield_every), 1)

    @property
    def path(self) -> Path:
        return self._path.resolve()

    async def iter_rows(self) -> AsyncIterator[Dict[str, Any]]:
        path = self.path
        if not path.is_file():
            raise TickSourceUnavailableError(f"CSV file not found at {path}")

        try:
            with path.open(newline="", encoding=self._encoding) as fh:
                reader = csv.DictReader(fh)
                if reader.fieldnames is None:
                    return
                reader.fieldnames = [(f or "").strip() for f in reader.fieldnames]

                missing = [c for c in REQUIRED_COLUMNS if c not in reader.fieldnames]
                if missing:
                    raise TickSourceUnavailableError(f"CSV file {path} is missing columns: {missing}")

                for n, row in enumerate(reader, start=1):
                    yield row
                    # let the event loop breathe on large files
                    if n % self._yield_every == 0:
                        await asyncio.sleep(0)
        except (OSError, UnicodeDecodeError, csv.Error) as exc:
            raise TickSourceUnavailableError(f"cannot read CSV file {path}: {exc}") from exc
