from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Dict


class TickSourceUnavailableError(RuntimeError):
    """Raised when the underlying tick source cannot be opened or read."""


class TickSourceRepository(ABC):
    """
    Abstraction for a read-only stream of raw tick rows.

    Each row is a mapping with at least `time`, `code` and `price`; values are
    left unparsed (strings, numbers or datetimes depending on the source).
    """

    name: str = "unknown"

    @abstractmethod
    def iter_rows(self) -> AsyncIterator[Dict[str, Any]]:
        """
        Yield raw rows in source order.

        Raises:
            TickSourceUnavailableError: the source is missing or unreachable.
        """
        raise NotImplementedError
