from __future__ import annotations

import logging

from core.domain.tick_index import TickIndex, TickIndexBuilder
from core.repositories.tick_source_repository import TickSourceRepository, TickSourceUnavailableError
from core.services.tick_parser_service import InvalidTickRowError, TickParserService


class BuildTickIndexUseCase:
    """
    Pulls every raw row from a tick source and builds the hour-bucketed index.

    Behavior:
      - Rows with an unparseable timestamp, code or price are skipped.
      - If the source cannot be opened, returns an empty index (never raises).
      - If the source fails mid-stream, returns what was indexed so far.
    """

    def __init__(
        self,
        *,
        tick_source: TickSourceRepository,
        parser: TickParserService | None = None,
        logger: logging.Logger | None = None,
        progress_every: int = 10_000,
    ):
        self._source = tick_source
        self._parser = parser or TickParserService()
        self._logger = logger or logging.getLogger(self.__class__.__name__)
        self._progress_every = max(int(progress_every), 1)

    async def execute(self) -> TickIndex:
        self._logger.info("Loading and indexing ticks from source=%s", self._source.name)
        builder = TickIndexBuilder(source=self._source.name)

        try:
            async for row in self._source.iter_rows():
                try:
                    tick = self._parser.parse_row(row)
                except InvalidTickRowError as exc:
                    builder.skip()
                    self._logger.debug("Skipping tick row: %s row=%s", exc, row)
                else:
                    builder.add(tick)

                if builder.total_rows % self._progress_every == 0:
                    self._logger.info("Processed %s rows...", builder.total_rows)
        except TickSourceUnavailableError as exc:
            if builder.total_rows == 0:
                self._logger.error("Tick source unavailable (%s); serving an empty index", exc)
                return TickIndex.empty(source=self._source.name)
            self._logger.error(
                "Tick source failed after %s rows (%s); serving a partial index",
                builder.total_rows,
                exc,
            )

        index = builder.build()
        stats = index.stats
        self._logger.info(
            "Indexed %s of %s tick rows (skipped=%s) codes=%s buckets=%s",
            stats.indexed_rows,
            stats.total_rows,
            stats.skipped_rows,
            stats.codes,
            stats.buckets,
        )
        if stats.min_time is not None:
            self._logger.info(
                "Time range: %s to %s",
                stats.min_time.isoformat(),
                stats.max_time.isoformat(),
            )
        return index
