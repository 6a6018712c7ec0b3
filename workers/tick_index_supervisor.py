from __future__ import annotations

import logging

from motor.motor_asyncio import AsyncIOMotorClient

from adapters.external.csv.csv_tick_source import CsvTickSource
from adapters.external.database.mongodb_client import get_mongo_client
from adapters.external.database.tick_source_mongodb import TickSourceMongoDB
from config.settings import settings
from core.domain.tick_index import TickIndex
from core.repositories.tick_source_repository import TickSourceRepository
from core.services.hour_bucket_service import HourBucketService
from core.services.tick_parser_service import TickParserService
from core.usecases.build_tick_index_use_case import BuildTickIndexUseCase
from core.usecases.calculate_candle_use_case import FALLBACK_STRATEGIES


class TickIndexSupervisor:
    """
    High-level supervisor for api-candle.

    Responsibilities:
    - Pick the tick source configured in settings (CSV file or MongoDB).
    - Build the tick index once, before the API starts serving.
    - Own the MongoDB client (if any) and close it on shutdown.
    """

    def __init__(self, *, tick_source: TickSourceRepository | None = None) -> None:
        self._logger = logging.getLogger(self.__class__.__name__)
        self._mongo_client: AsyncIOMotorClient | None = None
        self._tick_source = tick_source
        self._index: TickIndex | None = None

    @property
    def index(self) -> TickIndex | None:
        """
        Expose the built index after start().
        """
        return self._index

    @property
    def fallback_strategy(self) -> str:
        return settings.FALLBACK_STRATEGY

    async def start(self) -> None:
        """
        Validate settings, open the tick source and build the index.
        """
        if self.fallback_strategy not in FALLBACK_STRATEGIES:
            raise ValueError(
                f"FALLBACK_STRATEGY must be one of {sorted(FALLBACK_STRATEGIES)}, got {self.fallback_strategy!r}"
            )

        ingest_tz = HourBucketService.resolve_timezone(settings.INGEST_TIMEZONE)
        HourBucketService.resolve_timezone(settings.DEFAULT_QUERY_TIMEZONE)

        source = self._tick_source or self._build_source()
        self._logger.info("Building tick index (source=%s, ingest_tz=%s)", source.name, settings.INGEST_TIMEZONE)

        uc = BuildTickIndexUseCase(
            tick_source=source,
            parser=TickParserService(default_tz=ingest_tz),
            progress_every=settings.INDEX_PROGRESS_EVERY,
        )
        self._index = await uc.execute()
        self._logger.info("Tick index ready: %s codes", len(self._index))

    def _build_source(self) -> TickSourceRepository:
        kind = settings.TICK_SOURCE
        if kind == "csv":
            return CsvTickSource(settings.CSV_FILE_PATH)
        if kind == "mongodb":
            self._mongo_client = get_mongo_client()
            db = self._mongo_client[settings.MONGODB_DB_NAME]
            return TickSourceMongoDB(db, collection=settings.MONGODB_TICKS_COLLECTION)
        raise ValueError(f"TICK_SOURCE must be 'csv' or 'mongodb', got {kind!r}")

    async def stop(self) -> None:
        """
        Release the MongoDB client; the index itself needs no cleanup.
        """
        if self._mongo_client is not None:
            self._mongo_client.close()
            self._mongo_client = None
