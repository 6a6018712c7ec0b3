"""
Application configuration for api-candle.

Centralizes environment variables using python-dotenv.

Note:
- Ticks are read once at startup from a CSV file or a MongoDB collection.
- Hour bucket keys are always computed in UTC; the timezone settings below only
  control how naive input timestamps and query hours are interpreted.
"""

import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """
    Configuration settings for the api-candle service.
    """

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    APP_NAME: str = os.getenv("APP_NAME", "api-candle")

    # Tick source: "csv" | "mongodb"
    TICK_SOURCE: str = os.getenv("TICK_SOURCE", "csv").strip().lower()

    # CSV
    CSV_FILE_PATH: str = os.getenv("CSV_FILE_PATH", "order_books.csv")

    # Mongo
    MONGODB_URL: str = os.getenv("MONGODB_URL", "mongodb://mongo-market-data:27017")
    MONGODB_DB_NAME: str = os.getenv("MONGODB_DB_NAME", "api_candle")
    MONGODB_TICKS_COLLECTION: str = os.getenv("MONGODB_TICKS_COLLECTION", "order_books")
    MONGODB_SERVER_SELECTION_TIMEOUT_MS: int = int(os.getenv("MONGODB_SERVER_SELECTION_TIMEOUT_MS", "5000"))

    # Time handling
    INGEST_TIMEZONE: str = os.getenv("INGEST_TIMEZONE", "UTC")
    DEFAULT_QUERY_TIMEZONE: str = os.getenv("DEFAULT_QUERY_TIMEZONE", "UTC")

    # Candle lookup: "lexicographic" | "temporal"
    FALLBACK_STRATEGY: str = os.getenv("FALLBACK_STRATEGY", "lexicographic").strip().lower()

    INDEX_PROGRESS_EVERY: int = int(os.getenv("INDEX_PROGRESS_EVERY", "10000"))


settings = Settings()
