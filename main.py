import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from adapters.entry.http.candle_router import router as candle_router
from config.settings import settings
from workers.tick_index_supervisor import TickIndexSupervisor


def _setup_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


supervisor = TickIndexSupervisor()


@asynccontextmanager
async def lifespan(app: FastAPI):
    _setup_logging()
    logging.getLogger(__name__).info("Starting api-candle (lifespan startup)...")

    await supervisor.start()
    app.state.tick_index = supervisor.index
    app.state.fallback_strategy = supervisor.fallback_strategy

    try:
        yield
    finally:
        logging.getLogger(__name__).info("Shutting down api-candle (lifespan shutdown)...")
        await supervisor.stop()


app = FastAPI(title=settings.APP_NAME, version="0.1.0", lifespan=lifespan)
app.include_router(candle_router)


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=3000)
