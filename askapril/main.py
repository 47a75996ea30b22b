"""FastAPI application entry point."""

import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from askapril.api import router as api_router
from askapril.core.conversation_engine import get_synthesis_worker
from askapril.core.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Run the synthesis worker for the lifetime of the app."""
    worker = get_synthesis_worker()
    task = asyncio.create_task(worker.run_forever())
    try:
        yield
    finally:
        worker.stop()
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info(f"Synthesis worker shut down: {worker.stats}")


app = FastAPI(
    title="Ask April AI Engine",
    description="Leadership assessment scoring, AI co-pilot documents and Daily Ripple audio",
    version="0.1.0",
    lifespan=lifespan,
)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(content={"status": "ok"}, status_code=200)


# Include API router
app.include_router(api_router, prefix="/api")
