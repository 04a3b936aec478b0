"""Software-only simulation / demo - no real systems will be contacted or modified."""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import get_settings
from .logging_config import logger, setup_logging
from .routes import health, stamp, stress
from .sinks.factory import get_app_sink

setup_logging()
settings = get_settings()


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    yield
    await get_app_sink().close()
    get_app_sink.cache_clear()
    logger.info("app.stop")


app = FastAPI(title=settings.app_name, version="1.0.0", lifespan=lifespan)

logger.info("app.start", shipping=settings.shipping_enabled)


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:  # pragma: no cover - wiring
    logger.warning("value.error", path=str(request.url), reason=str(exc))
    return JSONResponse(status_code=400, content={"error_code": "VALUE_ERROR", "message": str(exc)})


app.include_router(health.router)
app.include_router(stress.router)
app.include_router(stamp.router)


@app.get("/", include_in_schema=False)
async def root() -> JSONResponse:  # pragma: no cover - simple endpoint
    return JSONResponse({"message": f"{settings.app_name} harness is running."})
