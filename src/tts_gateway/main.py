"""
FastAPI Application Entry Point.

Usage:
    uvicorn tts_gateway.main:app --host 0.0.0.0 --port 8000

Query validation failures (missing or stale voice token, ...) are answered
with 400 and FastAPI's usual ``{"detail": [...]}`` body.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from tts_gateway.api.dependencies import get_synthesis_service
from tts_gateway.api.routes import router
from tts_gateway.core.logging import configure_logging, get_logger, info, warn

_LOG = get_logger("tts-gateway.main")


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    warn(_LOG, "request_invalid", path=request.url.path, errors=len(exc.errors()))
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


@asynccontextmanager
async def lifespan(app: FastAPI):
    info(_LOG, "startup")
    yield
    # Only close what was actually created
    if get_synthesis_service.cache_info().currsize:
        await get_synthesis_service().close()
    info(_LOG, "shutdown")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: App with the synthesis router and validation handler.
    """
    configure_logging()

    app = FastAPI(title="tts-gateway", lifespan=lifespan)
    app.include_router(router)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    return app


app = create_app()
