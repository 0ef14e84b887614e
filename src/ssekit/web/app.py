"""FastAPI app factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..core.config import SessionConfig
from ..core.errors import SerializationError, SessionClosedError, SinkWriteError
from ..core.registry import SessionRegistry
from .config import WebConfig

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """App lifespan: close every open session on shutdown."""
    yield

    registry: SessionRegistry = app.state.registry
    open_sessions = registry.sessions()
    for session in open_sessions:
        session.close()
    if open_sessions:
        logger.info("Closed %d SSE sessions on shutdown", len(open_sessions))


def create_app(
    config: WebConfig | None = None,
    session_config: SessionConfig | None = None,
    registry: SessionRegistry | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Each app owns its session registry, created here and dropped with the
    app. Pass ``registry`` to share one with code outside the app.
    """
    from .. import __version__

    config = config or WebConfig.load()

    app = FastAPI(
        title="ssekit",
        description="Server-Sent Events sessions with out-of-band push",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.web_config = config
    app.state.session_config = session_config or SessionConfig.load()
    app.state.registry = registry if registry is not None else SessionRegistry()

    origins = config.cors_origins or [
        "http://localhost",
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from .events.router import router as events_router

    app.include_router(events_router)

    @app.exception_handler(SessionClosedError)
    async def session_closed_handler(request: Request, exc: SessionClosedError):
        return JSONResponse(status_code=410, content={"detail": exc.message})

    @app.exception_handler(SerializationError)
    async def serialization_handler(request: Request, exc: SerializationError):
        return JSONResponse(status_code=422, content={"detail": exc.message})

    @app.exception_handler(SinkWriteError)
    async def sink_write_handler(request: Request, exc: SinkWriteError):
        logger.warning("Push to session %s failed: %s", exc.session_id, exc.message)
        return JSONResponse(status_code=503, content={"detail": exc.message})

    @app.get("/api/health")
    async def health(request: Request):
        return {"status": "ok", "sessions": len(request.app.state.registry)}

    return app
