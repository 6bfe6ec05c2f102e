"""FastAPI application factory."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlmodel import SQLModel
from starlette.middleware.sessions import SessionMiddleware

from chronos.api.routes import auth, logs, sync as sync_routes
from chronos.config import get_settings
from chronos.db.engine import get_engine

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Build and return the FastAPI app."""

    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Create tables on startup (idempotent)
        SQLModel.metadata.create_all(get_engine())
        yield

    app = FastAPI(
        title="Chronos API",
        description="Activity log ingestion and dashboard backend",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(SessionMiddleware, secret_key=settings.session_secret, same_site="lax")

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    app.include_router(auth.router, prefix="/auth", tags=["auth"])
    app.include_router(logs.router, prefix="/logs", tags=["logs"])
    app.include_router(sync_routes.router, prefix="/sync", tags=["sync"])

    return app


# Module-level app instance for uvicorn
app = create_app()
