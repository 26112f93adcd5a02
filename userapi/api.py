"""
FastAPI app entry point aggregating routers under userapi/routes.
Keep as `uvicorn userapi.api:app`, or build a fresh app with `create_app()`.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .db import get_conn, get_db_path
from .logs import ensure_log_schema
from .repository import user_repo

logger = logging.getLogger(__name__)


async def plain_text_http_error(_request, exc: StarletteHTTPException):
    # Error bodies are the bare message, not a JSON envelope.
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=getattr(exc, "headers", None))


def create_app(db_path: str | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Resolve the DB once; get_db opens a connection per request from it.
        path = get_db_path(db_path)
        with get_conn(path) as conn:
            user_repo.ensure_schema(conn)
            ensure_log_schema(conn)
        app.state.db_path = path
        logger.info("users db at %s", path)
        try:
            yield
        finally:
            app.state.db_path = None

    app = FastAPI(title="users-crud-api", version=__version__, lifespan=lifespan)
    app.add_exception_handler(StarletteHTTPException, plain_text_http_error)

    from .routes import base as base_routes
    from .routes import users as users_routes
    from .routes import logs as logs_routes

    app.include_router(base_routes.router)
    app.include_router(users_routes.router)
    app.include_router(logs_routes.router)
    return app


app = create_app()
