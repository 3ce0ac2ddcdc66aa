from __future__ import annotations

import json
from typing import Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, get_settings
from .logging_config import configure_logging, logger
from .routes import api_router
from .services import (
    HistoryError,
    InvalidSessionIdError,
    SessionNotFoundError,
    create_history_paginator,
    create_session_storage,
)
from .utils import error_response


# Register global exception handlers for consistent error responses across the API
def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def _validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.debug("validation error", extra={"errors": exc.errors(), "path": str(request.url)})
        return JSONResponse(
            {"ok": False, "error": "Invalid request", "detail": exc.errors()},
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    @app.exception_handler(HTTPException)
    async def _http_exception_handler(request: Request, exc: HTTPException):
        logger.debug(
            "http error",
            extra={"detail": exc.detail, "status": exc.status_code, "path": str(request.url)},
        )
        detail = exc.detail
        if not isinstance(detail, str):
            detail = json.dumps(detail)
        return JSONResponse({"ok": False, "error": detail}, status_code=exc.status_code)

    @app.exception_handler(InvalidSessionIdError)
    async def _invalid_session_handler(request: Request, exc: InvalidSessionIdError):
        return error_response(str(exc), status_code=status.HTTP_400_BAD_REQUEST, retryable=False)

    @app.exception_handler(SessionNotFoundError)
    async def _not_found_handler(request: Request, exc: SessionNotFoundError):
        return error_response(str(exc), status_code=status.HTTP_404_NOT_FOUND, retryable=False)

    @app.exception_handler(HistoryError)
    async def _history_error_handler(request: Request, exc: HistoryError):
        logger.warning(
            "session history unavailable",
            extra={"error": str(exc), "path": str(request.url), "retryable": exc.retryable},
        )
        return error_response(
            str(exc), status_code=status.HTTP_503_SERVICE_UNAVAILABLE, retryable=exc.retryable
        )

    @app.exception_handler(ValueError)
    async def _value_error_handler(request: Request, exc: ValueError):
        return error_response(str(exc), status_code=status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error", extra={"path": str(request.url)})
        return JSONResponse(
            {"ok": False, "error": "Internal server error"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.debug)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        docs_url=settings.resolved_docs_url,
        redoc_url=None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Built once per process; every request reads through these without mutating them
    app.state.settings = settings
    app.state.storage = create_session_storage(settings)
    app.state.paginator = create_history_paginator(settings)

    register_exception_handlers(app)
    app.include_router(api_router)
    logger.info("serving session logs", extra={"projects_dir": str(settings.projects_dir)})
    return app


app = create_app()


__all__ = ["app", "create_app", "register_exception_handlers"]
