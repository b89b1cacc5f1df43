"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import ServerSettings
from app.core.logging_safety import safe_log_identifier
from app.errors import ApiError
from app.repositories.memory import InMemoryStore
from app.routes import admin_router, comments_router, posts_router, users_router
from app.routes.dependencies import get_request_correlation_id
from app.schemas.error import ErrorResponse

logger = logging.getLogger("app.access")


def _validation_details(exc: RequestValidationError) -> dict:
    errors = [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "message": str(error.get("msg", "Invalid value")),
        }
        for error in exc.errors()
    ]
    return {"errors": errors}


def create_app(server_settings: ServerSettings | None = None) -> FastAPI:
    server_settings = server_settings or ServerSettings()
    app = FastAPI(title="BlogX API", version="1.0.0")
    app.state.store = InMemoryStore()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=server_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        correlation_id = get_request_correlation_id(request)
        started = time.perf_counter()
        response = await call_next(request)
        response.headers["X-Correlation-Id"] = correlation_id
        logger.info(
            "request.completed correlation_id=%s method=%s path=%s status=%s duration_ms=%.1f",
            safe_log_identifier(correlation_id, prefix="cid"),
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )
        return response

    @app.exception_handler(ApiError)
    async def handle_api_error(_, exc: ApiError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.payload.model_dump(mode="json", exclude_none=True),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(_, exc: RequestValidationError) -> JSONResponse:
        payload = ErrorResponse(
            code="VALIDATION_ERROR",
            message="Invalid request payload",
            details=_validation_details(exc),
        )
        return JSONResponse(status_code=400, content=payload.model_dump(mode="json", exclude_none=True))

    @app.get("/health", tags=["Health"])
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    api_prefix = "/api/v1"
    app.include_router(users_router, prefix=api_prefix)
    app.include_router(posts_router, prefix=api_prefix)
    app.include_router(comments_router, prefix=api_prefix)
    app.include_router(admin_router, prefix=api_prefix)

    return app


app = create_app()
