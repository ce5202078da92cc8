from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from recipe_relay.core.rate_limit import rate_limit_headers
from recipe_relay.core.routing import safe_route_label
from recipe_relay.domain.exceptions import (
    InternalError,
    InvalidInputError,
    RateLimitedError,
    RecipeRelayError,
)

logger = logging.getLogger("recipe_relay.errors")


def _error_content(exc: RecipeRelayError) -> dict[str, str]:
    content = {"error": exc.message}
    if exc.details:
        content["details"] = exc.details
    return content


def _error_headers(request: Request, exc: RecipeRelayError) -> dict[str, str]:
    # Set by the rate-limit dependency; absent for unlimited routes or when it didn't run.
    result = getattr(request.state, "rate_limit", None)
    headers = rate_limit_headers(result) if result is not None else {}
    if isinstance(exc, RateLimitedError) and exc.retry_after is not None:
        headers["Retry-After"] = str(exc.retry_after)
    return headers


def register_exception_handlers(app: FastAPI) -> None:
    """Register application exception handlers."""

    @app.exception_handler(RecipeRelayError)
    async def handle_recipe_relay_error(
        request: Request,
        exc: RecipeRelayError,
    ) -> JSONResponse:
        # Do not log request bodies: prompts are user content.
        level = logging.WARNING if exc.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "Request failed",
            extra={
                "request_id": getattr(request.state, "request_id", None),
                "http_method": request.method,
                "request_path": safe_route_label(request),
                "status_code": exc.status_code,
                "error": type(exc).__name__,
            },
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_content(exc),
            headers=_error_headers(request, exc),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        # Only report field locations and messages; never echo the submitted input.
        details = "; ".join(
            f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', '')}"
            for err in exc.errors()
        )
        return await handle_recipe_relay_error(
            request, InvalidInputError("Invalid request body", details=details or None)
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        # The exception text may echo user input; keep it in the server log only.
        logger.error(
            "Unexpected error while processing request",
            exc_info=exc,
            extra={
                "request_id": getattr(request.state, "request_id", None),
                "http_method": request.method,
                "request_path": safe_route_label(request),
                "status_code": 500,
                "error": type(exc).__name__,
            },
        )
        error = InternalError()
        return JSONResponse(
            status_code=error.status_code,
            content=_error_content(error),
            headers=_error_headers(request, error),
        )
