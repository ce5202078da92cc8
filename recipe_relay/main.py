from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.staticfiles import StaticFiles

from recipe_relay.api.exception_handlers import register_exception_handlers
from recipe_relay.api.schemas import HealthOut
from recipe_relay.core.logging import setup_logging
from recipe_relay.core.metrics import PrometheusMetricsMiddleware, metrics_router
from recipe_relay.core.middleware.http_logging import REQUEST_ID_HEADER, HttpLoggingMiddleware
from recipe_relay.core.rate_limit import ClientRateLimiter
from recipe_relay.core.settings import get_settings
from recipe_relay.recipes.router import router as recipes_router

setup_logging()
logger = logging.getLogger("recipe_relay")


def create_app(*, rate_limiter: ClientRateLimiter | None = None) -> FastAPI:
    """Build the application.

    `rate_limiter` overrides the limiter built from settings (tests inject their own).
    """

    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if not settings.openai_api_key:
            logger.warning("OPENAI_API_KEY is not set; /recipe will answer 401")
        yield

    app = FastAPI(
        title=settings.app_name,
        description=(
            "Relays cooking prompts to a language-model completion API and returns the "
            "generated recipe.\n\n"
            "- Prompts and recipes are never stored or logged.\n"
            "- Upstream calls are bounded by a deadline and never retried.\n"
            "- Failures are returned as `{\"error\", \"details\"?}` JSON."
        ),
        lifespan=lifespan,
        docs_url="/swagger",
        openapi_tags=[
            {
                "name": "health",
                "description": "Liveness check for load balancers and the browser client.",
            },
            {
                "name": "recipes",
                "description": "Recipe generation from a free-text prompt.",
            },
            {
                "name": "monitoring",
                "description": "Prometheus-compatible metrics endpoint.",
            },
        ],
    )

    if rate_limiter is None and settings.rate_limit_enabled:
        rate_limiter = ClientRateLimiter.from_settings(settings)
    app.state.rate_limiter = rate_limiter

    app.add_middleware(PrometheusMetricsMiddleware)
    app.add_middleware(HttpLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER, "Retry-After"],
    )

    register_exception_handlers(app)

    @app.get(
        "/health",
        response_model=HealthOut,
        tags=["health"],
        summary="Health check",
        description=(
            "Lightweight endpoint to verify the API process is running. "
            "Does not call the language-model provider."
        ),
    )
    async def health() -> HealthOut:
        return HealthOut(status="ok", timestamp=datetime.now(UTC))

    app.include_router(metrics_router)
    app.include_router(recipes_router)

    # Mounted last so API routes take precedence over files.
    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="static")

    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    logger.info(f"Server running on http://localhost:{settings.port}")
    logger.info(f"Health check: http://localhost:{settings.port}/health")
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
