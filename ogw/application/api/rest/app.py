import logging
from contextlib import asynccontextmanager

import logfire
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ogw.application.api.errors import map_gateway_error
from ogw.application.api.routes import health, interaction
from ogw.application.di import create_container
from ogw.config import Config, configure_logging
from ogw.domain.shared.error import GatewayError
from ogw.util.di.fastapi import setup_dishka

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await app.state.dishka_container.close()


def create_app(config: Config | None = None) -> FastAPI:
    """Create FastAPI application."""
    # Pydantic Settings populates from env vars at runtime
    config = config or Config()  # type: ignore[call-arg]

    # Configure logging early
    configure_logging(config.logging)
    logger.info("Starting gateway: %s v%s", config.server.name, config.server.version)

    app_instance = FastAPI(
        title=config.server.name,
        description=config.server.description,
        version=config.server.version,
        lifespan=lifespan,
    )

    # Instrument FastAPI for automatic tracing of HTTP requests
    logfire.instrument_httpx()
    logfire.instrument_fastapi(app_instance)

    # Setup dependency injection
    container = create_container(config)
    setup_dishka(container, app_instance)

    app_instance.include_router(health.router)
    app_instance.include_router(interaction.router)

    # Interaction pages reflect per-request state and must never be cached
    @app_instance.middleware("http")
    async def no_store(request: Request, call_next):
        response = await call_next(request)
        if request.url.path.startswith(interaction.router.prefix):
            response.headers["Cache-Control"] = "no-store"
        return response

    # Global gateway error handler - maps domain and infrastructure errors to HTTP responses
    @app_instance.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        http_exc = map_gateway_error(exc)
        if http_exc.status_code >= 500:
            logger.warning("Request failed on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=http_exc.status_code,
            content=http_exc.detail,
        )

    # Global exception handler - logs all unhandled exceptions
    @app_instance.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "Unhandled exception on %s %s",
            request.method,
            request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    return app_instance
