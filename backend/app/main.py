"""
FastAPI application entry point.

Builds the relay application: one flow store per application instance,
the periodic cleanup task bound to the lifespan, CORS headers on every
response, and relay errors rendered as {"error": message}.
"""

import logging
from contextlib import asynccontextmanager
from datetime import timedelta

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.routes.router import router
from app.core.config import Settings, settings as default_settings
from app.core.errors import FlowRelayError, MethodNotSupportedError
from app.services.flow_cleanup import FlowCleanupTask
from app.services.flow_relay import FlowRelay
from app.services.flow_store import MemoryFlowStore

logger = logging.getLogger(__name__)


def _error_response(exc: FlowRelayError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(FlowRelayError)
    async def flow_relay_error_handler(request: Request, exc: FlowRelayError):
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.debug("Rejected invalid request body: %s", exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request body"},
        )

    @app.exception_handler(StarletteHTTPException)
    async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            return _error_response(MethodNotSupportedError())
        return await http_exception_handler(request, exc)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error("Unhandled error on %s %s: %r", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
            headers=request.app.state.settings.cors_headers,
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Run the periodic flow cleanup for the lifetime of the application."""
    app_settings: Settings = app.state.settings
    relay: FlowRelay = app.state.flow_relay

    cleanup = None
    if app_settings.FLOW_CLEANUP_INTERVAL_SECONDS > 0:
        cleanup = FlowCleanupTask(relay, app_settings.FLOW_CLEANUP_INTERVAL_SECONDS)
        cleanup.start()

    logger.info(
        "%s %s started (environment: %s)",
        app_settings.PROJECT_NAME,
        app_settings.APP_VERSION,
        app_settings.ENVIRONMENT,
    )
    try:
        yield
    finally:
        if cleanup is not None:
            await cleanup.stop()
        relay.store.clear()


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """
    Create the relay application.

    API docs are served everywhere except in production.

    Args:
        app_settings: Settings to use (defaults to the environment settings)

    Returns:
        Configured FastAPI application
    """
    app_settings = app_settings or default_settings

    logging.basicConfig(level=app_settings.LOG_LEVEL.upper())

    is_production = app_settings.ENVIRONMENT == "production"
    app = FastAPI(
        title=app_settings.PROJECT_NAME,
        version=app_settings.APP_VERSION,
        lifespan=lifespan,
        openapi_url=None if is_production else "/openapi.json",
    )
    app.state.settings = app_settings
    app.state.flow_relay = FlowRelay(
        store=MemoryFlowStore(),
        retention=timedelta(minutes=app_settings.FLOW_RETENTION_MINUTES),
        sweep_on_request=app_settings.FLOW_SWEEP_ON_REQUEST,
    )

    cors_headers = app_settings.cors_headers

    @app.middleware("http")
    async def add_cors_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers.update(cors_headers)
        return response

    _register_exception_handlers(app)
    app.include_router(router)
    return app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn."""
    uvicorn.run(app, host="0.0.0.0", port=default_settings.PORT)


if __name__ == "__main__":
    run()
