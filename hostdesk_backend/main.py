"""HostDesk property dashboard backend - Main Application Entry Point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, settings
from .core.exceptions import HostDeskException
from .core.logging import (
    RequestIdMiddleware,
    get_logger,
    setup_logging,
    shutdown_logging,
)
from .modules.commons import ErrorResponse
from .modules.directory import DirectoryClient, hospitable_router, whatsapp_router
from .modules.property_management import (
    PropertyStore,
    create_store,
    data_router,
    door_codes_router,
    groups_router,
)
from .modules.property_management import (
    router as properties_router,
)

logger = get_logger("main")

API_PREFIX = "/api"


def _error_response(status_code: int, error: str, details: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, details=details).model_dump(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    app_settings: Settings = app.state.settings

    # Startup
    setup_logging(
        log_to_file=app_settings.log_to_file,
        log_level=app_settings.log_level,
        log_file_path=app_settings.log_file_path,
        log_format=app_settings.log_format,
        max_bytes=app_settings.log_max_bytes,
        backup_count=app_settings.log_backup_count,
    )
    logger.info("Starting HostDesk application...")
    logger.info(f"Environment: {app_settings.app_env}")

    if app.state.store is None:
        app.state.store = await create_store(app_settings)
    logger.info(f"Property store backend: {app.state.store.backend}")

    yield

    # Shutdown
    logger.info("Shutting down HostDesk application...")
    try:
        await app.state.store.close()
    finally:
        try:
            await app.state.directory_client.aclose()
        finally:
            shutdown_logging()


def create_app(
    app_settings: Settings | None = None,
    store: PropertyStore | None = None,
    directory_client: DirectoryClient | None = None,
) -> FastAPI:
    """Build the application.

    A ``store`` passed in is used as is; otherwise the store is chosen once
    during startup.
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title="HostDesk API",
        description="Property, messaging group and door code dashboard",
        version=app_settings.app_version,
        docs_url="/api/docs" if app_settings.app_debug else None,
        redoc_url="/api/redoc" if app_settings.app_debug else None,
        openapi_url="/api/openapi.json" if app_settings.app_debug else None,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.store = store
    app.state.directory_client = directory_client or DirectoryClient.from_settings(
        app_settings
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request ID middleware for request tracing
    app.add_middleware(RequestIdMiddleware)

    @app.exception_handler(HostDeskException)
    async def hostdesk_exception_handler(request: Request, exc: HostDeskException):
        """Render HostDesk exceptions as the error envelope."""
        log = logger.warning if exc.status_code < 500 else logger.error
        log(
            f"{request.method} {request.url.path} failed: {exc.message}",
            extra={"status_code": exc.status_code, **exc.details},
        )
        return _error_response(exc.status_code, exc.summary, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ):
        """Report malformed request bodies as validation failures."""
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        logger.warning(f"{request.method} {request.url.path} rejected: {details}")
        return _error_response(400, "Validation failed", details)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unhandled exceptions."""
        logger.exception(f"Unhandled exception: {exc}")
        return _error_response(
            500,
            "Internal server error",
            str(exc) if app_settings.app_debug else "Internal server error",
        )

    # Health check endpoint
    @app.get("/api/health", tags=["Health"])
    async def health_check(request: Request):
        """Health check endpoint."""
        active_store = request.app.state.store
        return {
            "status": "healthy",
            "version": app_settings.app_version,
            "env": app_settings.app_env,
            "store": active_store.backend if active_store else None,
        }

    # Dashboard routes
    app.include_router(data_router, prefix=API_PREFIX)
    app.include_router(properties_router, prefix=API_PREFIX)
    app.include_router(groups_router, prefix=API_PREFIX)
    app.include_router(door_codes_router, prefix=API_PREFIX)

    # External directory routes
    app.include_router(hospitable_router, prefix=API_PREFIX)
    app.include_router(whatsapp_router, prefix=API_PREFIX)

    return app


# Create FastAPI application
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "hostdesk_backend.main:app",
        host="0.0.0.0",
        port=8085,
        reload=settings.app_debug,
    )
