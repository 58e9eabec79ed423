"""FastAPI host for the MediaBridge method bridge.

This module exposes the method channels over HTTP, with health endpoints and
lifecycle management.

Run with:
    uvicorn mediabridge.main:app --reload

Examples:
    >>> # Save a file (bytes as base64)
    >>> curl -X POST http://localhost:8000/channels/com.mediabridge.app/media_store/saveToPublicStorage \\
    ...     -H 'Content-Type: application/json' \\
    ...     -d '{"arguments": {"fileName": "a.png", "mimeType": "image/png", "bytes": "iVBORw0K"}}'

Tests:
    - tests/unit/test_main.py
"""

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from mediabridge import __version__
from mediabridge.bridge import MethodCall, ResultStatus, create_bridge
from mediabridge.config import Settings, get_settings
from mediabridge.storage.config import StorageConfig
from mediabridge.storage.service import StorageService

logger = logging.getLogger(__name__)


# Request/response models
class MethodCallRequest(BaseModel):
    """Arguments for a method call."""

    arguments: dict[str, Any] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    storage: bool
    protocol: str
    channels: list[str]


def configure_logging(settings: Settings) -> None:
    """Configure root logging from settings."""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(settings: Settings | None = None, service: StorageService | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Application settings (defaults to cached settings).
        service: Storage service (defaults to one built from settings).

    Returns:
        Configured FastAPI app.
    """
    settings = settings or get_settings()
    service = service or StorageService.from_config(StorageConfig.from_settings(settings))
    bridge = create_bridge(service, settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager.

        Drains in-flight external sends on shutdown.
        """
        logger.info(f"Starting MediaBridge v{__version__} (root: {service.config.root})")
        yield
        logger.info("Shutting down MediaBridge")
        await service.close()

    app = FastAPI(
        title="MediaBridge",
        description="Shared storage publishing and file sharing bridge",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )
    app.state.settings = settings
    app.state.service = service
    app.state.bridge = bridge

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.exception(f"Unexpected error: {exc}")
        detail = str(exc) if settings.DEBUG else None
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error", "detail": detail},
        )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Check application health.

        Returns status of:
        - Shared storage root
        - Selected write protocol
        - Registered channels
        """
        storage_ok = service.config.root.is_dir()
        return HealthResponse(
            status="healthy" if storage_ok else "degraded",
            version=__version__,
            storage=storage_ok,
            protocol=service.writer.protocol.name,
            channels=bridge.channels,
        )

    @app.get("/", tags=["Root"])
    async def root() -> dict[str, str]:
        """Root endpoint with basic info."""
        return {
            "name": "MediaBridge",
            "version": __version__,
            "docs": "/docs",
            "health": "/health",
        }

    @app.post("/channels/{channel:path}/{method}", tags=["Channels"])
    async def invoke_method(channel: str, method: str, body: MethodCallRequest) -> JSONResponse:
        """Invoke ``method`` on ``channel``.

        Returns 200 on success, 400 with the structured error on failure and
        404 when the channel or method is not implemented.
        """
        result = await bridge.invoke(channel, MethodCall(method=method, arguments=body.arguments))
        if result.status == ResultStatus.SUCCESS:
            code = status.HTTP_200_OK
        elif result.status == ResultStatus.NOT_IMPLEMENTED:
            code = status.HTTP_404_NOT_FOUND
        else:
            code = status.HTTP_400_BAD_REQUEST
        return JSONResponse(status_code=code, content=result.model_dump(mode="json"))

    return app


app = create_app()
configure_logging(app.state.settings)


# Entry point for development
if __name__ == "__main__":
    import uvicorn

    uvicorn.run("mediabridge.main:app", host="0.0.0.0", port=8000, reload=True)
