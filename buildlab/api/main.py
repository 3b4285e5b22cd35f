"""Generation service - FastAPI app."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
import time
import uuid

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
import structlog

from .. import __version__
from ..config import get_settings
from ..errors import (
    AuthenticationError,
    BuildLabError,
    BuildRequestNotFoundError,
    GenerationInProgressError,
    OAuthError,
    WebhookError,
)
from ..logging import clear_context, set_correlation_id, setup_logging
from . import routers
from .database import get_engine


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    settings = get_settings()
    setup_logging(
        service_name=settings.service_name,
        log_format=settings.log_format,
        log_level=settings.log_level,
    )
    yield
    await get_engine().dispose()


app = FastAPI(
    title="BuildLab Generator",
    description="Multi-agent project document and prototype generation",
    version=__version__,
    lifespan=lifespan,
)


@app.middleware("http")
async def correlation_middleware(request: Request, call_next):
    correlation_id = request.headers.get("X-Correlation-ID", f"req_{uuid.uuid4().hex[:8]}")
    set_correlation_id(correlation_id, method=request.method, path=request.url.path)

    start = time.time()
    logger = structlog.get_logger()

    try:
        response = await call_next(request)
        duration_ms = (time.time() - start) * 1000

        if response.status_code >= 500:  # noqa: PLR2004
            logger.error(
                "http_request_failed",
                status_code=response.status_code,
                duration_ms=round(duration_ms, 2),
            )
        else:
            logger.info(
                "http_request", status_code=response.status_code, duration_ms=round(duration_ms, 2)
            )

        response.headers["X-Correlation-ID"] = correlation_id
        return response
    except Exception as e:
        duration_ms = (time.time() - start) * 1000
        logger.error(
            "http_request_exception",
            error=str(e),
            error_type=type(e).__name__,
            duration_ms=round(duration_ms, 2),
            exc_info=True,
        )
        raise
    finally:
        clear_context()


_ERROR_STATUS = [
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (BuildRequestNotFoundError, status.HTTP_400_BAD_REQUEST),
    (WebhookError, status.HTTP_400_BAD_REQUEST),
    (OAuthError, status.HTTP_400_BAD_REQUEST),
    (GenerationInProgressError, status.HTTP_409_CONFLICT),
]


@app.exception_handler(BuildLabError)
async def buildlab_error_handler(request: Request, exc: BuildLabError) -> JSONResponse:
    """Render service errors as ``{"error": message}``."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for error_type, code in _ERROR_STATUS:
        if isinstance(exc, error_type):
            status_code = code
            break

    structlog.get_logger().warning(
        "request_rejected" if status_code < 500 else "request_failed",  # noqa: PLR2004
        error=str(exc),
        error_type=type(exc).__name__,
        status_code=status_code,
    )
    return JSONResponse(status_code=status_code, content={"error": str(exc)})


@app.get("/")
async def root():
    """Root endpoint - service information."""
    return {
        "name": "BuildLab Generator",
        "version": __version__,
        "description": "Multi-agent project document and prototype generation",
    }


app.include_router(routers.health.router)
app.include_router(routers.generation.router)
app.include_router(routers.projects.router)
app.include_router(routers.payments.router)
app.include_router(routers.github.router)
