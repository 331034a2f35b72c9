"""
FastAPI application.

Run locally with:

    uvicorn event_locator.main:app --reload

Routers live under ``settings.API_PREFIX`` (``/api``); ``/health`` sits at
the root for load balancers.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from event_locator import __version__
from event_locator.api import api_router
from event_locator.core.config import settings
from event_locator.core.env_validation import validate_or_exit
from event_locator.core.exceptions import EventLocatorError, ValidationError
from event_locator.core.i18n import resolve_language, translate
from event_locator.core.logging import get_logger, setup_logging
from event_locator.db.session import check_db_health, close_db, init_db

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Validate the environment and open the pool on startup; dispose it on shutdown."""
    logger.info(
        "starting_application",
        app_name=settings.APP_NAME,
        environment=settings.APP_ENV,
        version=__version__,
    )

    if settings.is_production:
        validate_or_exit()

    await init_db()
    yield

    logger.info("shutting_down_application")
    await close_db()


app = FastAPI(
    title=settings.APP_NAME,
    description="Event Locator - events, geospatial search and reminders",
    version=__version__,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)

app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/health", tags=["health"])
async def health_check() -> JSONResponse:
    """Liveness plus database connectivity; 503 when the database is unreachable."""
    db_healthy = await check_db_health()

    return JSONResponse(
        status_code=200 if db_healthy else 503,
        content={
            "status": "healthy" if db_healthy else "unhealthy",
            "app_name": settings.APP_NAME,
            "environment": settings.APP_ENV,
            "version": __version__,
            "database": "connected" if db_healthy else "disconnected",
        },
    )


# ================================
# Exception Handlers
# ================================
# Every error body is {"message": "..."}; validation failures add "errors".

def _field_name(loc: tuple[Any, ...]) -> str:
    """("body", "latitude") -> "latitude"; ("query", "startDate") -> "startDate"."""
    parts = [str(part) for part in loc if part not in ("body", "query", "path", "header")]
    if parts:
        return ".".join(parts)
    return str(loc[-1]) if loc else "request"


@app.exception_handler(EventLocatorError)
async def domain_exception_handler(request: Request, exc: EventLocatorError) -> JSONResponse:
    """Map domain exceptions to their status with a localized message."""
    content: dict[str, Any] = {
        "message": translate(exc.code, resolve_language(request), default=exc.message),
    }
    if isinstance(exc, ValidationError):
        content["errors"] = exc.errors

    if exc.status_code >= 500:
        logger.error(
            "server_error",
            error=exc.message,
            cause=repr(exc.__cause__) if exc.__cause__ else None,
            path=request.url.path,
            method=request.method,
        )

    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Turn FastAPI's 422 into a 400 with field-level errors."""
    errors = [
        {"field": _field_name(tuple(error.get("loc", ()))), "message": error.get("msg", "")}
        for error in exc.errors()
    ]
    logger.info("request_validation_failed", path=request.url.path, errors=errors)

    return JSONResponse(
        status_code=400,
        content={
            "message": translate("validation_failed", resolve_language(request)),
            "errors": errors,
        },
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log with traceback, answer with a generic 500."""
    logger.error(
        "unhandled_exception",
        error=str(exc),
        path=request.url.path,
        method=request.method,
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={"message": translate("server_error", resolve_language(request))},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "event_locator.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
