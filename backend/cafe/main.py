"""FastAPI application entry point."""

import json
import logging
import sys
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from cafe.api.routes import api_router
from cafe.core.config import Settings, get_settings
from cafe.core.errors import CafeError
from cafe.core.file_utils import MENU_UPLOAD_SUBDIR, UPLOAD_URL_PREFIX
from cafe.core.rate_limit import configure_limiter, limiter
from cafe.db.session import Database

logger = logging.getLogger(__name__)
request_logger = logging.getLogger("requests")

API_TITLE = "Cafe Management System"
API_VERSION = "1.0.0"


class JSONFormatter(logging.Formatter):
    """One JSON object per log line."""

    def format(self, record):
        return json.dumps({
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        })


def configure_logging(settings: Settings) -> None:
    """Configure the root logger - human-readable in debug, JSON otherwise."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.log_level))
    root_logger.handlers.clear()

    if settings.debug:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    else:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())

    root_logger.addHandler(handler)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging all HTTP requests and responses."""

    SKIP_PATHS = {"/", "/docs", "/openapi.json"}

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.SKIP_PATHS or request.url.path.endswith("/health"):
            return await call_next(request)

        start_time = time.time()
        client_ip = request.client.host if request.client else "unknown"

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            request_logger.error(
                f"Error: {request.method} {request.url.path} - "
                f"Exception: {str(e)} - Time: {process_time:.3f}s - Client: {client_ip}"
            )
            raise

        process_time = time.time() - start_time
        log_level = logging.WARNING if response.status_code >= 400 else logging.INFO
        request_logger.log(
            log_level,
            f"{request.method} {request.url.path} - "
            f"Status: {response.status_code} - Time: {process_time:.3f}s - Client: {client_ip}"
        )
        return response


def _format_validation_errors(errors) -> List[Dict[str, Any]]:
    formatted = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        message = str(error.get("msg", "Invalid value"))
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        formatted.append({"field": ".".join(loc) or None, "message": message})
    return formatted


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """Every failure leaves as ``{"message": ...}`` with a status for its kind."""

    @app.exception_handler(CafeError)
    async def cafe_error_handler(request: Request, exc: CafeError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = _format_validation_errors(exc.errors())
        message = errors[0]["message"] if errors else "Validation failed"
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": message, "errors": errors},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content={"message": f"Too many requests. Limit: {exc.detail}"},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        content = {"message": "Server error"}
        if settings.debug:
            content["error"] = str(exc)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """Build the application around an explicit settings object and store handle."""
    settings = settings or get_settings()
    owns_database = database is None
    database = database or Database.from_settings(settings)

    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {API_TITLE} (debug={settings.debug})")
        (Path(settings.upload_dir) / MENU_UPLOAD_SUBDIR).mkdir(parents=True, exist_ok=True)

        # SQLite gets its schema directly; other databases go through alembic
        if settings.is_sqlite:
            database.create_all()
            logger.info("Database tables created/verified")

        yield

        if owns_database:
            database.dispose()
        logger.info(f"Shutting down {API_TITLE}")

    app = FastAPI(
        title=API_TITLE,
        description="Backend API for orders, menu, inventory, billing and reservations",
        version=API_VERSION,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    app.state.settings = settings
    app.state.database = database

    # Rate limiting setup
    configure_limiter(settings)
    app.state.limiter = limiter
    register_exception_handlers(app, settings)

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    # CORS middleware - added last so it runs first (Starlette LIFO order)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "Accept", "Origin", "X-Requested-With"],
        max_age=600,
    )

    app.include_router(api_router, prefix=settings.api_prefix)
    app.mount(
        UPLOAD_URL_PREFIX,
        StaticFiles(directory=settings.upload_dir, check_dir=False),
        name="uploads",
    )

    @app.get(f"{settings.api_prefix}/health", tags=["health"])
    def health_check():
        """Basic liveness check endpoint."""
        return {"status": "ok", "message": f"{API_TITLE} API is running"}

    @app.get(f"{settings.api_prefix}/health/ready", tags=["health"])
    def readiness_check(request: Request):
        """Readiness probe: the database answers SELECT 1."""
        healthy = request.app.state.database.ping()
        return JSONResponse(
            status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "ready" if healthy else "degraded",
                "checks": {"database": "healthy" if healthy else "unhealthy"},
            },
        )

    @app.get("/", include_in_schema=False)
    def root():
        return {
            "message": f"Welcome to the {API_TITLE} API",
            "docs": "/docs",
            "health": f"{settings.api_prefix}/health",
        }

    return app


app = create_app()
