from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging
import time
import traceback
from chalkboard.core.config import settings
from chalkboard.core.database import init_db
from chalkboard.core.exceptions import (
    ChalkboardException,
    ValidationError,
    NotFoundError,
    AuthenticationError,
    ContentBlockedError,
    NoTextDetectedError,
    RetryExhaustedError,
    UpstreamError,
)
from chalkboard.services.retry import RATE_LIMIT, TIMEOUT

# Import models to register them with SQLModel
from chalkboard.models import models  # noqa: F401

# Import API router
from chalkboard.api.v1 import api_router

logging.basicConfig(
    level=logging.DEBUG if settings.is_development else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Chalkboard API", version="1.0.0")


def status_code_for(exc: ChalkboardException) -> int:
    """HTTP status for an application exception."""
    if isinstance(exc, (ValidationError, NotFoundError)):
        # Missing resources are reported as bad requests
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, AuthenticationError):
        return status.HTTP_401_UNAUTHORIZED
    if isinstance(exc, (ContentBlockedError, NoTextDetectedError)):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    if isinstance(exc, RetryExhaustedError):
        if exc.kind == RATE_LIMIT:
            return status.HTTP_429_TOO_MANY_REQUESTS
        if exc.kind == TIMEOUT:
            return status.HTTP_504_GATEWAY_TIMEOUT
        return status.HTTP_502_BAD_GATEWAY
    if isinstance(exc, UpstreamError):
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(status_code: int, message: str, details: str = None) -> JSONResponse:
    content = {"success": False, "message": message}
    if details and settings.is_development:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log method, path, status and duration of every request."""
    started = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - started) * 1000
    logger.info(f"{request.method} {request.url.path} {response.status_code} {duration_ms:.1f}ms")
    return response


# Request body validation errors are reported as 400 like every other bad request
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Log validation errors with full details for debugging."""
    errors = exc.errors()
    logger.error(f"Validation error on {request.method} {request.url.path}: {errors}")
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request")
    return error_response(status.HTTP_400_BAD_REQUEST, message)


@app.exception_handler(ChalkboardException)
async def chalkboard_exception_handler(request: Request, exc: ChalkboardException):
    """Handle custom application exceptions."""
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"Application exception on {request.method} {request.url.path}: {type(exc).__name__}: {exc}")
    else:
        logger.warning(f"Application exception on {request.method} {request.url.path}: {type(exc).__name__}: {exc}")
    return error_response(status_code, str(exc))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch all unhandled exceptions; the traceback is only returned in development."""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}", exc_info=exc)
    if settings.is_development:
        details = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or "Internal server error", details)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    """Initialize database on startup."""
    init_db()


@app.get("/")
async def root():
    return {
        "success": True,
        "data": {
            "message": "Chalkboard API",
            "status": "running",
            "docs": {
                "swagger": "/docs",
                "redoc": "/redoc"
            }
        }
    }


@app.get("/health")
async def health():
    return {"success": True, "data": {"status": "healthy"}}


# Include API router
app.include_router(api_router)
