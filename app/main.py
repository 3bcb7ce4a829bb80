import logging
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from pydantic import BaseModel
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from app.api.v1 import api_router
from app.core.config import settings
from app.core.errors import ServiceError
from app.core.logging_config import RequestLoggingMiddleware, setup_logging
from app.core.rate_limiter import limiter, rate_limit_exceeded_handler
from app.core.shutdown import RequestTrackingMiddleware, lifespan_manager
from app.db.session import check_db_connection

# Configure structured logging (JSON in production, colored in development)
setup_logging()
logger = logging.getLogger("hrcore")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Adds standard security headers to every response.
    """
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"
        return response


class ErrorResponse(BaseModel):
    """Envelope for unhandled server errors."""
    error: str
    detail: str | None = None
    timestamp: str
    path: str | None = None


class HealthResponse(BaseModel):
    status: str
    service: str
    environment: str
    checks: dict[str, bool]


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Multi-tenant HR core API: organisation, employees, identities, roles and audit trail",
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan_manager,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Collapse pydantic errors into a {field: message} map."""
    details = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "body"
        details.setdefault(field, error.get("msg", "Invalid value"))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder({"error": "Validation failed", "details": details}),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Last-resort handler. In production, internal details are hidden behind a reference id.
    """
    now = datetime.now(timezone.utc)
    error_id = now.strftime("%Y%m%d%H%M%S%f")
    logger.exception(f"Unhandled exception [{error_id}] on {request.method} {request.url.path}: {exc}")

    if settings.IS_PRODUCTION:
        body = ErrorResponse(
            error="Internal server error",
            detail=f"An unexpected error occurred. Reference ID: {error_id}",
            timestamp=now.isoformat(),
            path=request.url.path,
        )
    else:
        body = ErrorResponse(
            error=exc.__class__.__name__,
            detail=str(exc),
            timestamp=now.isoformat(),
            path=request.url.path,
        )
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body.model_dump())


# When credentials are allowed, origins must be explicit (not "*")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestTrackingMiddleware)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(api_router, prefix=settings.API_V1_STR)

# Exposes /metrics for Prometheus scraping
instrumentator = Instrumentator(
    should_group_status_codes=False,
    should_ignore_untemplated=True,
    should_respect_env_var=True,
    should_instrument_requests_inprogress=True,
    excluded_handlers=["/health", "/metrics"],
    inprogress_name="hrcore_inprogress_requests",
    inprogress_labels=True,
)
instrumentator.instrument(app).expose(app, include_in_schema=False)


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Liveness plus database reachability. 503 when the database is down.
    """
    db_healthy = await check_db_connection()
    if not db_healthy:
        logger.warning("Health check failed: database unreachable")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"error": "Database unavailable"},
        )

    return HealthResponse(
        status="healthy",
        service="hrcore-api",
        environment=settings.ENVIRONMENT,
        checks={"database": True},
    )


def run() -> None:
    """Serve the API on API_PORT. Proxy headers are honoured only from FORWARDED_ALLOW_IPS."""
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=settings.API_PORT,
        proxy_headers=True,
        forwarded_allow_ips=settings.FORWARDED_ALLOW_IPS,
    )


if __name__ == "__main__":
    run()
