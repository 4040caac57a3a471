import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

import sentry_sdk
import structlog
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from coupon_site.api.endpoints import admin, coupons, public
from coupon_site.core.config import Settings, get_settings
from coupon_site.core.exceptions import APIError
from coupon_site.core.logging_config import configure_logging
from coupon_site.db.init_db import init_db
from coupon_site.db.session import Database

API_VERSION = "1.0.0"

logger = structlog.get_logger()


def error_response(status_code: int, message: str, details=None) -> JSONResponse:
    content = {"error": message}
    if details is not None:
        content["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content=content)


def _init_sentry(settings: Settings) -> None:
    if settings.ENVIRONMENT != "production" or not settings.SENTRY_DSN:
        return
    try:
        sentry_sdk.init(
            dsn=settings.SENTRY_DSN,
            environment=settings.ENVIRONMENT,
            traces_sample_rate=0.1,
            integrations=[
                FastApiIntegration(),
                SqlalchemyIntegration(),
            ],
        )
        logger.info("sentry_initialized")
    except Exception as exc:
        # Application continues without Sentry monitoring
        logger.warning("sentry_init_failed", error=str(exc))


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or get_settings()
    database = database or Database(settings.DATABASE_URL, echo=settings.DEBUG)

    # --------------------------------------------------
    # CONFIGURE LOGGING (FIRST)
    # --------------------------------------------------
    configure_logging(settings)
    _init_sentry(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.open()
        database.create_tables()
        db = database.session()
        try:
            init_db(db, settings)
        finally:
            db.close()
        logger.info("database_connected", environment=settings.ENVIRONMENT)
        try:
            yield
        finally:
            database.close()
            logger.info("database_closed")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=API_VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url=f"{settings.API_PREFIX}/docs",
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database

    # --------------------------------------------------
    # CORS MIDDLEWARE
    # --------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.BACKEND_CORS_ORIGINS),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=[
            "Content-Type",
            "Authorization",
            "X-Correlation-ID",
        ],
        expose_headers=["X-Process-Time", "X-Correlation-ID"],
        max_age=3600,
    )

    # --------------------------------------------------
    # TRUSTED HOSTS (PRODUCTION ONLY)
    # --------------------------------------------------
    if settings.ENVIRONMENT == "production":
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=list(settings.ALLOWED_HOSTS))

    # --------------------------------------------------
    # REQUEST TIMING + LOGGING MIDDLEWARE
    # --------------------------------------------------
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        logger.info(
            "request_started",
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            # Handled here so the 500 still passes through the outer middlewares
            logger.exception("unhandled_exception", error_type=type(exc).__name__)
            response = error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        logger.info(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
        )
        return response

    # --------------------------------------------------
    # SECURITY HEADERS MIDDLEWARE
    # --------------------------------------------------
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        if settings.ENVIRONMENT == "production":
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response

    @app.middleware("http")
    async def add_correlation_id(request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())

        request.state.correlation_id = correlation_id
        structlog.contextvars.bind_contextvars(correlation_id=correlation_id)

        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("correlation_id")

        response.headers["X-Correlation-ID"] = correlation_id
        return response

    # --------------------------------------------------
    # INCLUDE ROUTERS
    # --------------------------------------------------
    app.include_router(coupons.router, prefix=f"{settings.API_PREFIX}/coupons", tags=["Coupons"])
    app.include_router(admin.router, prefix=f"{settings.API_PREFIX}/admin", tags=["Admin"])
    app.include_router(public.router)

    # --------------------------------------------------
    # HEALTH CHECK ENDPOINT
    # --------------------------------------------------
    @app.get("/health")
    def health_check():
        database_status = "healthy"
        try:
            with database.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except Exception as exc:
            logger.warning("database_health_check_failed", error=str(exc))
            database_status = "unhealthy"

        return {
            "status": "healthy" if database_status == "healthy" else "degraded",
            "environment": settings.ENVIRONMENT,
            "version": API_VERSION,
            "database": database_status,
        }

    # --------------------------------------------------
    # EXCEPTION HANDLERS
    # --------------------------------------------------
    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return error_response(exc.status_code, message)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return error_response(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "Validation failed",
            details=exc.errors(),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        # Unexpected exceptions: log and return controlled response
        logger.exception("unhandled_exception", error_type=type(exc).__name__)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    return app


app = create_app()
