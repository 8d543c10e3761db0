"""
FastAPI application factory and main app configuration.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from .api.errors import http_status_for, public_details
from .api.routers import health, patients
from .api.schemas.common import ErrorResponse
from .core.config import get_settings
from .core.hipaa_audit import get_audit_logger
from .core.structured_logger import configure_logging
from .domain.errors import DomainError
from .middleware.request_id_middleware import RequestIDMiddleware

logger = logging.getLogger("medirecords")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings = get_settings()
    configure_logging(settings.logging)
    logger.info(f"🚀 Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"📊 Environment: {settings.app_env}")
    logger.info(f"🛡️  Audit policy: {settings.audit.policy}")

    # Initialize database connection (MongoDB + Beanie)
    try:
        from beanie import init_beanie
        from motor.motor_asyncio import AsyncIOMotorClient
        import certifi

        from .adapters.db.mongo.models.patient_record_m import PatientRecordMongo, bind_collection

        mongo_uri = settings.database.uri
        bind_collection(settings.database.patients_collection)

        # Enable TLS only for Atlas SRV URIs
        if mongo_uri.startswith("mongodb+srv://"):
            client = AsyncIOMotorClient(
                mongo_uri,
                serverSelectionTimeoutMS=settings.database.server_selection_timeout_ms,
                tls=True,
                tlsCAFile=certifi.where(),
            )
        else:
            client = AsyncIOMotorClient(
                mongo_uri,
                serverSelectionTimeoutMS=settings.database.server_selection_timeout_ms,
            )

        await init_beanie(
            database=client[settings.database.db_name],
            document_models=[PatientRecordMongo],
        )
        logger.info("✅ Database connection established")
    except Exception as e:
        logger.error(f"❌ Database connection failed: {type(e).__name__}: {e}", exc_info=True)
        raise

    # The audit trail must be writable before any record is served
    audit_logger = get_audit_logger()
    try:
        await audit_logger.initialize(
            settings.database.uri,
            settings.database.db_name,
            settings.audit.collection,
        )
    except Exception as e:
        if settings.audit.policy == "strict":
            raise
        logger.error(f"❌ HIPAA Audit Logger failed to initialize (best_effort policy, continuing): {e}")

    yield

    # Shutdown
    await audit_logger.close()
    client.close()
    logger.info("🛑 Shutting down")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Audited access to patient profiles",
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allowed_origins,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allowed_methods,
        allow_headers=settings.cors.allowed_headers,
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestIDMiddleware)

    app.include_router(health.router)
    app.include_router(patients.router)

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        req_id = getattr(request.state, "request_id", None)
        status_code = http_status_for(exc)
        log = logger.error if status_code >= 500 else logger.warning
        log(f"DomainError: {exc.error_code} ({status_code}) {exc.message} | request_id={req_id}")
        headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=exc.error_code or "DOMAIN_ERROR",
                message=exc.message,
                request_id=req_id or "",
                details=public_details(exc),
            ).model_dump(),
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def pydantic_error_handler(request: Request, exc: RequestValidationError):
        req_id = getattr(request.state, "request_id", None)
        logger.warning(f"ValidationError on {request.method} {request.url.path}: {exc.errors()} | request_id={req_id}")
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(
                error="BAD_REQUEST",
                message="Input validation failed",
                request_id=req_id or "",
            ).model_dump(),
        )

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        req_id = getattr(request.state, "request_id", None)
        logger.error(f"Unhandled error: {type(exc).__name__} | request_id={req_id}", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="INTERNAL_ERROR",
                message="An unexpected error has occurred. Please try again later.",
                request_id=req_id or "",
            ).model_dump(),
        )

    @app.get("/", tags=["health"])
    async def root():
        """Root endpoint with API information."""
        return {
            "service": settings.app_name,
            "version": settings.app_version,
            "environment": settings.app_env,
            "status": "running",
        }

    return app


# Create the app instance
app = create_app()
