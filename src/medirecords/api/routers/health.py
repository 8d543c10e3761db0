"""
Health check endpoints.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ...core.config import get_settings
from ..schemas.common import ApiResponse
from ..utils.responses import ok

router = APIRouter(prefix="/health", tags=["health"])


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    timestamp: datetime
    version: str
    service: str


@router.get("", response_model=ApiResponse[HealthResponse])
@router.get("/", response_model=ApiResponse[HealthResponse], include_in_schema=False)
async def health_check(request: Request):
    """
    Health check endpoint.

    Returns the current status of the service.
    """
    settings = get_settings()
    return ok(request, data=HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=settings.app_version,
        service=settings.app_name,
    ), message="OK")


@router.get("/ready", response_model=ApiResponse[dict])
async def readiness_check(request: Request):
    """
    Readiness check endpoint.

    Checks database connectivity and that the audit trail writer is ready.
    """
    from motor.motor_asyncio import AsyncIOMotorClient
    from ...core.hipaa_audit import get_audit_logger

    checks = {}
    all_ok = True

    try:
        settings = get_settings()
        client = AsyncIOMotorClient(settings.database.uri, serverSelectionTimeoutMS=5000)
        try:
            await client.admin.command("ping")
        finally:
            client.close()
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"error: {str(e)[:50]}"
        all_ok = False

    audit_logger = get_audit_logger()
    checks["audit_logger"] = "ok" if audit_logger._initialized else "not initialized"
    all_ok = all_ok and audit_logger._initialized

    body = ok(request, data={"ready": all_ok, "checks": checks}, message="ready" if all_ok else "not ready")
    return JSONResponse(status_code=200 if all_ok else 503, content=body.model_dump())
