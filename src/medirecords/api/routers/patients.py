"""Patient profile endpoints."""

import asyncio
import logging

from fastapi import APIRouter, Request

from ...core.config import get_settings
from ...domain.errors import RequestTimeoutError
from ..deps import RequestContextDep, ViewRecordUseCaseDep
from ..schemas.common import ApiResponse, ErrorResponse
from ..schemas.patient_record import PatientRecordResponse
from ..utils.responses import ok

router = APIRouter(prefix="/patients")
logger = logging.getLogger("medirecords")


@router.get(
    "/{record_id}",
    response_model=ApiResponse[PatientRecordResponse],
    tags=["Patient Records"],
    summary="View a patient profile (audited)",
    responses={
        400: {"model": ErrorResponse, "description": "Malformed record id"},
        401: {"model": ErrorResponse, "description": "Missing or invalid credentials"},
        404: {"model": ErrorResponse, "description": "Patient not found"},
        500: {"model": ErrorResponse, "description": "Internal error or audit write failure"},
        504: {"model": ErrorResponse, "description": "View did not finish in time"},
    },
)
async def get_patient_record(
    request: Request,
    record_id: str,
    context: RequestContextDep,
    use_case: ViewRecordUseCaseDep,
):
    """
    Return one patient profile with its derived age.

    The view is written to the HIPAA audit trail before the data is returned.
    """
    timeout = get_settings().access.view_timeout_seconds
    try:
        if timeout:
            enriched = await asyncio.wait_for(use_case.execute(context, record_id), timeout=timeout)
        else:
            enriched = await use_case.execute(context, record_id)
    except asyncio.TimeoutError:
        logger.error(f"Patient view timed out after {timeout}s: request_id={context.request_id}")
        raise RequestTimeoutError(timeout)

    return ok(request, data=PatientRecordResponse.from_enriched(enriched), message="Patient record retrieved")
