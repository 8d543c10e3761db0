from typing import Dict

from ..domain.errors import DomainError

# Record access taxonomy -> HTTP status
HTTP_STATUS_BY_CODE: Dict[str, int] = {
    "UNAUTHENTICATED": 401,
    "BAD_REQUEST": 400,
    "RECORD_NOT_FOUND": 404,
    "AUDIT_WRITE_FAILED": 500,
    "INTERNAL_ERROR": 500,
    "TIMEOUT": 504,
}


def http_status_for(exc: DomainError) -> int:
    return HTTP_STATUS_BY_CODE.get(exc.error_code or "", 500)


def public_details(exc: DomainError) -> dict:
    """Details safe to return to the client; 5xx kinds carry none."""
    if http_status_for(exc) >= 500 and exc.error_code != "TIMEOUT":
        return {}
    return dict(exc.details)
