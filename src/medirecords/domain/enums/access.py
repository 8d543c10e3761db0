"""Enumerations for record access and auditing."""

from enum import Enum


class AuditAction(str, Enum):
    """Actions recorded in the audit trail."""

    VIEW_PROFILE = "view_profile"


class AuditPolicy(str, Enum):
    """What to do when the audit write fails."""

    STRICT = "strict"  # fail the request, release no data
    BEST_EFFORT = "best_effort"  # log out-of-band, still return the record


class ViewState(str, Enum):
    """Progress of a single record view."""

    STARTED = "started"
    AUTHENTICATED = "authenticated"
    VALIDATED = "validated"
    FETCHED = "fetched"
    AUDITED = "audited"
    COMPLETED = "completed"
    FAILED = "failed"
