"""
Domain exceptions.

Services raise these; app.main renders them as JSON with the status code
carried on the class. Business-rule outcomes (ineligibility reasons, rejected
applications) are returned as data and never raised.
"""

from typing import List, Optional


class PlacementError(Exception):
    status_code = 500
    default_detail = "Internal error"

    def __init__(self, detail: Optional[str] = None, errors: Optional[List[str]] = None):
        self.detail = detail or self.default_detail
        self.errors = errors or []
        super().__init__(self.detail)


class NotFoundError(PlacementError):
    status_code = 404
    default_detail = "Not found"


class JobClosedError(NotFoundError):
    default_detail = "Job not found or no longer active"


class DeadlinePassedError(PlacementError):
    status_code = 400
    default_detail = "Application deadline has passed"


class AlreadyAppliedError(PlacementError):
    status_code = 409
    default_detail = "You have already applied for this job"


class ValidationFailedError(PlacementError):
    """Submission-time field constraint failure; nothing was written."""
    status_code = 422
    default_detail = "Application rejected"


class ProfileValidationError(PlacementError):
    status_code = 400
    default_detail = "Invalid profile data"


class DuplicateTemplateError(PlacementError):
    status_code = 409
    default_detail = "Template with this name already exists"


class PersistenceError(PlacementError):
    status_code = 500
    default_detail = "Storage failure, no changes were saved"
