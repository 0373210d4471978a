"""Error taxonomy shared by the service layer and the API."""
from tssr_shared.enums import ErrorType


class ServiceError(Exception):
    """Base class for errors the API reports to the caller.

    Subclasses fix the error type and HTTP status code so route handlers
    never have to pick them by hand.
    """
    error_type = ErrorType.INTERNAL_ERROR
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {'type': self.error_type.value, 'message': self.message}


class ValidationError(ServiceError):
    """Raised when input validation fails."""
    error_type = ErrorType.VALIDATION_ERROR
    status_code = 400


class ForeignKeyError(ServiceError):
    """Raised when a referenced session or parent row does not exist."""
    error_type = ErrorType.FOREIGN_KEY_ERROR
    status_code = 400


class DuplicateError(ServiceError):
    error_type = ErrorType.DUPLICATE_ERROR
    status_code = 409


class NotFoundError(ServiceError):
    error_type = ErrorType.NOT_FOUND
    status_code = 404


class ConflictError(ServiceError):
    """Raised when a write carries a stale row version."""
    error_type = ErrorType.CONFLICT
    status_code = 409


def survey_not_found_message(session_id):
    return f"Survey with session_id '{session_id}' not found. Please create a survey first."
