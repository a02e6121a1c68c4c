"""
Error kinds raised by the service layer and mapped to HTTP responses
"""

from typing import Optional


class ServiceError(Exception):
    """Base class for errors the API turns into a response"""

    status_code = 500
    error_type = "SERVICE_ERROR"
    default_public_message: Optional[str] = None

    def __init__(self, message: str, public_message: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.public_message = public_message or self.default_public_message or message


class ValidationError(ServiceError):
    """Missing or malformed input"""

    status_code = 400
    error_type = "VALIDATION_ERROR"


class NotFoundError(ServiceError):
    """No record matched the request"""

    status_code = 404
    error_type = "RESOURCE_NOT_FOUND"


class StoreError(ServiceError):
    """The document store failed or rejected the operation"""

    status_code = 500
    error_type = "DATABASE_ERROR"
    # Driver details stay in the logs
    default_public_message = "An unexpected error occurred"
