"""
Application error taxonomy.

Every error carries the HTTP status it maps to and a message that is safe to
show to the client. Exception handlers in ``learnlab.main`` render them as
``{"error": message}`` (plus ``invalid`` for itemized validation failures).
"""

from typing import Any, Dict, List, Optional


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.message}


class ValidationError(AppError):
    """Malformed or semantically invalid input"""

    status_code = 400
    default_message = "Invalid request"

    def __init__(
        self, message: Optional[str] = None, invalid: Optional[List[Dict[str, Any]]] = None
    ):
        super().__init__(message)
        self.invalid = invalid

    def to_body(self) -> Dict[str, Any]:
        body = super().to_body()
        if self.invalid is not None:
            body["invalid"] = self.invalid
        return body


class AuthenticationError(AppError):
    """Missing or invalid credentials"""

    status_code = 401
    default_message = "Authentication required"


class AuthorizationError(AppError):
    """Wrong role, or not the owner of the resource"""

    status_code = 403
    default_message = "Not authorized"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    """The request collides with existing state (e.g. a second quiz attempt)"""

    status_code = 409
    default_message = "Conflict"


class ConfigurationError(AppError):
    """A required external collaborator is not configured"""

    status_code = 500
    default_message = "Service not configured"


class UpstreamError(AppError):
    """An external collaborator failed or answered unusably"""

    status_code = 502
    default_message = "Upstream service error"


class ParseError(UpstreamError):
    default_message = "Failed to parse upstream response"


class InternalError(AppError):
    """Unexpected persistence failure; the detail is logged, never returned"""

    status_code = 500
    default_message = "Internal server error"
