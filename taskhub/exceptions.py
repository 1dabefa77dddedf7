"""
Error taxonomy for the TaskHub API.

Every error a client can see is an APIError subclass. The handlers
registered in main.py turn them into the standard response envelope.
"""

from typing import Any, Dict, List, Optional


class APIError(Exception):
    """Base class for errors rendered as a JSON envelope."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        errors: Optional[List[Dict[str, str]]] = None,
        detail: Optional[str] = None,
        status_code: Optional[int] = None
    ):
        super().__init__(message)
        self.message = message
        self.errors = errors
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self, include_detail: bool = False) -> Dict[str, Any]:
        """Convert the error into the response envelope."""
        body: Dict[str, Any] = {"success": False, "message": self.message}
        if self.errors:
            body["errors"] = self.errors
        if include_detail and self.detail:
            body["error"] = self.detail
        return body


class ValidationFailure(APIError):
    """Malformed or out-of-range request input."""
    status_code = 400


class Unauthenticated(APIError):
    """Missing, invalid or expired bearer token."""
    status_code = 401


class NotFoundOrForbidden(APIError):
    """Resource absent, or present but owned by someone else."""
    status_code = 404


class Conflict(APIError):
    """Resource already exists."""
    status_code = 400


class InternalError(APIError):
    """Unexpected store or runtime failure."""
    status_code = 500


class DuplicateEmailError(Exception):
    """Raised by the credential store when the email index rejects an insert."""

    def __init__(self, email: str):
        super().__init__(f"Email already registered: {email}")
        self.email = email


class InvalidTokenError(Exception):
    """Raised when a bearer token is malformed, forged or expired."""
