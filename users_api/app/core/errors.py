"""
Domain errors for the users module.

These exceptions represent business rule violations and are raised at
the service boundary.  Each error carries a stable machine‑readable
``code`` and an HTTP‑like ``status_code`` hint so the presentation
layer can map it to a response without inspecting the message.  The
errors themselves know nothing about FastAPI.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for business rule violations."""

    code: str = "DOMAIN_ERROR"
    status_code: int = 500

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = dict(context or {})

    def to_dict(self) -> Dict[str, Any]:
        """Return the error as a JSON‑serialisable dictionary."""
        return {
            "status_code": self.status_code,
            "code": self.code,
            "message": self.message,
        }


class UserNotFoundError(DomainError):
    """Raised when an operation targets an unknown user identifier."""

    code = "USER_NOT_FOUND"
    status_code = 404

    def __init__(self, user_id: str) -> None:
        super().__init__(f"User with ID '{user_id}' not found", {"user_id": user_id})
        self.user_id = user_id


class UserEmailAlreadyExistsError(DomainError):
    """Raised when a create or update would duplicate an email."""

    code = "USER_EMAIL_ALREADY_EXISTS"
    status_code = 409

    def __init__(self, email: str) -> None:
        super().__init__(f"User with email '{email}' already exists", {"email": email})
        self.email = email


class InvalidUserDataError(DomainError):
    """Raised for request‑shape violations such as pagination bounds."""

    code = "INVALID_USER_DATA"
    status_code = 400
