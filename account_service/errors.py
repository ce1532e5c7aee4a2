"""
Error taxonomy for the account service.

Every failure a caller can trigger is raised as a ``ServiceError`` subclass.
The HTTP layer maps ``status_code`` and ``message`` onto the response, so the
service code never builds HTTP responses itself.
"""
from typing import Dict, List, Optional


class ServiceError(Exception):
    status_code = 400
    default_message = "The request could not be completed."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"message": self.message}


class ValidationError(ServiceError):
    """Client input failed one or more field rules."""

    def __init__(self, errors: Dict[str, List[str]]):
        self.errors = errors
        super().__init__(self._summary(errors))

    @staticmethod
    def _summary(errors: Dict[str, List[str]]) -> str:
        messages = [msg for field_errors in errors.values() for msg in field_errors]
        if not messages:
            return "The given data was invalid."
        summary = messages[0]
        remaining = len(messages) - 1
        if remaining:
            summary += f" (and {remaining} more error{'s' if remaining != 1 else ''})"
        return summary

    def to_dict(self) -> dict:
        return {"message": self.message, "errors": self.errors}


class ConflictError(ServiceError):
    """A unique constraint would be violated."""


class NotFoundError(ServiceError):
    default_message = "User not found."


class AuthError(ServiceError):
    """Credentials or bearer token rejected."""

    status_code = 401

    EMAIL_NOT_FOUND = "email_not_found"
    INCORRECT_PASSWORD = "incorrect_password"
    OLD_PASSWORD_MISMATCH = "old_password_mismatch"
    INVALID_TOKEN = "invalid_token"

    MESSAGES = {
        EMAIL_NOT_FOUND: "Email not found. Please try again.",
        INCORRECT_PASSWORD: "Incorrect password. Please try again.",
        OLD_PASSWORD_MISMATCH: "Old password doesn't match. Please try again.",
        INVALID_TOKEN: "Unauthenticated.",
    }

    def __init__(self, reason: str):
        if reason not in self.MESSAGES:
            raise ValueError(f"Unknown auth failure reason '{reason}'")
        self.reason = reason
        super().__init__(self.MESSAGES[reason])
