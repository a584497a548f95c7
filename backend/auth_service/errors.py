"""
Error taxonomy for the organizer onboarding workflow.

Every error carries the HTTP status it maps to and a stable, client-safe
message. InternalError keeps its detail for the server log only.
"""

from typing import Optional


class DirectoryError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(DirectoryError):
    status_code = 400


class ConflictError(DirectoryError):
    status_code = 409


class NotFoundError(DirectoryError):
    status_code = 404


class AuthenticationError(DirectoryError):
    status_code = 401
    message = "Invalid email (username) or password"


class AuthorizationError(DirectoryError):
    status_code = 403
    message = "Account not approved by admin yet."


class InternalError(DirectoryError):
    """
    Infrastructure failure (database, notifier, timeout).

    `detail` is for logs; the client only ever sees `message`.
    `retryable` is True when the failure was transient (timeout, lost
    connection) and the operation left no partial write behind.
    """

    status_code = 500

    def __init__(self, detail: str = "", retryable: bool = False):
        super().__init__("Internal server error")
        self.detail = detail
        self.retryable = retryable


class NotificationError(InternalError):
    """Email delivery failed."""

    def __init__(self, detail: str = ""):
        super().__init__(detail, retryable=True)
