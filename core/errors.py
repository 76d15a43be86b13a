"""
core/errors.py -- The four request outcome kinds and their HTTP status codes.

Every failure inside the auth core is translated into exactly one of these
before it reaches the client:

  ValidationError     400  malformed request body, absent/malformed bearer token
  NotFoundError       404  principal does not exist
  AuthenticationError 401  wrong credential, bad/expired/invalid token
  InternalError       500  store failure other than "not found", signing failure

The exception handler in api/main.py renders any AppError with the shared
ErrorResponse envelope. The message is client-facing: it must never carry
store error text or hash/algorithm internals. Log those server-side instead.

Layer rule: core/ is the kernel. No imports from api/, auth/, or ledger/.
"""

from __future__ import annotations


class AppError(Exception):
    """Base class for errors that map to a single HTTP status."""

    status_code: int = 500
    code: str = "internal_error"
    default_message: str = "An unexpected error occurred."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    code = "validation_error"
    default_message = "Request validation failed."


class NotFoundError(AppError):
    status_code = 404
    code = "not_found"
    default_message = "Resource not found."


class AuthenticationError(AppError):
    status_code = 401
    code = "unauthorized"
    default_message = "Authentication required."


class InternalError(AppError):
    status_code = 500
    code = "internal_error"
    default_message = "An unexpected error occurred."
