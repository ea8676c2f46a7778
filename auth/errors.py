"""
Error kinds raised by the auth flow.

Every failure the service raises on purpose is an ``AuthError`` tagged
with an ``ErrorKind``.  ``api.errors`` is the only place that turns a
kind into an HTTP status code.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    DUPLICATE_ACCOUNT = "duplicate_account"
    INVALID_CREDENTIALS = "invalid_credentials"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UNEXPECTED = "unexpected"


STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.DUPLICATE_ACCOUNT: 400,
    ErrorKind.INVALID_CREDENTIALS: 401,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.UNEXPECTED: 500,
}

# User-visible messages
ACCOUNT_EXISTS_LOGIN = "Account already exists with this email. Please login."
ACCOUNT_EXISTS_ORIGINAL_PASSWORD = (
    "Account already exists with this email. Please login with your original password."
)
MISSING_LOGIN_FIELDS = "Please provide email and password"
INVALID_CREDENTIALS = "Invalid credentials"
USER_NOT_FOUND = "User not found"
REGISTRATION_CONFLICT = "An account with this email was just created. Please login."
SERVER_ERROR = "Server Error"


class AuthError(Exception):
    def __init__(self, kind: ErrorKind, message: str):
        self.kind = kind
        self.message = message
        super().__init__(f"{kind.value}: {message}")

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]


class DuplicateEmail(Exception):
    """Raised by the repository when the unique email index rejects a row."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email already registered: {email}")
