"""
admin_identity.errors

Typed failures surfaced by the identity core.

Responsibilities:
- Define the error taxonomy callers can rely on (NotFound, DuplicateKey, InvalidCredentials).
- Carry a stable machine-readable `code` for transports.
"""

from __future__ import annotations


class IdentityError(Exception):
    code: str = "IDENTITY_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFound(IdentityError):
    """Record is absent, or present but soft-deleted where the existence guard applies."""

    code = "NOT_FOUND"


class DuplicateKey(IdentityError):
    """A uniqueness constraint (e.g. email) was violated."""

    code = "DUPLICATE_KEY"


class InvalidCredentials(IdentityError):
    code = "INVALID_CREDENTIALS"


# --- Module Notes -----------------------------------------------------------
# `login` and `is_authenticated` never raise these; they return None/False so callers
# cannot tell an unknown principal from a wrong password.
