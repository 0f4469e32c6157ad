"""
admin_identity.auth.models

Credential value types.

Responsibilities:
- Define the validated token identity (`TokenClaims`).
- Define the result of a successful login (`LoginResult`).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """
    Identity proven by a valid token.
    """

    subject: str
    role: str
    issued_at: datetime
    expires_at: datetime

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> TokenClaims:
        return cls(
            subject=str(payload["sub"]),
            role=str(payload["role"]),
            issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=UTC),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=UTC),
        )


@dataclass(frozen=True, slots=True)
class LoginResult(Generic[T]):
    entity: T
    token: str


# --- Module Notes -----------------------------------------------------------
# `LoginResult.entity` is the store record; the admin service maps it to a view
# without the password hash before it leaves the service layer.
