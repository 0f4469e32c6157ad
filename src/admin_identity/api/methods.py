"""
admin_identity.api.methods

Method registration table for the admin service.

Responsibilities:
- Map each remotely callable method name to its request model, handler and kind
  (request-response or request-stream).
- Keep transports ignorant of service signatures: they validate a body and call `handler`.
"""

from __future__ import annotations

import enum
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field

from admin_identity.services.admin_models import (
    AdminFilter,
    AdminRegistrationInput,
    AdminUpdate,
    PasswordUpdate,
)
from admin_identity.services.admins import AdminIdentityService


class MethodKind(enum.StrEnum):
    # Request-response handlers return an awaitable; request-stream handlers an async iterator.
    request_response = "request-response"
    request_stream = "request-stream"


@dataclass(frozen=True, slots=True)
class MethodSpec:
    name: str
    kind: MethodKind
    request_model: type[BaseModel]
    handler: Callable[[Any], Any]


class AdminIdRequest(BaseModel):
    id: uuid.UUID


class GetByEmailRequest(BaseModel):
    email: str = Field(min_length=1)


class UpdatePasswordRequest(BaseModel):
    id: uuid.UUID
    password: PasswordUpdate


class LoginRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str


class IsAuthenticatedRequest(BaseModel):
    token: str


class UpdateByIdRequest(BaseModel):
    id: uuid.UUID
    update: AdminUpdate


class FindRequest(BaseModel):
    conditions: AdminFilter = Field(default_factory=AdminFilter)

    def filters(self) -> dict[str, Any]:
        return self.conditions.model_dump(exclude_unset=True)


def build_admin_methods(service: AdminIdentityService) -> dict[str, MethodSpec]:
    rr, stream = MethodKind.request_response, MethodKind.request_stream
    methods = [
        MethodSpec("get", stream, AdminIdRequest, lambda r: service.get(r.id)),
        MethodSpec("getByEmail", rr, GetByEmailRequest, lambda r: service.get_by_email(r.email)),
        MethodSpec("register", rr, AdminRegistrationInput, service.register),
        MethodSpec(
            "updatePassword",
            rr,
            UpdatePasswordRequest,
            lambda r: service.update_password(r.id, r.password),
        ),
        MethodSpec("login", rr, LoginRequest, lambda r: service.login(r.email, r.password)),
        MethodSpec(
            "isAuthenticated", rr, IsAuthenticatedRequest, lambda r: service.is_authenticated(r.token)
        ),
        MethodSpec("updateById", rr, UpdateByIdRequest, lambda r: service.update_by_id(r.id, r.update)),
        MethodSpec("count", rr, FindRequest, lambda r: service.count(r.filters())),
        MethodSpec("find", rr, FindRequest, lambda r: service.find(r.filters())),
    ]
    return {m.name: m for m in methods}


# --- Module Notes -----------------------------------------------------------
# Method names keep the camelCase spelling existing clients already call.
