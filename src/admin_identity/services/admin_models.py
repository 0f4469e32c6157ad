"""
admin_identity.services.admin_models

Input/output models for the admin service.

Responsibilities:
- Define the outward view of an admin (never includes the password hash).
- Define registration, update, password-change, filter and login response shapes.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AdminView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    picture_url: str | None = None
    role: str
    is_deleted: bool
    created_at: datetime
    updated_at: datetime


class AdminCreate(BaseModel):
    username: str = Field(min_length=1, max_length=256)
    email: str = Field(min_length=3, max_length=320)
    first_name: str | None = Field(default=None, max_length=128)
    last_name: str | None = Field(default=None, max_length=128)
    picture_url: str | None = Field(default=None, max_length=1024)
    role: str = Field(default="admin", min_length=1, max_length=32)


class AdminRegistrationInput(BaseModel):
    admin: AdminCreate
    # Without a password the admin exists but cannot log in.
    password: str | None = Field(default=None, min_length=1)


class AdminUpdate(BaseModel):
    """
    Fields `update_by_id` may change. Only explicitly set fields are written.
    `password_hash` and `is_deleted` are deliberately absent.
    """

    model_config = ConfigDict(extra="forbid")

    username: str | None = Field(default=None, min_length=1, max_length=256)
    email: str | None = Field(default=None, min_length=3, max_length=320)
    first_name: str | None = Field(default=None, max_length=128)
    last_name: str | None = Field(default=None, max_length=128)
    picture_url: str | None = Field(default=None, max_length=1024)
    role: str | None = Field(default=None, min_length=1, max_length=32)

    @field_validator("username", "email", "role")
    @classmethod
    def _not_null(cls, value: str | None) -> str | None:
        # These columns are NOT NULL; omit the field instead of sending null.
        if value is None:
            raise ValueError("may not be null")
        return value


class AdminFilter(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: uuid.UUID | None = None
    username: str | None = None
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    role: str | None = None
    is_deleted: bool | None = None


class PasswordUpdate(BaseModel):
    current: str = Field(min_length=1)
    new: str = Field(min_length=1)


class AdminLoginResponse(BaseModel):
    admin: AdminView
    token: str


# --- Module Notes -----------------------------------------------------------
# The API layer reuses these models as request/response bodies, so field names here
# are part of the wire contract.
