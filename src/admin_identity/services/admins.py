"""
admin_identity.services.admins

Administrative principals management service.

Responsibilities:
- Register admins (hashing the password through CredentialService when given).
- Log admins in and validate their tokens.
- Guard observation and mutation of admins behind the soft-delete existence check.
- Expose count/find over the admin store.
"""

from __future__ import annotations

import uuid
from collections.abc import AsyncIterator, Mapping
from typing import Any

from admin_identity.auth.credentials import CredentialService, PasswordChange
from admin_identity.db.models import Admin
from admin_identity.db.store import IdentityStore
from admin_identity.errors import NotFound
from admin_identity.observability.logging import get_logger
from admin_identity.services.admin_models import (
    AdminLoginResponse,
    AdminRegistrationInput,
    AdminUpdate,
    AdminView,
    PasswordUpdate,
)

log = get_logger(__name__)


class AdminIdentityService:
    """
    Users (not customers) who operate the admin and merchant apps.

    Only `get`, `update_by_id` and `update_password` apply the existence guard.
    `get_by_email`, `count` and `find` see soft-deleted admins too.
    """

    def __init__(
        self,
        *,
        store: IdentityStore[Admin],
        credentials: CredentialService[Admin],
        email_case_sensitive: bool = False,
    ) -> None:
        self._store = store
        self._credentials = credentials
        self._email_case_sensitive = email_case_sensitive

    async def get(self, admin_id: uuid.UUID) -> AsyncIterator[AdminView | None]:
        # Closing this generator leaves the `async with`, which cancels the subscription.
        async with self._store.get(admin_id) as stream:
            async for admin in stream:
                await self.throw_if_not_exists(admin_id)
                yield _view(admin)

    async def get_by_email(self, email: str) -> AdminView | None:
        matches = await self._store.find({"email": self._normalize_email(email)})
        if not matches:
            return None
        live = [a for a in matches if not a.is_deleted]
        return _view((live or matches)[0])

    async def register(self, registration: AdminRegistrationInput) -> AdminView:
        values: dict[str, Any] = registration.admin.model_dump()
        values["email"] = self._normalize_email(values["email"])
        if registration.password:
            values["password_hash"] = await self._credentials.hash_password(registration.password)

        admin = await self._store.create(values)
        log.info("admin_registered", admin_id=str(admin.id), has_password=bool(registration.password))
        return _view(admin)

    async def update_password(self, admin_id: uuid.UUID, password: PasswordUpdate) -> None:
        await self.throw_if_not_exists(admin_id)
        await self._credentials.update_password(
            admin_id, PasswordChange(current=password.current, new=password.new)
        )

    async def login(self, email: str, password: str) -> AdminLoginResponse | None:
        email = self._normalize_email(email)
        admin = await self.get_by_email(email)

        # Unknown emails still pay for a bcrypt check inside `login`, so both failures cost the same.
        res = await self._credentials.login({"email": email}, password)

        if admin is None or res is None:
            return None

        return AdminLoginResponse(admin=_view(res.entity), token=res.token)

    async def is_authenticated(self, token: str) -> bool:
        return await self._credentials.is_authenticated(token)

    async def update_by_id(self, admin_id: uuid.UUID, update: AdminUpdate) -> AdminView:
        await self.throw_if_not_exists(admin_id)

        changes = update.model_dump(exclude_unset=True)
        if "email" in changes:
            changes["email"] = self._normalize_email(changes["email"])

        admin = await self._store.update(admin_id, changes)
        log.info("admin_updated", admin_id=str(admin_id), fields=sorted(changes))
        return _view(admin)

    async def throw_if_not_exists(self, admin_id: uuid.UUID) -> None:
        admin = await self._store.fetch(admin_id)

        if admin is None or admin.is_deleted:
            raise NotFound(f"Admin with id '{admin_id}' does not exist")

    async def count(self, conditions: Mapping[str, Any] | None = None) -> int:
        return await self._store.count(self._normalize_conditions(conditions))

    async def find(self, conditions: Mapping[str, Any] | None = None) -> list[AdminView]:
        return [_view(a) for a in await self._store.find(self._normalize_conditions(conditions))]

    def _normalize_email(self, email: str) -> str:
        email = email.strip()
        return email if self._email_case_sensitive else email.lower()

    def _normalize_conditions(self, conditions: Mapping[str, Any] | None) -> dict[str, Any]:
        conditions = dict(conditions or {})
        if isinstance(conditions.get("email"), str):
            conditions["email"] = self._normalize_email(conditions["email"])
        return conditions


def _view(admin: Admin) -> AdminView:
    return AdminView.model_validate(admin)


# --- Module Notes -----------------------------------------------------------
# `get_by_email` skipping the existence guard mirrors long-standing behavior that
# clients may depend on; whether it should filter soft-deleted admins is still open.
