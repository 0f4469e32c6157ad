"""
tests.conftest

Shared fixtures.

Responsibilities:
- Provide test settings backed by a throwaway SQLite file and cheap bcrypt cost.
- Build (and dispose) a real service container per test.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import pytest
import pytest_asyncio

from admin_identity.services.admin_models import AdminCreate, AdminRegistrationInput, AdminView
from admin_identity.services.admins import AdminIdentityService
from admin_identity.settings import Settings
from admin_identity.wiring import ServiceContainer, build_container


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'identity.db'}",
        jwt_secret="test-secret-with-enough-bytes-for-hs256",
        admin_password_bcrypt_salt_rounds=4,
        hash_workers=2,
    )


@pytest_asyncio.fixture
async def container(settings: Settings) -> AsyncIterator[ServiceContainer]:
    c = await build_container(settings)
    try:
        yield c
    finally:
        await c.aclose()


@pytest.fixture
def admins(container: ServiceContainer) -> AdminIdentityService:
    return container.admins


@pytest.fixture
def register_admin(admins: AdminIdentityService):
    async def _register(
        *,
        email: str = "ada@example.com",
        password: str | None = "correct horse",
        username: str = "ada",
    ) -> AdminView:
        return await admins.register(
            AdminRegistrationInput(
                admin=AdminCreate(username=username, email=email), password=password
            )
        )

    return _register


# --- Module Notes -----------------------------------------------------------
# A file database (not :memory:) keeps every pooled connection on the same data.
