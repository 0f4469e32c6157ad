"""
tests.test_credentials

Password hashing, token handling and credential checks.
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import UTC, datetime, timedelta

import pytest

from admin_identity.auth import passwords
from admin_identity.auth.credentials import CredentialService, PasswordChange
from admin_identity.auth.jwt import issue_token
from admin_identity.auth.passwords import PasswordHasher
from admin_identity.db.models import Admin
from admin_identity.errors import InvalidCredentials, NotFound
from admin_identity.settings import Settings
from admin_identity.wiring import ServiceContainer, jwt_config


@pytest.fixture
def credentials(container: ServiceContainer) -> CredentialService[Admin]:
    return container.admin_credentials


async def _admin_with_password(container: ServiceContainer, password: str = "pw-1") -> Admin:
    return await container.admin_store.create(
        {
            "username": "ada",
            "email": "ada@example.com",
            "password_hash": await container.admin_credentials.hash_password(password),
        }
    )


def test_hasher_rejects_out_of_range_cost() -> None:
    with pytest.raises(ValueError):
        PasswordHasher(rounds=3)
    with pytest.raises(ValueError):
        PasswordHasher(rounds=32)


@pytest.mark.asyncio
async def test_hash_uses_configured_cost_and_fresh_salt(credentials: CredentialService[Admin]) -> None:
    h1 = await credentials.hash_password("secret")
    h2 = await credentials.hash_password("secret")

    assert h1.startswith("$2b$04$")
    assert h1 != h2
    assert await credentials.verify_password("secret", h1)
    assert await credentials.verify_password("secret", h2)


@pytest.mark.asyncio
async def test_verify_never_raises(credentials: CredentialService[Admin]) -> None:
    good = await credentials.hash_password("secret")

    assert not await credentials.verify_password("wrong", good)
    assert not await credentials.verify_password("secret", None)
    assert not await credentials.verify_password("secret", "")
    assert not await credentials.verify_password("secret", "not-a-bcrypt-hash")


@pytest.mark.asyncio
async def test_only_first_72_bytes_count(credentials: CredentialService[Admin]) -> None:
    prefix = "p" * 72
    h = await credentials.hash_password(prefix + "a")

    assert await credentials.verify_password(prefix + "b", h)


@pytest.mark.asyncio
async def test_login_issues_role_scoped_token(
    container: ServiceContainer, credentials: CredentialService[Admin]
) -> None:
    admin = await _admin_with_password(container)

    res = await credentials.login({"email": "ada@example.com"}, "pw-1")

    assert res is not None
    assert res.entity.id == admin.id
    claims = credentials.decode_token(res.token)
    assert claims.subject == str(admin.id)
    assert claims.role == "admin"
    assert claims.expires_at > claims.issued_at
    assert await credentials.is_authenticated(res.token)


@pytest.mark.asyncio
async def test_login_failures_are_indistinguishable(
    container: ServiceContainer, credentials: CredentialService[Admin]
) -> None:
    await _admin_with_password(container)
    await container.admin_store.create({"username": "nopw", "email": "nopw@example.com"})

    assert await credentials.login({"email": "ada@example.com"}, "wrong") is None
    assert await credentials.login({"email": "ghost@example.com"}, "pw-1") is None
    assert await credentials.login({"email": "nopw@example.com"}, "") is None


@pytest.mark.asyncio
async def test_every_login_failure_runs_one_bcrypt_check(
    container: ServiceContainer, credentials: CredentialService[Admin], monkeypatch: pytest.MonkeyPatch
) -> None:
    await _admin_with_password(container)
    await container.admin_store.create({"username": "nopw", "email": "nopw@example.com"})
    # Build the dummy hash up front so only verification is counted below.
    assert await credentials.login({"email": "ghost@example.com"}, "warmup") is None

    calls: list[str] = []
    real_verify = passwords._verify_sync

    def _counting_verify(plaintext: str, password_hash: str) -> bool:
        calls.append(password_hash)
        return real_verify(plaintext, password_hash)

    monkeypatch.setattr(passwords, "_verify_sync", _counting_verify)

    for email in ("ada@example.com", "ghost@example.com", "nopw@example.com"):
        calls.clear()
        assert await credentials.login({"email": email}, "wrong") is None
        assert len(calls) == 1, email
        assert calls[0].startswith("$2b$04$")


@pytest.mark.asyncio
async def test_login_skips_soft_deleted_principals(
    container: ServiceContainer, credentials: CredentialService[Admin]
) -> None:
    admin = await _admin_with_password(container)
    await container.admin_store.update(admin.id, {"is_deleted": True})

    assert await credentials.login({"email": "ada@example.com"}, "pw-1") is None


@pytest.mark.asyncio
async def test_is_authenticated_rejects_bad_tokens(
    container: ServiceContainer, credentials: CredentialService[Admin], settings: Settings
) -> None:
    admin = await _admin_with_password(container)
    cfg = jwt_config(settings)

    forged = issue_token(
        cfg=replace(cfg, secret="another-secret-with-enough-bytes-000"), subject=str(admin.id), role="admin"
    )
    expired = issue_token(
        cfg=cfg, subject=str(admin.id), role="admin", now=datetime.now(tz=UTC) - timedelta(days=30)
    )
    wrong_role = issue_token(cfg=cfg, subject=str(admin.id), role="merchant")
    unknown_subject = issue_token(cfg=cfg, subject=str(uuid.uuid4()), role="admin")
    bad_subject = issue_token(cfg=cfg, subject="not-a-uuid", role="admin")

    for token in ("", "garbage", forged, expired, wrong_role, unknown_subject, bad_subject):
        assert await credentials.is_authenticated(token) is False

    assert await credentials.is_authenticated(credentials.issue_token(admin)) is True


@pytest.mark.asyncio
async def test_token_of_soft_deleted_principal_is_rejected(
    container: ServiceContainer, credentials: CredentialService[Admin]
) -> None:
    admin = await _admin_with_password(container)
    token = credentials.issue_token(admin)

    await container.admin_store.update(admin.id, {"is_deleted": True})

    assert await credentials.is_authenticated(token) is False


@pytest.mark.asyncio
async def test_update_password_replaces_hash(
    container: ServiceContainer, credentials: CredentialService[Admin]
) -> None:
    admin = await _admin_with_password(container)
    old_token = credentials.issue_token(admin)

    await credentials.update_password(admin.id, PasswordChange(current="pw-1", new="pw-2"))

    assert await credentials.login({"email": "ada@example.com"}, "pw-1") is None
    assert await credentials.login({"email": "ada@example.com"}, "pw-2") is not None
    # Tokens are not revoked by a password change.
    assert await credentials.is_authenticated(old_token)


@pytest.mark.asyncio
async def test_update_password_failures(
    container: ServiceContainer, credentials: CredentialService[Admin]
) -> None:
    admin = await _admin_with_password(container)
    nopw = await container.admin_store.create({"username": "nopw", "email": "nopw@example.com"})

    with pytest.raises(InvalidCredentials):
        await credentials.update_password(admin.id, PasswordChange(current="nope", new="x"))
    with pytest.raises(InvalidCredentials):
        await credentials.update_password(nopw.id, PasswordChange(current="", new="x"))
    with pytest.raises(NotFound):
        await credentials.update_password(uuid.uuid4(), PasswordChange(current="pw-1", new="x"))
