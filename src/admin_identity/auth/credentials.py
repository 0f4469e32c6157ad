"""
admin_identity.auth.credentials

Generic credential service for one entity kind.

Responsibilities:
- Hash and verify passwords at the configured cost.
- Log principals in by identifying attributes + password and issue role-scoped tokens.
- Validate tokens without raising.
- Change passwords after verifying the current one.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from admin_identity.auth.jwt import JwtConfig, JwtValidationError, decode_and_validate, issue_token
from admin_identity.auth.models import LoginResult, TokenClaims
from admin_identity.auth.passwords import PasswordHasher
from admin_identity.db.store import IdentityStore
from admin_identity.errors import InvalidCredentials, NotFound
from admin_identity.observability.logging import get_logger

T = TypeVar("T")

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class PasswordChange:
    current: str
    new: str


class CredentialService(Generic[T]):
    """
    Credentials for entities of type `entity` stored in `store`.

    The entity is expected to expose `id`, `password_hash` and (optionally) `is_deleted`.
    Soft-deleted principals can neither log in nor hold a valid token.
    """

    def __init__(
        self,
        *,
        role: str,
        entity: type[T],
        store: IdentityStore[T],
        hasher: PasswordHasher,
        jwt: JwtConfig,
        parse_id: Callable[[str], Any] = str,
    ) -> None:
        self.role = role
        self.entity = entity
        self._store = store
        self._hasher = hasher
        self._jwt = jwt
        self._parse_id = parse_id
        self._dummy_hash: str | None = None

    async def hash_password(self, plaintext: str) -> str:
        return await self._hasher.hash(plaintext)

    async def verify_password(self, plaintext: str, password_hash: str | None) -> bool:
        return await self._hasher.verify(plaintext, password_hash)

    def issue_token(self, entity: T) -> str:
        return issue_token(cfg=self._jwt, subject=str(entity.id), role=self.role)  # type: ignore[attr-defined]

    def decode_token(self, token: str) -> TokenClaims:
        # Raises JwtValidationError; public callers should use `is_authenticated`.
        return TokenClaims.from_payload(decode_and_validate(cfg=self._jwt, token=token))

    async def login(self, attributes: Mapping[str, Any], plaintext: str) -> LoginResult[T] | None:
        entity = await self._find_live(attributes)

        if entity is None:
            # Same bcrypt work as a real check, so timing does not reveal unknown principals.
            await self.verify_password(plaintext, await self._get_dummy_hash())
            log.info("login_failed", role=self.role, reason="unknown_principal")
            return None

        if not entity.password_hash:  # type: ignore[attr-defined]
            # Registered without a password; the dummy check keeps this as slow as a real miss.
            await self.verify_password(plaintext, await self._get_dummy_hash())
            log.info("login_failed", role=self.role, reason="no_password", subject=str(entity.id))  # type: ignore[attr-defined]
            return None

        if not await self.verify_password(plaintext, entity.password_hash):  # type: ignore[attr-defined]
            log.info("login_failed", role=self.role, reason="bad_password", subject=str(entity.id))  # type: ignore[attr-defined]
            return None

        log.info("login_succeeded", role=self.role, subject=str(entity.id))  # type: ignore[attr-defined]
        return LoginResult(entity=entity, token=self.issue_token(entity))

    async def is_authenticated(self, token: str) -> bool:
        if not token:
            return False
        try:
            claims = self.decode_token(token)
        except JwtValidationError:
            return False
        if claims.role != self.role:
            return False

        try:
            record_id = self._parse_id(claims.subject)
        except (ValueError, TypeError):
            return False

        entity = await self._store.fetch(record_id)
        return entity is not None and not getattr(entity, "is_deleted", False)

    async def update_password(self, record_id: Any, password: PasswordChange) -> None:
        entity = await self._store.fetch(record_id)
        if entity is None:
            raise NotFound(f"{self.entity.__name__} with id '{record_id}' does not exist")

        if not await self.verify_password(password.current, entity.password_hash):  # type: ignore[attr-defined]
            raise InvalidCredentials("Current password is incorrect")

        # Previously issued tokens stay valid until they expire.
        await self._store.update(record_id, {"password_hash": await self.hash_password(password.new)})
        log.info("password_updated", role=self.role, subject=str(record_id))

    async def _find_live(self, attributes: Mapping[str, Any]) -> T | None:
        for entity in await self._store.find(attributes):
            if not getattr(entity, "is_deleted", False):
                return entity
        return None

    async def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = await self.hash_password("not-a-real-password")
        return self._dummy_hash


# --- Module Notes -----------------------------------------------------------
# Login returns None for every failure cause on purpose; only logs record which one.
