"""
admin_identity.wiring

Composition root for the identity core.

Responsibilities:
- Build the engine, session factory, hash worker pool and change feed from settings.
- Construct the admin store, credential service and admin service with explicit arguments.
- Release those resources on shutdown.
"""

from __future__ import annotations

import asyncio
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from admin_identity.auth.credentials import CredentialService
from admin_identity.auth.jwt import JwtConfig
from admin_identity.auth.passwords import PasswordHasher
from admin_identity.db.feed import ChangeFeed
from admin_identity.db.init_db import init_db
from admin_identity.db.models import Admin
from admin_identity.db.session import create_engine, create_sessionmaker
from admin_identity.db.store import SqlIdentityStore
from admin_identity.observability.logging import get_logger
from admin_identity.services.admins import AdminIdentityService
from admin_identity.settings import Settings

log = get_logger(__name__)

ADMIN_ROLE = "admin"


@dataclass(slots=True)
class ServiceContainer:
    engine: AsyncEngine
    sessionmaker: async_sessionmaker[AsyncSession]
    hash_executor: ThreadPoolExecutor
    admin_store: SqlIdentityStore[Admin]
    admin_credentials: CredentialService[Admin]
    admins: AdminIdentityService

    async def aclose(self) -> None:
        # Let in-flight hashes finish before the pool goes away, without parking the loop.
        await asyncio.to_thread(self.hash_executor.shutdown, True)
        await self.engine.dispose()


def jwt_config(settings: Settings) -> JwtConfig:
    return JwtConfig(
        alg=settings.jwt_alg,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        secret=settings.jwt_secret,
        ttl=timedelta(minutes=settings.token_ttl_minutes),
    )


async def build_container(settings: Settings, *, create_tables: bool | None = None) -> ServiceContainer:
    engine = create_engine(settings)
    if create_tables is None:
        # Dev/test convenience: create tables automatically. Prod should use Alembic migrations.
        create_tables = settings.env in ("dev", "test")
    if create_tables:
        await init_db(engine)

    sessionmaker = create_sessionmaker(engine)
    executor = ThreadPoolExecutor(max_workers=settings.hash_workers, thread_name_prefix="bcrypt")

    admin_store: SqlIdentityStore[Admin] = SqlIdentityStore(
        session_factory=sessionmaker, model=Admin, feed=ChangeFeed()
    )
    admin_credentials: CredentialService[Admin] = CredentialService(
        role=ADMIN_ROLE,
        entity=Admin,
        store=admin_store,
        hasher=PasswordHasher(rounds=settings.admin_password_bcrypt_salt_rounds, executor=executor),
        jwt=jwt_config(settings),
        parse_id=uuid.UUID,
    )
    admins = AdminIdentityService(
        store=admin_store,
        credentials=admin_credentials,
        email_case_sensitive=settings.email_case_sensitive,
    )

    log.info(
        "container_built",
        env=settings.env,
        hash_workers=settings.hash_workers,
        bcrypt_rounds=settings.admin_password_bcrypt_salt_rounds,
    )
    return ServiceContainer(
        engine=engine,
        sessionmaker=sessionmaker,
        hash_executor=executor,
        admin_store=admin_store,
        admin_credentials=admin_credentials,
        admins=admins,
    )


# --- Module Notes -----------------------------------------------------------
# This is the only place that reads settings for the core; services never import
# `admin_identity.settings` themselves.
