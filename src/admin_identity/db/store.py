"""
admin_identity.db.store

Generic identity store: CRUD over one entity kind with observable point reads.

Responsibilities:
- Define the `IdentityStore` contract services depend on.
- Implement it once for SQLAlchemy async (`SqlIdentityStore`), parameterized by ORM model.
- Translate uniqueness violations into `DuplicateKey` and missing ids into `NotFound`.
- Push every successful write to live `get` subscribers via `ChangeFeed`.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Generic, Protocol, TypeVar

from sqlalchemy import func, inspect, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from admin_identity.db.feed import ChangeFeed, RecordStream
from admin_identity.errors import DuplicateKey, NotFound
from admin_identity.observability.logging import get_logger

T = TypeVar("T")

log = get_logger(__name__)


class IdentityStore(Protocol[T]):
    def get(self, record_id: Any) -> RecordStream[T]: ...

    async def fetch(self, record_id: Any) -> T | None: ...

    async def find(self, conditions: Mapping[str, Any] | None = None) -> list[T]: ...

    async def count(self, conditions: Mapping[str, Any] | None = None) -> int: ...

    async def create(self, values: Mapping[str, Any]) -> T: ...

    async def update(self, record_id: Any, values: Mapping[str, Any]) -> T: ...


class SqlIdentityStore(Generic[T]):
    """
    SQLAlchemy-backed store. Each call runs in its own short session and commits
    before returning; no locks are held across calls.

    Plain reads do not filter soft-deleted rows. Callers that must honor `is_deleted`
    apply their own guard.
    """

    def __init__(
        self,
        *,
        session_factory: async_sessionmaker[AsyncSession],
        model: type[T],
        feed: ChangeFeed | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._model = model
        self._feed = feed or ChangeFeed()
        self._columns = frozenset(attr.key for attr in inspect(model).column_attrs)
        self._kind = model.__name__

    @property
    def model(self) -> type[T]:
        return self._model

    @property
    def feed(self) -> ChangeFeed:
        return self._feed

    def get(self, record_id: Any) -> RecordStream[T]:
        return RecordStream(feed=self._feed, key=record_id, load=lambda: self.fetch(record_id))

    async def fetch(self, record_id: Any) -> T | None:
        async with self._session_factory() as session:
            return await session.get(self._model, record_id)

    async def find(self, conditions: Mapping[str, Any] | None = None) -> list[T]:
        stmt = select(self._model).filter_by(**self._checked(conditions))
        async with self._session_factory() as session:
            return list((await session.execute(stmt)).scalars().all())

    async def count(self, conditions: Mapping[str, Any] | None = None) -> int:
        stmt = select(func.count()).select_from(self._model).filter_by(**self._checked(conditions))
        async with self._session_factory() as session:
            return int((await session.execute(stmt)).scalar_one())

    async def create(self, values: Mapping[str, Any]) -> T:
        record = self._model(**self._checked(values))
        async with self._session_factory() as session:
            session.add(record)
            await self._commit(session)

        record_id = record.id  # type: ignore[attr-defined]
        log.info("record_created", kind=self._kind, record_id=str(record_id))
        self._feed.publish(record_id, record)
        return record

    async def update(self, record_id: Any, values: Mapping[str, Any]) -> T:
        changes = self._checked(values)
        if "id" in changes:
            raise ValueError(f"{self._kind}.id is immutable")

        async with self._session_factory() as session:
            record = await session.get(self._model, record_id, with_for_update=True)
            if record is None:
                raise NotFound(f"{self._kind} with id '{record_id}' does not exist")
            for key, value in changes.items():
                setattr(record, key, value)
            if "updated_at" in self._columns:
                record.updated_at = datetime.utcnow()  # type: ignore[attr-defined]
            await self._commit(session)

        log.info("record_updated", kind=self._kind, record_id=str(record_id), fields=sorted(changes))
        self._feed.publish(record.id, record)  # type: ignore[attr-defined]
        return record

    def _checked(self, values: Mapping[str, Any] | None) -> dict[str, Any]:
        values = dict(values or {})
        unknown = set(values) - self._columns
        if unknown:
            raise ValueError(f"Unknown {self._kind} field(s): {', '.join(sorted(unknown))}")
        return values

    async def _commit(self, session: AsyncSession) -> None:
        try:
            await session.commit()
        except IntegrityError as e:
            await session.rollback()
            if "unique" not in str(e.orig).lower():
                raise
            raise DuplicateKey(f"{self._kind} violates a uniqueness constraint") from e


# --- Module Notes -----------------------------------------------------------
# Uniqueness is enforced by database indexes, which makes `create` the only hard
# exclusivity guarantee; guard-then-update sequences in services are not atomic.
