"""
admin_identity.db.models

Persistence schema for administrative principals.

Responsibilities:
- Define the `Admin` ORM model (entity kind `Admin`).
- Enforce email uniqueness among non-deleted rows at the database.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, Index, String, Uuid as SAUuid, text
from sqlalchemy.orm import Mapped, mapped_column

from admin_identity.db.base import Base


def _utcnow() -> datetime:
    # Persist naive UTC timestamps for simplicity; production systems may use tz-aware types.
    return datetime.utcnow()


class Admin(Base):
    __tablename__ = "admins"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )

    username: Mapped[str] = mapped_column(String(256), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    # Written only through CredentialService; never leaves the service layer.
    password_hash: Mapped[str | None] = mapped_column(String(128), nullable=True)

    first_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    picture_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    role: Mapped[str] = mapped_column(String(32), nullable=False, default="admin")
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    # Soft-deleted rows keep their email, so uniqueness only covers live principals.
    __table_args__ = (
        Index(
            "uq_admins_email_live",
            "email",
            unique=True,
            sqlite_where=text("NOT is_deleted"),
            postgresql_where=text("NOT is_deleted"),
        ),
    )

    def __repr__(self) -> str:
        return f"Admin(id={self.id!r}, email={self.email!r}, is_deleted={self.is_deleted!r})"


# --- Module Notes -----------------------------------------------------------
# Keep `__repr__` free of `password_hash`; ORM rows end up in tracebacks and logs.
