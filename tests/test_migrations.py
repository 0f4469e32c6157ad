"""
tests.test_migrations

Alembic revisions against a throwaway SQLite file.

Responsibilities:
- Ensure `alembic upgrade head` builds the schema `db.models` expects, partial unique index included.
- Ensure `downgrade base` removes it again.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from admin_identity.db.models import Admin
from admin_identity.errors import DuplicateKey
from admin_identity.settings import Settings
from admin_identity.wiring import build_container

ALEMBIC_DIR = Path(__file__).resolve().parent.parent / "alembic"


@pytest.fixture
def alembic_cfg(settings: Settings, monkeypatch: pytest.MonkeyPatch) -> Config:
    # No ini file: env.py then leaves stdlib logging alone.
    monkeypatch.setenv("ADMIN_IDENTITY_DATABASE_URL", settings.database_url)
    cfg = Config()
    cfg.set_main_option("script_location", str(ALEMBIC_DIR))
    return cfg


def _sync_url(settings: Settings) -> str:
    return settings.database_url.replace("+aiosqlite", "")


def test_upgrade_matches_models_and_downgrade_drops(alembic_cfg: Config, settings: Settings) -> None:
    command.upgrade(alembic_cfg, "head")

    engine = create_engine(_sync_url(settings))
    try:
        insp = inspect(engine)
        columns = {c["name"] for c in insp.get_columns("admins")}
        assert columns == {c.name for c in Admin.__table__.columns}

        indexes = {ix["name"]: bool(ix["unique"]) for ix in insp.get_indexes("admins")}
        assert indexes["uq_admins_email_live"] is True
        assert indexes["ix_admins_email"] is False
        assert indexes["ix_admins_is_deleted"] is False

        command.downgrade(alembic_cfg, "base")
        assert "admins" not in inspect(engine).get_table_names()
    finally:
        engine.dispose()


@pytest.mark.asyncio
async def test_migrated_schema_enforces_live_email_uniqueness(
    alembic_cfg: Config, settings: Settings
) -> None:
    command.upgrade(alembic_cfg, "head")

    container = await build_container(settings, create_tables=False)
    try:
        store = container.admin_store
        first = await store.create({"username": "ada", "email": "ada@example.com"})
        with pytest.raises(DuplicateKey):
            await store.create({"username": "ada2", "email": "ada@example.com"})

        await store.update(first.id, {"is_deleted": True})
        again = await store.create({"username": "ada3", "email": "ada@example.com"})

        assert again.id != first.id
        assert await store.count({"email": "ada@example.com"}) == 2
    finally:
        await container.aclose()
