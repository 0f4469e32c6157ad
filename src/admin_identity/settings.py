"""
admin_identity.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (e.g., JWT secret).
- Offer a cached settings instance for the composition root.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Env-driven configuration, e.g. `ADMIN_IDENTITY_JWT_SECRET=...`.
    Defaults are safe for local dev only.
    """

    model_config = SettingsConfigDict(env_prefix="ADMIN_IDENTITY_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "admin-identity"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Tokens
    jwt_alg: str = "HS256"
    jwt_issuer: str = "admin-identity"
    jwt_audience: str = "admin-api"
    jwt_secret: str = Field(default="dev-secret-change-me", repr=False)
    token_ttl_minutes: int = Field(default=24 * 60, ge=1)

    # Passwords
    admin_password_bcrypt_salt_rounds: int = Field(default=12, ge=4, le=31)
    hash_workers: int = Field(default=4, ge=1)

    # Admins
    email_case_sensitive: bool = False

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./admin_identity.db"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars on every lookup.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Only the composition root (`admin_identity.wiring`) and the API entrypoint read
# settings; core services receive plain constructor arguments instead.
