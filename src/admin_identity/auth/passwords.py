"""
admin_identity.auth.passwords

bcrypt password hashing off the event loop.

Responsibilities:
- Hash passwords with a per-call salt at a fixed cost (bcrypt rounds).
- Verify passwords in constant time; malformed hashes verify as False.
- Run both on a bounded thread pool so hashing never stalls request handling.
"""

from __future__ import annotations

import asyncio
from concurrent.futures import Executor

import bcrypt

# bcrypt only consumes the first 72 bytes of input.
_BCRYPT_MAX_BYTES = 72


def _encode(plaintext: str) -> bytes:
    return plaintext.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class PasswordHasher:
    def __init__(self, *, rounds: int, executor: Executor | None = None) -> None:
        if not 4 <= rounds <= 31:
            raise ValueError("bcrypt rounds must be between 4 and 31")
        self._rounds = rounds
        # None falls back to the loop's default executor (tests, scripts).
        self._executor = executor

    @property
    def rounds(self) -> int:
        return self._rounds

    async def hash(self, plaintext: str) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self._hash_sync, plaintext)

    async def verify(self, plaintext: str, password_hash: str | None) -> bool:
        if not password_hash:
            return False
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, _verify_sync, plaintext, password_hash)

    def _hash_sync(self, plaintext: str) -> str:
        return bcrypt.hashpw(_encode(plaintext), bcrypt.gensalt(rounds=self._rounds)).decode("ascii")


def _verify_sync(plaintext: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_encode(plaintext), password_hash.encode("ascii"))
    except ValueError:
        # Not a bcrypt hash (e.g. corrupted or migrated data).
        return False


# --- Module Notes -----------------------------------------------------------
# bcrypt releases the GIL while hashing, so a thread pool gives real parallelism.
# Pool size comes from `Settings.hash_workers`; see `admin_identity.wiring`.
