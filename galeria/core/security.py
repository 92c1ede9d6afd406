"""Security helpers (hashing and verification)."""

from __future__ import annotations

import bcrypt
from argon2 import PasswordHasher, exceptions as argon_exc

_PREFIX = "argon2$"
_BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def build_hasher(time_cost: int = 3, memory_cost: int = 65536, parallelism: int = 4) -> PasswordHasher:
    """Argon2 hasher with a tunable cost (tests use the cheapest settings)."""
    return PasswordHasher(time_cost=time_cost, memory_cost=memory_cost, parallelism=parallelism)


_ph = PasswordHasher()


def hash_password(password: str, hasher: PasswordHasher | None = None) -> str:
    """Create a modern Argon2 hash with a prefix for detection."""
    hashed = (hasher or _ph).hash(password)
    return f"{_PREFIX}{hashed}"


def is_legacy_hash(stored_hash: str | None) -> bool:
    """bcrypt hashes written by the previous Node service."""
    return (stored_hash or "").startswith(_BCRYPT_PREFIXES)


def verify_password(password: str, stored_hash: str | None, hasher: PasswordHasher | None = None) -> bool:
    stored = stored_hash or ""
    if stored.startswith(_PREFIX):
        hashed = stored[len(_PREFIX) :]
        try:
            return (hasher or _ph).verify(hashed, password)
        except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
            return False
    if is_legacy_hash(stored):
        try:
            return bcrypt.checkpw(password.encode("utf-8"), stored.encode("utf-8"))
        except ValueError:
            return False
    return False
