"""
Registration and login use cases.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional
import logging

from argon2 import PasswordHasher, exceptions as argon_exc

from galeria.core.errors import ConflictError, InternalFailureError, InvalidInputError, NotFoundError
from galeria.core.security import hash_password, is_legacy_hash, verify_password
from galeria.domain.models import User
from galeria.repositories.json_storage import RecordStore

logger = logging.getLogger(__name__)


class AlreadyExistsError(ConflictError):
    default_message = "El usuario ya existe"


class UserNotFoundError(NotFoundError):
    # Login keeps answering 400 for unknown users.
    status_code = 400
    default_message = "El usuario no existe"


class WrongPasswordError(InvalidInputError):
    default_message = "Contraseña incorrecta"


class HashingError(InternalFailureError):
    default_message = "Error al procesar la contraseña"


class UserRegistry:
    """Unique usernames with salted password hashes."""

    def __init__(self, path: Path | str, hasher: Optional[PasswordHasher] = None) -> None:
        self.store = RecordStore(path, name="usuarios")
        self.hasher = hasher or PasswordHasher()

    def list(self) -> list[User]:
        return [User.from_record(record) for record in self.store.records()]

    def get(self, username: str) -> Optional[User]:
        for user in self.list():
            if user.username == username:
                return user
        return None

    def register(self, username: str, password: str) -> User:
        username = username or ""
        if not username.strip() or not password:
            raise InvalidInputError("Usuario y contraseña son obligatorios")
        if self.get(username):
            raise AlreadyExistsError()
        try:
            password_hash = hash_password(password, self.hasher)
        except argon_exc.HashingError as exc:
            logger.error("Hashing failed for new user %r: %s", username, exc)
            raise HashingError("Error al crear el usuario") from exc
        user = User(username=username, password_hash=password_hash)
        with self.store.mutate() as records:
            # Re-check under the lock; another request may have registered it meanwhile.
            if any(User.from_record(r).username == username for r in records):
                raise AlreadyExistsError()
            records.append(user.to_record())
        logger.info("Registered user %r", username)
        return user

    def authenticate(self, username: str, password: str) -> User:
        user = self.get(username or "")
        if not user:
            logger.info("Login failed: unknown user %r", username)
            raise UserNotFoundError()
        if not verify_password(password or "", user.password_hash, self.hasher):
            logger.info("Login failed: wrong password for %r", username)
            raise WrongPasswordError()
        if is_legacy_hash(user.password_hash):
            self._upgrade_hash(user, password)
        return user

    def _upgrade_hash(self, user: User, password: str) -> None:
        try:
            new_hash = hash_password(password, self.hasher)
        except argon_exc.HashingError as exc:
            logger.warning("Could not upgrade legacy hash for %r: %s", user.username, exc)
            return
        with self.store.mutate() as records:
            for index, record in enumerate(records):
                if User.from_record(record).username == user.username:
                    records[index] = User(user.username, new_hash).to_record()
                    break
        user.password_hash = new_hash
        logger.info("Upgraded legacy password hash for %r", user.username)

    def close(self) -> None:
        self.store.close()
