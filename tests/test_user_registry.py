from __future__ import annotations

import json

import bcrypt
import pytest
from argon2 import exceptions as argon_exc

from galeria.core.errors import InvalidInputError
from galeria.services.user_registry import (
    AlreadyExistsError,
    HashingError,
    UserNotFoundError,
    UserRegistry,
    WrongPasswordError,
)


@pytest.fixture()
def registry(tmp_path, fast_hasher):
    return UserRegistry(tmp_path / "usuarios.json", hasher=fast_hasher)


def test_register_stores_salted_hash_only(registry, tmp_path):
    registry.register("ana", "secret")
    registry.register("bob", "secret")

    stored = json.loads((tmp_path / "usuarios.json").read_text(encoding="utf-8"))
    assert [u["username"] for u in stored] == ["ana", "bob"]
    assert all(u["passwordHash"].startswith("argon2$") for u in stored)
    assert "secret" not in json.dumps(stored)
    assert stored[0]["passwordHash"] != stored[1]["passwordHash"]


def test_register_same_username_twice(registry):
    registry.register("ana", "secret")
    with pytest.raises(AlreadyExistsError) as exc:
        registry.register("ana", "other")
    assert exc.value.status_code == 400
    assert [u.username for u in registry.list()] == ["ana"]


def test_usernames_are_case_sensitive(registry):
    registry.register("ana", "secret")
    registry.register("Ana", "secret")
    assert registry.get("Ana") is not None
    assert len(registry.list()) == 2


@pytest.mark.parametrize("username,password", [("", "secret"), ("ana", ""), ("   ", "secret"), (None, None)])
def test_register_rejects_empty_fields(registry, username, password):
    with pytest.raises(InvalidInputError):
        registry.register(username, password)
    assert registry.list() == []


def test_authenticate(registry):
    registry.register("ana", "secret")
    assert registry.authenticate("ana", "secret").username == "ana"

    with pytest.raises(UserNotFoundError) as exc:
        registry.authenticate("nobody", "secret")
    assert exc.value.status_code == 400

    with pytest.raises(WrongPasswordError):
        registry.authenticate("ana", "wrong")


def test_single_character_variants_never_authenticate(registry):
    registry.register("ana", "secret")
    variants = {"secre", "ecret", "secreT", "secrett", "xsecret", "sacret"}
    for variant in variants:
        with pytest.raises(WrongPasswordError):
            registry.authenticate("ana", variant)
    assert registry.authenticate("ana", "secret")


def test_hashing_failure_is_internal_and_stores_nothing(registry):
    class BrokenHasher:
        def hash(self, password):
            raise argon_exc.HashingError("no memory")

    registry.hasher = BrokenHasher()
    with pytest.raises(HashingError) as exc:
        registry.register("ana", "secret")
    assert exc.value.status_code == 500
    assert registry.list() == []


def test_legacy_bcrypt_hash_is_upgraded_on_login(tmp_path, fast_hasher):
    path = tmp_path / "usuarios.json"
    legacy = bcrypt.hashpw(b"secret", bcrypt.gensalt(rounds=4)).decode("utf-8")
    path.write_text(json.dumps([{"username": "ana", "password": legacy}]), encoding="utf-8")

    registry = UserRegistry(path, hasher=fast_hasher)
    with pytest.raises(WrongPasswordError):
        registry.authenticate("ana", "wrong")
    registry.authenticate("ana", "secret")

    stored = json.loads(path.read_text(encoding="utf-8"))
    assert stored == [{"username": "ana", "passwordHash": stored[0]["passwordHash"]}]
    assert stored[0]["passwordHash"].startswith("argon2$")
    assert registry.authenticate("ana", "secret").username == "ana"
