"""Per-user liked posts."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping
import logging

from galeria.core.errors import ConflictError, InvalidInputError, NotFoundError
from galeria.domain.models import LikeEntry, post_key, snapshot_post_ref
from galeria.repositories.json_storage import RecordStore

logger = logging.getLogger(__name__)


class AlreadyLikedError(ConflictError):
    default_message = "La publicación ya está guardada."


class LikesNotFoundError(NotFoundError):
    default_message = "El usuario no tiene publicaciones con like"


class LikeUserNotFoundError(NotFoundError):
    default_message = "No se encontró el usuario."


class LikeNotFoundError(NotFoundError):
    default_message = "No se encontró la publicación en los likes del usuario."


def _checked_key(post_ref: Mapping[str, Any] | None) -> tuple[str, str]:
    # imageName may legitimately be empty; it is matched exactly as stored.
    key = post_key(post_ref or {})
    if not key[0]:
        raise InvalidInputError("La publicación debe incluir imagePath")
    return key


def _find(records: list[dict], username: str) -> tuple[int, LikeEntry | None]:
    for index, record in enumerate(records):
        entry = LikeEntry.from_record(record)
        if entry.username == username:
            return index, entry
    return -1, None


class LikeIndex:
    """username -> snapshot copies of the posts that user liked."""

    def __init__(self, path: Path | str) -> None:
        self.store = RecordStore(path, name="likes")

    def list(self) -> list[LikeEntry]:
        return [LikeEntry.from_record(record) for record in self.store.records()]

    def list_for(self, username: str) -> list[dict]:
        _, entry = _find(self.store.records(), username)
        if entry is None or not entry.liked_posts:
            raise LikesNotFoundError()
        return entry.liked_posts

    def add(self, username: str, post_ref: Mapping[str, Any] | None) -> dict:
        if not (username or "").strip():
            raise InvalidInputError("El usuario es obligatorio")
        key = _checked_key(post_ref)
        snapshot = snapshot_post_ref(post_ref or {})
        with self.store.mutate() as records:
            index, entry = _find(records, username)
            if entry is None:
                entry = LikeEntry(username=username)
                records.append(entry.to_record())
                index = len(records) - 1
            if any(post_key(liked) == key for liked in entry.liked_posts):
                raise AlreadyLikedError()
            entry.liked_posts.append(snapshot)
            records[index] = entry.to_record()
        logger.info("User %r liked %s", username, key[1])
        return snapshot

    def remove(self, username: str, post_ref: Mapping[str, Any] | None) -> None:
        key = _checked_key(post_ref)
        with self.store.mutate() as records:
            index, entry = _find(records, username)
            if entry is None:
                raise LikeUserNotFoundError()
            position = next((i for i, liked in enumerate(entry.liked_posts) if post_key(liked) == key), -1)
            if position == -1:
                raise LikeNotFoundError()
            del entry.liked_posts[position]
            records[index] = entry.to_record()
        logger.info("User %r unliked %s", username, key[1])

    def purge(self, image_path: str, image_name: str) -> int:
        """Drop a post from every user's likes; returns how many references went away."""
        key = (image_path, image_name)
        removed = 0
        with self.store.mutate() as records:
            for index, record in enumerate(records):
                entry = LikeEntry.from_record(record)
                kept = [liked for liked in entry.liked_posts if post_key(liked) != key]
                removed += len(entry.liked_posts) - len(kept)
                entry.liked_posts = kept
                records[index] = entry.to_record()
        return removed

    def close(self) -> None:
        self.store.close()
