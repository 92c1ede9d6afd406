"""
Uploaded-image posts and their cascading delete.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional
import logging
import time

from galeria.core.errors import InvalidInputError, NotFoundError
from galeria.domain.models import Post, post_key
from galeria.repositories.json_storage import RecordStore
from galeria.services.image_storage import ImageStorage
from galeria.services.like_index import LikeIndex

logger = logging.getLogger(__name__)


class PostNotFoundError(NotFoundError):
    default_message = "Publicación no encontrada."


class PostCatalog:
    """Posts in upload order, keyed by (imagePath, imageName)."""

    def __init__(self, path: Path | str, likes: LikeIndex, images: Optional[ImageStorage] = None) -> None:
        self.store = RecordStore(path, name="publicaciones")
        self.likes = likes
        self.images = images

    def _now(self) -> int:
        return int(time.time())

    def list(self) -> list[Post]:
        return [Post.from_record(record) for record in self.store.records()]

    def create(self, owner_username: str, description: str, image_name: str, stored_image_ref: str) -> Post:
        # The owner is not checked against the user registry.
        if not stored_image_ref:
            raise InvalidInputError("Error al subir la imagen")
        post = Post(
            image_path=stored_image_ref,
            image_name=image_name or "",
            description=description or "",
            username=owner_username or "",
            timestamp=self._now(),
        )
        with self.store.mutate() as records:
            records.append(post.to_record())
        logger.info("Created post %r by %r", post.image_name, post.username)
        return post

    def delete(self, image_path: str, image_name: str) -> Post:
        """
        Remove the first post matching the composite key, then its stored
        image (best effort) and every like pointing at it.
        """
        key = (image_path or "", image_name or "")
        with self.store.mutate() as records:
            index = next((i for i, record in enumerate(records) if post_key(record) == key), -1)
            if index == -1:
                raise PostNotFoundError()
            removed = Post.from_record(records.pop(index))
        if self.images is not None:
            self.images.delete(removed.image_path)
        purged = self.likes.purge(*key)
        logger.info("Deleted post %r and %d likes pointing at it", removed.image_name, purged)
        return removed

    def close(self) -> None:
        self.store.close()
