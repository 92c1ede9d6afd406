"""Stored image files: naming, size cap, URL <-> path mapping, deletion."""
from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Optional
import logging
import os
import re
import secrets
import time
import urllib.parse as urlparse

from galeria.core.errors import InvalidInputError, PayloadTooLargeError
from galeria.core.utils import absolute_url

logger = logging.getLogger(__name__)

UPLOADS_URL_PREFIX = "/uploads/"
CHUNK_SIZE = 1024 * 1024
_EXT_PATTERN = re.compile(r"\.[a-z0-9]{1,10}")
_NAME_PATTERN = re.compile(r"[A-Za-z0-9._-]+")


def stored_filename(original_name: str | None) -> str:
    """Name as <epoch-millis>-<random hex><ext>, keeping the uploaded extension."""
    ext = os.path.splitext(original_name or "")[1].lower()
    if not _EXT_PATTERN.fullmatch(ext):
        ext = ""
    return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}{ext}"


class ImageStorage:
    def __init__(self, uploads_dir: Path | str, max_bytes: int) -> None:
        self.uploads_dir = Path(uploads_dir).resolve()
        self.max_bytes = max_bytes
        self.uploads_dir.mkdir(parents=True, exist_ok=True)

    def save(self, original_name: Optional[str], stream: Optional[BinaryIO]) -> str:
        """Copy an uploaded stream into the uploads dir; returns the stored filename."""
        if stream is None or not original_name:
            raise InvalidInputError("Error al subir la imagen")
        filename = stored_filename(original_name)
        dest = self.uploads_dir / filename
        written = 0
        try:
            with dest.open("wb") as f:
                while True:
                    chunk = stream.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if self.max_bytes > 0 and written > self.max_bytes:
                        raise PayloadTooLargeError()
                    f.write(chunk)
        except PayloadTooLargeError:
            dest.unlink(missing_ok=True)
            logger.info("Rejected upload %r: larger than %d bytes", original_name, self.max_bytes)
            raise
        logger.info("Stored upload %r as %s (%d bytes)", original_name, filename, written)
        return filename

    def url_for(self, filename: str, base: Optional[str]) -> str:
        return absolute_url(UPLOADS_URL_PREFIX + filename, base)

    def path_for_url(self, image_path: str) -> Optional[Path]:
        """Resolve an image URL back to a file inside the uploads dir, if it is one."""
        path = urlparse.urlparse(image_path or "").path
        if not path.startswith(UPLOADS_URL_PREFIX):
            return None
        name = urlparse.unquote(path[len(UPLOADS_URL_PREFIX) :])
        if not _NAME_PATTERN.fullmatch(name) or name in {".", ".."}:
            return None
        candidate = (self.uploads_dir / name).resolve()
        if candidate.parent != self.uploads_dir:
            return None
        return candidate

    def delete(self, image_path: str) -> bool:
        """Best-effort removal; failures are logged and reported as False."""
        target = self.path_for_url(image_path)
        if target is None:
            logger.warning("Not deleting %r: not a stored upload", image_path)
            return False
        try:
            target.unlink()
        except FileNotFoundError:
            logger.warning("Stored image already missing: %s", target.name)
            return False
        except OSError as exc:
            logger.warning("Could not delete stored image %s: %s", target.name, exc)
            return False
        logger.info("Deleted stored image %s", target.name)
        return True
