"""
Configuration helpers for the Galeria backend.

Settings are read from environment variables once (see get_settings) so that
routers/services never fetch os.environ directly. Tests build Settings
instances explicitly and pass them to create_app.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

ROOT_DIR = Path(__file__).resolve().parents[2]

DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str = "dev"
    data_dir: Path = ROOT_DIR / "data"
    uploads_dir: Path = ROOT_DIR / "uploads"
    public_base_url: str = ""
    cors_origins: tuple[str, ...] = ("*",)
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    argon2_time_cost: int = 3
    argon2_memory_cost: int = 65536
    argon2_parallelism: int = 4
    login_rate_limit: int = 10
    login_rate_window: int = 60
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 10000

    @property
    def users_file(self) -> Path:
        return self.data_dir / "usuarios.json"

    @property
    def posts_file(self) -> Path:
        return self.data_dir / "publicaciones.json"

    @property
    def likes_file(self) -> Path:
        return self.data_dir / "likes.json"


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str | None, default: int = 0) -> int:
        try:
            return int(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return default

    def _path(value: str | None, default: Path) -> Path:
        if not value or not value.strip():
            return default
        return Path(value.strip()).expanduser().resolve()

    def _origins(value: str | None) -> tuple[str, ...]:
        items = [item.strip().rstrip("/") for item in (value or "*").split(",")]
        return tuple(item for item in items if item) or ("*",)

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        data_dir=_path(os.getenv("DATA_DIR"), ROOT_DIR / "data"),
        uploads_dir=_path(os.getenv("UPLOADS_DIR"), ROOT_DIR / "uploads"),
        public_base_url=(os.getenv("PUBLIC_BASE_URL") or "").strip().rstrip("/"),
        cors_origins=_origins(os.getenv("CORS_ORIGINS")),
        max_upload_bytes=_int(os.getenv("MAX_UPLOAD_BYTES"), DEFAULT_MAX_UPLOAD_BYTES),
        argon2_time_cost=_int(os.getenv("ARGON2_TIME_COST"), 3),
        argon2_memory_cost=_int(os.getenv("ARGON2_MEMORY_COST"), 65536),
        argon2_parallelism=_int(os.getenv("ARGON2_PARALLELISM"), 4),
        login_rate_limit=_int(os.getenv("LOGIN_RATE_LIMIT"), 10),
        login_rate_window=_int(os.getenv("LOGIN_RATE_WINDOW"), 60),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_int(os.getenv("PORT"), 10000),
    )
