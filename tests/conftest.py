from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Garantiza que el paquete galeria sea importable durante las pruebas locales
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from galeria.core.config import Settings  # noqa: E402
from galeria.core.security import build_hasher  # noqa: E402


@pytest.fixture()
def fast_hasher():
    """Cheapest argon2 parameters; hashing cost is irrelevant for behavior."""
    return build_hasher(time_cost=1, memory_cost=8, parallelism=1)


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        data_dir=tmp_path / "data",
        uploads_dir=tmp_path / "uploads",
        argon2_time_cost=1,
        argon2_memory_cost=8,
        argon2_parallelism=1,
        login_rate_limit=0,
    )
