"""
Per-client request throttling.

Each (scope, client IP) pair gets a fixed window; once the window holds more
hits than allowed the request is refused with 429 until the window resets.
The limiter instance lives on app.state so every app counts separately.
"""
from __future__ import annotations

from dataclasses import dataclass
import threading
import time
from typing import Dict

from fastapi import HTTPException, Request

TOO_MANY_REQUESTS = "Demasiadas solicitudes. Intenta de nuevo en unos instantes."


@dataclass
class _Window:
    hits: int
    resets_at: float


class RateLimiter:
    def __init__(self) -> None:
        self._windows: Dict[str, _Window] = {}
        self._lock = threading.Lock()

    def allow(self, key: str, limit: int, window_seconds: int) -> bool:
        """Count one hit for key; False once the current window is over its limit."""
        if limit <= 0:
            return True
        now = time.monotonic()
        with self._lock:
            window = self._windows.get(key)
            if window is None or now >= window.resets_at:
                window = self._windows[key] = _Window(hits=0, resets_at=now + window_seconds)
            window.hits += 1
            return window.hits <= limit

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()


def client_ip(request: Request) -> str:
    forwarded = (request.headers.get("x-forwarded-for") or "").split(",")[0].strip()
    if forwarded:
        return forwarded
    return getattr(request.client, "host", None) or "unknown"


def rate_limit_ip(request: Request, scope: str, *, limit: int, window_seconds: int) -> None:
    limiter = getattr(request.app.state, "rate_limiter", None)
    if limiter is None:
        return
    if not limiter.allow(f"{scope}:{client_ip(request)}", limit, window_seconds):
        raise HTTPException(429, TOO_MANY_REQUESTS)
