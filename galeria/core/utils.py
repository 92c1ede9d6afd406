"""
Utility helpers shared across routers/services.
"""

from typing import Optional


def absolute_url(path: str, base: Optional[str]) -> str:
    """
    Join a relative path onto a base URL (PUBLIC_BASE_URL or the request base).
    """
    base_url = (base or "").rstrip("/")
    if not path:
        return base_url + "/"
    if path.startswith("http://") or path.startswith("https://"):
        return path
    if not path.startswith("/"):
        path = "/" + path
    return base_url + path
