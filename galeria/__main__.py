"""
Run the API with uvicorn.

Uso:
  python -m galeria [--host 0.0.0.0] [--port 10000] [--reload]
"""
from __future__ import annotations

import argparse

import uvicorn

from galeria.core.config import get_settings


def main() -> None:
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Galeria API server")
    ap.add_argument("--host", default=settings.host, help="Bind address (default: HOST or 0.0.0.0)")
    ap.add_argument("--port", type=int, default=settings.port, help="Port (default: PORT or 10000)")
    ap.add_argument("--reload", action="store_true", help="Reload on code changes")
    args = ap.parse_args()

    uvicorn.run(
        "galeria.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_config=None,
    )


if __name__ == "__main__":
    main()
