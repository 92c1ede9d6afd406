from __future__ import annotations

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from galeria.core.config import Settings, get_settings
from galeria.core.errors import GaleriaError
from galeria.core.log import setup_logging
from galeria.core.rate_limiter import RateLimiter
from galeria.core.security import build_hasher
from galeria.routers import auth as auth_router
from galeria.routers import data as data_router
from galeria.routers import likes as likes_router
from galeria.routers import posts as posts_router
from galeria.services.image_storage import ImageStorage
from galeria.services.like_index import LikeIndex
from galeria.services.post_catalog import PostCatalog
from galeria.services.user_registry import UserRegistry

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (anti clickjacking, nosniff, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"message": message}, status_code=status_code)


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(GaleriaError)
    async def galeria_error(request: Request, exc: GaleriaError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.__cause__ or exc)
        return _message(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        fields = sorted({".".join(p for p in err.get("loc", ())[1:] if isinstance(p, str)) or "body" for err in exc.errors()})
        return _message(400, f"Solicitud invalida: {', '.join(fields)}")

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        detail = exc.detail if isinstance(exc.detail, str) else "Error en la solicitud"
        return JSONResponse({"message": detail}, status_code=exc.status_code, headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _message(500, "Error interno del servidor")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Factory compatible with uvicorn --factory; stores are opened here and flushed on shutdown."""
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    hasher = build_hasher(settings.argon2_time_cost, settings.argon2_memory_cost, settings.argon2_parallelism)
    images = ImageStorage(settings.uploads_dir, settings.max_upload_bytes)
    users = UserRegistry(settings.users_file, hasher=hasher)
    likes = LikeIndex(settings.likes_file)
    posts = PostCatalog(settings.posts_file, likes=likes, images=images)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Serving data from %s, uploads from %s", settings.data_dir, settings.uploads_dir)
        yield
        for store in (users, posts, likes):
            try:
                store.close()
            except GaleriaError as exc:
                logger.error("Flush on shutdown failed: %s", exc.__cause__ or exc)

    app = FastAPI(title="Galeria API", lifespan=lifespan)
    app.state.settings = settings
    app.state.users = users
    app.state.posts = posts
    app.state.likes = likes
    app.state.images = images
    app.state.rate_limiter = RateLimiter()

    origins = list(settings.cors_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")
    _install_error_handlers(app)

    app.mount("/uploads", StaticFiles(directory=str(images.uploads_dir)), name="uploads")
    app.include_router(auth_router.router)
    app.include_router(posts_router.router)
    app.include_router(likes_router.router)
    app.include_router(data_router.router)
    return app
