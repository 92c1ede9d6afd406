from __future__ import annotations

from fastapi import APIRouter, Request

from galeria.core.rate_limiter import rate_limit_ip
from galeria.schemas import Credentials, public_user
from galeria.services.user_registry import UserRegistry

router = APIRouter(prefix="/api", tags=["auth"])


def _get_user_registry(request: Request) -> UserRegistry:
    svc = getattr(getattr(request.app, "state", None), "users", None)
    if not svc:
        raise RuntimeError("UserRegistry no configurado")
    return svc


@router.get("/usuarios")
def list_users(request: Request):
    return [public_user(user) for user in _get_user_registry(request).list()]


@router.post("/usuarios", status_code=201)
def register(body: Credentials, request: Request):
    _get_user_registry(request).register(body.username or "", body.password or "")
    return {"message": "Usuario creado exitosamente"}


@router.post("/login")
def login(body: Credentials, request: Request):
    settings = request.app.state.settings
    rate_limit_ip(request, "login", limit=settings.login_rate_limit, window_seconds=settings.login_rate_window)
    _get_user_registry(request).authenticate(body.username or "", body.password or "")
    return {"message": "Inicio de sesión exitoso"}
