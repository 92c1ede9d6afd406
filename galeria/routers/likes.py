from __future__ import annotations

from fastapi import APIRouter, Request

from galeria.schemas import PublicationRequest
from galeria.services.like_index import LikeIndex

router = APIRouter(prefix="/api/likes", tags=["likes"])


def _get_like_index(request: Request) -> LikeIndex:
    svc = getattr(getattr(request.app, "state", None), "likes", None)
    if not svc:
        raise RuntimeError("LikeIndex no configurado")
    return svc


@router.get("/{username}")
def liked_posts(username: str, request: Request):
    return _get_like_index(request).list_for(username)


@router.post("", status_code=201)
def add_like(body: PublicationRequest, request: Request):
    _get_like_index(request).add(body.username or "", body.publication_dict())
    return {"message": "Publicación guardada exitosamente."}


@router.delete("")
def remove_like(body: PublicationRequest, request: Request):
    _get_like_index(request).remove(body.username or "", body.publication_dict())
    return {"message": "Like eliminado exitosamente."}
