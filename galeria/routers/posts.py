from __future__ import annotations

from fastapi import APIRouter, File, Form, Request, UploadFile

from galeria.core.errors import InvalidInputError
from galeria.schemas import PublicationRequest, public_post
from galeria.services.image_storage import ImageStorage
from galeria.services.post_catalog import PostCatalog

router = APIRouter(prefix="/api", tags=["posts"])


def _get_post_catalog(request: Request) -> PostCatalog:
    svc = getattr(getattr(request.app, "state", None), "posts", None)
    if not svc:
        raise RuntimeError("PostCatalog no configurado")
    return svc


def _get_image_storage(request: Request) -> ImageStorage:
    svc = getattr(getattr(request.app, "state", None), "images", None)
    if not svc:
        raise RuntimeError("ImageStorage no configurado")
    return svc


def _public_base(request: Request) -> str:
    configured = request.app.state.settings.public_base_url
    return configured or str(request.base_url).rstrip("/")


@router.get("/publicaciones")
def list_posts(request: Request):
    return [public_post(post) for post in _get_post_catalog(request).list()]


@router.post("/upload", status_code=201)
def upload(
    request: Request,
    image: UploadFile | None = File(None),
    username: str = Form(""),
    description: str = Form(""),
    imageName: str = Form(""),
):
    if image is None or not image.filename:
        raise InvalidInputError("Error al subir la imagen")
    images = _get_image_storage(request)
    filename = images.save(image.filename, image.file)
    image_url = images.url_for(filename, _public_base(request))
    try:
        post = _get_post_catalog(request).create(username, description, imageName, image_url)
    except Exception:
        # no record refers to the file
        images.delete(image_url)
        raise
    return {"message": "Imagen subida exitosamente", "nuevaPublicacion": public_post(post)}


@router.delete("/publicaciones")
def delete_post(body: PublicationRequest, request: Request):
    ref = body.publication_dict()
    if not ref.get("imagePath"):
        raise InvalidInputError("La publicación debe incluir imagePath")
    _get_post_catalog(request).delete(ref["imagePath"], str(ref.get("imageName") or ""))
    return {"message": "Publicación eliminada exitosamente."}
