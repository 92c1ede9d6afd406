from __future__ import annotations

from fastapi import APIRouter, Request

from galeria.schemas import public_like_entry, public_post, public_user

router = APIRouter(tags=["data"])


def _snapshot(request: Request) -> dict:
    state = request.app.state
    return {
        "users": [public_user(user) for user in state.users.list()],
        "posts": [public_post(post) for post in state.posts.list()],
        "likes": [public_like_entry(entry) for entry in state.likes.list()],
    }


@router.get("/api/data")
def data(request: Request):
    return _snapshot(request)


@router.get("/")
def root(request: Request):
    return _snapshot(request)
