"""Request bodies and response shaping for the JSON API."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from galeria.domain.models import LikeEntry, Post, User


class Credentials(BaseModel):
    # Optional so that missing fields reach the service and get a 400 message.
    username: Optional[str] = None
    password: Optional[str] = None


class Publication(BaseModel):
    model_config = ConfigDict(extra="allow")

    imagePath: Optional[str] = None
    imageName: Optional[str] = None


class PublicationRequest(BaseModel):
    username: Optional[str] = None
    publication: Optional[Publication] = None

    def publication_dict(self) -> dict:
        if self.publication is None:
            return {}
        return self.publication.model_dump(exclude_none=True)


def public_user(user: User) -> dict:
    """Password hashes never leave the process."""
    return {"username": user.username}


def public_post(post: Post) -> dict:
    return post.to_record()


def public_like_entry(entry: LikeEntry) -> dict:
    return entry.to_record()
