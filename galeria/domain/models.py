"""Record shapes for users, posts and liked posts, as stored in the JSON files."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

# Fields copied into a like when a post is bookmarked.
POST_FIELDS = ("imagePath", "imageName", "description", "username", "timestamp")


@dataclass
class User:
    username: str
    password_hash: str

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "User":
        # "password" is the key used by data files from the previous service.
        return cls(
            username=str(record.get("username") or ""),
            password_hash=str(record.get("passwordHash") or record.get("password") or ""),
        )

    def to_record(self) -> dict:
        return {"username": self.username, "passwordHash": self.password_hash}


@dataclass
class Post:
    image_path: str
    image_name: str
    description: str
    username: str
    timestamp: int

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Post":
        try:
            timestamp = int(record.get("timestamp") or 0)
        except (TypeError, ValueError):
            timestamp = 0
        return cls(
            image_path=str(record.get("imagePath") or ""),
            image_name=str(record.get("imageName") or ""),
            description=str(record.get("description") or ""),
            username=str(record.get("username") or ""),
            timestamp=timestamp,
        )

    def to_record(self) -> dict:
        return {
            "imagePath": self.image_path,
            "imageName": self.image_name,
            "description": self.description,
            "username": self.username,
            "timestamp": self.timestamp,
        }

    @property
    def key(self) -> tuple[str, str]:
        return (self.image_path, self.image_name)


@dataclass
class LikeEntry:
    username: str
    liked_posts: list[dict] = field(default_factory=list)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "LikeEntry":
        liked = record.get("likedPosts")
        if liked is None:
            liked = record.get("likedPublications")
        if not isinstance(liked, list):
            liked = []
        return cls(
            username=str(record.get("username") or ""),
            liked_posts=[dict(item) for item in liked if isinstance(item, Mapping)],
        )

    def to_record(self) -> dict:
        return {"username": self.username, "likedPosts": list(self.liked_posts)}


def post_key(record: Mapping[str, Any]) -> tuple[str, str]:
    """Composite (imagePath, imageName) key used to match posts and likes."""
    return (str(record.get("imagePath") or ""), str(record.get("imageName") or ""))


def snapshot_post_ref(publication: Mapping[str, Any]) -> dict:
    """Copy of the post fields at like-time; unknown keys are dropped."""
    return {name: publication[name] for name in POST_FIELDS if name in publication}
