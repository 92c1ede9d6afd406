"""Galeria photo-sharing backend (users, posts and liked posts over JSON files)."""

__version__ = "1.0.0"
