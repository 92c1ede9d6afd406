"""
Core utilities shared across the Galeria API.

This package hosts configuration, logging setup, password hashing, the error
hierarchy and small cross-cutting helpers (rate limiting, URL building).
Services and routers depend on these primitives instead of reading os.environ
or formatting error bodies on their own.
"""
