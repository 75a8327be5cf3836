"""Security utilities for the nearby flights service."""

from .dependencies import API_KEY_HEADER, UNAUTHORIZED_MESSAGE, require_api_key

__all__ = ["API_KEY_HEADER", "UNAUTHORIZED_MESSAGE", "require_api_key"]
