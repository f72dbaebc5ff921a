"""Shared runtime singletons for the gateway web entrypoint."""

from __future__ import annotations

from functools import lru_cache

from config import get_settings
from content.service import ContentService, build_content_service


@lru_cache()
def get_content_service() -> ContentService:
    """Process-wide content service, built once from settings."""
    return build_content_service(get_settings())


def reset_runtime() -> None:
    """Drop cached settings and service so the next call re-reads the environment."""
    get_content_service.cache_clear()
    get_settings.cache_clear()
