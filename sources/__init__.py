"""
Content sources
Sanity and static providers plus the provider selector
"""
from .base import ContentProvider
from .registry import select_content_provider
from .sanity_client import (
    AttemptOutcome,
    RetryDecision,
    SanityQueryClient,
    build_query_url,
    classify_outcome,
)
from .sanity_provider import SanityContentProvider
from .static_provider import StaticContentProvider

__all__ = [
    "AttemptOutcome",
    "ContentProvider",
    "RetryDecision",
    "SanityContentProvider",
    "SanityQueryClient",
    "StaticContentProvider",
    "build_query_url",
    "classify_outcome",
    "select_content_provider",
]
