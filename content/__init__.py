"""
Content normalization and source merging
``content.service`` composes providers and is imported directly.
"""
from .merge import (
    SourceMode,
    merge_articles_by_slug,
    merge_by_slug,
    merge_pages_by_slug,
    resolve_source_mode,
)
from .normalize import (
    normalize_article,
    normalize_article_detail,
    normalize_documents,
    normalize_page,
    normalize_page_detail,
    normalize_portable_text,
    normalize_tags,
    parse_timestamp,
)

__all__ = [
    "SourceMode",
    "merge_articles_by_slug",
    "merge_by_slug",
    "merge_pages_by_slug",
    "normalize_article",
    "normalize_article_detail",
    "normalize_documents",
    "normalize_page",
    "normalize_page_detail",
    "normalize_portable_text",
    "normalize_tags",
    "parse_timestamp",
    "resolve_source_mode",
]
