"""Source-mode resolution and slug-keyed merging across content sources."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional, TypeVar

from content.normalize import parse_timestamp
from core import Article, Page


T = TypeVar("T")

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


class SourceMode(str, Enum):
    """Which backend(s) serve content."""

    STATIC = "static"
    CMS = "cms"
    HYBRID = "hybrid"


def resolve_source_mode(*, override: Optional[str] = None, cms_enabled: Optional[bool] = None) -> SourceMode:
    """Resolve the effective mode with precedence: recognised override > cms flag > static."""
    token = str(override or "").strip().lower()
    if token in {mode.value for mode in SourceMode}:
        return SourceMode(token)
    if cms_enabled is True:
        return SourceMode.CMS
    return SourceMode.STATIC


def merge_by_slug(
    primary: Iterable[T],
    secondary: Iterable[T],
    *,
    date_of: Callable[[T], Any],
) -> List[T]:
    """First-writer-wins dedupe by slug (primary before secondary), newest first."""
    merged: dict = {}
    for item in list(primary) + list(secondary):
        slug = getattr(item, "slug", None)
        if not slug or slug in merged:
            continue
        merged[slug] = item

    def _sort_key(item: T) -> datetime:
        return parse_timestamp(date_of(item)) or _OLDEST

    # sorted() is stable, so equal dates keep their merge order
    return sorted(merged.values(), key=_sort_key, reverse=True)


def merge_articles_by_slug(primary: Iterable[Article], secondary: Iterable[Article]) -> List[Article]:
    return merge_by_slug(primary, secondary, date_of=lambda article: article.published_at)


def merge_pages_by_slug(primary: Iterable[Page], secondary: Iterable[Page]) -> List[Page]:
    return merge_by_slug(primary, secondary, date_of=lambda page: page.updated_at)
