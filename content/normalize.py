"""Normalization of raw CMS/static documents into canonical gateway contracts.

Every public function here is total: malformed input degrades to omission
(``None`` or a shorter list), never to an exception.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, TypeVar, Union

from pydantic import ValidationError

from core import (
    Article,
    ArticleDetail,
    ImageAsset,
    ImageBlock,
    ImageDescriptor,
    Page,
    PageDetail,
    SeoOverrides,
    Span,
    TextBlock,
)


logger = logging.getLogger(__name__)

T = TypeVar("T")
Block = Union[TextBlock, ImageBlock]

_TWITTER_CARDS = {"summary", "summary_large_image"}


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 date or datetime string into an aware UTC datetime."""
    if isinstance(value, datetime):
        dt = value
    else:
        if not isinstance(value, str):
            return None
        text = value.strip()
        if not text:
            return None
        try:
            dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    try:
        return dt.astimezone(timezone.utc)
    except OverflowError:
        # offset pushes the instant outside datetime's year range
        return None


def _as_mapping(value: Any) -> Optional[Mapping[str, Any]]:
    return value if isinstance(value, Mapping) else None


def _text(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    text = value.strip()
    return text or None


def _first_text(*values: Any) -> Optional[str]:
    for value in values:
        text = _text(value)
        if text:
            return text
    return None


def _flag(value: Any) -> Optional[bool]:
    return value if isinstance(value, bool) else None


def _first_flag(*values: Any) -> Optional[bool]:
    for value in values:
        if isinstance(value, bool):
            return value
    return None


def _dimension(value: Any) -> Optional[int]:
    """Finite positive number rounded to an int, else None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    rounded = int(round(number))
    return rounded if rounded > 0 else None


def _slug(value: Any) -> Optional[str]:
    # Raw Sanity documents carry ``slug: {current: "..."}``; projections flatten it.
    mapping = _as_mapping(value)
    if mapping is not None:
        return _text(mapping.get("current"))
    return _text(value)


def _key(source: Mapping[str, Any]) -> Optional[str]:
    return _text(source.get("_key"))


def normalize_tags(raw: Any) -> Optional[List[str]]:
    """Trim and dedupe tags given as strings or ``{title}`` objects; empty result is None."""
    if not isinstance(raw, (list, tuple)):
        return None
    tags: List[str] = []
    seen = set()
    for entry in raw:
        mapping = _as_mapping(entry)
        tag = _text(mapping.get("title")) if mapping is not None else _text(entry)
        if not tag or tag in seen:
            continue
        seen.add(tag)
        tags.append(tag)
    return tags or None


def _image_descriptor(value: Any, *, fallback_alt: Any = None) -> Optional[ImageDescriptor]:
    if isinstance(value, str):
        url = _text(value)
        if not url:
            return None
        return ImageDescriptor(url=url, alt=_text(fallback_alt))

    mapping = _as_mapping(value)
    if mapping is None:
        return None
    asset = _as_mapping(mapping.get("asset")) or {}
    url = _first_text(mapping.get("url"), asset.get("url"))
    if not url:
        return None
    return ImageDescriptor(
        url=url,
        width=_dimension(mapping.get("width", asset.get("width"))),
        height=_dimension(mapping.get("height", asset.get("height"))),
        alt=_first_text(mapping.get("alt"), fallback_alt),
    )


def _cover_image(raw: Mapping[str, Any]) -> Optional[ImageDescriptor]:
    for candidate in (raw.get("image"), raw.get("mainImage")):
        image = _image_descriptor(candidate, fallback_alt=raw.get("imageAlt"))
        if image is not None:
            return image

    url = _text(raw.get("imageUrl"))
    if not url:
        return None
    return ImageDescriptor(
        url=url,
        width=_dimension(raw.get("imageWidth")),
        height=_dimension(raw.get("imageHeight")),
        alt=_text(raw.get("imageAlt")),
    )


def _seo_overrides(raw: Mapping[str, Any]) -> Optional[SeoOverrides]:
    nested = _as_mapping(raw.get("seo")) or {}

    og_image = _image_descriptor(nested.get("ogImage"))
    if og_image is None:
        og_url = _text(raw.get("seoOgImageUrl"))
        if og_url:
            og_image = ImageDescriptor(
                url=og_url,
                width=_dimension(raw.get("seoOgImageWidth")),
                height=_dimension(raw.get("seoOgImageHeight")),
                alt=_text(raw.get("seoOgImageAlt")),
            )

    twitter_card = _first_text(nested.get("twitterCard"), raw.get("seoTwitterCard"))
    if twitter_card not in _TWITTER_CARDS:
        twitter_card = None

    fields = {
        "title": _first_text(nested.get("title"), raw.get("seoTitle")),
        "description": _first_text(nested.get("description"), raw.get("seoDescription")),
        "canonical_path": _first_text(nested.get("canonicalPath"), raw.get("seoCanonicalPath")),
        "no_index": _first_flag(nested.get("noIndex"), raw.get("seoNoIndex")),
        "no_follow": _first_flag(nested.get("noFollow"), raw.get("seoNoFollow")),
        "og_title": _first_text(nested.get("ogTitle"), raw.get("seoOgTitle")),
        "og_description": _first_text(nested.get("ogDescription"), raw.get("seoOgDescription")),
        "og_image": og_image,
        "twitter_card": twitter_card,
    }
    if all(value is None for value in fields.values()):
        return None
    return SeoOverrides(**fields)


def _span(raw: Any) -> Optional[Span]:
    source = _as_mapping(raw)
    if source is None or source.get("_type") != "span":
        return None
    text = source.get("text")
    if not isinstance(text, str):
        return None
    marks = source.get("marks")
    return Span(
        key=_key(source),
        text=text,
        marks=[mark for mark in marks if isinstance(mark, str)] if isinstance(marks, list) else None,
    )


def _mark_defs(raw: Any) -> List[Dict[str, Any]]:
    if not isinstance(raw, list):
        return []
    defs: List[Dict[str, Any]] = []
    for entry in raw:
        source = _as_mapping(entry)
        if source is None or not _text(source.get("_key")) or not _text(source.get("_type")):
            continue
        defs.append(dict(source))
    return defs


def _text_block(source: Mapping[str, Any]) -> Optional[TextBlock]:
    raw_children = source.get("children")
    if not isinstance(raw_children, list):
        return None
    children = [span for span in (_span(child) for child in raw_children) if span is not None]
    if not children:
        return None
    level = source.get("level")
    if isinstance(level, bool) or not isinstance(level, int) or level <= 0:
        level = None
    return TextBlock(
        key=_key(source),
        style=_text(source.get("style")),
        list_item=_text(source.get("listItem")),
        level=level,
        children=children,
        mark_defs=_mark_defs(source.get("markDefs")),
    )


def _image_block(source: Mapping[str, Any]) -> Optional[ImageBlock]:
    asset = _as_mapping(source.get("asset"))
    url = _text(asset.get("url")) if asset is not None else None
    if not url:
        return None
    return ImageBlock(
        key=_key(source),
        asset=ImageAsset(
            url=url,
            width=_dimension(asset.get("width")),
            height=_dimension(asset.get("height")),
        ),
        alt=_text(source.get("alt")),
    )


_BLOCK_BUILDERS: Dict[str, Callable[[Mapping[str, Any]], Optional[Block]]] = {
    "block": _text_block,
    "image": _image_block,
}


def _block(raw: Any) -> Optional[Block]:
    source = _as_mapping(raw)
    if source is None:
        return None
    block_type = source.get("_type")
    builder = _BLOCK_BUILDERS.get(block_type) if isinstance(block_type, str) else None
    if builder is None:
        return None
    return builder(source)


def normalize_portable_text(raw: Any) -> List[Block]:
    """Keep valid text/image blocks in order; everything else is dropped."""
    if not isinstance(raw, list):
        return []
    blocks: List[Block] = []
    for entry in raw:
        try:
            block = _block(entry)
        except (ValidationError, OverflowError) as exc:
            logger.debug(f"Dropped portable text block: {exc}")
            block = None
        if block is not None:
            blocks.append(block)
    dropped = len(raw) - len(blocks)
    if dropped:
        logger.debug(f"Dropped {dropped} of {len(raw)} portable text blocks")
    return blocks


def _article_fields(raw: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    title = _text(raw.get("title"))
    slug = _slug(raw.get("slug"))
    published_at = _first_text(raw.get("publishedAt"), raw.get("date"))
    if not title or not slug or not published_at:
        return None
    if parse_timestamp(published_at) is None:
        return None

    seo = _as_mapping(raw.get("seo")) or {}
    return {
        "id": _first_text(raw.get("_id"), raw.get("id")),
        "slug": slug,
        "title": title,
        "published_at": published_at,
        "excerpt": _first_text(raw.get("excerpt"), raw.get("description")),
        "image": _cover_image(raw),
        "tags": normalize_tags(raw.get("tags")),
        "hide_from_sitemap": _first_flag(raw.get("hideFromSitemap"), seo.get("hideFromSitemap")),
        "seo_no_index": _first_flag(raw.get("seoNoIndex"), seo.get("noIndex")),
    }


def _page_fields(raw: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    title = _text(raw.get("title"))
    slug = _slug(raw.get("slug"))
    if not title or not slug:
        return None

    updated_at = _first_text(raw.get("updatedAt"), raw.get("_updatedAt"))
    if parse_timestamp(updated_at) is None:
        updated_at = None

    seo = _as_mapping(raw.get("seo")) or {}
    return {
        "id": _first_text(raw.get("_id"), raw.get("id")),
        "slug": slug,
        "title": title,
        "subheading": _text(raw.get("subheading")),
        "intro": _text(raw.get("intro")),
        "updated_at": updated_at,
        "tags": normalize_tags(raw.get("tags")),
        "hide_from_sitemap": _first_flag(raw.get("hideFromSitemap"), seo.get("hideFromSitemap")),
        "seo_no_index": _first_flag(raw.get("seoNoIndex"), seo.get("noIndex")),
    }


def _build_article(raw: Mapping[str, Any]) -> Optional[Article]:
    fields = _article_fields(raw)
    return Article(**fields) if fields else None


def _build_article_detail(raw: Mapping[str, Any]) -> Optional[ArticleDetail]:
    fields = _article_fields(raw)
    if not fields:
        return None
    return ArticleDetail(**fields, seo=_seo_overrides(raw), body=normalize_portable_text(raw.get("body")))


def _build_page(raw: Mapping[str, Any]) -> Optional[Page]:
    fields = _page_fields(raw)
    return Page(**fields) if fields else None


def _build_page_detail(raw: Mapping[str, Any]) -> Optional[PageDetail]:
    fields = _page_fields(raw)
    if not fields:
        return None
    return PageDetail(**fields, seo=_seo_overrides(raw), body=normalize_portable_text(raw.get("body")))


def _guarded(kind: str, build: Callable[[Mapping[str, Any]], Optional[T]], raw: Any) -> Optional[T]:
    source = _as_mapping(raw)
    if source is None:
        logger.debug(f"Dropped {kind}: payload is not an object")
        return None
    try:
        document = build(source)
    except (ValidationError, TypeError, ValueError, OverflowError) as exc:
        logger.warning(f"Dropped {kind} '{_slug(source.get('slug')) or '?'}': {exc}")
        return None
    if document is None:
        logger.debug(f"Dropped {kind} '{_slug(source.get('slug')) or '?'}': missing required fields")
    return document


def normalize_article(raw: Any) -> Optional[Article]:
    return _guarded("article", _build_article, raw)


def normalize_article_detail(raw: Any) -> Optional[ArticleDetail]:
    return _guarded("article", _build_article_detail, raw)


def normalize_page(raw: Any) -> Optional[Page]:
    return _guarded("page", _build_page, raw)


def normalize_page_detail(raw: Any) -> Optional[PageDetail]:
    return _guarded("page", _build_page_detail, raw)


def normalize_documents(raw: Any, normalizer: Callable[[Any], Optional[T]]) -> List[T]:
    """Normalize a list of raw documents, dropping the unusable ones."""
    if not isinstance(raw, list):
        return []
    documents = [doc for doc in (normalizer(item) for item in raw) if doc is not None]
    dropped = len(raw) - len(documents)
    if dropped:
        logger.info(f"Dropped {dropped} of {len(raw)} documents during normalization")
    return documents
