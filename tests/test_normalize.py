from __future__ import annotations

import pytest

from content.normalize import (
    normalize_article,
    normalize_article_detail,
    normalize_documents,
    normalize_page,
    normalize_page_detail,
    normalize_portable_text,
    normalize_tags,
    parse_timestamp,
)
from core import ImageBlock, TextBlock


def _raw_article(**overrides) -> dict:
    raw = {
        "_id": "article-1",
        "title": "  Shipping the gateway  ",
        "slug": "shipping-the-gateway",
        "publishedAt": "2025-03-01T09:30:00Z",
        "excerpt": "How the content gateway came together.",
        "imageUrl": "https://cdn.example.com/cover.jpg",
        "imageWidth": 1200.4,
        "imageHeight": 630,
        "imageAlt": "Cover",
        "tags": ["  api ", {"title": "cms"}, "api", "", 42],
        "hideFromSitemap": False,
        "seoNoIndex": True,
    }
    raw.update(overrides)
    return raw


def _raw_body() -> list:
    return [
        {
            "_type": "block",
            "_key": "b1",
            "style": "normal",
            "children": [{"_type": "span", "_key": "s1", "text": "Hello", "marks": ["strong", 3]}],
            "markDefs": [{"_key": "m1", "_type": "link", "href": "https://example.com"}, {"href": "no-key"}],
        },
        {"_type": "block", "_key": "b2", "children": [{"_type": "span"}]},
        {"_type": "image", "_key": "i1", "asset": {"url": "https://cdn.example.com/inline.png", "width": 640, "height": 0}, "alt": " Inline "},
        {"_type": "image", "_key": "i2", "asset": {}},
        {"_type": "youtube", "_key": "y1", "url": "https://youtube.com"},
        "not-a-block",
    ]


@pytest.mark.parametrize("raw", [None, 42, "text", [], {"title": 3}, {"slug": {}}])
def test_normalizers_are_total(raw) -> None:
    assert normalize_article(raw) is None
    assert normalize_article_detail(raw) is None
    assert normalize_page(raw) is None
    assert normalize_page_detail(raw) is None


def test_normalize_article_maps_fields() -> None:
    article = normalize_article(_raw_article())

    assert article is not None
    assert article.id == "article-1"
    assert article.title == "Shipping the gateway"
    assert article.slug == "shipping-the-gateway"
    assert article.image is not None
    assert article.image.width == 1200
    assert article.image.alt == "Cover"
    assert article.tags == ["api", "cms"]
    assert article.hide_from_sitemap is False
    assert article.seo_no_index is True


@pytest.mark.parametrize("missing", ["title", "slug", "publishedAt"])
def test_normalize_article_requires_core_fields(missing: str) -> None:
    raw = _raw_article()
    raw.pop(missing)
    assert normalize_article(raw) is None


def test_normalize_article_rejects_unparsable_date() -> None:
    assert normalize_article(_raw_article(publishedAt="last tuesday")) is None


def test_normalize_article_accepts_date_and_description_fallbacks() -> None:
    raw = _raw_article(date="2024-12-31", description="Static excerpt")
    raw.pop("publishedAt")
    raw.pop("excerpt")

    article = normalize_article(raw)

    assert article is not None
    assert article.published_at == "2024-12-31"
    assert article.excerpt == "Static excerpt"


def test_normalize_article_reads_raw_slug_object() -> None:
    article = normalize_article(_raw_article(slug={"_type": "slug", "current": "raw-doc"}))
    assert article is not None
    assert article.slug == "raw-doc"


@pytest.mark.parametrize("width", [0, -5, float("nan"), float("inf"), "800", True, 0.2])
def test_invalid_image_dimensions_are_omitted(width) -> None:
    article = normalize_article(_raw_article(imageWidth=width))
    assert article is not None
    assert article.image.width is None
    assert article.image.height == 630


def test_normalize_tags_trims_dedupes_and_is_idempotent() -> None:
    tags = normalize_tags([" a ", "b", "a", {"title": "c"}, {"name": "d"}, None])
    assert tags == ["a", "b", "c"]
    assert normalize_tags(tags) == tags


@pytest.mark.parametrize("raw", [None, [], ["", "  "], "a,b"])
def test_normalize_tags_returns_none_when_empty(raw) -> None:
    assert normalize_tags(raw) is None


def test_portable_text_prunes_invalid_blocks() -> None:
    blocks = normalize_portable_text(_raw_body())

    assert len(blocks) == 2
    text_block, image_block = blocks
    assert isinstance(text_block, TextBlock)
    assert text_block.children[0].marks == ["strong"]
    assert [entry["_key"] for entry in text_block.mark_defs] == ["m1"]
    assert isinstance(image_block, ImageBlock)
    assert image_block.asset.width == 640
    assert image_block.asset.height is None
    assert image_block.alt == "Inline"


@pytest.mark.parametrize("raw", [None, {}, "body", 7])
def test_portable_text_non_list_is_empty(raw) -> None:
    assert normalize_portable_text(raw) == []


def test_article_detail_reads_seo_and_body() -> None:
    raw = _raw_article(
        seoTitle="SEO title",
        seoCanonicalPath="/articles/shipping",
        seoOgImageUrl="https://cdn.example.com/og.png",
        seoOgImageWidth=1200,
        seoTwitterCard="player",
        body=_raw_body(),
    )

    detail = normalize_article_detail(raw)

    assert detail is not None
    assert detail.seo.title == "SEO title"
    assert detail.seo.canonical_path == "/articles/shipping"
    assert detail.seo.og_image.url == "https://cdn.example.com/og.png"
    assert detail.seo.twitter_card is None
    assert len(detail.body) == 2


def test_article_detail_without_seo_fields_has_no_seo() -> None:
    detail = normalize_article_detail(_raw_article(seoNoIndex=None))
    assert detail is not None
    assert detail.seo is None
    assert detail.body == []


def test_article_detail_renormalizes_to_equal_document() -> None:
    detail = normalize_article_detail(
        _raw_article(seo={"title": "Nested", "noIndex": True, "twitterCard": "summary"}, body=_raw_body())
    )

    assert detail is not None
    again = normalize_article_detail(detail.to_wire())
    assert again == detail


def test_page_detail_renormalizes_to_equal_document() -> None:
    raw = {
        "_id": "page-about",
        "title": "About",
        "slug": "about",
        "subheading": "Who we are",
        "_updatedAt": "2025-01-05T10:00:00Z",
        "seo": {"description": "About us", "hideFromSitemap": True},
        "body": _raw_body(),
    }

    page = normalize_page_detail(raw)

    assert page is not None
    assert page.updated_at == "2025-01-05T10:00:00Z"
    assert page.hide_from_sitemap is True
    assert page.seo.description == "About us"
    assert normalize_page_detail(page.to_wire()) == page


def test_page_keeps_only_parsable_updated_at() -> None:
    page = normalize_page({"title": "Contact", "slug": "contact", "updatedAt": "soon"})
    assert page is not None
    assert page.updated_at is None


def test_to_wire_uses_camel_case_and_omits_none() -> None:
    wire = normalize_article_detail(_raw_article(body=_raw_body())).to_wire()

    assert wire["publishedAt"] == "2025-03-01T09:30:00Z"
    assert wire["seoNoIndex"] is True
    assert wire["seo"] == {"noIndex": True}
    assert "listItem" not in wire["body"][0]
    assert wire["body"][0]["_type"] == "block"
    assert wire["body"][0]["_key"] == "b1"
    assert wire["body"][0]["markDefs"][0]["href"] == "https://example.com"
    assert wire["body"][1]["_type"] == "image"


def test_normalize_documents_drops_unusable_entries() -> None:
    docs = normalize_documents([_raw_article(), {"title": "No slug"}, None, "x"], normalize_article)
    assert [doc.slug for doc in docs] == ["shipping-the-gateway"]
    assert normalize_documents({"result": []}, normalize_article) == []


def test_parse_timestamp_handles_dates_and_garbage() -> None:
    assert parse_timestamp("2025-03-01T09:30:00Z").hour == 9
    assert parse_timestamp("2025-03-01").tzinfo is not None
    assert parse_timestamp("") is None
    assert parse_timestamp("nope") is None
    assert parse_timestamp(None) is None


_HUGE_INT = int("9" * 400)


@pytest.mark.parametrize(
    "published_at",
    ["0001-01-01T00:00:00+05:00", "9999-12-31T23:59:59-05:00", "0000-01-01", "2025-13-40"],
)
def test_out_of_range_dates_drop_the_article(published_at: str) -> None:
    assert normalize_article(_raw_article(publishedAt=published_at)) is None
    assert normalize_article_detail(_raw_article(publishedAt=published_at)) is None


def test_out_of_range_page_date_is_omitted() -> None:
    page = normalize_page({"title": "Old", "slug": "old", "updatedAt": "0001-01-01T00:00:00+05:00"})
    assert page is not None
    assert page.updated_at is None


@pytest.mark.parametrize("width", [_HUGE_INT, -_HUGE_INT, float("inf"), float("-inf"), float("nan"), 1e308 * 10])
def test_extreme_cover_dimensions_are_omitted(width) -> None:
    article = normalize_article(_raw_article(imageWidth=width, image={"url": "https://cdn.example.com/a.png", "height": width}))

    assert article is not None
    assert article.image.url == "https://cdn.example.com/a.png"
    assert article.image.width is None
    assert article.image.height is None


@pytest.mark.parametrize("width", [_HUGE_INT, float("inf"), float("nan")])
def test_extreme_inline_image_dimensions_keep_the_block(width) -> None:
    body = [{"_type": "image", "_key": "i1", "asset": {"url": "https://cdn.example.com/i.png", "width": width, "height": 300}}]

    detail = normalize_article_detail(_raw_article(body=body))

    assert detail is not None
    assert detail.body[0].asset.width is None
    assert detail.body[0].asset.height == 300


def test_one_poisoned_document_does_not_sink_the_list() -> None:
    raw = [
        _raw_article(slug="good-one"),
        _raw_article(slug="bad-date", publishedAt="0001-01-01T00:00:00+05:00"),
        _raw_article(slug="huge-image", imageWidth=_HUGE_INT),
        _raw_article(slug="good-two"),
    ]

    docs = normalize_documents(raw, normalize_article_detail)

    assert [doc.slug for doc in docs] == ["good-one", "huge-image", "good-two"]
    assert docs[1].image.width is None


def test_parse_timestamp_out_of_range_is_none() -> None:
    assert parse_timestamp("0001-01-01T00:00:00+05:00") is None
