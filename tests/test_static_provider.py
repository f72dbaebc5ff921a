from __future__ import annotations

import json

import pytest

from sources.static_provider import StaticContentProvider
from utils.exceptions import ConfigurationError, ErrorCode


_CONTENT = {
    "articles": [
        {"id": "old", "title": "Old post", "slug": "old-post", "date": "2023-05-01", "description": "Older"},
        {"id": "new", "title": "New post", "slug": "new-post", "date": "2024-06-01", "tags": ["news"]},
        {"id": "dup", "title": "Duplicate", "slug": "new-post", "date": "2025-01-01"},
        {"title": "No date", "slug": "no-date"},
    ],
    "pages": [
        {"id": "about", "title": "About", "slug": "about", "intro": "Hello", "body": []},
    ],
}


@pytest.fixture
def content_file(tmp_path):
    path = tmp_path / "content.json"
    path.write_text(json.dumps(_CONTENT), encoding="utf-8")
    return path


@pytest.mark.asyncio
async def test_static_provider_serves_newest_first(content_file) -> None:
    provider = StaticContentProvider.from_file(content_file)

    articles = await provider.get_articles()

    assert provider.name == "static"
    assert [article.id for article in articles] == ["new", "old"]
    assert articles[0].tags == ["news"]
    assert articles[1].excerpt == "Older"


@pytest.mark.asyncio
async def test_static_provider_detail_lookup(content_file) -> None:
    provider = StaticContentProvider.from_file(content_file)

    page = await provider.get_page_by_slug("about")
    article = await provider.get_article_by_slug("old-post")

    assert page is not None and page.intro == "Hello"
    assert article is not None and article.body == []
    assert await provider.get_article_by_slug("no-date") is None
    assert await provider.get_page_by_slug("missing") is None


@pytest.mark.asyncio
async def test_static_provider_without_path_is_empty() -> None:
    provider = StaticContentProvider.from_file(None)

    assert await provider.get_articles() == []
    assert await provider.get_pages() == []


@pytest.mark.parametrize("payload", ["{not json", "[1, 2]"])
def test_static_provider_rejects_invalid_file(tmp_path, payload: str) -> None:
    path = tmp_path / "content.json"
    path.write_text(payload, encoding="utf-8")

    with pytest.raises(ConfigurationError) as excinfo:
        StaticContentProvider.from_file(path)

    assert excinfo.value.code is ErrorCode.MISCONFIGURED


def test_static_provider_rejects_missing_file(tmp_path) -> None:
    with pytest.raises(ConfigurationError):
        StaticContentProvider.from_file(tmp_path / "absent.json")


@pytest.mark.parametrize(
    "payload, field",
    [({"articles": 5}, "articles"), ({"articles": {"slug": "a"}}, "articles"), ({"pages": "abc"}, "pages")],
)
def test_static_provider_rejects_non_list_collections(tmp_path, payload: dict, field: str) -> None:
    path = tmp_path / "content.json"
    path.write_text(json.dumps(payload), encoding="utf-8")

    with pytest.raises(ConfigurationError) as excinfo:
        StaticContentProvider.from_file(path)

    assert excinfo.value.code is ErrorCode.MISCONFIGURED
    assert excinfo.value.details["field"] == field


@pytest.mark.asyncio
async def test_static_provider_accepts_null_collections(tmp_path) -> None:
    path = tmp_path / "content.json"
    path.write_text(json.dumps({"articles": None}), encoding="utf-8")

    provider = StaticContentProvider.from_file(path)

    assert await provider.get_articles() == []
    assert await provider.get_pages() == []
