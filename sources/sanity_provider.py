"""
Sanity Content Provider
Serves articles and pages from the Sanity query API
"""
from typing import Any, List, Optional
import logging

import httpx

from .base import ContentProvider
from .sanity_client import SanityQueryClient, SleepFn
from config import ProviderConfig
from content.normalize import (
    normalize_article,
    normalize_article_detail,
    normalize_documents,
    normalize_page,
    normalize_page_detail,
)
from core import Article, ArticleDetail, Page, PageDetail
from utils.exceptions import invalid_upstream_response


logger = logging.getLogger(__name__)


_SEO_PROJECTION = """
  "seoTitle": seo.title,
  "seoDescription": seo.description,
  "seoCanonicalPath": seo.canonicalPath,
  "seoNoFollow": seo.noFollow,
  "seoOgTitle": seo.ogTitle,
  "seoOgDescription": seo.ogDescription,
  "seoOgImageUrl": seo.ogImage.asset->url,
  "seoOgImageWidth": seo.ogImage.asset->metadata.dimensions.width,
  "seoOgImageHeight": seo.ogImage.asset->metadata.dimensions.height,
  "seoOgImageAlt": seo.ogImage.alt,
  "seoTwitterCard": seo.twitterCard,"""

_BODY_PROJECTION = """
  "body": coalesce(body, [])[]{
    ...,
    _type == "image" => {
      ...,
      "asset": {
        "url": asset->url,
        "width": asset->metadata.dimensions.width,
        "height": asset->metadata.dimensions.height
      }
    }
  }"""

_ARTICLE_FIELDS = """
  _id,
  title,
  "slug": slug.current,
  "publishedAt": coalesce(publishedAt, _createdAt),
  "excerpt": coalesce(excerpt, seo.description, ""),
  "hideFromSitemap": seo.hideFromSitemap,
  "seoNoIndex": seo.noIndex,
  "imageUrl": mainImage.asset->url,
  "imageWidth": mainImage.asset->metadata.dimensions.width,
  "imageHeight": mainImage.asset->metadata.dimensions.height,
  "imageAlt": mainImage.alt,
  tags"""

_PAGE_FIELDS = """
  _id,
  title,
  "slug": slug.current,
  subheading,
  intro,
  "updatedAt": _updatedAt,
  "hideFromSitemap": seo.hideFromSitemap,
  "seoNoIndex": seo.noIndex"""

ARTICLES_QUERY = (
    '*[_type == "article" && defined(slug.current)] | order(publishedAt desc) {'
    + _ARTICLE_FIELDS
    + "\n}"
)
ARTICLE_BY_SLUG_QUERY = (
    '*[_type == "article" && slug.current == $slug][0]{'
    + _ARTICLE_FIELDS
    + ","
    + _SEO_PROJECTION
    + _BODY_PROJECTION
    + "\n}"
)
PAGES_QUERY = (
    '*[_type == "page" && defined(slug.current)] | order(_updatedAt desc) {'
    + _PAGE_FIELDS
    + "\n}"
)
PAGE_BY_SLUG_QUERY = (
    '*[_type == "page" && slug.current == $slug][0]{'
    + _PAGE_FIELDS
    + ","
    + _SEO_PROJECTION
    + _BODY_PROJECTION
    + "\n}"
)


class SanityContentProvider(ContentProvider):
    """
    Sanity-backed provider

    Every call goes through SanityQueryClient (timeout + retry) and then the
    normalizer; unusable documents are dropped rather than surfaced.
    """

    def __init__(
        self,
        config: ProviderConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Optional[SleepFn] = None,
    ):
        self.config = config
        kwargs = {"transport": transport}
        if sleep is not None:
            kwargs["sleep"] = sleep
        self.client = SanityQueryClient(config, **kwargs)

    @property
    def name(self) -> str:
        return "sanity"

    async def get_articles(self) -> List[Article]:
        result = await self.client.query(ARTICLES_QUERY, resource="articles")
        articles = normalize_documents(self._require_list(result, "articles"), normalize_article)
        self._log_list("articles", len(articles))
        return articles

    async def get_article_by_slug(self, slug: str) -> Optional[ArticleDetail]:
        result = await self.client.query(ARTICLE_BY_SLUG_QUERY, {"slug": slug}, resource="articles")
        article = normalize_article_detail(result) if result is not None else None
        self._log_detail("article", slug, article is not None)
        return article

    async def get_pages(self) -> List[Page]:
        result = await self.client.query(PAGES_QUERY, resource="pages")
        pages = normalize_documents(self._require_list(result, "pages"), normalize_page)
        self._log_list("pages", len(pages))
        return pages

    async def get_page_by_slug(self, slug: str) -> Optional[PageDetail]:
        result = await self.client.query(PAGE_BY_SLUG_QUERY, {"slug": slug}, resource="pages")
        page = normalize_page_detail(result) if result is not None else None
        self._log_detail("page", slug, page is not None)
        return page

    @staticmethod
    def _require_list(result: Any, resource: str) -> list:
        if result is None:
            return []
        if not isinstance(result, list):
            raise invalid_upstream_response(resource, "result is not a list")
        return result
