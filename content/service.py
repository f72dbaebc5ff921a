"""
Content Service
Composes one or two providers behind the gateway routes
"""
from typing import List, Optional
import logging

from config import ProviderConfig, Settings
from content.merge import SourceMode, merge_articles_by_slug, merge_pages_by_slug, resolve_source_mode
from core import Article, ArticleDetail, Page, PageDetail
from sources.base import ContentProvider
from sources.registry import select_content_provider
from sources.static_provider import StaticContentProvider


logger = logging.getLogger(__name__)


class ContentService:
    """
    Content service

    With a secondary provider, lists are merged by slug (primary wins) and
    detail lookups fall back to the secondary when the primary has no match.
    Upstream errors from either provider propagate unchanged.
    """

    def __init__(self, primary: ContentProvider, secondary: Optional[ContentProvider] = None):
        self.primary = primary
        self.secondary = secondary

    @property
    def provider_name(self) -> str:
        if self.secondary is None:
            return self.primary.name
        return f"{self.primary.name}+{self.secondary.name}"

    async def get_articles(self) -> List[Article]:
        articles = await self.primary.get_articles()
        if self.secondary is None:
            return articles
        return merge_articles_by_slug(articles, await self.secondary.get_articles())

    async def get_article_by_slug(self, slug: str) -> Optional[ArticleDetail]:
        article = await self.primary.get_article_by_slug(slug)
        if article is None and self.secondary is not None:
            article = await self.secondary.get_article_by_slug(slug)
        return article

    async def get_pages(self) -> List[Page]:
        pages = await self.primary.get_pages()
        if self.secondary is None:
            return pages
        return merge_pages_by_slug(pages, await self.secondary.get_pages())

    async def get_page_by_slug(self, slug: str) -> Optional[PageDetail]:
        page = await self.primary.get_page_by_slug(slug)
        if page is None and self.secondary is not None:
            page = await self.secondary.get_page_by_slug(slug)
        return page


def build_content_service(settings: Settings, **provider_kwargs) -> ContentService:
    """
    Build the process-wide content service from settings

    The selector always runs first, so a production CMS misconfiguration
    fails startup whatever the source mode.

    Args:
        settings: application settings
        **provider_kwargs: forwarded to select_content_provider (transport, sleep)

    Raises:
        ConfigurationError: misconfigured CMS in production, or unreadable static file
    """
    config = ProviderConfig.from_settings(settings)
    static = StaticContentProvider.from_file(settings.content.static_path)
    selected = select_content_provider(
        config,
        is_production=settings.gateway.is_production,
        static_provider=static,
        **provider_kwargs,
    )

    mode = resolve_source_mode(
        override=settings.content.source_mode,
        cms_enabled=settings.content.cms_enabled,
    )
    if mode is SourceMode.STATIC:
        service = ContentService(static)
    elif mode is SourceMode.HYBRID and selected is not static:
        service = ContentService(selected, static)
    else:
        service = ContentService(selected)

    logger.info(f"[ContentService] mode={mode.value} provider={service.provider_name}")
    return service
