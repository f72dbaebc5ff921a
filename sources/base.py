"""
Base Content Provider
Abstract base class for every content backend
"""
from abc import ABC, abstractmethod
from typing import List, Optional
import logging

from core import Article, ArticleDetail, Page, PageDetail


logger = logging.getLogger(__name__)


class ContentProvider(ABC):
    """
    Content provider base class

    Providers return canonical, already-normalized documents. Upstream
    failures surface as GatewayError; a missing slug is ``None``.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name reported in response metadata"""
        pass

    @abstractmethod
    async def get_articles(self) -> List[Article]:
        """List article summaries, newest first."""
        pass

    @abstractmethod
    async def get_article_by_slug(self, slug: str) -> Optional[ArticleDetail]:
        """
        Fetch one article with its body

        Args:
            slug: trimmed article slug

        Returns:
            The article, or None when no article has this slug
        """
        pass

    @abstractmethod
    async def get_pages(self) -> List[Page]:
        """List standalone page summaries."""
        pass

    @abstractmethod
    async def get_page_by_slug(self, slug: str) -> Optional[PageDetail]:
        """Fetch one standalone page with its body, or None."""
        pass

    def _log_list(self, resource: str, count: int):
        logger.info(f"[{self.name}] Loaded {count} {resource}")

    def _log_detail(self, resource: str, slug: str, found: bool):
        logger.debug(f"[{self.name}] {resource} '{slug}' found={found}")
