"""
Static Content Provider
Serves statically authored articles and pages bundled with the deployment
"""
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import json
import logging

from .base import ContentProvider
from content.merge import merge_articles_by_slug, merge_pages_by_slug
from content.normalize import (
    normalize_article_detail,
    normalize_documents,
    normalize_page_detail,
)
from core import Article, ArticleDetail, Page, PageDetail
from utils.exceptions import ConfigurationError


logger = logging.getLogger(__name__)


class StaticContentProvider(ContentProvider):
    """
    Static provider

    Raw documents go through the same normalizer as CMS payloads, once, at
    construction. Lists are served newest first.
    """

    def __init__(
        self,
        articles: Optional[List[Dict[str, Any]]] = None,
        pages: Optional[List[Dict[str, Any]]] = None,
    ):
        details = normalize_documents(list(articles or []), normalize_article_detail)
        page_details = normalize_documents(list(pages or []), normalize_page_detail)

        self._articles: Dict[str, ArticleDetail] = {}
        for article in details:
            self._articles.setdefault(article.slug, article)
        self._pages: Dict[str, PageDetail] = {}
        for page in page_details:
            self._pages.setdefault(page.slug, page)

    @classmethod
    def from_file(cls, path: Optional[Union[str, Path]]) -> "StaticContentProvider":
        """
        Load ``{"articles": [...], "pages": [...]}`` from a JSON file

        Args:
            path: JSON file path; None serves empty content

        Raises:
            ConfigurationError: the file does not hold a JSON object of lists
        """
        if path is None:
            return cls()

        file_path = Path(path)
        try:
            payload = json.loads(file_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigurationError(
                "Static content file could not be loaded.",
                details={"path": str(file_path), "reason": str(e)},
            ) from e

        if not isinstance(payload, dict):
            raise ConfigurationError(
                "Static content file must contain a JSON object.",
                details={"path": str(file_path)},
            )

        for field in ("articles", "pages"):
            if not isinstance(payload.get(field), (list, type(None))):
                raise ConfigurationError(
                    f"Static content field '{field}' must be a list.",
                    details={"path": str(file_path), "field": field},
                )

        provider = cls(articles=payload.get("articles"), pages=payload.get("pages"))
        logger.info(
            f"[static] Loaded {len(provider._articles)} articles and {len(provider._pages)} pages from {file_path}"
        )
        return provider

    @property
    def name(self) -> str:
        return "static"

    async def get_articles(self) -> List[Article]:
        summaries = [Article(**article.model_dump(exclude={"seo", "body"})) for article in self._articles.values()]
        articles = merge_articles_by_slug(summaries, [])
        self._log_list("articles", len(articles))
        return articles

    async def get_article_by_slug(self, slug: str) -> Optional[ArticleDetail]:
        article = self._articles.get(slug)
        self._log_detail("article", slug, article is not None)
        return article

    async def get_pages(self) -> List[Page]:
        summaries = [Page(**page.model_dump(exclude={"seo", "body"})) for page in self._pages.values()]
        pages = merge_pages_by_slug(summaries, [])
        self._log_list("pages", len(pages))
        return pages

    async def get_page_by_slug(self, slug: str) -> Optional[PageDetail]:
        page = self._pages.get(slug)
        self._log_detail("page", slug, page is not None)
        return page
