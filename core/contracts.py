"""Canonical content contracts served by the gateway."""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


TwitterCard = Literal["summary", "summary_large_image"]


class GatewayModel(BaseModel):
    """Base model: camelCase on the wire, immutable once built."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_wire(self) -> Dict[str, Any]:
        """JSON-ready dict with aliases applied and omitted fields dropped."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ImageAsset(GatewayModel):
    """Resolved asset of an inline portable-text image."""

    url: str
    width: Optional[int] = None
    height: Optional[int] = None


class ImageDescriptor(GatewayModel):
    """Cover or social image reference."""

    url: str
    width: Optional[int] = None
    height: Optional[int] = None
    alt: Optional[str] = None


class Span(GatewayModel):
    """Run of text inside a text block."""

    key: Optional[str] = Field(default=None, alias="_key")
    kind: Literal["span"] = Field(default="span", alias="_type")
    text: str
    marks: Optional[List[str]] = None


class TextBlock(GatewayModel):
    """Paragraph-like block of marked spans."""

    key: Optional[str] = Field(default=None, alias="_key")
    kind: Literal["block"] = Field(default="block", alias="_type")
    style: Optional[str] = None
    list_item: Optional[str] = None
    level: Optional[int] = None
    children: List[Span]
    mark_defs: List[Dict[str, Any]] = Field(default_factory=list)


class ImageBlock(GatewayModel):
    """Inline image block."""

    key: Optional[str] = Field(default=None, alias="_key")
    kind: Literal["image"] = Field(default="image", alias="_type")
    asset: ImageAsset
    alt: Optional[str] = None


PortableTextBlock = Annotated[Union[TextBlock, ImageBlock], Field(discriminator="kind")]


class SeoOverrides(GatewayModel):
    """Per-document SEO overrides authored in the CMS."""

    title: Optional[str] = None
    description: Optional[str] = None
    canonical_path: Optional[str] = None
    no_index: Optional[bool] = None
    no_follow: Optional[bool] = None
    og_title: Optional[str] = None
    og_description: Optional[str] = None
    og_image: Optional[ImageDescriptor] = None
    twitter_card: Optional[TwitterCard] = None


class Article(GatewayModel):
    """Article summary used by list endpoints."""

    id: Optional[str] = None
    slug: str = Field(min_length=1)
    title: str = Field(min_length=1)
    published_at: str = Field(min_length=1)
    excerpt: Optional[str] = None
    image: Optional[ImageDescriptor] = None
    tags: Optional[List[str]] = Field(default=None, min_length=1)
    hide_from_sitemap: Optional[bool] = None
    seo_no_index: Optional[bool] = None


class ArticleDetail(Article):
    """Article with SEO overrides and portable-text body."""

    seo: Optional[SeoOverrides] = None
    body: List[PortableTextBlock] = Field(default_factory=list)


class Page(GatewayModel):
    """Standalone page summary used by list endpoints."""

    id: Optional[str] = None
    slug: str = Field(min_length=1)
    title: str = Field(min_length=1)
    subheading: Optional[str] = None
    intro: Optional[str] = None
    updated_at: Optional[str] = None
    tags: Optional[List[str]] = Field(default=None, min_length=1)
    hide_from_sitemap: Optional[bool] = None
    seo_no_index: Optional[bool] = None


class PageDetail(Page):
    """Standalone page with SEO overrides and portable-text body."""

    seo: Optional[SeoOverrides] = None
    body: List[PortableTextBlock] = Field(default_factory=list)
