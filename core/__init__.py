"""Core contracts and shared types for the content gateway."""

from .contracts import (
    Article,
    ArticleDetail,
    GatewayModel,
    ImageAsset,
    ImageBlock,
    ImageDescriptor,
    Page,
    PageDetail,
    PortableTextBlock,
    SeoOverrides,
    Span,
    TextBlock,
    TwitterCard,
)
from .envelope import (
    RequestContext,
    ResponseMeta,
    build_meta,
    error_envelope,
    success_envelope,
)

__all__ = [
    "Article",
    "ArticleDetail",
    "GatewayModel",
    "ImageAsset",
    "ImageBlock",
    "ImageDescriptor",
    "Page",
    "PageDetail",
    "PortableTextBlock",
    "RequestContext",
    "ResponseMeta",
    "SeoOverrides",
    "Span",
    "TextBlock",
    "TwitterCard",
    "build_meta",
    "error_envelope",
    "success_envelope",
]
