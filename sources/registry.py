"""
Provider Selector
Picks the content backend from ProviderConfig, applying the fallback policy
"""
from typing import Optional
import logging

import httpx

from .base import ContentProvider
from .sanity_client import SleepFn
from .sanity_provider import SanityContentProvider
from .static_provider import StaticContentProvider
from config import ProviderConfig
from utils.exceptions import ConfigurationError


logger = logging.getLogger(__name__)


def select_content_provider(
    config: ProviderConfig,
    *,
    is_production: bool,
    static_provider: Optional[StaticContentProvider] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    sleep: Optional[SleepFn] = None,
) -> ContentProvider:
    """
    Select the content provider

    Args:
        config: resolved provider configuration
        is_production: production turns a missing CMS connection into a hard error
        static_provider: provider used for the static backend and as fallback
        transport: optional httpx transport for the Sanity client
        sleep: optional sleep coroutine for the Sanity retry loop

    Raises:
        ConfigurationError: CMS requested in production without project/dataset
    """
    static = static_provider or StaticContentProvider()

    if config.backend == "static":
        logger.info("[Selector] Static content provider selected")
        return static

    if config.has_cms_connection:
        logger.info(f"[Selector] Sanity provider selected (project={config.project_id}, dataset={config.dataset})")
        return SanityContentProvider(config, transport=transport, sleep=sleep)

    missing = [name for name, value in (("project_id", config.project_id), ("dataset", config.dataset)) if not value]
    if is_production:
        raise ConfigurationError(
            "CMS content provider is selected but the Sanity connection is not configured.",
            details={"missing": missing},
        )

    logger.warning(f"[Selector] Sanity connection missing {missing}; falling back to static content")
    return static
