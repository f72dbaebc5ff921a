"""
Configuration Management Module
Settings are read from the environment once at startup
"""
from .settings import (
    ContentSourceSettings,
    GatewaySettings,
    ProviderConfig,
    SanitySettings,
    Settings,
    get_settings,
)

__all__ = [
    "ContentSourceSettings",
    "GatewaySettings",
    "ProviderConfig",
    "SanitySettings",
    "Settings",
    "get_settings",
]
