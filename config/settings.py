"""
Settings Configuration
Environment-driven configuration validated with Pydantic
"""
from functools import lru_cache
from pathlib import Path
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings


RuntimeEnvironment = Literal["development", "test", "production"]
ContentBackend = Literal["cms", "static"]

DEFAULT_SANITY_API_VERSION = "2025-02-19"
DEFAULT_REQUEST_TIMEOUT_MS = 8_000
DEFAULT_MAX_RETRIES = 1
DEFAULT_RETRY_DELAY_MS = 250

_TRUE_TOKENS = {"true", "1", "yes", "on"}
_FALSE_TOKENS = {"false", "0", "no", "off"}


def _blank_to_none(value: Any) -> Optional[str]:
    text = str(value or "").strip()
    return text or None


def _bounded_int(value: Any, *, default: int, minimum: int, maximum: int) -> int:
    """Parse an integer setting; garbage or out-of-range values fall back to the default."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        parsed = value
    else:
        text = str(value if value is not None else "").strip()
        if not text:
            return default
        try:
            parsed = int(text)
        except ValueError:
            return default
    if parsed < minimum or parsed > maximum:
        return default
    return parsed


def _optional_flag(value: Any) -> Optional[bool]:
    if value is None or isinstance(value, bool):
        return value
    token = str(value).strip().lower()
    if token in _TRUE_TOKENS:
        return True
    if token in _FALSE_TOKENS:
        return False
    return None


class GatewaySettings(BaseSettings):
    """Gateway runtime settings"""
    environment: RuntimeEnvironment = Field(default="development", description="Runtime environment")
    content_provider: ContentBackend = Field(default="cms", description="Requested content backend: cms, static")
    cors_origins: str = Field(default="", description="Comma-separated CORS allowlist")
    log_level: str = Field(default="INFO", description="Log level")

    class Config:
        env_prefix = "GATEWAY_"

    @field_validator("environment", mode="before")
    @classmethod
    def _parse_environment(cls, value: Any) -> str:
        token = str(value or "").strip().lower()
        if token in {"production", "prod"}:
            return "production"
        if token == "test":
            return "test"
        return "development"

    @field_validator("content_provider", mode="before")
    @classmethod
    def _parse_content_provider(cls, value: Any) -> str:
        token = str(value or "").strip().lower()
        return "static" if token == "static" else "cms"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


class SanitySettings(BaseSettings):
    """Sanity query API connection and resilience settings"""
    project_id: Optional[str] = Field(default=None, description="Sanity project ID")
    dataset: Optional[str] = Field(default=None, description="Sanity dataset")
    api_version: str = Field(default=DEFAULT_SANITY_API_VERSION, description="Query API version")
    read_token: Optional[str] = Field(default=None, description="Read token (optional)")
    use_cdn: bool = Field(default=True, description="Query through the API CDN")
    request_timeout_ms: int = Field(default=DEFAULT_REQUEST_TIMEOUT_MS, description="Per-attempt timeout (ms)")
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, description="Additional attempts after the first")
    retry_delay_ms: int = Field(default=DEFAULT_RETRY_DELAY_MS, description="Fixed delay between attempts (ms)")

    class Config:
        env_prefix = "SANITY_"

    @field_validator("project_id", "dataset", "read_token", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> Optional[str]:
        return _blank_to_none(value)

    @field_validator("api_version", mode="before")
    @classmethod
    def _api_version(cls, value: Any) -> str:
        return _blank_to_none(value) or DEFAULT_SANITY_API_VERSION

    @field_validator("use_cdn", mode="before")
    @classmethod
    def _use_cdn(cls, value: Any) -> bool:
        if value is None or (isinstance(value, str) and not value.strip()):
            return True
        return _optional_flag(value) is True

    @field_validator("request_timeout_ms", mode="before")
    @classmethod
    def _timeout(cls, value: Any) -> int:
        return _bounded_int(value, default=DEFAULT_REQUEST_TIMEOUT_MS, minimum=100, maximum=60_000)

    @field_validator("max_retries", mode="before")
    @classmethod
    def _retries(cls, value: Any) -> int:
        return _bounded_int(value, default=DEFAULT_MAX_RETRIES, minimum=0, maximum=5)

    @field_validator("retry_delay_ms", mode="before")
    @classmethod
    def _delay(cls, value: Any) -> int:
        return _bounded_int(value, default=DEFAULT_RETRY_DELAY_MS, minimum=0, maximum=10_000)


class ContentSourceSettings(BaseSettings):
    """Content source-mode settings"""
    source_mode: Optional[str] = Field(default=None, description="Explicit source mode: static, cms, hybrid")
    cms_enabled: Optional[bool] = Field(default=None, description="Enable the CMS source when no mode is set")
    static_path: Optional[str] = Field(default=None, description="JSON file with statically authored content")

    class Config:
        env_prefix = "CONTENT_"

    @field_validator("source_mode", "static_path", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> Optional[str]:
        return _blank_to_none(value)

    @field_validator("cms_enabled", mode="before")
    @classmethod
    def _flag(cls, value: Any) -> Optional[bool]:
        return _optional_flag(value)


class Settings(BaseSettings):
    """Top-level settings aggregating every section"""

    gateway: GatewaySettings = Field(default_factory=GatewaySettings)
    sanity: SanitySettings = Field(default_factory=SanitySettings)
    content: ContentSourceSettings = Field(default_factory=ContentSourceSettings)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @classmethod
    def load_from_env_file(cls, env_path: Optional[Path] = None) -> "Settings":
        """Load settings, reading config/.env first when present."""
        if env_path is None:
            env_path = Path(__file__).parent / ".env"

        if env_path.exists():
            from dotenv import load_dotenv
            load_dotenv(env_path)

        return cls(
            gateway=GatewaySettings(),
            sanity=SanitySettings(),
            content=ContentSourceSettings(),
        )


class ProviderConfig(BaseModel):
    """
    Immutable content-provider configuration

    Resolved once per process from Settings and passed explicitly to the
    selector, providers and query client.
    """

    model_config = ConfigDict(frozen=True)

    backend: ContentBackend = "cms"
    project_id: Optional[str] = None
    dataset: Optional[str] = None
    api_version: str = DEFAULT_SANITY_API_VERSION
    read_token: Optional[str] = None
    use_cdn: bool = True
    request_timeout_ms: int = Field(default=DEFAULT_REQUEST_TIMEOUT_MS, gt=0)
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=0)
    retry_delay_ms: int = Field(default=DEFAULT_RETRY_DELAY_MS, ge=0)

    @field_validator("project_id", "dataset", "read_token", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> Optional[str]:
        return _blank_to_none(value)

    @property
    def has_cms_connection(self) -> bool:
        return bool(self.project_id and self.dataset)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProviderConfig":
        sanity = settings.sanity
        return cls(
            backend=settings.gateway.content_provider,
            project_id=sanity.project_id,
            dataset=sanity.dataset,
            api_version=sanity.api_version,
            read_token=sanity.read_token,
            use_cdn=sanity.use_cdn,
            request_timeout_ms=sanity.request_timeout_ms,
            max_retries=sanity.max_retries,
            retry_delay_ms=sanity.retry_delay_ms,
        )


@lru_cache()
def get_settings() -> Settings:
    """Process-wide settings singleton"""
    return Settings.load_from_env_file()
