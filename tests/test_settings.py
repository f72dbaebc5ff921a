from __future__ import annotations

import pytest

from config import ProviderConfig, Settings


_ENV_KEYS = [
    "GATEWAY_ENVIRONMENT",
    "GATEWAY_CONTENT_PROVIDER",
    "GATEWAY_CORS_ORIGINS",
    "SANITY_PROJECT_ID",
    "SANITY_DATASET",
    "SANITY_API_VERSION",
    "SANITY_READ_TOKEN",
    "SANITY_USE_CDN",
    "SANITY_REQUEST_TIMEOUT_MS",
    "SANITY_MAX_RETRIES",
    "SANITY_RETRY_DELAY_MS",
    "CONTENT_SOURCE_MODE",
    "CONTENT_CMS_ENABLED",
    "CONTENT_STATIC_PATH",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def _load(tmp_path) -> Settings:
    return Settings.load_from_env_file(tmp_path / "missing.env")


def test_defaults(tmp_path) -> None:
    settings = _load(tmp_path)

    assert settings.gateway.environment == "development"
    assert settings.gateway.content_provider == "cms"
    assert settings.sanity.api_version == "2025-02-19"
    assert settings.sanity.use_cdn is True
    assert settings.sanity.request_timeout_ms == 8000
    assert settings.sanity.max_retries == 1
    assert settings.sanity.retry_delay_ms == 250
    assert settings.content.source_mode is None
    assert settings.content.cms_enabled is None


def test_environment_and_provider_parsing(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("GATEWAY_ENVIRONMENT", "PROD")
    monkeypatch.setenv("GATEWAY_CONTENT_PROVIDER", " Static ")
    monkeypatch.setenv("GATEWAY_CORS_ORIGINS", "https://a.example, ,https://b.example")

    gateway = _load(tmp_path).gateway

    assert gateway.is_production is True
    assert gateway.content_provider == "static"
    assert gateway.cors_origin_list == ["https://a.example", "https://b.example"]


def test_unknown_environment_is_development(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("GATEWAY_ENVIRONMENT", "staging")
    monkeypatch.setenv("GATEWAY_CONTENT_PROVIDER", "sanity")

    gateway = _load(tmp_path).gateway

    assert gateway.environment == "development"
    assert gateway.content_provider == "cms"


@pytest.mark.parametrize(
    "key, value, field, expected",
    [
        ("SANITY_REQUEST_TIMEOUT_MS", "abc", "request_timeout_ms", 8000),
        ("SANITY_REQUEST_TIMEOUT_MS", "50", "request_timeout_ms", 8000),
        ("SANITY_REQUEST_TIMEOUT_MS", "1500", "request_timeout_ms", 1500),
        ("SANITY_MAX_RETRIES", "9", "max_retries", 1),
        ("SANITY_MAX_RETRIES", "0", "max_retries", 0),
        ("SANITY_RETRY_DELAY_MS", "-1", "retry_delay_ms", 250),
    ],
)
def test_numeric_settings_fall_back_to_defaults(monkeypatch, tmp_path, key, value, field, expected) -> None:
    monkeypatch.setenv(key, value)
    assert getattr(_load(tmp_path).sanity, field) == expected


def test_provider_config_from_settings(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("SANITY_PROJECT_ID", "proj123")
    monkeypatch.setenv("SANITY_DATASET", "production")
    monkeypatch.setenv("SANITY_READ_TOKEN", "   ")
    monkeypatch.setenv("SANITY_USE_CDN", "false")
    monkeypatch.setenv("CONTENT_SOURCE_MODE", "hybrid")
    monkeypatch.setenv("CONTENT_CMS_ENABLED", "yes")

    settings = _load(tmp_path)
    config = ProviderConfig.from_settings(settings)

    assert config.has_cms_connection is True
    assert config.read_token is None
    assert config.use_cdn is False
    assert settings.content.source_mode == "hybrid"
    assert settings.content.cms_enabled is True
