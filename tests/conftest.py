"""Shared pytest fixtures."""

import pytest

from tagpurge import ContentItem, MemoryAuditSink, PurgeSettings, TaxonomyTerm

_ENV_KEYS = (
    "CF_KEY",
    "CF_EMAIL",
    "CF_ZONE_ID",
    "DOMAIN_CURRENT_SITE",
    "CF_LOG_PATH",
    "CF_PRODUCTION_DOMAIN",
    "CF_SITE_URL",
    "CF_API_BASE_URL",
    "CF_TIMEOUT",
    "SERVER_NAME",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the host environment out of every test."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def settings() -> PurgeSettings:
    """Complete settings for a non-production scope."""
    return PurgeSettings(
        auth_key="key-1",
        email="ops@example.com",
        zone_id="zone-1",
        site_scope="acme.example.com",
        server_name="web-1",
    )


@pytest.fixture
def sink() -> MemoryAuditSink:
    """Create a fresh MemoryAuditSink for each test."""
    return MemoryAuditSink()


@pytest.fixture
def post() -> ContentItem:
    """A post with one category term and no author."""
    return ContentItem(
        id=42,
        type="post",
        terms=(TaxonomyTerm("category", 3, "news"),),
    )
