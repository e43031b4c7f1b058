"""Pytest configuration shared across the suite."""

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from app.core.config import OAuthClientSettings, VendorSettings


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO-powered tests to run against asyncio backend only."""
    return "asyncio"


@pytest.fixture
def oauth_settings() -> OAuthClientSettings:
    return OAuthClientSettings(
        OAUTH_TOKEN_URL_API="https://auth.example.com/oauth/token",
        OAUTH_IM_CLIENT_ID="client",
        OAUTH_IM_CLIENT_SECRET="secret",
    )


@pytest.fixture
def vendor_settings() -> VendorSettings:
    return VendorSettings(
        RESELLER_API_BASE_URL="https://vendor.example.com/resellers/v6",
        RESELLER_SECRET_KEY="api-key",
        IM_CUSTOMER_NUMBER="20-123456",
        IM_COUNTRY_CODE="US",
    )
