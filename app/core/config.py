"""
Application configuration models and helpers.

Centralizes settings management so the proxy routes, the browser UI and the
command line tools share a consistent configuration surface.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

import os

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file into the environment."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()

_SETTINGS_CONFIG = SettingsConfigDict(populate_by_name=True, extra="ignore")


class VendorSettings(BaseSettings):
    """Connection details for the reseller catalog API."""

    model_config = _SETTINGS_CONFIG

    base_url: AnyHttpUrl = Field(..., validation_alias="RESELLER_API_BASE_URL")
    api_key: str = Field(..., validation_alias="RESELLER_SECRET_KEY")
    customer_number: str = Field(..., validation_alias="IM_CUSTOMER_NUMBER")
    country_code: str = Field(..., validation_alias="IM_COUNTRY_CODE")
    timeout_seconds: float = Field(
        30.0,
        validation_alias="VENDOR_HTTP_TIMEOUT_SECONDS",
        description="Applied to both the catalog and the token requests.",
    )

    @property
    def catalog_url(self) -> str:
        return f"{str(self.base_url).rstrip('/')}/catalog"


class OAuthClientSettings(BaseSettings):
    """Client-credentials grant configuration."""

    model_config = _SETTINGS_CONFIG

    token_url: AnyHttpUrl = Field(..., validation_alias="OAUTH_TOKEN_URL_API")
    client_id: str = Field(..., validation_alias="OAUTH_IM_CLIENT_ID")
    client_secret: str = Field(..., validation_alias="OAUTH_IM_CLIENT_SECRET")
    scope: str = Field("read", validation_alias="OAUTH_SCOPE")

    @field_validator("scope", mode="before")
    @classmethod
    def _default_blank_scope(cls, value: str | None) -> str:
        """Treat an empty OAUTH_SCOPE the same as an unset one."""
        if value is None or not str(value).strip():
            return "read"
        return str(value).strip()


class CatalogSettings(BaseSettings):
    """Proxy behaviour that is not tied to a particular upstream."""

    model_config = _SETTINGS_CONFIG

    cache_ttl_seconds: int = Field(
        60,
        ge=0,
        validation_alias="CATALOG_CACHE_TTL_SECONDS",
        description="Freshness window for identical catalog queries. 0 disables it.",
    )
    response_mode: Literal["passthrough", "normalized"] = Field(
        "passthrough",
        validation_alias="CATALOG_RESPONSE_MODE",
    )


class AppSettings(BaseSettings):
    """Root settings object for the FastAPI application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    vendor: VendorSettings = Field(default_factory=VendorSettings)
    oauth: OAuthClientSettings = Field(default_factory=OAuthClientSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AppSettings",
    "CatalogSettings",
    "OAuthClientSettings",
    "VendorSettings",
    "get_settings",
]
