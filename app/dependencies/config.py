"""
FastAPI dependency for injecting configuration.

``get_settings`` is already cached, so overriding ``get_app_settings`` in
``app.dependency_overrides`` is enough to swap configuration in tests.
"""

from app.core.config import AppSettings, get_settings


def get_app_settings() -> AppSettings:
    """FastAPI dependency returning application settings."""
    return get_settings()


__all__ = ["get_app_settings"]
