"""
Domain models for the cached client-credentials token.
"""

from pydantic import BaseModel, ConfigDict, Field


class CachedAccessToken(BaseModel):
    """Bearer token held in memory together with its absolute expiry."""

    model_config = ConfigDict(frozen=True)

    access_token: str
    expires_at: float = Field(..., description="Expiry as seconds since the epoch.")

    def is_fresh(self, now: float, margin_seconds: float) -> bool:
        """True while ``now`` is still outside the refresh margin."""
        return now < self.expires_at - margin_seconds


__all__ = ["CachedAccessToken"]
