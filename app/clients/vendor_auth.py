"""
Client-credentials token handling for the reseller API.

The provider hands out short-lived bearer tokens; ``ClientCredentialsTokenCache``
keeps the current one in memory and only goes back to the token endpoint when
the token is missing or about to expire.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable

import httpx

from app.clients.errors import AuthError, UpstreamNetworkError
from app.core.config import OAuthClientSettings
from app.models.oauth import CachedAccessToken

logger = logging.getLogger(__name__)


class ClientCredentialsTokenCache:
    """Hold one bearer token and refresh it through the client-credentials grant."""

    EXPIRY_MARGIN_SECONDS = 30.0

    def __init__(
        self,
        oauth_settings: OAuthClientSettings,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._oauth = oauth_settings
        self._timeout = timeout
        self._transport = transport
        self._clock = clock
        self._cached: CachedAccessToken | None = None
        self._refresh_lock = asyncio.Lock()

    @property
    def cached_token(self) -> CachedAccessToken | None:
        return self._cached

    def invalidate(self) -> None:
        """Forget the cached token so the next caller fetches a new one."""
        self._cached = None

    async def get_access_token(self) -> str:
        """Return a bearer token valid for at least the expiry margin."""
        token = self._fresh_token()
        if token is not None:
            return token

        async with self._refresh_lock:
            # Another caller may have refreshed while we waited for the lock.
            token = self._fresh_token()
            if token is not None:
                return token
            self._cached = await self._request_token()
            return self._cached.access_token

    def _fresh_token(self) -> str | None:
        cached = self._cached
        if cached and cached.is_fresh(self._clock(), self.EXPIRY_MARGIN_SECONDS):
            return cached.access_token
        return None

    async def _request_token(self) -> CachedAccessToken:
        """Perform the client-credentials grant against the token endpoint."""
        requested_at = self._clock()
        payload = {
            "grant_type": "client_credentials",
            "scope": self._oauth.scope,
        }

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    str(self._oauth.token_url),
                    data=payload,
                    auth=(self._oauth.client_id, self._oauth.client_secret),
                    headers={"Cache-Control": "no-store"},
                )
        except httpx.RequestError as exc:
            logger.warning("Token endpoint unreachable: %s", exc)
            raise UpstreamNetworkError("OAuth token endpoint", str(exc)) from exc

        if not response.is_success:
            logger.warning("Token request rejected with status %s", response.status_code)
            raise AuthError(response.status_code, response.text)

        try:
            token_payload = response.json()
        except ValueError as exc:
            raise AuthError(response.status_code, response.text) from exc

        if not isinstance(token_payload, dict):
            raise AuthError(response.status_code, "Token payload is not a JSON object.")

        access_token = token_payload.get("access_token")
        expires_in = token_payload.get("expires_in")
        if not access_token or expires_in is None:
            raise AuthError(
                response.status_code, "Incomplete token payload returned by provider."
            )

        try:
            lifetime = float(expires_in)
        except (TypeError, ValueError) as exc:
            raise AuthError(
                response.status_code, f"Invalid expires_in in token payload: {expires_in!r}"
            ) from exc

        logger.info("Obtained access token valid for %ss", lifetime)
        return CachedAccessToken(
            access_token=str(access_token),
            expires_at=requested_at + lifetime,
        )


__all__ = ["ClientCredentialsTokenCache"]
