"""Twitch Helix API client service.

Token types:
- App Access Token: fetched with client credentials and cached. Used whenever a
  client secret is configured.
- User Access Token: the bot's own token from the environment. Used as the
  bearer when no client secret is available.

Streams and videos are public endpoints, so either token works.
"""

import asyncio
import logging
import time

import httpx

from cheerbridge.core.exceptions import LocatorError

logger = logging.getLogger(__name__)

HELIX_BASE = "https://api.twitch.tv/helix"
OAUTH_BASE = "https://id.twitch.tv/oauth2"


class TwitchAPIClient:
    """Client for the Helix stream and video endpoints.

    Manages a shared httpx client for connection reuse and caches
    the app access token to avoid redundant token requests.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str = "",
        user_token: str = "",
        http: httpx.AsyncClient | None = None,
    ):
        if not client_id:
            raise ValueError("Twitch client_id is required")
        if not client_secret and not user_token:
            raise ValueError("Twitch client_secret or a user access token is required")

        self.client_id = client_id
        self.client_secret = client_secret
        self.user_token = user_token

        # Shared HTTP client, reused across requests
        self._http = http or httpx.AsyncClient(timeout=10.0)

        # App token cache
        self._app_token: str | None = None
        self._app_token_expires_at: float = 0.0
        self._app_token_lock = asyncio.Lock()

    async def close(self) -> None:
        """Close the shared HTTP client. Call on app shutdown."""
        await self._http.aclose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _headers(self, token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}", "Client-Id": self.client_id}

    async def _ensure_app_token(self) -> str | None:
        """Return a cached app access token, refreshing only when expired."""
        now = time.monotonic()
        if self._app_token and now < self._app_token_expires_at:
            return self._app_token

        async with self._app_token_lock:
            # Double-check after acquiring lock
            now = time.monotonic()
            if self._app_token and now < self._app_token_expires_at:
                return self._app_token

            try:
                response = await self._http.post(
                    f"{OAUTH_BASE}/token",
                    data={
                        "client_id": self.client_id,
                        "client_secret": self.client_secret,
                        "grant_type": "client_credentials",
                    },
                )
                if response.status_code != 200:
                    logger.error(f"Failed to get app token: {response.status_code}")
                    return None

                data = response.json()
                self._app_token = data.get("access_token")
                # Twitch returns expires_in in seconds; refresh 5 min early
                expires_in = data.get("expires_in", 0)
                self._app_token_expires_at = now + max(expires_in - 300, 0)
                return self._app_token

            except Exception as e:
                logger.exception(f"Error getting app access token: {e}")
                return None

    async def _bearer_token(self) -> str | None:
        if self.client_secret:
            return await self._ensure_app_token()
        return self.user_token

    async def _helix_get(self, path: str, params: dict | None = None) -> dict:
        """GET request to Helix API, returning the decoded body.

        Raises LocatorError on transport failures and non-200 responses.
        """
        token = await self._bearer_token()
        if not token:
            raise LocatorError("No Twitch access token available")
        try:
            response = await self._http.get(
                f"{HELIX_BASE}/{path}",
                params=params,
                headers=self._headers(token),
            )
        except httpx.HTTPError as e:
            raise LocatorError(f"Helix GET /{path} failed: {e}") from e

        if response.status_code != 200:
            raise LocatorError(f"Helix GET /{path} returned {response.status_code}: {response.text}")
        return response.json()

    # ------------------------------------------------------------------
    # Streams
    # ------------------------------------------------------------------

    async def get_stream_by_login(self, login: str) -> dict | None:
        """Get the live stream for a channel login, or None when offline."""
        data = await self._helix_get("streams", {"user_login": login})
        streams = data.get("data", [])
        return streams[0] if streams else None

    # ------------------------------------------------------------------
    # Videos / VODs
    # ------------------------------------------------------------------

    async def get_latest_archive(self, user_id: str) -> dict | None:
        """Get the most recent archived broadcast (VOD) for a user."""
        data = await self._helix_get(
            "videos",
            {"user_id": user_id, "type": "archive", "first": 1},
        )
        videos = data.get("data", [])
        return videos[0] if videos else None
