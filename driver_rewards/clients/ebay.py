# driver_rewards/clients/ebay.py

import asyncio
import logging
import time
from typing import Callable, List

import httpx

from driver_rewards.core import locales
from driver_rewards.core.config import settings
from driver_rewards.core.errors import UpstreamUnavailableError

logger = logging.getLogger(__name__)

SEARCH_ENDPOINT = "/buy/browse/v1/item_summary/search"


class TokenCache:
    """
    Holds the application access token between requests. A token counts as
    valid until `expires_in - safety_margin` seconds after it was stored.
    """
    def __init__(self, safety_margin_seconds: int = 300, clock: Callable[[], float] = time.monotonic):
        self.safety_margin_seconds = safety_margin_seconds
        self.clock = clock
        self.token: str | None = None
        self.expires_at: float = 0.0

    def get(self) -> str | None:
        if self.token and self.clock() < self.expires_at:
            return self.token
        return None

    def store(self, token: str, expires_in: int) -> None:
        self.token = token
        self.expires_at = self.clock() + max(expires_in - self.safety_margin_seconds, 0)

    def clear(self) -> None:
        self.token = None
        self.expires_at = 0.0


class EbayClient:
    """
    Asynchronous client for the eBay Browse API.
    Authenticates with the client-credentials grant; the token is kept in an
    injected TokenCache.
    """
    def __init__(
        self,
        client_id: str,
        client_secret: str,
        base_url: str,
        oauth_url: str,
        scope: str,
        marketplace_id: str,
        token_cache: TokenCache | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.oauth_url = oauth_url
        self.scope = scope
        self.marketplace_id = marketplace_id
        self.token_cache = token_cache or TokenCache()
        self._token_lock = asyncio.Lock()
        self.async_client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def get_access_token(self) -> str:
        """
        Returns the cached token or fetches a new one.
        Any failure here surfaces as UpstreamUnavailableError.
        """
        token = self.token_cache.get()
        if token:
            return token

        async with self._token_lock:
            # Another request may have refreshed it while we waited
            token = self.token_cache.get()
            if token:
                return token

            try:
                response = await self.async_client.post(
                    self.oauth_url,
                    data={"grant_type": "client_credentials", "scope": self.scope},
                    auth=(self.client_id, self.client_secret),
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                )
                response.raise_for_status()
                payload = response.json()
                token = payload["access_token"]
                expires_in = int(payload.get("expires_in", 7200))
            except httpx.HTTPStatusError as e:
                logger.error(f"eBay OAuth request failed with {e.response.status_code}: {e.response.text}", exc_info=True)
                raise UpstreamUnavailableError(locales.ERROR_MARKETPLACE_UNAVAILABLE) from e
            except (httpx.RequestError, KeyError, ValueError) as e:
                logger.error("Could not obtain an eBay access token.", exc_info=True)
                raise UpstreamUnavailableError(locales.ERROR_MARKETPLACE_UNAVAILABLE) from e

            self.token_cache.store(token, expires_in)
            logger.info(f"Fetched a new eBay access token (expires in {expires_in}s)")
            return token

    async def search(self, query: str, limit: int, token: str) -> List[dict]:
        """
        One Browse API search. Returns the raw `itemSummaries` list.
        HTTP errors (4xx/5xx) and network errors are logged and re-raised.
        """
        try:
            response = await self.async_client.get(
                SEARCH_ENDPOINT,
                params={"q": query, "limit": limit},
                headers={
                    "Authorization": f"Bearer {token}",
                    "X-EBAY-C-MARKETPLACE-ID": self.marketplace_id,
                },
            )
            response.raise_for_status()
        except httpx.RequestError as e:
            logger.error(f"Network error during eBay search to {e.request.url!r}.", exc_info=True)
            raise
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error during eBay search to {e.request.url!r}: {e.response.text}", exc_info=True)
            raise
        return response.json().get("itemSummaries") or []

    async def fetch_image(self, url: str, timeout: float) -> httpx.Response:
        """Fetches an arbitrary (absolute) image URL. Raises on network or HTTP errors."""
        response = await self.async_client.get(url, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
        return response

    async def aclose(self) -> None:
        await self.async_client.aclose()


# Shared instance
ebay_client = EbayClient(
    client_id=settings.EBAY_CLIENT_ID,
    client_secret=settings.EBAY_CLIENT_SECRET,
    base_url=settings.EBAY_API_BASE_URL,
    oauth_url=settings.EBAY_OAUTH_URL,
    scope=settings.EBAY_SCOPE,
    marketplace_id=settings.EBAY_MARKETPLACE_ID,
    token_cache=TokenCache(safety_margin_seconds=settings.EBAY_TOKEN_SAFETY_MARGIN_SECONDS),
    timeout=settings.HTTP_TIMEOUT_SECONDS,
)


def get_ebay_client() -> EbayClient:
    """Dependency that hands the shared eBay client to endpoints."""
    return ebay_client
