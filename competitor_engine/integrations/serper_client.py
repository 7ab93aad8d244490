"""Serper.dev client for live Google organic results."""

import asyncio
import logging
import os
from typing import Any, Optional

import httpx

from competitor_engine.integrations.serp_provider import (
    SERPNotConfiguredError,
    SERPProviderError,
)
from competitor_engine.models.competitor import SerpHit
from competitor_engine.utils.helpers import extract_domain

logger = logging.getLogger(__name__)

SERPER_API_URL = "https://google.serper.dev/search"

# Serper ``gl`` codes for the region names callers pass in.
REGION_COUNTRY_CODES = {
    "united kingdom": "uk",
    "united states": "us",
    "ireland": "ie",
    "canada": "ca",
    "australia": "au",
    "new zealand": "nz",
    "germany": "de",
    "france": "fr",
    "spain": "es",
    "italy": "it",
    "netherlands": "nl",
    "sweden": "se",
    "india": "in",
}


class SerperClient:
    """Client for the Serper.dev Google search API.

    Usage::

        client = SerperClient()  # reads SERPER_API_KEY
        if client.is_configured():
            hits = await client.get_full_serp_results("seo tools", "United Kingdom", 20)
        await client.close()
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = SERPER_API_URL,
        default_country: str = "uk",
        language: str = "en",
        timeout: float = 30.0,
        max_retries: int = 2,
        retry_delay: float = 2.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_key = api_key if api_key is not None else os.getenv("SERPER_API_KEY", "")
        self._base_url = base_url
        self._default_country = default_country
        self._language = language
        self._timeout = timeout
        self._max_retries = max_retries
        self._retry_delay = retry_delay
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._credits_used = 0

        if not self._api_key:
            logger.warning("SERPER_API_KEY not set; live SERP lookups are unavailable.")

    def is_configured(self) -> bool:
        """True when an API key is available."""
        return bool(self._api_key)

    @property
    def credits_used(self) -> int:
        """Serper credits consumed by this client instance."""
        return self._credits_used

    def country_code(self, region: str) -> str:
        """Map a region name (or a two-letter code) to Serper's ``gl`` value."""
        key = (region or "").strip().lower()
        if len(key) == 2:
            return key
        return REGION_COUNTRY_CODES.get(key, self._default_country)

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def _post_with_retry(self, body: dict[str, Any]) -> dict[str, Any]:
        """POST a search, retrying with backoff on 429 and timeouts."""
        client = self._ensure_client()
        headers = {"X-API-KEY": self._api_key, "Content-Type": "application/json"}
        for attempt in range(self._max_retries + 1):
            try:
                response = await client.post(self._base_url, json=body, headers=headers)
                if response.status_code == 429 and attempt < self._max_retries:
                    wait = self._retry_delay * (2 ** attempt)
                    logger.warning(
                        "Serper 429 Too Many Requests. Retry %d/%d in %.1fs...",
                        attempt + 1, self._max_retries, wait,
                    )
                    await asyncio.sleep(wait)
                    continue
                response.raise_for_status()
                return response.json()
            except httpx.TimeoutException as exc:
                if attempt < self._max_retries:
                    wait = self._retry_delay * (2 ** attempt)
                    logger.warning(
                        "Serper timeout. Retry %d/%d in %.1fs...",
                        attempt + 1, self._max_retries, wait,
                    )
                    await asyncio.sleep(wait)
                    continue
                raise SERPProviderError(f"Serper request timed out: {exc}") from exc
            except httpx.HTTPStatusError as exc:
                raise SERPProviderError(
                    f"Serper API error: {exc.response.status_code} {exc.response.reason_phrase}"
                ) from exc
            except httpx.HTTPError as exc:
                raise SERPProviderError(f"Serper request failed: {exc}") from exc
            except ValueError as exc:
                raise SERPProviderError(f"Serper returned invalid JSON: {exc}") from exc
        raise SERPProviderError("Serper request failed after retries")

    async def get_full_serp_results(
        self,
        keyword: str,
        region: str = "United Kingdom",
        num: int = 20,
    ) -> list[SerpHit]:
        """Return the organic results for a keyword, ordered by position.

        Raises:
            SERPNotConfiguredError: no API key is set.
            SERPProviderError: the request or its payload was unusable.
        """
        if not self.is_configured():
            raise SERPNotConfiguredError("Serper API key not configured")

        body = {
            "q": keyword,
            "gl": self.country_code(region),
            "hl": self._language,
            "num": num,
            "location": region,
        }
        data = await self._post_with_retry(body)

        credits = 2 if num > 10 else 1
        self._credits_used += credits
        logger.debug("Serper: used %d credit(s) for %r (session total %d)",
                     credits, keyword, self._credits_used)

        if not isinstance(data, dict):
            raise SERPProviderError("Serper payload is not a JSON object")
        organic = data.get("organic") or []
        if not isinstance(organic, list):
            raise SERPProviderError("Serper 'organic' field is not a list")

        hits: list[SerpHit] = []
        for item in organic:
            if not isinstance(item, dict):
                continue
            position = item.get("position")
            link = item.get("link") or ""
            if isinstance(position, bool) or not isinstance(position, int) or not link:
                continue
            hits.append(SerpHit(
                domain=extract_domain(link),
                title=item.get("title") or "",
                position=position,
                url=link,
            ))
        hits.sort(key=lambda h: h.position)
        logger.info("Serper: %d organic results for %r", len(hits), keyword)
        return hits[:num]

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
