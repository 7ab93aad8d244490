"""SERP ingestion: one keyword lookup, with failures isolated from the batch."""

import logging
from typing import Any

from competitor_engine.integrations.serp_provider import SERPProvider
from competitor_engine.models.competitor import KeywordLookupResult, KeywordQuery, SerpHit
from competitor_engine.utils.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


def _coerce_hit(raw: Any) -> SerpHit | None:
    """Accept SerpHit instances or plain dicts; None for unusable entries."""
    if isinstance(raw, SerpHit):
        hit = raw
    elif isinstance(raw, dict):
        hit = SerpHit(
            domain=raw.get("domain") or "",
            title=raw.get("title") or "",
            position=raw.get("position"),
            url=raw.get("url") or "",
        )
    else:
        return None
    if not hit.domain or not isinstance(hit.domain, str):
        return None
    if isinstance(hit.position, bool) or not isinstance(hit.position, int) or hit.position < 1:
        return None
    return hit


class SERPIngestor:
    """Fetch the organic results for selected keywords through a provider.

    Usage::

        ingestor = SERPIngestor(provider, RateLimiter(min_interval=0.5))
        result = await ingestor.lookup(KeywordQuery("seo tools", 1000))
        if not result.ok:
            print(result.error)
    """

    def __init__(
        self,
        provider: SERPProvider,
        rate_limiter: RateLimiter,
        region: str = "United Kingdom",
        result_count: int = 20,
    ):
        self._provider = provider
        self._limiter = rate_limiter
        self._region = region
        self._result_count = result_count

    @property
    def region(self) -> str:
        return self._region

    async def lookup(self, query: KeywordQuery) -> KeywordLookupResult:
        """Look up one keyword. Provider errors become a failed result."""
        logger.info("Checking who ranks for %r", query.keyword)
        try:
            async with self._limiter:
                raw_hits = await self._provider.get_full_serp_results(
                    query.keyword, self._region, self._result_count,
                )
        except Exception as exc:
            logger.warning("SERP lookup failed for %r: %s", query.keyword, exc)
            return KeywordLookupResult(
                keyword=query.keyword,
                volume=query.volume,
                error=str(exc) or exc.__class__.__name__,
            )

        hits: list[SerpHit] = []
        for raw in raw_hits or []:
            hit = _coerce_hit(raw)
            if hit is None:
                logger.debug("Dropping malformed SERP entry for %r: %r", query.keyword, raw)
                continue
            hits.append(hit)
        hits.sort(key=lambda h: h.position)
        return KeywordLookupResult(
            keyword=query.keyword,
            volume=query.volume,
            hits=tuple(hits[: self._result_count]),
        )
