"""Interface shared by every SERP provider the analyzer can be wired with."""

from typing import Protocol, runtime_checkable

from competitor_engine.models.competitor import SerpHit


class SERPProviderError(Exception):
    """A single SERP lookup failed (network, HTTP status, or bad payload)."""


class SERPNotConfiguredError(SERPProviderError):
    """The provider has no credentials or endpoint to call."""


@runtime_checkable
class SERPProvider(Protocol):
    """Anything that can return the organic results for a keyword."""

    def is_configured(self) -> bool:
        ...

    async def get_full_serp_results(
        self,
        keyword: str,
        region: str,
        num: int,
    ) -> list[SerpHit]:
        ...

    async def close(self) -> None:
        ...
