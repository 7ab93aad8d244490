"""SERP provider clients."""

from competitor_engine.integrations.serp_provider import (
    SERPNotConfiguredError,
    SERPProvider,
    SERPProviderError,
)
from competitor_engine.integrations.serp_replay import ReplaySERPProvider
from competitor_engine.integrations.serper_client import SerperClient

__all__ = [
    "ReplaySERPProvider",
    "SERPNotConfiguredError",
    "SERPProvider",
    "SERPProviderError",
    "SerperClient",
]
