"""Shared pytest fixtures for the SERP Competitor Engine tests."""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Ensure project root is on sys.path so 'competitor_engine' is importable.
_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)


def make_hits(*entries):
    """Build SerpHit objects from (domain, position) or (domain, position, title) tuples."""
    from competitor_engine.models.competitor import SerpHit
    hits = []
    for entry in entries:
        domain, position = entry[0], entry[1]
        title = entry[2] if len(entry) > 2 else "Result for " + domain
        hits.append(SerpHit(domain=domain, title=title, position=position))
    return hits


@pytest.fixture()
def mock_serp_provider():
    """Factory for a mock SERP provider that answers from a keyword -> hits mapping.

    A mapping value that is an Exception instance is raised for that keyword;
    unknown keywords return no hits.
    """
    def _factory(responses=None, configured=True):
        responses = responses or {}
        provider = MagicMock()
        provider.is_configured = MagicMock(return_value=configured)

        async def _lookup(keyword, region, num):
            value = responses.get(keyword, [])
            if isinstance(value, Exception):
                raise value
            return list(value)

        provider.get_full_serp_results = AsyncMock(side_effect=_lookup)
        provider.close = AsyncMock()
        return provider
    return _factory


@pytest.fixture()
def fast_settings():
    """AnalysisSettings without the inter-request delay."""
    from competitor_engine.modules.competitor_analysis import AnalysisSettings
    return AnalysisSettings(request_delay_seconds=0.0, timeout_seconds=None)


@pytest.fixture()
def scenario_a_responses():
    """competitor-a.com at #1 for both keywords, wikipedia.org at #2 for one."""
    return {
        "seo tools": make_hits(("competitor-a.com", 1), ("www.wikipedia.org", 2)),
        "marketing agency": make_hits(("competitor-a.com", 1)),
    }


@pytest.fixture()
def scenario_a_keywords():
    return [
        {"keyword": "seo tools", "volume": 1000},
        {"keyword": "marketing agency", "volume": 500},
    ]
