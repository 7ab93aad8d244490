"""Data models for competitor analysis requests and reports."""

from competitor_engine.models.competitor import (
    ASPIRATIONAL,
    DIRECT,
    CompetitionAnalysisResult,
    CompetitorProfile,
    KeywordLookupResult,
    KeywordQuery,
    ScoredCompetitor,
    SerpHit,
)

__all__ = [
    "ASPIRATIONAL",
    "DIRECT",
    "CompetitionAnalysisResult",
    "CompetitorProfile",
    "KeywordLookupResult",
    "KeywordQuery",
    "ScoredCompetitor",
    "SerpHit",
]
