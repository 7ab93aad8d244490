"""Competitor Analysis module -- SERP overlap scoring and competitor ranking."""

from competitor_engine.modules.competitor_analysis.analyzer import (
    AnalysisSettings,
    CompetitorAnalyzer,
)
from competitor_engine.modules.competitor_analysis.accumulator import CompetitorAccumulator
from competitor_engine.modules.competitor_analysis.ingestion import SERPIngestor

__all__ = [
    "AnalysisSettings",
    "CompetitorAccumulator",
    "CompetitorAnalyzer",
    "SERPIngestor",
]
