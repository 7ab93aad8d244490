"""Keyword, SERP hit, and competitor data models for one analysis request."""

import math
from dataclasses import dataclass, field
from typing import Any, Optional

DIRECT = "direct"
ASPIRATIONAL = "aspirational"


def _is_finite(value: int | float) -> bool:
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints too large for a float
        return False


@dataclass(frozen=True)
class KeywordQuery:
    """A caller-supplied keyword with its monthly search volume."""
    keyword: str
    volume: Optional[int | float] = None

    @classmethod
    def from_dict(cls, data: Any) -> Optional["KeywordQuery"]:
        """Build from a request entry; returns None when there is no keyword text."""
        if not isinstance(data, dict):
            return None
        keyword = data.get("keyword")
        if not isinstance(keyword, str) or not keyword.strip():
            return None
        volume = data.get("volume")
        if isinstance(volume, bool) or not isinstance(volume, (int, float)):
            volume = None
        elif not _is_finite(volume):
            volume = None
        return cls(keyword=keyword, volume=volume)


@dataclass(frozen=True)
class SerpHit:
    """One organic result for one keyword query."""
    domain: str
    title: str
    position: int  # 1 = top of the page
    url: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "domain": self.domain,
            "title": self.title,
            "position": self.position,
            "url": self.url,
        }


@dataclass
class CompetitorProfile:
    """Evidence accumulated for one competing domain during a request.

    ``shared_keywords``, ``positions`` and ``titles`` are parallel lists.
    """
    domain: str
    shared_keywords: list[str] = field(default_factory=list)
    positions: list[int] = field(default_factory=list)
    titles: list[str] = field(default_factory=list)
    total_score: float = 0.0

    def add_observation(
        self, keyword: str, position: int, title: str, score: float
    ) -> None:
        self.shared_keywords.append(keyword)
        self.positions.append(position)
        self.titles.append(title)
        self.total_score += score

    @property
    def distinct_keywords(self) -> list[str]:
        """Shared keywords with duplicates removed, in first-seen order."""
        return list(dict.fromkeys(self.shared_keywords))

    @property
    def average_position(self) -> float:
        if not self.positions:
            return 0.0
        return sum(self.positions) / len(self.positions)


@dataclass(frozen=True)
class ScoredCompetitor:
    """A competitor entry as published in the report."""
    domain: str
    overlap_count: int
    overlap_percentage: int
    authority: int
    competitor_type: str
    shared_keywords: tuple[str, ...]
    strengths: tuple[str, ...]
    weaknesses: tuple[str, ...]
    aspirational_note: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "domain": self.domain,
            "overlapCount": self.overlap_count,
            "overlapPercentage": self.overlap_percentage,
            "authority": self.authority,
            "competitorType": self.competitor_type,
            "sharedKeywords": list(self.shared_keywords),
            "strengths": list(self.strengths),
            "weaknesses": list(self.weaknesses),
        }
        if self.aspirational_note is not None:
            data["aspirationalNote"] = self.aspirational_note
        return data


@dataclass(frozen=True)
class KeywordLookupResult:
    """Outcome of the SERP lookup for one selected keyword."""
    keyword: str
    volume: Optional[int | float]
    hits: tuple[SerpHit, ...] = ()
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class CompetitionAnalysisResult:
    """Response body of one competition analysis plus its HTTP status."""
    competitors: list[ScoredCompetitor]
    total_keywords_analyzed: int
    analysis_method: str
    credits_used: int = 0
    analysis: Optional[dict[str, Any]] = None
    keywords_selected: list[str] = field(default_factory=list)
    lookups: list[KeywordLookupResult] = field(default_factory=list)
    partial: bool = False
    error: Optional[str] = None
    status_code: int = 200

    @property
    def failed_keywords(self) -> list[str]:
        return [lookup.keyword for lookup in self.lookups if not lookup.ok]

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "competitors": [c.to_dict() for c in self.competitors],
            "totalKeywordsAnalyzed": self.total_keywords_analyzed,
            "analysisMethod": self.analysis_method,
            "creditsUsed": self.credits_used,
        }
        if self.error is not None:
            data["error"] = self.error
            return data
        data["analysis"] = self.analysis or {}
        data["keywordsSelected"] = list(self.keywords_selected)
        data["failedKeywords"] = self.failed_keywords
        data["partial"] = self.partial
        return data
