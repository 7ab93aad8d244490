"""Turn accumulated profiles into the ranked, capped competitor report."""

import logging
from typing import Any, Iterable, Optional

from competitor_engine.models.competitor import (
    ASPIRATIONAL,
    DIRECT,
    CompetitorProfile,
    ScoredCompetitor,
)
from competitor_engine.modules.competitor_analysis.authority import (
    ASPIRATIONAL_THRESHOLD,
    classify_competitor,
    estimate_authority,
)
from competitor_engine.utils.helpers import round_half_up

logger = logging.getLogger(__name__)

MIN_SHARED_KEYWORDS = 2
MIN_OVERLAP_PERCENTAGE = 20
MAX_COMPETITORS = 12

MARKET_TYPE = "Dynamically identified market based on keyword rankings"

OPPORTUNITIES = (
    "Target keywords where competitors rank poorly",
    "Leverage unique business positioning",
    "Focus on local/niche keyword opportunities",
)

THREATS = (
    "Established competitor presence",
    "High competition for main keywords",
    "Aspirational competitors setting high standards",
)

RECOMMENDATIONS = (
    "Analyze competitor content strategies",
    "Target long-tail variations of shared keywords",
    "Build authority through consistent content creation",
)


def overlap_percentage(shared: int, selected: int) -> int:
    """Share of the analyzed keywords a domain ranks for, 0-100."""
    if selected <= 0:
        return 0
    return round_half_up(shared / selected * 100)


def score_competitor(profile: CompetitorProfile, selected_count: int) -> ScoredCompetitor:
    """Build the published record for one profile."""
    shared = profile.distinct_keywords
    overlap_count = len(shared)
    authority = estimate_authority(profile.positions, profile.total_score)
    competitor_type = classify_competitor(authority)
    high_authority = authority > ASPIRATIONAL_THRESHOLD

    strengths = (
        f"Ranks for {overlap_count} shared keywords",
        f"Average position {round_half_up(profile.average_position)}",
        "High domain authority" if high_authority else "Similar market position",
    )
    weaknesses = (
        "Strong competition level" if high_authority else "Limited differentiation",
        "Established market presence",
    )
    note: Optional[str] = None
    if high_authority:
        note = (
            f"Industry leader with {authority} DA. Study their keyword strategy "
            "and content approach for growth insights."
        )

    return ScoredCompetitor(
        domain=profile.domain,
        overlap_count=overlap_count,
        overlap_percentage=overlap_percentage(overlap_count, selected_count),
        authority=authority,
        competitor_type=competitor_type,
        shared_keywords=tuple(shared),
        strengths=strengths,
        weaknesses=weaknesses,
        aspirational_note=note,
    )


def rank_competitors(
    profiles: Iterable[CompetitorProfile],
    selected_count: int,
    min_shared_keywords: int = MIN_SHARED_KEYWORDS,
    min_overlap: int = MIN_OVERLAP_PERCENTAGE,
    max_competitors: int = MAX_COMPETITORS,
) -> list[ScoredCompetitor]:
    """Filter, score, sort and truncate competitor profiles.

    The sort key is ``overlap_percentage * authority`` (descending); ties
    keep the profiles' first-seen order.
    """
    competitors: list[ScoredCompetitor] = []
    for profile in profiles:
        if len(profile.distinct_keywords) < min_shared_keywords:
            continue
        scored = score_competitor(profile, selected_count)
        if scored.overlap_percentage < min_overlap:
            continue
        competitors.append(scored)

    competitors.sort(key=lambda c: c.overlap_percentage * c.authority, reverse=True)
    ranked = competitors[:max_competitors]

    for comp in ranked[:5]:
        logger.info(
            "%s: %d%% overlap (%d keywords), authority %d",
            comp.domain, comp.overlap_percentage, comp.overlap_count, comp.authority,
        )
    return ranked


def build_market_summary(competitors: list[ScoredCompetitor]) -> dict[str, Any]:
    """Counts by competitor type plus the fixed advisory text."""
    direct = sum(1 for c in competitors if c.competitor_type == DIRECT)
    aspirational = sum(1 for c in competitors if c.competitor_type == ASPIRATIONAL)
    return {
        "marketType": MARKET_TYPE,
        "competitionLevel": (
            f"{direct} direct competitors, {aspirational} aspirational targets"
        ),
        "directCompetitors": direct,
        "aspirationalCompetitors": aspirational,
        "opportunities": list(OPPORTUNITIES),
        "threats": list(THREATS),
        "recommendations": list(RECOMMENDATIONS),
    }
