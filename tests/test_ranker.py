"""Tests for profile accumulation, scoring, and report ranking."""

import pytest

from competitor_engine.models.competitor import (
    CompetitorProfile,
    KeywordLookupResult,
    SerpHit,
)
from competitor_engine.modules.competitor_analysis.accumulator import (
    CompetitorAccumulator,
    hit_score,
)
from competitor_engine.modules.competitor_analysis.ranker import (
    OPPORTUNITIES,
    RECOMMENDATIONS,
    THREATS,
    build_market_summary,
    overlap_percentage,
    rank_competitors,
    score_competitor,
)


def _lookup(keyword, volume, *hits):
    return KeywordLookupResult(
        keyword=keyword,
        volume=volume,
        hits=tuple(SerpHit(domain=d, title=f"{d} title", position=p) for d, p in hits),
    )


def _profile(domain, keywords, positions, total_score=0.0):
    return CompetitorProfile(
        domain=domain,
        shared_keywords=list(keywords),
        positions=list(positions),
        titles=[f"{domain} title"] * len(keywords),
        total_score=total_score,
    )


# ===========================================================================
# 1. Accumulator
# ===========================================================================
class TestCompetitorAccumulator:

    def test_hit_score_weighting(self):
        assert hit_score(1, 100) == 10
        assert hit_score(10, 100) == 1
        assert hit_score(3, 200) == 16
        assert hit_score(1, None) == 10
        assert hit_score(1, 0.5) == pytest.approx(0.05)

    def test_positions_beyond_ten_ignored(self):
        acc = CompetitorAccumulator("example.com")
        counted = acc.add_lookup(_lookup("seo tools", 1000, ("deep.com", 11), ("deeper.com", 20)))
        assert counted == 0
        assert len(acc) == 0

    def test_target_and_skip_list_filtered(self):
        acc = CompetitorAccumulator("https://www.example.com")
        acc.add_lookup(_lookup(
            "seo tools", 1000,
            ("www.example.com", 1),
            ("en.wikipedia.org", 2),
            ("competitor-a.com", 3),
        ))
        assert [p.domain for p in acc] == ["competitor-a.com"]
        assert "example.com" not in acc

    def test_parallel_sequences_and_score(self):
        acc = CompetitorAccumulator("example.com")
        acc.add_lookup(_lookup("seo tools", 1000, ("www.Competitor-A.com", 2)))
        acc.add_lookup(_lookup("marketing agency", 500, ("competitor-a.com", 4)))
        profile = acc.get("competitor-a.com")
        assert profile.shared_keywords == ["seo tools", "marketing agency"]
        assert profile.positions == [2, 4]
        assert profile.titles == ["www.Competitor-A.com title", "competitor-a.com title"]
        assert profile.total_score == pytest.approx(9 * 10 + 7 * 5)

    def test_first_seen_order(self):
        acc = CompetitorAccumulator("example.com")
        acc.add_lookup(_lookup("a", 100, ("zeta.com", 1), ("alpha.com", 2)))
        acc.add_lookup(_lookup("b", 100, ("beta.com", 1), ("zeta.com", 2)))
        assert [p.domain for p in acc] == ["zeta.com", "alpha.com", "beta.com"]

    def test_failed_lookup_contributes_nothing(self):
        acc = CompetitorAccumulator("example.com")
        acc.add_lookup(KeywordLookupResult(keyword="a", volume=100, error="boom"))
        assert len(acc) == 0


# ===========================================================================
# 2. Scoring a single competitor
# ===========================================================================
class TestScoreCompetitor:

    def test_overlap_percentage_rounding(self):
        assert overlap_percentage(2, 3) == 67
        assert overlap_percentage(1, 8) == 13  # 12.5 rounds up
        assert overlap_percentage(2, 0) == 0

    def test_aspirational_competitor(self):
        scored = score_competitor(
            _profile("competitor-a.com", ["seo tools", "marketing agency"], [1, 1], 150.0), 2,
        )
        assert scored.overlap_count == 2
        assert scored.overlap_percentage == 100
        assert scored.authority == 82
        assert scored.competitor_type == "aspirational"
        assert scored.strengths == (
            "Ranks for 2 shared keywords",
            "Average position 1",
            "High domain authority",
        )
        assert scored.weaknesses == ("Strong competition level", "Established market presence")
        assert "82 DA" in scored.aspirational_note

    def test_direct_competitor(self):
        scored = score_competitor(_profile("rival.com", ["a", "b"], [6, 9]), 4)
        assert scored.authority == 40
        assert scored.competitor_type == "direct"
        assert scored.strengths[1] == "Average position 8"  # 7.5 rounds up
        assert scored.strengths[2] == "Similar market position"
        assert scored.weaknesses[0] == "Limited differentiation"
        assert scored.aspirational_note is None
        assert "aspirationalNote" not in scored.to_dict()

    def test_duplicate_keywords_deduplicated(self):
        scored = score_competitor(_profile("rival.com", ["a", "a", "b"], [6, 7, 8]), 4)
        assert scored.overlap_count == 2
        assert scored.shared_keywords == ("a", "b")


# ===========================================================================
# 3. Ranking
# ===========================================================================
class TestRankCompetitors:

    def test_single_shared_keyword_excluded(self):
        profiles = [_profile("one.com", ["a"], [1], 1000.0)]
        assert rank_competitors(profiles, selected_count=1) == []

    def test_repeated_single_keyword_excluded(self):
        profiles = [_profile("one.com", ["a", "a"], [1, 2], 1000.0)]
        assert rank_competitors(profiles, selected_count=2) == []

    def test_minimum_overlap(self):
        profiles = [_profile("rival.com", ["a", "b"], [6, 8])]
        assert len(rank_competitors(profiles, selected_count=10)) == 1  # exactly 20%
        assert rank_competitors(profiles, selected_count=11) == []      # 18%

    def test_sorted_by_overlap_times_authority_with_stable_ties(self):
        profiles = [
            _profile("direct-a.com", ["a", "b"], [6, 8]),
            _profile("leader.com", ["a", "b"], [1, 1], 150.0),
            _profile("direct-b.com", ["c", "d"], [6, 8]),
        ]
        ranked = rank_competitors(profiles, selected_count=4)
        assert [c.domain for c in ranked] == ["leader.com", "direct-a.com", "direct-b.com"]

    def test_truncated_to_twelve(self):
        profiles = [_profile(f"rival{i:02d}.com", ["a", "b"], [6, 8]) for i in range(15)]
        ranked = rank_competitors(profiles, selected_count=2)
        assert len(ranked) == 12
        assert [c.domain for c in ranked] == [f"rival{i:02d}.com" for i in range(12)]


class TestMarketSummary:

    def test_counts_and_static_text(self):
        ranked = rank_competitors(
            [
                _profile("leader.com", ["a", "b"], [1, 1], 150.0),
                _profile("rival.com", ["a", "b"], [6, 8]),
                _profile("other.com", ["a", "b"], [7, 9]),
            ],
            selected_count=2,
        )
        summary = build_market_summary(ranked)
        assert summary["competitionLevel"] == "2 direct competitors, 1 aspirational targets"
        assert summary["directCompetitors"] == 2
        assert summary["aspirationalCompetitors"] == 1
        assert summary["opportunities"] == list(OPPORTUNITIES)
        assert summary["threats"] == list(THREATS)
        assert summary["recommendations"] == list(RECOMMENDATIONS)

    def test_empty(self):
        summary = build_market_summary([])
        assert summary["competitionLevel"] == "0 direct competitors, 0 aspirational targets"
        assert summary["marketType"]
