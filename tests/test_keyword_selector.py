"""Tests for keyword selection by search volume."""

from competitor_engine.models.competitor import KeywordQuery
from competitor_engine.modules.competitor_analysis.keyword_selector import select_keywords


class TestSelectKeywords:

    def test_top_ten_by_volume(self):
        keywords = [KeywordQuery(f"kw{i}", (i + 1) * 10) for i in range(15)]
        selected = select_keywords(keywords)
        assert len(selected) == 10
        assert [kw.volume for kw in selected] == [150, 140, 130, 120, 110, 100, 90, 80, 70, 60]

    def test_zero_and_missing_volume_dropped(self):
        keywords = [
            KeywordQuery("a", 0),
            KeywordQuery("b", None),
            KeywordQuery("c", -5),
            KeywordQuery("d", 20),
        ]
        assert [kw.keyword for kw in select_keywords(keywords)] == ["d"]

    def test_all_zero_volume_yields_empty(self):
        assert select_keywords([KeywordQuery("a", 0), KeywordQuery("b", 0)]) == []

    def test_ties_keep_caller_order(self):
        keywords = [
            KeywordQuery("first", 100),
            KeywordQuery("big", 500),
            KeywordQuery("second", 100),
            KeywordQuery("third", 100),
        ]
        selected = select_keywords(keywords)
        assert [kw.keyword for kw in selected] == ["big", "first", "second", "third"]

    def test_custom_limit(self):
        keywords = [KeywordQuery(f"kw{i}", 100 - i) for i in range(5)]
        assert len(select_keywords(keywords, limit=3)) == 3


class TestKeywordQueryFromDict:

    def test_volume_coerced_to_int(self):
        assert KeywordQuery.from_dict({"keyword": "seo", "volume": 12.0}) == KeywordQuery("seo", 12)

    def test_missing_volume(self):
        assert KeywordQuery.from_dict({"keyword": "seo"}).volume is None

    def test_fractional_volume_kept(self):
        assert KeywordQuery.from_dict({"keyword": "seo", "volume": 0.5}).volume == 0.5

    def test_non_finite_volume_dropped(self):
        assert KeywordQuery.from_dict({"keyword": "seo", "volume": float("nan")}).volume is None
        assert KeywordQuery.from_dict({"keyword": "seo", "volume": float("inf")}).volume is None
        assert KeywordQuery.from_dict({"keyword": "seo", "volume": 10 ** 400}).volume is None

    def test_non_numeric_volume(self):
        assert KeywordQuery.from_dict({"keyword": "seo", "volume": "lots"}).volume is None
        assert KeywordQuery.from_dict({"keyword": "seo", "volume": True}).volume is None

    def test_unusable_entries(self):
        assert KeywordQuery.from_dict("seo") is None
        assert KeywordQuery.from_dict({"volume": 10}) is None
        assert KeywordQuery.from_dict({"keyword": "  ", "volume": 10}) is None
