"""SERP Competitor Engine -- organic-search competitor discovery from SERP overlap."""

__version__ = "1.0.0"
