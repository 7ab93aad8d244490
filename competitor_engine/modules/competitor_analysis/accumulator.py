"""Per-request accumulation of competitor evidence from SERP hits."""

import logging
from typing import Iterable, Iterator

from competitor_engine.models.competitor import CompetitorProfile, KeywordLookupResult
from competitor_engine.modules.competitor_analysis.domain_filter import (
    is_excluded,
    normalize_domain,
)

logger = logging.getLogger(__name__)

MAX_COMPETITIVE_POSITION = 10
DEFAULT_KEYWORD_VOLUME = 100


def hit_score(position: int, volume: int | float | None) -> float:
    """Weight of one hit: 10 points at #1 down to 1 at #10, scaled by volume/100."""
    return (11 - position) * (volume or DEFAULT_KEYWORD_VOLUME) / 100


class CompetitorAccumulator:
    """Insertion-ordered map of normalized domain -> CompetitorProfile.

    Iteration yields profiles in the order their domains were first seen.
    Not thread-safe; the analyzer feeds it from a single task.
    """

    def __init__(
        self,
        target_domain: str,
        extra_exclusions: Iterable[str] = (),
        max_position: int = MAX_COMPETITIVE_POSITION,
    ):
        self._target = normalize_domain(target_domain)
        self._extra = tuple(extra_exclusions)
        self._max_position = max_position
        self._profiles: dict[str, CompetitorProfile] = {}

    @property
    def target_domain(self) -> str:
        return self._target

    def add_lookup(self, lookup: KeywordLookupResult) -> int:
        """Fold one keyword's hits into the profiles; returns hits counted."""
        counted = 0
        for hit in lookup.hits:
            if hit.position > self._max_position:
                continue
            domain = normalize_domain(hit.domain)
            if is_excluded(domain, self._target, self._extra):
                continue
            profile = self._profiles.get(domain)
            if profile is None:
                profile = CompetitorProfile(domain=domain)
                self._profiles[domain] = profile
            profile.add_observation(
                lookup.keyword,
                hit.position,
                hit.title,
                hit_score(hit.position, lookup.volume),
            )
            counted += 1
            logger.debug("%s ranks #%d for %r", domain, hit.position, lookup.keyword)
        return counted

    def get(self, domain: str) -> CompetitorProfile | None:
        return self._profiles.get(normalize_domain(domain))

    def __iter__(self) -> Iterator[CompetitorProfile]:
        return iter(list(self._profiles.values()))

    def __len__(self) -> int:
        return len(self._profiles)

    def __contains__(self, domain: object) -> bool:
        return isinstance(domain, str) and normalize_domain(domain) in self._profiles
