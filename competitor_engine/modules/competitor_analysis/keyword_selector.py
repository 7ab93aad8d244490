"""Pick which keywords are worth spending SERP lookups on."""

import logging
from typing import Iterable

from competitor_engine.models.competitor import KeywordQuery

logger = logging.getLogger(__name__)

MAX_KEYWORDS = 10


def select_keywords(
    keywords: Iterable[KeywordQuery],
    limit: int = MAX_KEYWORDS,
) -> list[KeywordQuery]:
    """Top ``limit`` keywords by search volume.

    Entries with no volume or a volume <= 0 are dropped. The sort is stable,
    so equal volumes keep the caller's order.
    """
    eligible = [kw for kw in keywords if kw.volume is not None and kw.volume > 0]
    eligible.sort(key=lambda kw: kw.volume, reverse=True)
    selected = eligible[:limit]
    logger.debug(
        "Selected %d of %d eligible keywords: %s",
        len(selected), len(eligible), [kw.keyword for kw in selected],
    )
    return selected
