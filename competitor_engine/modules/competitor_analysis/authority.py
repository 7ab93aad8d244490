"""Heuristic authority estimate and competitor classification."""

from typing import Sequence

from competitor_engine.models.competitor import ASPIRATIONAL, DIRECT
from competitor_engine.utils.helpers import round_half_up

BASE_AUTHORITY = 30
MIN_AUTHORITY = 15
MAX_AUTHORITY = 95
ASPIRATIONAL_THRESHOLD = 60
TOP_POSITION_BONUS = 5
MAX_SCORE_BONUS = 20


def estimate_authority(positions: Sequence[int], total_score: float) -> int:
    """Estimate a 15-95 authority score from observed SERP positions.

    Starts at 30, adds a band bonus for the average position (+40 at <= 3,
    +25 at <= 5, +10 at <= 10), +5 per top-3 position and up to +20 from the
    accumulated score, then rounds and clamps.
    """
    if not positions:
        raise ValueError("positions must not be empty")
    avg_position = sum(positions) / len(positions)
    top_positions = sum(1 for p in positions if p <= 3)

    authority = float(BASE_AUTHORITY)
    if avg_position <= 3:
        authority += 40
    elif avg_position <= 5:
        authority += 25
    elif avg_position <= 10:
        authority += 10

    authority += top_positions * TOP_POSITION_BONUS
    authority += min(MAX_SCORE_BONUS, total_score / 100)

    return min(MAX_AUTHORITY, max(MIN_AUTHORITY, round_half_up(authority)))


def classify_competitor(authority: int) -> str:
    """``aspirational`` above the threshold, otherwise ``direct``."""
    return ASPIRATIONAL if authority > ASPIRATIONAL_THRESHOLD else DIRECT
