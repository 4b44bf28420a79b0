"""
Scoring Helper Functions and Constants

Clamping, grade ladders and tier lookups shared by the scoring, traffic
and valuation engines.
"""

from typing import Dict, Tuple

from ..models import CATEGORY_WEIGHTS, TrafficTier


# ============================================================================
# CLAMPING
# ============================================================================

def clamp_score(value: float, low: float = 0, high: float = 100) -> int:
    """
    Round and clamp a score into [low, high].

    Args:
        value: Raw accumulated score
        low: Lower bound (default 0)
        high: Upper bound (default 100)

    Returns:
        Integer score within bounds
    """
    return int(max(low, min(high, round(value))))


# ============================================================================
# GRADES
# ============================================================================

# Security and performance share one ladder
LETTER_GRADES: Tuple[Tuple[int, str], ...] = (
    (90, "A+"),
    (80, "A"),
    (65, "B"),
    (50, "C"),
    (35, "D"),
)

READABILITY_GRADES: Tuple[Tuple[int, str], ...] = (
    (90, "A"),
    (80, "B"),
    (70, "C"),
    (60, "D"),
)


def letter_grade(score: float) -> str:
    """Security/performance grade (A+ to F)."""
    for threshold, grade in LETTER_GRADES:
        if score >= threshold:
            return grade
    return "F"


def readability_grade(score: float) -> str:
    """Readability grade (A to F)."""
    for threshold, grade in READABILITY_GRADES:
        if score >= threshold:
            return grade
    return "F"


# ============================================================================
# TRAFFIC TIERS
# ============================================================================

TIER_THRESHOLDS: Tuple[Tuple[int, TrafficTier], ...] = (
    (10_000_000, TrafficTier.VERY_HIGH),
    (1_000_000, TrafficTier.VERY_HIGH),
    (100_000, TrafficTier.HIGH),
    (10_000, TrafficTier.MEDIUM),
    (1_000, TrafficTier.LOW),
)

BOUNCE_RATES: Dict[TrafficTier, int] = {
    TrafficTier.VERY_HIGH: 35,
    TrafficTier.HIGH: 45,
    TrafficTier.MEDIUM: 50,
    TrafficTier.LOW: 60,
    TrafficTier.VERY_LOW: 55,
}


def classify_traffic_tier(monthly_visitors: int) -> TrafficTier:
    """
    Map a monthly visitor count onto the tier ladder.

    Args:
        monthly_visitors: Estimated monthly visitors

    Returns:
        TrafficTier bucket
    """
    for threshold, tier in TIER_THRESHOLDS:
        if monthly_visitors >= threshold:
            return tier
    return TrafficTier.VERY_LOW


def get_bounce_rate(tier: TrafficTier) -> int:
    return BOUNCE_RATES.get(tier, 55)


__all__ = [
    "CATEGORY_WEIGHTS",
    "clamp_score",
    "letter_grade",
    "readability_grade",
    "classify_traffic_tier",
    "get_bounce_rate",
    "LETTER_GRADES",
    "READABILITY_GRADES",
    "TIER_THRESHOLDS",
    "BOUNCE_RATES",
]
