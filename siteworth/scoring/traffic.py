"""
Traffic Estimator

Estimates monthly visitors from indirect signals.

Each signal adds to a dimensionless traffic score and may scale a
multiplicative "mega-site" factor. Every contribution is recorded as a
TrafficSignal so the estimate can be explained line by line.

Visitor derivation branches on data availability:
    Ranked:   10^(8.5 - log10(rank) * 0.9) * min(2, 1 + (multiplier - 1) * 0.1)
    Unranked: 100 * 10^((clamp(score, 0, 150) / 100) * 3.7) * min(10, multiplier)

A known popularity rank dominates; unranked sites get a bounded
multiplier so heuristics alone cannot blow the estimate up.
"""

import logging
import math
from typing import List, Optional, Tuple

from ..models import (
    ContentFacts,
    DomainFacts,
    PerformanceFacts,
    RankingFacts,
    SeoFacts,
    SignalImpact,
    SocialFacts,
    SocialFollowers,
    TechnologyFacts,
    TrafficEstimate,
    TrafficSignal,
)
from .helpers import classify_traffic_tier, get_bounce_rate

logger = logging.getLogger(__name__)


# ============================================================================
# SIGNAL TIERS
# ============================================================================

# (max rank, score, multiplier, label prefix)
RANK_TIERS: Tuple[Tuple[int, int, float, str], ...] = (
    (100, 150, 100, "Tranco Top 100"),
    (1_000, 120, 50, "Tranco Top 1K"),
    (10_000, 100, 20, "Tranco Top 10K"),
    (100_000, 80, 8, "Tranco Top 100K"),
)
UNLISTED_RANK_TIER: Tuple[int, float, str] = (50, 3, "Tranco Top 1M")

# (min followers, score, multiplier)
FOLLOWER_TIERS: Tuple[Tuple[int, int, float], ...] = (
    (10_000_000, 60, 5),
    (1_000_000, 45, 3),
    (100_000, 30, 2),
    (10_000, 20, 1.5),
    (1_000, 10, 1),
)

# (min age in years, score, multiplier, label)
AGE_TIERS: Tuple[Tuple[float, int, float, str], ...] = (
    (15, 40, 2.5, "Legendary domain (15+ years)"),
    (10, 30, 1.5, "Established domain (10+ years)"),
    (5, 18, 1, "Mature domain (5-10 years)"),
    (2, 10, 1, "Growing domain (2-5 years)"),
)

# (snapshots strictly above, score, multiplier, label)
SNAPSHOT_TIERS: Tuple[Tuple[int, int, float, str], ...] = (
    (800, 35, 3, "Massive archive history (800+ snapshots)"),
    (500, 25, 2, "Heavy archive history (500+ snapshots)"),
    (200, 18, 1.3, "Strong archive history (200+ snapshots)"),
    (100, 12, 1, "Good archive history (100+ snapshots)"),
    (50, 8, 1, "Moderate archive history (50+ snapshots)"),
)

# (pages strictly above, score, multiplier, label)
PAGE_COUNT_TIERS: Tuple[Tuple[int, int, float, str], ...] = (
    (1000, 25, 1.5, "Massive site (1000+ indexed pages)"),
    (100, 18, 1, "Large site (100+ indexed pages)"),
    (20, 10, 1, "Medium site (20+ pages)"),
)

# (min words, score, impact, label)
WORD_COUNT_TIERS: Tuple[Tuple[int, int, SignalImpact, str], ...] = (
    (5000, 15, SignalImpact.POSITIVE, "Very rich content (5000+ words)"),
    (2000, 10, SignalImpact.POSITIVE, "Rich content (2000+ words)"),
    (500, 5, SignalImpact.NEUTRAL, "Moderate content"),
)

# (min platforms, score, impact, label)
PLATFORM_TIERS: Tuple[Tuple[int, int, SignalImpact, str], ...] = (
    (5, 12, SignalImpact.POSITIVE, "Strong social presence (5+ platforms)"),
    (3, 6, SignalImpact.NEUTRAL, "Moderate social presence"),
)

MAX_TRAFFIC_SCORE = 150
MAX_UNRANKED_MULTIPLIER = 10
MAX_RANKED_QUALITY_BOOST = 2
MAX_CONFIDENCE = 95


class _SignalLedger:
    """Running traffic score, multiplier and the ordered signal list."""

    def __init__(self):
        self.score = 0.0
        self.multiplier = 1.0
        self.signals: List[TrafficSignal] = []

    def add(
        self,
        label: str,
        weight: float,
        multiplier: float = 1,
        impact: Optional[SignalImpact] = None,
    ):
        if impact is None:
            impact = SignalImpact.NEGATIVE if weight < 0 else SignalImpact.POSITIVE
        self.score += weight
        self.multiplier *= multiplier
        self.signals.append(TrafficSignal(signal=label, impact=impact, weight=weight))


def _format_followers(followers: int) -> str:
    if followers >= 1_000_000:
        return f"{followers / 1_000_000:.1f}M social followers"
    return f"{round(followers / 1000)}K social followers"


# ============================================================================
# ESTIMATOR
# ============================================================================

def estimate_traffic(
    domain: DomainFacts,
    performance: Optional[PerformanceFacts],
    seo: SeoFacts,
    content: ContentFacts,
    social: SocialFacts,
    technology: TechnologyFacts,
    ranking: Optional[RankingFacts] = None,
    social_followers: Optional[SocialFollowers] = None,
) -> TrafficEstimate:
    """
    Estimate monthly visitors, tier and confidence.

    Args:
        domain: Domain age and archive history
        performance: PageSpeed lab data, or None
        seo: SEO facts (page count, structured data)
        content: Content facts (word count)
        social: Social platform presence
        technology: Detected analytics, CDN and e-commerce
        ranking: Popularity rank, or None/unranked
        social_followers: Scraped follower counts, or None

    Returns:
        TrafficEstimate with its ordered signal audit trail
    """
    ledger = _SignalLedger()
    is_ranked = ranking is not None and ranking.is_ranked
    followers = social_followers.total_followers if social_followers else 0

    # Popularity rank
    if is_ranked:
        rank = ranking.rank
        for max_rank, weight, multiplier, label in RANK_TIERS:
            if rank <= max_rank:
                rank_label = f"#{rank}" if max_rank <= 10_000 else f"#{rank:,}"
                ledger.add(f"{label} ({rank_label})", weight, multiplier)
                break
        else:
            weight, multiplier, label = UNLISTED_RANK_TIER
            ledger.add(f"{label} (#{rank:,})", weight, multiplier)

    # Audience size
    if followers > 0:
        for min_followers, weight, multiplier in FOLLOWER_TIERS:
            if followers >= min_followers:
                ledger.add(_format_followers(followers), weight, multiplier)
                break

    for min_age, weight, multiplier, label in AGE_TIERS:
        if domain.age_years >= min_age:
            ledger.add(label, weight, multiplier)
            break

    for min_snapshots, weight, multiplier, label in SNAPSHOT_TIERS:
        if domain.archive_snapshots > min_snapshots:
            ledger.add(label, weight, multiplier)
            break

    for min_pages, weight, multiplier, label in PAGE_COUNT_TIERS:
        if seo.estimated_page_count > min_pages:
            ledger.add(label, weight, multiplier)
            break

    if performance is not None:
        if performance.seo_score >= 90:
            ledger.add("Excellent SEO score (90+)", 18)
        elif performance.seo_score >= 70:
            ledger.add("Good SEO score (70+)", 10)
        if performance.performance_score >= 80:
            ledger.add("Excellent performance (80+)", 12)

    for min_words, weight, impact, label in WORD_COUNT_TIERS:
        if content.word_count >= min_words:
            ledger.add(label, weight, impact=impact)
            break

    for min_platforms, weight, impact, label in PLATFORM_TIERS:
        if social.platform_count >= min_platforms:
            ledger.add(label, weight, impact=impact)
            break

    if technology.has_google_analytics or technology.has_google_tag_manager:
        ledger.add("Uses analytics tracking", 10)
    if technology.ecommerce:
        ledger.add("E-commerce enabled", 12)
    if technology.cdn:
        ledger.add("Uses CDN infrastructure", 15, 1.2)

    # Negative signals
    if domain.age_years < 1:
        ledger.add("New domain (< 1 year)", -15)
    if not seo.has_structured_data:
        ledger.add("No structured data", -5)

    if is_ranked:
        base_traffic = 10 ** (8.5 - math.log10(ranking.rank) * 0.9)
        quality_boost = min(MAX_RANKED_QUALITY_BOOST, 1 + (ledger.multiplier - 1) * 0.1)
        visitors = round(base_traffic * quality_boost)
    else:
        normalized = max(0.0, min(MAX_TRAFFIC_SCORE, ledger.score))
        base_visitors = 100 * 10 ** ((normalized / 100) * 3.7)
        visitors = round(base_visitors * min(MAX_UNRANKED_MULTIPLIER, ledger.multiplier))

    tier = classify_traffic_tier(visitors)

    confidence = 35
    if is_ranked:
        confidence += 30
    if domain.has_significant_history:
        confidence += 15
    if domain.archive_snapshots > 100:
        confidence += 5
    if performance is not None:
        confidence += 10
    if seo.estimated_page_count > 0:
        confidence += 5
    if followers > 1000:
        confidence += 5
    confidence = min(MAX_CONFIDENCE, confidence)

    logger.debug(
        f"Traffic for {domain.domain}: score={ledger.score:.0f} "
        f"multiplier={ledger.multiplier:.2f} visitors={visitors} tier={tier.value}"
    )

    return TrafficEstimate(
        monthly_visitors=visitors,
        tier=tier,
        confidence=confidence,
        signals=tuple(ledger.signals),
        bounce_rate=get_bounce_rate(tier),
    )
