"""
SiteWorth - Data Models

Immutable records shared by the extractors, collector adapters, scoring
engines and the orchestrator.
"""

from .facts import (
    ContentFacts,
    DnsFacts,
    DomainFacts,
    MobileFacts,
    MonetizationFacts,
    RevenueEstimate,
    RevenueModel,
    SecurityFacts,
    SeoFacts,
    SocialFacts,
    TechnicalFacts,
    TechnologyFacts,
)
from .signals import (
    AI_CRAWLER_MARKERS,
    BacklinkFacts,
    BrandMentions,
    CrawlabilityFacts,
    CruxFacts,
    CruxMetric,
    IndexedPages,
    PerformanceFacts,
    RankingFacts,
    RdapFacts,
    SocialFollowers,
    SSLFacts,
    WaybackHistory,
)
from .results import (
    ANALYSIS_VERSION,
    CATEGORY_WEIGHTS,
    Effort,
    Impact,
    Recommendation,
    ScoreBreakdown,
    SignalImpact,
    TrafficEstimate,
    TrafficSignal,
    TrafficTier,
    ValuationBreakdown,
    ValuationResult,
    ValueRange,
    WebsiteAnalysis,
)

__all__ = [
    # Facts
    "ContentFacts",
    "DnsFacts",
    "DomainFacts",
    "MobileFacts",
    "MonetizationFacts",
    "RevenueEstimate",
    "RevenueModel",
    "SecurityFacts",
    "SeoFacts",
    "SocialFacts",
    "TechnicalFacts",
    "TechnologyFacts",
    # External signals
    "AI_CRAWLER_MARKERS",
    "BacklinkFacts",
    "BrandMentions",
    "CrawlabilityFacts",
    "CruxFacts",
    "CruxMetric",
    "IndexedPages",
    "PerformanceFacts",
    "RankingFacts",
    "RdapFacts",
    "SocialFollowers",
    "SSLFacts",
    "WaybackHistory",
    # Results
    "ANALYSIS_VERSION",
    "CATEGORY_WEIGHTS",
    "Effort",
    "Impact",
    "Recommendation",
    "ScoreBreakdown",
    "SignalImpact",
    "TrafficEstimate",
    "TrafficSignal",
    "TrafficTier",
    "ValuationBreakdown",
    "ValuationResult",
    "ValueRange",
    "WebsiteAnalysis",
]
