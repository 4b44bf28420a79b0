"""
Pipeline Results

Score, traffic, valuation and recommendation records plus the
WebsiteAnalysis aggregate that owns one of each. Derived values
(overall score, pageviews, base value, estimated value) are computed from
their inputs on construction and cannot be passed in.
"""

from dataclasses import InitVar, asdict, dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from .facts import (
    ContentFacts,
    DnsFacts,
    DomainFacts,
    MobileFacts,
    MonetizationFacts,
    RevenueEstimate,
    SecurityFacts,
    SeoFacts,
    SocialFacts,
    TechnicalFacts,
    TechnologyFacts,
)
from .signals import (
    BacklinkFacts,
    BrandMentions,
    CrawlabilityFacts,
    CruxFacts,
    IndexedPages,
    PerformanceFacts,
    RankingFacts,
    RdapFacts,
    SocialFollowers,
    SSLFacts,
    WaybackHistory,
)


# ============================================================================
# SCORES
# ============================================================================

CATEGORY_WEIGHTS: Dict[str, float] = {
    "domain": 0.15,
    "performance": 0.15,
    "technical": 0.10,
    "security": 0.10,
    "seo": 0.20,
    "content": 0.15,
    "social": 0.05,
    "monetization": 0.10,
}


def _bounded(value: float) -> int:
    return int(max(0, min(100, round(value))))


@dataclass(frozen=True)
class ScoreBreakdown:
    """
    Per-category scores (0-100).

    overall is the weighted blend of the eight clamped categories. weights
    defaults to CATEGORY_WEIGHTS; categories missing from it weigh nothing.
    """
    domain: int
    performance: int
    technical: int
    security: int
    seo: int
    content: int
    social: int
    monetization: int
    overall: int = field(init=False)
    weights: InitVar[Optional[Mapping[str, float]]] = None

    def __post_init__(self, weights: Optional[Mapping[str, float]]):
        weights = CATEGORY_WEIGHTS if weights is None else weights
        for name in CATEGORY_WEIGHTS:
            object.__setattr__(self, name, _bounded(getattr(self, name)))
        weighted = sum(
            getattr(self, name) * weights.get(name, 0.0) for name in CATEGORY_WEIGHTS
        )
        object.__setattr__(self, "overall", _bounded(weighted))


# ============================================================================
# TRAFFIC
# ============================================================================

class SignalImpact(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class TrafficTier(str, Enum):
    """Ordered visitor buckets, lowest first."""
    VERY_LOW = "very-low"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very-high"

    @property
    def rank(self) -> int:
        return list(TrafficTier).index(self)


@dataclass(frozen=True)
class TrafficSignal:
    """One auditable contribution to the traffic score."""
    signal: str
    impact: SignalImpact
    weight: float


PAGEVIEWS_PER_VISITOR = 2.5


@dataclass(frozen=True)
class TrafficEstimate:
    monthly_visitors: int
    tier: TrafficTier
    confidence: int
    signals: Tuple[TrafficSignal, ...] = ()
    bounce_rate: int = 55

    def __post_init__(self):
        object.__setattr__(self, "monthly_visitors", max(0, int(self.monthly_visitors)))
        object.__setattr__(self, "confidence", max(0, min(95, int(self.confidence))))
        object.__setattr__(self, "signals", tuple(self.signals))

    @property
    def estimated_pageviews(self) -> int:
        return round(self.monthly_visitors * PAGEVIEWS_PER_VISITOR)


# ============================================================================
# VALUATION
# ============================================================================

@dataclass(frozen=True)
class ValuationBreakdown:
    """Six non-negative dollar components of the valuation."""
    domain_value: float = 0.0
    traffic_value: float = 0.0
    content_value: float = 0.0
    technical_value: float = 0.0
    brand_value: float = 0.0
    revenue_multiple: float = 0.0

    def __post_init__(self):
        for name in (
            "domain_value",
            "traffic_value",
            "content_value",
            "technical_value",
            "brand_value",
            "revenue_multiple",
        ):
            object.__setattr__(self, name, max(0.0, float(getattr(self, name))))

    @property
    def base_value(self) -> float:
        return (
            self.domain_value
            + self.traffic_value
            + self.content_value
            + self.technical_value
            + self.brand_value
            + self.revenue_multiple
        )


@dataclass(frozen=True)
class ValueRange:
    min: int
    max: int


@dataclass(frozen=True)
class ValuationResult:
    """
    Valuation output.

    estimated_value is always round(breakdown.base_value * quality_multiplier).
    revenue is the monthly revenue band the valuation was built on; callers
    merge it into MonetizationFacts themselves.
    """
    breakdown: ValuationBreakdown
    quality_multiplier: float
    confidence: int
    value_range: ValueRange
    revenue: RevenueEstimate = field(default_factory=RevenueEstimate)
    estimated_value: int = field(init=False)

    def __post_init__(self):
        value = round(self.breakdown.base_value * self.quality_multiplier)
        object.__setattr__(self, "estimated_value", max(0, int(value)))


# ============================================================================
# RECOMMENDATIONS
# ============================================================================

class Impact(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def priority(self) -> int:
        return list(Impact).index(self)


class Effort(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True)
class Recommendation:
    category: str
    title: str
    description: str
    impact: Impact
    effort: Effort
    potential_value_increase: int = 0


# ============================================================================
# AGGREGATE
# ============================================================================

ANALYSIS_VERSION = "2.1.0"


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return value


@dataclass(frozen=True)
class WebsiteAnalysis:
    """Everything learned about one website in a single run. Read-only once built."""
    url: str
    domain: DomainFacts
    technical: TechnicalFacts
    seo: SeoFacts
    content: ContentFacts
    social: SocialFacts
    monetization: MonetizationFacts
    dns: DnsFacts
    security: SecurityFacts
    technology: TechnologyFacts
    mobile: MobileFacts
    scores: ScoreBreakdown
    traffic: TrafficEstimate
    valuation: ValuationResult
    recommendations: Tuple[Recommendation, ...]
    industry: str
    performance: Optional[PerformanceFacts] = None
    crawlability: CrawlabilityFacts = field(default_factory=CrawlabilityFacts)
    wayback: WaybackHistory = field(default_factory=WaybackHistory)
    ranking: RankingFacts = field(default_factory=RankingFacts)
    social_followers: SocialFollowers = field(default_factory=SocialFollowers)
    ssl: SSLFacts = field(default_factory=SSLFacts)
    rdap: RdapFacts = field(default_factory=RdapFacts)
    indexed_pages: IndexedPages = field(default_factory=IndexedPages)
    crux: CruxFacts = field(default_factory=CruxFacts)
    backlinks: BacklinkFacts = field(default_factory=BacklinkFacts)
    brand_mentions: BrandMentions = field(default_factory=BrandMentions)
    data_sources_used: Tuple[str, ...] = ()
    analyzed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    analysis_version: str = ANALYSIS_VERSION
    analysis_time_ms: int = 0

    @property
    def estimated_value(self) -> int:
        return self.valuation.estimated_value

    @property
    def value_range(self) -> ValueRange:
        return self.valuation.value_range

    @property
    def confidence_score(self) -> int:
        return self.valuation.confidence

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation, including derived values."""
        data = _jsonable(asdict(self))
        data["estimated_value"] = self.estimated_value
        data["value_range"] = _jsonable(asdict(self.value_range))
        data["confidence_score"] = self.confidence_score
        data["traffic"]["estimated_pageviews"] = self.traffic.estimated_pageviews
        data["domain"]["has_significant_history"] = self.domain.has_significant_history
        data["monetization"]["monetization_methods"] = list(self.monetization.monetization_methods)
        data["monetization"]["revenue_model"] = self.monetization.revenue_model.value
        data["technology"]["tech_stack_score"] = self.technology.tech_stack_score
        data["dns"]["infrastructure_score"] = self.dns.infrastructure_score
        data["mobile"]["is_mobile_friendly"] = self.mobile.is_mobile_friendly
        data["ranking"]["is_ranked"] = self.ranking.is_ranked
        data["ranking"]["traffic_tier"] = self.ranking.traffic_tier
        data["social_followers"]["total_followers"] = self.social_followers.total_followers
        data["brand_mentions"]["sentiment"] = self.brand_mentions.sentiment
        data["valuation"]["base_value"] = self.valuation.breakdown.base_value
        return data
