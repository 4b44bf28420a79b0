"""
External Signal Records

Fixed-shape results returned by the collector adapters. Each record has an
explicit "has data" sentinel (a flag, a nullable field, or the record itself
being None) so consumers never have to guess whether a lookup succeeded.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple


# ============================================================================
# PERFORMANCE
# ============================================================================

@dataclass(frozen=True)
class PerformanceFacts:
    """Lighthouse lab data from PageSpeed Insights. Timings are milliseconds."""
    performance_score: int
    accessibility_score: int
    seo_score: int
    best_practices_score: int
    first_contentful_paint: float = 0.0
    largest_contentful_paint: float = 0.0
    total_blocking_time: float = 0.0
    cumulative_layout_shift: float = 0.0
    speed_index: float = 0.0
    time_to_interactive: float = 0.0
    server_response_time: float = 0.0
    total_byte_weight: int = 0
    request_count: int = 0

    @property
    def is_accessible(self) -> bool:
        return self.accessibility_score > 80


@dataclass(frozen=True)
class CruxMetric:
    """75th percentile of one Core Web Vital from real Chrome users."""
    name: str
    percentile: Optional[float] = None
    category: Optional[str] = None


@dataclass(frozen=True)
class CruxFacts:
    """Chrome UX Report field data (mobile form factor)."""
    metrics: Tuple[CruxMetric, ...] = ()
    overall_category: Optional[str] = None
    form_factor: Optional[str] = None

    @property
    def has_data(self) -> bool:
        return len(self.metrics) > 0

    def metric(self, name: str) -> Optional[CruxMetric]:
        for metric in self.metrics:
            if metric.name == name:
                return metric
        return None


# ============================================================================
# HISTORY & REGISTRATION
# ============================================================================

@dataclass(frozen=True)
class WaybackHistory:
    """First archive snapshot and snapshot volume from the Wayback Machine."""
    first_snapshot: Optional[date] = None
    snapshot_count: int = 0
    age_years: float = 0.0

    @property
    def has_history(self) -> bool:
        return self.first_snapshot is not None


@dataclass(frozen=True)
class RdapFacts:
    """Registry data from RDAP. Ages and day counts are relative to the lookup date."""
    registrar: Optional[str] = None
    registration_date: Optional[date] = None
    expiration_date: Optional[date] = None
    last_changed: Optional[date] = None
    registrant_country: Optional[str] = None
    nameservers: Tuple[str, ...] = ()
    status: Tuple[str, ...] = ()
    verified_age_years: Optional[float] = None
    days_until_expiry: Optional[int] = None

    @property
    def has_data(self) -> bool:
        return self.registrar is not None or self.registration_date is not None

    @property
    def is_expiring_soon(self) -> bool:
        return self.days_until_expiry is not None and self.days_until_expiry < 90


# ============================================================================
# CRAWLABILITY & REACH
# ============================================================================

AI_CRAWLER_MARKERS = ("gptbot", "chatgpt", "anthropic", "claude")


@dataclass(frozen=True)
class CrawlabilityFacts:
    """robots.txt and sitemap findings."""
    has_robots_txt: bool = False
    allows_all_crawlers: bool = True
    blocks_ai_crawlers: bool = False
    has_sitemap: bool = False
    sitemap_urls: Tuple[str, ...] = ()
    estimated_page_count: int = 0


@dataclass(frozen=True)
class RankingFacts:
    """Tranco top-1M popularity rank. rank is None when the domain is unranked."""
    rank: Optional[int] = None

    @property
    def is_ranked(self) -> bool:
        return self.rank is not None and self.rank > 0

    @property
    def percentile(self) -> Optional[float]:
        if not self.is_ranked:
            return None
        return self.rank / 1_000_000 * 100

    @property
    def traffic_tier(self) -> str:
        if not self.is_ranked:
            return "unranked"
        if self.rank <= 100:
            return "top-100"
        if self.rank <= 1_000:
            return "top-1k"
        if self.rank <= 10_000:
            return "top-10k"
        if self.rank <= 100_000:
            return "top-100k"
        return "top-1m"


@dataclass(frozen=True)
class IndexedPages:
    """Search engine indexed page count. estimated_count is None when unknown."""
    estimated_count: Optional[int] = None
    confidence: str = "low"


@dataclass(frozen=True)
class BacklinkFacts:
    """Backlink volume estimated from CommonCrawl presence."""
    estimated_backlinks: int = 0
    unique_domains: int = 0

    @property
    def has_backlink_data(self) -> bool:
        return self.estimated_backlinks > 0


# ============================================================================
# SOCIAL REACH
# ============================================================================

@dataclass(frozen=True)
class SocialFollowers:
    """Scraped follower counts. A platform is None when it was not found or not readable."""
    twitter_handle: Optional[str] = None
    twitter: Optional[int] = None
    linkedin: Optional[int] = None
    facebook: Optional[int] = None

    @property
    def total_followers(self) -> int:
        return sum(count for count in (self.twitter, self.linkedin, self.facebook) if count)

    @property
    def platforms_with_data(self) -> int:
        return sum(1 for count in (self.twitter, self.linkedin, self.facebook) if count)


@dataclass(frozen=True)
class BrandMentions:
    """Community mentions on Reddit and Hacker News."""
    reddit_mentions: int = 0
    top_subreddits: Tuple[str, ...] = ()
    hn_mentions: int = 0
    hn_points: int = 0

    @property
    def total_mentions(self) -> int:
        return self.reddit_mentions + self.hn_mentions

    @property
    def has_brand_presence(self) -> bool:
        return self.total_mentions > 5

    @property
    def sentiment(self) -> str:
        if self.hn_points > 100:
            return "positive"
        if self.total_mentions > 0:
            return "neutral"
        return "unknown"


# ============================================================================
# TLS
# ============================================================================

@dataclass(frozen=True)
class SSLFacts:
    """SSL Labs assessment. analysis_complete is False until a READY report exists."""
    grade: Optional[str] = None
    has_warnings: bool = False
    protocol: Optional[str] = None
    key_strength: Optional[int] = None
    supports_hsts: bool = False
    cert_expires_in_days: Optional[int] = None
    vulnerabilities: Tuple[str, ...] = ()
    analysis_complete: bool = False
