"""
Category Facts

Immutable records extracted from the domain string and the page markup.
Every record is produced once per analysis and never mutated afterwards;
derived values are exposed as properties so they cannot drift from the
fields they are computed from.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Optional, Tuple


# ============================================================================
# DOMAIN
# ============================================================================

@dataclass(frozen=True)
class DomainFacts:
    """Shape and history of a registered domain."""
    domain: str
    tld: str
    tld_score: int
    length: int
    has_numbers: bool = False
    has_hyphens: bool = False
    keywords_found: Tuple[str, ...] = ()
    first_indexed: Optional[date] = None
    age_years: float = 0.0
    archive_snapshots: int = 0

    def __post_init__(self):
        if not self.tld.startswith("."):
            object.__setattr__(self, "tld", f".{self.tld}")
        object.__setattr__(self, "tld", self.tld.lower())
        object.__setattr__(self, "age_years", max(0.0, float(self.age_years)))
        object.__setattr__(self, "archive_snapshots", max(0, int(self.archive_snapshots)))
        object.__setattr__(self, "keywords_found", tuple(self.keywords_found))

    @property
    def is_keyword_rich(self) -> bool:
        return len(self.keywords_found) > 0

    @property
    def has_significant_history(self) -> bool:
        """Archived often enough, or old enough, to count as an established site."""
        return self.archive_snapshots > 50 or self.age_years > 5

    def with_history(
        self,
        first_indexed: Optional[date],
        age_years: float,
        archive_snapshots: int,
    ) -> "DomainFacts":
        """Return a copy carrying archive history gathered after extraction."""
        return replace(
            self,
            first_indexed=first_indexed,
            age_years=age_years,
            archive_snapshots=archive_snapshots,
        )


# ============================================================================
# PAGE MARKUP
# ============================================================================

@dataclass(frozen=True)
class TechnicalFacts:
    """Technical hygiene flags read from markup and the fetch itself."""
    has_https: bool = False
    load_time_ms: int = 0
    html_size: int = 0
    has_meta_description: bool = False
    has_meta_keywords: bool = False
    has_open_graph: bool = False
    has_twitter_card: bool = False
    has_favicon: bool = False
    has_canonical: bool = False
    has_viewport: bool = False
    has_charset: bool = False
    has_lang_attribute: bool = False


@dataclass(frozen=True)
class SeoFacts:
    """On-page SEO facts with per-element quality scores (0-100)."""
    title: str = ""
    title_length: int = 0
    title_score: int = 0
    meta_description: str = ""
    meta_description_length: int = 0
    meta_description_score: int = 0
    h1_count: int = 0
    h2_count: int = 0
    h3_count: int = 0
    heading_structure_score: int = 0
    image_count: int = 0
    images_with_alt: int = 0
    image_optimization_score: int = 100
    internal_links: int = 0
    external_links: int = 0
    structured_data_types: Tuple[str, ...] = ()
    has_canonical: bool = False
    has_sitemap: bool = False
    has_robots_txt: bool = False
    estimated_page_count: int = 0

    @property
    def has_structured_data(self) -> bool:
        return len(self.structured_data_types) > 0


@dataclass(frozen=True)
class ContentFacts:
    """Body text volume, readability and trust pages."""
    word_count: int = 0
    paragraph_count: int = 0
    avg_words_per_paragraph: int = 0
    readability_score: int = 0
    readability_grade: str = "F"
    has_contact_info: bool = False
    has_privacy_policy: bool = False
    has_terms_of_service: bool = False
    has_about_page: bool = False
    content_depth_score: int = 0
    unique_content_indicators: int = 0


@dataclass(frozen=True)
class SocialFacts:
    """Links to social platforms found on the page."""
    has_facebook: bool = False
    has_twitter: bool = False
    has_linkedin: bool = False
    has_instagram: bool = False
    has_youtube: bool = False
    has_tiktok: bool = False
    has_pinterest: bool = False
    social_proof_indicators: bool = False

    @property
    def platform_count(self) -> int:
        return sum([
            self.has_facebook,
            self.has_twitter,
            self.has_linkedin,
            self.has_instagram,
            self.has_youtube,
            self.has_tiktok,
            self.has_pinterest,
        ])


# ============================================================================
# MONETIZATION
# ============================================================================

class RevenueModel(str, Enum):
    """Dominant way a site makes money."""
    ADVERTISING = "advertising"
    ECOMMERCE = "ecommerce"
    SAAS = "saas"
    LEAD_GEN = "lead-gen"
    CONTENT = "content"
    MIXED = "mixed"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class RevenueEstimate:
    """Monthly revenue band in USD."""
    low: int = 0
    mid: int = 0
    high: int = 0


@dataclass(frozen=True)
class MonetizationFacts:
    """
    Monetization channels detected in markup.

    estimated_monthly_revenue stays at zero until the valuation has been
    computed; callers merge it with with_revenue().
    """
    has_ads: bool = False
    ad_networks: Tuple[str, ...] = ()
    has_affiliate_links: bool = False
    has_ecommerce: bool = False
    has_subscription: bool = False
    has_donations: bool = False
    has_lead_generation: bool = False
    estimated_monthly_revenue: RevenueEstimate = field(default_factory=RevenueEstimate)

    @property
    def monetization_methods(self) -> Tuple[str, ...]:
        methods = []
        if self.has_ads:
            methods.append("Advertising")
        if self.has_affiliate_links:
            methods.append("Affiliate Marketing")
        if self.has_ecommerce:
            methods.append("E-commerce")
        if self.has_subscription:
            methods.append("Subscription/SaaS")
        if self.has_donations:
            methods.append("Donations")
        if self.has_lead_generation:
            methods.append("Lead Generation")
        return tuple(methods)

    @property
    def revenue_model(self) -> RevenueModel:
        """Strongest channel wins; a lone affiliate or donation channel stays unknown."""
        if self.has_ecommerce:
            return RevenueModel.ECOMMERCE
        if self.has_subscription:
            return RevenueModel.SAAS
        if self.has_ads:
            return RevenueModel.ADVERTISING
        if self.has_lead_generation:
            return RevenueModel.LEAD_GEN
        methods = len(self.monetization_methods)
        if methods > 1:
            return RevenueModel.MIXED
        if methods == 0:
            return RevenueModel.CONTENT
        return RevenueModel.UNKNOWN

    def with_revenue(self, estimate: RevenueEstimate) -> "MonetizationFacts":
        return replace(self, estimated_monthly_revenue=estimate)


# ============================================================================
# INFRASTRUCTURE
# ============================================================================

MANAGED_DNS_MARKERS = ("cloudflare", "awsdns", "google")


@dataclass(frozen=True)
class DnsFacts:
    """Mail and nameserver configuration from DNS-over-HTTPS lookups."""
    has_mx_records: bool = False
    mx_count: int = 0
    has_spf: bool = False
    has_dmarc: bool = False
    nameservers: Tuple[str, ...] = ()

    @property
    def uses_managed_dns(self) -> bool:
        return any(
            marker in ns.lower()
            for ns in self.nameservers
            for marker in MANAGED_DNS_MARKERS
        )

    @property
    def has_proper_email_setup(self) -> bool:
        return self.has_mx_records and self.has_spf

    @property
    def infrastructure_score(self) -> int:
        """20 points for each of MX, SPF, DMARC, managed DNS and complete mail setup."""
        checks = [
            self.has_mx_records,
            self.has_spf,
            self.has_dmarc,
            self.uses_managed_dns,
            self.has_proper_email_setup,
        ]
        return 20 * sum(checks)


@dataclass(frozen=True)
class SecurityFacts:
    """Security posture inferred from markup, optionally enriched by SSL Labs."""
    has_https: bool = False
    has_hsts: bool = False
    has_csp: bool = False
    has_x_frame_options: bool = False
    has_secure_forms: bool = True
    no_mixed_content: bool = True
    security_score: int = 0
    security_grade: str = "F"


@dataclass(frozen=True)
class TechnologyFacts:
    """Detected CMS, framework, analytics and infrastructure vendors."""
    cms: Optional[str] = None
    framework: Optional[str] = None
    analytics: Tuple[str, ...] = ()
    cdns: Tuple[str, ...] = ()
    ecommerce: Optional[str] = None
    marketing: Tuple[str, ...] = ()
    is_modern_stack: bool = False

    @property
    def cdn(self) -> Optional[str]:
        return self.cdns[0] if self.cdns else None

    @property
    def has_google_analytics(self) -> bool:
        return "Google Analytics" in self.analytics

    @property
    def has_google_tag_manager(self) -> bool:
        return "Google Tag Manager" in self.analytics

    @property
    def tech_stack_score(self) -> int:
        score = 40
        if self.is_modern_stack:
            score += 20
        if self.analytics:
            score += 15
        if self.marketing:
            score += 10
        if self.cdns:
            score += 10
        if self.cms:
            score += 5
        return min(100, score)


@dataclass(frozen=True)
class MobileFacts:
    """Mobile-friendliness heuristics read from markup."""
    has_viewport: bool = False
    has_touch_icons: bool = False
    has_responsive_design: bool = False
    uses_flash: bool = False
    has_fixed_width: bool = False
    has_small_fonts: bool = False
    mobile_score: int = 50
    issues: Tuple[str, ...] = ()

    @property
    def is_mobile_friendly(self) -> bool:
        return self.mobile_score >= 70
