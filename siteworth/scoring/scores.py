"""
Category Score Calculator

Turns each category's facts into a 0-100 score and blends them into an
overall score.

Every category is an additive checklist of independent indicators. The
sum is clamped once, after accumulation, so individual weights can be
tuned without one indicator pushing the category out of range.

Overall (default weights, overridable through ValuationTables):
    domain .15 + performance .15 + technical .10 + security .10
    + seo .20 + content .15 + social .05 + monetization .10
"""

import logging
from typing import Optional

from ..models import (
    ContentFacts,
    DnsFacts,
    DomainFacts,
    MonetizationFacts,
    PerformanceFacts,
    ScoreBreakdown,
    SecurityFacts,
    SeoFacts,
    SocialFacts,
    TechnicalFacts,
)
from .helpers import clamp_score
from .tables import DEFAULT_TABLES, ValuationTables

logger = logging.getLogger(__name__)

NEUTRAL_PERFORMANCE_SCORE = 50


def compute_scores(
    domain: DomainFacts,
    performance: Optional[PerformanceFacts],
    technical: TechnicalFacts,
    dns: DnsFacts,
    security: SecurityFacts,
    seo: SeoFacts,
    content: ContentFacts,
    social: SocialFacts,
    monetization: MonetizationFacts,
    tables: ValuationTables = DEFAULT_TABLES,
) -> ScoreBreakdown:
    """
    Score every category and derive the overall score.

    Args:
        domain: Domain shape and history
        performance: PageSpeed lab data, or None when unavailable
        technical: Technical hygiene flags
        dns: DNS facts (reported alongside, not weighted)
        security: Security facts; the score is passed through
        seo: On-page SEO facts
        content: Body content facts
        social: Social platform presence
        monetization: Detected monetization channels
        tables: Valuation tables (overall score weights)

    Returns:
        ScoreBreakdown with every field in [0, 100]
    """
    breakdown = ScoreBreakdown(
        domain=score_domain(domain),
        performance=score_performance(performance),
        technical=score_technical(technical),
        security=clamp_score(security.security_score),
        seo=score_seo(seo),
        content=score_content(content),
        social=score_social(social),
        monetization=score_monetization(monetization),
        weights=tables.category_weights,
    )
    logger.debug(
        f"Scores for {domain.domain}: overall={breakdown.overall} "
        f"(dns infrastructure {dns.infrastructure_score})"
    )
    return breakdown


# ============================================================================
# CATEGORY SCORES
# ============================================================================

def score_domain(domain: DomainFacts) -> int:
    """TLD quality, name length, clean characters, keywords and age."""
    score = domain.tld_score * 0.3

    if domain.length <= 6:
        score += 25
    elif domain.length <= 10:
        score += 20
    elif domain.length <= 15:
        score += 10

    if not domain.has_numbers:
        score += 10
    if not domain.has_hyphens:
        score += 10
    if domain.is_keyword_rich:
        score += 15

    if domain.age_years >= 5:
        score += 10
    elif domain.age_years >= 2:
        score += 5

    return clamp_score(score)


def score_performance(performance: Optional[PerformanceFacts]) -> int:
    """Lighthouse blend, or a neutral midpoint when no lab data exists."""
    if performance is None:
        return NEUTRAL_PERFORMANCE_SCORE

    return clamp_score(
        performance.performance_score * 0.4
        + performance.accessibility_score * 0.2
        + performance.seo_score * 0.25
        + performance.best_practices_score * 0.15
    )


def score_technical(technical: TechnicalFacts) -> int:
    score = 0
    if technical.has_https:
        score += 20
    if technical.has_meta_description:
        score += 10
    if technical.has_open_graph:
        score += 10
    if technical.has_twitter_card:
        score += 5
    if technical.has_favicon:
        score += 5
    if technical.has_canonical:
        score += 10
    if technical.has_viewport:
        score += 10
    if technical.has_charset:
        score += 5
    if technical.has_lang_attribute:
        score += 5

    # Unmeasured load time (0) earns nothing
    if 0 < technical.load_time_ms < 2000:
        score += 20
    elif 0 < technical.load_time_ms < 4000:
        score += 10

    return clamp_score(score)


def score_seo(seo: SeoFacts) -> int:
    score = (
        seo.title_score * 0.2
        + seo.meta_description_score * 0.15
        + seo.heading_structure_score * 0.15
        + seo.image_optimization_score * 0.1
    )
    if seo.has_structured_data:
        score += 15
    if seo.has_sitemap:
        score += 10
    if seo.has_robots_txt:
        score += 5
    if seo.has_canonical:
        score += 10

    return clamp_score(score)


def score_content(content: ContentFacts) -> int:
    score = content.content_depth_score * 0.4 + content.readability_score * 0.2

    if content.has_contact_info:
        score += 10
    if content.has_privacy_policy:
        score += 10
    if content.has_terms_of_service:
        score += 5
    if content.has_about_page:
        score += 5
    score += content.unique_content_indicators * 5

    return clamp_score(score)


def score_social(social: SocialFacts) -> int:
    # Seven platforms top out at 98 before the social proof bonus
    score = social.platform_count * 14
    if social.social_proof_indicators:
        score += 20
    return clamp_score(score)


def score_monetization(monetization: MonetizationFacts) -> int:
    score = len(monetization.monetization_methods) * 15
    if monetization.has_ecommerce:
        score += 20
    if monetization.has_subscription:
        score += 15
    return clamp_score(score)
