"""
Scoring Module for SiteWorth

Pure, synchronous engines that turn extracted facts into numbers:

1. **Category Scores** (0-100 each, plus weighted overall)
   Domain, performance, technical, security, SEO, content, social,
   monetization.

2. **Traffic Estimate**
   Monthly visitors, tier and confidence with an auditable signal list.
   A known popularity rank dominates the estimate.

3. **Valuation**
   Six dollar components scaled by a quality multiplier, with a range
   that narrows as confidence grows.

4. **Recommendations**
   Rule table of improvement suggestions, top 10 by impact then value.

Example Usage:
    from siteworth.scoring import compute_scores, estimate_traffic, calculate_valuation

    scores = compute_scores(domain, None, technical, dns, security, seo,
                            content, social, monetization)
    traffic = estimate_traffic(domain, None, seo, content, social, technology)
    valuation = calculate_valuation(domain, traffic, monetization, scores, "general")
    print(f"Estimated value: ${valuation.estimated_value:,}")
"""

from .helpers import (
    CATEGORY_WEIGHTS,
    classify_traffic_tier,
    clamp_score,
    get_bounce_rate,
    letter_grade,
    readability_grade,
)
from .tables import (
    DEFAULT_TABLES,
    INDUSTRY_CPMS,
    KEYWORD_CATEGORIES,
    TLD_VALUES,
    ValuationTables,
)
from .scores import (
    compute_scores,
    score_content,
    score_domain,
    score_monetization,
    score_performance,
    score_seo,
    score_social,
    score_technical,
)
from .traffic import estimate_traffic
from .valuation import (
    calculate_domain_value,
    calculate_traffic_value,
    calculate_valuation,
    estimate_monthly_revenue,
    revenue_band,
)
from .recommendations import (
    DEFAULT_RECOMMENDATION_LIMIT,
    RECOMMENDATION_RULES,
    RecommendationRule,
    generate_recommendations,
)
from .registration import (
    DomainSuggestion,
    DomainSuggestions,
    UnregisteredDomainValue,
    estimate_unregistered_domain_value,
    generate_domain_suggestions,
)

__all__ = [
    # Helpers
    "CATEGORY_WEIGHTS",
    "classify_traffic_tier",
    "clamp_score",
    "get_bounce_rate",
    "letter_grade",
    "readability_grade",
    # Tables
    "DEFAULT_TABLES",
    "INDUSTRY_CPMS",
    "KEYWORD_CATEGORIES",
    "TLD_VALUES",
    "ValuationTables",
    # Scores
    "compute_scores",
    "score_content",
    "score_domain",
    "score_monetization",
    "score_performance",
    "score_seo",
    "score_social",
    "score_technical",
    # Traffic
    "estimate_traffic",
    # Valuation
    "calculate_domain_value",
    "calculate_traffic_value",
    "calculate_valuation",
    "estimate_monthly_revenue",
    "revenue_band",
    # Recommendations
    "DEFAULT_RECOMMENDATION_LIMIT",
    "RECOMMENDATION_RULES",
    "RecommendationRule",
    "generate_recommendations",
    # Registration
    "DomainSuggestion",
    "DomainSuggestions",
    "UnregisteredDomainValue",
    "estimate_unregistered_domain_value",
    "generate_domain_suggestions",
]
