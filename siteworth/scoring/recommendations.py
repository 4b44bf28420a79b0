"""
Recommendation Engine

Independent rules over the analysis facts. Each rule that fires yields one
Recommendation; the list is ordered by impact (critical first) and then by
potential value increase, and truncated to the top N.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple, Union

from ..models import (
    ContentFacts,
    DomainFacts,
    Effort,
    Impact,
    MonetizationFacts,
    PerformanceFacts,
    Recommendation,
    SecurityFacts,
    SeoFacts,
    SocialFacts,
    TechnicalFacts,
)

logger = logging.getLogger(__name__)

DEFAULT_RECOMMENDATION_LIMIT = 10


@dataclass(frozen=True)
class RecommendationInputs:
    """Facts every rule can look at."""
    domain: DomainFacts
    performance: Optional[PerformanceFacts]
    technical: TechnicalFacts
    security: SecurityFacts
    seo: SeoFacts
    content: ContentFacts
    social: SocialFacts
    monetization: MonetizationFacts


@dataclass(frozen=True)
class RecommendationRule:
    """
    One improvement suggestion and the condition that triggers it.

    description may be a callable when the text depends on the facts.
    """
    category: str
    title: str
    description: Union[str, Callable[[RecommendationInputs], str]]
    impact: Impact
    effort: Effort
    potential_value_increase: int
    applies: Callable[[RecommendationInputs], bool]

    def build(self, facts: RecommendationInputs) -> Recommendation:
        description = self.description
        if callable(description):
            description = description(facts)
        return Recommendation(
            category=self.category,
            title=self.title,
            description=description,
            impact=self.impact,
            effort=self.effort,
            potential_value_increase=self.potential_value_increase,
        )


def _slow_page(facts: RecommendationInputs) -> bool:
    return facts.performance is not None and facts.performance.performance_score < 50


def _page_speed_description(facts: RecommendationInputs) -> str:
    return (
        f"Your performance score is {facts.performance.performance_score}. Aim for 80+. "
        "Optimize images, enable caching, minimize JavaScript."
    )


RECOMMENDATION_RULES: Tuple[RecommendationRule, ...] = (
    RecommendationRule(
        category="Security",
        title="Enable HTTPS",
        description="HTTPS is essential for security, SEO rankings, and user trust. This is critical.",
        impact=Impact.CRITICAL,
        effort=Effort.EASY,
        potential_value_increase=2000,
        applies=lambda f: not f.technical.has_https,
    ),
    RecommendationRule(
        category="Performance",
        title="Improve page speed",
        description=_page_speed_description,
        impact=Impact.HIGH,
        effort=Effort.MEDIUM,
        potential_value_increase=3000,
        applies=_slow_page,
    ),
    RecommendationRule(
        category="SEO",
        title="Add structured data",
        description=(
            "Schema.org markup helps search engines understand your content "
            "and can enable rich snippets."
        ),
        impact=Impact.HIGH,
        effort=Effort.MEDIUM,
        potential_value_increase=1500,
        applies=lambda f: not f.seo.has_structured_data,
    ),
    RecommendationRule(
        category="SEO",
        title="Optimize page title",
        description="Your title should be 30-60 characters and include your primary keyword.",
        impact=Impact.HIGH,
        effort=Effort.EASY,
        potential_value_increase=1000,
        applies=lambda f: f.seo.title_score < 75,
    ),
    RecommendationRule(
        category="SEO",
        title="Optimize meta description",
        description="Write a compelling 120-160 character description to improve click-through rates.",
        impact=Impact.HIGH,
        effort=Effort.EASY,
        potential_value_increase=800,
        applies=lambda f: f.seo.meta_description_score < 75,
    ),
    RecommendationRule(
        category="SEO",
        title="Create XML sitemap",
        description="A sitemap helps search engines discover and index all your pages.",
        impact=Impact.MEDIUM,
        effort=Effort.EASY,
        potential_value_increase=500,
        applies=lambda f: not f.seo.has_sitemap,
    ),
    RecommendationRule(
        category="Content",
        title="Add more content",
        description="Pages with more substantial content (1000+ words) tend to rank better.",
        impact=Impact.MEDIUM,
        effort=Effort.HARD,
        potential_value_increase=1500,
        applies=lambda f: f.content.word_count < 500,
    ),
    RecommendationRule(
        category="Trust",
        title="Add privacy policy",
        description="A privacy policy is legally required in many jurisdictions and builds trust.",
        impact=Impact.MEDIUM,
        effort=Effort.EASY,
        potential_value_increase=300,
        applies=lambda f: not f.content.has_privacy_policy,
    ),
    RecommendationRule(
        category="Social",
        title="Expand social presence",
        description="Active social media profiles increase brand visibility and trust signals.",
        impact=Impact.MEDIUM,
        effort=Effort.MEDIUM,
        potential_value_increase=500,
        applies=lambda f: f.social.platform_count < 3,
    ),
    RecommendationRule(
        category="Monetization",
        title="Add monetization",
        description="Consider ads, affiliate links, or e-commerce to generate revenue.",
        impact=Impact.MEDIUM,
        effort=Effort.MEDIUM,
        potential_value_increase=2000,
        applies=lambda f: len(f.monetization.monetization_methods) == 0,
    ),
    RecommendationRule(
        category="Social",
        title="Add Open Graph tags",
        description="OG tags improve how your site appears when shared on social media.",
        impact=Impact.LOW,
        effort=Effort.EASY,
        potential_value_increase=200,
        applies=lambda f: not f.technical.has_open_graph,
    ),
    RecommendationRule(
        category="Branding",
        title="Add favicon",
        description="A favicon makes your site look more professional in browser tabs.",
        impact=Impact.LOW,
        effort=Effort.EASY,
        potential_value_increase=100,
        applies=lambda f: not f.technical.has_favicon,
    ),
)


def generate_recommendations(
    domain: DomainFacts,
    performance: Optional[PerformanceFacts],
    technical: TechnicalFacts,
    security: SecurityFacts,
    seo: SeoFacts,
    content: ContentFacts,
    social: SocialFacts,
    monetization: MonetizationFacts,
    limit: int = DEFAULT_RECOMMENDATION_LIMIT,
    rules: Tuple[RecommendationRule, ...] = RECOMMENDATION_RULES,
) -> List[Recommendation]:
    """
    Evaluate every rule and return the most valuable suggestions.

    Args:
        domain: Domain facts
        performance: PageSpeed lab data, or None
        technical: Technical facts
        security: Security facts
        seo: SEO facts
        content: Content facts
        social: Social facts
        monetization: Monetization facts
        limit: Maximum number of recommendations (default 10)
        rules: Rule table to evaluate

    Returns:
        Recommendations sorted by impact, then value increase (descending)
    """
    facts = RecommendationInputs(
        domain=domain,
        performance=performance,
        technical=technical,
        security=security,
        seo=seo,
        content=content,
        social=social,
        monetization=monetization,
    )

    fired = [rule.build(facts) for rule in rules if rule.applies(facts)]
    fired.sort(key=lambda rec: (rec.impact.priority, -rec.potential_value_increase))

    logger.debug(f"{len(fired)} recommendations fired for {domain.domain}, keeping {limit}")
    return fired[:max(0, limit)]
