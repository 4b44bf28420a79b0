"""
Valuation Engine

Converts domain facts, the traffic estimate, monetization channels and
category scores into a dollar valuation.

Components (summed into the base value):
    1. Domain intrinsic value  (TLD base x length tier + keywords, aged, penalized)
    2. Traffic value           (visitors / 1000 x CPM x 12 months x 2)
    3. Content value           (content score / 100 x $5,000)
    4. Technical value         (avg(technical, performance) / 100 x $3,000)
    5. Brand value             (social score / 100 x $2,000 + $2,000 history bonus)
    6. Revenue multiple        (monthly revenue x 30)

Estimated value = base value x (0.5 + overall / 100).
Range spread    = 0.5 - confidence / 100 x 0.3.

The monthly revenue band is returned on the ValuationResult rather than
written back into MonetizationFacts.
"""

import logging

from ..models import (
    DomainFacts,
    MonetizationFacts,
    RevenueEstimate,
    RevenueModel,
    ScoreBreakdown,
    TrafficEstimate,
    ValuationBreakdown,
    ValuationResult,
    ValueRange,
)
from .tables import DEFAULT_TABLES, ValuationTables

logger = logging.getLogger(__name__)


# ============================================================================
# COMPONENTS
# ============================================================================

def calculate_domain_value(
    domain: DomainFacts,
    tables: ValuationTables = DEFAULT_TABLES,
) -> float:
    """
    Intrinsic value of the domain name itself.

    Args:
        domain: Domain facts
        tables: Valuation tables

    Returns:
        Dollar value (non-negative)
    """
    value = tables.tld_base_value(domain.tld) * tables.length_multiplier(domain.length)
    value += sum(tables.keyword_value(keyword) for keyword in domain.keywords_found)
    value *= 1 + domain.age_years * tables.age_growth_per_year

    # Penalties compound
    if domain.has_numbers:
        value *= tables.numbers_penalty
    if domain.has_hyphens:
        value *= tables.hyphens_penalty

    return max(0.0, value)


def calculate_traffic_value(
    traffic: TrafficEstimate,
    industry: str,
    tables: ValuationTables = DEFAULT_TABLES,
) -> float:
    monthly = traffic.monthly_visitors / 1000 * tables.cpm(industry)
    return monthly * tables.traffic_months * tables.traffic_multiple


def estimate_monthly_revenue(
    traffic: TrafficEstimate,
    monetization: MonetizationFacts,
    industry: str,
    tables: ValuationTables = DEFAULT_TABLES,
) -> float:
    """
    Heuristic monthly revenue across every detected channel.

    Sites whose revenue model cannot be classified earn nothing here.

    Args:
        traffic: Traffic estimate
        monetization: Detected monetization channels
        industry: Industry tag for the ad CPM
        tables: Valuation tables

    Returns:
        Monthly revenue in USD
    """
    if monetization.revenue_model == RevenueModel.UNKNOWN:
        return 0.0

    visitors = traffic.monthly_visitors
    revenue = 0.0
    if monetization.has_ads:
        revenue += visitors / 1000 * tables.cpm(industry)
    if monetization.has_ecommerce:
        revenue += visitors * tables.ecommerce_conversion_rate * tables.ecommerce_order_value
    if monetization.has_affiliate_links:
        revenue += visitors * tables.affiliate_conversion_rate * tables.affiliate_commission
    if monetization.has_subscription:
        revenue += visitors * tables.subscription_conversion_rate * tables.subscription_price
    return revenue


def revenue_band(monthly_revenue: float) -> RevenueEstimate:
    return RevenueEstimate(
        low=round(monthly_revenue * 0.5),
        mid=round(monthly_revenue),
        high=round(monthly_revenue * 2),
    )


# ============================================================================
# VALUATION
# ============================================================================

def calculate_valuation(
    domain: DomainFacts,
    traffic: TrafficEstimate,
    monetization: MonetizationFacts,
    scores: ScoreBreakdown,
    industry: str,
    tables: ValuationTables = DEFAULT_TABLES,
) -> ValuationResult:
    """
    Value a website.

    Args:
        domain: Domain facts
        traffic: Traffic estimate (visitors and confidence)
        monetization: Monetization channels
        scores: Category scores
        industry: Industry tag used for the CPM lookup
        tables: Valuation tables

    Returns:
        ValuationResult with breakdown, range, confidence and the monthly
        revenue band
    """
    monthly_revenue = estimate_monthly_revenue(traffic, monetization, industry, tables)

    breakdown = ValuationBreakdown(
        domain_value=calculate_domain_value(domain, tables),
        traffic_value=calculate_traffic_value(traffic, industry, tables),
        content_value=scores.content / 100 * tables.content_ceiling,
        technical_value=(scores.technical + scores.performance) / 200 * tables.technical_ceiling,
        brand_value=(
            scores.social / 100 * tables.brand_ceiling
            + (tables.history_bonus if domain.has_significant_history else 0)
        ),
        revenue_multiple=monthly_revenue * tables.revenue_multiple,
    )

    quality_multiplier = 0.5 + scores.overall / 100
    confidence = traffic.confidence
    estimated_value = max(0, round(breakdown.base_value * quality_multiplier))

    # Higher confidence narrows the range (spread between 0.2 and 0.5)
    spread = 0.5 - confidence / 100 * 0.3
    value_range = ValueRange(
        min=min(estimated_value, round(estimated_value * (1 - spread))),
        max=max(estimated_value, round(estimated_value * (1 + spread))),
    )

    result = ValuationResult(
        breakdown=breakdown,
        quality_multiplier=quality_multiplier,
        confidence=confidence,
        value_range=value_range,
        revenue=revenue_band(monthly_revenue),
    )
    logger.debug(
        f"Valuation for {domain.domain}: base=${breakdown.base_value:,.0f} "
        f"x{quality_multiplier:.2f} = ${result.estimated_value:,}"
    )
    return result
