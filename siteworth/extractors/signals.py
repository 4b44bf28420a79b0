"""
Markup Signal Detection

Social, monetization, technology, security, mobile and industry signals
detected from raw markup with the rule tables in rules.py.
"""

import logging

from ..models import (
    MobileFacts,
    MonetizationFacts,
    SecurityFacts,
    SocialFacts,
    TechnologyFacts,
)
from ..scoring.helpers import clamp_score, letter_grade
from .rules import (
    AD_NETWORK_RULES,
    AFFILIATE_RULE,
    ANALYTICS_RULES,
    CDN_RULES,
    CMS_RULES,
    DEFAULT_INDUSTRY,
    DONATION_RULE,
    ECOMMERCE_CMS,
    ECOMMERCE_PLATFORM_RULES,
    ECOMMERCE_RULE,
    FIXED_WIDTH_PATTERN,
    FLASH_MARKERS,
    FRAMEWORK_RULES,
    INDUSTRY_RULES,
    LEAD_GENERATION_RULE,
    MARKETING_RULES,
    RESPONSIVE_MARKERS,
    SMALL_FONT_PATTERN,
    SOCIAL_PLATFORM_RULES,
    SOCIAL_PROOF_PATTERN,
    SOCIAL_PROOF_VENDORS,
    SUBSCRIPTION_RULE,
    TOUCH_ICON_MARKERS,
    all_matches,
    first_match,
)

logger = logging.getLogger(__name__)


def extract_social(html: str) -> SocialFacts:
    lower_html = (html or "").lower()
    platforms = set(all_matches(SOCIAL_PLATFORM_RULES, lower_html))
    has_social_proof = (
        SOCIAL_PROOF_PATTERN.search(lower_html) is not None
        or any(vendor in lower_html for vendor in SOCIAL_PROOF_VENDORS)
    )
    return SocialFacts(
        has_facebook="facebook" in platforms,
        has_twitter="twitter" in platforms,
        has_linkedin="linkedin" in platforms,
        has_instagram="instagram" in platforms,
        has_youtube="youtube" in platforms,
        has_tiktok="tiktok" in platforms,
        has_pinterest="pinterest" in platforms,
        social_proof_indicators=has_social_proof,
    )


def extract_technology(html: str) -> TechnologyFacts:
    """
    Identify CMS, framework, analytics, CDN, store platform and marketing tools.

    CMS and framework are first-match; the rest collect every match.
    """
    lower_html = (html or "").lower()

    cms = first_match(CMS_RULES, lower_html)
    framework = first_match(FRAMEWORK_RULES, lower_html)

    ecommerce = cms if cms in ECOMMERCE_CMS else first_match(ECOMMERCE_PLATFORM_RULES, lower_html)

    return TechnologyFacts(
        cms=cms,
        framework=framework,
        analytics=tuple(all_matches(ANALYTICS_RULES, lower_html)),
        cdns=tuple(all_matches(CDN_RULES, lower_html)),
        ecommerce=ecommerce,
        marketing=tuple(all_matches(MARKETING_RULES, lower_html)),
        is_modern_stack=framework is not None,
    )


def extract_monetization(html: str, technology: TechnologyFacts) -> MonetizationFacts:
    """
    Detect revenue channels.

    Args:
        html: Raw markup
        technology: Detected technologies (a store platform implies e-commerce)

    Returns:
        MonetizationFacts with a zero revenue estimate
    """
    lower_html = (html or "").lower()
    ad_networks = tuple(all_matches(AD_NETWORK_RULES, lower_html))

    return MonetizationFacts(
        has_ads=len(ad_networks) > 0,
        ad_networks=ad_networks,
        has_affiliate_links=AFFILIATE_RULE.matches(lower_html),
        has_ecommerce=bool(technology.ecommerce) or ECOMMERCE_RULE.matches(lower_html),
        has_subscription=SUBSCRIPTION_RULE.matches(lower_html),
        has_donations=DONATION_RULE.matches(lower_html),
        has_lead_generation=LEAD_GENERATION_RULE.matches(lower_html),
    )


def extract_security(url: str, html: str, has_hsts: bool = False) -> SecurityFacts:
    """
    Score security posture from what the markup reveals.

    Args:
        url: Page URL
        html: Raw markup
        has_hsts: HSTS support reported by an external TLS scan

    Returns:
        SecurityFacts with score and grade
    """
    html = html or ""
    lower_html = html.lower()

    has_https = url.lower().startswith("https://")
    has_csp = "content-security-policy" in lower_html
    has_frame_options = "x-frame-options" in lower_html or "frame-ancestors" in lower_html
    has_secure_forms = 'action="http://' not in lower_html
    no_mixed_content = 'src="http://' not in lower_html

    score = 0
    if has_https:
        score += 40
    if has_csp:
        score += 20
    if has_frame_options:
        score += 15
    if has_secure_forms:
        score += 10
    if no_mixed_content:
        score += 15
    score = clamp_score(score)

    return SecurityFacts(
        has_https=has_https,
        has_hsts=has_hsts,
        has_csp=has_csp,
        has_x_frame_options=has_frame_options,
        has_secure_forms=has_secure_forms,
        no_mixed_content=no_mixed_content,
        security_score=score,
        security_grade=letter_grade(score),
    )


def extract_mobile(html: str) -> MobileFacts:
    lower_html = (html or "").lower()
    issues = []

    has_viewport = 'name="viewport"' in lower_html or "name='viewport'" in lower_html
    if not has_viewport:
        issues.append("Missing viewport meta tag")

    has_responsive = any(marker in lower_html for marker in RESPONSIVE_MARKERS)
    if not has_responsive:
        issues.append("No responsive design patterns detected")

    has_touch_icons = any(marker in lower_html for marker in TOUCH_ICON_MARKERS)

    uses_flash = any(marker in lower_html for marker in FLASH_MARKERS)
    if uses_flash:
        issues.append("Uses Flash (not mobile-friendly)")

    has_fixed_width = FIXED_WIDTH_PATTERN.search(lower_html) is not None
    if has_fixed_width:
        issues.append("Fixed wide layouts detected")

    has_small_fonts = SMALL_FONT_PATTERN.search(lower_html) is not None
    if has_small_fonts:
        issues.append("Very small font sizes detected")

    score = 50
    if has_viewport:
        score += 20
    if has_responsive:
        score += 15
    if has_touch_icons:
        score += 5
    if not uses_flash:
        score += 5
    if not has_fixed_width:
        score += 5

    return MobileFacts(
        has_viewport=has_viewport,
        has_touch_icons=has_touch_icons,
        has_responsive_design=has_responsive,
        uses_flash=uses_flash,
        has_fixed_width=has_fixed_width,
        has_small_fonts=has_small_fonts,
        mobile_score=clamp_score(score),
        issues=tuple(issues),
    )


def detect_industry(html: str, domain: str) -> str:
    """
    Classify the site's industry from markup and domain.

    Args:
        html: Raw markup
        domain: Bare domain

    Returns:
        Industry tag, "general" when nothing matches
    """
    text = f"{html or ''} {domain}".lower()
    industry = first_match(INDUSTRY_RULES, text) or DEFAULT_INDUSTRY
    logger.debug(f"Detected industry for {domain}: {industry}")
    return industry
