"""
Detection Rule Tables

Substring and regex rules used to recognise vendors, platforms and
monetization channels in raw markup. Tables are plain data so they can be
tested and extended without touching the extractors that consume them.

All substring patterns are lower-case and are matched against lower-cased
markup.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Pattern, Tuple


@dataclass(frozen=True)
class PatternRule:
    """A label that applies when any of its patterns appears in the text."""
    label: str
    patterns: Tuple[str, ...]

    def matches(self, text: str) -> bool:
        return any(pattern in text for pattern in self.patterns)


@dataclass(frozen=True)
class RegexRule:
    label: str
    pattern: Pattern

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


def first_match(rules, text: str) -> Optional[str]:
    """Label of the first rule that matches, or None."""
    for rule in rules:
        if rule.matches(text):
            return rule.label
    return None


def all_matches(rules, text: str) -> List[str]:
    """Labels of every matching rule, in table order."""
    return [rule.label for rule in rules if rule.matches(text)]


# ============================================================================
# TECHNOLOGY
# ============================================================================

CMS_RULES: Tuple[PatternRule, ...] = (
    PatternRule("WordPress", ("wp-content", "wordpress")),
    PatternRule("Shopify", ("shopify", "cdn.shopify.com")),
    PatternRule("Wix", ("wix.com", "wixsite")),
    PatternRule("Squarespace", ("squarespace",)),
    PatternRule("Webflow", ("webflow",)),
    PatternRule("Ghost", ("ghost",)),
    PatternRule("Drupal", ("drupal",)),
)

# CMSes that are also the store platform
ECOMMERCE_CMS = ("Shopify",)

FRAMEWORK_RULES: Tuple[PatternRule, ...] = (
    PatternRule("Next.js", ("__next", "_next/static")),
    PatternRule("Nuxt.js", ("__nuxt", "/_nuxt/")),
    PatternRule("Angular", ("ng-", "angular")),
    PatternRule("React", ("data-reactroot", "react")),
    PatternRule("Vue.js", ("data-v-", "vue")),
)

ANALYTICS_RULES: Tuple[PatternRule, ...] = (
    PatternRule("Google Analytics", ("google-analytics.com", "gtag", "ga.js", "analytics.js")),
    PatternRule("Google Tag Manager", ("googletagmanager.com", "gtm.js")),
    PatternRule("Facebook Pixel", ("facebook.com/tr", "fbq(", "facebook pixel")),
    PatternRule("Hotjar", ("hotjar",)),
    PatternRule("Mixpanel", ("mixpanel",)),
    PatternRule("Segment", ("segment.com", "segment.io")),
    PatternRule("Amplitude", ("amplitude",)),
)

CDN_RULES: Tuple[PatternRule, ...] = (
    PatternRule("Cloudflare", ("cloudflare",)),
    PatternRule("AWS CloudFront", ("cloudfront.net",)),
    PatternRule("Fastly", ("fastly",)),
    PatternRule("Akamai", ("akamai",)),
)

ECOMMERCE_PLATFORM_RULES: Tuple[PatternRule, ...] = (
    PatternRule("WooCommerce", ("woocommerce",)),
    PatternRule("Magento", ("magento",)),
    PatternRule("BigCommerce", ("bigcommerce",)),
    PatternRule("Custom", ("add to cart", "add-to-cart", "shopping cart")),
)

MARKETING_RULES: Tuple[PatternRule, ...] = (
    PatternRule("Mailchimp", ("mailchimp",)),
    PatternRule("HubSpot", ("hubspot",)),
    PatternRule("Intercom", ("intercom",)),
    PatternRule("Drift", ("drift",)),
    PatternRule("Crisp", ("crisp",)),
    PatternRule("Zendesk", ("zendesk",)),
)


# ============================================================================
# SOCIAL
# ============================================================================

# Label doubles as the SocialFacts field suffix (has_<label>)
SOCIAL_PLATFORM_RULES = (
    PatternRule("facebook", ("facebook.com",)),
    RegexRule("twitter", re.compile(r"twitter\.com|//(?:www\.)?x\.com")),
    PatternRule("linkedin", ("linkedin.com",)),
    PatternRule("instagram", ("instagram.com",)),
    PatternRule("youtube", ("youtube.com",)),
    PatternRule("tiktok", ("tiktok.com",)),
    PatternRule("pinterest", ("pinterest.com",)),
)

SOCIAL_PROOF_PATTERN = re.compile(
    r"testimonial|review|rating|customer|client|case study", re.IGNORECASE
)
SOCIAL_PROOF_VENDORS = ("trustpilot", "yelp")


# ============================================================================
# MONETIZATION
# ============================================================================

AD_NETWORK_RULES: Tuple[PatternRule, ...] = (
    PatternRule("Google AdSense", ("googlesyndication", "adsense")),
    PatternRule("Google Ad Manager", ("doubleclick",)),
    PatternRule("Amazon Ads", ("amazon-adsystem",)),
    PatternRule("Media.net", ("media.net",)),
    PatternRule("Taboola", ("taboola",)),
    PatternRule("Outbrain", ("outbrain",)),
    PatternRule("Criteo", ("criteo",)),
)

AFFILIATE_RULE = PatternRule(
    "affiliate",
    ("affiliate", "amzn.to", "amazon.com/gp/product", "shareasale", "commission", "partner"),
)
ECOMMERCE_RULE = PatternRule(
    "ecommerce", ("add to cart", "checkout", "shopping cart", "buy now")
)
SUBSCRIPTION_RULE = PatternRule(
    "subscription", ("pricing", "subscribe", "membership", "/month", "free trial", "sign up")
)
DONATION_RULE = PatternRule(
    "donations", ("donate", "patreon", "ko-fi", "buymeacoffee", "paypal.me")
)
LEAD_GENERATION_RULE = PatternRule(
    "lead_generation",
    ("contact form", "get a quote", "request demo", "free consultation", "schedule a call"),
)


# ============================================================================
# INDUSTRY
# ============================================================================

INDUSTRY_RULES: Tuple[RegexRule, ...] = (
    RegexRule("finance", re.compile(r"financ|bank|loan|credit|invest|stock|trading")),
    RegexRule("insurance", re.compile(r"insurance|insure|policy|coverage")),
    RegexRule("legal", re.compile(r"law|legal|attorney|lawyer")),
    RegexRule("health", re.compile(r"health|medical|doctor|hospital|clinic|pharma")),
    RegexRule("technology", re.compile(r"tech|software|saas|app|cloud|developer")),
    RegexRule("ecommerce", re.compile(r"shop|store|buy|cart|checkout|product")),
    RegexRule("travel", re.compile(r"travel|hotel|flight|vacation|booking")),
    RegexRule("education", re.compile(r"learn|course|education|school|university")),
    RegexRule("news", re.compile(r"news|blog|article|magazine")),
    RegexRule("entertainment", re.compile(r"game|movie|music|entertainment")),
)
DEFAULT_INDUSTRY = "general"


# ============================================================================
# MOBILE
# ============================================================================

RESPONSIVE_MARKERS = (
    "@media", "display:flex", "display: flex", "display:grid", "display: grid",
    "bootstrap", "tailwind",
)
TOUCH_ICON_MARKERS = ("apple-touch-icon", "android-chrome", "manifest.json")
FLASH_MARKERS = ("application/x-shockwave-flash",)
FIXED_WIDTH_PATTERN = re.compile(r"width:\s*\d{4,}px")
SMALL_FONT_PATTERN = re.compile(r"font-size:\s*[0-8]px")
