"""
Pytest Configuration and Shared Fixtures

Provides sample markup and fact records shared by the test modules.
"""

import pytest

from siteworth.models import (
    ContentFacts,
    DnsFacts,
    DomainFacts,
    MonetizationFacts,
    PerformanceFacts,
    SecurityFacts,
    SeoFacts,
    SocialFacts,
    TechnicalFacts,
    TechnologyFacts,
)


# ============================================================================
# Sample Markup
# ============================================================================

RICH_PAGE_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>Acme Widgets - Hand Made Widgets Shipped Worldwide</title>
  <meta name="description" content="Acme Widgets builds durable hand made widgets for homes and workshops. Browse the catalogue, compare models and order online today.">
  <meta name="keywords" content="widgets, tools">
  <meta property="og:title" content="Acme Widgets">
  <meta name="twitter:card" content="summary">
  <link rel="icon" href="/favicon.ico">
  <link rel="canonical" href="https://acmewidgets.com/">
  <link rel="apple-touch-icon" href="/apple-touch-icon.png">
  <script src="https://www.googletagmanager.com/gtag/js?id=G-1"></script>
  <script src="https://cdnjs.cloudflare.com/lib.js"></script>
  <script type="application/ld+json">{"@context": "https://schema.org", "@type": "Organization", "name": "Acme"}</script>
  <style>@media (max-width: 600px) { .grid { display: flex; } }</style>
</head>
<body>
  <nav><a href="/">Home</a> <a href="/about">About us</a></nav>
  <h1>Hand made widgets</h1>
  <h2>Why our widgets last</h2>
  <p>Every widget is assembled by hand in our workshop. We test each one before it ships.</p>
  <h2>Customer reviews</h2>
  <blockquote>Best widget I have ever owned, says one happy customer.</blockquote>
  <img src="/a.jpg" alt="Blue widget">
  <img src="/b.jpg" alt="">
  <a href="https://www.facebook.com/acmewidgets">Facebook</a>
  <a href="https://twitter.com/acmewidgets">Twitter</a>
  <a href="https://www.linkedin.com/company/acmewidgets">LinkedIn</a>
  <button class="add-to-cart">Add to cart</button>
  <footer>
    <a href="/privacy">Privacy policy</a>
    <a href="/terms">Terms of service</a>
    <a href="https://partner.example.org/">Partner</a>
  </footer>
</body>
</html>
"""

BARE_PAGE_HTML = "<html><head></head><body><p>Hello</p></body></html>"


@pytest.fixture
def rich_html() -> str:
    """A well-built store page touching most extractors."""
    return RICH_PAGE_HTML


@pytest.fixture
def bare_html() -> str:
    """A page with almost nothing on it."""
    return BARE_PAGE_HTML


# ============================================================================
# Fact Fixtures
# ============================================================================

@pytest.fixture
def example_domain() -> DomainFacts:
    """example.com with no history."""
    return DomainFacts(domain="example.com", tld=".com", tld_score=100, length=7)


@pytest.fixture
def aged_domain() -> DomainFacts:
    """A ten year old, heavily archived domain."""
    return DomainFacts(
        domain="acmewidgets.com",
        tld=".com",
        tld_score=100,
        length=11,
        age_years=10.0,
        archive_snapshots=600,
    )


@pytest.fixture
def good_performance() -> PerformanceFacts:
    return PerformanceFacts(
        performance_score=92,
        accessibility_score=95,
        seo_score=100,
        best_practices_score=90,
    )


@pytest.fixture
def empty_facts():
    """Default (empty) facts for every markup category, as a dict of kwargs."""
    return {
        "technical": TechnicalFacts(),
        "dns": DnsFacts(),
        "security": SecurityFacts(),
        "seo": SeoFacts(),
        "content": ContentFacts(),
        "social": SocialFacts(),
        "monetization": MonetizationFacts(),
        "technology": TechnologyFacts(),
    }
