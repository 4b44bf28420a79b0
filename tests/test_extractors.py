"""
Test Suite for Markup and Domain Extraction

Tests URL normalisation, domain shape and every markup extractor.
"""

import pytest

from siteworth.extractors import (
    analyze_domain,
    detect_industry,
    extract_content,
    extract_domain,
    extract_mobile,
    extract_monetization,
    extract_security,
    extract_seo,
    extract_social,
    extract_technical,
    extract_technology,
    normalize_url,
)
from siteworth.extractors.page import (
    content_depth_score,
    is_external_link,
    parse_html,
    extract_structured_data_types,
    score_description,
    score_headings,
    score_title,
)
from siteworth.extractors.rules import CMS_RULES, PatternRule, all_matches, first_match
from siteworth.models import TechnologyFacts
from siteworth.scoring import score_technical

URL = "https://acmewidgets.com"


class TestUrls:
    """Test URL normalisation and domain extraction."""

    @pytest.mark.parametrize("raw,expected", [
        ("example.com", "https://example.com"),
        ("  www.example.com  ", "https://example.com"),
        ("http://www.example.com/path", "http://example.com/path"),
        ("HTTPS://example.com", "HTTPS://example.com"),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_url(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   ", None, "https://"])
    def test_normalize_rejects_empty(self, raw):
        with pytest.raises(ValueError):
            normalize_url(raw)

    def test_extract_domain(self):
        assert extract_domain("https://www.Example.com/a?b=c") == "example.com"
        assert extract_domain("shop.example.co.uk") == "shop.example.co.uk"


class TestDomainShape:
    """Test domain facts."""

    def test_numbers_hyphens_and_keywords(self):
        domain = analyze_domain("Shop-24.com")

        assert domain.domain == "shop-24.com"
        assert domain.tld == ".com"
        assert domain.length == 7
        assert domain.has_numbers
        assert domain.has_hyphens
        assert domain.keywords_found == ("shop",)
        assert domain.tld_score == 100

    def test_history_starts_empty(self):
        domain = analyze_domain("example.org")

        assert domain.age_years == 0
        assert domain.archive_snapshots == 0
        assert domain.first_indexed is None
        assert not domain.has_significant_history

    def test_with_history_returns_copy(self):
        domain = analyze_domain("example.com")
        aged = domain.with_history(None, 6.5, 120)

        assert aged.age_years == 6.5
        assert aged.has_significant_history
        assert domain.age_years == 0


class TestTechnical:
    """Test technical hygiene flags."""

    def test_rich_page(self, rich_html):
        technical = extract_technical(URL, rich_html, load_time_ms=1500)

        assert technical.has_https
        assert technical.has_meta_description
        assert technical.has_meta_keywords
        assert technical.has_open_graph
        assert technical.has_twitter_card
        assert technical.has_favicon
        assert technical.has_canonical
        assert technical.has_viewport
        assert technical.has_charset
        assert technical.has_lang_attribute
        assert technical.html_size == len(rich_html.encode("utf-8"))
        assert score_technical(technical) == 100

    def test_bare_page_over_http(self, bare_html):
        technical = extract_technical("http://example.com", bare_html)

        assert not technical.has_https
        assert not technical.has_favicon
        assert not technical.has_lang_attribute
        assert technical.load_time_ms == 0


class TestSeo:
    """Test on-page SEO facts."""

    def test_rich_page(self, rich_html):
        seo = extract_seo(URL, rich_html, has_sitemap=True, estimated_page_count=40)

        assert seo.title_length == 50
        assert seo.title_score == 100
        assert seo.meta_description_score == 100
        assert (seo.h1_count, seo.h2_count, seo.h3_count) == (1, 2, 0)
        assert seo.heading_structure_score == 70
        assert seo.image_count == 2
        assert seo.images_with_alt == 1
        assert seo.image_optimization_score == 50
        assert seo.internal_links == 4
        assert seo.external_links == 4
        assert seo.structured_data_types == ("Organization",)
        assert seo.has_canonical
        assert seo.has_sitemap
        assert not seo.has_robots_txt
        assert seo.estimated_page_count == 40

    def test_no_images_is_fully_optimized(self, bare_html):
        assert extract_seo(URL, bare_html).image_optimization_score == 100

    @pytest.mark.parametrize("length,score", [
        (0, 0), (10, 40), (25, 75), (45, 100), (65, 75), (90, 50),
    ])
    def test_title_score(self, length, score):
        assert score_title("x" * length) == score

    @pytest.mark.parametrize("length,score", [
        (0, 0), (50, 40), (100, 75), (140, 100), (190, 75), (250, 40),
    ])
    def test_description_score(self, length, score):
        assert score_description("x" * length) == score

    def test_headings(self):
        assert score_headings(1, 2, 2) == 100
        assert score_headings(3, 1, 0) == 35
        assert score_headings(0, 0, 0) == 0

    def test_malformed_json_ld_is_skipped(self):
        html = """
        <script type="application/ld+json">{not json</script>
        <script type="application/ld+json">[{"@type": "Product"}, {"@type": ["Offer", "Thing"]}]</script>
        """
        assert extract_structured_data_types(parse_html(html)) == ["Product", "Offer", "Thing"]

    def test_deeply_nested_json_ld_is_skipped(self):
        nested = "[" * 100_000 + "]" * 100_000
        html = (
            f'<script type="application/ld+json">{nested}</script>'
            '<script type="application/ld+json">{"@type": "Organization"}</script>'
        )

        assert extract_structured_data_types(parse_html(html)) == ["Organization"]

    def test_unparseable_link_host_does_not_break_extraction(self):
        html = '<a href="http://[oops/page">x</a><a href="/about">about</a><a href="https://other.net">o</a>'
        seo = extract_seo("https://example.com", html)

        assert seo.internal_links == 2
        assert seo.external_links == 1

    @pytest.mark.parametrize("href,external", [
        ("/about", False),
        ("#top", False),
        ("mailto:hi@acmewidgets.com", False),
        ("https://www.acmewidgets.com/shop", False),
        ("https://acmewidgets.com/", False),
        ("//cdn.other.net/lib.js", True),
        ("http://other.net", True),
        ("http://[oops/page", False),
    ])
    def test_external_links(self, href, external):
        assert is_external_link(href, "acmewidgets.com") == external


class TestContent:
    """Test body content facts."""

    def test_rich_page_trust_pages(self, rich_html):
        content = extract_content(rich_html)

        # Footer and nav links still count as trust pages
        assert content.has_privacy_policy
        assert content.has_terms_of_service
        assert content.has_about_page
        assert content.unique_content_indicators == 1
        assert content.word_count > 0
        assert 0 <= content.readability_score <= 100

    def test_navigation_is_not_content(self):
        html = "<html><body><nav>" + "navigation words here " * 100 + "</nav><p>Short body text.</p></body></html>"
        content = extract_content(html)

        assert content.word_count == 3
        assert content.paragraph_count == 1
        assert content.avg_words_per_paragraph == 3

    def test_contact_info(self):
        assert extract_content("<p>Call us at (555) 123-4567</p>").has_contact_info

    def test_empty_markup(self):
        content = extract_content("")
        assert content.word_count == 0
        assert content.content_depth_score == 0

    @pytest.mark.parametrize("words,score", [
        (0, 0), (99, 0), (100, 20), (300, 40), (500, 60), (1000, 80), (2000, 100),
    ])
    def test_depth(self, words, score):
        assert content_depth_score(words) == score


class TestSignals:
    """Test the rule-table driven detectors."""

    def test_social(self, rich_html):
        social = extract_social(rich_html)

        assert social.has_facebook and social.has_twitter and social.has_linkedin
        assert not social.has_instagram
        assert social.platform_count == 3
        assert social.social_proof_indicators

    def test_x_links_count_as_twitter(self):
        assert extract_social('<a href="https://x.com/acme">X</a>').has_twitter
        assert not extract_social("<p>box.company</p>").has_twitter

    def test_technology(self, rich_html):
        technology = extract_technology(rich_html)

        assert technology.cms is None
        assert technology.framework is None
        assert technology.analytics == ("Google Analytics", "Google Tag Manager")
        assert technology.cdn == "Cloudflare"
        assert technology.ecommerce == "Custom"
        assert not technology.is_modern_stack

    def test_shopify_is_cms_and_store(self):
        technology = extract_technology('<script src="https://cdn.shopify.com/s.js"></script>')

        assert technology.cms == "Shopify"
        assert technology.ecommerce == "Shopify"

    def test_framework_marks_modern_stack(self):
        technology = extract_technology('<div id="__next"></div>')

        assert technology.framework == "Next.js"
        assert technology.is_modern_stack

    def test_monetization(self, rich_html):
        monetization = extract_monetization(rich_html, extract_technology(rich_html))

        assert monetization.has_ecommerce
        assert not monetization.has_ads
        assert monetization.estimated_monthly_revenue.mid == 0

    def test_store_platform_implies_ecommerce(self):
        monetization = extract_monetization("<p>hi</p>", TechnologyFacts(ecommerce="Magento"))
        assert monetization.has_ecommerce

    def test_ad_networks(self):
        html = '<script src="https://pagead2.googlesyndication.com/x.js"></script><div class="taboola"></div>'
        monetization = extract_monetization(html, TechnologyFacts())

        assert monetization.ad_networks == ("Google AdSense", "Taboola")
        assert monetization.has_ads

    def test_security(self, rich_html):
        security = extract_security(URL, rich_html, has_hsts=True)

        assert security.security_score == 65
        assert security.security_grade == "B"
        assert security.has_hsts

    def test_insecure_page(self):
        html = '<form action="http://x.com"></form><img src="http://x.com/a.png">'
        security = extract_security("http://x.com", html)

        assert security.security_score == 0
        assert security.security_grade == "F"

    def test_mobile(self, rich_html, bare_html):
        rich = extract_mobile(rich_html)
        bare = extract_mobile(bare_html)

        assert rich.mobile_score == 100
        assert rich.issues == ()
        assert rich.is_mobile_friendly
        assert bare.mobile_score == 60
        assert bare.issues == ("Missing viewport meta tag", "No responsive design patterns detected")
        assert not bare.is_mobile_friendly

    def test_industry(self):
        assert detect_industry("<p>Compare loan rates</p>", "zorblat.com") == "finance"
        assert detect_industry("<p>Hello there</p>", "hotels-r-us.com") == "travel"
        assert detect_industry("<p>Hello there</p>", "zorblat.com") == "general"


class TestRuleTables:
    """Rule helpers work on plain data."""

    def test_first_and_all_matches(self):
        rules = (PatternRule("a", ("alpha",)), PatternRule("b", ("beta",)))

        assert first_match(rules, "beta alpha") == "a"
        assert all_matches(rules, "beta alpha") == ["a", "b"]
        assert first_match(rules, "gamma") is None

    def test_cms_rules_first_match_wins(self):
        assert first_match(CMS_RULES, "wp-content and squarespace") == "WordPress"
