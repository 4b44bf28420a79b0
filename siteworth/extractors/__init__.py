"""
Signal Extractors

Deterministic extraction of typed facts from a URL, a domain string and
page markup. No network access happens here.
"""

from .domain import analyze_domain, extract_domain, normalize_url
from .page import (
    extract_content,
    extract_seo,
    extract_structured_data_types,
    extract_technical,
    is_external_link,
    parse_html,
    readability_score,
    score_description,
    score_headings,
    score_title,
)
from .signals import (
    detect_industry,
    extract_mobile,
    extract_monetization,
    extract_security,
    extract_social,
    extract_technology,
)
from .rules import PatternRule, RegexRule, all_matches, first_match

__all__ = [
    "analyze_domain",
    "extract_domain",
    "normalize_url",
    "extract_content",
    "extract_seo",
    "extract_structured_data_types",
    "extract_technical",
    "is_external_link",
    "parse_html",
    "readability_score",
    "score_description",
    "score_headings",
    "score_title",
    "detect_industry",
    "extract_mobile",
    "extract_monetization",
    "extract_security",
    "extract_social",
    "extract_technology",
    "PatternRule",
    "RegexRule",
    "all_matches",
    "first_match",
]
