"""
Page Extraction

Technical, SEO and content facts read from a page's markup with
BeautifulSoup. Everything here is deterministic: same markup in, same
facts out.
"""

import json
import logging
import re
from typing import List, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from ..models import ContentFacts, SeoFacts, TechnicalFacts
from ..scoring.helpers import clamp_score, readability_grade

logger = logging.getLogger(__name__)

NON_CONTENT_TAGS = ["script", "style", "noscript", "nav", "header", "footer"]

CONTACT_PATTERN = re.compile(
    r"contact|email|phone|call us|reach us|\+1|\(\d{3}\)", re.IGNORECASE
)
PRIVACY_PATTERN = re.compile(r"privacy policy|privacy notice", re.IGNORECASE)
TERMS_PATTERN = re.compile(
    r"terms of service|terms and conditions|terms of use", re.IGNORECASE
)
SENTENCE_SPLIT = re.compile(r"[.!?]+")

# (min words, depth score)
CONTENT_DEPTH_TIERS = (
    (2000, 100),
    (1000, 80),
    (500, 60),
    (300, 40),
    (100, 20),
)


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def _meta_content(soup: BeautifulSoup, **attrs) -> str:
    tag = soup.find("meta", attrs=attrs)
    if tag is None:
        return ""
    return (tag.get("content") or "").strip()


def _has_link_rel(soup: BeautifulSoup, *rels: str) -> bool:
    wanted = {rel.lower() for rel in rels}
    for link in soup.find_all("link"):
        rel = link.get("rel") or []
        if isinstance(rel, str):
            rel = rel.split()
        if " ".join(rel).lower() in wanted or wanted.intersection(r.lower() for r in rel):
            return True
    return False


def _host(url: str) -> str:
    try:
        host = (urlparse(url).hostname or "").lower()
    except ValueError:
        # Unparseable authority, e.g. an unclosed IPv6 bracket
        return ""
    return host[4:] if host.startswith("www.") else host


# ============================================================================
# TECHNICAL
# ============================================================================

def extract_technical(
    url: str,
    html: str,
    load_time_ms: int = 0,
    soup: Optional[BeautifulSoup] = None,
) -> TechnicalFacts:
    """
    Read technical hygiene flags.

    Args:
        url: Final page URL (scheme decides HTTPS)
        html: Raw markup
        load_time_ms: Measured fetch time; 0 when not measured
        soup: Pre-parsed markup, parsed from html when omitted

    Returns:
        TechnicalFacts
    """
    soup = soup if soup is not None else parse_html(html)
    html_tag = soup.find("html")

    return TechnicalFacts(
        has_https=url.lower().startswith("https://"),
        load_time_ms=max(0, int(load_time_ms)),
        html_size=len((html or "").encode("utf-8")),
        has_meta_description=bool(_meta_content(soup, name="description")),
        has_meta_keywords=bool(_meta_content(soup, name="keywords")),
        has_open_graph=soup.find("meta", attrs={"property": "og:title"}) is not None,
        has_twitter_card=soup.find("meta", attrs={"name": "twitter:card"}) is not None,
        has_favicon=_has_link_rel(soup, "icon", "shortcut icon"),
        has_canonical=_has_link_rel(soup, "canonical"),
        has_viewport=soup.find("meta", attrs={"name": "viewport"}) is not None,
        has_charset=soup.find("meta", charset=True) is not None or "charset=" in (html or ""),
        has_lang_attribute=bool(html_tag is not None and html_tag.get("lang")),
    )


# ============================================================================
# SEO
# ============================================================================

def score_title(title: str) -> int:
    length = len(title)
    if length == 0:
        return 0
    if 30 <= length <= 60:
        return 100
    if 20 <= length <= 70:
        return 75
    if length > 70:
        return 50
    return 40


def score_description(description: str) -> int:
    length = len(description)
    if length == 0:
        return 0
    if 120 <= length <= 160:
        return 100
    if 80 <= length <= 200:
        return 75
    return 40


def score_headings(h1_count: int, h2_count: int, h3_count: int) -> int:
    score = 0
    if h1_count == 1:
        score += 40
    elif h1_count > 1:
        score += 20
    for count in (h2_count, h3_count):
        if count >= 2:
            score += 30
        elif count == 1:
            score += 15
    return score


def extract_structured_data_types(soup: BeautifulSoup) -> List[str]:
    """@type values of every parseable JSON-LD block. Malformed blocks are skipped."""
    types: List[str] = []
    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        try:
            data = json.loads(script.string or script.get_text() or "")
        except (ValueError, TypeError, RecursionError):
            logger.debug("Skipping malformed JSON-LD block")
            continue

        items = data if isinstance(data, list) else [data]
        for item in items:
            if not isinstance(item, dict):
                continue
            item_type = item.get("@type")
            if isinstance(item_type, list):
                types.extend(str(t) for t in item_type)
            elif item_type:
                types.append(str(item_type))
    return types


def is_external_link(href: str, page_host: str) -> bool:
    """
    A link is external when it names a host other than the page's own.

    Links whose host cannot be parsed count as internal.
    """
    href = href.strip()
    if not (href.lower().startswith(("http://", "https://")) or href.startswith("//")):
        return False
    link_host = _host(href if not href.startswith("//") else f"https:{href}")
    return bool(link_host) and link_host != page_host


def extract_seo(
    url: str,
    html: str,
    has_sitemap: bool = False,
    has_robots_txt: bool = False,
    estimated_page_count: int = 0,
    soup: Optional[BeautifulSoup] = None,
) -> SeoFacts:
    """
    Read on-page SEO facts.

    Args:
        url: Page URL (used to classify links)
        html: Raw markup
        has_sitemap: From the crawlability lookup
        has_robots_txt: From the crawlability lookup
        estimated_page_count: From the sitemap or indexed page count
        soup: Pre-parsed markup

    Returns:
        SeoFacts
    """
    soup = soup if soup is not None else parse_html(html)

    title_tag = soup.find("title")
    title = title_tag.get_text().strip() if title_tag else ""
    description = _meta_content(soup, name="description")

    h1_count = len(soup.find_all("h1"))
    h2_count = len(soup.find_all("h2"))
    h3_count = len(soup.find_all("h3"))

    images = soup.find_all("img")
    images_with_alt = [img for img in images if (img.get("alt") or "").strip()]
    image_score = round(len(images_with_alt) / len(images) * 100) if images else 100

    page_host = _host(url)
    internal = external = 0
    for link in soup.find_all("a", href=True):
        if is_external_link(link["href"], page_host):
            external += 1
        else:
            internal += 1

    return SeoFacts(
        title=title,
        title_length=len(title),
        title_score=score_title(title),
        meta_description=description,
        meta_description_length=len(description),
        meta_description_score=score_description(description),
        h1_count=h1_count,
        h2_count=h2_count,
        h3_count=h3_count,
        heading_structure_score=score_headings(h1_count, h2_count, h3_count),
        image_count=len(images),
        images_with_alt=len(images_with_alt),
        image_optimization_score=image_score,
        internal_links=internal,
        external_links=external,
        structured_data_types=tuple(extract_structured_data_types(soup)),
        has_canonical=_has_link_rel(soup, "canonical"),
        has_sitemap=has_sitemap,
        has_robots_txt=has_robots_txt,
        estimated_page_count=max(0, estimated_page_count),
    )


# ============================================================================
# CONTENT
# ============================================================================

def content_depth_score(word_count: int) -> int:
    for min_words, score in CONTENT_DEPTH_TIERS:
        if word_count >= min_words:
            return score
    return 0


def readability_score(text: str) -> int:
    """
    Sentence-length readability (0-100). Shorter sentences score higher.

    All whitespace tokens count towards the words-per-sentence ratio.
    """
    tokens = text.split()
    sentences = [s for s in SENTENCE_SPLIT.split(text) if len(s.strip()) > 10]
    avg_sentence_length = len(tokens) / len(sentences) if sentences else 0
    return clamp_score(100 - (avg_sentence_length - 15) * 3)


def _links_mention(soup: BeautifulSoup, needle: str) -> bool:
    for link in soup.find_all("a", href=True):
        if needle in link["href"].lower() or needle in link.get_text().lower():
            return True
    return False


def count_unique_content(soup: BeautifulSoup) -> int:
    indicators = [
        bool(soup.find("blockquote")),
        bool(soup.find("table")),
        len(soup.find_all(["ul", "ol"])) > 2,
        bool(soup.find(["figure", "figcaption"])),
        bool(soup.find(["code", "pre"])),
        bool(soup.find(["video", "audio"])),
    ]
    return sum(indicators)


def extract_content(html: str) -> ContentFacts:
    """
    Read body text volume, readability and trust pages.

    Works on its own parse of the markup because navigation, header,
    footer and script elements are removed before counting words.

    Args:
        html: Raw markup

    Returns:
        ContentFacts
    """
    soup = parse_html(html)
    full_soup = parse_html(html)

    for tag in soup.find_all(NON_CONTENT_TAGS):
        tag.decompose()

    body = soup.body or soup
    text = body.get_text(" ")
    tokens = text.split()
    word_count = sum(1 for token in tokens if len(token) > 2)
    paragraph_count = len(soup.find_all("p"))
    readability = readability_score(text)

    return ContentFacts(
        word_count=word_count,
        paragraph_count=paragraph_count,
        avg_words_per_paragraph=round(word_count / paragraph_count) if paragraph_count else 0,
        readability_score=readability,
        readability_grade=readability_grade(readability),
        has_contact_info=CONTACT_PATTERN.search(text) is not None,
        has_privacy_policy=(
            PRIVACY_PATTERN.search(text) is not None or _links_mention(full_soup, "privacy")
        ),
        has_terms_of_service=(
            TERMS_PATTERN.search(text) is not None or _links_mention(full_soup, "terms")
        ),
        has_about_page=_links_mention(full_soup, "about"),
        content_depth_score=content_depth_score(word_count),
        unique_content_indicators=count_unique_content(full_soup),
    )
