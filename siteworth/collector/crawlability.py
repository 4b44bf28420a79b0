"""
robots.txt and Sitemap Discovery

Reads robots.txt (crawler policy, AI crawler blocks, declared sitemaps) and
falls back to the common sitemap locations to estimate a page count.
"""

import logging
import re
from typing import List, Optional, Tuple

import httpx

from ..models import AI_CRAWLER_MARKERS, CrawlabilityFacts
from .client import AdapterError, SignalClient

logger = logging.getLogger(__name__)

# Bodies this large are HTML error pages or garbage, not robots files
MAX_ROBOTS_SIZE = 50_000
SITEMAP_DIRECTIVE = re.compile(r"sitemap:\s*(\S+)", re.IGNORECASE)
COMMON_SITEMAP_PATHS = ("/sitemap.xml", "/sitemap_index.xml")


def is_valid_robots_txt(body: str) -> bool:
    return bool(body) and "<!DOCTYPE" not in body and len(body) < MAX_ROBOTS_SIZE


def parse_robots_txt(body: str) -> Tuple[bool, bool, List[str]]:
    """
    Read a robots.txt body.

    Args:
        body: robots.txt text (already validated)

    Returns:
        Tuple of (allows all crawlers, blocks AI crawlers, declared sitemap URLs)
    """
    lower_body = body.lower()
    allows_all = "disallow: /" not in lower_body
    blocks_ai = any(marker in lower_body for marker in AI_CRAWLER_MARKERS)
    sitemaps = [match.strip() for match in SITEMAP_DIRECTIVE.findall(body)]
    return allows_all, blocks_ai, sitemaps


def count_sitemap_urls(body: str) -> Optional[int]:
    """Number of <loc> entries, or None when the body is not a sitemap."""
    if "<urlset" not in body and "<sitemapindex" not in body:
        return None
    return body.count("<loc>")


async def fetch_crawlability(client: SignalClient, domain: str) -> CrawlabilityFacts:
    """
    Inspect robots.txt and sitemaps for a domain.

    A sitemap declared in robots.txt counts as present without being
    fetched; the page count comes only from the common locations probed
    when robots.txt declares none.

    Args:
        client: Shared signal client
        domain: Bare domain

    Returns:
        CrawlabilityFacts
    """
    has_robots = False
    allows_all = True
    blocks_ai = False
    sitemap_urls: List[str] = []
    page_count = 0

    try:
        body = await client.get_text(f"https://{domain}/robots.txt", retry=False)
    except (AdapterError, httpx.HTTPError) as e:
        logger.debug(f"No robots.txt for {domain}: {e}")
        body = ""

    if is_valid_robots_txt(body):
        has_robots = True
        allows_all, blocks_ai, sitemap_urls = parse_robots_txt(body)

    if not sitemap_urls:
        for path in COMMON_SITEMAP_PATHS:
            sitemap_url = f"https://{domain}{path}"
            try:
                content = await client.get_text(sitemap_url, retry=False)
            except (AdapterError, httpx.HTTPError):
                continue
            count = count_sitemap_urls(content)
            if count is not None:
                sitemap_urls.append(sitemap_url)
                page_count = count
                break

    facts = CrawlabilityFacts(
        has_robots_txt=has_robots,
        allows_all_crawlers=allows_all,
        blocks_ai_crawlers=blocks_ai,
        has_sitemap=len(sitemap_urls) > 0,
        sitemap_urls=tuple(sitemap_urls),
        estimated_page_count=page_count,
    )
    logger.info(
        f"Crawlability for {domain}: robots={facts.has_robots_txt}, "
        f"sitemap={facts.has_sitemap}, pages={facts.estimated_page_count}"
    )
    return facts
