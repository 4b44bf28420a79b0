"""
Reach Lookups

- Tranco top-1M domain rank
- Google "site:" indexed page count
- CommonCrawl index presence as a backlink proxy
"""

import logging
import re
from typing import Any, Dict

import httpx

from ..models import BacklinkFacts, IndexedPages, RankingFacts
from .client import AdapterError, SignalClient

logger = logging.getLogger(__name__)

TRANCO_URL = "https://tranco-list.eu/api/ranks/domain/{domain}"
GOOGLE_SEARCH_URL = "https://www.google.com/search"
COMMONCRAWL_INDEX_URL = "https://index.commoncrawl.org/CC-MAIN-2024-10-index"

RESULT_COUNT_PATTERNS = (
    re.compile(r"About\s+([\d,]+)\s+results", re.IGNORECASE),
    re.compile(r"([\d,]+)\s+results", re.IGNORECASE),
)
NO_RESULTS_MARKERS = ("did not match any documents", "No results found")

# Heuristics: each CommonCrawl page stands for ~10 backlinks, ~30% of them unique domains
BACKLINKS_PER_CRAWLED_PAGE = 10
UNIQUE_DOMAIN_RATIO = 0.3


# ============================================================================
# TRANCO
# ============================================================================

def parse_tranco(data: Dict[str, Any]) -> RankingFacts:
    """Tranco answers {"ranks": [{"date": ..., "rank": 123}, ...]}; empty when unranked."""
    ranks = (data or {}).get("ranks") or []
    if not ranks:
        return RankingFacts()
    rank = ranks[0].get("rank")
    return RankingFacts(rank=int(rank) if rank else None)


async def fetch_tranco_rank(client: SignalClient, domain: str) -> RankingFacts:
    try:
        data = await client.get_json(TRANCO_URL.format(domain=domain))
    except (AdapterError, httpx.HTTPError) as e:
        logger.warning(f"Tranco lookup failed for {domain}: {e}")
        return RankingFacts()

    ranking = parse_tranco(data)
    if ranking.is_ranked:
        logger.info(f"Tranco: {domain} ranked #{ranking.rank} ({ranking.traffic_tier})")
    else:
        logger.info(f"Tranco: {domain} not in top 1M")
    return ranking


# ============================================================================
# INDEXED PAGES
# ============================================================================

def parse_indexed_pages(html: str) -> IndexedPages:
    """
    Read the result count from a search results page.

    Args:
        html: Search results markup

    Returns:
        IndexedPages; counts above 10,000 are rounded by the engine so only
        get medium confidence
    """
    for pattern in RESULT_COUNT_PATTERNS:
        match = pattern.search(html or "")
        if match:
            count = int(match.group(1).replace(",", ""))
            return IndexedPages(
                estimated_count=count,
                confidence="medium" if count > 10_000 else "high",
            )

    if any(marker in (html or "") for marker in NO_RESULTS_MARKERS):
        return IndexedPages(estimated_count=0, confidence="high")

    return IndexedPages()


async def fetch_indexed_pages(client: SignalClient, domain: str) -> IndexedPages:
    try:
        html = await client.get_text(
            GOOGLE_SEARCH_URL, params={"q": f"site:{domain}"}, retry=False
        )
    except (AdapterError, httpx.HTTPError) as e:
        logger.warning(f"Indexed page lookup failed for {domain}: {e}")
        return IndexedPages()

    pages = parse_indexed_pages(html)
    if pages.estimated_count is not None:
        logger.info(f"Indexed pages: {domain} has ~{pages.estimated_count:,} pages")
    return pages


# ============================================================================
# BACKLINKS
# ============================================================================

def parse_commoncrawl(body: str) -> BacklinkFacts:
    """The index answers one JSON object per line; each line is one crawled page."""
    lines = [line for line in (body or "").strip().split("\n") if line.strip()]
    if not lines:
        return BacklinkFacts()

    backlinks = len(lines) * BACKLINKS_PER_CRAWLED_PAGE
    return BacklinkFacts(
        estimated_backlinks=backlinks,
        unique_domains=round(backlinks * UNIQUE_DOMAIN_RATIO),
    )


async def fetch_backlinks(client: SignalClient, domain: str) -> BacklinkFacts:
    try:
        body = await client.get_text(
            COMMONCRAWL_INDEX_URL,
            params={"url": f"{domain}/*", "output": "json", "limit": 1},
            retry=False,
        )
    except (AdapterError, httpx.HTTPError) as e:
        logger.warning(f"CommonCrawl lookup failed for {domain}: {e}")
        return BacklinkFacts()

    backlinks = parse_commoncrawl(body)
    logger.debug(f"Backlinks for {domain}: ~{backlinks.estimated_backlinks}")
    return backlinks
