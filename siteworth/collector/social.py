"""
Social Reach Lookups

- Follower counts scraped from public profile pages linked by the site
  (Twitter/X through Nitter, LinkedIn company pages, Facebook pages)
- Brand mentions on Reddit and Hacker News

Follower scraping is best effort: all scrapes run concurrently and are cut
off after a timeout, keeping whatever finished in time.
"""

import asyncio
import logging
import re
from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Pattern, Sequence, Tuple

import httpx

from ..models import BrandMentions, SocialFollowers
from .client import AdapterError, SignalClient

logger = logging.getLogger(__name__)

NITTER_URL = "https://nitter.net/{handle}"
LINKEDIN_URL = "https://www.linkedin.com/company/{handle}"
FACEBOOK_URL = "https://www.facebook.com/{handle}"
REDDIT_SEARCH_URL = "https://www.reddit.com/search.json"
HN_SEARCH_URL = "https://hn.algolia.com/api/v1/search"

TWITTER_HANDLE = re.compile(r"(?:twitter\.com|//(?:www\.)?x\.com)/([a-zA-Z0-9_]+)", re.IGNORECASE)
LINKEDIN_HANDLE = re.compile(r"linkedin\.com/company/([a-zA-Z0-9-]+)", re.IGNORECASE)
FACEBOOK_HANDLE = re.compile(r"facebook\.com/([a-zA-Z0-9.]+)", re.IGNORECASE)

# Share widgets, not profiles
TWITTER_NON_PROFILES = {"share", "intent", "home", "search"}
FACEBOOK_NON_PROFILES = {"sharer", "sharer.php", "share", "tr", "dialog", "plugins"}

FOLLOWERS_PATTERN = re.compile(r"(\d[\d,.]*[KMB]?)\s*followers", re.IGNORECASE)
LIKES_PATTERN = re.compile(r"(\d[\d,.]*[KMB]?)\s*people\s*like", re.IGNORECASE)

COUNT_SUFFIXES = {"K": 1_000, "M": 1_000_000, "B": 1_000_000_000}

# Only the first posts/stories are aggregated
MENTION_SAMPLE_SIZE = 10
TOP_SUBREDDITS = 5


def parse_follower_count(text: str) -> int:
    """
    Parse a displayed follower count.

    "1,234" -> 1234, "12.5K" -> 12500, "3M" -> 3000000; anything
    unparseable -> 0.
    """
    clean = re.sub(r"[,\s]", "", text or "")
    if not clean:
        return 0

    multiplier = COUNT_SUFFIXES.get(clean[-1].upper())
    try:
        if multiplier:
            return round(float(clean[:-1]) * multiplier)
        return int(float(clean))
    except ValueError:
        return 0


@dataclass(frozen=True)
class SocialHandles:
    """Profile handles linked from a page."""
    twitter: Optional[str] = None
    linkedin: Optional[str] = None
    facebook: Optional[str] = None


def _first_handle(pattern: Pattern, html: str, excluded: Sequence[str] = ()) -> Optional[str]:
    for handle in pattern.findall(html):
        if handle.lower() not in excluded:
            return handle
    return None


def extract_social_handles(html: str) -> SocialHandles:
    html = html or ""
    return SocialHandles(
        twitter=_first_handle(TWITTER_HANDLE, html, TWITTER_NON_PROFILES),
        linkedin=_first_handle(LINKEDIN_HANDLE, html),
        facebook=_first_handle(FACEBOOK_HANDLE, html, FACEBOOK_NON_PROFILES),
    )


def find_follower_count(html: str, patterns: Sequence[Pattern]) -> Optional[int]:
    for pattern in patterns:
        match = pattern.search(html or "")
        if match:
            return parse_follower_count(match.group(1))
    return None


# ============================================================================
# FOLLOWER SCRAPING
# ============================================================================

async def _scrape_count(
    client: SignalClient,
    url: str,
    patterns: Sequence[Pattern],
) -> Optional[int]:
    try:
        html = await client.get_text(url, retry=False)
    except (AdapterError, httpx.HTTPError) as e:
        logger.debug(f"Follower scrape failed for {url}: {e}")
        return None
    return find_follower_count(html, patterns)


async def fetch_social_followers(
    client: SignalClient,
    html: str,
    timeout: float = 10.0,
) -> SocialFollowers:
    """
    Scrape follower counts for the profiles a page links to.

    Args:
        client: Shared signal client
        html: Markup of the analyzed page
        timeout: Seconds to wait for the scrapes as a group

    Returns:
        SocialFollowers; platforms whose scrape failed or timed out are None
    """
    handles = extract_social_handles(html)

    jobs: Dict[str, Tuple[str, List[Pattern]]] = {}
    if handles.twitter:
        jobs["twitter"] = (NITTER_URL.format(handle=handles.twitter), [FOLLOWERS_PATTERN])
    if handles.linkedin:
        jobs["linkedin"] = (LINKEDIN_URL.format(handle=handles.linkedin), [FOLLOWERS_PATTERN])
    if handles.facebook:
        jobs["facebook"] = (
            FACEBOOK_URL.format(handle=handles.facebook),
            [LIKES_PATTERN, FOLLOWERS_PATTERN],
        )

    counts: Dict[str, Optional[int]] = {}
    if jobs:
        tasks = {
            asyncio.ensure_future(_scrape_count(client, url, patterns)): platform
            for platform, (url, patterns) in jobs.items()
        }
        done, pending = await asyncio.wait(tasks.keys(), timeout=timeout)

        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            logger.info(f"Social scrape timed out for: {', '.join(tasks[t] for t in pending)}")

        for task in done:
            if task.exception() is None:
                counts[tasks[task]] = task.result()

    followers = SocialFollowers(
        twitter_handle=handles.twitter,
        twitter=counts.get("twitter"),
        linkedin=counts.get("linkedin"),
        facebook=counts.get("facebook"),
    )
    logger.debug(
        f"Social followers: total={followers.total_followers}, "
        f"platforms={followers.platforms_with_data}"
    )
    return followers


# ============================================================================
# BRAND MENTIONS
# ============================================================================

def parse_reddit_mentions(data: Dict[str, Any]) -> Tuple[int, Tuple[str, ...]]:
    """
    Count Reddit search hits and the subreddits they come from.

    Returns:
        Tuple of (mention count, up to five most frequent subreddits)
    """
    posts = ((data or {}).get("data") or {}).get("children") or []
    subreddits = Counter(
        (post.get("data") or {}).get("subreddit")
        for post in posts[:MENTION_SAMPLE_SIZE]
    )
    subreddits.pop(None, None)
    top = tuple(name for name, _ in subreddits.most_common(TOP_SUBREDDITS))
    return len(posts), top


def parse_hn_mentions(data: Dict[str, Any]) -> Tuple[int, int]:
    """
    Count Hacker News stories and their points.

    Returns:
        Tuple of (total hits reported by Algolia, points of the first stories)
    """
    data = data or {}
    hits = data.get("hits") or []
    points = sum(hit.get("points") or 0 for hit in hits[:MENTION_SAMPLE_SIZE])
    return data.get("nbHits") or len(hits), points


async def _search_json(client: SignalClient, url: str, params: Dict[str, Any]) -> Dict[str, Any]:
    try:
        return await client.get_json(url, params=params, retry=False)
    except (AdapterError, httpx.HTTPError) as e:
        logger.warning(f"Mention search failed ({url}): {e}")
        return {}


async def fetch_brand_mentions(client: SignalClient, domain: str) -> BrandMentions:
    """Reddit and Hacker News mentions of a domain, searched concurrently."""
    reddit_data, hn_data = await asyncio.gather(
        _search_json(client, REDDIT_SEARCH_URL, {"q": domain, "sort": "relevance", "limit": 25}),
        _search_json(client, HN_SEARCH_URL, {"query": domain, "tags": "story", "hitsPerPage": 25}),
    )

    reddit_mentions, top_subreddits = parse_reddit_mentions(reddit_data)
    hn_mentions, hn_points = parse_hn_mentions(hn_data)

    mentions = BrandMentions(
        reddit_mentions=reddit_mentions,
        top_subreddits=top_subreddits,
        hn_mentions=hn_mentions,
        hn_points=hn_points,
    )
    logger.info(f"Brand mentions for {domain}: reddit={reddit_mentions}, hn={hn_mentions}")
    return mentions
