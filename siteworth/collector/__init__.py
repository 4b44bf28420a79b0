"""
External Signal Adapters

Async wrappers around third-party lookups. Every fetch_* function returns
a fixed-shape record (or None for PageSpeed) and never raises for a failed
lookup; the parse_* functions hold the response handling and are pure.
"""

from .client import AdapterError, RetryConfig, SignalClient
from .crawlability import count_sitemap_urls, fetch_crawlability, parse_robots_txt
from .dns import fetch_dns, parse_dns
from .history import fetch_rdap, fetch_wayback_history, parse_rdap, parse_wayback_history
from .performance import fetch_crux, fetch_pagespeed, parse_crux, parse_pagespeed
from .ranking import (
    fetch_backlinks,
    fetch_indexed_pages,
    fetch_tranco_rank,
    parse_commoncrawl,
    parse_indexed_pages,
    parse_tranco,
)
from .social import (
    extract_social_handles,
    fetch_brand_mentions,
    fetch_social_followers,
    parse_follower_count,
    parse_hn_mentions,
    parse_reddit_mentions,
)
from .ssl_labs import fetch_ssl_labs, parse_ssl_labs

__all__ = [
    "AdapterError",
    "RetryConfig",
    "SignalClient",
    "count_sitemap_urls",
    "fetch_crawlability",
    "parse_robots_txt",
    "fetch_dns",
    "parse_dns",
    "fetch_rdap",
    "fetch_wayback_history",
    "parse_rdap",
    "parse_wayback_history",
    "fetch_crux",
    "fetch_pagespeed",
    "parse_crux",
    "parse_pagespeed",
    "fetch_backlinks",
    "fetch_indexed_pages",
    "fetch_tranco_rank",
    "parse_commoncrawl",
    "parse_indexed_pages",
    "parse_tranco",
    "extract_social_handles",
    "fetch_brand_mentions",
    "fetch_social_followers",
    "parse_follower_count",
    "parse_hn_mentions",
    "parse_reddit_mentions",
    "fetch_ssl_labs",
    "parse_ssl_labs",
]
