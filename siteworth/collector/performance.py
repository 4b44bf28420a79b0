"""
PageSpeed Insights and Chrome UX Report

Lighthouse lab scores (desktop by default) and CrUX real-user field data,
both read from the PageSpeed Insights v5 API.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from ..models import CruxFacts, CruxMetric, PerformanceFacts
from .client import AdapterError, SignalClient

logger = logging.getLogger(__name__)

PAGESPEED_URL = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"
LIGHTHOUSE_CATEGORIES = ("performance", "accessibility", "seo", "best-practices")

# (metric name, loadingExperience key)
CRUX_METRICS = (
    ("lcp", "LARGEST_CONTENTFUL_PAINT_MS"),
    ("fid", "FIRST_INPUT_DELAY_MS"),
    ("cls", "CUMULATIVE_LAYOUT_SHIFT_SCORE"),
    ("inp", "INTERACTION_TO_NEXT_PAINT"),
    ("ttfb", "EXPERIMENTAL_TIME_TO_FIRST_BYTE"),
)


def _category_score(categories: Dict[str, Any], name: str) -> int:
    score = (categories.get(name) or {}).get("score") or 0
    return round(score * 100)


def _audit_value(audits: Dict[str, Any], name: str) -> float:
    return (audits.get(name) or {}).get("numericValue") or 0


def parse_pagespeed(data: Dict[str, Any]) -> Optional[PerformanceFacts]:
    """
    Build PerformanceFacts from a PageSpeed response.

    Args:
        data: Decoded runPagespeed response

    Returns:
        PerformanceFacts, or None when the response has no Lighthouse result
    """
    lighthouse = (data or {}).get("lighthouseResult")
    if not lighthouse:
        return None

    audits = lighthouse.get("audits") or {}
    categories = lighthouse.get("categories") or {}
    requests = ((audits.get("network-requests") or {}).get("details") or {}).get("items") or []

    return PerformanceFacts(
        performance_score=_category_score(categories, "performance"),
        accessibility_score=_category_score(categories, "accessibility"),
        seo_score=_category_score(categories, "seo"),
        best_practices_score=_category_score(categories, "best-practices"),
        first_contentful_paint=_audit_value(audits, "first-contentful-paint"),
        largest_contentful_paint=_audit_value(audits, "largest-contentful-paint"),
        total_blocking_time=_audit_value(audits, "total-blocking-time"),
        cumulative_layout_shift=_audit_value(audits, "cumulative-layout-shift"),
        speed_index=_audit_value(audits, "speed-index"),
        time_to_interactive=_audit_value(audits, "interactive"),
        server_response_time=_audit_value(audits, "server-response-time"),
        total_byte_weight=int(_audit_value(audits, "total-byte-weight")),
        request_count=len(requests),
    )


def parse_crux(data: Dict[str, Any], form_factor: str = "phone") -> CruxFacts:
    """Read field metrics from a PageSpeed response's loadingExperience block."""
    experience = (data or {}).get("loadingExperience") or {}
    raw_metrics = experience.get("metrics")
    if not raw_metrics:
        return CruxFacts()

    metrics = []
    for name, key in CRUX_METRICS:
        raw = raw_metrics.get(key)
        if not raw:
            continue
        category = raw.get("category")
        metrics.append(CruxMetric(
            name=name,
            percentile=raw.get("percentile"),
            category=category.lower() if category else None,
        ))

    overall = experience.get("overall_category")
    return CruxFacts(
        metrics=tuple(metrics),
        overall_category=overall.lower() if overall else None,
        form_factor=form_factor,
    )


def _pagespeed_params(url: str, strategy: str, categories, api_key: Optional[str]):
    params = [("url", url), ("strategy", strategy)]
    params.extend(("category", category) for category in categories)
    if api_key:
        params.append(("key", api_key))
    return params


async def fetch_pagespeed(
    client: SignalClient,
    url: str,
    strategy: str = "desktop",
    api_key: Optional[str] = None,
) -> Optional[PerformanceFacts]:
    """
    Run Lighthouse through PageSpeed Insights.

    Args:
        client: Shared signal client (handles 429 retries)
        url: Page URL
        strategy: "desktop" or "mobile"
        api_key: Optional Google API key

    Returns:
        PerformanceFacts, or None when the lookup fails
    """
    try:
        data = await client.get_json(
            PAGESPEED_URL,
            params=_pagespeed_params(url, strategy, LIGHTHOUSE_CATEGORIES, api_key),
        )
    except (AdapterError, httpx.HTTPError) as e:
        logger.warning(f"PageSpeed lookup failed for {url}: {e}")
        return None

    facts = parse_pagespeed(data)
    if facts:
        logger.info(f"PageSpeed for {url}: performance={facts.performance_score}")
    return facts


async def fetch_crux(
    client: SignalClient,
    url: str,
    api_key: Optional[str] = None,
) -> CruxFacts:
    """Field data for the mobile form factor. Empty CruxFacts when unavailable."""
    try:
        data = await client.get_json(
            PAGESPEED_URL,
            params=_pagespeed_params(url, "mobile", ("performance",), api_key),
        )
    except (AdapterError, httpx.HTTPError) as e:
        logger.warning(f"CrUX lookup failed for {url}: {e}")
        return CruxFacts()

    facts = parse_crux(data)
    if not facts.has_data:
        logger.info(f"CrUX: no field data available for {url}")
    return facts
