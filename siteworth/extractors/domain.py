"""
Domain Extraction

URL normalisation and the shape of the domain name: TLD, name length,
character classes and valuable keywords.
"""

import logging
import re
from urllib.parse import urlparse

from ..models import DomainFacts
from ..scoring.tables import DEFAULT_TABLES, ValuationTables

logger = logging.getLogger(__name__)

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_WWW_RE = re.compile(r"^(https?://)www\.", re.IGNORECASE)


def normalize_url(raw_url: str) -> str:
    """
    Normalise user input into an https URL without a www. prefix.

    Args:
        raw_url: URL or bare domain as typed by a user

    Returns:
        Normalised URL, e.g. "https://example.com"

    Raises:
        ValueError: If the input is empty or has no host
    """
    url = (raw_url or "").strip()
    if not url:
        raise ValueError("URL must not be empty")
    if not _SCHEME_RE.match(url):
        url = f"https://{url}"
    url = _WWW_RE.sub(r"\1", url)

    if not urlparse(url).hostname:
        raise ValueError(f"Invalid URL: {raw_url!r}")
    return url


def extract_domain(url: str) -> str:
    """Hostname without www., lower-cased."""
    host = urlparse(url if _SCHEME_RE.match(url) else f"https://{url}").hostname or ""
    if host.startswith("www."):
        host = host[4:]
    return host.lower()


def analyze_domain(domain: str, tables: ValuationTables = DEFAULT_TABLES) -> DomainFacts:
    """
    Describe the shape of a domain name.

    History fields (age, first snapshot, snapshot count) start empty; the
    orchestrator fills them in from the archive lookup.

    Args:
        domain: Bare domain, e.g. "shop-24.com"
        tables: Valuation tables (TLD scores and keyword list)

    Returns:
        DomainFacts
    """
    domain = domain.lower().strip(".")
    labels = domain.split(".")
    tld = f".{labels[-1]}"
    name = ".".join(labels[:-1])

    keywords = tuple(keyword for keyword in tables.keyword_values if keyword in name)

    return DomainFacts(
        domain=domain,
        tld=tld,
        tld_score=tables.tld_score(tld),
        length=len(name),
        has_numbers=any(ch.isdigit() for ch in name),
        has_hyphens="-" in name,
        keywords_found=keywords,
    )
