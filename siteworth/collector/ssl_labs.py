"""
SSL Labs Assessment

Reads cached SSL Labs reports (fromCache=on). A report that is still
running counts as unavailable; no polling is done.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

from ..models import SSLFacts
from .client import AdapterError, SignalClient

logger = logging.getLogger(__name__)

SSL_LABS_URL = "https://api.ssllabs.com/api/v3/analyze"

# (endpoint details flag, vulnerability name)
VULNERABILITY_FLAGS = (
    ("vulnBeast", "BEAST"),
    ("poodle", "POODLE"),
    ("heartbleed", "Heartbleed"),
    ("freak", "FREAK"),
    ("logjam", "Logjam"),
    ("drownVulnerable", "DROWN"),
)
PREFERRED_PROTOCOLS = ("TLS 1.3", "TLS 1.2")


def _best_protocol(protocols) -> Optional[str]:
    names = [f"{p.get('name')} {p.get('version')}" for p in protocols or []]
    for preferred in PREFERRED_PROTOCOLS:
        if preferred in names:
            return preferred
    return names[0] if names else None


def parse_ssl_labs(data: Dict[str, Any], now: Optional[datetime] = None) -> SSLFacts:
    """
    Build SSLFacts from an analyze response.

    Args:
        data: Decoded SSL Labs response
        now: Reference time for certificate expiry

    Returns:
        SSLFacts; analysis_complete is False unless the status is READY with
        at least one endpoint
    """
    data = data or {}
    endpoints = data.get("endpoints") or []
    if data.get("status") != "READY" or not endpoints:
        return SSLFacts()

    endpoint = endpoints[0]
    details = endpoint.get("details") or {}

    expires_in = None
    not_after = (details.get("cert") or {}).get("notAfter")
    if not_after:
        # notAfter is epoch milliseconds
        expiry = datetime.fromtimestamp(not_after / 1000, tz=timezone.utc)
        expires_in = (expiry - (now or datetime.now(timezone.utc))).days

    return SSLFacts(
        grade=endpoint.get("grade"),
        has_warnings=bool(endpoint.get("hasWarnings")),
        protocol=_best_protocol(details.get("protocols")),
        key_strength=(details.get("key") or {}).get("strength"),
        supports_hsts=(details.get("hstsPolicy") or {}).get("status") == "present",
        cert_expires_in_days=expires_in,
        vulnerabilities=tuple(name for flag, name in VULNERABILITY_FLAGS if details.get(flag)),
        analysis_complete=True,
    )


async def fetch_ssl_labs(client: SignalClient, domain: str) -> SSLFacts:
    try:
        data = await client.get_json(
            SSL_LABS_URL,
            params={"host": domain, "fromCache": "on", "maxAge": 24},
        )
    except (AdapterError, httpx.HTTPError) as e:
        logger.warning(f"SSL Labs lookup failed for {domain}: {e}")
        return SSLFacts()

    status = (data or {}).get("status")
    if status == "ERROR":
        logger.warning(f"SSL Labs error for {domain}: {data.get('statusMessage')}")
    elif status in ("DNS", "IN_PROGRESS"):
        logger.info(f"SSL Labs: analysis of {domain} still in progress")

    facts = parse_ssl_labs(data)
    if facts.analysis_complete:
        logger.info(f"SSL Labs: {domain} grade={facts.grade}, protocol={facts.protocol}")
    return facts
