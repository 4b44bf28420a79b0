"""
Domain History Lookups

- Archive.org Wayback Machine CDX API: first snapshot and snapshot volume
- RDAP (rdap.org): registrar, registration/expiry dates, nameservers

Ages are computed against a reference date (today unless one is passed in)
so parsing stays deterministic under test.
"""

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional

import httpx

from ..models import RdapFacts, WaybackHistory
from .client import AdapterError, SignalClient

logger = logging.getLogger(__name__)

WAYBACK_CDX_URL = "https://web.archive.org/cdx/search/cdx"
RDAP_URL = "https://rdap.org/domain/{domain}"

DAYS_PER_YEAR = 365.25
# Used when the snapshot count query fails but the first snapshot is known
SNAPSHOTS_PER_YEAR_ESTIMATE = 50


def years_between(start: date, end: date) -> float:
    return max(0.0, (end - start).days / DAYS_PER_YEAR)


# ============================================================================
# WAYBACK MACHINE
# ============================================================================

def parse_wayback_timestamp(timestamp: str) -> Optional[date]:
    """CDX timestamps look like 20050314093012 (YYYYMMDDhhmmss)."""
    try:
        return datetime.strptime(str(timestamp)[:8], "%Y%m%d").date()
    except ValueError:
        return None


def parse_wayback_history(
    first_rows: Any,
    count_rows: Optional[Any] = None,
    today: Optional[date] = None,
) -> WaybackHistory:
    """
    Build WaybackHistory from CDX JSON rows.

    The first row of a CDX JSON response is the header, so a response with
    one row or fewer means the domain was never archived.

    Args:
        first_rows: Rows of the earliest-snapshot query
        count_rows: Rows of the collapsed count query, None if it failed
        today: Reference date for the age

    Returns:
        WaybackHistory (empty when there is no snapshot)
    """
    if not isinstance(first_rows, list) or len(first_rows) <= 1:
        return WaybackHistory()

    first_row = first_rows[1]
    if not isinstance(first_row, list) or not first_row:
        return WaybackHistory()

    first_snapshot = parse_wayback_timestamp(first_row[0])
    if first_snapshot is None:
        return WaybackHistory()

    age = years_between(first_snapshot, today or date.today())

    if isinstance(count_rows, list):
        snapshot_count = max(0, len(count_rows) - 1)
    else:
        snapshot_count = round(age * SNAPSHOTS_PER_YEAR_ESTIMATE)

    return WaybackHistory(
        first_snapshot=first_snapshot,
        snapshot_count=snapshot_count,
        age_years=round(age, 1),
    )


async def fetch_wayback_history(
    client: SignalClient,
    domain: str,
    today: Optional[date] = None,
) -> WaybackHistory:
    """
    Look up a domain's archive history.

    Args:
        client: Shared signal client
        domain: Bare domain
        today: Reference date for the age

    Returns:
        WaybackHistory, empty when the archive has nothing or is unreachable
    """
    try:
        first_rows = await client.get_json(
            WAYBACK_CDX_URL,
            params={
                "url": domain,
                "output": "json",
                "limit": 1,
                "fl": "timestamp",
                "from": "19900101",
            },
        )
    except (AdapterError, httpx.HTTPError) as e:
        logger.warning(f"Wayback lookup failed for {domain}: {e}")
        return WaybackHistory()

    count_rows = None
    try:
        count_rows = await client.get_json(
            WAYBACK_CDX_URL,
            params={
                "url": domain,
                "output": "json",
                "fl": "timestamp",
                "collapse": "timestamp:6",
                "limit": 1000,
            },
        )
    except (AdapterError, httpx.HTTPError) as e:
        logger.debug(f"Wayback snapshot count failed for {domain}, estimating from age: {e}")

    history = parse_wayback_history(first_rows, count_rows, today=today)
    if history.has_history:
        logger.info(
            f"Wayback: {domain} first indexed {history.first_snapshot.year}, "
            f"age {history.age_years} years, {history.snapshot_count} snapshots"
        )
    return history


# ============================================================================
# RDAP
# ============================================================================

def _parse_event_date(value: str) -> Optional[date]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def _vcard_entry(entity: Dict[str, Any], field_name: str) -> Optional[List[Any]]:
    vcard = entity.get("vcardArray") or []
    if len(vcard) < 2 or not isinstance(vcard[1], list):
        return None
    for entry in vcard[1]:
        if isinstance(entry, list) and entry and entry[0] == field_name:
            return entry
    return None


def parse_rdap(data: Dict[str, Any], today: Optional[date] = None) -> RdapFacts:
    """
    Build RdapFacts from an RDAP domain response.

    Args:
        data: Decoded RDAP JSON
        today: Reference date for age and expiry

    Returns:
        RdapFacts
    """
    data = data or {}
    today = today or date.today()

    registrar = None
    registrant_country = None
    for entity in data.get("entities") or []:
        roles = entity.get("roles") or []
        if "registrar" in roles:
            fn = _vcard_entry(entity, "fn")
            public_ids = entity.get("publicIds") or []
            registrar = (fn[3] if fn and len(fn) > 3 else None) or (
                public_ids[0].get("identifier") if public_ids else None
            )
        if "registrant" in roles:
            adr = _vcard_entry(entity, "adr")
            if adr and len(adr) > 3 and isinstance(adr[3], list) and len(adr[3]) > 6:
                registrant_country = adr[3][6] or None

    registration_date = expiration_date = last_changed = None
    for event in data.get("events") or []:
        action = event.get("eventAction")
        event_date = _parse_event_date(event.get("eventDate"))
        if action == "registration":
            registration_date = event_date
        elif action == "expiration":
            expiration_date = event_date
        elif action in ("last changed", "last update of RDAP database"):
            last_changed = event_date

    nameservers = tuple(
        ns["ldhName"].lower() for ns in data.get("nameservers") or [] if ns.get("ldhName")
    )

    return RdapFacts(
        registrar=registrar,
        registration_date=registration_date,
        expiration_date=expiration_date,
        last_changed=last_changed,
        registrant_country=registrant_country,
        nameservers=nameservers,
        status=tuple(data.get("status") or ()),
        verified_age_years=(
            round(years_between(registration_date, today), 1) if registration_date else None
        ),
        days_until_expiry=(expiration_date - today).days if expiration_date else None,
    )


async def fetch_rdap(
    client: SignalClient,
    domain: str,
    today: Optional[date] = None,
) -> RdapFacts:
    """Registry data for a domain. Empty RdapFacts when the lookup fails."""
    try:
        data = await client.get_json(RDAP_URL.format(domain=domain))
    except (AdapterError, httpx.HTTPError) as e:
        logger.warning(f"RDAP lookup failed for {domain}: {e}")
        return RdapFacts()

    facts = parse_rdap(data, today=today)
    logger.info(
        f"RDAP: {domain} registrar={facts.registrar}, age={facts.verified_age_years}yrs, "
        f"expiry={facts.days_until_expiry}days"
    )
    return facts
