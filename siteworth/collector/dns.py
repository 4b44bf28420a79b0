"""
DNS Lookups (Google DNS-over-HTTPS)

MX, SPF, DMARC and nameserver records for a domain.
"""

import asyncio
import logging
from typing import Any, Dict, List

import httpx

from ..models import DnsFacts
from .client import AdapterError, SignalClient

logger = logging.getLogger(__name__)

DOH_URL = "https://dns.google/resolve"


def answer_data(response: Dict[str, Any]) -> List[str]:
    """The data strings of a DoH response's Answer section."""
    answers = (response or {}).get("Answer") or []
    return [str(answer.get("data", "")) for answer in answers if isinstance(answer, dict)]


def parse_dns(
    mx: Dict[str, Any],
    txt: Dict[str, Any],
    dmarc: Dict[str, Any],
    ns: Dict[str, Any],
) -> DnsFacts:
    """
    Combine the four DoH responses into DnsFacts.

    Args:
        mx: Response for type MX
        txt: Response for type TXT
        dmarc: Response for _dmarc.<domain> TXT
        ns: Response for type NS

    Returns:
        DnsFacts
    """
    mx_records = answer_data(mx)
    return DnsFacts(
        has_mx_records=len(mx_records) > 0,
        mx_count=len(mx_records),
        has_spf=any("v=spf1" in record for record in answer_data(txt)),
        has_dmarc=len(answer_data(dmarc)) > 0,
        nameservers=tuple(record.rstrip(".").lower() for record in answer_data(ns)),
    )


async def _resolve(client: SignalClient, name: str, record_type: str) -> Dict[str, Any]:
    try:
        return await client.get_json(DOH_URL, params={"name": name, "type": record_type})
    except (AdapterError, httpx.HTTPError) as e:
        logger.warning(f"DNS {record_type} lookup failed for {name}: {e}")
        return {}


async def fetch_dns(client: SignalClient, domain: str) -> DnsFacts:
    """Resolve the mail and nameserver records of a domain."""
    mx, txt, dmarc, ns = await asyncio.gather(
        _resolve(client, domain, "MX"),
        _resolve(client, domain, "TXT"),
        _resolve(client, f"_dmarc.{domain}", "TXT"),
        _resolve(client, domain, "NS"),
    )
    facts = parse_dns(mx, txt, dmarc, ns)
    logger.debug(
        f"DNS for {domain}: mx={facts.mx_count}, spf={facts.has_spf}, dmarc={facts.has_dmarc}"
    )
    return facts
