"""
Domain Registration Helpers

Alternative TLDs and name variations for an analyzed domain, plus a rough
value estimate for names that are not registered yet.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from urllib.parse import quote


# ============================================================================
# CONSTANTS
# ============================================================================

# Registration price ranges in USD per year
TLD_PRICES: Dict[str, Tuple[int, int]] = {
    ".com": (9, 15),
    ".net": (10, 15),
    ".org": (10, 15),
    ".io": (30, 50),
    ".co": (25, 35),
    ".ai": (70, 100),
    ".app": (12, 20),
    ".dev": (12, 20),
    ".tech": (5, 15),
    ".online": (3, 10),
    ".site": (3, 10),
    ".xyz": (2, 5),
}
DEFAULT_TLD_PRICE: Tuple[int, int] = (10, 20)

ALTERNATIVE_TLDS: Tuple[str, ...] = (
    ".com", ".io", ".co", ".net", ".org", ".app", ".dev", ".ai", ".tech", ".online",
)
PREMIUM_TLDS = (".ai", ".io")

NAME_VARIATIONS: Tuple[str, ...] = (
    "get{name}", "{name}app", "{name}hq", "my{name}",
    "the{name}", "{name}online", "{name}now", "try{name}",
)
MAX_NAME_VARIATIONS = 4
PREMIUM_NAME_LENGTH = 5

REGISTRAR_SEARCH_URLS: Dict[str, str] = {
    "namecheap": "https://www.namecheap.com/domains/registration/results/?domain={domain}",
    "godaddy": "https://www.godaddy.com/domainsearch/find?domainToCheck={domain}",
    "porkbun": "https://porkbun.com/checkout/search?q={domain}",
}

UNREGISTERED_TLD_MULTIPLIERS: Dict[str, int] = {
    ".com": 10,
    ".io": 5,
    ".ai": 8,
    ".co": 3,
    ".net": 2,
    ".org": 2,
}
VALUABLE_WORDS = ("app", "web", "tech", "data", "cloud", "pay", "buy", "shop", "code", "dev")


# ============================================================================
# SUGGESTIONS
# ============================================================================

@dataclass(frozen=True)
class DomainSuggestion:
    domain: str
    tld: str
    price: str
    registrar: str
    search_url: str
    is_premium: bool = False
    available: Optional[bool] = None


@dataclass(frozen=True)
class DomainSuggestions:
    analyzed_domain: str
    alternative_tlds: Tuple[DomainSuggestion, ...] = ()
    name_variations: Tuple[DomainSuggestion, ...] = ()
    premium_listings: Tuple[DomainSuggestion, ...] = ()


@dataclass(frozen=True)
class UnregisteredDomainValue:
    estimated_value: int
    factors: Tuple[str, ...] = field(default_factory=tuple)


def registrar_search_url(domain: str, registrar: str = "namecheap") -> str:
    return REGISTRAR_SEARCH_URLS[registrar].format(domain=quote(domain, safe=""))


def _price_label(tld: str) -> str:
    low, high = TLD_PRICES.get(tld, DEFAULT_TLD_PRICE)
    return f"${low}-{high}/yr"


def _split_domain(domain: str) -> Tuple[str, str]:
    name, _, rest = domain.lower().partition(".")
    return name, f".{rest}" if rest else ""


def generate_domain_suggestions(domain: str, is_taken: bool = True) -> DomainSuggestions:
    """
    Suggest alternative registrations for a domain.

    Args:
        domain: Analyzed domain, e.g. "example.com"
        is_taken: Whether the analyzed domain is already registered

    Returns:
        DomainSuggestions with alternative TLDs, name variations and, for
        short names, an aftermarket listing
    """
    name, current_tld = _split_domain(domain)

    alternatives = tuple(
        DomainSuggestion(
            domain=f"{name}{tld}",
            tld=tld,
            price=_price_label(tld),
            registrar="namecheap",
            search_url=registrar_search_url(f"{name}{tld}"),
            is_premium=tld in PREMIUM_TLDS,
        )
        for tld in ALTERNATIVE_TLDS
        if tld != current_tld
    )

    variations = tuple(
        DomainSuggestion(
            domain=f"{pattern.format(name=name)}.com",
            tld=".com",
            price=_price_label(".com"),
            registrar="namecheap",
            search_url=registrar_search_url(f"{pattern.format(name=name)}.com"),
        )
        for pattern in NAME_VARIATIONS[:MAX_NAME_VARIATIONS]
    )

    premium: Tuple[DomainSuggestion, ...] = ()
    if len(name) <= PREMIUM_NAME_LENGTH:
        premium = (
            DomainSuggestion(
                domain=domain.lower(),
                tld=current_tld,
                price="Premium - Check Price",
                registrar="godaddy",
                search_url=registrar_search_url(domain.lower(), "godaddy"),
                is_premium=True,
                available=not is_taken,
            ),
        )

    return DomainSuggestions(
        analyzed_domain=domain.lower(),
        alternative_tlds=alternatives,
        name_variations=variations,
        premium_listings=premium,
    )


def estimate_unregistered_domain_value(name: str, tld: str) -> UnregisteredDomainValue:
    """
    Rough resale value of an unregistered name.

    Args:
        name: Name without TLD
        tld: TLD with or without the leading dot

    Returns:
        UnregisteredDomainValue with the human-readable factors applied
    """
    if not tld.startswith("."):
        tld = f".{tld}"
    tld = tld.lower()

    value = 100.0
    factors: List[str] = []

    if len(name) <= 3:
        value += 5000
        factors.append("Ultra-short (3 chars or less): +$5,000")
    elif len(name) <= 5:
        value += 1000
        factors.append("Short domain (4-5 chars): +$1,000")
    elif len(name) <= 8:
        value += 200
        factors.append("Moderate length (6-8 chars): +$200")

    multiplier = UNREGISTERED_TLD_MULTIPLIERS.get(tld, 1)
    if multiplier > 1:
        factors.append(f"Premium TLD ({tld}): {multiplier}x multiplier")
    value *= multiplier

    if any(word in name.lower() for word in VALUABLE_WORDS):
        value += 500
        factors.append("Contains valuable keyword: +$500")

    if not any(ch.isdigit() or ch == "-" for ch in name):
        value += 100
        factors.append("Clean (no numbers/hyphens): +$100")

    return UnregisteredDomainValue(estimated_value=round(value), factors=tuple(factors))
