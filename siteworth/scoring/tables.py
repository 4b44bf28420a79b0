"""
Valuation Tables

Policy constants behind the domain, traffic and revenue valuation: TLD
values, keyword dollar values, industry CPMs, length multipliers, value
ceilings, capitalization multiples and the overall score weights.

The numbers are product heuristics rather than measured market data. They
are bundled into one immutable ValuationTables record so tests and callers
can swap in alternate tables without touching module state.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Dict, Mapping, Tuple

from ..models import CATEGORY_WEIGHTS


# ============================================================================
# DEFAULT TABLES
# ============================================================================

# TLD -> (quality score 0-100, base dollar value)
TLD_VALUES: Dict[str, Tuple[int, int]] = {
    ".com": (100, 2000),
    ".org": (85, 1200),
    ".net": (80, 1000),
    ".io": (78, 1500),
    ".co": (72, 800),
    ".ai": (82, 2500),
    ".app": (70, 600),
    ".dev": (70, 600),
    ".tech": (60, 400),
    ".me": (55, 300),
    ".info": (40, 150),
    ".biz": (35, 100),
    ".xyz": (30, 50),
}
DEFAULT_TLD_VALUE: Tuple[int, int] = (30, 50)

# Keyword dollar values grouped by vertical
KEYWORD_CATEGORIES: Dict[str, Dict[str, int]] = {
    "finance": {
        "finance": 5000, "bank": 8000, "loan": 6000, "credit": 5000, "invest": 7000,
        "money": 4000, "pay": 3000, "cash": 3000, "wealth": 4000, "crypto": 5000,
    },
    "tech": {
        "tech": 3000, "software": 4000, "app": 2500, "cloud": 4000, "ai": 5000,
        "data": 3500, "code": 2000, "dev": 2000, "digital": 2500, "cyber": 3000,
    },
    "commerce": {
        "shop": 3500, "store": 3000, "buy": 3000, "sell": 2500, "market": 3000,
        "deal": 2000, "price": 2000, "sale": 2000, "trade": 3000, "auction": 2500,
    },
    "health": {
        "health": 4000, "medical": 5000, "doctor": 4000, "care": 3000, "fitness": 2500,
        "diet": 2000, "wellness": 2500, "pharma": 5000, "dental": 3000, "therapy": 3000,
    },
    "travel": {
        "travel": 3500, "hotel": 4000, "flight": 3500, "tour": 2500, "vacation": 3000,
        "trip": 2000, "booking": 3000, "resort": 3500, "cruise": 3000,
    },
    "real_estate": {
        "home": 3500, "house": 3000, "real": 2000, "estate": 4000, "property": 3500,
        "rent": 2500, "apartment": 2500, "condo": 2000, "land": 2500,
    },
    "legal": {
        "law": 5000, "legal": 4500, "attorney": 5000, "lawyer": 5000, "court": 3000,
    },
    "insurance": {
        "insurance": 6000, "insure": 4000, "policy": 3000, "coverage": 3000,
    },
    "education": {
        "learn": 2000, "edu": 2500, "course": 2000, "school": 2500, "university": 3000,
        "training": 2000, "tutor": 2000, "academy": 2000,
    },
    "general": {
        "best": 2000, "top": 1500, "pro": 1500, "expert": 2000, "premium": 2000,
        "online": 1500, "free": 1500, "fast": 1000, "easy": 1000, "smart": 1500,
    },
}
DEFAULT_KEYWORD_VALUE = 500

# Display-ad CPM in USD by industry
INDUSTRY_CPMS: Dict[str, float] = {
    "finance": 15,
    "insurance": 18,
    "legal": 12,
    "health": 8,
    "technology": 5,
    "ecommerce": 4,
    "travel": 6,
    "education": 4,
    "entertainment": 2,
    "news": 2.5,
    "general": 3,
}

# (max name length, multiplier), first match wins. Longer than every
# bound falls through to LONG_NAME_MULTIPLIER.
LENGTH_MULTIPLIERS: Tuple[Tuple[int, float], ...] = (
    (3, 10.0),
    (5, 5.0),
    (8, 2.0),
    (12, 1.2),
    (15, 1.0),
)
LONG_NAME_MULTIPLIER = 0.5


def _flatten_keywords(categories: Dict[str, Dict[str, int]]) -> Dict[str, int]:
    flat: Dict[str, int] = {}
    for keywords in categories.values():
        flat.update(keywords)
    return flat


# ============================================================================
# TABLE RECORD
# ============================================================================

@dataclass(frozen=True)
class ValuationTables:
    """Immutable bundle of every valuation constant."""
    tld_values: Mapping[str, Tuple[int, int]] = field(
        default_factory=lambda: MappingProxyType(dict(TLD_VALUES))
    )
    default_tld_value: Tuple[int, int] = DEFAULT_TLD_VALUE
    keyword_values: Mapping[str, int] = field(
        default_factory=lambda: MappingProxyType(_flatten_keywords(KEYWORD_CATEGORIES))
    )
    default_keyword_value: int = DEFAULT_KEYWORD_VALUE
    industry_cpms: Mapping[str, float] = field(
        default_factory=lambda: MappingProxyType(dict(INDUSTRY_CPMS))
    )
    default_industry: str = "general"
    length_multipliers: Tuple[Tuple[int, float], ...] = LENGTH_MULTIPLIERS
    long_name_multiplier: float = LONG_NAME_MULTIPLIER

    # Domain adjustments
    age_growth_per_year: float = 0.05
    numbers_penalty: float = 0.7
    hyphens_penalty: float = 0.6

    # Component ceilings (USD)
    content_ceiling: float = 5000
    technical_ceiling: float = 3000
    brand_ceiling: float = 2000
    history_bonus: float = 2000

    # Capitalization conventions
    traffic_months: int = 12
    traffic_multiple: float = 2
    revenue_multiple: float = 30

    # Revenue channel assumptions
    ecommerce_conversion_rate: float = 0.02
    ecommerce_order_value: float = 50
    affiliate_conversion_rate: float = 0.005
    affiliate_commission: float = 5
    subscription_conversion_rate: float = 0.001
    subscription_price: float = 20

    # Overall score blend
    category_weights: Mapping[str, float] = field(
        default_factory=lambda: MappingProxyType(dict(CATEGORY_WEIGHTS))
    )

    def __post_init__(self):
        # Freeze whatever mappings the caller passed in
        for name in ("tld_values", "keyword_values", "industry_cpms", "category_weights"):
            value = getattr(self, name)
            if not isinstance(value, MappingProxyType):
                object.__setattr__(self, name, MappingProxyType(dict(value)))

    def tld_score(self, tld: str) -> int:
        return self.tld_values.get(tld.lower(), self.default_tld_value)[0]

    def tld_base_value(self, tld: str) -> int:
        return self.tld_values.get(tld.lower(), self.default_tld_value)[1]

    def keyword_value(self, keyword: str) -> int:
        return self.keyword_values.get(keyword.lower(), self.default_keyword_value)

    def cpm(self, industry: str) -> float:
        default = self.industry_cpms.get(self.default_industry, 3)
        return self.industry_cpms.get(industry, default)

    def length_multiplier(self, length: int) -> float:
        for max_length, multiplier in self.length_multipliers:
            if length <= max_length:
                return multiplier
        return self.long_name_multiplier

    def evolve(self, **changes) -> "ValuationTables":
        """Return a copy with some constants replaced."""
        return replace(self, **changes)


DEFAULT_TABLES = ValuationTables()
