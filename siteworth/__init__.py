"""
SiteWorth - Website Valuation Engine

Estimates what a website is worth from its domain, its markup and a set of
free third-party signals (PageSpeed, Wayback Machine, DNS, Tranco, SSL Labs,
RDAP and community mentions).
"""

__version__ = "2.1.0"
