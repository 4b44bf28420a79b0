"""HTTP API for SiteWorth."""
