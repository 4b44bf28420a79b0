"""
API Endpoints for Website Valuation

FastAPI app that:
1. Runs a full valuation for a submitted URL and returns the analysis
2. Suggests alternative registrations for a domain, with a value estimate
"""

import logging
import sys
from dataclasses import asdict
from datetime import datetime
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field

from siteworth import __version__
from siteworth.extractors import extract_domain, normalize_url
from siteworth.orchestrator import SignalAdapters, analyze_website
from siteworth.scoring import estimate_unregistered_domain_value, generate_domain_suggestions
from siteworth.utils.config import Settings, get_settings

# Configure logging to stdout
logging.basicConfig(
    level=get_settings().LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stdout,  # Explicitly use stdout
    force=True,  # Override any existing config
)
logger = logging.getLogger(__name__)

# Quiet down chatty loggers
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

# Create FastAPI app
app = FastAPI(
    title="SiteWorth",
    description="Website valuation from domain, markup and public web signals",
    version=__version__,
)


# ============================================================================
# REQUEST MODELS
# ============================================================================

class AnalyzeRequest(BaseModel):
    """Request to value a website."""
    url: str = Field(description="URL or bare domain, e.g. 'example.com'")


class DomainSuggestionsRequest(BaseModel):
    """Request for alternative registrations of a domain."""
    domain: str = Field(description="Domain or URL, e.g. 'example.com'")
    is_taken: bool = Field(
        default=True,
        description="Whether the domain is already registered",
    )


# ============================================================================
# DEPENDENCIES
# ============================================================================

def get_adapters() -> Optional[SignalAdapters]:
    """Live adapters (None lets the orchestrator use its defaults)."""
    return None


# ============================================================================
# API ENDPOINTS
# ============================================================================

@app.get("/")
async def root():
    return {"status": "ok", "service": "SiteWorth"}


@app.get("/health")
async def health(settings: Settings = Depends(get_settings)):
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "version": __version__,
        "environment": settings.ENVIRONMENT,
    }


@app.post("/api/analyze")
async def analyze(
    request: AnalyzeRequest,
    settings: Settings = Depends(get_settings),
    adapters: Optional[SignalAdapters] = Depends(get_adapters),
):
    """
    Value a website.

    Returns the full analysis (facts, scores, traffic estimate, valuation
    and recommendations). An empty or malformed URL is rejected with 400.
    """
    try:
        url = normalize_url(request.url)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Analysis requested: {url}")
    analysis = await analyze_website(url, settings=settings, adapters=adapters)
    return analysis.to_dict()


@app.post("/api/domain-suggestions")
async def domain_suggestions(request: DomainSuggestionsRequest):
    """Alternative TLDs, name variations and an unregistered-value estimate."""
    try:
        domain = extract_domain(normalize_url(request.domain))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if "." not in domain:
        raise HTTPException(status_code=400, detail=f"Not a domain: {request.domain!r}")

    name, _, tld = domain.partition(".")
    suggestions = generate_domain_suggestions(domain, is_taken=request.is_taken)
    estimate = estimate_unregistered_domain_value(name, tld)

    logger.info(f"Domain suggestions for {domain}: {len(suggestions.alternative_tlds)} alternatives")

    return {
        **asdict(suggestions),
        "unregistered_value": asdict(estimate),
    }
