#!/usr/bin/env python3
"""
Website Valuation Runner

Runs a complete valuation for one URL and prints a summary (or the full
analysis as JSON).

Usage:
    # Optional: a PageSpeed API key raises the anonymous quota
    export PAGESPEED_API_KEY=your_key

    # Run analysis:
    python scripts/run_analysis.py example.com

    # Full analysis as JSON:
    python scripts/run_analysis.py https://example.com --json
"""

import asyncio
import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from siteworth.orchestrator import analyze_website
from siteworth.utils.config import get_settings

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stdout,
)
logger = logging.getLogger(__name__)

logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


def print_summary(analysis) -> None:
    """Human-readable summary of an analysis."""
    valuation = analysis.valuation
    breakdown = valuation.breakdown

    print("\n" + "="*70)
    print(f"VALUATION: {analysis.domain.domain}")
    print("="*70)
    print(f"Estimated value: ${analysis.estimated_value:,}")
    print(f"Range: ${analysis.value_range.min:,} - ${analysis.value_range.max:,}")
    print(f"Confidence: {analysis.confidence_score}%")
    print(f"Industry: {analysis.industry}")

    print("\n" + "-"*70)
    print("BREAKDOWN")
    print("-"*70)
    print(f"  Domain:           ${breakdown.domain_value:,.0f}")
    print(f"  Traffic:          ${breakdown.traffic_value:,.0f}")
    print(f"  Content:          ${breakdown.content_value:,.0f}")
    print(f"  Technical:        ${breakdown.technical_value:,.0f}")
    print(f"  Brand:            ${breakdown.brand_value:,.0f}")
    print(f"  Revenue multiple: ${breakdown.revenue_multiple:,.0f}")
    print(f"  Quality multiplier: x{valuation.quality_multiplier}")

    traffic = analysis.traffic
    print("\n" + "-"*70)
    print("TRAFFIC")
    print("-"*70)
    print(f"  ~{traffic.monthly_visitors:,} visitors/month ({traffic.tier.value})")
    print(f"  Confidence: {traffic.confidence}%")
    for signal in traffic.signals:
        print(f"    [{signal.impact.value:>8}] {signal.signal} ({signal.weight:+})")

    scores = analysis.scores
    print("\n" + "-"*70)
    print(f"SCORES (overall {scores.overall}/100)")
    print("-"*70)
    for name in ("domain", "performance", "technical", "security", "seo", "content", "social", "monetization"):
        print(f"  {name:<13} {getattr(scores, name):>3}")

    if analysis.recommendations:
        print("\n" + "-"*70)
        print("RECOMMENDATIONS")
        print("-"*70)
        for rec in analysis.recommendations:
            print(f"  [{rec.impact.value}/{rec.effort.value}] {rec.title} (+${rec.potential_value_increase:,})")

    print("\n" + "="*70)
    print(f"Sources: {', '.join(analysis.data_sources_used)}")
    print(f"Duration: {analysis.analysis_time_ms / 1000:.1f} seconds")
    print("="*70 + "\n")


async def run_analysis(url: str, as_json: bool = False) -> int:
    """Run one analysis and print it. Returns the process exit code."""
    load_dotenv()
    settings = get_settings()

    try:
        analysis = await analyze_website(url, settings=settings)
    except ValueError as e:
        print(f"ERROR: {e}")
        return 2

    if as_json:
        print(json.dumps(analysis.to_dict(), indent=2))
    else:
        print_summary(analysis)
    return 0


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Estimate the value of a website"
    )
    parser.add_argument(
        "url",
        help="URL or domain to analyze (e.g., example.com)"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full analysis as JSON"
    )

    args = parser.parse_args()

    if args.json:
        # Keep stdout clean for the JSON document
        logging.getLogger().setLevel(logging.WARNING)

    sys.exit(asyncio.run(run_analysis(args.url, as_json=args.json)))


if __name__ == "__main__":
    main()
