"""
Test Suite for the Traffic Estimator

Tests visitor estimation, tiers, confidence and the signal audit trail.
"""

import math

import pytest

from siteworth.models import (
    ContentFacts,
    DomainFacts,
    PerformanceFacts,
    RankingFacts,
    SeoFacts,
    SignalImpact,
    SocialFacts,
    SocialFollowers,
    TechnologyFacts,
    TrafficEstimate,
    TrafficTier,
)
from siteworth.scoring import classify_traffic_tier, estimate_traffic


def _estimate(domain, performance=None, ranking=None, followers=None, **overrides):
    facts = {
        "seo": SeoFacts(),
        "content": ContentFacts(),
        "social": SocialFacts(),
        "technology": TechnologyFacts(),
    }
    facts.update(overrides)
    return estimate_traffic(
        domain,
        performance,
        facts["seo"],
        facts["content"],
        facts["social"],
        facts["technology"],
        ranking=ranking,
        social_followers=followers,
    )


class TestRankedEstimate:
    """A known popularity rank dominates the estimate."""

    def test_top_100_rank_is_very_high(self, example_domain):
        traffic = _estimate(example_domain, ranking=RankingFacts(rank=50))

        assert traffic.tier == TrafficTier.VERY_HIGH
        assert traffic.monthly_visitors > 10_000_000, (
            f"Expected more than 10M visitors, got {traffic.monthly_visitors:,}"
        )

    def test_rank_50_formula(self, example_domain):
        """Base traffic from rank, with the quality boost capped at 2x."""
        traffic = _estimate(example_domain, ranking=RankingFacts(rank=50))
        expected = round(10 ** (8.5 - math.log10(50) * 0.9) * 2)

        assert traffic.monthly_visitors == expected

    def test_rank_dominates_unranked(self, example_domain):
        ranked = _estimate(example_domain, ranking=RankingFacts(rank=50))
        unranked = _estimate(example_domain)

        assert ranked.monthly_visitors >= unranked.monthly_visitors * 1000

    def test_rank_signal_recorded_first(self, example_domain):
        traffic = _estimate(example_domain, ranking=RankingFacts(rank=50))

        first = traffic.signals[0]
        assert first.signal == "Tranco Top 100 (#50)"
        assert first.weight == 150
        assert first.impact == SignalImpact.POSITIVE

    def test_deep_rank_uses_top_million_label(self, example_domain):
        traffic = _estimate(example_domain, ranking=RankingFacts(rank=250_000))
        assert traffic.signals[0].signal == "Tranco Top 1M (#250,000)"

    def test_unranked_sentinel(self, example_domain):
        """Rank None and rank 0 both mean unranked."""
        none_rank = _estimate(example_domain, ranking=RankingFacts(rank=None))
        zero_rank = _estimate(example_domain, ranking=RankingFacts(rank=0))
        no_ranking = _estimate(example_domain)

        assert none_rank == zero_rank == no_ranking


class TestUnrankedEstimate:
    """Heuristic estimate from indirect signals."""

    def test_empty_site(self, example_domain):
        """Only negative signals: score floors at zero, 100 visitors."""
        traffic = _estimate(example_domain)

        assert traffic.monthly_visitors == 100
        assert traffic.tier == TrafficTier.VERY_LOW
        assert [s.signal for s in traffic.signals] == [
            "New domain (< 1 year)",
            "No structured data",
        ]
        assert all(s.impact == SignalImpact.NEGATIVE for s in traffic.signals)

    def test_age_is_monotonic(self):
        previous = -1
        for age in (0, 0.5, 1, 2, 4, 5, 9, 10, 15, 25):
            domain = DomainFacts(
                domain="example.com", tld=".com", tld_score=100, length=7, age_years=age
            )
            visitors = _estimate(domain).monthly_visitors
            assert visitors >= previous, f"Visitors dropped at age {age}: {visitors} < {previous}"
            previous = visitors

    def test_multiplier_is_capped(self, good_performance):
        """Many strong signals cannot exceed the score and multiplier caps."""
        legendary = DomainFacts(
            domain="acmewidgets.com", tld=".com", tld_score=100, length=11,
            age_years=20, archive_snapshots=5000,
        )
        traffic = _estimate(
            legendary,
            good_performance,
            followers=SocialFollowers(twitter=20_000_000),
            seo=SeoFacts(estimated_page_count=50_000, structured_data_types=("Article",)),
            content=ContentFacts(word_count=8000),
            technology=TechnologyFacts(analytics=("Google Analytics",), cdns=("Cloudflare",)),
        )

        ceiling = round(100 * 10 ** (1.5 * 3.7) * 10)
        assert traffic.monthly_visitors <= ceiling

    def test_follower_signal_label(self, example_domain):
        traffic = _estimate(example_domain, followers=SocialFollowers(twitter=2_000_000))
        labels = [s.signal for s in traffic.signals]

        assert "2.0M social followers" in labels

    def test_neutral_signals(self, example_domain):
        traffic = _estimate(
            example_domain,
            content=ContentFacts(word_count=600),
            social=SocialFacts(has_facebook=True, has_twitter=True, has_linkedin=True),
        )
        neutral = {s.signal for s in traffic.signals if s.impact == SignalImpact.NEUTRAL}

        assert neutral == {"Moderate content", "Moderate social presence"}


class TestConfidence:
    """Confidence starts at 35 and never exceeds 95."""

    def test_baseline(self, example_domain):
        assert _estimate(example_domain).confidence == 35

    def test_every_signal_is_capped_at_95(self, aged_domain):
        performance = PerformanceFacts(
            performance_score=50, accessibility_score=50, seo_score=50, best_practices_score=50
        )
        traffic = _estimate(
            aged_domain,
            performance,
            ranking=RankingFacts(rank=5000),
            followers=SocialFollowers(linkedin=50_000),
            seo=SeoFacts(estimated_page_count=300),
        )

        assert traffic.confidence == 95

    def test_estimate_clamps_confidence(self):
        traffic = TrafficEstimate(monthly_visitors=-5, tier=TrafficTier.LOW, confidence=140)

        assert traffic.confidence == 95
        assert traffic.monthly_visitors == 0


class TestTiers:
    """Visitor counts map onto the tier ladder."""

    @pytest.mark.parametrize("visitors,tier", [
        (0, TrafficTier.VERY_LOW),
        (999, TrafficTier.VERY_LOW),
        (1_000, TrafficTier.LOW),
        (10_000, TrafficTier.MEDIUM),
        (100_000, TrafficTier.HIGH),
        (1_000_000, TrafficTier.VERY_HIGH),
        (50_000_000, TrafficTier.VERY_HIGH),
    ])
    def test_classify(self, visitors, tier):
        assert classify_traffic_tier(visitors) == tier

    def test_pageviews(self):
        traffic = TrafficEstimate(monthly_visitors=1000, tier=TrafficTier.LOW, confidence=50)
        assert traffic.estimated_pageviews == 2500

    def test_idempotent(self, aged_domain, good_performance):
        first = _estimate(aged_domain, good_performance, ranking=RankingFacts(rank=1234))
        second = _estimate(aged_domain, good_performance, ranking=RankingFacts(rank=1234))
        assert first == second
