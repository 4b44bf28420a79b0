"""
Test Suite for the External Signal Adapters

Tests the pure response parsers and the async client/adapters against an
httpx.MockTransport, so nothing touches the network.
"""

import asyncio
from datetime import date, datetime, timedelta, timezone

import httpx
import pytest

from siteworth.collector import (
    AdapterError,
    RetryConfig,
    SignalClient,
    count_sitemap_urls,
    extract_social_handles,
    fetch_crawlability,
    fetch_dns,
    fetch_pagespeed,
    fetch_social_followers,
    fetch_tranco_rank,
    fetch_wayback_history,
    parse_commoncrawl,
    parse_crux,
    parse_dns,
    parse_follower_count,
    parse_hn_mentions,
    parse_indexed_pages,
    parse_pagespeed,
    parse_rdap,
    parse_reddit_mentions,
    parse_robots_txt,
    parse_ssl_labs,
    parse_tranco,
    parse_wayback_history,
)
from siteworth.collector.crawlability import is_valid_robots_txt


def _client(handler, max_retries: int = 2) -> SignalClient:
    return SignalClient(
        retry_config=RetryConfig(max_retries=max_retries, initial_delay=0),
        transport=httpx.MockTransport(handler),
    )


# ============================================================================
# Parsers
# ============================================================================

class TestPerformanceParsing:
    """Test PageSpeed and CrUX parsing."""

    def test_pagespeed(self):
        data = {
            "lighthouseResult": {
                "categories": {
                    "performance": {"score": 0.91},
                    "accessibility": {"score": 0.88},
                    "seo": {"score": 1},
                    "best-practices": {"score": None},
                },
                "audits": {
                    "largest-contentful-paint": {"numericValue": 2100.5},
                    "total-byte-weight": {"numericValue": 123456.0},
                    "network-requests": {"details": {"items": [{}, {}, {}]}},
                },
            }
        }
        facts = parse_pagespeed(data)

        assert facts.performance_score == 91
        assert facts.accessibility_score == 88
        assert facts.seo_score == 100
        assert facts.best_practices_score == 0
        assert facts.largest_contentful_paint == 2100.5
        assert facts.total_byte_weight == 123456
        assert facts.request_count == 3

    def test_pagespeed_without_lighthouse(self):
        assert parse_pagespeed({"error": {"code": 500}}) is None
        assert parse_pagespeed({}) is None

    def test_crux(self):
        data = {
            "loadingExperience": {
                "overall_category": "FAST",
                "metrics": {
                    "LARGEST_CONTENTFUL_PAINT_MS": {"percentile": 1800, "category": "FAST"},
                    "CUMULATIVE_LAYOUT_SHIFT_SCORE": {"percentile": 12, "category": "AVERAGE"},
                },
            }
        }
        crux = parse_crux(data)

        assert crux.has_data
        assert [m.name for m in crux.metrics] == ["lcp", "cls"]
        assert crux.metric("cls").category == "average"
        assert crux.metric("fid") is None
        assert crux.overall_category == "fast"
        assert crux.form_factor == "phone"

    def test_crux_without_field_data(self):
        assert not parse_crux({"loadingExperience": {}}).has_data


class TestHistoryParsing:
    """Test Wayback and RDAP parsing."""

    def test_wayback(self):
        first_rows = [["timestamp"], ["20100101120000"]]
        count_rows = [["timestamp"]] + [["2010"]] * 120
        history = parse_wayback_history(first_rows, count_rows, today=date(2020, 1, 1))

        assert history.first_snapshot == date(2010, 1, 1)
        assert history.age_years == 10.0
        assert history.snapshot_count == 120
        assert history.has_history

    def test_wayback_count_fallback(self):
        history = parse_wayback_history(
            [["timestamp"], ["20100101000000"]], None, today=date(2020, 1, 1)
        )
        assert history.snapshot_count == 500

    @pytest.mark.parametrize("rows", [[], [["timestamp"]], None, {"error": "x"}, [["timestamp"], ["garbage"]]])
    def test_wayback_no_history(self, rows):
        assert not parse_wayback_history(rows, today=date(2020, 1, 1)).has_history

    def test_rdap(self):
        data = {
            "entities": [
                {
                    "roles": ["registrar"],
                    "vcardArray": ["vcard", [["version", {}, "text", "4.0"], ["fn", {}, "text", "Example Registrar, Inc."]]],
                },
                {
                    "roles": ["registrant"],
                    "vcardArray": ["vcard", [["adr", {}, "text", ["", "", "", "", "", "", "US"]]]],
                },
            ],
            "events": [
                {"eventAction": "registration", "eventDate": "1995-08-14T04:00:00Z"},
                {"eventAction": "expiration", "eventDate": "2026-08-13T04:00:00Z"},
                {"eventAction": "last changed", "eventDate": "2024-08-14T07:01:38Z"},
            ],
            "nameservers": [{"ldhName": "A.IANA-SERVERS.NET"}, {"ldhName": "B.IANA-SERVERS.NET"}],
            "status": ["client delete prohibited"],
        }
        facts = parse_rdap(data, today=date(2026, 1, 1))

        assert facts.registrar == "Example Registrar, Inc."
        assert facts.registrant_country == "US"
        assert facts.registration_date == date(1995, 8, 14)
        assert facts.last_changed == date(2024, 8, 14)
        assert facts.nameservers == ("a.iana-servers.net", "b.iana-servers.net")
        assert facts.status == ("client delete prohibited",)
        assert facts.verified_age_years == pytest.approx(30.4)
        assert facts.days_until_expiry == 224
        assert not facts.is_expiring_soon

    def test_rdap_registrar_from_public_ids(self):
        data = {"entities": [{"roles": ["registrar"], "publicIds": [{"identifier": "292"}]}]}
        facts = parse_rdap(data, today=date(2026, 1, 1))

        assert facts.registrar == "292"
        assert facts.verified_age_years is None

    def test_rdap_empty(self):
        assert not parse_rdap({}).has_data


class TestInfrastructureParsing:
    """Test DNS, robots.txt and sitemap parsing."""

    def test_dns(self):
        facts = parse_dns(
            mx={"Answer": [{"data": "10 mx1.example.com."}, {"data": "20 mx2.example.com."}]},
            txt={"Answer": [{"data": "\"v=spf1 include:_spf.google.com ~all\""}]},
            dmarc={"Answer": [{"data": "\"v=DMARC1; p=none\""}]},
            ns={"Answer": [{"data": "Ns1.Cloudflare.com."}]},
        )

        assert facts.mx_count == 2
        assert facts.has_spf and facts.has_dmarc
        assert facts.nameservers == ("ns1.cloudflare.com",)
        assert facts.uses_managed_dns
        assert facts.infrastructure_score == 100

    def test_dns_empty(self):
        facts = parse_dns({}, {}, {}, {})
        assert facts.infrastructure_score == 0

    def test_robots(self):
        body = "User-agent: GPTBot\nDisallow: /\n\nSitemap: https://example.com/sitemap.xml\n"
        allows_all, blocks_ai, sitemaps = parse_robots_txt(body)

        assert not allows_all
        assert blocks_ai
        assert sitemaps == ["https://example.com/sitemap.xml"]

    def test_robots_validation(self):
        assert is_valid_robots_txt("User-agent: *\nAllow: /")
        assert not is_valid_robots_txt("<!DOCTYPE html><html></html>")
        assert not is_valid_robots_txt("x" * 50_000)
        assert not is_valid_robots_txt("")

    def test_sitemap_count(self):
        body = "<urlset><url><loc>a</loc></url><url><loc>b</loc></url></urlset>"
        assert count_sitemap_urls(body) == 2
        assert count_sitemap_urls("<html>not found</html>") is None


class TestReachParsing:
    """Test Tranco, indexed page and CommonCrawl parsing."""

    def test_tranco(self):
        assert parse_tranco({"ranks": [{"date": "2024-01-01", "rank": 1234}]}).rank == 1234
        assert not parse_tranco({"ranks": []}).is_ranked
        assert not parse_tranco({}).is_ranked

    @pytest.mark.parametrize("html,count,confidence", [
        ("About 1,230,000 results (0.31 seconds)", 1_230_000, "medium"),
        ("12 results", 12, "high"),
        ("Your search did not match any documents.", 0, "high"),
        ("<html>captcha</html>", None, "low"),
    ])
    def test_indexed_pages(self, html, count, confidence):
        pages = parse_indexed_pages(html)
        assert pages.estimated_count == count
        assert pages.confidence == confidence

    def test_commoncrawl(self):
        backlinks = parse_commoncrawl('{"url": "a"}\n{"url": "b"}\n')

        assert backlinks.estimated_backlinks == 20
        assert backlinks.unique_domains == 6
        assert not parse_commoncrawl("").has_backlink_data


class TestSocialParsing:
    """Test follower counts, handles and mention parsing."""

    @pytest.mark.parametrize("text,expected", [
        ("1,234", 1234),
        ("12.5K", 12_500),
        ("3M", 3_000_000),
        ("1.2B", 1_200_000_000),
        ("987", 987),
        ("lots", 0),
        ("", 0),
        (None, 0),
    ])
    def test_follower_count(self, text, expected):
        assert parse_follower_count(text) == expected

    def test_handles_skip_share_widgets(self):
        html = """
        <a href="https://twitter.com/intent/tweet?text=hi">Tweet</a>
        <a href="https://twitter.com/acmewidgets">Follow</a>
        <a href="https://www.facebook.com/sharer/sharer.php?u=x">Share</a>
        <a href="https://www.facebook.com/acme.widgets">Like</a>
        <a href="https://www.linkedin.com/company/acme-widgets">LinkedIn</a>
        """
        handles = extract_social_handles(html)

        assert handles.twitter == "acmewidgets"
        assert handles.facebook == "acme.widgets"
        assert handles.linkedin == "acme-widgets"

    def test_no_handles(self):
        handles = extract_social_handles("<p>nothing</p>")
        assert handles.twitter is None and handles.facebook is None and handles.linkedin is None

    def test_reddit(self):
        names = ["python"] * 4 + ["webdev"] * 3 + ["a", "b", "c"] + ["ignored"] * 5
        data = {"data": {"children": [{"data": {"subreddit": name}} for name in names]}}
        count, top = parse_reddit_mentions(data)

        assert count == 15
        assert top[:2] == ("python", "webdev")
        assert "ignored" not in top
        assert len(top) == 5

    def test_hacker_news(self):
        data = {"nbHits": 42, "hits": [{"points": 100}, {"points": None}, {"points": 25}]}
        assert parse_hn_mentions(data) == (42, 125)
        assert parse_hn_mentions({}) == (0, 0)


class TestSslParsing:
    """Test SSL Labs parsing."""

    def test_ready_report(self):
        now = datetime(2026, 1, 1, tzinfo=timezone.utc)
        not_after = int((now + timedelta(days=30, hours=1)).timestamp() * 1000)
        data = {
            "status": "READY",
            "endpoints": [{
                "grade": "A+",
                "hasWarnings": False,
                "details": {
                    "protocols": [
                        {"name": "TLS", "version": "1.2"},
                        {"name": "TLS", "version": "1.3"},
                    ],
                    "key": {"strength": 2048},
                    "hstsPolicy": {"status": "present"},
                    "cert": {"notAfter": not_after},
                    "poodle": True,
                },
            }],
        }
        facts = parse_ssl_labs(data, now=now)

        assert facts.analysis_complete
        assert facts.grade == "A+"
        assert facts.protocol == "TLS 1.3"
        assert facts.key_strength == 2048
        assert facts.supports_hsts
        assert facts.cert_expires_in_days == 30
        assert facts.vulnerabilities == ("POODLE",)

    @pytest.mark.parametrize("data", [
        {"status": "IN_PROGRESS"},
        {"status": "READY", "endpoints": []},
        {"status": "ERROR", "statusMessage": "Unable to resolve domain name"},
    ])
    def test_incomplete_report(self, data):
        assert not parse_ssl_labs(data).analysis_complete


# ============================================================================
# Client and Adapters
# ============================================================================

class TestSignalClient:
    """Test retry and error handling."""

    @pytest.mark.asyncio
    async def test_get_json(self):
        async with _client(lambda request: httpx.Response(200, json={"ok": True})) as client:
            assert await client.get_json("https://api.example.com/x") == {"ok": True}

    @pytest.mark.asyncio
    async def test_retries_retryable_status(self):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) < 3:
                return httpx.Response(503)
            return httpx.Response(200, json={"ok": True})

        async with _client(handler, max_retries=3) as client:
            assert await client.get_json("https://api.example.com/x") == {"ok": True}

        assert len(calls) == 3, f"Expected 3 attempts, got {len(calls)}"

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(429)

        async with _client(handler, max_retries=2) as client:
            with pytest.raises(AdapterError) as exc_info:
                await client.get("https://api.example.com/x")

        assert exc_info.value.status_code == 429
        assert len(calls) == 3

    @pytest.mark.asyncio
    async def test_does_not_retry_client_errors(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(404)

        async with _client(handler) as client:
            with pytest.raises(AdapterError) as exc_info:
                await client.get("https://api.example.com/missing")

        assert exc_info.value.status_code == 404
        assert exc_info.value.url == "https://api.example.com/missing"
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_transport_errors_become_adapter_errors(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler, max_retries=1) as client:
            with pytest.raises(AdapterError):
                await client.get("https://api.example.com/x")

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        async with _client(lambda request: httpx.Response(200, text="<html>")) as client:
            with pytest.raises(AdapterError):
                await client.get_json("https://api.example.com/x")

    @pytest.mark.asyncio
    async def test_fetch_page_is_timed(self):
        async with _client(lambda request: httpx.Response(200, text="<html></html>")) as client:
            html, load_time_ms = await client.fetch_page("https://example.com")

        assert html == "<html></html>"
        assert load_time_ms >= 0

    @pytest.mark.asyncio
    async def test_closed_client_refuses_requests(self):
        client = _client(lambda request: httpx.Response(200))
        await client.close()

        with pytest.raises(AdapterError):
            await client.get("https://api.example.com/x")


class TestAdapters:
    """Adapters return their "no data" value instead of raising."""

    @pytest.mark.asyncio
    async def test_pagespeed_failure_is_none(self):
        async with _client(lambda request: httpx.Response(500), max_retries=0) as client:
            assert await fetch_pagespeed(client, "https://example.com") is None

    @pytest.mark.asyncio
    async def test_pagespeed_sends_strategy_and_key(self):
        seen = {}

        def handler(request):
            seen["params"] = request.url.params
            return httpx.Response(200, json={"lighthouseResult": {"categories": {}}})

        async with _client(handler) as client:
            facts = await fetch_pagespeed(client, "https://example.com", strategy="mobile", api_key="k")

        assert facts is not None
        assert seen["params"]["strategy"] == "mobile"
        assert seen["params"]["key"] == "k"
        assert seen["params"].get_list("category") == ["performance", "accessibility", "seo", "best-practices"]

    @pytest.mark.asyncio
    async def test_dns(self):
        answers = {
            ("example.com", "MX"): {"Answer": [{"data": "10 mx.example.com."}]},
            ("example.com", "TXT"): {"Answer": [{"data": "v=spf1 -all"}]},
            ("_dmarc.example.com", "TXT"): {},
            ("example.com", "NS"): {"Answer": [{"data": "ns1.awsdns-01.org."}]},
        }

        def handler(request):
            key = (request.url.params["name"], request.url.params["type"])
            return httpx.Response(200, json=answers[key])

        async with _client(handler) as client:
            facts = await fetch_dns(client, "example.com")

        assert facts.has_mx_records and facts.has_spf
        assert not facts.has_dmarc
        assert facts.uses_managed_dns

    @pytest.mark.asyncio
    async def test_dns_partial_failure(self):
        def handler(request):
            if request.url.params["type"] == "MX":
                return httpx.Response(200, json={"Answer": [{"data": "10 mx.example.com."}]})
            return httpx.Response(404)

        async with _client(handler) as client:
            facts = await fetch_dns(client, "example.com")

        assert facts.mx_count == 1
        assert facts.nameservers == ()

    @pytest.mark.asyncio
    async def test_crawlability_probes_common_sitemaps(self):
        def handler(request):
            if request.url.path == "/robots.txt":
                return httpx.Response(200, text="User-agent: *\nAllow: /\n")
            if request.url.path == "/sitemap.xml":
                return httpx.Response(404)
            if request.url.path == "/sitemap_index.xml":
                return httpx.Response(200, text="<sitemapindex><loc>a</loc><loc>b</loc><loc>c</loc></sitemapindex>")
            return httpx.Response(404)

        async with _client(handler) as client:
            facts = await fetch_crawlability(client, "example.com")

        assert facts.has_robots_txt
        assert facts.allows_all_crawlers
        assert facts.has_sitemap
        assert facts.sitemap_urls == ("https://example.com/sitemap_index.xml",)
        assert facts.estimated_page_count == 3

    @pytest.mark.asyncio
    async def test_crawlability_declared_sitemap_is_not_fetched(self):
        paths = []

        def handler(request):
            paths.append(request.url.path)
            return httpx.Response(200, text="Sitemap: https://example.com/map.xml\n")

        async with _client(handler) as client:
            facts = await fetch_crawlability(client, "example.com")

        assert paths == ["/robots.txt"]
        assert facts.has_sitemap
        assert facts.estimated_page_count == 0

    @pytest.mark.asyncio
    async def test_tranco_unreachable(self):
        async with _client(lambda request: httpx.Response(502), max_retries=0) as client:
            ranking = await fetch_tranco_rank(client, "example.com")

        assert not ranking.is_ranked

    @pytest.mark.asyncio
    async def test_wayback_count_failure_estimates_from_age(self):
        def handler(request):
            if "collapse" in request.url.params:
                return httpx.Response(503)
            return httpx.Response(200, json=[["timestamp"], ["20100101000000"]])

        async with _client(handler, max_retries=0) as client:
            history = await fetch_wayback_history(client, "example.com", today=date(2020, 1, 1))

        assert history.first_snapshot == date(2010, 1, 1)
        assert history.snapshot_count == 500

    @pytest.mark.asyncio
    async def test_social_followers_keep_what_finished(self):
        async def handler(request):
            if request.url.host == "nitter.net":
                return httpx.Response(200, text="<span>12.5K Followers</span>")
            if request.url.host == "www.linkedin.com":
                await asyncio.sleep(5)
                return httpx.Response(200, text="3,000 followers")
            return httpx.Response(404)

        html = (
            '<a href="https://twitter.com/acme">t</a>'
            '<a href="https://www.linkedin.com/company/acme">l</a>'
            '<a href="https://www.facebook.com/acme">f</a>'
        )
        async with _client(handler) as client:
            followers = await fetch_social_followers(client, html, timeout=0.5)

        assert followers.twitter_handle == "acme"
        assert followers.twitter == 12_500
        assert followers.linkedin is None
        assert followers.facebook is None
        assert followers.total_followers == 12_500

    @pytest.mark.asyncio
    async def test_social_followers_finish_cancelling_slow_scrapes(self):
        """Timed-out scrapes are fully cancelled before the result is returned."""
        cancelled = []

        async def handler(request):
            try:
                await asyncio.sleep(5)
            except asyncio.CancelledError:
                cancelled.append(request.url.host)
                raise
            return httpx.Response(200, text="3,000 followers")

        async with _client(handler) as client:
            followers = await fetch_social_followers(
                client, '<a href="https://www.linkedin.com/company/acme">l</a>', timeout=0.1
            )

        assert followers.linkedin is None
        assert cancelled == ["www.linkedin.com"], f"Scrape still pending: {cancelled}"

    @pytest.mark.asyncio
    async def test_social_followers_without_links(self):
        async with _client(lambda request: httpx.Response(500)) as client:
            followers = await fetch_social_followers(client, "<p>no profiles</p>")

        assert followers.platforms_with_data == 0
