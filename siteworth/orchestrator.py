"""
Website Valuation Orchestrator

Coordinates one analysis run:
1. Fan-out - page fetch and every external lookup, concurrently
2. Extraction - typed facts from the markup
3. Scoring - scores, traffic, valuation, recommendations
4. Assembly - one immutable WebsiteAnalysis

External lookups are best effort. Any adapter failure is logged and
replaced by that adapter's "no data" value, so a run always completes.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, List, Optional, Tuple

from .collector import (
    SignalClient,
    RetryConfig,
    fetch_backlinks,
    fetch_brand_mentions,
    fetch_crawlability,
    fetch_crux,
    fetch_dns,
    fetch_indexed_pages,
    fetch_pagespeed,
    fetch_rdap,
    fetch_social_followers,
    fetch_ssl_labs,
    fetch_tranco_rank,
    fetch_wayback_history,
)
from .extractors import (
    analyze_domain,
    detect_industry,
    extract_content,
    extract_domain,
    extract_mobile,
    extract_monetization,
    extract_security,
    extract_seo,
    extract_social,
    extract_technical,
    extract_technology,
    normalize_url,
    parse_html,
)
from .models import (
    BacklinkFacts,
    BrandMentions,
    CrawlabilityFacts,
    CruxFacts,
    DnsFacts,
    IndexedPages,
    RankingFacts,
    RdapFacts,
    SocialFollowers,
    SSLFacts,
    WaybackHistory,
    WebsiteAnalysis,
)
from .scoring import (
    DEFAULT_TABLES,
    ValuationTables,
    calculate_valuation,
    compute_scores,
    estimate_traffic,
    generate_recommendations,
)
from .utils.config import Settings, get_settings

logger = logging.getLogger(__name__)

# Load time assumed when the page itself cannot be fetched
FAILED_FETCH_LOAD_TIME_MS = 3000


async def _fetch_page(client: SignalClient, url: str) -> Tuple[str, int]:
    return await client.fetch_page(url)


@dataclass
class SignalAdapters:
    """
    The async lookups an analysis fans out to.

    Each adapter is called as ``adapter(client, target)`` where target is
    the URL (page, PageSpeed, CrUX), the page markup (social followers) or
    the bare domain (everything else). PageSpeed also receives strategy and
    api_key, CrUX api_key and the follower scrape timeout as keywords.
    Replace any of them to change a data source or to run without network
    access.
    """
    fetch_page: Callable[..., Awaitable[Tuple[str, int]]] = _fetch_page
    pagespeed: Callable[..., Awaitable[Any]] = fetch_pagespeed
    crux: Callable[..., Awaitable[CruxFacts]] = fetch_crux
    dns: Callable[..., Awaitable[DnsFacts]] = fetch_dns
    crawlability: Callable[..., Awaitable[CrawlabilityFacts]] = fetch_crawlability
    wayback: Callable[..., Awaitable[WaybackHistory]] = fetch_wayback_history
    ranking: Callable[..., Awaitable[RankingFacts]] = fetch_tranco_rank
    ssl: Callable[..., Awaitable[SSLFacts]] = fetch_ssl_labs
    rdap: Callable[..., Awaitable[RdapFacts]] = fetch_rdap
    indexed_pages: Callable[..., Awaitable[IndexedPages]] = fetch_indexed_pages
    backlinks: Callable[..., Awaitable[BacklinkFacts]] = fetch_backlinks
    brand_mentions: Callable[..., Awaitable[BrandMentions]] = fetch_brand_mentions
    social_followers: Callable[..., Awaitable[SocialFollowers]] = fetch_social_followers


@dataclass
class _PageResult:
    html: str = ""
    load_time_ms: int = FAILED_FETCH_LOAD_TIME_MS
    fetched: bool = False
    social_followers: SocialFollowers = field(default_factory=SocialFollowers)


class WebsiteValuationOrchestrator:
    """
    Runs the full valuation pipeline for one URL at a time.

    Usage:
        async with SignalClient() as client:
            orchestrator = WebsiteValuationOrchestrator(client)
            analysis = await orchestrator.analyze("example.com")
            print(analysis.estimated_value)
    """

    def __init__(
        self,
        client: SignalClient,
        adapters: Optional[SignalAdapters] = None,
        settings: Optional[Settings] = None,
        tables: ValuationTables = DEFAULT_TABLES,
    ):
        """
        Initialize orchestrator.

        Args:
            client: Shared signal client passed to every adapter
            adapters: Lookup implementations (defaults to the live adapters)
            settings: Application settings (defaults to get_settings())
            tables: Valuation policy constants
        """
        self.client = client
        self.adapters = adapters or SignalAdapters()
        self.settings = settings or get_settings()
        self.tables = tables

    async def _guarded(self, name: str, call: Awaitable, default: Any) -> Any:
        """Await one adapter call; any exception becomes the adapter's default."""
        try:
            return await call
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning(f"{name} lookup failed, continuing without it: {e}")
            return default

    async def _fetch_page_and_followers(self, url: str) -> _PageResult:
        """Fetch the page, then scrape the social profiles it links to."""
        try:
            html, load_time_ms = await self.adapters.fetch_page(self.client, url)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning(f"Failed to fetch {url}: {e}")
            return _PageResult()

        followers = SocialFollowers()
        if html:
            followers = await self._guarded(
                "Social followers",
                self.adapters.social_followers(
                    self.client, html, timeout=self.settings.SOCIAL_SCRAPE_TIMEOUT
                ),
                SocialFollowers(),
            )

        return _PageResult(
            html=html,
            load_time_ms=load_time_ms,
            fetched=True,
            social_followers=followers,
        )

    async def analyze(self, raw_url: str) -> WebsiteAnalysis:
        """
        Analyze and value a website.

        Args:
            raw_url: URL or bare domain as typed by a user

        Returns:
            WebsiteAnalysis

        Raises:
            ValueError: If the URL is empty or has no host
        """
        start = time.perf_counter()
        url = normalize_url(raw_url)
        domain_name = extract_domain(url)

        logger.info(f"Starting analysis for {url}")

        # Phase 1: fan out
        logger.info("Phase 1: Fetching page and external signals...")
        adapters = self.adapters
        (
            page,
            performance,
            crux,
            dns,
            crawlability,
            wayback,
            ranking,
            ssl,
            rdap,
            indexed_pages,
            backlinks,
            brand_mentions,
        ) = await asyncio.gather(
            self._fetch_page_and_followers(url),
            self._guarded(
                "PageSpeed",
                adapters.pagespeed(
                    self.client,
                    url,
                    strategy=self.settings.PAGESPEED_STRATEGY,
                    api_key=self.settings.PAGESPEED_API_KEY,
                ),
                None,
            ),
            self._guarded(
                "CrUX",
                adapters.crux(self.client, url, api_key=self.settings.PAGESPEED_API_KEY),
                CruxFacts(),
            ),
            self._guarded("DNS", adapters.dns(self.client, domain_name), None),
            self._guarded(
                "Crawlability", adapters.crawlability(self.client, domain_name), CrawlabilityFacts()
            ),
            self._guarded("Wayback", adapters.wayback(self.client, domain_name), WaybackHistory()),
            self._guarded("Tranco", adapters.ranking(self.client, domain_name), RankingFacts()),
            self._guarded("SSL Labs", adapters.ssl(self.client, domain_name), SSLFacts()),
            self._guarded("RDAP", adapters.rdap(self.client, domain_name), RdapFacts()),
            self._guarded(
                "Indexed pages", adapters.indexed_pages(self.client, domain_name), IndexedPages()
            ),
            self._guarded("Backlinks", adapters.backlinks(self.client, domain_name), BacklinkFacts()),
            self._guarded(
                "Brand mentions", adapters.brand_mentions(self.client, domain_name), BrandMentions()
            ),
        )

        dns_resolved = dns is not None
        dns = dns or DnsFacts()

        # Phase 2: extraction
        logger.info("Phase 2: Extracting facts from markup...")
        html = page.html
        soup = parse_html(html)

        domain = analyze_domain(domain_name, self.tables)
        if wayback.has_history:
            domain = domain.with_history(
                wayback.first_snapshot, wayback.age_years, wayback.snapshot_count
            )
        elif rdap.verified_age_years is not None:
            domain = domain.with_history(None, rdap.verified_age_years, 0)

        page_count = crawlability.estimated_page_count or (indexed_pages.estimated_count or 0)

        technical = extract_technical(url, html, page.load_time_ms, soup=soup)
        technology = extract_technology(html)
        security = extract_security(url, html, has_hsts=ssl.supports_hsts)
        seo = extract_seo(
            url,
            html,
            has_sitemap=crawlability.has_sitemap,
            has_robots_txt=crawlability.has_robots_txt,
            estimated_page_count=page_count,
            soup=soup,
        )
        content = extract_content(html)
        social = extract_social(html)
        monetization = extract_monetization(html, technology)
        mobile = extract_mobile(html)
        industry = detect_industry(html, domain_name)

        # Phase 3: scoring
        logger.info("Phase 3: Scoring and valuation...")
        traffic = estimate_traffic(
            domain,
            performance,
            seo,
            content,
            social,
            technology,
            ranking=ranking,
            social_followers=page.social_followers,
        )
        scores = compute_scores(
            domain,
            performance,
            technical,
            dns,
            security,
            seo,
            content,
            social,
            monetization,
            tables=self.tables,
        )
        valuation = calculate_valuation(
            domain, traffic, monetization, scores, industry, tables=self.tables
        )
        monetization = monetization.with_revenue(valuation.revenue)
        recommendations = generate_recommendations(
            domain,
            performance,
            technical,
            security,
            seo,
            content,
            social,
            monetization,
            limit=self.settings.RECOMMENDATION_LIMIT,
        )

        sources = data_sources_used(
            page_fetched=page.fetched,
            dns_resolved=dns_resolved,
            crawlability=crawlability,
            has_performance=performance is not None,
            ranking=ranking,
            ssl=ssl,
            rdap=rdap,
            indexed_pages=indexed_pages,
            crux=crux,
            backlinks=backlinks,
            brand_mentions=brand_mentions,
            wayback=wayback,
            social_followers=page.social_followers,
            mobile_friendly=mobile.is_mobile_friendly,
        )

        analysis_time_ms = round((time.perf_counter() - start) * 1000)
        logger.info(
            f"Analysis of {domain_name} complete in {analysis_time_ms}ms: "
            f"value=${valuation.estimated_value:,}, confidence={valuation.confidence}%"
        )

        return WebsiteAnalysis(
            url=url,
            domain=domain,
            technical=technical,
            seo=seo,
            content=content,
            social=social,
            monetization=monetization,
            dns=dns,
            security=security,
            technology=technology,
            mobile=mobile,
            scores=scores,
            traffic=traffic,
            valuation=valuation,
            recommendations=tuple(recommendations),
            industry=industry,
            performance=performance,
            crawlability=crawlability,
            wayback=wayback,
            ranking=ranking,
            social_followers=page.social_followers,
            ssl=ssl,
            rdap=rdap,
            indexed_pages=indexed_pages,
            crux=crux,
            backlinks=backlinks,
            brand_mentions=brand_mentions,
            data_sources_used=tuple(sources),
            analysis_time_ms=analysis_time_ms,
        )


def data_sources_used(
    page_fetched: bool,
    dns_resolved: bool,
    crawlability: CrawlabilityFacts,
    has_performance: bool,
    ranking: RankingFacts,
    ssl: SSLFacts,
    rdap: RdapFacts,
    indexed_pages: IndexedPages,
    crux: CruxFacts,
    backlinks: BacklinkFacts,
    brand_mentions: BrandMentions,
    wayback: WaybackHistory,
    social_followers: SocialFollowers,
    mobile_friendly: bool,
) -> List[str]:
    """Labels of the sources that contributed data, always in the same order."""
    checks = [
        ("HTML Analysis", True),
        ("Direct Fetch", page_fetched),
        ("Google DNS-over-HTTPS", dns_resolved),
        ("robots.txt", crawlability.has_robots_txt),
        ("XML Sitemap", crawlability.has_sitemap),
        ("Google PageSpeed Insights API", has_performance),
        ("Tranco Domain Ranking", ranking.is_ranked),
        ("SSL Labs Security Analysis", ssl.analysis_complete),
        ("RDAP/WHOIS Domain Registry", rdap.registrar is not None),
        ("Google Search Index", indexed_pages.estimated_count is not None),
        ("Chrome UX Report (Real User Data)", crux.has_data),
        ("CommonCrawl Backlink Index", backlinks.has_backlink_data),
        ("Reddit & Hacker News Mentions", brand_mentions.has_brand_presence),
        ("Archive.org Wayback Machine", wayback.has_history),
        ("Social Media Follower Data", social_followers.platforms_with_data > 0),
        ("Mobile-Friendly Analysis", mobile_friendly),
    ]
    return [label for label, used in checks if used]


async def analyze_website(
    url: str,
    settings: Optional[Settings] = None,
    adapters: Optional[SignalAdapters] = None,
) -> WebsiteAnalysis:
    """
    Analyze a website with a short-lived client.

    Args:
        url: URL or bare domain
        settings: Application settings (defaults to get_settings())
        adapters: Lookup implementations (defaults to the live adapters)

    Returns:
        WebsiteAnalysis
    """
    settings = settings or get_settings()
    async with SignalClient(
        retry_config=RetryConfig(max_retries=settings.MAX_RETRIES),
        timeout=settings.HTTP_TIMEOUT,
        user_agent=settings.USER_AGENT,
    ) as client:
        orchestrator = WebsiteValuationOrchestrator(client, adapters=adapters, settings=settings)
        return await orchestrator.analyze(url)
