"""
Signal Lookup HTTP Client

Shared async HTTP client for every external signal adapter:
- Connection pooling
- Automatic retry with exponential backoff
- One error type for exhausted or non-retryable failures
- Request logging
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import httpx

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "SiteWorth/2.1 (+https://siteworth.app; website valuation)"


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""
    max_retries: int = 3
    initial_delay: float = 1.0
    max_delay: float = 10.0
    exponential_base: float = 2.0
    retryable_status_codes: tuple = (429, 500, 502, 503, 504)


class AdapterError(Exception):
    """Raised when an external lookup fails after retries (or is not retryable)."""
    def __init__(self, message: str, status_code: int = None, url: str = None):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class SignalClient:
    """
    Async client used by the collector adapters.

    Usage:
        async with SignalClient() as client:
            data = await client.get_json("https://dns.google/resolve", params={"name": "example.com"})
            html = await client.get_text("https://example.com/robots.txt")
    """

    def __init__(
        self,
        retry_config: Optional[RetryConfig] = None,
        timeout: float = 15.0,
        user_agent: str = DEFAULT_USER_AGENT,
        max_connections: int = 20,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            retry_config: Retry configuration (optional)
            timeout: Request timeout in seconds
            user_agent: User-Agent header sent with every request
            max_connections: Maximum concurrent connections
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        self.retry_config = retry_config or RetryConfig()

        self._client = httpx.AsyncClient(
            headers={"User-Agent": user_agent},
            limits=httpx.Limits(
                max_connections=max_connections,
                max_keepalive_connections=max_connections // 2,
            ),
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
            transport=transport,
        )

        self._closed = False

    async def get(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        retry: bool = True,
    ) -> httpx.Response:
        """
        Make a GET request.

        Args:
            url: Absolute URL
            params: Query parameters
            headers: Extra headers for this request
            retry: Whether to retry on failure

        Returns:
            Successful (2xx) response

        Raises:
            AdapterError: On a non-2xx status or transport failure
        """
        if self._closed:
            raise AdapterError("Client is closed", url=url)

        if retry:
            return await self._request_with_retry(url, params, headers)
        return await self._make_request(url, params, headers)

    async def get_json(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        retry: bool = True,
    ) -> Any:
        """GET and decode a JSON body. A body that is not JSON raises AdapterError."""
        response = await self.get(url, params=params, headers=headers, retry=retry)
        try:
            return response.json()
        except ValueError as e:
            raise AdapterError(
                f"Response is not JSON: {e}",
                status_code=response.status_code,
                url=url,
            ) from e

    async def get_text(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        retry: bool = True,
    ) -> str:
        response = await self.get(url, params=params, headers=headers, retry=retry)
        return response.text

    async def fetch_page(self, url: str) -> Tuple[str, int]:
        """
        Fetch a page and time it.

        Args:
            url: Page URL

        Returns:
            Tuple of (markup, load time in ms)
        """
        start = time.perf_counter()
        response = await self.get(url, retry=False)
        load_time_ms = int((time.perf_counter() - start) * 1000)
        logger.debug(f"Fetched {response.url} in {load_time_ms}ms")
        return response.text, load_time_ms

    async def _make_request(
        self,
        url: str,
        params: Optional[Dict[str, Any]],
        headers: Optional[Dict[str, str]],
    ) -> httpx.Response:
        """Make a single HTTP request."""
        logger.debug(f"GET {url}")

        try:
            response = await self._client.get(url, params=params, headers=headers)
        except httpx.TimeoutException as e:
            raise AdapterError(f"Request timed out: {e}", url=url) from e
        except httpx.HTTPError as e:
            raise AdapterError(f"HTTP error: {e}", url=url) from e

        if not response.is_success:
            raise AdapterError(
                f"Request failed: {response.status_code}",
                status_code=response.status_code,
                url=url,
            )

        return response

    async def _request_with_retry(
        self,
        url: str,
        params: Optional[Dict[str, Any]],
        headers: Optional[Dict[str, str]],
    ) -> httpx.Response:
        """Make request with automatic retry on failure."""
        last_exception = None
        delay = self.retry_config.initial_delay

        for attempt in range(self.retry_config.max_retries + 1):
            try:
                return await self._make_request(url, params, headers)

            except AdapterError as e:
                last_exception = e

                # Don't retry statuses outside the retryable set (404, 403, ...)
                if e.status_code and e.status_code not in self.retry_config.retryable_status_codes:
                    raise

                if attempt < self.retry_config.max_retries:
                    logger.warning(
                        f"Request to {url} failed (attempt {attempt + 1}/{self.retry_config.max_retries + 1}): {e}. "
                        f"Retrying in {delay}s..."
                    )
                    await asyncio.sleep(delay)
                    delay = min(
                        delay * self.retry_config.exponential_base,
                        self.retry_config.max_delay
                    )

        raise last_exception

    async def close(self):
        """Close the HTTP client."""
        if not self._closed:
            await self._client.aclose()
            self._closed = True

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
