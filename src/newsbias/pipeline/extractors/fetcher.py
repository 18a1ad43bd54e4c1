"""HTTP page fetching for article extraction."""

import random
from typing import Dict, Optional

import httpx

from newsbias.utils.exceptions import FetchError
from newsbias.utils.logging import get_logger

logger = get_logger(__name__)

USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:109.0) Gecko/20100101 Firefox/121.0",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.1 Safari/605.1.15",
]

ALTERNATIVE_USER_AGENT = "Mozilla/5.0 (compatible; NewsBot/1.0)"

# Pages shorter than this are treated as blocked or empty
MIN_PRIMARY_BYTES = 1000


class HtmlFetcher:
    """Fetch article pages with a browser-like and a minimal header profile."""

    def __init__(
        self,
        timeout: float = 20.0,
        alternative_timeout: float = 15.0,
        rng: Optional[random.Random] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize fetcher.

        Args:
            timeout: Primary fetch timeout in seconds
            alternative_timeout: Alternative fetch timeout in seconds
            rng: Random source for user agent rotation
            transport: Optional httpx transport (used by tests)
        """
        self.timeout = timeout
        self.alternative_timeout = alternative_timeout
        self.rng = rng or random.Random()
        self._transport = transport

    def browser_headers(self) -> Dict[str, str]:
        """Full desktop browser header set with a rotated user agent."""
        return {
            "User-Agent": self.rng.choice(USER_AGENTS),
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,image/apng,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9,hi;q=0.8",
            "Accept-Encoding": "gzip, deflate",
            "Cache-Control": "no-cache",
            "Pragma": "no-cache",
            "Sec-Fetch-Dest": "document",
            "Sec-Fetch-Mode": "navigate",
            "Sec-Fetch-Site": "none",
            "Sec-Fetch-User": "?1",
            "Upgrade-Insecure-Requests": "1",
            "DNT": "1",
        }

    async def fetch_primary(self, url: str) -> str:
        """Fetch a page with browser headers.

        Raises:
            FetchError: On network error, non-2xx status or a suspiciously
                short payload
        """
        response = await self._get(url, self.browser_headers(), self.timeout)
        size = len(response.content)
        if size < MIN_PRIMARY_BYTES:
            raise FetchError(f"Response too short ({size} bytes), likely blocked or empty: {url}")
        return response.text

    async def fetch_alternative(self, url: str) -> str:
        """Fetch a page with a minimal bot header profile.

        Raises:
            FetchError: On network error or non-2xx status
        """
        headers = {"User-Agent": ALTERNATIVE_USER_AGENT, "Accept": "text/html"}
        response = await self._get(url, headers, self.alternative_timeout)
        return response.text

    async def _get(self, url: str, headers: Dict[str, str], timeout: float) -> httpx.Response:
        try:
            async with httpx.AsyncClient(
                timeout=timeout,
                follow_redirects=True,
                headers=headers,
                transport=self._transport,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
                logger.debug("page_fetched", url=url, status=response.status_code, bytes=len(response.content))
                return response

        except httpx.TimeoutException as e:
            raise FetchError(f"Timed out fetching {url}") from e
        except httpx.HTTPStatusError as e:
            raise FetchError(f"HTTP {e.response.status_code} for {url}") from e
        except httpx.HTTPError as e:
            raise FetchError(f"Request failed for {url}: {e}") from e
