import httpx
import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Optional, Any
from urllib.parse import urlparse

from ..config.settings import ProxyConfig
from ..errors import UpstreamError

logger = logging.getLogger(__name__)


@dataclass
class FetchResponse:
    """Réponse brute d'une requête sortante"""
    url: str
    status: int
    text: str
    headers: Dict[str, str] = field(default_factory=dict)
    fetch_time: float = 0.0

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class PageFetcher:
    """Client HTTP sortant partagé par la recherche et la récupération"""

    def __init__(self, config: Optional[ProxyConfig] = None, client: Optional[httpx.AsyncClient] = None):
        self.config = config or ProxyConfig()
        self.timeout = httpx.Timeout(self.config.request_timeout)
        self._ua = None
        self._client = client
        self._owns_client = client is None

        self.default_headers = {
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
            'Accept-Language': 'en-US,en;q=0.9',
        }

    def user_agent(self) -> str:
        """User-Agent de type navigateur, aléatoire si la rotation est active"""
        if not self.config.rotate_user_agent:
            return self.config.user_agent
        if self._ua is None:
            from fake_useragent import UserAgent
            self._ua = UserAgent()
        return self._ua.random

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True
            )
        return self._client

    async def fetch(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> FetchResponse:
        """Perform one outbound request.

        Network failures (including timeouts) raise ``UpstreamError``; a
        non-2xx answer is returned as-is and callers check ``ok``. There is
        no retry.
        """
        start_time = time.time()
        request_headers = {**self.default_headers, 'User-Agent': self.user_agent()}
        if headers:
            request_headers.update(headers)

        try:
            response = await self._get_client().request(
                method,
                url,
                headers=request_headers,
                data=data,
            )
        except httpx.HTTPError as e:
            logger.warning(f"Échec de la requête {method} {url}: {e}")
            raise UpstreamError(f"request to {url} failed: {e}") from e

        return FetchResponse(
            url=str(response.url),
            status=response.status_code,
            text=response.text,
            headers=dict(response.headers),
            fetch_time=time.time() - start_time,
        )

    @staticmethod
    def is_valid_url(url: str) -> bool:
        """Check that ``url`` is an absolute http(s) URL"""
        try:
            parsed = urlparse(url)
        except ValueError:
            return False
        return parsed.scheme in ('http', 'https') and bool(parsed.netloc)

    async def close(self):
        """Clean up resources"""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None
