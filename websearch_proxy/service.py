"""
Orchestration des deux opérations du proxy: recherche et récupération.
"""

import logging
from typing import Dict, Any, Optional

from .config.settings import ProxyConfig
from .errors import InternalError, UpstreamError, ValidationError
from .search.extractor import MainContentExtractor
from .search.fetcher import PageFetcher
from .search.ratelimit import RateLimiter
from .search.results import SearchResultExtractor
from .utils.normalizer import QueryNormalizer

logger = logging.getLogger(__name__)

FETCH_MODES = ("main", "text")


class WebProxyService:
    """Valide, limite, récupère puis extrait.

    Owns one limiter per operation kind; nothing here is module-global.
    """

    def __init__(
        self,
        config: Optional[ProxyConfig] = None,
        fetcher: Optional[PageFetcher] = None,
        search_limiter: Optional[RateLimiter] = None,
        fetch_limiter: Optional[RateLimiter] = None,
    ):
        self.config = config or ProxyConfig()
        limits = self.config.rate_limits

        self.fetcher = fetcher or PageFetcher(self.config)
        self.search_limiter = search_limiter or RateLimiter(
            limits.search_per_minute, limits.window_seconds, name="search"
        )
        self.fetch_limiter = fetch_limiter or RateLimiter(
            limits.fetch_per_minute, limits.window_seconds, name="fetch"
        )
        self.result_extractor = SearchResultExtractor(self.config.search_engine)
        self.content_extractor = MainContentExtractor(self.config.content_extraction)
        self.normalizer = QueryNormalizer()

        logger.info("Service proxy initialisé")

    def validate_search(self, query: Optional[str], max_results: Optional[str]) -> Dict[str, Any]:
        normalized = self.normalizer.normalize(query)
        if not normalized:
            raise ValidationError("query parameter is required")

        count = self.normalizer.parse_max_results(
            max_results, self.config.search_engine.default_max_results
        )
        if count is None:
            raise ValidationError("max_results must be a non-negative integer")

        return {"query": normalized, "max_results": count}

    def validate_fetch(self, url: Optional[str], mode: Optional[str] = None) -> Dict[str, Any]:
        url = (url or "").strip()
        if not url:
            raise ValidationError("url parameter is required")
        if not self.fetcher.is_valid_url(url):
            raise ValidationError("url is not a valid http(s) URL")

        mode = (mode or "main").lower()
        if mode not in FETCH_MODES:
            raise ValidationError(f"mode must be one of: {', '.join(FETCH_MODES)}")

        return {"url": url, "mode": mode}

    async def search(self, query: str, max_results: int) -> Dict[str, Any]:
        """Recherche DuckDuckGo; toute erreur donne une liste vide"""
        if max_results <= 0:
            return {"results": [], "count": 0}

        try:
            await self.search_limiter.acquire()
            logger.info(f"Recherche: '{query}' ({max_results} résultats)")

            engine = self.config.search_engine
            response = await self.fetcher.fetch(
                engine.base_url,
                method="POST",
                data={"q": query, "b": "", "kl": ""},
            )
            if not response.ok:
                raise UpstreamError(f"HTTP error: {response.status}", status=response.status)

            results = self.result_extractor.extract(response.text, max_results)
        except Exception as e:
            logger.error(f"Erreur lors de la recherche: {e}")
            return {"results": [], "count": 0}

        logger.info(f"{len(results)} résultats trouvés pour '{query}'")
        return {
            "results": [result.to_dict() for result in results],
            "count": len(results),
        }

    async def fetch(self, url: str, mode: str = "main") -> Dict[str, Any]:
        """Récupère une page et en extrait le texte; les échecs remontent"""
        await self.fetch_limiter.acquire()
        logger.info(f"Récupération du contenu: {url}")

        response = await self.fetcher.fetch(url)
        if not response.ok:
            logger.warning(f"Réponse {response.status} pour {url}")
            raise UpstreamError(f"HTTP error: {response.status}", status=response.status)

        try:
            if mode == "text":
                content = self.content_extractor.extract_text(response.text)
            else:
                content = self.content_extractor.extract_main(response.text)
        except Exception as e:
            logger.error(f"Échec de l'extraction pour {url}: {e}", exc_info=True)
            raise InternalError(f"content extraction failed: {e}") from e

        logger.info(
            f"Contenu extrait pour {url} ({len(content)} caractères, "
            f"récupéré en {response.fetch_time:.2f}s)"
        )
        return {"url": url, "content": content, "length": len(content)}

    async def cleanup(self):
        """Nettoyage des ressources"""
        await self.fetcher.close()
