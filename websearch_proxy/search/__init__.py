"""
Recherche web et extraction de contenu

Ce package contient tous les composants nécessaires pour:
- Limiter le débit des requêtes sortantes
- Récupérer les pages web
- Extraire les résultats d'une page de recherche
- Extraire le contenu principal des pages
"""

from .fetcher import PageFetcher, FetchResponse
from .ratelimit import RateLimiter
from .results import SearchResult, SearchResultExtractor
from .extractor import MainContentExtractor

__all__ = [
    "PageFetcher",
    "FetchResponse",
    "RateLimiter",
    "SearchResult",
    "SearchResultExtractor",
    "MainContentExtractor",
]
