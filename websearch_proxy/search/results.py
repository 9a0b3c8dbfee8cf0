import logging
from dataclasses import dataclass, asdict
from typing import Dict, List, Any, Optional
from urllib.parse import unquote

from bs4 import BeautifulSoup

from ..config.settings import SearchEngineConfig
from ..utils.sanitizer import collapse_whitespace

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchResult:
    """Un résultat de recherche normalisé"""

    title: str
    link: str
    snippet: str
    position: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class SearchResultExtractor:
    """Extraction des résultats d'une page HTML DuckDuckGo.

    Title anchors (``a.result__a``) and snippets (``.result__snippet``) are
    collected independently and paired by index: the k-th title gets the
    k-th snippet, or an empty string when there are fewer snippets.
    """

    TITLE_CLASS = "result__a"
    SNIPPET_CLASS = "result__snippet"

    def __init__(self, config: Optional[SearchEngineConfig] = None):
        self.config = config or SearchEngineConfig()

    def extract(self, html: str, max_results: int) -> List[SearchResult]:
        if max_results <= 0 or not html:
            return []

        soup = BeautifulSoup(html, 'html.parser')
        titles = soup.find_all('a', class_=self.TITLE_CLASS)
        snippets = soup.find_all(class_=self.SNIPPET_CLASS)

        results: List[SearchResult] = []
        for index, anchor in enumerate(titles):
            if len(results) >= max_results:
                break

            link = anchor.get('href') or ''
            if self.config.ad_marker in link:
                logger.debug(f"Résultat publicitaire ignoré: {link}")
                continue

            link = self.clean_link(link)
            title = collapse_whitespace(anchor.get_text())
            snippet = ''
            if index < len(snippets):
                snippet = collapse_whitespace(snippets[index].get_text())

            if not title or not link:
                continue

            results.append(SearchResult(
                title=title,
                link=link,
                snippet=snippet,
                position=len(results) + 1,
            ))

        return results

    def clean_link(self, link: str) -> str:
        """Déballe les liens de redirection DuckDuckGo"""
        link = link.strip()
        if not link.startswith(self.config.redirect_prefix):
            return link

        key = f"{self.config.redirect_param}="
        _, _, tail = link.partition(key)
        target = tail.split('&', 1)[0]
        if not target:
            return link
        return unquote(target)
