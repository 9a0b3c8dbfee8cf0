import re
import logging
from typing import Optional

logger = logging.getLogger(__name__)


class QueryNormalizer:
    """Normalisation des paramètres de requête entrants"""

    def normalize(self, query: Optional[str]) -> str:
        """Normalise une requête de recherche (version simplifiée)"""
        if not query or not query.strip():
            return ""

        normalized = query.strip()

        # Suppression des espaces multiples
        normalized = re.sub(r'\s+', ' ', normalized)

        return normalized

    def parse_max_results(self, raw: Optional[str], default: int) -> Optional[int]:
        """Entier >= 0, ``default`` si absent, ``None`` si invalide"""
        if raw is None or not raw.strip():
            return default
        try:
            value = int(raw.strip())
        except ValueError:
            logger.debug(f"max_results invalide: {raw!r}")
            return None
        return value if value >= 0 else None
