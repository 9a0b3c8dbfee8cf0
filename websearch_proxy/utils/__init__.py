"""
Utilitaires pour le nettoyage du HTML et la normalisation des requêtes

Ce package contient:
- sanitizer: Conversion du HTML en texte brut ou structuré
- QueryNormalizer: Normalisation des paramètres de recherche
"""

from .normalizer import QueryNormalizer
from .sanitizer import sanitize, structured_text

__all__ = [
    "QueryNormalizer",
    "sanitize",
    "structured_text",
]
