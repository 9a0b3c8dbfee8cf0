"""
Web Search Proxy - Proxy HTTP de recherche web et d'extraction de contenu

Ce package fournit un petit serveur HTTP qui interroge la page HTML de
DuckDuckGo et extrait le contenu principal de pages arbitraires.

Composants principaux:
- search: Récupération, limitation de débit et extraction
- utils: Nettoyage du HTML et normalisation des paramètres
- config: Configuration centralisée
"""

__version__ = "1.0.0"

# Imports principaux pour faciliter l'utilisation
from .service import WebProxyService
from .server import create_app, main

__all__ = [
    "WebProxyService",
    "create_app",
    "main",
    "__version__",
]
