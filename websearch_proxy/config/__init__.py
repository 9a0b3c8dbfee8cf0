"""
Configuration centralisée du proxy de recherche web

Ce package contient:
- Settings: Gestionnaire de configuration avec support des variables d'environnement
- Dataclasses de configuration pour tous les composants
"""

from .settings import (
    settings,
    Settings,
    ProxyConfig,
    SearchEngineConfig,
    RateLimitConfig,
    ContentExtractionConfig,
)

__all__ = [
    "settings",
    "Settings",
    "ProxyConfig",
    "SearchEngineConfig",
    "RateLimitConfig",
    "ContentExtractionConfig",
]
