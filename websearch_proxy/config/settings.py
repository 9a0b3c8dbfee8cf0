import os
import logging
from typing import Dict, Any, Optional
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


@dataclass
class SearchEngineConfig:
    """Configuration du moteur de recherche HTML"""
    name: str = "duckduckgo_html"
    base_url: str = "https://html.duckduckgo.com/html"
    ad_marker: str = "y.js"
    redirect_prefix: str = "//duckduckgo.com/l/?uddg="
    redirect_param: str = "uddg"
    default_max_results: int = 10


@dataclass
class RateLimitConfig:
    """Limites de débit par type d'opération"""
    search_per_minute: int = 30
    fetch_per_minute: int = 20
    window_seconds: float = 60.0


@dataclass
class ContentExtractionConfig:
    """Configuration de l'extraction de contenu"""
    max_content_length: int = 8000
    truncation_marker: str = "... [content truncated]"


@dataclass
class ProxyConfig:
    """Configuration principale du proxy"""
    # Serveur
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # Requêtes sortantes
    request_timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    rotate_user_agent: bool = False

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # Composants
    search_engine: SearchEngineConfig = field(default_factory=SearchEngineConfig)
    rate_limits: RateLimitConfig = field(default_factory=RateLimitConfig)
    content_extraction: ContentExtractionConfig = field(default_factory=ContentExtractionConfig)


def _env_flag(value: str) -> bool:
    return value.lower() in ('true', '1', 'yes')


class Settings:
    """Gestionnaire de configuration centralisé"""

    def __init__(self, environ: Optional[Dict[str, str]] = None):
        self.config = ProxyConfig()
        self._environ = os.environ if environ is None else environ
        self._load_from_environment()

    def _get_int(self, name: str) -> Optional[int]:
        raw = self._environ.get(name)
        if not raw:
            return None
        try:
            return int(raw)
        except ValueError:
            logger.warning(f"{name} invalide, utilisation de la valeur par défaut")
            return None

    def _get_float(self, name: str) -> Optional[float]:
        raw = self._environ.get(name)
        if not raw:
            return None
        try:
            return float(raw)
        except ValueError:
            logger.warning(f"{name} invalide, utilisation de la valeur par défaut")
            return None

    def _load_from_environment(self):
        """Charge la configuration depuis les variables d'environnement"""
        env = self._environ

        # Configuration serveur
        if env.get('PROXY_HOST'):
            self.config.host = env['PROXY_HOST']

        port = self._get_int('PROXY_PORT')
        if port is not None:
            self.config.port = port

        if env.get('PROXY_DEBUG'):
            self.config.debug = _env_flag(env['PROXY_DEBUG'])

        # Configuration logging
        if env.get('LOG_LEVEL'):
            self.config.log_level = env['LOG_LEVEL'].upper()

        if env.get('LOG_FILE'):
            self.config.log_file = env['LOG_FILE']

        # Limites de débit
        search_limit = self._get_int('SEARCH_RATE_LIMIT')
        if search_limit is not None:
            self.config.rate_limits.search_per_minute = search_limit

        fetch_limit = self._get_int('FETCH_RATE_LIMIT')
        if fetch_limit is not None:
            self.config.rate_limits.fetch_per_minute = fetch_limit

        window = self._get_float('RATE_WINDOW_SECONDS')
        if window is not None:
            self.config.rate_limits.window_seconds = window

        # Moteur de recherche
        if env.get('SEARCH_BASE_URL'):
            self.config.search_engine.base_url = env['SEARCH_BASE_URL']

        max_results = self._get_int('DEFAULT_MAX_RESULTS')
        if max_results is not None:
            self.config.search_engine.default_max_results = max_results

        # Requêtes sortantes
        timeout = self._get_float('REQUEST_TIMEOUT')
        if timeout is not None:
            self.config.request_timeout = timeout

        if env.get('USER_AGENT'):
            self.config.user_agent = env['USER_AGENT']

        if env.get('ROTATE_USER_AGENT'):
            self.config.rotate_user_agent = _env_flag(env['ROTATE_USER_AGENT'])

        # Extraction
        max_length = self._get_int('MAX_CONTENT_LENGTH')
        if max_length is not None:
            self.config.content_extraction.max_content_length = max_length

    def setup_logging(self):
        """Configure le logging basé sur les paramètres"""
        log_level = getattr(logging, self.config.log_level, logging.INFO)

        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

        logging.basicConfig(
            level=log_level,
            format=log_format,
            datefmt="%Y-%m-%d %H:%M:%S"
        )

        if self.config.log_file:
            file_handler = logging.FileHandler(self.config.log_file)
            file_handler.setLevel(log_level)
            file_handler.setFormatter(logging.Formatter(log_format))
            logging.getLogger('websearch_proxy').addHandler(file_handler)

        external_loggers = {
            'httpx': logging.WARNING,
            'httpcore': logging.WARNING,
            'bs4': logging.WARNING,
        }

        for logger_name, level in external_loggers.items():
            logging.getLogger(logger_name).setLevel(level)

    def validate_config(self) -> bool:
        """Valide la configuration"""
        errors = []

        if not (1 <= self.config.port <= 65535):
            errors.append(f"Port invalide: {self.config.port}")

        limits = self.config.rate_limits
        if limits.search_per_minute < 1:
            errors.append("search_per_minute doit être >= 1")
        if limits.fetch_per_minute < 1:
            errors.append("fetch_per_minute doit être >= 1")
        if limits.window_seconds <= 0:
            errors.append("window_seconds doit être > 0")

        if self.config.request_timeout <= 0:
            errors.append("request_timeout doit être > 0")

        if self.config.content_extraction.max_content_length < 1:
            errors.append("max_content_length doit être >= 1")

        if self.config.search_engine.default_max_results < 0:
            errors.append("default_max_results ne peut pas être négatif")

        if errors:
            for error in errors:
                logger.error(f"Configuration invalide: {error}")
            return False

        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convertit la configuration en dictionnaire (pour debug)"""
        return {
            'server': {
                'host': self.config.host,
                'port': self.config.port,
                'debug': self.config.debug
            },
            'search_engine': {
                'name': self.config.search_engine.name,
                'base_url': self.config.search_engine.base_url,
                'default_max_results': self.config.search_engine.default_max_results
            },
            'rate_limits': {
                'search_per_minute': self.config.rate_limits.search_per_minute,
                'fetch_per_minute': self.config.rate_limits.fetch_per_minute,
                'window_seconds': self.config.rate_limits.window_seconds
            },
            'content_extraction': {
                'max_content_length': self.config.content_extraction.max_content_length
            },
            'request_timeout': self.config.request_timeout,
            'rotate_user_agent': self.config.rotate_user_agent,
        }

# Instance globale
settings = Settings()
